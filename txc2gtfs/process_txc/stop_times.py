from txc2gtfs.helper.exceptions import InvalidDurationError, MalformedScheduleError
from txc2gtfs.helper.functions import format_time
from txc2gtfs.helper.parameters import EXACT_TIMING_STATUS


def check_duration(value, description):
    if value is None:
        raise InvalidDurationError(f"Timing link has no {description}")
    if value < 0:
        raise InvalidDurationError(f"Timing link has a negative {description}: {value}")
    return value


def wait_time(journey_stop):
    if journey_stop['WaitTime'] is None:
        return 0
    return check_duration(journey_stop['WaitTime'], 'wait time')


def is_exact(journey_stop):
    return journey_stop['TimingStatus'] in EXACT_TIMING_STATUS


def stop_time(journey_stop, arrival, departure):
    activity = journey_stop['Activity']
    return {
        'stop': journey_stop['StopPointRef'],
        'arrival_time': format_time(arrival),
        'departure_time': format_time(departure),
        'pickup': activity in ('PickUp', 'PickUpAndSetDown'),
        'dropoff': activity in ('SetDown', 'PickUpAndSetDown'),
        'exact_time': is_exact(journey_stop),
    }


def build_stop_times(timing_links, departure_time):
    """
    Returns one stop time per stop visited by the timing links (N links give N + 1 stops).

    departure_time is the trip's departure in seconds after midnight. Each stop's arrival is the
    previous stop's departure plus the run time and the destination wait of the link between them;
    its departure adds the origin wait of the link leaving it. The last stop departs when it arrives.
    """
    if not timing_links:
        raise MalformedScheduleError("Cannot build stop times without timing links")

    for link in timing_links:
        check_duration(link['RunTime'], 'run time')

    first = timing_links[0]['From']
    departure = departure_time + wait_time(first)

    stop_times = [{
        'stop': first['StopPointRef'],
        'arrival_time': format_time(departure),
        'departure_time': format_time(departure),
        'pickup': True,
        'dropoff': False,
        'exact_time': is_exact(first),
    }]

    for previous, current in zip(timing_links, timing_links[1:]):
        arrival = departure + previous['RunTime'] + wait_time(previous['To'])
        departure = arrival + wait_time(current['From'])
        stop_times.append(stop_time(previous['To'], arrival, departure))

    last = timing_links[-1]
    arrival = departure + last['RunTime'] + wait_time(last['To'])
    stop_times.append(stop_time(last['To'], arrival, arrival))

    return stop_times
