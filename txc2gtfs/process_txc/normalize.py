"""
Turns one generically parsed TransXChange document into a normalised schedule.

The parsed document follows the xml2js layout produced by read_txc: every child element is a
list, attributes live under '$' and text next to attributes under '_'. The schedule returned by
normalize_document is a plain dict of tables:

    StopPoints       list of stop points in document order
    JourneySections  journey pattern section id -> list of timing links
    Operators        document local operator id -> operator
    Services         service code -> service
    VehicleJourneys  list of vehicle journeys with pattern refs and operating profiles resolved
    Routes           list of routes, or None when the document has no Routes section
    RouteLinks       flat list of route section geometry vertices
"""
import re
import logging

from txc2gtfs.helper.exceptions import (
    MalformedScheduleError, MissingOperatingProfileError, UnresolvedReferenceError
)
from txc2gtfs.helper.functions import (
    child_names, get_node, get_nodes, get_text, parse_date, parse_duration, parse_optional_duration,
    parse_time, text_of, to_float
)
from txc2gtfs.helper.geo import resolve_location
from txc2gtfs.helper.parameters import (
    DEFAULT_ACTIVITY, DEFAULT_DIRECTION, DEFAULT_END_DATE, DEFAULT_MODE, HOLIDAYS_ONLY, NO_DAYS,
    REQUIRED_SECTIONS, activity_aliases, days_of_week_index, mode_aliases
)

logger = logging.getLogger(__name__)


def normalize_document(document):
    tx = document.get('TransXChange', document)

    for section in REQUIRED_SECTIONS:
        if not tx.get(section) or not tx[section][0]:
            raise MalformedScheduleError(f"Document has no {section} section")

    services = get_services(tx)
    vehicle_records = get_nodes(tx['VehicleJourneys'][0], 'VehicleJourney')
    if not vehicle_records:
        raise MalformedScheduleError("Document has no VehicleJourney records")

    pattern_index = get_journey_pattern_index(vehicle_records)

    schedule = {
        'StopPoints': get_stop_points(tx['StopPoints'][0]),
        'JourneySections': get_journey_sections(tx['JourneyPatternSections'][0]),
        'Operators': get_operators(tx['Operators'][0] if tx.get('Operators') else None),
        'Services': services,
        'VehicleJourneys': [get_vehicle_journey(v, pattern_index, services) for v in vehicle_records],
        'Routes': get_routes(tx['Routes'][0]) if tx.get('Routes') and tx['Routes'][0] else None,
        'RouteLinks': get_route_links(tx['RouteSections'][0]),
    }

    check_stop_references(schedule['StopPoints'], schedule['JourneySections'])

    return schedule


# ----------------------------------------------------------------------------
# Schema variants: each is a tag found in the document and the resolver for it
# ----------------------------------------------------------------------------

def resolve_variant(node, variants):
    """Returns (tag, records) for the first variant tag present in node, or (None, [])."""
    if isinstance(node, dict):
        for tag, resolver in variants.items():
            if node.get(tag):
                return tag, [resolver(record) for record in node[tag]]
    return None, []


def get_location(location):
    if not isinstance(location, dict):
        return {'Latitude': None, 'Longitude': None, 'Easting': None, 'Northing': None}

    translation = get_node(location, 'Translation')

    def value(name):
        found = get_text(location, name)
        if found is None and isinstance(translation, dict):
            found = get_text(translation, name)
        return to_float(found)

    return {
        'Latitude': value('Latitude'),
        'Longitude': value('Longitude'),
        'Easting': value('Easting'),
        'Northing': value('Northing'),
    }


def get_annotated_stop(stop):
    return {
        'StopPointRef': required_text(stop, 'StopPointRef', 'AnnotatedStopPointRef'),
        'CommonName': get_text(stop, 'CommonName') or '',
        'LocalityName': get_text(stop, 'LocalityName') or '',
        'LocalityQualifier': get_text(stop, 'LocalityQualifier') or '',
        'Location': get_location(get_node(stop, 'Location')),
    }


def get_stop(stop):
    locality = get_text(stop, 'Place/NptgLocalityRef') or ''
    location = get_node(stop, 'Place/Location') or get_node(stop, 'Location')

    return {
        'StopPointRef': required_text(stop, 'AtcoCode', 'StopPoint'),
        'CommonName': get_text(stop, 'Descriptor/CommonName') or '',
        'LocalityName': locality,
        'LocalityQualifier': locality,
        'Location': get_location(location),
    }


stop_variants = {
    'AnnotatedStopPointRef': get_annotated_stop,
    'StopPoint': get_stop,
}


def get_operator(operator):
    return {
        'OperatorId': get_text(operator, '@id'),
        'OperatorCode': get_text(operator, 'OperatorCode') or get_text(operator, 'NationalOperatorCode') or '',
        'OperatorShortName': get_text(operator, 'OperatorShortName') or '',
        'OperatorNameOnLicence': get_text(operator, 'OperatorNameOnLicence') or '',
    }


operator_variants = {
    'Operator': get_operator,
    'LicensedOperator': get_operator,
}


def get_direct_pattern_ref(vehicle, index):
    return get_text(vehicle, 'JourneyPatternRef')


def get_indexed_pattern_ref(vehicle, index):
    journey_ref = get_text(vehicle, 'VehicleJourneyRef')
    if journey_ref not in index:
        raise UnresolvedReferenceError(
            f"Vehicle journey {get_text(vehicle, 'VehicleJourneyCode')} refers to journey {journey_ref} "
            f"which has no JourneyPatternRef"
        )
    return index[journey_ref]


pattern_ref_variants = {
    'JourneyPatternRef': get_direct_pattern_ref,
    'VehicleJourneyRef': get_indexed_pattern_ref,
}


# ----------------------------------------------------------------------------
# Sections
# ----------------------------------------------------------------------------

def required_text(record, path, context):
    value = get_text(record, path)
    if not value:
        raise MalformedScheduleError(f"{context} has no {path}")
    return value


def get_stop_points(section):
    variant, stops = resolve_variant(section, stop_variants)
    if variant is None:
        raise MalformedScheduleError("StopPoints section has neither AnnotatedStopPointRef nor StopPoint records")
    return stops


def get_operators(section):
    _, operators = resolve_variant(section, operator_variants)
    return {operator['OperatorId']: operator for operator in operators}


def get_activity(stop):
    activity = get_text(stop, 'Activity')
    if not activity:
        return DEFAULT_ACTIVITY
    if activity.lower() not in activity_aliases:
        raise MalformedScheduleError(f"Unknown stop activity {activity!r}")
    return activity_aliases[activity.lower()]


def get_journey_stop(stop):
    return {
        'StopPointRef': required_text(stop, 'StopPointRef', 'Timing link stop'),
        'Activity': get_activity(stop),
        'TimingStatus': get_text(stop, 'TimingStatus') or '',
        'WaitTime': parse_optional_duration(get_text(stop, 'WaitTime')),
    }


def get_link(link):
    return {
        'From': get_journey_stop(get_node(link, 'From')),
        'To': get_journey_stop(get_node(link, 'To')),
        'RunTime': parse_duration(get_text(link, 'RunTime')),
    }


def get_journey_sections(section):
    return {
        get_text(jps, '@id'): [get_link(link) for link in get_nodes(jps, 'JourneyPatternTimingLink')]
        for jps in get_nodes(section, 'JourneyPatternSection')
    }


def check_stop_references(stops, journey_sections):
    known = {stop['StopPointRef'] for stop in stops}

    for section_id, links in journey_sections.items():
        for link in links:
            for end in ('From', 'To'):
                ref = link[end]['StopPointRef']
                if ref not in known:
                    raise UnresolvedReferenceError(
                        f"Journey pattern section {section_id} refers to unknown stop {ref}"
                    )


def get_date_range(dates):
    end_date = get_text(dates, 'EndDate')
    return {
        'StartDate': parse_date(required_text(dates, 'StartDate', 'Date range')),
        'EndDate': parse_date(end_date) if end_date else DEFAULT_END_DATE,
    }


def get_days_of_week(days_node):
    names = child_names(days_node)
    if not names:
        return [NO_DAYS]
    return [days_of_week_index.get(name, NO_DAYS) for name in names]


def get_holidays(profile, path):
    holidays = get_node(profile, path)
    return [name for name in child_names(holidays) if name != 'OtherPublicHoliday']


def get_other_public_holidays(profile, path):
    return [
        parse_date(required_text(holiday, 'Date', 'OtherPublicHoliday'))
        for holiday in get_nodes(profile, f'{path}/OtherPublicHoliday')
    ]


def get_operating_profile(profile):
    if not isinstance(profile, dict) or 'RegularDayType' not in profile:
        raise MalformedScheduleError("OperatingProfile has no RegularDayType")

    regular = profile['RegularDayType'][0]

    if isinstance(regular, dict) and 'DaysOfWeek' in regular:
        regular_day_type = get_days_of_week(regular['DaysOfWeek'][0])
    else:
        regular_day_type = HOLIDAYS_ONLY

    return {
        'RegularDayType': regular_day_type,
        'BankHolidayOperation': {
            'DaysOfOperation': get_holidays(profile, 'BankHolidayOperation/DaysOfOperation'),
            'DaysOfNonOperation': get_holidays(profile, 'BankHolidayOperation/DaysOfNonOperation'),
        },
        'OtherPublicHolidayOperation': {
            'DaysOfOperation': get_other_public_holidays(profile, 'BankHolidayOperation/DaysOfOperation'),
            'DaysOfNonOperation': get_other_public_holidays(profile, 'BankHolidayOperation/DaysOfNonOperation'),
        },
        'SpecialDaysOperation': {
            'DaysOfOperation': [
                get_date_range(dr) for dr in get_nodes(profile, 'SpecialDaysOperation/DaysOfOperation/DateRange')
            ],
            'DaysOfNonOperation': [
                get_date_range(dr) for dr in get_nodes(profile, 'SpecialDaysOperation/DaysOfNonOperation/DateRange')
            ],
        },
    }


def get_mode(service):
    mode = get_text(service, 'Mode')
    if not mode:
        return DEFAULT_MODE
    if mode.lower() not in mode_aliases:
        logger.warning(f"Unknown mode {mode!r} for service {get_text(service, 'ServiceCode')}, using {DEFAULT_MODE}")
        return DEFAULT_MODE
    return mode_aliases[mode.lower()]


def get_journey_patterns(standard_service):
    return {
        get_text(pattern, '@id'): {
            'Direction': get_text(pattern, 'Direction') or DEFAULT_DIRECTION,
            'RouteRef': get_text(pattern, 'RouteRef') or '',
            'Sections': [text_of(ref) for ref in get_nodes(pattern, 'JourneyPatternSectionRefs')],
        }
        for pattern in get_nodes(standard_service, 'JourneyPattern')
    }


def get_service(service):
    standard_service = get_node(service, 'StandardService')
    operating_period = get_node(service, 'OperatingPeriod')
    if operating_period is None:
        raise MalformedScheduleError(f"Service {get_text(service, 'ServiceCode')} has no OperatingPeriod")

    profile = get_node(service, 'OperatingProfile')

    return {
        'ServiceCode': required_text(service, 'ServiceCode', 'Service'),
        'Lines': {get_text(line, '@id'): get_text(line, 'LineName') or '' for line in get_nodes(service, 'Lines/Line')},
        'OperatingPeriod': get_date_range(operating_period),
        'RegisteredOperatorRef': get_text(service, 'RegisteredOperatorRef') or '',
        'Description': re.sub(r'[\r\n\t]', '', get_text(service, 'Description') or ''),
        'Mode': get_mode(service),
        'StandardService': get_journey_patterns(standard_service),
        'ServiceOrigin': get_text(standard_service, 'Origin') or '',
        'ServiceDestination': get_text(standard_service, 'Destination') or '',
        'Via': get_text(standard_service, 'Vias/Via') or '',
        'OperatingProfile': get_operating_profile(profile) if profile is not None else None,
    }


def get_services(tx):
    services = {}
    for service in get_nodes(tx['Services'][0], 'Service'):
        record = get_service(service)
        services[record['ServiceCode']] = record

    if not services:
        raise MalformedScheduleError("Services section has no Service records")
    return services


# ----------------------------------------------------------------------------
# Vehicle journeys
# ----------------------------------------------------------------------------

def get_journey_pattern_index(vehicle_records):
    """VehicleJourneyCode -> JourneyPatternRef for every journey that names its pattern directly."""
    index = {}
    for vehicle in vehicle_records:
        pattern_ref = get_text(vehicle, 'JourneyPatternRef')
        if pattern_ref:
            index[get_text(vehicle, 'VehicleJourneyCode')] = pattern_ref
    return index


def get_vehicle_journey(vehicle, index, services):
    code = get_text(vehicle, 'VehicleJourneyCode') or ''
    service_ref = required_text(vehicle, 'ServiceRef', f"Vehicle journey {code}")

    variant = next((tag for tag in pattern_ref_variants if get_text(vehicle, tag)), None)
    if variant is None:
        raise UnresolvedReferenceError(f"Vehicle journey {code} has no JourneyPatternRef or VehicleJourneyRef")
    pattern_ref = pattern_ref_variants[variant](vehicle, index)

    profile = get_node(vehicle, 'OperatingProfile')
    if profile is not None:
        operating_profile = get_operating_profile(profile)
    else:
        if service_ref not in services:
            raise UnresolvedReferenceError(f"Vehicle journey {code} refers to unknown service {service_ref}")
        operating_profile = services[service_ref]['OperatingProfile']

    if operating_profile is None:
        raise MissingOperatingProfileError(
            f"Neither vehicle journey {code} nor service {service_ref} has an OperatingProfile"
        )

    return {
        'PrivateCode': get_text(vehicle, 'PrivateCode') or '',
        'LineRef': get_text(vehicle, 'LineRef') or '',
        'ServiceRef': service_ref,
        'VehicleJourneyCode': code,
        'JourneyPatternRef': pattern_ref,
        'DepartureTime': parse_time(required_text(vehicle, 'DepartureTime', f"Vehicle journey {code}")),
        'OperatingProfile': operating_profile,
        'OperationalBlockNumber': get_text(vehicle, 'Operational/Block/BlockNumber') or '',
        'TicketMachineServiceCode': get_text(vehicle, 'Operational/TicketMachine/TicketMachineServiceCode') or '',
        'TicketMachineJourneyCode': get_text(vehicle, 'Operational/TicketMachine/JourneyCode') or '',
    }


# ----------------------------------------------------------------------------
# Routes and geometry
# ----------------------------------------------------------------------------

def get_routes(section):
    return [
        {
            'id': get_text(route, '@id'),
            'PrivateCode': get_text(route, 'PrivateCode'),
            'RouteSectionRefs': [text_of(ref) for ref in get_nodes(route, 'RouteSectionRef')],
        }
        for route in get_nodes(section, 'Route')
    ]


def get_route_link_vertex(section_id, location):
    coordinates = get_location(location)
    longitude, latitude = resolve_location(coordinates)

    return {
        'Id': section_id,
        'Latitude': latitude,
        'Longitude': longitude,
        'Easting': coordinates['Easting'],
        'Northing': coordinates['Northing'],
    }


def get_route_links(section):
    route_links = [
        get_route_link_vertex(get_text(route_section, '@id'), location)
        for route_section in get_nodes(section, 'RouteSection')
        for link in get_nodes(route_section, 'RouteLink')
        for track in get_nodes(link, 'Track')
        for mapping in get_nodes(track, 'Mapping')
        for location in get_nodes(mapping, 'Location')
    ]

    return [route_link for route_link in route_links if route_link['Id']]
