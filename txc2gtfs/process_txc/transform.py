import logging

from txc2gtfs.helper.exceptions import UnresolvedReferenceError
from txc2gtfs.process_txc.context import DocumentContext
from txc2gtfs.process_txc.normalize import normalize_document
from txc2gtfs.process_txc.stop_times import build_stop_times

logger = logging.getLogger(__name__)


def get_service(schedule, vehicle):
    service = schedule['Services'].get(vehicle['ServiceRef'])
    if service is None:
        raise UnresolvedReferenceError(
            f"Vehicle journey {vehicle['VehicleJourneyCode']} refers to unknown service {vehicle['ServiceRef']}"
        )
    return service


def get_journey_pattern(service, vehicle):
    pattern = service['StandardService'].get(vehicle['JourneyPatternRef'])
    if pattern is None:
        raise UnresolvedReferenceError(
            f"Vehicle journey {vehicle['VehicleJourneyCode']} refers to unknown journey pattern "
            f"{vehicle['JourneyPatternRef']} in service {service['ServiceCode']}"
        )
    return pattern


def get_timing_links(schedule, journey_pattern):
    timing_links = []
    for section_id in journey_pattern['Sections']:
        if section_id not in schedule['JourneySections']:
            raise UnresolvedReferenceError(f"Unknown journey pattern section {section_id}")
        timing_links.extend(schedule['JourneySections'][section_id])
    return timing_links


def get_shape_id(schedule, journey_pattern):
    """First route section of the route the journey pattern follows, matched on id or private code."""
    if schedule['Routes'] is None:
        return None

    route_ref = journey_pattern['RouteRef']
    routes = [
        route for route in schedule['Routes']
        if route_ref == route['id'] or (route['PrivateCode'] and route_ref == route['PrivateCode'])
    ]

    if not routes or not routes[0]['RouteSectionRefs']:
        raise UnresolvedReferenceError(f"Route {route_ref!r} has no route section")

    return routes[0]['RouteSectionRefs'][0]


def build_journey(schedule, vehicle, context):
    service = get_service(schedule, vehicle)
    journey_pattern = get_journey_pattern(service, vehicle)
    timing_links = get_timing_links(schedule, journey_pattern)

    if not timing_links:
        logger.debug(f"Skipping vehicle journey {vehicle['VehicleJourneyCode']} with no timing links")
        return None

    calendar = context.get_calendar(vehicle['OperatingProfile'], service)
    stops = build_stop_times(timing_links, vehicle['DepartureTime'])

    return {
        'calendar': calendar,
        'stops': stops,
        'trip': {
            'id': context.new_trip_id(),
            'short_name': service['ServiceDestination'],
            'direction': journey_pattern['Direction'],
        },
        'route': vehicle['ServiceRef'],
        'shape_id': get_shape_id(schedule, journey_pattern),
        'block_id': vehicle['OperationalBlockNumber'],
    }


def transform_schedule(schedule, context):
    """Returns a journey record for every vehicle journey in the schedule that has timing links."""
    journeys = []
    for vehicle in schedule['VehicleJourneys']:
        journey = build_journey(schedule, vehicle, context)
        if journey is not None:
            journeys.append(journey)
    return journeys


def transform_document(document, holidays=None, document_id=None):
    """Normalises one parsed document and builds its journeys with a fresh context."""
    context = DocumentContext(holidays=holidays, document_id=document_id)
    schedule = normalize_document(document)
    journeys = transform_schedule(schedule, context)

    logger.info(f"Document {document_id}: {len(journeys)} journey(s), {len(context.calendars)} calendar(s)")
    return schedule, journeys
