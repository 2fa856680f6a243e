import os
import re
import logging

import numpy as np
import pandas as pd
import geopandas as gpd

from txc2gtfs.helper.geo import resolve_location
from txc2gtfs.helper.parameters import (
    GEOGRAPHIC_CRS, GRID_CRS, ROUTE_LONG_NAME_LENGTH, STREET_BLACKLIST, agency_lang, agency_timezone,
    agency_url, direction_id, gtfs_columns, route_type, street_abbreviations
)
from txc2gtfs.helper.utils import get_output_dir

logger = logging.getLogger(__name__)


def qualify(document_id, value):
    """Prefixes a document local id so ids from different documents cannot collide in one feed."""
    if value is None or value == '':
        return ''
    if document_id is None:
        return str(value)
    return f"{document_id}_{value}"


def gtfs_date(day):
    return day.strftime('%Y%m%d')


def clean_place_name(name):
    name = re.sub(r"[^0-9a-zA-Z'\s]", "/", name.strip())
    return re.sub(r"^\s*[^0-9a-zA-Z]\s+", "", name)


def get_route_long_name(service):
    origin = service['ServiceOrigin'].strip()
    destination = service['ServiceDestination'].strip()

    if (origin.lower() == 'origin' or destination.lower() == 'destination') and service['Via'] != '':
        return service['Via']

    long_name = clean_place_name(origin) + ' - ' + clean_place_name(destination)
    for word, abbreviation in street_abbreviations.items():
        long_name = long_name.replace(word, abbreviation)

    return long_name[:ROUTE_LONG_NAME_LENGTH]


def get_agency_id(schedule, service):
    operator = schedule['Operators'].get(service['RegisteredOperatorRef'])
    if operator and operator['OperatorCode']:
        return operator['OperatorCode']
    return service['RegisteredOperatorRef']


def create_agency(results):
    rows = {}
    for result in results:
        for operator_id, operator in result['schedule']['Operators'].items():
            agency_id = operator['OperatorCode'] or operator_id
            if agency_id in rows:
                continue
            rows[agency_id] = {
                'agency_id': agency_id,
                'agency_name': operator['OperatorNameOnLicence'] or operator['OperatorShortName'] or agency_id,
                'agency_url': agency_url,
                'agency_timezone': agency_timezone,
                'agency_lang': agency_lang,
            }

    return pd.DataFrame(list(rows.values()), columns=gtfs_columns['agency'])


def create_routes(results):
    rows = {}
    for result in results:
        schedule = result['schedule']
        for service in schedule['Services'].values():
            route_id = service['ServiceCode']
            if route_id in rows:
                continue

            lines = list(service['Lines'].values())
            rows[route_id] = {
                'route_id': route_id,
                'agency_id': get_agency_id(schedule, service),
                'route_short_name': lines[0].strip() if lines else '',
                'route_long_name': get_route_long_name(service),
                'route_type': route_type[service['Mode']],
                'route_desc': service['Description'],
            }

    return pd.DataFrame(list(rows.values()), columns=gtfs_columns['routes'])


def should_add_street(name, street):
    """A street adds information when it differs from the name and the name does not already mention a street."""
    return (
        len(street) > 1
        and name != street
        and street != '---'
        and all(word not in name for word in STREET_BLACKLIST)
    )


def naptan_stop(row):
    atco_code, naptan_code, name, street, indicator, locality, parent, longitude, latitude = row

    specific_street = ', ' + street if should_add_street(name, street) else ''
    specific_location = ' (' + indicator.replace('->', '') + ')' if indicator != '' else ''
    city = parent or locality

    return {
        'stop_id': atco_code,
        'stop_code': naptan_code,
        'stop_name': f"{name}{specific_location}{specific_street}, {city}",
        'stop_desc': name,
        'stop_lat': latitude,
        'stop_lon': longitude,
        'wheelchair_boarding': 0,
    }


def feed_stop(stop):
    longitude, latitude = resolve_location(stop['Location'])
    qualifier = stop['LocalityQualifier']

    return {
        'stop_id': stop['StopPointRef'],
        'stop_code': stop['StopPointRef'],
        'stop_name': stop['CommonName'] + (', ' + qualifier if qualifier else ''),
        'stop_lat': latitude,
        'stop_lon': longitude,
        'wheelchair_boarding': 0,
    }


def create_stops(results, naptan=None):
    naptan = naptan or {}
    rows = {}
    for result in results:
        for stop in result['schedule']['StopPoints']:
            ref = stop['StopPointRef']
            if ref in rows:
                continue
            rows[ref] = naptan_stop(naptan[ref]) if ref in naptan else feed_stop(stop)

    return pd.DataFrame(list(rows.values()), columns=gtfs_columns['stops'])


def add_shape_distances(shapes):
    """Cumulative distance in metres along each shape, measured on the British National Grid."""
    if shapes.empty:
        shapes['shape_dist_traveled'] = pd.Series(dtype=float)
        return shapes

    points = gpd.GeoDataFrame(
        shapes,
        geometry=gpd.points_from_xy(shapes['shape_pt_lon'], shapes['shape_pt_lat']),
        crs=GEOGRAPHIC_CRS
    ).to_crs(GRID_CRS)

    projected = pd.DataFrame({'shape_id': shapes['shape_id'], 'x': points.geometry.x, 'y': points.geometry.y})
    previous = projected.groupby('shape_id')[['x', 'y']].shift(1)

    step = pd.Series(
        np.hypot(projected['x'] - previous['x'], projected['y'] - previous['y']),
        index=shapes.index
    ).fillna(0)

    shapes['shape_dist_traveled'] = step.groupby(shapes['shape_id']).cumsum().round(1)
    return shapes


def create_shapes(results):
    rows = []
    seen = set()
    for result in results:
        sequence = {}
        for route_link in result['schedule']['RouteLinks']:
            if route_link['Latitude'] is None or route_link['Longitude'] is None:
                continue

            shape_id = qualify(result['document_id'], route_link['Id'])
            if shape_id in seen:
                continue

            sequence[shape_id] = sequence.get(shape_id, 0) + 1
            rows.append({
                'shape_id': shape_id,
                'shape_pt_lat': route_link['Latitude'],
                'shape_pt_lon': route_link['Longitude'],
                'shape_pt_sequence': sequence[shape_id],
            })
        seen.update(sequence)

    shapes = pd.DataFrame(rows, columns=gtfs_columns['shapes'][:-1])
    return add_shape_distances(shapes)[gtfs_columns['shapes']]


def create_trips(results):
    rows = [
        {
            'route_id': journey['route'],
            'service_id': qualify(result['document_id'], journey['calendar']['id']),
            'trip_id': qualify(result['document_id'], journey['trip']['id']),
            'trip_headsign': journey['trip']['short_name'],
            'trip_short_name': '',
            'direction_id': direction_id.get(journey['trip']['direction'], 0),
            'block_id': journey['block_id'],
            'shape_id': qualify(result['document_id'], journey['shape_id']),
        }
        for result in results
        for journey in result['journeys']
    ]

    return pd.DataFrame(rows, columns=gtfs_columns['trips'])


def unique_calendars(result):
    calendars = {}
    for journey in result['journeys']:
        calendars.setdefault(journey['calendar']['id'], journey['calendar'])
    return [calendars[calendar_id] for calendar_id in sorted(calendars)]


def create_calendar(results):
    day_columns = gtfs_columns['calendar'][1:8]
    rows = []
    for result in results:
        for calendar in unique_calendars(result):
            row = {'service_id': qualify(result['document_id'], calendar['id'])}
            row.update(dict(zip(day_columns, calendar['days'])))
            row['start_date'] = gtfs_date(calendar['start_date'])
            row['end_date'] = gtfs_date(calendar['end_date'])
            rows.append(row)

    return pd.DataFrame(rows, columns=gtfs_columns['calendar'])


def create_calendar_dates(results):
    rows = []
    for result in results:
        for calendar in unique_calendars(result):
            service_id = qualify(result['document_id'], calendar['id'])
            rows.extend({'service_id': service_id, 'date': gtfs_date(day), 'exception_type': 1}
                        for day in calendar['includes'])
            rows.extend({'service_id': service_id, 'date': gtfs_date(day), 'exception_type': 2}
                        for day in calendar['excludes'])

    return pd.DataFrame(rows, columns=gtfs_columns['calendar_dates'])


def create_stop_times(results):
    rows = [
        {
            'trip_id': qualify(result['document_id'], journey['trip']['id']),
            'arrival_time': stop['arrival_time'],
            'departure_time': stop['departure_time'],
            'stop_id': stop['stop'],
            'stop_sequence': sequence,
            'pickup_type': 0 if stop['pickup'] else 1,
            'drop_off_type': 0 if stop['dropoff'] else 1,
            'timepoint': 1 if stop['exact_time'] else 0,
        }
        for result in results
        for journey in result['journeys']
        for sequence, stop in enumerate(journey['stops'], start=1)
    ]

    return pd.DataFrame(rows, columns=gtfs_columns['stop_times'])


def create_gtfs_tables(results, naptan=None):
    """Builds every GTFS table from the converted documents ({'document_id', 'schedule', 'journeys'} each)."""
    return {
        'agency': create_agency(results),
        'routes': create_routes(results),
        'stops': create_stops(results, naptan),
        'shapes': create_shapes(results),
        'trips': create_trips(results),
        'calendar': create_calendar(results),
        'calendar_dates': create_calendar_dates(results),
        'stop_times': create_stop_times(results),
    }


def create_outputs(gtfs_tables, output_dir=None):
    if output_dir is None:
        output_dir = get_output_dir()

    os.makedirs(output_dir, exist_ok=True)

    output_files = []
    for name, table in gtfs_tables.items():
        path = os.path.join(output_dir, f'{name}.txt')
        table.to_csv(path, index=False)
        logger.info(f"Wrote {len(table)} row(s) to {path}")
        output_files.append(path)

    return output_files
