import threading

from pyproj import Transformer

from txc2gtfs.helper.parameters import SOURCE_CRS, TARGET_CRS

# pyproj transformers must not be shared between threads
_local = threading.local()


def get_transformer():
    transformer = getattr(_local, 'transformer', None)
    if transformer is None:
        transformer = Transformer.from_crs(SOURCE_CRS, TARGET_CRS, always_xy=True)
        _local.transformer = transformer
    return transformer


def to_wgs84(easting, northing):
    """Converts an OSGB36 National Grid easting/northing to WGS84 (longitude, latitude)."""
    longitude, latitude = get_transformer().transform(float(easting), float(northing))
    return longitude, latitude


def resolve_location(location):
    """Returns (longitude, latitude) for a location, preferring native values over reprojection."""
    if location is None:
        return None, None

    latitude = location.get('Latitude')
    longitude = location.get('Longitude')

    if latitude is not None and longitude is not None:
        return longitude, latitude

    easting = location.get('Easting')
    northing = location.get('Northing')

    if easting is not None and northing is not None:
        return to_wgs84(easting, northing)

    return None, None
