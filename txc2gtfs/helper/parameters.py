from datetime import date

# OSGB36 National Grid with the published seven parameter Helmert shift to WGS84
SOURCE_CRS = ('+proj=tmerc +lat_0=49 +lon_0=-2 +k=0.9996012717 +x_0=400000 +y_0=-100000 +ellps=airy '
              '+towgs84=446.448,-125.157,542.06,0.15,0.247,0.842,-20.489 +units=m +no_defs')
TARGET_CRS = '+proj=longlat +datum=WGS84 +no_defs'
GEOGRAPHIC_CRS = 'EPSG:4326'
GRID_CRS = 'EPSG:27700'

REQUIRED_SECTIONS = ['StopPoints', 'JourneyPatternSections', 'Services', 'VehicleJourneys', 'RouteSections']

DEFAULT_END_DATE = date(2099, 12, 31)

# special non-operation ranges ending in or after this year are open ended
OPEN_ENDED_YEAR = 2037

# longest non-operation range (in days) that is expanded into excluded dates
MAX_EXCLUDED_RANGE_DAYS = 92

HOLIDAYS_ONLY = 'HolidaysOnly'

EXACT_TIMING_STATUS = ('PTP', 'TIP')

NO_DAYS = (0, 0, 0, 0, 0, 0, 0)

days_of_week_index = {
    'MondayToFriday': (1, 1, 1, 1, 1, 0, 0),
    'MondayToSaturday': (1, 1, 1, 1, 1, 1, 0),
    'MondayToSunday': (1, 1, 1, 1, 1, 1, 1),
    'NotMonday': (0, 1, 1, 1, 1, 1, 1),
    'NotTuesday': (1, 0, 1, 1, 1, 1, 1),
    'NotWednesday': (1, 1, 0, 1, 1, 1, 1),
    'NotThursday': (1, 1, 1, 0, 1, 1, 1),
    'NotFriday': (1, 1, 1, 1, 0, 1, 1),
    'NotSaturday': (1, 1, 1, 1, 1, 0, 1),
    'NotSunday': (1, 1, 1, 1, 1, 1, 0),
    'Weekend': (0, 0, 0, 0, 0, 1, 1),
    'Monday': (1, 0, 0, 0, 0, 0, 0),
    'Tuesday': (0, 1, 0, 0, 0, 0, 0),
    'Wednesday': (0, 0, 1, 0, 0, 0, 0),
    'Thursday': (0, 0, 0, 1, 0, 0, 0),
    'Friday': (0, 0, 0, 0, 1, 0, 0),
    'Saturday': (0, 0, 0, 0, 0, 1, 0),
    'Sunday': (0, 0, 0, 0, 0, 0, 1),
}

# TransXChange holiday groups, resolved to their members before date lookup
bank_holiday_groups = {
    'AllBankHolidays': ['ChristmasDay', 'BoxingDay', 'GoodFriday', 'NewYearsDay', 'Jan2ndScotland',
                        'StAndrewsDay', 'EasterMonday', 'MayDay', 'SpringBank',
                        'LateSummerBankHolidayNotScotland', 'AugustBankHolidayScotland'],
    'Christmas': ['ChristmasDay', 'BoxingDay'],
    'HolidayMondays': ['EasterMonday', 'MayDay', 'SpringBank', 'LateSummerBankHolidayNotScotland',
                       'AugustBankHolidayScotland'],
    'EarlyRunOff': ['ChristmasEve', 'NewYearsEve'],
    'AllHolidaysExceptChristmas': ['NewYearsDay', 'Jan2ndScotland', 'GoodFriday', 'EasterMonday', 'MayDay',
                                   'SpringBank', 'LateSummerBankHolidayNotScotland',
                                   'AugustBankHolidayScotland', 'StAndrewsDay'],
    'DisplacementHolidays': ['ChristmasDayHoliday', 'BoxingDayHoliday', 'NewYearsDayHoliday',
                             'Jan2ndScotlandHoliday', 'StAndrewsDayHoliday'],
}

route_type = {
    'Air': 1100,
    'Bus': 3,
    'Coach': 3,
    'Ferry': 4,
    'Train': 2,
    'Tram': 0,
    'Underground': 1,
}

street_abbreviations = {
    'Road': 'Rd',
    'Lane': 'Ln',
    'Street': 'St',
    'Court': 'Ct',
    'Station': 'Stn',
    'Avenue': 'Ave',
    'Centre': 'Ctr',
    'Center': 'Ctr',
    'Drive': 'Dr',
}

STREET_BLACKLIST = ['Road', 'Street', 'Lane', 'Avenue']

ROUTE_LONG_NAME_LENGTH = 80

naptan_columns = ['ATCOCode', 'NaptanCode', 'CommonName', 'Street', 'Indicator', 'LocalityName',
                  'ParentLocalityName', 'Longitude', 'Latitude']

gtfs_columns = {
    'agency': ['agency_id', 'agency_name', 'agency_url', 'agency_timezone', 'agency_lang'],
    'routes': ['route_id', 'agency_id', 'route_short_name', 'route_long_name', 'route_type',
               'route_text_color', 'route_color', 'route_url', 'route_desc'],
    'stops': ['stop_id', 'stop_code', 'stop_name', 'stop_desc', 'stop_lat', 'stop_lon', 'zone_id', 'stop_url',
              'location_type', 'parent_station', 'stop_timezone', 'wheelchair_boarding'],
    'shapes': ['shape_id', 'shape_pt_lat', 'shape_pt_lon', 'shape_pt_sequence', 'shape_dist_traveled'],
    'trips': ['route_id', 'service_id', 'trip_id', 'trip_headsign', 'trip_short_name', 'direction_id',
              'block_id', 'shape_id'],
    'calendar': ['service_id', 'monday', 'tuesday', 'wednesday', 'thursday', 'friday', 'saturday', 'sunday',
                 'start_date', 'end_date'],
    'calendar_dates': ['service_id', 'date', 'exception_type'],
    'stop_times': ['trip_id', 'arrival_time', 'departure_time', 'stop_id', 'stop_sequence', 'pickup_type',
                   'drop_off_type', 'timepoint'],
}

direction_id = {'outbound': 0, 'inbound': 1}

agency_url = 'https://www.traveline.info'
agency_timezone = 'Europe/London'
agency_lang = 'en'

# TransXChange writes modes in lower case and has a few the feed folds together
mode_aliases = {
    'air': 'Air',
    'bus': 'Bus',
    'coach': 'Coach',
    'ferry': 'Ferry',
    'rail': 'Train',
    'train': 'Train',
    'tram': 'Tram',
    'metro': 'Underground',
    'underground': 'Underground',
}

# stop activities are written pickUp, setDown, pickUpAndSetDown or pass
activity_aliases = {
    'pickup': 'PickUp',
    'setdown': 'SetDown',
    'pickupandsetdown': 'PickUpAndSetDown',
    'pass': 'Pass',
}

DEFAULT_MODE = 'Bus'
DEFAULT_ACTIVITY = 'PickUpAndSetDown'
DEFAULT_DIRECTION = 'outbound'
