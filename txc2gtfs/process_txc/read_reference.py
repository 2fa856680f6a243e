import logging
from collections import defaultdict

import pandas as pd

from txc2gtfs.helper.parameters import naptan_columns

logger = logging.getLogger(__name__)


def import_stops(file_path):
    """Reads NaPTAN Stops.csv into {ATCOCode: [atco, naptan, name, street, indicator, locality, parent, lon, lat]}."""

    # import stop points
    stops = pd.read_csv(file_path, dtype=str, keep_default_na=False, low_memory=False)

    missing = [column for column in naptan_columns if column not in stops.columns]
    if missing:
        raise KeyError(f"NaPTAN file {file_path} is missing columns: {', '.join(missing)}")

    stops = stops[naptan_columns].drop_duplicates(subset=['ATCOCode'], keep='first')
    logger.info(f"Loaded {len(stops)} NaPTAN stops from {file_path}")

    return {row[0]: list(row) for row in stops.itertuples(index=False, name=None)}


def import_bank_holidays(file_path):
    """Reads a Name,Date CSV into {holiday name: [dates in ascending order]}."""

    holidays = pd.read_csv(file_path, dtype=str, keep_default_na=False)

    if not {'Name', 'Date'}.issubset(holidays.columns):
        raise KeyError(f"Bank holiday file {file_path} must have 'Name' and 'Date' columns")

    holidays['Date'] = pd.to_datetime(holidays['Date'], format='%Y-%m-%d').dt.date
    holidays = holidays.sort_values(['Name', 'Date'])

    calendar = defaultdict(list)
    for name, holiday_date in holidays[['Name', 'Date']].itertuples(index=False, name=None):
        calendar[name].append(holiday_date)

    logger.info(f"Loaded {len(holidays)} bank holiday dates for {len(calendar)} holidays from {file_path}")
    return dict(calendar)
