import logging
from datetime import timedelta

import numpy as np

from txc2gtfs.helper.functions import date_range
from txc2gtfs.helper.parameters import (
    HOLIDAYS_ONLY, MAX_EXCLUDED_RANGE_DAYS, NO_DAYS, OPEN_ENDED_YEAR, bank_holiday_groups
)

logger = logging.getLogger(__name__)


def merge_days(day_patterns):
    """OR-merges a list of 7 element Monday-first masks into one."""
    if not day_patterns:
        return NO_DAYS

    merged = np.bitwise_or.reduce(np.array(day_patterns, dtype=np.int8), axis=0)
    return tuple(int(day) for day in merged)


def get_days(operating_profile):
    if operating_profile['RegularDayType'] == HOLIDAYS_ONLY:
        return NO_DAYS
    return merge_days(operating_profile['RegularDayType'])


def expand_holiday_names(names):
    expanded = []
    for name in names:
        for member in bank_holiday_groups.get(name, [name]):
            if member not in expanded:
                expanded.append(member)
    return expanded


def get_holiday_dates(holidays, names, start_date):
    dates = []
    for name in names:
        # a group name supplied directly by the holiday calendar wins over its expansion
        members = [name] if name in holidays else expand_holiday_names([name])
        for member in members:
            if member not in holidays:
                logger.warning(f"No dates known for bank holiday {member}")
                continue
            dates.extend(day for day in holidays[member] if day > start_date)
    return dates


def calendar_key(days, start_date, end_date, includes, excludes):
    return '_'.join([
        ','.join(str(day) for day in days),
        start_date.isoformat(),
        end_date.isoformat(),
        ','.join(day.isoformat() for day in includes),
        ','.join(day.isoformat() for day in excludes),
    ])


def build_calendar(context, operating_profile, service):
    """
    Returns the deduplicated calendar for a journey's operating profile within its service's
    operating period, creating it in the context on first sight.
    """
    days = get_days(operating_profile)

    start_date = service['OperatingPeriod']['StartDate']
    end_date = service['OperatingPeriod']['EndDate']
    excludes = []
    includes = []

    for dates in operating_profile['SpecialDaysOperation']['DaysOfNonOperation']:
        # break covers the start of the service, move the calendar start past it
        if not dates['StartDate'] > start_date:
            start_date = max(start_date, dates['EndDate'] + timedelta(days=1))
        # break runs to (or beyond) the end of the service, finish the calendar before it
        elif not dates['EndDate'] < end_date or dates['EndDate'].year >= OPEN_ENDED_YEAR:
            end_date = min(end_date, dates['StartDate'] - timedelta(days=1))
        elif (dates['EndDate'] - dates['StartDate']).days < MAX_EXCLUDED_RANGE_DAYS:
            excludes.extend(date_range(dates['StartDate'], dates['EndDate'], days))
        else:
            logger.warning(
                f"Ignored extra long break in service {service['ServiceCode']}: "
                f"{dates['StartDate']} to {dates['EndDate']}"
            )

    bank_holidays = operating_profile['BankHolidayOperation']
    other_holidays = operating_profile.get('OtherPublicHolidayOperation', {})

    excludes.extend(get_holiday_dates(context.holidays, bank_holidays['DaysOfNonOperation'], start_date))
    excludes.extend(day for day in other_holidays.get('DaysOfNonOperation', []) if day > start_date)

    includes.extend(get_holiday_dates(context.holidays, bank_holidays['DaysOfOperation'], start_date))
    includes.extend(day for day in other_holidays.get('DaysOfOperation', []) if day > start_date)

    if start_date > end_date:
        logger.warning(
            f"Calendar for service {service['ServiceCode']} starts {start_date} after it ends {end_date}, "
            f"it has no days of service"
        )
        end_date = start_date
        days = NO_DAYS
        includes = []
        excludes = []

    includes = tuple(sorted(set(includes)))
    excludes = tuple(sorted(set(excludes)))

    key = calendar_key(days, start_date, end_date, includes, excludes)
    return context.add_calendar(key, start_date, end_date, days, includes, excludes)
