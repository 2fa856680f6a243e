from txc2gtfs.process_txc.calendars import build_calendar


class DocumentContext:
    """
    Mutable state for converting a single TransXChange document.

    Holds the calendar deduplication table and the sequential calendar and trip counters. Create
    one per document and throw it away afterwards; the holiday calendar it is given is only read.
    """

    def __init__(self, holidays=None, document_id=None):
        self.holidays = holidays if holidays is not None else {}
        self.document_id = document_id
        self.calendars = {}
        self.next_calendar_id = 1
        self.next_trip_id = 1

    def get_calendar(self, operating_profile, service):
        return build_calendar(self, operating_profile, service)

    def add_calendar(self, key, start_date, end_date, days, includes, excludes):
        """Stores a calendar under key unless one is already there, and returns the stored one."""
        if key not in self.calendars:
            self.calendars[key] = {
                'id': self.next_calendar_id,
                'start_date': start_date,
                'end_date': end_date,
                'days': days,
                'includes': includes,
                'excludes': excludes,
            }
            self.next_calendar_id += 1

        return self.calendars[key]

    def new_trip_id(self):
        trip_id = self.next_trip_id
        self.next_trip_id += 1
        return trip_id
