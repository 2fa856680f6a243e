class TransXChangeError(Exception):
    """Base class for errors raised while converting one TransXChange document."""


class MalformedScheduleError(TransXChangeError):
    """A required section is missing or empty, or a record cannot be read."""


class InvalidDurationError(MalformedScheduleError):
    """A run time or wait time cannot be parsed or is negative."""


class UnresolvedReferenceError(TransXChangeError):
    """A stop, journey pattern, section, service or route reference has no target."""


class MissingOperatingProfileError(TransXChangeError):
    """Neither the vehicle journey nor its service supplies an operating profile."""
