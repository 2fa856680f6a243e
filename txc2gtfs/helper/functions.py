import re
from datetime import date, timedelta

from txc2gtfs.helper.exceptions import InvalidDurationError, MalformedScheduleError

DURATION_PATTERN = re.compile(
    r'^(-)?P(?:(\d+)D)?(?:T(?:(\d+)H)?(?:(\d+)M)?(?:(\d+(?:\.\d+)?)S)?)?$'
)


def text_of(node):
    """Text content of a parsed element, whether it is a bare string or carries attributes."""
    if node is None:
        return None
    if isinstance(node, dict):
        return node.get('_')
    return node


def get_node(record, path):
    """Follows a '/' separated path of first children through a nested record."""
    node = record
    for key in path.split('/'):
        if not isinstance(node, dict) or not node.get(key):
            return None
        node = node[key][0]
    return node


def get_nodes(record, path):
    parent, _, key = path.rpartition('/')
    node = get_node(record, parent) if parent else record
    if not isinstance(node, dict):
        return []
    return node.get(key) or []


def get_text(record, path):
    if record is None:
        return None
    if path.startswith('@'):  # Handle attributes
        return record.get('$', {}).get(path[1:]) if isinstance(record, dict) else None
    return text_of(get_node(record, path))


def child_names(node):
    """Element names below a node, in document order, ignoring attributes and text."""
    if not isinstance(node, dict):
        return []
    return [key for key in node if key not in ('$', '_')]


def to_float(value):
    if value is None or value == '':
        return None
    try:
        return float(value)
    except ValueError:
        raise MalformedScheduleError(f"Invalid coordinate value: {value!r}")


def parse_duration(duration_str):
    """Returns the number of seconds in an ISO 8601 duration such as PT1H5M30S."""
    if not isinstance(duration_str, str):
        raise InvalidDurationError(f"Missing duration: {duration_str!r}")

    match = DURATION_PATTERN.match(duration_str.strip())

    if not match or duration_str.strip() in ('P', 'PT', '-P', '-PT'):
        raise InvalidDurationError(f"Unrecognised duration: {duration_str!r}")
    if match.group(1):
        raise InvalidDurationError(f"Negative duration: {duration_str!r}")

    days_ = int(match.group(2)) if match.group(2) else 0
    hours = int(match.group(3)) if match.group(3) else 0
    minutes = int(match.group(4)) if match.group(4) else 0
    seconds = float(match.group(5)) if match.group(5) else 0

    return int(days_ * 86400 + hours * 3600 + minutes * 60 + seconds)


def parse_optional_duration(duration_str):
    if duration_str is None or duration_str == '':
        return None
    return parse_duration(duration_str)


def parse_time(time_str):
    """Returns seconds after midnight for a HH:MM[:SS] time of day."""
    try:
        parts = [int(part) for part in time_str.strip().split(':')]
    except (AttributeError, ValueError):
        raise MalformedScheduleError(f"Invalid time of day: {time_str!r}")

    if len(parts) == 2:
        parts.append(0)
    if len(parts) != 3:
        raise MalformedScheduleError(f"Invalid time of day: {time_str!r}")

    hours, minutes, seconds = parts
    return hours * 3600 + minutes * 60 + seconds


def format_time(total_seconds):
    """Returns HH:MM:SS for a number of seconds after midnight, keeping hours beyond 24."""
    total_seconds = int(total_seconds)

    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    seconds = total_seconds % 60

    return f"{hours:02}:{minutes:02}:{seconds:02}"


def parse_date(date_str):
    try:
        return date.fromisoformat(date_str.strip()[:10])
    except (AttributeError, ValueError):
        raise MalformedScheduleError(f"Invalid date: {date_str!r}")


def date_range(start, end, mask=None):
    """Dates from start to end inclusive, keeping only the weekdays set in mask when one is given."""
    dates = []
    current = start

    while current <= end:
        if mask is None or mask[current.weekday()]:
            dates.append(current)
        current += timedelta(days=1)

    return dates
