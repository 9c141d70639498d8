"""InfluxDB line protocol encoder for points."""

from collections.abc import Iterable

from influxdb_reporter.core.models import Point

_MEASUREMENT_ESCAPES = str.maketrans({"\\": "\\\\", ",": r"\,", " ": r"\ "})
_KEY_ESCAPES = str.maketrans({"\\": "\\\\", ",": r"\,", "=": r"\=", " ": r"\ "})


def escape_measurement(name: str) -> str:
    """Escape backslashes, commas and spaces in a measurement name."""
    return name.translate(_MEASUREMENT_ESCAPES)


def escape_key(key: str) -> str:
    """Escape special characters in a tag key, tag value or field key.

    Backslashes are doubled so a trailing one cannot escape the separator
    that follows; commas, equals signs and spaces get a backslash.
    """
    return key.translate(_KEY_ESCAPES)


def format_field_value(value: float | int) -> str:
    """Format a numeric field value as a line protocol float.

    Integers are written as floats too so a series keeps one field type
    whichever Python type the registry hands over.
    """
    return repr(float(value))


def encode_point(point: Point) -> str:
    """Encode a single point as one line of line protocol.

    Args:
        point: The point to encode.

    Returns:
        ``measurement[,tag=value...] field=value[,field=value...] timestamp``
        with tags sorted by key and the timestamp in milliseconds.
    """
    head = escape_measurement(point.measurement)
    for key in sorted(point.tags):
        value = point.tags[key]
        # Line protocol rejects empty tag keys and values
        if not key or not value:
            continue
        head += f",{escape_key(key)}={escape_key(value)}"
    fields = ",".join(
        f"{escape_key(key)}={format_field_value(value)}"
        for key, value in point.fields.items()
    )
    return f"{head} {fields} {point.timestamp}"


def encode_points(points: Iterable[Point]) -> str:
    """Encode points to newline-delimited line protocol.

    Args:
        points: An iterable of Point objects.

    Returns:
        One line per point, each terminated by a newline.
        Empty string if no points.
    """
    lines = [encode_point(point) for point in points]
    if not lines:
        return ""
    return "\n".join(lines) + "\n"
