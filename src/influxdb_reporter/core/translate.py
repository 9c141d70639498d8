"""Translation of registry readings into InfluxDB points.

Each instrument type has its own pure function producing one Point. The
measurement is the instrument's registered name and the configured tags are
attached to every point. Instruments of different types sharing a name end
up in the same measurement.
"""

import logging
import math
from collections.abc import Callable, Mapping
from numbers import Real

from influxdb_reporter.core.errors import TranslationError
from influxdb_reporter.core.models import (
    CounterReading,
    GaugeReading,
    HistogramReading,
    MeterReading,
    Point,
    Reading,
    RegistrySnapshot,
    Statistics,
    TimerReading,
)
from influxdb_reporter.core.units import TimeUnit, convert_duration, convert_rate

logger = logging.getLogger(__name__)

_STATISTIC_FIELDS = (
    "max",
    "mean",
    "min",
    "stddev",
    "p50",
    "p75",
    "p95",
    "p98",
    "p99",
    "p999",
)


def _build_point(
    name: str, timestamp: int, fields: dict[str, float | int], tags: Mapping[str, str]
) -> Point:
    if not isinstance(name, str) or not name:
        raise TranslationError(name, "metric name is empty or not a string")
    for key, value in fields.items():
        _check_number(name, key, value)
    try:
        return Point(
            measurement=name, timestamp=timestamp, fields=fields, tags=dict(tags)
        )
    except ValueError as exc:
        raise TranslationError(name, str(exc)) from exc


def _is_number(value: object) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _check_number(name: str, key: str, value: object) -> float | int:
    if not _is_number(value):
        raise TranslationError(name, f"field {key!r} is not numeric: {value!r}")
    try:
        finite = math.isfinite(value)  # type: ignore[arg-type]
    except OverflowError:
        finite = False
    if not finite:
        raise TranslationError(name, f"field {key!r} is not finite: {value!r}")
    return value  # type: ignore[return-value]


def _statistic_fields(
    name: str, statistics: object, convert: Callable[[float], float]
) -> dict[str, float | int]:
    if not isinstance(statistics, Statistics):
        raise TranslationError(name, f"statistics missing or malformed: {statistics!r}")
    fields: dict[str, float | int] = {
        "size": _check_number(name, "size", statistics.size)
    }
    for key in _STATISTIC_FIELDS:
        fields[key] = convert(_check_number(name, key, getattr(statistics, key)))
    return fields


def _rate_fields(
    name: str, reading: MeterReading | TimerReading, rate_unit: TimeUnit
) -> dict[str, float | int]:
    fields: dict[str, float | int] = {"count": reading.count}
    for key in ("m1_rate", "m5_rate", "m15_rate", "mean_rate"):
        fields[key] = convert_rate(_check_number(name, key, getattr(reading, key)), rate_unit)
    return fields


def gauge_point(
    name: str, reading: GaugeReading, timestamp: int, tags: Mapping[str, str]
) -> Point:
    """Create a point carrying a gauge's current value.

    Args:
        name: Registered gauge name, used as measurement.
        reading: The gauge reading.
        timestamp: Report time in milliseconds.
        tags: Tags attached to the point.

    Returns:
        Point with a single ``value`` field.

    Raises:
        TranslationError: If the gauge value is not a finite number.
    """
    value = reading.value
    if not _is_number(value):
        raise TranslationError(name, f"gauge value is not numeric: {value!r}")
    return _build_point(name, timestamp, {"value": value}, tags)  # type: ignore[dict-item]


def counter_point(
    name: str, reading: CounterReading, timestamp: int, tags: Mapping[str, str]
) -> Point:
    """Create a point carrying a counter's cumulative count."""
    return _build_point(name, timestamp, {"count": reading.count}, tags)


def histogram_point(
    name: str, reading: HistogramReading, timestamp: int, tags: Mapping[str, str]
) -> Point:
    """Create a point with a histogram's count and reservoir statistics.

    Statistics are reported as recorded, without unit conversion.
    """
    fields: dict[str, float | int] = {"count": reading.count}
    fields.update(_statistic_fields(name, reading.statistics, float))
    return _build_point(name, timestamp, fields, tags)


def meter_point(
    name: str,
    reading: MeterReading,
    timestamp: int,
    tags: Mapping[str, str],
    rate_unit: TimeUnit = TimeUnit.SECONDS,
) -> Point:
    """Create a point with a meter's count and rates converted to rate_unit."""
    return _build_point(name, timestamp, _rate_fields(name, reading, rate_unit), tags)


def timer_point(
    name: str,
    reading: TimerReading,
    timestamp: int,
    tags: Mapping[str, str],
    rate_unit: TimeUnit = TimeUnit.SECONDS,
    duration_unit: TimeUnit = TimeUnit.MILLISECONDS,
) -> Point:
    """Create a point with a timer's rates and duration statistics.

    Args:
        name: Registered timer name, used as measurement.
        reading: The timer reading; statistics are in nanoseconds.
        timestamp: Report time in milliseconds.
        tags: Tags attached to the point.
        rate_unit: Unit the rate fields are expressed in.
        duration_unit: Unit the duration statistics are expressed in.

    Returns:
        Point with meter rate fields, ``size`` and the duration statistics.
    """
    fields = _rate_fields(name, reading, rate_unit)
    fields.update(
        _statistic_fields(
            name, reading.statistics, lambda nanos: convert_duration(nanos, duration_unit)
        )
    )
    return _build_point(name, timestamp, fields, tags)


def translate(
    snapshot: RegistrySnapshot,
    timestamp: int,
    tags: Mapping[str, str] | None = None,
    rate_unit: TimeUnit = TimeUnit.SECONDS,
    duration_unit: TimeUnit = TimeUnit.MILLISECONDS,
) -> list[Point]:
    """Translate a registry snapshot into points.

    Gauges, counters, histograms, meters and timers are walked in that order,
    each mapping in its own iteration order. Readings that fail translation
    are logged and skipped.

    Args:
        snapshot: Registry readings; absent mappings contribute nothing.
        timestamp: Report time in milliseconds, shared by every point.
        tags: Tags attached to every point.
        rate_unit: Unit for meter and timer rates.
        duration_unit: Unit for timer durations.

    Returns:
        One point per translatable reading.
    """
    base_tags = dict(tags or {})
    translators: list[
        tuple[Mapping[str, Reading] | None, type, Callable[..., Point]]
    ] = [
        (snapshot.gauges, GaugeReading, gauge_point),
        (snapshot.counters, CounterReading, counter_point),
        (snapshot.histograms, HistogramReading, histogram_point),
        (
            snapshot.meters,
            MeterReading,
            lambda n, r, t, g: meter_point(n, r, t, g, rate_unit),
        ),
        (
            snapshot.timers,
            TimerReading,
            lambda n, r, t, g: timer_point(n, r, t, g, rate_unit, duration_unit),
        ),
    ]

    points: list[Point] = []
    for readings, reading_type, to_point in translators:
        if not readings:
            continue
        for name, reading in readings.items():
            try:
                if not isinstance(reading, reading_type):
                    raise TranslationError(
                        name, f"expected {reading_type.__name__}, got {reading!r}"
                    )
                points.append(to_point(name, reading, timestamp, base_tags))
            except TranslationError as exc:
                logger.warning("Skipping metric: %s", exc)
    return points
