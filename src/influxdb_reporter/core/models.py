"""Core domain models for registry readings and InfluxDB points."""

import math
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum


@dataclass(frozen=True)
class Statistics:
    """Summary of a histogram or timer reservoir at snapshot time.

    Attributes:
        size: Number of samples currently held by the reservoir.
        max: Largest sample.
        mean: Arithmetic mean of the samples.
        min: Smallest sample.
        stddev: Standard deviation of the samples.
        p50 .. p999: Quantiles over the samples.
    """

    size: int
    max: float
    mean: float
    min: float
    stddev: float
    p50: float
    p75: float
    p95: float
    p98: float
    p99: float
    p999: float

    @classmethod
    def from_values(cls, values: Iterable[float]) -> "Statistics":
        """Summarize an exact sample set.

        Quantiles use linear interpolation between closest ranks and the
        standard deviation is the population one. An empty sample set
        yields all zeros.
        """
        ordered = sorted(float(v) for v in values)
        if not ordered:
            return cls(0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0)
        size = len(ordered)
        mean = math.fsum(ordered) / size
        variance = math.fsum((v - mean) ** 2 for v in ordered) / size
        return cls(
            size=size,
            max=ordered[-1],
            mean=mean,
            min=ordered[0],
            stddev=math.sqrt(variance),
            p50=_quantile(ordered, 0.5),
            p75=_quantile(ordered, 0.75),
            p95=_quantile(ordered, 0.95),
            p98=_quantile(ordered, 0.98),
            p99=_quantile(ordered, 0.99),
            p999=_quantile(ordered, 0.999),
        )


def _quantile(ordered: list[float], q: float) -> float:
    position = q * (len(ordered) - 1)
    lower = math.floor(position)
    upper = math.ceil(position)
    if lower == upper:
        return ordered[lower]
    weight = position - lower
    return ordered[lower] + (ordered[upper] - ordered[lower]) * weight


@dataclass(frozen=True)
class GaugeReading:
    """Current value of a gauge."""

    value: object


@dataclass(frozen=True)
class CounterReading:
    """Cumulative count of a counter."""

    count: int


@dataclass(frozen=True)
class HistogramReading:
    """Lifetime update count plus a summary of the current reservoir."""

    count: int
    statistics: Statistics


@dataclass(frozen=True)
class MeterReading:
    """Mark count and moving rates of a meter.

    Rates are expressed in events per second.
    """

    count: int
    m1_rate: float
    m5_rate: float
    m15_rate: float
    mean_rate: float


@dataclass(frozen=True)
class TimerReading:
    """Rate tracker plus duration reservoir of a timer.

    Rates are events per second; statistics are durations in nanoseconds.
    """

    count: int
    m1_rate: float
    m5_rate: float
    m15_rate: float
    mean_rate: float
    statistics: Statistics


Reading = GaugeReading | CounterReading | HistogramReading | MeterReading | TimerReading
MetricFilter = Callable[[str, Reading], bool]


def accept_all(name: str, reading: Reading) -> bool:
    """Default metric filter, reports every instrument."""
    return True


@dataclass(frozen=True)
class RegistrySnapshot:
    """Readings of every instrument in a registry at one point in time.

    Any of the five mappings may be None, which is the same as empty.
    """

    gauges: Mapping[str, GaugeReading] | None = None
    counters: Mapping[str, CounterReading] | None = None
    histograms: Mapping[str, HistogramReading] | None = None
    meters: Mapping[str, MeterReading] | None = None
    timers: Mapping[str, TimerReading] | None = None

    def filtered(self, predicate: MetricFilter) -> "RegistrySnapshot":
        """Return a snapshot holding only the entries accepted by predicate."""

        def keep(mapping: Mapping[str, Reading] | None) -> dict[str, Reading] | None:
            if mapping is None:
                return None
            return {name: r for name, r in mapping.items() if predicate(name, r)}

        return RegistrySnapshot(
            gauges=keep(self.gauges),
            counters=keep(self.counters),
            histograms=keep(self.histograms),
            meters=keep(self.meters),
            timers=keep(self.timers),
        )


@dataclass(frozen=True)
class Point:
    """A single InfluxDB data point.

    Attributes:
        measurement: Series name.
        timestamp: Milliseconds since the Unix epoch.
        fields: Numeric payload, never empty.
        tags: Key-value labels for filtering at query time.
    """

    measurement: str
    timestamp: int
    fields: dict[str, float | int]
    tags: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.measurement:
            raise ValueError("Point measurement must not be empty")
        if not self.fields:
            raise ValueError(f"Point {self.measurement!r} must have at least one field")
        names = [self.measurement, *self.fields, *self.tags, *self.tags.values()]
        # Line protocol has no escape for line breaks
        for name in names:
            if isinstance(name, str) and ("\n" in name or "\r" in name):
                raise ValueError(
                    f"Point {self.measurement!r} contains a line break in {name!r}"
                )


class ConsistencyLevel(Enum):
    """Write consistency requested from an InfluxDB cluster."""

    ALL = "all"
    ANY = "any"
    ONE = "one"
    QUORUM = "quorum"


class TransmissionMode(Enum):
    """How one report cycle is sent to the database."""

    BATCH = "batch"
    PER_POINT = "per_point"


@dataclass(frozen=True)
class BatchPoints:
    """Points sent to one database target in a single write."""

    database: str
    retention_policy: str
    consistency: ConsistencyLevel
    points: list[Point] = field(default_factory=list)
