"""Builders for registry readings used across test modules."""

from influxdb_reporter.core.models import (
    HistogramReading,
    MeterReading,
    Statistics,
    TimerReading,
)

TEST_DATABASE = "metrics_test"


def histogram_of(*values: float) -> HistogramReading:
    """Histogram reading for an exact sample set."""
    return HistogramReading(count=len(values), statistics=Statistics.from_values(values))


def meter_of(count: int, rate: float = 0.0) -> MeterReading:
    """Meter reading with every rate set to ``rate`` events per second."""
    return MeterReading(
        count=count, m1_rate=rate, m5_rate=rate, m15_rate=rate, mean_rate=rate
    )


def timer_of(*durations_ms: float, rate: float = 0.0) -> TimerReading:
    """Timer reading for operations lasting ``durations_ms`` milliseconds."""
    nanos = [d * 1_000_000 for d in durations_ms]
    return TimerReading(
        count=len(durations_ms),
        m1_rate=rate,
        m5_rate=rate,
        m15_rate=rate,
        mean_rate=rate,
        statistics=Statistics.from_values(nanos),
    )
