"""influxdb_reporter - report metrics registry snapshots to InfluxDB."""

from influxdb_reporter.adapters.storage import HTTPInfluxDB, InMemoryInfluxDB
from influxdb_reporter.config import ReporterConfig
from influxdb_reporter.core.dispatch import DispatchResult, WriteDispatcher, WriteFailure
from influxdb_reporter.core.errors import (
    ConfigurationError,
    DatabaseConnectionError,
    ReporterError,
    TranslationError,
    WriteError,
)
from influxdb_reporter.core.models import (
    BatchPoints,
    ConsistencyLevel,
    CounterReading,
    GaugeReading,
    HistogramReading,
    MeterReading,
    Point,
    RegistrySnapshot,
    Statistics,
    TimerReading,
    TransmissionMode,
)
from influxdb_reporter.core.ports import InfluxDBPort
from influxdb_reporter.core.translate import translate
from influxdb_reporter.core.units import TimeUnit
from influxdb_reporter.reporter import InfluxDBReporter
from influxdb_reporter.scheduling import PeriodicReporter

__all__ = [
    # Reporter
    "InfluxDBReporter",
    "PeriodicReporter",
    "ReporterConfig",
    # Models
    "BatchPoints",
    "ConsistencyLevel",
    "CounterReading",
    "GaugeReading",
    "HistogramReading",
    "MeterReading",
    "Point",
    "RegistrySnapshot",
    "Statistics",
    "TimerReading",
    "TimeUnit",
    "TransmissionMode",
    # Translation and dispatch
    "DispatchResult",
    "WriteDispatcher",
    "WriteFailure",
    "translate",
    # Ports and adapters
    "HTTPInfluxDB",
    "InMemoryInfluxDB",
    "InfluxDBPort",
    # Errors
    "ConfigurationError",
    "DatabaseConnectionError",
    "ReporterError",
    "TranslationError",
    "WriteError",
]
