"""Database adapters implementing core ports."""

from influxdb_reporter.adapters.storage.in_memory import InMemoryInfluxDB
from influxdb_reporter.adapters.storage.influxdb_http import HTTPInfluxDB

__all__ = [
    "HTTPInfluxDB",
    "InMemoryInfluxDB",
]
