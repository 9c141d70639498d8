"""Shared test fixtures for all test modules."""

from collections.abc import Callable, Iterator

import pytest

from influxdb_reporter.adapters.storage.in_memory import InMemoryInfluxDB
from influxdb_reporter.config import ReporterConfig
from influxdb_reporter.reporter import InfluxDBReporter
from tests.helpers import TEST_DATABASE


class SteppingClock:
    """Clock returning a fixed start time advanced by ``step`` ms per call."""

    def __init__(self, start: int = 1_702_300_000_000, step: int = 5_000) -> None:
        self.now = start
        self.step = step

    def __call__(self) -> int:
        current = self.now
        self.now += self.step
        return current


@pytest.fixture
def clock() -> SteppingClock:
    """Deterministic clock for report timestamps."""
    return SteppingClock()


@pytest.fixture
def database() -> InMemoryInfluxDB:
    """Fixture providing an empty in-memory database."""
    return InMemoryInfluxDB()


@pytest.fixture
def make_reporter(
    database: InMemoryInfluxDB, clock: SteppingClock
) -> Iterator[Callable[..., InfluxDBReporter]]:
    """Factory fixture building reporters against the in-memory database.

    Usage:
        def test_something(make_reporter, database):
            reporter = make_reporter(tags={"host": "web-1"})
            reporter.report(snapshot)
            database.points("metrics_test")
    """
    reporters: list[InfluxDBReporter] = []

    def _make(**overrides: object) -> InfluxDBReporter:
        settings: dict[str, object] = {"database": TEST_DATABASE, "clock": clock}
        settings.update(overrides)
        reporter = InfluxDBReporter(ReporterConfig(**settings), database=database)
        reporters.append(reporter)
        return reporter

    yield _make
    for reporter in reporters:
        reporter.close()
