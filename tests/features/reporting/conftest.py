"""BDD step definitions for report cycle features."""

from dataclasses import dataclass, field

import pytest
from pytest_bdd import given, parsers, then, when

from influxdb_reporter.adapters.storage.in_memory import InMemoryInfluxDB
from influxdb_reporter.config import ReporterConfig
from influxdb_reporter.core.dispatch import DispatchResult
from influxdb_reporter.core.models import (
    CounterReading,
    GaugeReading,
    RegistrySnapshot,
    TransmissionMode,
)
from influxdb_reporter.reporter import InfluxDBReporter
from tests.helpers import histogram_of, meter_of, timer_of


@dataclass
class ReportingScenarioContext:
    """State shared between the steps of one scenario."""

    database: InMemoryInfluxDB = field(default_factory=InMemoryInfluxDB)
    database_name: str = ""
    reporter: InfluxDBReporter | None = None
    results: list[DispatchResult] = field(default_factory=list)

    def report(self, snapshot: RegistrySnapshot) -> None:
        assert self.reporter is not None, "reporter not configured"
        self.results.append(self.reporter.report(snapshot))


def _numbers(raw: str) -> list[float]:
    return [float(item) for item in raw.split(",")]


def _names(raw: str) -> list[str]:
    return [item.strip().strip('"') for item in raw.split(",")]


@pytest.fixture
def ctx() -> ReportingScenarioContext:
    """Fresh scenario context for each test."""
    return ReportingScenarioContext()


def _build_reporter(ctx: ReportingScenarioContext, **settings: object) -> None:
    ctx.reporter = InfluxDBReporter(
        ReporterConfig(database=ctx.database_name, **settings), database=ctx.database
    )


# === Background Steps ===
@given("an in-memory InfluxDB")
def step_in_memory_database(ctx: ReportingScenarioContext) -> None:
    ctx.database = InMemoryInfluxDB()


@given(parsers.parse('a reporter writing to database "{name}"'))
def step_reporter(ctx: ReportingScenarioContext, name: str) -> None:
    ctx.database_name = name
    _build_reporter(ctx)


@given("the reporter sends points one at a time")
def step_per_point_reporter(ctx: ReportingScenarioContext) -> None:
    _build_reporter(ctx, mode=TransmissionMode.PER_POINT)


@given(parsers.parse('writes to measurement "{name}" are rejected'))
def step_rejecting_measurement(ctx: ReportingScenarioContext, name: str) -> None:
    ctx.database.failing_measurements.add(name)


# === Report Steps ===
@when(parsers.parse('gauge "{name}" reads {value:d} and is reported'))
def step_report_gauge(ctx: ReportingScenarioContext, name: str, value: int) -> None:
    ctx.report(RegistrySnapshot(gauges={name: GaugeReading(value)}))


@when(parsers.parse('counter "{name}" counts {count:d} and is reported'))
def step_report_counter(ctx: ReportingScenarioContext, name: str, count: int) -> None:
    ctx.report(RegistrySnapshot(counters={name: CounterReading(count)}))


@when(parsers.parse('histogram "{name}" with samples {samples} is reported'))
def step_report_histogram(ctx: ReportingScenarioContext, name: str, samples: str) -> None:
    ctx.report(RegistrySnapshot(histograms={name: histogram_of(*_numbers(samples))}))


@when(parsers.parse('meter "{name}" marked {marks} is reported'))
def step_report_meter(ctx: ReportingScenarioContext, name: str, marks: str) -> None:
    total = int(sum(_numbers(marks)))
    ctx.report(RegistrySnapshot(meters={name: meter_of(total)}))


@when(parsers.parse('timer "{name}" timing {durations} ms is reported'))
def step_report_timer(ctx: ReportingScenarioContext, name: str, durations: str) -> None:
    ctx.report(RegistrySnapshot(timers={name: timer_of(*_numbers(durations))}))


@when(
    parsers.parse(
        'a snapshot with only counter "{name}" counting {count:d} is reported'
    )
)
def step_report_counter_only(
    ctx: ReportingScenarioContext, name: str, count: int
) -> None:
    ctx.report(
        RegistrySnapshot(
            gauges=None,
            counters={name: CounterReading(count)},
            histograms=None,
            meters=None,
            timers=None,
        )
    )


@when(parsers.parse("gauges {names} are reported together"))
def step_report_gauges(ctx: ReportingScenarioContext, names: str) -> None:
    gauges = {name: GaugeReading(i) for i, name in enumerate(_names(names))}
    ctx.report(RegistrySnapshot(gauges=gauges))


# === Assertion Steps ===
@then(parsers.parse('measurement "{name}" has field "{field_name}" values {values}'))
def step_field_values(
    ctx: ReportingScenarioContext, name: str, field_name: str, values: str
) -> None:
    stored = ctx.database.field_values(ctx.database_name, name, field_name)
    assert stored == pytest.approx(_numbers(values))


@then(parsers.parse('measurement "{name}" has {n:d} distinct timestamps'))
def step_distinct_timestamps(ctx: ReportingScenarioContext, name: str, n: int) -> None:
    points = ctx.database.points(ctx.database_name, name)
    assert len({p.timestamp for p in points}) == n


@then("the cycle succeeded")
def step_cycle_succeeded(ctx: ReportingScenarioContext) -> None:
    assert ctx.results[-1].ok


@then(parsers.parse("the cycle failed with {n:d} failed write"))
def step_cycle_failed(ctx: ReportingScenarioContext, n: int) -> None:
    result = ctx.results[-1]
    assert not result.ok
    assert len(result.failures) == n


@then(
    parsers.re(r"the database holds (?P<n>\d+) points?"),
    converters={"n": int},
)
def step_point_count(ctx: ReportingScenarioContext, n: int) -> None:
    assert len(ctx.database.points(ctx.database_name)) == n


@then(parsers.parse("the database holds points for {names}"))
def step_points_for(ctx: ReportingScenarioContext, names: str) -> None:
    stored = [p.measurement for p in ctx.database.points(ctx.database_name)]
    assert stored == _names(names)
