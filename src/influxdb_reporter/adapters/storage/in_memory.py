"""In-memory database adapter."""

from collections import defaultdict
from collections.abc import Iterable

from influxdb_reporter.core.errors import DatabaseConnectionError, WriteError
from influxdb_reporter.core.models import BatchPoints, Point


class InMemoryInfluxDB:
    """In-memory implementation of InfluxDBPort.

    Keeps written points in lists keyed by database. Suitable for testing
    and local runs where no InfluxDB server is available.

    Args:
        failing_measurements: Writes touching any of these measurements are
            rejected with WriteError.
        reachable: When False, create_database raises DatabaseConnectionError.
    """

    def __init__(
        self,
        failing_measurements: Iterable[str] = (),
        reachable: bool = True,
    ) -> None:
        self.databases: set[str] = set()
        self.batches: list[BatchPoints] = []
        self.write_calls = 0
        self.failing_measurements = set(failing_measurements)
        self.reachable = reachable
        self._points: dict[str, list[tuple[str, Point]]] = defaultdict(list)

    def create_database(self, name: str) -> None:
        """Create the database if it does not exist."""
        if not self.reachable:
            raise DatabaseConnectionError(
                f"Cannot create database {name!r}: endpoint unreachable"
            )
        self.databases.add(name)

    def write_batch(self, batch: BatchPoints) -> None:
        """Store every point of the batch, or none of them."""
        self.write_calls += 1
        self._check_database(batch.database)
        for point in batch.points:
            self._check_point(point)
        self.batches.append(batch)
        for point in batch.points:
            self._points[batch.database].append((batch.retention_policy, point))

    def write_point(self, database: str, retention_policy: str, point: Point) -> None:
        """Store a single point."""
        self.write_calls += 1
        self._check_database(database)
        self._check_point(point)
        self._points[database].append((retention_policy, point))

    def points(self, database: str, measurement: str | None = None) -> list[Point]:
        """Return stored points in write order, optionally for one measurement."""
        return [
            point
            for _, point in self._points.get(database, [])
            if measurement is None or point.measurement == measurement
        ]

    def field_values(self, database: str, measurement: str, field: str) -> list[float | int]:
        """Return one field of a measurement across stored points, in write order."""
        return [
            point.fields[field]
            for point in self.points(database, measurement)
            if field in point.fields
        ]

    def _check_database(self, database: str) -> None:
        if database not in self.databases:
            raise WriteError(f"database not found: {database}")

    def _check_point(self, point: Point) -> None:
        if point.measurement in self.failing_measurements:
            raise WriteError(f"write rejected for measurement {point.measurement}")
