"""Port interfaces for database adapters.

These protocols define the contracts that database adapters must implement.
The core domain depends only on these interfaces, not concrete implementations.
"""

from typing import Protocol, runtime_checkable

from influxdb_reporter.core.models import BatchPoints, Point


@runtime_checkable
class InfluxDBPort(Protocol):
    """Port for the time-series database the reporter writes to.

    Adapters implementing this protocol create the target database once and
    accept points either as a batch or one at a time.
    Examples: HTTPInfluxDB, InMemoryInfluxDB.
    """

    def create_database(self, name: str) -> None:
        """Create the database if it does not exist.

        Raises:
            DatabaseConnectionError: If the endpoint is unreachable or
                rejects the request.
        """
        ...

    def write_batch(self, batch: BatchPoints) -> None:
        """Write every point of a batch in one call.

        Raises:
            WriteError: If the write was not accepted.
        """
        ...

    def write_point(self, database: str, retention_policy: str, point: Point) -> None:
        """Write a single point.

        Raises:
            WriteError: If the write was not accepted.
        """
        ...
