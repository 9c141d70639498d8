"""Write dispatcher sending one report cycle's points to the database."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from influxdb_reporter.core.errors import WriteError
from influxdb_reporter.core.models import (
    BatchPoints,
    ConsistencyLevel,
    Point,
    TransmissionMode,
)
from influxdb_reporter.core.ports import InfluxDBPort

logger = logging.getLogger(__name__)

DEFAULT_RETENTION_POLICY = "default"


@dataclass(frozen=True)
class WriteFailure:
    """A write that was not accepted.

    Attributes:
        cause: The exception raised by the database adapter.
        point: The point that failed, or None when a whole batch failed.
    """

    cause: Exception
    point: Point | None = None


@dataclass
class DispatchResult:
    """Outcome of dispatching one report cycle.

    Attributes:
        attempted: Number of points handed to the dispatcher.
        delivered: Number of points the database accepted.
        failures: One entry per failed write call.
    """

    attempted: int = 0
    delivered: int = 0
    failures: list[WriteFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True when every write of the cycle succeeded."""
        return not self.failures

    def raise_for_failures(self) -> None:
        """Raise WriteError if any write of the cycle failed."""
        if self.failures:
            raise WriteError(
                f"{self.attempted - self.delivered} of {self.attempted} points "
                f"were not delivered ({len(self.failures)} failed writes)",
                self.failures,
            )


class WriteDispatcher:
    """Sends points to one database, as a batch or point by point.

    Any exception from a write is captured in the returned DispatchResult
    rather than raised; nothing is retried or kept for the next cycle.
    """

    def __init__(
        self,
        database: InfluxDBPort,
        database_name: str,
        mode: TransmissionMode = TransmissionMode.BATCH,
        retention_policy: str = DEFAULT_RETENTION_POLICY,
    ) -> None:
        self._database = database
        self._database_name = database_name
        self._mode = mode
        self._retention_policy = retention_policy

    @property
    def mode(self) -> TransmissionMode:
        return self._mode

    def dispatch(self, points: Sequence[Point]) -> DispatchResult:
        """Send a cycle's points using the configured transmission mode.

        Args:
            points: Points produced by one report cycle.

        Returns:
            DispatchResult describing what was delivered.
        """
        if not points:
            return DispatchResult()
        if self._mode is TransmissionMode.BATCH:
            return self._dispatch_batch(points)
        return self._dispatch_each(points)

    def _dispatch_batch(self, points: Sequence[Point]) -> DispatchResult:
        batch = BatchPoints(
            database=self._database_name,
            retention_policy=self._retention_policy,
            consistency=ConsistencyLevel.ALL,
            points=list(points),
        )
        result = DispatchResult(attempted=len(points))
        try:
            self._database.write_batch(batch)
        except Exception as exc:
            logger.error(
                "Batch write of %d points to %s failed: %s",
                len(points),
                self._database_name,
                exc,
            )
            result.failures.append(WriteFailure(cause=exc))
            return result
        result.delivered = len(points)
        return result

    def _dispatch_each(self, points: Sequence[Point]) -> DispatchResult:
        result = DispatchResult(attempted=len(points))
        for point in points:
            try:
                self._database.write_point(
                    self._database_name, self._retention_policy, point
                )
            except Exception as exc:
                logger.error(
                    "Write of %s to %s failed: %s",
                    point.measurement,
                    self._database_name,
                    exc,
                )
                result.failures.append(WriteFailure(cause=exc, point=point))
                continue
            result.delivered += 1
        return result
