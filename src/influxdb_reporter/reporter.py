"""Reporter turning registry snapshots into InfluxDB writes."""

import logging
from types import TracebackType

from influxdb_reporter.adapters.storage.influxdb_http import HTTPInfluxDB
from influxdb_reporter.config import ReporterConfig
from influxdb_reporter.core.dispatch import DispatchResult, WriteDispatcher
from influxdb_reporter.core.errors import DatabaseConnectionError
from influxdb_reporter.core.models import Point, RegistrySnapshot
from influxdb_reporter.core.ports import InfluxDBPort
from influxdb_reporter.core.translate import translate

logger = logging.getLogger(__name__)


class InfluxDBReporter:
    """Reports registry snapshots to an InfluxDB database.

    The database named in the config is created on construction; a failure
    there raises DatabaseConnectionError and no reporter is built. Each call
    to report() is an independent cycle: failed writes are logged and
    returned in the result, never retried.

    Example:
        ```python
        from influxdb_reporter import InfluxDBReporter, ReporterConfig

        reporter = InfluxDBReporter(ReporterConfig(database="app_metrics"))
        result = reporter.report(snapshot)
        ```
    """

    def __init__(
        self,
        config: ReporterConfig | None = None,
        database: InfluxDBPort | None = None,
    ) -> None:
        """Initialize the reporter and create the target database.

        Args:
            config: Reporter settings; defaults to ReporterConfig().
            database: Database adapter. An HTTPInfluxDB built from the
                config is used when omitted.

        Raises:
            DatabaseConnectionError: If the database cannot be created.
        """
        self._config = config or ReporterConfig()
        self._owns_database = database is None
        if database is None:
            database = HTTPInfluxDB(
                self._config.url,
                self._config.username,
                self._config.password,
                timeout=self._config.timeout,
            )
        self._database = database
        try:
            self._database.create_database(self._config.database)
        except DatabaseConnectionError:
            self.close()
            raise
        except Exception as exc:
            self.close()
            raise DatabaseConnectionError(
                f"Creating database {self._config.database!r} failed: {exc}",
                url=self._config.url,
            ) from exc
        self._dispatcher = WriteDispatcher(
            self._database, self._config.database, mode=self._config.mode
        )

    @property
    def config(self) -> ReporterConfig:
        return self._config

    def points_for(self, snapshot: RegistrySnapshot, timestamp: int) -> list[Point]:
        """Filter and translate a snapshot without sending it."""
        config = self._config
        return translate(
            snapshot.filtered(config.metric_filter),
            timestamp,
            tags=config.tags,
            rate_unit=config.rate_unit,
            duration_unit=config.duration_unit,
        )

    def report(self, snapshot: RegistrySnapshot) -> DispatchResult:
        """Run one report cycle.

        Args:
            snapshot: Current readings of the registry.

        Returns:
            DispatchResult; check ``ok`` or call ``raise_for_failures()``.
        """
        timestamp = self._config.clock()
        points = self.points_for(snapshot, timestamp)
        result = self._dispatcher.dispatch(points)
        if result.ok:
            logger.debug(
                "Reported %d points to %s", result.delivered, self._config.database
            )
        else:
            logger.error(
                "Report cycle at %d delivered %d of %d points to %s",
                timestamp,
                result.delivered,
                result.attempted,
                self._config.database,
            )
        return result

    def close(self) -> None:
        """Release the HTTP connection if this reporter created it."""
        if self._owns_database and isinstance(self._database, HTTPInfluxDB):
            self._database.close()

    def __enter__(self) -> "InfluxDBReporter":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()
