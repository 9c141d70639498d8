"""Background driver that runs report cycles at a fixed period."""

import logging
import threading
from collections.abc import Callable
from typing import Protocol

from influxdb_reporter.core.dispatch import DispatchResult
from influxdb_reporter.core.models import RegistrySnapshot

logger = logging.getLogger(__name__)

SnapshotProvider = Callable[[], RegistrySnapshot]


class Reporter(Protocol):
    def report(self, snapshot: RegistrySnapshot) -> DispatchResult: ...


class PeriodicReporter:
    """Calls ``reporter.report(provider())`` every ``period`` seconds.

    A cycle that raises is logged and the loop carries on with the next one.
    Background cycles run on a single thread and never overlap.

    Args:
        reporter: Anything with a ``report(snapshot)`` method.
        provider: Returns a fresh registry snapshot per cycle.
        period: Seconds between the start of two cycles.
        name: Name of the background thread.
    """

    def __init__(
        self,
        reporter: Reporter,
        provider: SnapshotProvider,
        period: float,
        name: str = "influxdb-reporter",
    ) -> None:
        if period <= 0:
            raise ValueError(f"period must be positive, got {period}")
        self._reporter = reporter
        self._provider = provider
        self._period = period
        self._name = name
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the background thread; the first cycle runs after one period."""
        if self.running:
            raise RuntimeError("PeriodicReporter is already running")
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name=self._name, daemon=True)
        self._thread.start()
        logger.info("Started %s with a period of %ss", self._name, self._period)

    def stop(self, timeout: float | None = None) -> None:
        """Signal the loop to stop and wait for the current cycle to finish.

        If the thread outlives the timeout the driver still counts as running,
        so start() cannot launch a second loop next to it.
        """
        self._stop.set()
        if self._thread is None:
            return
        self._thread.join(timeout)
        if self._thread.is_alive():
            logger.warning("%s did not stop within %ss", self._name, timeout)
            return
        self._thread = None
        logger.info("Stopped %s", self._name)

    def report_now(self) -> DispatchResult:
        """Run one cycle on the calling thread."""
        return self._reporter.report(self._provider())

    def _run(self) -> None:
        while not self._stop.wait(self._period):
            try:
                self.report_now()
            except Exception:
                logger.exception("Report cycle failed")
