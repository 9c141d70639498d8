"""Exception hierarchy for the reporter."""

from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from influxdb_reporter.core.dispatch import WriteFailure


class ReporterError(Exception):
    """Base class for every error raised by influxdb_reporter."""


class ConfigurationError(ReporterError):
    """Raised when a ReporterConfig holds an invalid value."""


class DatabaseConnectionError(ReporterError):
    """Raised when the target database cannot be reached or created.

    Attributes:
        url: Endpoint that was contacted, if known.
    """

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class WriteError(ReporterError):
    """Raised when points could not be written.

    Attributes:
        failures: The individual failures, empty when raised by an adapter
            for a single call.
    """

    def __init__(
        self, message: str, failures: "Sequence[WriteFailure] | None" = None
    ) -> None:
        super().__init__(message)
        self.failures = list(failures or [])


class TranslationError(ReporterError):
    """Raised when a reading cannot be turned into a point.

    Attributes:
        name: Registered name of the offending instrument.
    """

    def __init__(self, name: str, reason: str) -> None:
        super().__init__(f"Cannot translate {name!r}: {reason}")
        self.name = name
        self.reason = reason
