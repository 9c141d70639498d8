"""Reporter configuration.

A single immutable ReporterConfig replaces a fluent builder. Every value is
validated when the config is created, so a bad endpoint or database name
fails before anything is sent.
"""

import os
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlparse

from influxdb_reporter.core.errors import ConfigurationError
from influxdb_reporter.core.models import MetricFilter, TransmissionMode, accept_all
from influxdb_reporter.core.units import TimeUnit

ENV_PREFIX = "INFLUXDB_REPORTER_"


def wall_clock_millis() -> int:
    """Current wall-clock time in milliseconds since the Unix epoch."""
    return int(time.time() * 1000)


def parse_tags(raw: str) -> dict[str, str]:
    """Parse ``key=value,key=value`` into a tag mapping.

    Raises:
        ConfigurationError: If an item has no ``=`` or an empty key.
    """
    tags: dict[str, str] = {}
    for item in raw.split(","):
        item = item.strip()
        if not item:
            continue
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise ConfigurationError(f"Invalid tag {item!r}; expected key=value")
        tags[key.strip()] = value.strip()
    return tags


@dataclass(frozen=True)
class ReporterConfig:
    """Settings for an InfluxDBReporter.

    Attributes:
        url: InfluxDB endpoint, http or https.
        username: User for basic auth.
        password: Password for basic auth.
        database: Target database, created on reporter construction.
        tags: Tags attached to every reported point.
        clock: Returns the report timestamp in milliseconds.
        rate_unit: Unit meter and timer rates are reported in.
        duration_unit: Unit timer durations are reported in.
        metric_filter: Decides which instruments are reported.
        mode: Batch or per-point transmission.
        timeout: Seconds each HTTP request may take.
    """

    url: str = "http://127.0.0.1:8086"
    username: str | None = "root"
    password: str | None = "root"
    database: str = "metrics"
    tags: Mapping[str, str] = field(default_factory=dict)
    clock: Callable[[], int] = wall_clock_millis
    rate_unit: TimeUnit = TimeUnit.SECONDS
    duration_unit: TimeUnit = TimeUnit.MILLISECONDS
    metric_filter: MetricFilter = accept_all
    mode: TransmissionMode = TransmissionMode.BATCH
    timeout: float = 10.0

    def __post_init__(self) -> None:
        parsed = urlparse(self.url or "")
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ConfigurationError(
                f"url must be an http(s) URL with a host, got {self.url!r}"
            )
        if not self.database or not self.database.strip():
            raise ConfigurationError("database must not be empty")
        for key, value in self.tags.items():
            if not isinstance(key, str) or not isinstance(value, str):
                raise ConfigurationError(
                    f"tags must map str to str, got {key!r}: {value!r}"
                )
            if any(c in key + value for c in "\r\n"):
                raise ConfigurationError(f"tags must not contain line breaks: {key!r}")
        if not isinstance(self.rate_unit, TimeUnit):
            raise ConfigurationError(f"rate_unit must be a TimeUnit, got {self.rate_unit!r}")
        if not isinstance(self.duration_unit, TimeUnit):
            raise ConfigurationError(
                f"duration_unit must be a TimeUnit, got {self.duration_unit!r}"
            )
        if not isinstance(self.mode, TransmissionMode):
            raise ConfigurationError(f"mode must be a TransmissionMode, got {self.mode!r}")
        if not callable(self.clock):
            raise ConfigurationError("clock must be callable")
        if not callable(self.metric_filter):
            raise ConfigurationError("metric_filter must be callable")
        if isinstance(self.timeout, bool) or not isinstance(self.timeout, (int, float)):
            raise ConfigurationError(f"timeout must be a number, got {self.timeout!r}")
        if not self.timeout > 0:
            raise ConfigurationError(f"timeout must be positive, got {self.timeout}")
        # Detach from the caller's mapping
        object.__setattr__(self, "tags", dict(self.tags))

    @classmethod
    def from_env(
        cls, environ: Mapping[str, str] | None = None, **overrides: Any
    ) -> "ReporterConfig":
        """Create configuration from ``INFLUXDB_REPORTER_*`` environment variables.

        Keyword overrides take precedence over the environment.

        Args:
            environ: Mapping to read instead of ``os.environ``.
            **overrides: Field values that win over the environment.

        Returns:
            A validated ReporterConfig.
        """
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}

        if url := env.get(f"{ENV_PREFIX}URL"):
            values["url"] = url
        if username := env.get(f"{ENV_PREFIX}USERNAME"):
            values["username"] = username
        if password := env.get(f"{ENV_PREFIX}PASSWORD"):
            values["password"] = password
        if database := env.get(f"{ENV_PREFIX}DATABASE"):
            values["database"] = database
        if tags := env.get(f"{ENV_PREFIX}TAGS"):
            values["tags"] = parse_tags(tags)
        try:
            if rate_unit := env.get(f"{ENV_PREFIX}RATE_UNIT"):
                values["rate_unit"] = TimeUnit.parse(rate_unit)
            if duration_unit := env.get(f"{ENV_PREFIX}DURATION_UNIT"):
                values["duration_unit"] = TimeUnit.parse(duration_unit)
            if mode := env.get(f"{ENV_PREFIX}MODE"):
                values["mode"] = TransmissionMode(mode.strip().lower())
            if timeout := env.get(f"{ENV_PREFIX}TIMEOUT"):
                values["timeout"] = float(timeout)
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc

        values.update(overrides)
        return cls(**values)
