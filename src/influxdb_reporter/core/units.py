"""Time units used to convert rates and durations before reporting."""

from enum import Enum


class TimeUnit(Enum):
    """A unit of time, valued by its length in nanoseconds."""

    NANOSECONDS = 1
    MICROSECONDS = 1_000
    MILLISECONDS = 1_000_000
    SECONDS = 1_000_000_000
    MINUTES = 60_000_000_000
    HOURS = 3_600_000_000_000
    DAYS = 86_400_000_000_000

    @property
    def nanos(self) -> int:
        """Length of one unit in nanoseconds."""
        return self.value

    @property
    def seconds(self) -> float:
        """Length of one unit in seconds."""
        return self.value / TimeUnit.SECONDS.value

    @property
    def label(self) -> str:
        """Lower-case name, e.g. ``"milliseconds"``."""
        return self.name.lower()

    @classmethod
    def parse(cls, name: str) -> "TimeUnit":
        """Look up a unit by case-insensitive name, e.g. ``"seconds"``."""
        try:
            return cls[name.strip().upper()]
        except KeyError:
            valid = ", ".join(unit.label for unit in cls)
            raise ValueError(f"Unknown time unit {name!r}; expected one of {valid}") from None


def convert_rate(rate: float, unit: TimeUnit) -> float:
    """Convert a per-second rate into events per ``unit``.

    Args:
        rate: Events per second.
        unit: Target rate unit.

    Returns:
        The rate multiplied by the unit's length in seconds.
    """
    return rate * unit.seconds


def convert_duration(duration: float, unit: TimeUnit) -> float:
    """Convert a nanosecond duration into ``unit``.

    Args:
        duration: Duration in nanoseconds.
        unit: Target duration unit.

    Returns:
        The duration divided by the unit's length in nanoseconds.
    """
    return duration / unit.nanos
