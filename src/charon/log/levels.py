"""Log levels, environments, and file record tenures."""

from __future__ import annotations

from enum import Enum, IntEnum


class Level(IntEnum):
    """Severity of a request log line."""

    INFO = 0
    WARNING = 1
    SEVERE = 2
    FATAL = 3
    PANIC = 4
    TRACE = 5
    DEBUG = 6

    def __str__(self) -> str:
        return self.name


class Environment(str, Enum):
    """Deployment environment the dispatcher logs for.

    Debug lines are dropped in ``PRODUCTION``.
    """

    PRODUCTION = "production"
    DEVELOPMENT = "development"
    TESTING = "testing"

    @classmethod
    def parse(cls, value: str) -> Environment | None:
        """Return the environment named *value*, or ``None`` if unknown."""
        try:
            return cls(value)
        except ValueError:
            return None


class RecordTenure(IntEnum):
    """How long a single log file collects records before a new one starts."""

    DAILY = 0
    WEEKLY = 1
    MONTHLY = 2
    YEARLY = 3
    FOREVER = 4
