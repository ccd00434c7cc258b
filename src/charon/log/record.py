"""Per-request log accumulator.

Handler code and the dispatcher append lines to a ``RequestLog`` while a
request is in flight. The dispatcher renders it once and hands the text
to a ``LogSink`` when the request finishes, on every exit path.

Line format::

    LEVEL   2024-01-31 12:00:00   /app/handlers.py:42\tmessage   trace   key=value
"""

import sys
import traceback
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any, TypeAlias

from charon.log.levels import Environment, Level

FormatTime: TypeAlias = Callable[[datetime], str]

DEFAULT_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def render_fields(fields: Mapping[str, Any] | None) -> str:
    """Render a field map as space-separated ``key=value`` pairs."""
    if not fields:
        return ""
    return " ".join(f"{key}={value}" for key, value in fields.items())


def capture_stack() -> str:
    """Return the active exception's traceback, or the current call stack."""
    if sys.exc_info()[0] is not None:
        return traceback.format_exc()
    # Drop this frame from the snapshot
    return "".join(traceback.format_stack()[:-1])


def _call_site(depth: int) -> tuple[str, int]:
    try:
        frame = sys._getframe(depth + 1)
    except ValueError:
        return "?", 0
    return frame.f_code.co_filename, frame.f_lineno


class RequestLog:
    """Ordered, append-only log lines for one request.

    Not shared between requests. Lines are kept in memory until
    ``getvalue()`` renders them for the sink.

    Usage::

        log = RequestLog(environment=Environment.PRODUCTION)
        log.info("Loaded widget", {"id": 7})
        log.debug("skipped in production")
        text = log.getvalue()
    """

    __slots__ = ("_environment", "_format_time", "_lines")

    def __init__(
        self,
        *,
        environment: Environment = Environment.DEVELOPMENT,
        format_time: FormatTime | None = None,
        time_format: str = DEFAULT_TIME_FORMAT,
    ) -> None:
        self._environment = environment
        self._format_time: FormatTime = format_time or (lambda when: when.strftime(time_format))
        self._lines: list[str] = []

    @property
    def environment(self) -> Environment:
        return self._environment

    def log(
        self,
        level: Level,
        message: str,
        *,
        trace: str = "",
        fields: Mapping[str, Any] | None = None,
        when: datetime | None = None,
        stacklevel: int = 1,
    ) -> None:
        """Append one formatted line.

        *stacklevel* selects the frame reported as the call site, counted
        the same way as ``logging.Logger.log``: 1 is the direct caller.
        """
        filename, lineno = _call_site(stacklevel)
        timestamp = self._format_time(when or datetime.now())
        self._lines.append(
            f"{level}   {timestamp}   {filename}:{lineno}\t{message}   {trace}   "
            f"{render_fields(fields)}\n"
        )

    def info(self, message: str, fields: Mapping[str, Any] | None = None) -> None:
        self.log(Level.INFO, message, fields=fields, stacklevel=2)

    def warning(self, message: str, fields: Mapping[str, Any] | None = None) -> None:
        self.log(Level.WARNING, message, fields=fields, stacklevel=2)

    def severe(self, message: str, fields: Mapping[str, Any] | None = None) -> None:
        self.log(Level.SEVERE, message, fields=fields, stacklevel=2)

    def fatal(
        self,
        message: str,
        fields: Mapping[str, Any] | None = None,
        *,
        trace: str | None = None,
    ) -> None:
        """Log at FATAL with a stack trace (captured when not given)."""
        self.log(Level.FATAL, message, trace=trace or capture_stack(), fields=fields, stacklevel=2)

    def panic(
        self,
        message: str,
        fields: Mapping[str, Any] | None = None,
        *,
        trace: str | None = None,
    ) -> None:
        """Log at PANIC with a stack trace (captured when not given).

        Inside an ``except`` block the captured trace is the active
        exception's traceback.
        """
        self.log(Level.PANIC, message, trace=trace or capture_stack(), fields=fields, stacklevel=2)

    def trace(self, fields: Mapping[str, Any] | None = None) -> None:
        """Log the current call stack at TRACE."""
        self.log(Level.TRACE, "", trace=capture_stack(), fields=fields, stacklevel=2)

    def debug(self, message: str, fields: Mapping[str, Any] | None = None) -> None:
        """Log at DEBUG. Dropped in the production environment."""
        if self._environment is Environment.PRODUCTION:
            return
        self.log(Level.DEBUG, message, fields=fields, stacklevel=2)

    def write(self, text: str) -> None:
        """Append pre-rendered text verbatim."""
        self._lines.append(text)

    def getvalue(self) -> str:
        """Render the full log text."""
        return "".join(self._lines)

    def __len__(self) -> int:
        return len(self._lines)

    def __repr__(self) -> str:
        return f"<RequestLog lines={len(self._lines)}>"
