"""Log sinks — destinations for finished request logs.

A sink is anything with a ``flush(text)`` method. The dispatcher calls it
once per request with the fully rendered log text. Many requests flush
concurrently, so every sink here serializes its writes with a lock.
"""

import logging
import sys
import threading
from datetime import datetime
from pathlib import Path
from typing import Protocol, TextIO, runtime_checkable

from charon.log.levels import RecordTenure

logger = logging.getLogger("charon.server")


@runtime_checkable
class LogSink(Protocol):
    """Protocol for request log sinks.

    ``flush`` may be sync or async::

        class ListSink:
            def __init__(self) -> None:
                self.records: list[str] = []

            def flush(self, text: str) -> None:
                self.records.append(text)
    """

    def flush(self, text: str) -> object: ...


class LoggingSink:
    """Forward each request log to a stdlib logger as one INFO record."""

    __slots__ = ("_logger",)

    def __init__(self, name: str = "charon.requests") -> None:
        self._logger = logging.getLogger(name)

    def flush(self, text: str) -> None:
        # logging.Handler serializes emission; no lock of our own needed
        self._logger.info(text.rstrip("\n"))


class StreamLogSink:
    """Write each request log to a text stream (stdout by default)."""

    __slots__ = ("_lock", "_stream")

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream
        self._lock = threading.Lock()

    def flush(self, text: str) -> None:
        stream = self._stream or sys.stdout
        with self._lock:
            stream.write(text)
            stream.flush()


def log_file_name(suffix: str, tenure: RecordTenure, now: datetime) -> str:
    """Return the file name a record written at *now* belongs to.

    ``DAILY`` → ``2024-3-7-app.txt``, ``WEEKLY`` → ``2024-10-app.txt``
    (ISO week), ``MONTHLY`` → ``2024-3-app.txt``, ``YEARLY`` →
    ``2024-app.txt``, ``FOREVER`` → ``app.txt``.
    """
    match tenure:
        case RecordTenure.DAILY:
            return f"{now.year}-{now.month}-{now.day}-{suffix}.txt"
        case RecordTenure.WEEKLY:
            year, week, _ = now.isocalendar()
            return f"{year}-{week}-{suffix}.txt"
        case RecordTenure.MONTHLY:
            return f"{now.year}-{now.month}-{suffix}.txt"
        case RecordTenure.YEARLY:
            return f"{now.year}-{suffix}.txt"
        case RecordTenure.FOREVER:
            return f"{suffix}.txt"
    msg = f"Unknown record tenure: {tenure!r}"
    raise ValueError(msg)


class FileLogSink:
    """Append request logs to time-bucketed files.

    A new file starts every day, week, month or year depending on
    *tenure*. When the file cannot be written, the text goes to stdout
    and a warning is logged on ``charon.server``. With no *log_dir*
    everything goes to stdout.

    Usage::

        sink = FileLogSink("/var/log/widgets", "api", RecordTenure.DAILY)
    """

    __slots__ = ("_fallback", "_lock", "log_dir", "suffix", "tenure")

    def __init__(
        self,
        log_dir: str | Path | None,
        suffix: str = "charon",
        tenure: RecordTenure = RecordTenure.DAILY,
        *,
        fallback: TextIO | None = None,
    ) -> None:
        self.log_dir = Path(log_dir) if log_dir else None
        self.suffix = suffix
        self.tenure = tenure
        self._fallback = fallback
        self._lock = threading.Lock()

    def path_for(self, now: datetime | None = None) -> Path | None:
        """The file a record flushed at *now* is appended to."""
        if self.log_dir is None:
            return None
        return self.log_dir / log_file_name(self.suffix, self.tenure, now or datetime.now())

    def flush(self, text: str) -> None:
        path = self.path_for()
        with self._lock:
            if path is not None:
                try:
                    with path.open("a", encoding="utf-8") as fh:
                        fh.write(text)
                    return
                except OSError as exc:
                    logger.warning("Unable to write request log to %s: %s", path, exc)
            stream = self._fallback or sys.stdout
            stream.write(text)
            stream.flush()
