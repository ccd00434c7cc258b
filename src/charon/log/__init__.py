"""Request logging — per-request accumulator, levels, and sinks.

Usage::

    from charon.log import FileLogSink, RecordTenure, RequestLog
"""

from charon.log.levels import Environment, Level, RecordTenure
from charon.log.record import RequestLog
from charon.log.sinks import FileLogSink, LoggingSink, LogSink, StreamLogSink

__all__ = [
    "Environment",
    "FileLogSink",
    "Level",
    "LogSink",
    "LoggingSink",
    "RecordTenure",
    "RequestLog",
    "StreamLogSink",
]
