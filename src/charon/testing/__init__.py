"""Test utilities for charon dispatchers.

Provides an in-process ASGI test client and a log sink that keeps
flushed request logs in memory::

    from charon.testing import MemoryLogSink, TestClient
"""

from charon.testing.client import TestClient
from charon.testing.sinks import MemoryLogSink

__all__ = [
    "MemoryLogSink",
    "TestClient",
]
