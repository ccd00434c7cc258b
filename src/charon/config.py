"""Dispatcher configuration.

DispatcherConfig is a frozen dataclass: immutable after creation,
IDE-autocompletable, no string-key dict lookups.
"""

from dataclasses import dataclass

from charon.log.levels import Environment
from charon.log.record import DEFAULT_TIME_FORMAT


@dataclass(frozen=True, slots=True)
class DispatcherConfig:
    """Dispatcher configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = DispatcherConfig(port=3000, environment=Environment.PRODUCTION)
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    workers: int = 1
    reload: bool = False

    # Request logging
    environment: Environment = Environment.DEVELOPMENT
    time_format: str = DEFAULT_TIME_FORMAT
    request_id_header: str = "x-request-id"

    # Run sync handler stages and sinks in a worker thread
    run_sync_in_thread: bool = True
