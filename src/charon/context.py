"""Per-request context.

Provides:
- ``RequestContext``: the mutable per-request bundle handed to handlers.
- ``RouteDetails``: a read-only snapshot of it, used for validation.
- ``context_var`` / ``get_context()``: the context of the running request.

The context var is set by the dispatcher and reset after each request.
Accessing it outside a request raises ``LookupError``.

Thread safety:
    ``ContextVar`` is task-local under asyncio. Sync stages that run in a
    worker thread see a copy of the request's context, so
    ``get_context()`` works there too.
"""

import copy
from collections.abc import Mapping
from contextvars import ContextVar
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from charon.http.headers import Headers
from charon.log.record import RequestLog


@dataclass(frozen=True, slots=True)
class Identity:
    """The authenticated caller, as produced by ``is_authenticated``."""

    username: str
    password: str | None = field(default=None, repr=False)

    def __str__(self) -> str:
        return self.username


@dataclass(frozen=True, slots=True)
class RouteDetails:
    """Read-only snapshot of a request, passed to ``is_valid_input``.

    The body is a deep copy behind a read-only mapping proxy and there
    is no log, so validation can inspect the request but not change it.
    """

    method: str
    path: str
    headers: Headers
    body: Mapping[str, Any] | None
    state: Mapping[str, Any]
    user: Identity | None
    request_id: str


@dataclass(slots=True)
class RequestContext:
    """Everything the dispatcher knows about the request in flight.

    Created fresh for every request and discarded once the response is
    sent. Authentication may replace ``state`` and set ``user``; handler
    code appends to ``log``.
    """

    method: str
    path: str
    headers: Headers
    log: RequestLog
    request_id: str
    body: dict[str, Any] | None = None
    state: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    user: Identity | None = None

    def write_log(self, text: str) -> None:
        """Append pre-rendered text to the request log."""
        self.log.write(text)

    def get_log(self) -> str:
        """The request log rendered so far."""
        return self.log.getvalue()

    def snapshot(self) -> RouteDetails:
        """Freeze the current state into a ``RouteDetails``.

        The body is deep-copied before it is wrapped, so nothing done to
        the snapshot, nested values included, reaches ``self.body``.
        """
        body = MappingProxyType(copy.deepcopy(self.body)) if self.body is not None else None
        return RouteDetails(
            method=self.method,
            path=self.path,
            headers=self.headers,
            body=body,
            state=self.state,
            user=self.user,
            request_id=self.request_id,
        )


context_var: ContextVar[RequestContext] = ContextVar("charon_request_context")
"""The current request context. Set by the dispatcher before the pipeline runs."""


def get_context() -> RequestContext:
    """Return the context of the request being served.

    Raises ``LookupError`` if called outside a request::

        from charon.context import get_context

        def load_widget(widget_id: int) -> Widget:
            get_context().log.info("Loading widget", {"id": widget_id})
            ...
    """
    return context_var.get()
