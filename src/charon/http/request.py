"""The inbound request as the dispatcher sees it.

Method, path, headers and query are captured from the ASGI scope up
front. The body is pulled from ``receive`` on first use and kept.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from dataclasses import dataclass, field

from charon._internal.asgi import Receive, Scope
from charon.http.headers import Headers
from charon.http.query import QueryParams


@dataclass(frozen=True, slots=True)
class Request:
    """Immutable request metadata plus a lazily read body."""

    method: str
    path: str
    headers: Headers
    query: QueryParams
    _receive: Receive = field(repr=False, compare=False)
    # Holds the body once read; the dict itself stays mutable
    _cache: dict[str, bytes] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive) -> Request:
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=Headers(tuple(scope.get("headers", ()))),
            query=QueryParams(scope.get("query_string", b"")),
            _receive=receive,
        )

    async def stream(self) -> AsyncGenerator[bytes]:
        """Yield body chunks until the client is done or disconnects."""
        more = True
        while more:
            message = await self._receive()
            if message["type"] == "http.disconnect":
                return
            chunk = message.get("body", b"")
            if chunk:
                yield chunk
            more = message.get("more_body", False)

    async def body(self) -> bytes:
        """The complete body. ``receive`` is consumed only on the first call."""
        if "body" not in self._cache:
            self._cache["body"] = b"".join([chunk async for chunk in self.stream()])
        return self._cache["body"]
