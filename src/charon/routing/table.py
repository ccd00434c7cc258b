"""Route table — exact (method, path) → handler lookup.

Built once before serving and frozen when the dispatcher is created.
Lookups are plain dict reads, so concurrent requests need no lock.

Matching is exact, case-sensitive string equality on both the method and
the path. There are no path parameters or patterns.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass

from charon.errors import ConfigurationError
from charon.routing.protocol import RouteHandler


@dataclass(frozen=True, slots=True)
class RouteKey:
    """The (method, path) pair a handler is registered under."""

    method: str
    path: str

    def __str__(self) -> str:
        return f"{self.method} {self.path}"


class RouteTable:
    """Mapping of ``RouteKey`` to ``RouteHandler``.

    Usage::

        table = RouteTable()
        table.register("POST", "/widgets", CreateWidget())
        table.register("GET", "/widgets", ListWidgets())
        table.freeze()

        handler = table.lookup("POST", "/widgets")

    Registering the same key twice raises ``ConfigurationError``.
    """

    __slots__ = ("_frozen", "_handlers")

    def __init__(self) -> None:
        self._handlers: dict[RouteKey, RouteHandler] = {}
        self._frozen = False

    @classmethod
    def from_mapping(
        cls, routes: Mapping[RouteKey | tuple[str, str], RouteHandler]
    ) -> RouteTable:
        """Build a table from ``{RouteKey or (method, path): handler}``."""
        table = cls()
        for key, handler in routes.items():
            if isinstance(key, RouteKey):
                table.register(key.method, key.path, handler)
            else:
                method, path = key
                table.register(method, path, handler)
        return table

    def register(self, method: str, path: str, handler: RouteHandler) -> None:
        """Bind *handler* to the exact (*method*, *path*) pair."""
        if self._frozen:
            msg = (
                "Cannot register routes after the dispatcher has been created. "
                "Register every route before calling register_routes()."
            )
            raise ConfigurationError(msg)
        if not method or not path:
            msg = f"Route method and path must be non-empty, got {method!r} {path!r}"
            raise ConfigurationError(msg)
        key = RouteKey(method, path)
        if key in self._handlers:
            existing = self._handlers[key]
            msg = (
                f"Duplicate route {key}: already registered to "
                f"{type(existing).__name__}"
            )
            raise ConfigurationError(msg)
        self._handlers[key] = handler

    def lookup(self, method: str, path: str) -> RouteHandler | None:
        """Return the handler for (*method*, *path*), or ``None``."""
        return self._handlers.get(RouteKey(method, path))

    def freeze(self) -> None:
        """Reject further registration. Idempotent."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def items(self) -> Iterator[tuple[RouteKey, RouteHandler]]:
        return iter(self._handlers.items())

    def __contains__(self, key: object) -> bool:
        return key in self._handlers

    def __iter__(self) -> Iterator[RouteKey]:
        return iter(self._handlers)

    def __len__(self) -> int:
        return len(self._handlers)

    def __repr__(self) -> str:
        routes = ", ".join(str(key) for key in self._handlers)
        return f"RouteTable([{routes}])"
