"""Charon — exact-match HTTP request dispatch for ASGI.

Every request is matched on its exact (method, path) pair and run
through the handler's authenticate → validate → execute stages. Errors
and uncaught exceptions become JSON error responses; a per-request log
is flushed to a sink once the request is done.

Basic usage::

    from charon import InvalidInputError, register_routes

    class CreateWidget:
        def is_authenticated(self, state, headers):
            return None

        def is_valid_input(self, details):
            if not details.body or "name" not in details.body:
                raise InvalidInputError("missing name", "name is required")

        def handle_call(self, context):
            return b'{"id": 1}'

    dispatcher = register_routes({("POST", "/widgets"): CreateWidget()})
    dispatcher.run()
"""

__version__ = "0.1.0"
__all__ = [
    "AuthenticationError",
    "AuthorizationError",
    "CharonError",
    "ConfigurationError",
    "CustomStatusError",
    "DispatchError",
    "Dispatcher",
    "DispatcherConfig",
    "Identity",
    "InternalError",
    "InvalidInputError",
    "InvalidMethodError",
    "RequestContext",
    "Response",
    "RouteDetails",
    "RouteHandler",
    "RouteKey",
    "RouteTable",
    "get_context",
    "register_routes",
]

_ERRORS = frozenset(
    {
        "AuthenticationError",
        "AuthorizationError",
        "CharonError",
        "ConfigurationError",
        "CustomStatusError",
        "DispatchError",
        "InternalError",
        "InvalidInputError",
        "InvalidMethodError",
    }
)


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import charon`` fast while providing a clean top-level API.
    """
    if name in ("Dispatcher", "register_routes"):
        from charon import app as _app

        return getattr(_app, name)

    if name == "DispatcherConfig":
        from charon.config import DispatcherConfig

        return DispatcherConfig

    if name in ("Identity", "RequestContext", "RouteDetails", "get_context"):
        from charon import context as _ctx

        return getattr(_ctx, name)

    if name == "Response":
        from charon.http.response import Response

        return Response

    if name == "RouteHandler":
        from charon.routing.protocol import RouteHandler

        return RouteHandler

    if name in ("RouteKey", "RouteTable"):
        from charon.routing import table as _table

        return getattr(_table, name)

    if name in _ERRORS:
        from charon import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
