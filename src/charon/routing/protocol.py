"""Handler contract — the three stages every route handler implements.

A route handler is any object with these three methods::

    class CreateWidget:
        async def is_authenticated(self, state, headers):
            token = headers.get("authorization")
            if token != "Bearer s3cret":
                raise AuthenticationError("bad token", "Invalid credentials")
            return {**state, "scopes": ("widgets:write",)}, Identity("alice")

        def is_valid_input(self, details):
            if not details.body or "name" not in details.body:
                raise InvalidInputError("missing name", "name is required")

        async def handle_call(self, context):
            context.log.info("Creating widget", {"name": context.body["name"]})
            return b'{"id": 1}'

No base class required. The dispatcher checks the shape, not the lineage.

Stages run strictly in order and stop at the first raised
``DispatchError``. Any stage may be sync or async. One instance serves
every request for its route, possibly concurrently, so handlers must
not keep per-request state on ``self``.
"""

from collections.abc import Awaitable, Mapping
from typing import Any, Protocol, TypeAlias, runtime_checkable

from charon.context import Identity, RequestContext, RouteDetails
from charon.http.headers import Headers

AuthResult: TypeAlias = tuple[Mapping[str, Any] | None, Identity | None] | None
"""``(state, identity)``: a non-empty state replaces the request state and
an identity fills the user slot. ``None`` changes nothing."""

Payload: TypeAlias = bytes | str | None


@runtime_checkable
class RouteHandler(Protocol):
    """Protocol for charon route handlers."""

    def is_authenticated(
        self, state: Mapping[str, Any], headers: Headers
    ) -> AuthResult | Awaitable[AuthResult]:
        """Verify credentials.

        Raise ``AuthenticationError`` or ``AuthorizationError`` on failure.
        """
        ...

    def is_valid_input(self, details: RouteDetails) -> None | Awaitable[None]:
        """Check the request shape. Raise ``InvalidInputError`` on failure."""
        ...

    def handle_call(self, context: RequestContext) -> Payload | Awaitable[Payload]:
        """Perform the action and return the serialized response payload."""
        ...
