"""Charon exception hierarchy.

Shared across the route table, dispatcher, handlers and response writers
so every module raises and catches the same types.

Handler stages signal failure by raising one of the ``DispatchError``
variants. The dispatcher converts them into ``(body, error)`` pairs and
the response writer turns the error into a wire response.
"""

import json
from dataclasses import dataclass
from typing import ClassVar


class CharonError(Exception):
    """Base for all charon-specific errors."""


class ConfigurationError(CharonError):
    """Raised when routes or dispatcher configuration are invalid.

    Typically raised during route registration, before serving starts.
    """


@dataclass(frozen=True, slots=True)
class DispatchError(CharonError):
    """An error that maps directly to an HTTP status code.

    ``detail`` is the internal diagnostic: it is written to the request
    log and never sent to the client. ``message`` is the user-facing text.
    When ``message`` is empty, ``user_message`` falls back to
    ``default_message`` or, if the variant has none, to ``detail``.
    """

    detail: str = ""
    message: str = ""

    default_status: ClassVar[int] = 500
    default_message: ClassVar[str | None] = None

    def __str__(self) -> str:
        return self.detail

    @property
    def user_message(self) -> str:
        """Text sent to the client in the response body."""
        if self.message:
            return self.message
        if self.default_message is not None:
            return self.default_message
        return self.detail

    @property
    def status_code(self) -> int:
        """HTTP status code for the response."""
        return self.default_status


class AuthenticationError(DispatchError):
    """403 — credentials missing or invalid, or no route matched."""

    default_status = 403


class AuthorizationError(DispatchError):
    """401 — the caller is not allowed to perform the action."""

    default_status = 401


class InvalidInputError(DispatchError):
    """400 — path, headers or body failed validation."""

    default_status = 400


class InternalError(DispatchError):
    """500 — something failed inside the server."""

    default_status = 500
    default_message = "Internal Error, please contact admin"


class ClientError(InternalError):
    """Raised by the outbound HTTP client when a call cannot be completed.

    A handler that lets it propagate answers with a generic 500.
    """


class InvalidMethodError(DispatchError):
    """405 — the path does not support the given method."""

    default_status = 405
    default_message = "Invalid Method"


@dataclass(frozen=True, slots=True)
class CustomStatusError(DispatchError):
    """An error with a caller-supplied status code.

    The fallback message is the same as ``InvalidMethodError``'s.
    """

    status: int = 500

    default_message = "Invalid Method"

    @property
    def status_code(self) -> int:
        return self.status


def get_message_bytes(error: DispatchError) -> bytes:
    """Serialize *error* as ``{"message": ..., "status": "error"}``.

    Only the user-facing message is included; the diagnostic never
    leaves the server.
    """
    payload = {"message": error.user_message, "status": "error"}
    return json.dumps(payload, separators=(",", ":")).encode("utf-8")
