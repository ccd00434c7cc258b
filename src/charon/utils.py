"""Small HTTP helpers."""

import base64

_SUCCESS_CODES = frozenset({200, 201, 202})


def basic_auth_header(username: str, password: str) -> str:
    """Return the ``Authorization`` header value for HTTP basic auth."""
    token = base64.b64encode(f"{username}:{password}".encode()).decode("ascii")
    return f"Basic {token}"


def is_success(status: int) -> bool:
    """True for 200, 201 and 202 only."""
    return status in _SUCCESS_CODES
