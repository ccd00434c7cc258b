"""Emit a charon Response as ASGI ``http.response.*`` messages."""

from charon._internal.asgi import Message, Send
from charon.http.response import Response

# Framing headers are always derived from the Response itself
_MANAGED_HEADERS = frozenset({"content-type", "content-length"})


def _body_allowed(status: int) -> bool:
    # RFC 9110: 1xx, 204 and 304 responses carry no content
    return status >= 200 and status not in (204, 304)


def encode_response(response: Response) -> tuple[Message, Message]:
    """Build the start and body messages for *response*.

    ``Content-Type`` comes first and ``Content-Length`` last; copies of
    either in ``response.headers`` are dropped. Nothing is sent, so the
    caller can still replace a response that fails here.

    Raises:
        TypeError: The status is not an int or the body not str/bytes.
        ValueError: The status is outside 100-599.
        UnicodeEncodeError: A header is not latin-1 encodable.
    """
    status = response.status
    if not isinstance(status, int) or isinstance(status, bool):
        msg = f"Response status must be an int, not {type(status).__name__}"
        raise TypeError(msg)
    if not 100 <= status <= 599:
        msg = f"Response status {status} is not a valid HTTP status"
        raise ValueError(msg)
    if not isinstance(response.body, (str, bytes)):
        msg = f"Response body must be str or bytes, not {type(response.body).__name__}"
        raise TypeError(msg)

    body = response.body_bytes if _body_allowed(status) else b""
    headers = [(b"content-type", response.content_type.encode("latin-1"))]
    headers.extend(
        (name.lower().encode("latin-1"), value.encode("latin-1"))
        for name, value in response.headers
        if name.lower() not in _MANAGED_HEADERS
    )
    headers.append((b"content-length", str(len(body)).encode("latin-1")))

    return (
        {"type": "http.response.start", "status": status, "headers": headers},
        {"type": "http.response.body", "body": body},
    )


async def send_response(response: Response, send: Send) -> None:
    """Send *response* as one start message and one body message."""
    start, body = encode_response(response)
    await send(start)
    await send(body)
