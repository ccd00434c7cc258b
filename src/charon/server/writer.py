"""Response writers — turn a handler result into a Response.

A writer receives ``(body, error)`` where exactly one side is meaningful:
the handler's payload bytes on success, or the dispatch error. It is
called exactly once per request.

A custom writer has full control over status, headers and content type::

    def plain_text(body: bytes | None, error: DispatchError | None) -> Response:
        if error is not None:
            return Response(error.user_message, status=error.status_code,
                            content_type="text/plain")
        return Response(body or b"", content_type="text/plain")

    dispatcher = register_routes(routes, response_writer=plain_text)

Writers may also be ``async def``.
"""

from collections.abc import Awaitable, Callable
from typing import TypeAlias

from charon.errors import DispatchError, get_message_bytes
from charon.http.response import JSON_CONTENT_TYPE, Response

ResponseWriter: TypeAlias = Callable[
    [bytes | None, DispatchError | None], Response | Awaitable[Response]
]


def json_response_writer(body: bytes | None, error: DispatchError | None) -> Response:
    """Default writer.

    Always sets ``Content-Type: application/json``, even when the handler
    produced non-JSON bytes. Errors become their status code and
    ``{"message": ..., "status": "error"}``; success is 200 with the
    handler's bytes untouched.
    """
    if error is not None:
        return Response(
            body=get_message_bytes(error),
            status=error.status_code,
            content_type=JSON_CONTENT_TYPE,
        )
    return Response(body=body or b"", status=200, content_type=JSON_CONTENT_TYPE)
