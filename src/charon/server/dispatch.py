"""Request dispatch — the only component that touches raw ASGI HTTP scopes.

Turns an ASGI scope into a ``RequestContext``, parses the body, looks up
the route, drives the handler through authenticate → validate → execute,
and hands the outcome to the response writer. Every request ends the
same way: the writer runs once, the request log is flushed once, and
the response is sent.

Uncaught exceptions anywhere in the pipeline are contained here. They
are logged at PANIC with their traceback and answered with a generic
500; the client never sees the exception text.
"""

import json
import logging
import uuid
from types import MappingProxyType
from typing import Any

from charon._internal.asgi import Message, Receive, Scope, Send
from charon._internal.invoke import invoke
from charon.config import DispatcherConfig
from charon.context import RequestContext, context_var
from charon.errors import AuthenticationError, DispatchError, InternalError
from charon.http.request import Request
from charon.http.response import Response
from charon.log.record import RequestLog
from charon.log.sinks import LogSink
from charon.routing.protocol import Payload, RouteHandler
from charon.routing.table import RouteTable
from charon.server.sender import encode_response
from charon.server.writer import ResponseWriter, json_response_writer

logger = logging.getLogger("charon.server")

UNKNOWN_SERVER_ERROR = "Unknown server error"
PATH_NOT_FOUND = "Path not found"

_decoder = json.JSONDecoder()


async def serve_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    routes: RouteTable,
    log_sink: LogSink,
    response_writer: ResponseWriter | None = None,
    config: DispatcherConfig,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    request = Request.from_asgi(scope, receive)
    context = new_context(request, config, scope.get("state"))
    token = context_var.set(context)

    try:
        context.log.info(f"Incoming Request  {request.method} : {request.path}")

        try:
            body, error = await _dispatch(
                request, context, routes, offload=config.run_sync_in_thread
            )
        except Exception as exc:
            context.log.panic(f"{type(exc).__name__}: {exc}")
            body, error = None, InternalError(UNKNOWN_SERVER_ERROR)

        start, body_message = await _write_response(context, body, error, response_writer)
        await _flush_log(context, log_sink, offload=config.run_sync_in_thread)
    finally:
        context_var.reset(token)

    await send(start)
    await send(body_message)


def new_context(
    request: Request,
    config: DispatcherConfig,
    initial_state: Any = None,
) -> RequestContext:
    """Create a fresh context with an empty log for *request*."""
    request_id = request.headers.get(config.request_id_header) or uuid.uuid4().hex
    state = {**(initial_state or {}), "request_id": request_id}
    return RequestContext(
        method=request.method,
        path=request.path,
        headers=request.headers,
        log=RequestLog(environment=config.environment, time_format=config.time_format),
        request_id=request_id,
        state=MappingProxyType(state),
    )


async def parse_body(request: Request) -> dict[str, Any] | None:
    """Decode the request body into a string-keyed dict.

    ``GET`` requests use the query string, each name mapped to the list
    of its values. Other methods decode the first JSON value in the body,
    which must be an object; anything after it is ignored. An empty body
    or a JSON ``null`` gives ``None``.

    Raises:
        InternalError: The body does not start with a JSON object.
    """
    if request.method == "GET":
        return request.query.to_dict()

    # Invalid UTF-8 inside strings becomes U+FFFD rather than an error
    text = (await request.body()).decode("utf-8", errors="replace").lstrip()
    if not text:
        return None
    try:
        decoded, _ = _decoder.raw_decode(text)
    except ValueError as exc:
        raise InternalError(str(exc)) from exc
    if decoded is None:
        return None
    if not isinstance(decoded, dict):
        msg = f"cannot decode JSON {type(decoded).__name__} into an object"
        raise InternalError(msg)
    return decoded


async def handle_request(
    handler: RouteHandler,
    context: RequestContext,
    *,
    offload: bool = False,
) -> tuple[bytes | None, DispatchError | None]:
    """Run *handler*'s three stages against *context*.

    Stops at the first stage that raises a ``DispatchError`` and returns
    it as the error. A non-empty state from ``is_authenticated`` replaces
    the context state; an identity fills ``context.user``. Validation
    sees a read-only snapshot. The payload of ``handle_call`` is returned
    as is (``str`` is encoded to UTF-8).
    """
    try:
        auth = await invoke(
            handler.is_authenticated, context.state, context.headers, offload=offload
        )
        if auth is not None:
            state, identity = auth
            if state:
                context.state = MappingProxyType(dict(state))
            if identity is not None:
                context.user = identity

        await invoke(handler.is_valid_input, context.snapshot(), offload=offload)

        payload = await invoke(handler.handle_call, context, offload=offload)
    except DispatchError as exc:
        return None, exc
    return _payload_bytes(payload), None


async def _dispatch(
    request: Request,
    context: RequestContext,
    routes: RouteTable,
    *,
    offload: bool,
) -> tuple[bytes | None, DispatchError | None]:
    try:
        context.body = await parse_body(request)
    except DispatchError as exc:
        context.log.severe(f"Error:  {exc}")
        return None, exc

    handler = routes.lookup(context.method, context.path)
    if handler is None:
        context.log.severe(PATH_NOT_FOUND)
        return None, AuthenticationError(detail=PATH_NOT_FOUND, message=PATH_NOT_FOUND)

    body, error = await handle_request(handler, context, offload=offload)
    if error is not None:
        context.log.severe(f"Error:  {error}")
    return body, error


def _payload_bytes(payload: Payload) -> bytes | None:
    if payload is None or isinstance(payload, bytes):
        return payload
    if isinstance(payload, str):
        return payload.encode("utf-8")
    if isinstance(payload, (bytearray, memoryview)):
        return bytes(payload)
    msg = f"handle_call must return bytes, str or None, not {type(payload).__name__}"
    raise TypeError(msg)


async def _write_response(
    context: RequestContext,
    body: bytes | None,
    error: DispatchError | None,
    writer: ResponseWriter | None,
) -> tuple[Message, Message]:
    """Run the writer and encode its response into ASGI messages.

    A custom writer's response is encoded here, before anything is sent,
    so a bad status, body or header still gets the generic 500.
    """
    if writer is None:
        return encode_response(json_response_writer(body, error))
    try:
        response = await invoke(writer, body, error)
        if not isinstance(response, Response):
            msg = f"Response writer returned {type(response).__name__}, not Response"
            raise TypeError(msg)
        return encode_response(response)
    except Exception as exc:
        context.log.panic(f"{type(exc).__name__}: {exc}")
        return encode_response(json_response_writer(None, InternalError(UNKNOWN_SERVER_ERROR)))


async def _flush_log(context: RequestContext, sink: LogSink, *, offload: bool) -> None:
    try:
        await invoke(sink.flush, context.get_log(), offload=offload)
    except Exception:
        logger.exception("Failed to flush request log for %s %s", context.method, context.path)
