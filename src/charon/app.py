"""Charon dispatcher — the ASGI application.

Constructed once with its route table, response writer and log sink,
then handed to any ASGI server. The route table is frozen on
construction; nothing about the dispatcher changes while it serves.
"""

import logging
from collections.abc import Mapping
from typing import TypeAlias

from charon._internal.asgi import Receive, Scope, Send
from charon._internal.invoke import invoke
from charon.config import DispatcherConfig
from charon.log.sinks import LoggingSink, LogSink
from charon.routing.protocol import RouteHandler
from charon.routing.table import RouteKey, RouteTable
from charon.server.dispatch import serve_request
from charon.server.writer import ResponseWriter

logger = logging.getLogger("charon.server")

RouteSpec: TypeAlias = RouteTable | Mapping[RouteKey | tuple[str, str], RouteHandler]


class Dispatcher:
    """The charon request dispatcher.

    Usage::

        dispatcher = Dispatcher(
            {("POST", "/widgets"): CreateWidget()},
            log_sink=FileLogSink("/var/log/widgets", "api"),
        )

        # any ASGI server
        uvicorn.run(dispatcher)

        # or pounce, via the optional ``server`` extra
        dispatcher.run()
    """

    __slots__ = ("config", "log_sink", "response_writer", "routes")

    def __init__(
        self,
        routes: RouteSpec,
        *,
        response_writer: ResponseWriter | None = None,
        log_sink: LogSink | None = None,
        config: DispatcherConfig | None = None,
    ) -> None:
        self.routes: RouteTable = (
            routes if isinstance(routes, RouteTable) else RouteTable.from_mapping(routes)
        )
        self.routes.freeze()
        self.response_writer = response_writer
        self.log_sink: LogSink = log_sink or LoggingSink()
        self.config: DispatcherConfig = config or DispatcherConfig()

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point.

        Answers lifespan scopes directly and sends HTTP scopes through
        the dispatch pipeline. Other scope types are ignored.
        """
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        if scope["type"] != "http":
            return

        await serve_request(
            scope,
            receive,
            send,
            routes=self.routes,
            log_sink=self.log_sink,
            response_writer=self.response_writer,
            config=self.config,
        )

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol.

        Startup has nothing to prepare. Shutdown closes the log sink when
        it has a ``close()`` method.
        """
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                logger.info("Dispatcher serving %d route(s)", len(self.routes))
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                close = getattr(self.log_sink, "close", None)
                if close is not None:
                    try:
                        await invoke(close)
                    except Exception as exc:
                        await send({"type": "lifespan.shutdown.failed", "message": str(exc)})
                        return
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Server --

    def run(
        self,
        host: str | None = None,
        port: int | None = None,
        *,
        workers: int | None = None,
        app_path: str | None = None,
    ) -> None:
        """Start a pounce server bound to this dispatcher.

        Args:
            host: Override bind host.
            port: Override bind port.
            workers: Override worker count.
            app_path: Optional ``"module:attribute"`` import string, used
                by pounce to reimport the app on reload.
        """
        from charon.server.serve import run_server

        run_server(
            self,
            host or self.config.host,
            port or self.config.port,
            workers=workers if workers is not None else self.config.workers,
            reload=self.config.reload,
            app_path=app_path,
        )


def register_routes(
    routes: RouteSpec,
    response_writer: ResponseWriter | None = None,
    log_sink: LogSink | None = None,
    *,
    config: DispatcherConfig | None = None,
) -> Dispatcher:
    """Build a dispatcher for *routes*.

    Call once at startup, then pass the returned dispatcher to the ASGI
    server. No process-wide state is touched.
    """
    return Dispatcher(
        routes,
        response_writer=response_writer,
        log_sink=log_sink,
        config=config,
    )
