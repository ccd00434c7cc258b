"""Server binding.

Starts a pounce ASGI server with a live charon ``Dispatcher``.
"""


def run_server(
    app: object,
    host: str,
    port: int,
    *,
    workers: int = 1,
    reload: bool = False,
    app_path: str | None = None,
) -> None:
    """Start a pounce server for the given dispatcher.

    Pounce's ``run()`` takes an import string (e.g., ``"myapp:dispatcher"``),
    but we already hold a live ``Dispatcher``. We use ``pounce.Server``
    directly with the ASGI callable.

    Args:
        app: ASGI callable (charon Dispatcher instance).
        host: Bind host address.
        port: Bind port number.
        workers: Number of worker threads.
        reload: Enable auto-reload on file changes.
        app_path: Optional ``"module:attribute"`` import string. When
            provided, pounce reimports the app on each reload cycle.
    """
    from pounce.config import ServerConfig
    from pounce.server import Server

    config = ServerConfig(
        host=host,
        port=port,
        workers=workers,
        reload=reload,
    )
    server = Server(config, app, app_path=app_path)
    server.run()
