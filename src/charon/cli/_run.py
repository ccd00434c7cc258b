"""``charon run`` — start the server for a dispatcher."""

import argparse
import sys

from charon.cli._resolve import resolve_dispatcher


def run_server(args: argparse.Namespace) -> None:
    """Resolve ``args.app`` and start serving it.

    ``--host``, ``--port`` and ``--workers`` override the dispatcher's
    config.
    """
    try:
        dispatcher = resolve_dispatcher(args.app)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    dispatcher.run(
        args.host,
        args.port,
        workers=args.workers,
        app_path=args.app,
    )
