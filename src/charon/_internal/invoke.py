"""Invoke helpers — call sync or async callables uniformly.

Handler stages, response writers and log sinks can be ``def`` or
``async def``. Any code that calls one of them goes through ``invoke``
so the sync/async check lives in exactly one place.

Usage::

    from charon._internal.invoke import invoke

    result = await invoke(handler.handle_call, context)
"""

import functools
import inspect
from typing import Any

import anyio.to_thread


async def invoke(func: Any, *args: Any, offload: bool = False, **kwargs: Any) -> Any:
    """Call *func* and await the result if it is awaitable.

    Coroutine functions are awaited on the current task. Plain functions
    run in a worker thread when *offload* is true, so blocking I/O in one
    request does not hold up the event loop for the others::

        # async: awaited directly
        async def handle_call(self, context): ...

        # sync: runs in a worker thread with offload=True
        def handle_call(self, context): ...
    """
    if offload and not _is_async_callable(func):
        result = await anyio.to_thread.run_sync(functools.partial(func, *args, **kwargs))
    else:
        result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result


def _is_async_callable(func: Any) -> bool:
    while isinstance(func, functools.partial):
        func = func.func
    if inspect.iscoroutinefunction(func):
        return True
    call = getattr(func, "__call__", None)  # noqa: B004
    return call is not None and inspect.iscoroutinefunction(call)
