"""Invoke helpers — call sync or async user code uniformly.

User functions can be ``def`` or ``async def``. Coroutine functions run on
the event loop; plain functions run in anyio's worker-thread pool so a
blocking function does not stall other in-flight requests. Any awaitable a
plain function returns is awaited back on the loop.

Usage::

    from funcframe._internal.invoke import invoke

    result = await invoke(handler, *args)
"""

import functools
import inspect
from typing import Any

import anyio.from_thread
import anyio.to_thread


def is_async_callable(func: Any) -> bool:
    while isinstance(func, functools.partial):
        func = func.func
    return inspect.iscoroutinefunction(func) or inspect.iscoroutinefunction(
        getattr(func, "__call__", None)
    )


async def invoke(handler: Any, *args: Any) -> Any:
    """Call a handler and await the result if it's awaitable.

    Works with both sync and async callables::

        # sync: runs in a worker thread
        def hello(request, response, next):
            response.send("hello")

        # async: awaited on the event loop
        async def hello(request, response, next):
            response.send(await render())
    """
    if is_async_callable(handler):
        result = handler(*args)
    else:
        result = await anyio.to_thread.run_sync(functools.partial(handler, *args))
    if inspect.isawaitable(result):
        result = await result
    return result


def blocking(continuation: Any) -> Any:
    """Make an async continuation callable from a worker thread.

    The returned function runs *continuation* on the event loop and blocks
    the calling thread until it completes, re-raising its exception there.
    """

    @functools.wraps(continuation)
    def call(*args: Any, **kwargs: Any) -> Any:
        return anyio.from_thread.run(functools.partial(continuation, *args, **kwargs))

    return call


async def invoke_handler(handler: Any, request: Any, response: Any, next: Any) -> Any:
    """Invoke a ``(request, response, next)`` handler.

    Sync handlers run in a worker thread, so they get a blocking ``next``:
    ``next()`` returns once the rest of the chain has run and ``next(exc)``
    raises *exc* in the handler.
    """
    if not is_async_callable(handler):
        next = blocking(next)
    return await invoke(handler, request, response, next)
