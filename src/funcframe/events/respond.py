"""Running event-style user functions and writing their outcome.

Shared by the legacy-event and CloudEvent adapters: arity detection,
callback-or-return completion, and the result-to-response mapping.
"""

import asyncio
import inspect
import json
import logging
from collections.abc import Callable
from typing import Any, TypeAlias

from funcframe._internal.invoke import invoke
from funcframe.http.response import ResponseWriter

logger = logging.getLogger("funcframe.invoker")

# Marks a response produced by a failed function execution
FUNCTION_STATUS_HEADER = "X-Google-Status"

Callback: TypeAlias = Callable[..., None]


def positional_arity(func: Callable[..., Any]) -> int:
    """Count the positional parameters *func* accepts.

    ``*args`` counts as unbounded. Callables whose signature cannot be
    read are treated as taking no optional callback.
    """
    try:
        sig = inspect.signature(func)
    except (TypeError, ValueError):
        return 0
    count = 0
    for param in sig.parameters.values():
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            return 1 << 16
        if param.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        ):
            count += 1
    return count


async def run_event_function(
    func: Callable[..., Any],
    args: tuple[Any, ...],
    *,
    with_callback: bool,
) -> Any:
    """Run *func* and return its result.

    With *with_callback*, a ``callback(error=None, result=None)`` is
    appended to *args* and completion is its first call; it may be called
    from any thread, and later calls are ignored. Otherwise completion is
    the return value, awaited if it is awaitable. Errors are raised.
    """
    if not with_callback:
        return await invoke(func, *args)

    loop = asyncio.get_running_loop()
    outcome: asyncio.Future[Any] = loop.create_future()

    def settle(error: BaseException | str | None, result: Any) -> None:
        if outcome.done():
            return
        if error is None:
            outcome.set_result(result)
        elif isinstance(error, BaseException):
            outcome.set_exception(error)
        else:
            outcome.set_exception(RuntimeError(str(error)))

    def callback(error: BaseException | str | None = None, result: Any = None) -> None:
        loop.call_soon_threadsafe(settle, error, result)

    await invoke(func, *args, callback)
    return await outcome


def send_result(response: ResponseWriter, result: Any) -> None:
    """Write an event function's return value.

    ``None`` → 204, an ``int`` in 100-599 → that status, ``str``/``bytes``
    → body, ``dict``/``list`` and other ints → JSON body. A handler that
    already ended the response is left alone.
    """
    if response.ended:
        return
    match result:
        case None:
            response.send_status(204)
        case bool():
            response.json(result)
        case int() if 100 <= result <= 599:
            response.send_status(result)
        case int():
            response.json(result)
        case str() | bytes():
            response.send(result)
        case dict() | list():
            response.json(result)
        case _:
            response.send(json.dumps(result, default=str))


def send_error(response: ResponseWriter, error: BaseException) -> None:
    """Write a failed execution as a 500 flagged with the status header."""
    logger.error("Function execution failed", exc_info=error)
    response.reset()
    response.content_type = "text/plain; charset=utf-8"
    response.set_header(FUNCTION_STATUS_HEADER, "error")
    response.set_status(500).send(str(error))
