"""Instrumented execution of a normalized handler."""

import time

from funcframe._internal.invoke import invoke_handler
from funcframe._internal.types import Next, NormalizedHandler, TimingPolicy
from funcframe.http.request import Request
from funcframe.http.response import ResponseWriter
from funcframe.log import log_execution_finished, log_execution_started


async def execute_handler(
    handler: NormalizedHandler,
    request: Request,
    response: ResponseWriter,
    next: Next,
    *,
    should_time: TimingPolicy,
) -> None:
    """Invoke *handler*, logging its start and duration when *should_time* allows.

    The duration is whole milliseconds, truncated. Errors from the handler
    propagate unchanged, and the finished log is only written when the
    handler succeeds.
    """
    if not should_time(request):
        await invoke_handler(handler, request, response, next)
        return

    start = time.perf_counter_ns()
    log_execution_started()
    await invoke_handler(handler, request, response, next)
    elapsed_ms = (time.perf_counter_ns() - start) // 1_000_000
    log_execution_finished(elapsed_ms, response.status)
