"""Completion tracking.

Flags ``response.locals["function_execution_finished"]`` once the
transport is done with the response. The transport fires finish observers
from a ``finally`` block, so the flag is set on every exit path: normal
completion, a handler error, a failed send, or cancellation.
"""

from funcframe._internal.types import Next
from funcframe.http.request import Request
from funcframe.http.response import ResponseWriter

EXECUTION_FINISHED = "function_execution_finished"


def mark_finished(response: ResponseWriter) -> None:
    """Attach the one-shot observer that sets the finished flag."""

    def observer(error: BaseException | None) -> None:  # noqa: ARG001
        response.locals[EXECUTION_FINISHED] = True

    response.on_finish(observer)


async def track_completion(request: Request, response: ResponseWriter, next: Next) -> None:
    """Layer form of ``mark_finished``: attach, then continue the chain."""
    mark_finished(response)
    await next()
