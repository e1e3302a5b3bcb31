"""Function route registration.

Binds one user function to an app: noise-path suppression and completion
tracking for HTTP functions, then a catch-all running the instrumented
executor around the normalized handler.
"""

from typing import TYPE_CHECKING, assert_never

from funcframe._internal.types import Next, TimingPolicy, UserFunction
from funcframe.config import timing_policy
from funcframe.execution import execute_handler
from funcframe.http.request import Request
from funcframe.http.response import ResponseWriter
from funcframe.normalize import normalize_handler
from funcframe.signature import SignatureType
from funcframe.tracking import track_completion

if TYPE_CHECKING:
    from funcframe.app import FunctionApp

# Requested by browsers and crawlers, never meant for the function
NOISE_PATHS = ("/favicon.ico", "/robots.txt")

CATCH_ALL = "/{path:path}"


async def reject_noise(request: Request, response: ResponseWriter, next: Next) -> None:  # noqa: ARG001
    """Answer favicon and robots requests with an empty 404."""
    response.set_status(404).send(None)


def register_function_routes(
    app: "FunctionApp",
    user_function: UserFunction,
    signature_type: SignatureType,
    *,
    timing: TimingPolicy | None = None,
) -> None:
    """Register the routes serving *user_function* on *app*.

    Call once per app, before it serves. *timing* defaults to the policy
    from ``app.config``.
    """
    handler = normalize_handler(user_function, signature_type)
    should_time = timing if timing is not None else timing_policy(app.config)

    async def execute(request: Request, response: ResponseWriter, next: Next) -> None:
        await execute_handler(handler, request, response, next, should_time=should_time)

    match signature_type:
        case SignatureType.HTTP:
            for path in NOISE_PATHS:
                app.use(path, reject_noise)
            app.use(CATCH_ALL, track_completion)
            app.all(CATCH_ALL, execute)
        case SignatureType.EVENT | SignatureType.CLOUD_EVENT:
            app.post(CATCH_ALL, execute)
        case _:
            assert_never(signature_type)
