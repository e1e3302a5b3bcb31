"""ASGI handler — translates ASGI scope/messages to funcframe types.

The only component that touches raw ASGI directly. Converts the scope to
a ``Request``, runs the matching layers in registration order with an
Express-style ``next`` continuation, and sends the buffered response.
"""

import asyncio
import contextlib

from funcframe._internal.asgi import Receive, Scope, Send
from funcframe._internal.invoke import invoke_handler
from funcframe.errors import ClientDisconnected, HTTPError
from funcframe.http.request import Request
from funcframe.http.response import ResponseWriter
from funcframe.routing.route import RouteMatch
from funcframe.routing.router import Router
from funcframe.server.errors import handle_http_error, handle_internal_error
from funcframe.server.sender import send_response


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    debug: bool,
    max_content_length: int | None = None,
) -> None:
    """Process a single HTTP request through the layer chain.

    Once the body is read, a watcher listens for ``http.disconnect`` and
    finishes the response as soon as the client goes away, even while a
    handler is still running.
    """
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)
    response = ResponseWriter()
    error: BaseException | None = None
    watcher: asyncio.Task[None] | None = None

    try:
        try:
            await request.body(limit=max_content_length)
            watcher = asyncio.create_task(monitor_disconnect(receive, response))
            await dispatch(router, request, response)
        except HTTPError as exc:
            handle_http_error(exc, request, response)
        except Exception as exc:
            handle_internal_error(exc, request, response, debug=debug)

        await send_response(response.to_response(), send)
    except BaseException as exc:
        # Send failures and cancellation (client went away) still finish
        error = exc
        raise
    finally:
        if watcher is not None and not watcher.done():
            watcher.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await watcher
        response.finish(error)


async def monitor_disconnect(receive: Receive, response: ResponseWriter) -> None:
    """Finish *response* when the client disconnects."""
    while True:
        message = await receive()
        if message.get("type") == "http.disconnect":
            response.finish(ClientDisconnected())
            return


async def dispatch(router: Router, request: Request, response: ResponseWriter) -> None:
    """Run the layers matching *request* in order.

    Each layer is called as ``handler(request, response, next)``.
    Awaiting ``next()`` runs the following layer; ``next(exc)`` raises
    *exc* back through the chain. Running past the last layer raises the
    router's ``NotFound`` or ``MethodNotAllowed``.
    """
    layers = list(router.matches(request.method, request.path))

    async def run(index: int) -> None:
        if index == len(layers):
            raise router.miss(request.method, request.path)

        match: RouteMatch = layers[index]
        called = False

        async def next(error: BaseException | None = None) -> None:
            nonlocal called
            if error is not None:
                raise error
            if called:
                return
            called = True
            await run(index + 1)

        await invoke_handler(match.route.handler, request.with_path_params(match.path_params), response, next)

    await run(0)
