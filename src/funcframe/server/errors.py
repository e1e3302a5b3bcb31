"""Error mapping for the transport.

Writes ``HTTPError`` exceptions and unexpected failures onto the
response, discarding whatever the handler had buffered.
"""

import logging
import traceback

from funcframe.errors import HTTPError
from funcframe.http.request import Request
from funcframe.http.response import ResponseWriter

logger = logging.getLogger("funcframe.server")


def handle_http_error(exc: HTTPError, request: Request, response: ResponseWriter) -> None:
    """Write an HTTPError as a plain-text response."""
    logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)
    response.reset()
    response.content_type = "text/plain; charset=utf-8"
    for name, value in exc.headers:
        response.set_header(name, value)
    response.set_status(exc.status).send(exc.detail)


def handle_internal_error(
    exc: Exception,
    request: Request,
    response: ResponseWriter,
    *,
    debug: bool,
) -> None:
    """Write an unexpected exception as a 500 response.

    The traceback goes to the log always and to the body only in debug mode.
    """
    logger.exception("500 %s %s", request.method, request.path)
    response.reset()
    response.content_type = "text/plain; charset=utf-8"
    body = "".join(traceback.format_exception(exc)) if debug else "Internal Server Error"
    response.set_status(500).send(body)
