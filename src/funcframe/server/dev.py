"""Serving a FunctionApp with uvicorn."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from funcframe.app import FunctionApp


def run_server(
    app: FunctionApp,
    host: str,
    port: int,
    *,
    log_level: str = "info",
) -> None:
    """Start a single-process uvicorn server with the given app.

    uvicorn's ``run()`` also accepts an import string, but funcframe
    hands it the live app object, so reload is not available here.
    """
    import uvicorn

    config = uvicorn.Config(
        app,
        host=host,
        port=port,
        log_level=log_level,
        lifespan="on",
    )
    uvicorn.Server(config).run()
