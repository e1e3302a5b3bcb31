"""Shared fixtures for funcframe tests."""

import asyncio
from typing import Any

import pytest

from funcframe.http.request import Request


def make_scope(
    method: str = "GET",
    path: str = "/",
    headers: dict[str, str] | None = None,
) -> dict[str, Any]:
    """A minimal ASGI HTTP scope."""
    return {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": method,
        "path": path,
        "query_string": b"",
        "headers": [
            (name.lower().encode("latin-1"), value.encode("latin-1"))
            for name, value in (headers or {}).items()
        ],
        "server": ("testserver", 80),
        "client": ("127.0.0.1", 0),
    }


def make_receive(body: bytes = b"", disconnect: asyncio.Event | None = None):
    """An ASGI receive that sends *body*, then waits for *disconnect*.

    Without *disconnect* the client never goes away.
    """
    gone = disconnect or asyncio.Event()
    sent = False

    async def receive() -> dict[str, Any]:
        nonlocal sent
        if not sent:
            sent = True
            return {"type": "http.request", "body": body, "more_body": False}
        await gone.wait()
        return {"type": "http.disconnect"}

    return receive


@pytest.fixture
def make_request():
    """Build a Request with an already-read body."""

    def factory(
        method: str = "GET",
        path: str = "/",
        headers: dict[str, str] | None = None,
        body: bytes = b"",
    ) -> Request:
        request = Request.from_asgi(make_scope(method, path, headers), None)
        request._cache["_body"] = body
        return request

    return factory
