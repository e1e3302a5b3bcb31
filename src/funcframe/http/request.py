"""Immutable HTTP request.

Frozen metadata with async body access. The transport preloads the body
before dispatch, so sync user functions can read ``request.data`` too.
"""

from __future__ import annotations

import json as json_module
from collections.abc import AsyncGenerator
from dataclasses import dataclass, field, replace
from typing import Any
from urllib.parse import parse_qs

from funcframe._internal.asgi import Receive
from funcframe.errors import PayloadTooLarge
from funcframe.http.headers import Headers


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    Metadata (method, path, headers, etc.) is frozen at creation.
    Body is read asynchronously via ``.body()``, ``.json()``, ``.text()``;
    once read it is cached and also available as ``.data``.
    """

    method: str
    path: str
    headers: Headers
    query: dict[str, list[str]]
    path_params: dict[str, str]
    http_version: str
    server: tuple[str, int] | None
    client: tuple[str, int] | None
    query_string: bytes = b""

    # Private: ASGI receive callable for body streaming
    _receive: Receive | None = field(default=None, repr=False, compare=False)

    # Private: mutable cache for the body
    # (dict contents are mutable even though the field reference is frozen)
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    # -- Computed properties --

    @property
    def host(self) -> str | None:
        """The declared ``Host`` header value."""
        return self.headers.get("host")

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    @property
    def mimetype(self) -> str:
        """Content type without parameters, lowercased (``""`` if absent)."""
        return (self.content_type or "").split(";", 1)[0].strip().lower()

    @property
    def content_length(self) -> int | None:
        """The Content-Length header as int."""
        value = self.headers.get("content-length")
        if value is None:
            return None
        try:
            return int(value)
        except ValueError:
            return None

    @property
    def url(self) -> str:
        """Request path plus query string."""
        if self.query_string:
            return f"{self.path}?{self.query_string.decode('latin-1')}"
        return self.path

    @property
    def data(self) -> bytes:
        """The preloaded body.

        Raises ``RuntimeError`` if the body has not been read yet.
        """
        if "_body" not in self._cache:
            msg = "Request body has not been read; await request.body() first."
            raise RuntimeError(msg)
        return self._cache["_body"]

    def get_json(self) -> Any:
        """Parse the preloaded body as JSON (``None`` for an empty body)."""
        raw = self.data
        if not raw:
            return None
        return json_module.loads(raw)

    def with_path_params(self, path_params: dict[str, str]) -> Request:
        """Return a copy carrying *path_params*, sharing the body cache."""
        return replace(self, path_params=path_params, _cache=self._cache)

    # -- Async body access --

    async def body(self, *, limit: int | None = None) -> bytes:
        """Read the full request body.

        The ASGI receive is consumed once; later calls return the cached
        bytes. Raises ``PayloadTooLarge`` when *limit* is exceeded.
        """
        if "_body" in self._cache:
            return self._cache["_body"]
        chunks: list[bytes] = []
        size = 0
        async for chunk in self.stream():
            size += len(chunk)
            if limit is not None and size > limit:
                raise PayloadTooLarge(limit)
            chunks.append(chunk)
        result = b"".join(chunks)
        self._cache["_body"] = result
        return result

    async def stream(self) -> AsyncGenerator[bytes]:
        """Stream the request body in chunks."""
        if self._receive is None:
            return
        while True:
            message = await self._receive()
            if message["type"] == "http.disconnect":
                break
            body = message.get("body", b"")
            if body:
                yield body
            if not message.get("more_body", False):
                break

    async def json(self) -> Any:
        """Parse the body as JSON."""
        await self.body()
        return self.get_json()

    async def text(self) -> str:
        """Read the body as text (UTF-8)."""
        raw = await self.body()
        return raw.decode("utf-8")

    # -- Factory --

    @classmethod
    def from_asgi(cls, scope: dict[str, Any], receive: Receive | None) -> Request:
        """Create a Request from an ASGI scope and receive callable."""
        server = scope.get("server")
        client = scope.get("client")
        query_string = scope.get("query_string", b"")
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=Headers(tuple(scope.get("headers", ()))),
            query=parse_qs(query_string.decode("latin-1"), keep_blank_values=True),
            path_params={},
            http_version=scope.get("http_version", "1.1"),
            server=tuple(server) if server else None,
            client=tuple(client) if client else None,
            query_string=query_string,
            _receive=receive,
        )
