"""HTTP responses.

Two types:

- ``ResponseWriter``: the mutable response handed to handlers as the
  second argument of ``(request, response, next)``. Writes are buffered;
  the transport sends them after the handler chain settles.
- ``Response``: the immutable snapshot the sender emits and the test
  client returns, with a chainable ``.with_*()`` API.
"""

from __future__ import annotations

import json as json_module
import logging
import threading
from collections.abc import Callable, Mapping
from dataclasses import dataclass, replace
from typing import Any, TypeAlias

logger = logging.getLogger("funcframe.server")

DEFAULT_CONTENT_TYPE = "text/html; charset=utf-8"

FinishObserver: TypeAlias = Callable[[BaseException | None], None]


@dataclass(frozen=True, slots=True)
class Response:
    """An HTTP response built through immutable transformations."""

    body: str | bytes = ""
    status: int = 200
    content_type: str = DEFAULT_CONTENT_TYPE
    headers: tuple[tuple[str, str], ...] = ()

    def with_status(self, status: int) -> Response:
        """Return a new Response with a different status code."""
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> Response:
        """Return a new Response with an additional header."""
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> Response:
        """Return a new Response with additional headers."""
        return replace(self, headers=(*self.headers, *headers.items()))

    def with_content_type(self, content_type: str) -> Response:
        """Return a new Response with a different content type."""
        return replace(self, content_type=content_type)

    def header(self, name: str) -> str | None:
        """Return the first header value named *name* (case-insensitive)."""
        name_lower = name.lower()
        for key, value in self.headers:
            if key.lower() == name_lower:
                return value
        return None

    @property
    def body_bytes(self) -> bytes:
        """Body as bytes."""
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return self.body

    @property
    def text(self) -> str:
        """Body as string."""
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8")
        return self.body

    def json(self) -> Any:
        """Body parsed as JSON."""
        return json_module.loads(self.body_bytes)


class ResponseWriter:
    """The mutable response a handler writes to.

    Chainable setters mirror the usual ``res.status(404).send(...)`` style::

        def hello(request, response, next):
            response.set_status(201).send("created")

    ``locals`` is request-scoped state shared by the layers of one request.
    ``on_finish`` observers fire exactly once, when the transport calls
    ``finish()`` after the response has been sent, failed, or been aborted.
    """

    __slots__ = (
        "_chunks",
        "_ended",
        "_finish_lock",
        "_finished",
        "_observers",
        "content_type",
        "headers",
        "locals",
        "status",
    )

    def __init__(self) -> None:
        self.status: int = 200
        self.content_type: str = DEFAULT_CONTENT_TYPE
        self.headers: list[tuple[str, str]] = []
        self.locals: dict[str, Any] = {}
        self._chunks: list[bytes] = []
        self._ended = False
        self._finished = False
        self._observers: list[FinishObserver] = []
        self._finish_lock = threading.Lock()

    # -- Writing --

    def set_status(self, status: int) -> ResponseWriter:
        """Set the status code."""
        self.status = status
        return self

    def set_header(self, name: str, value: str) -> ResponseWriter:
        """Set a header, replacing any existing value (``Content-Type`` included)."""
        if name.lower() == "content-type":
            self.content_type = value
            return self
        name_lower = name.lower()
        self.headers = [(k, v) for k, v in self.headers if k.lower() != name_lower]
        self.headers.append((name, value))
        return self

    def get_header(self, name: str) -> str | None:
        """Return the current value of header *name*, if set."""
        if name.lower() == "content-type":
            return self.content_type
        name_lower = name.lower()
        for key, value in self.headers:
            if key.lower() == name_lower:
                return value
        return None

    def write(self, chunk: str | bytes) -> ResponseWriter:
        """Append *chunk* to the body."""
        if self._ended:
            msg = "Cannot write to a response that has already ended."
            raise RuntimeError(msg)
        self._chunks.append(chunk.encode("utf-8") if isinstance(chunk, str) else chunk)
        return self

    def send(self, body: str | bytes | dict[str, Any] | list[Any] | None = None) -> ResponseWriter:
        """Write *body* and end the response.

        ``dict`` and ``list`` bodies are serialized as JSON; ``None`` sends
        an empty body.
        """
        if isinstance(body, dict | list):
            return self.json(body)
        if body is not None:
            self.write(body)
        return self.end()

    def json(self, value: Any) -> ResponseWriter:
        """Serialize *value* as JSON and end the response."""
        self.content_type = "application/json"
        self.write(json_module.dumps(value))
        return self.end()

    def send_status(self, status: int) -> ResponseWriter:
        """Set *status* and end the response with no body."""
        self.status = status
        return self.end()

    def end(self) -> ResponseWriter:
        """Mark the response complete. Further writes raise."""
        self._ended = True
        return self

    def reset(self) -> ResponseWriter:
        """Discard status, headers, and body so an error can be written.

        ``locals`` and finish observers are kept.
        """
        self.status = 200
        self.content_type = DEFAULT_CONTENT_TYPE
        self.headers = []
        self._chunks = []
        self._ended = False
        return self

    @property
    def ended(self) -> bool:
        """True once a handler has ended the response."""
        return self._ended

    @property
    def body(self) -> bytes:
        """Everything written so far."""
        return b"".join(self._chunks)

    # -- Completion --

    def on_finish(self, observer: FinishObserver) -> None:
        """Register a one-shot observer for the end of this response.

        Observers registered after the response finished run immediately.
        """
        with self._finish_lock:
            if not self._finished:
                self._observers.append(observer)
                return
        observer(None)

    @property
    def finished(self) -> bool:
        """True once the transport is done with this response."""
        return self._finished

    def finish(self, error: BaseException | None = None) -> None:
        """Fire the finish observers. Idempotent; only the first call counts."""
        with self._finish_lock:
            if self._finished:
                return
            self._finished = True
            observers, self._observers = self._observers, []
        for observer in observers:
            try:
                observer(error)
            except Exception:
                logger.exception("Response finish observer %r failed", observer)

    # -- Snapshot --

    def to_response(self) -> Response:
        """Snapshot the current state as an immutable ``Response``."""
        return Response(
            body=self.body,
            status=self.status,
            content_type=self.content_type,
            headers=tuple(self.headers),
        )
