"""Legacy event functions: ``fn(data, context)`` or ``fn(data, context, callback)``.

The request body is a JSON object. ``data`` is its ``data`` field; the
context is its ``context`` field when present, otherwise every other
top-level field. Binary-mode CloudEvent requests are accepted too, with
the ``ce-*`` attributes becoming the context.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from funcframe._internal.types import Next, NormalizedHandler, UserFunction
from funcframe.errors import InvalidEventError
from funcframe.events.respond import positional_arity, run_event_function, send_error, send_result
from funcframe.http.request import Request
from funcframe.http.response import ResponseWriter


@dataclass(frozen=True, slots=True)
class Context:
    """Metadata delivered with a legacy event."""

    event_id: str | None = None
    timestamp: str | None = None
    event_type: str | None = None
    resource: Any = None
    raw: Mapping[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> Context:
        """Build a Context, accepting camelCase or snake_case keys."""

        def pick(*keys: str) -> Any:
            for key in keys:
                if key in raw:
                    return raw[key]
            return None

        return cls(
            event_id=pick("eventId", "event_id", "id"),
            timestamp=pick("timestamp", "time"),
            event_type=pick("eventType", "event_type", "type"),
            resource=pick("resource", "source"),
            raw=dict(raw),
        )

    def get(self, key: str, default: Any = None) -> Any:
        """Look up any raw context field."""
        return self.raw.get(key, default)


def decode_event(request: Request) -> tuple[Any, Context]:
    """Split a request into ``(data, context)``.

    Raises ``InvalidEventError`` when the body is not a JSON object.
    """
    attributes = request.headers.with_prefix("ce-")
    if "id" in attributes and "specversion" in attributes:
        return _read_json(request, allow_empty=True), Context.from_mapping(attributes)

    event = _read_json(request)
    if not isinstance(event, dict):
        msg = "Event payload must be a JSON object"
        raise InvalidEventError(msg)

    data = event.get("data")
    context = event.get("context")
    if not isinstance(context, Mapping):
        context = {key: value for key, value in event.items() if key != "data"}
    return data, Context.from_mapping(context)


def _read_json(request: Request, *, allow_empty: bool = False) -> Any:
    if not request.data:
        if allow_empty:
            return None
        msg = "Event payload is empty"
        raise InvalidEventError(msg)
    try:
        return request.get_json()
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        msg = f"Event payload is not valid JSON: {exc}"
        raise InvalidEventError(msg) from exc


def wrap_event_function(user_function: UserFunction) -> NormalizedHandler:
    """Adapt an event function to the ``(request, response, next)`` shape.

    Whether it takes a callback is decided here, once.
    """
    with_callback = positional_arity(user_function) >= 3

    async def handle_event(request: Request, response: ResponseWriter, next: Next) -> None:  # noqa: ARG001
        data, context = decode_event(request)
        try:
            result = await run_event_function(
                user_function, (data, context), with_callback=with_callback
            )
        except Exception as exc:
            send_error(response, exc)
            return
        send_result(response, result)

    return handle_event
