"""CloudEvent functions: ``fn(cloud_event)`` or ``fn(cloud_event, callback)``.

Both HTTP encodings of the envelope are read:

- binary mode: attributes in ``ce-*`` headers, the body is the data;
- structured mode (``application/cloudevents+json``): the body is the
  whole envelope.
"""

from __future__ import annotations

import base64
import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from funcframe._internal.types import Next, NormalizedHandler, UserFunction
from funcframe.errors import InvalidEventError
from funcframe.events.respond import positional_arity, run_event_function, send_error, send_result
from funcframe.http.request import Request
from funcframe.http.response import ResponseWriter

STRUCTURED_CONTENT_TYPE = "application/cloudevents+json"

REQUIRED_ATTRIBUTES = ("id", "source", "type", "specversion")
_OPTIONAL_ATTRIBUTES = ("subject", "time", "datacontenttype", "dataschema")
_KNOWN = frozenset((*REQUIRED_ATTRIBUTES, *_OPTIONAL_ATTRIBUTES, "data", "data_base64"))


@dataclass(frozen=True, slots=True)
class CloudEvent:
    """A CloudEvents envelope."""

    id: str
    source: str
    type: str
    specversion: str
    subject: str | None = None
    time: str | None = None
    datacontenttype: str | None = None
    dataschema: str | None = None
    data: Any = None
    extensions: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_attributes(cls, attributes: Mapping[str, Any], data: Any) -> CloudEvent:
        """Build an envelope, rejecting one without the required attributes."""
        missing = [name for name in REQUIRED_ATTRIBUTES if not attributes.get(name)]
        if missing:
            msg = f"CloudEvent is missing required attributes: {', '.join(missing)}"
            raise InvalidEventError(msg)
        return cls(
            id=str(attributes["id"]),
            source=str(attributes["source"]),
            type=str(attributes["type"]),
            specversion=str(attributes["specversion"]),
            subject=attributes.get("subject"),
            time=attributes.get("time"),
            datacontenttype=attributes.get("datacontenttype"),
            dataschema=attributes.get("dataschema"),
            data=data,
            extensions={k: v for k, v in attributes.items() if k not in _KNOWN},
        )

    def __getitem__(self, key: str) -> Any:
        """Attribute access by name, extensions included."""
        if key in _KNOWN and key != "data_base64":
            return getattr(self, key)
        return self.extensions[key]


def _is_json(content_type: str) -> bool:
    return content_type == "application/json" or content_type.endswith("+json")


def decode_cloud_event(request: Request) -> CloudEvent:
    """Read a CloudEvent from a binary- or structured-mode request.

    Raises ``InvalidEventError`` for unreadable bodies or missing
    attributes.
    """
    if request.mimetype == STRUCTURED_CONTENT_TYPE:
        try:
            envelope = request.get_json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            msg = f"CloudEvent envelope is not valid JSON: {exc}"
            raise InvalidEventError(msg) from exc
        if not isinstance(envelope, dict):
            msg = "CloudEvent envelope must be a JSON object"
            raise InvalidEventError(msg)
        payload = envelope.get("data")
        if "data_base64" in envelope:
            payload = base64.b64decode(envelope["data_base64"])
        return CloudEvent.from_attributes(envelope, payload)

    attributes: dict[str, Any] = request.headers.with_prefix("ce-")
    if request.content_type:
        attributes["datacontenttype"] = request.content_type

    data: Any = request.data or None
    if data is not None and _is_json(request.mimetype):
        try:
            data = request.get_json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            msg = f"CloudEvent data is not valid JSON: {exc}"
            raise InvalidEventError(msg) from exc
    return CloudEvent.from_attributes(attributes, data)


def wrap_cloud_event_function(user_function: UserFunction) -> NormalizedHandler:
    """Adapt a CloudEvent function to the ``(request, response, next)`` shape.

    Whether it takes a callback is decided here, once.
    """
    with_callback = positional_arity(user_function) >= 2

    async def handle_cloud_event(request: Request, response: ResponseWriter, next: Next) -> None:  # noqa: ARG001
        event = decode_cloud_event(request)
        try:
            result = await run_event_function(user_function, (event,), with_callback=with_callback)
        except Exception as exc:
            send_error(response, exc)
            return
        send_result(response, result)

    return handle_cloud_event
