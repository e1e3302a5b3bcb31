"""funcframe exception hierarchy.

Shared across the router, the transport, and the event adapters so every
module raises and catches the same types.
"""

from dataclasses import dataclass


class FunctionsError(Exception):
    """Base for all funcframe-specific errors."""


class ConfigurationError(FunctionsError):
    """Raised when a function target or its configuration is invalid.

    Typically raised while loading the target at startup, before any
    request is served.
    """


class ClientDisconnected(FunctionsError):  # noqa: N818
    """The client went away before the response was sent.

    Passed to finish observers; never raised into handlers.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(FunctionsError):
    """An error that maps directly to an HTTP status code.

    Raised by the router, the event adapters, or user handlers. The
    transport catches these and writes the status and detail as the
    response.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class BadRequest(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """400 — the request could not be read."""

    def __init__(self, detail: str = "Bad Request") -> None:
        super().__init__(status=400, detail=detail)


class InvalidEventError(BadRequest):
    """400 — an event or CloudEvent payload could not be decoded."""


class NotFound(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """404 — no route matched the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """405 — a route exists for the path but not for this HTTP method.

    Includes an ``Allow`` header listing the valid methods.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        default_detail = f"Method not allowed. Allowed methods: {allow_value}"
        super().__init__(
            status=405,
            detail=detail or default_detail,
            headers=(("Allow", allow_value),),
        )


class PayloadTooLarge(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """413 — the request body exceeds ``max_content_length``."""

    def __init__(self, limit: int) -> None:
        super().__init__(status=413, detail=f"Request body exceeds {limit} bytes")
