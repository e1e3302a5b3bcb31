"""Shared type aliases used across funcframe modules."""

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, TypeAlias

if TYPE_CHECKING:
    from funcframe.http.request import Request
    from funcframe.http.response import ResponseWriter

# User function: shape depends on the declared signature type
UserFunction: TypeAlias = Callable[..., Any]

# Continuation handed to every layer; ``await next()`` runs the next layer,
# ``await next(exc)`` raises ``exc`` through the chain
Next: TypeAlias = Callable[..., Awaitable[None]]

# The canonical (request, response, next) shape every signature type is
# reduced to. Sync callables are allowed; the transport awaits whatever
# they return.
NormalizedHandler: TypeAlias = Callable[["Request", "ResponseWriter", Next], Any]

# Timing policy: decides per request whether execution timing is logged
TimingPolicy: TypeAlias = Callable[["Request"], bool]
