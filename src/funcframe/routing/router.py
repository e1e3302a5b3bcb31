"""Ordered router.

Routes are kept in registration order and matched first-registered-wins,
so specific bindings registered early shadow catch-alls registered later.
"""

import re
from collections.abc import Callable, Iterator
from typing import Any

from funcframe.errors import ConfigurationError, MethodNotAllowed, NotFound
from funcframe.routing.params import CONVERTERS
from funcframe.routing.route import PathSegment, Route, RouteMatch


def parse_path(path: str) -> list[PathSegment]:
    """Parse a route path string into segments.

    Examples::

        "/robots.txt"     -> [PathSegment("robots.txt")]
        "/items/{id}"     -> [PathSegment("items"), PathSegment("{id}", is_param=True, ...)]
        "/{path:path}"    -> [PathSegment("{path:path}", is_param=True, param_type="path")]
    """
    segments: list[PathSegment] = []
    parts = [part for part in path.strip("/").split("/") if part]
    for index, part in enumerate(parts):
        if part.startswith("{") and part.endswith("}"):
            inner = part[1:-1]
            if ":" in inner:
                param_name, param_type = inner.split(":", 1)
            else:
                param_name = inner
                param_type = "str"
            if param_type not in CONVERTERS:
                msg = f"Unknown path converter {param_type!r} in route {path!r}."
                raise ConfigurationError(msg)
            if param_type == "path" and index != len(parts) - 1:
                msg = f"Catch-all segment must be last in route {path!r}."
                raise ConfigurationError(msg)
            segments.append(
                PathSegment(
                    value=part,
                    is_param=True,
                    param_name=param_name,
                    param_type=param_type,
                )
            )
        else:
            segments.append(PathSegment(value=part))
    return segments


def compile_path(path: str, *, prefix: bool = False) -> re.Pattern[str]:
    """Compile a route path into an anchored regex.

    A trailing slash on the request path is ignored. ``prefix`` patterns
    also match every path nested below *path*.
    """
    pattern = ""
    for seg in parse_path(path):
        if not seg.is_param:
            pattern += "/" + re.escape(seg.value)
        elif seg.param_type == "path":
            # zero or more remaining segments
            pattern += f"(?:/(?P<{seg.param_name}>{CONVERTERS['path']}))?"
        else:
            pattern += f"/(?P<{seg.param_name}>{CONVERTERS[seg.param_type]})"
    if prefix:
        return re.compile(f"^{pattern}(?:/.*)?$")
    return re.compile(f"^{pattern}/?$")


class Router:
    """Ordered router with first-registered-wins matching.

    Usage::

        router = Router()
        router.add("/robots.txt", not_found, prefix=True)
        router.add("/{path:path}", handler, methods=frozenset({"POST"}))
        router.compile()
        matches = list(router.matches("POST", "/"))
    """

    __slots__ = ("_compiled", "_routes")

    def __init__(self) -> None:
        self._routes: list[Route] = []
        self._compiled = False

    def add(
        self,
        path: str,
        handler: Callable[..., Any],
        *,
        methods: frozenset[str] | None = None,
        prefix: bool = False,
        name: str | None = None,
    ) -> Route:
        """Append a route. Must be called before compile()."""
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)
        route = Route(
            path=path,
            handler=handler,
            methods=frozenset(m.upper() for m in methods) if methods is not None else None,
            pattern=compile_path(path, prefix=prefix),
            prefix=prefix,
            name=name,
        )
        self._routes.append(route)
        return route

    @property
    def routes(self) -> list[Route]:
        """All registered routes, in registration order."""
        return list(self._routes)

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._compiled = True

    def matches(self, method: str, path: str) -> Iterator[RouteMatch]:
        """Yield every route matching *method* and *path*, in order."""
        for route in self._routes:
            if not route.accepts(method):
                continue
            found = route.pattern.match(path)
            if found is None:
                continue
            params = {k: v for k, v in found.groupdict().items() if v is not None}
            yield RouteMatch(route=route, path_params=params)

    def miss(self, method: str, path: str) -> NotFound | MethodNotAllowed:
        """Build the error for a request no remaining route handles.

        ``MethodNotAllowed`` when some method-bound route matches the path,
        ``NotFound`` otherwise.
        """
        allowed: set[str] = set()
        for route in self._routes:
            if route.prefix or route.methods is None:
                continue
            if route.pattern.match(path):
                allowed.update(route.methods)
        if allowed and method not in allowed:
            return MethodNotAllowed(frozenset(allowed))
        return NotFound(f"No route matches {method} {path!r}")
