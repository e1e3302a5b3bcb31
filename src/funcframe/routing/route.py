"""Route and RouteMatch frozen dataclasses."""

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route path.

    Static:    ``/robots.txt``    (is_param=False)
    Param:     ``/{name}``        (is_param=True, param_name="name")
    Catch-all: ``/{path:path}``   (is_param=True, param_type="path")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None
    param_type: str = "str"


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen route definition.

    ``methods`` is ``None`` for routes that accept every method.
    ``prefix`` routes (registered with ``app.use``) also match any path
    below theirs.
    """

    path: str
    handler: Callable[..., Any]
    methods: frozenset[str] | None
    pattern: re.Pattern[str]
    prefix: bool = False
    name: str | None = None

    def accepts(self, method: str) -> bool:
        """Whether this route handles *method*."""
        return self.methods is None or method in self.methods


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    route: Route
    path_params: dict[str, str]
