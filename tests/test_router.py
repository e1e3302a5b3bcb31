"""Tests for funcframe.routing.router — ordered, first-registered-wins router."""

import pytest

from funcframe.errors import ConfigurationError, MethodNotAllowed, NotFound
from funcframe.routing.router import Router, compile_path, parse_path


def _handler(request, response, next) -> None:
    response.send("ok")


def _other(request, response, next) -> None:
    response.send("other")


class TestParsePath:
    def test_static(self) -> None:
        segments = parse_path("/robots.txt")
        assert len(segments) == 1
        assert segments[0].value == "robots.txt"
        assert segments[0].is_param is False

    def test_param(self) -> None:
        segments = parse_path("/items/{id}")
        assert segments[1].is_param is True
        assert segments[1].param_name == "id"
        assert segments[1].param_type == "str"

    def test_catch_all(self) -> None:
        segments = parse_path("/{path:path}")
        assert segments[0].param_type == "path"
        assert segments[0].param_name == "path"

    def test_root(self) -> None:
        assert parse_path("/") == []

    def test_unknown_converter_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="converter"):
            parse_path("/items/{id:uuid}")

    def test_catch_all_must_be_last(self) -> None:
        with pytest.raises(ConfigurationError, match="last"):
            parse_path("/{rest:path}/tail")


class TestCompilePath:
    def test_catch_all_matches_root(self) -> None:
        pattern = compile_path("/{path:path}")
        assert pattern.match("/") is not None
        assert pattern.match("/a/b/c").group("path") == "a/b/c"

    def test_static_ignores_trailing_slash(self) -> None:
        pattern = compile_path("/robots.txt")
        assert pattern.match("/robots.txt/") is not None
        assert pattern.match("/robots.txt/extra") is None

    def test_prefix_matches_nested_paths(self) -> None:
        pattern = compile_path("/favicon.ico", prefix=True)
        assert pattern.match("/favicon.ico") is not None
        assert pattern.match("/favicon.ico/large") is not None
        assert pattern.match("/favicon.icox") is None

    def test_dot_is_literal(self) -> None:
        pattern = compile_path("/favicon.ico")
        assert pattern.match("/faviconXico") is None


class TestRouterMatching:
    def test_registration_order_is_kept(self) -> None:
        r = Router()
        r.add("/robots.txt", _other, prefix=True)
        r.add("/{path:path}", _handler)
        r.compile()

        matches = list(r.matches("GET", "/robots.txt"))
        assert [m.route.handler for m in matches] == [_other, _handler]

    def test_method_filter(self) -> None:
        r = Router()
        r.add("/{path:path}", _handler, methods=frozenset({"post"}))
        r.compile()

        assert list(r.matches("GET", "/")) == []
        assert len(list(r.matches("POST", "/"))) == 1

    def test_all_methods_when_unbound(self) -> None:
        r = Router()
        r.add("/{path:path}", _handler)
        r.compile()

        for method in ("GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"):
            assert len(list(r.matches(method, "/anything"))) == 1

    def test_path_params(self) -> None:
        r = Router()
        r.add("/items/{id:int}", _handler)
        r.compile()

        (match,) = r.matches("GET", "/items/42")
        assert match.path_params == {"id": "42"}
        assert list(r.matches("GET", "/items/abc")) == []

    def test_empty_catch_all_is_empty_string(self) -> None:
        r = Router()
        r.add("/{path:path}", _handler)
        r.compile()

        (match,) = r.matches("GET", "/")
        assert match.path_params == {"path": ""}

    def test_cannot_add_after_compile(self) -> None:
        r = Router()
        r.compile()
        with pytest.raises(RuntimeError, match="after compilation"):
            r.add("/", _handler)

    def test_routes_listed_in_order(self) -> None:
        r = Router()
        r.add("/a", _handler)
        r.add("/b", _other)
        assert [route.path for route in r.routes] == ["/a", "/b"]


class TestRouterMiss:
    def test_not_found(self) -> None:
        r = Router()
        r.add("/items", _handler, methods=frozenset({"GET"}))
        assert isinstance(r.miss("GET", "/nope"), NotFound)

    def test_method_not_allowed(self) -> None:
        r = Router()
        r.add("/{path:path}", _handler, methods=frozenset({"POST"}))
        error = r.miss("GET", "/")
        assert isinstance(error, MethodNotAllowed)
        assert error.status == 405
        assert ("Allow", "POST") in error.headers

    def test_prefix_layers_do_not_count_as_allowed(self) -> None:
        r = Router()
        r.add("/favicon.ico", _handler, prefix=True)
        assert isinstance(r.miss("GET", "/favicon.ico"), NotFound)
