"""Tests for funcframe.http.request and funcframe.http.headers."""

import pytest

from funcframe.errors import PayloadTooLarge
from funcframe.http.headers import Headers
from funcframe.http.request import Request


def _scope(**overrides: object) -> dict[str, object]:
    base: dict[str, object] = {
        "type": "http",
        "method": "POST",
        "path": "/",
        "query_string": b"",
        "headers": [],
    }
    base.update(overrides)
    return base


def _receiver(*chunks: bytes):
    messages = [
        {"type": "http.request", "body": chunk, "more_body": i < len(chunks) - 1}
        for i, chunk in enumerate(chunks)
    ]

    async def receive() -> dict[str, object]:
        if messages:
            return messages.pop(0)
        return {"type": "http.disconnect"}

    return receive


class TestHeaders:
    def test_case_insensitive(self) -> None:
        h = Headers.from_pairs({"Host": "cloudfunctions.net"})
        assert h["host"] == "cloudfunctions.net"
        assert h.get("HOST") == "cloudfunctions.net"

    def test_get_missing(self) -> None:
        assert Headers().get("host") is None

    def test_with_prefix(self) -> None:
        h = Headers.from_pairs({"ce-id": "1", "ce-type": "t", "content-type": "x", "ce-": "?"})
        assert h.with_prefix("ce-") == {"id": "1", "type": "t"}


class TestRequest:
    def test_from_asgi(self) -> None:
        req = Request.from_asgi(
            _scope(method="GET", path="/a", query_string=b"q=1&q=2", headers=[(b"host", b"example.com")]),
            None,
        )
        assert req.method == "GET"
        assert req.host == "example.com"
        assert req.query == {"q": ["1", "2"]}
        assert req.url == "/a?q=1&q=2"

    def test_mimetype_strips_parameters(self) -> None:
        req = Request.from_asgi(
            _scope(headers=[(b"content-type", b"Application/JSON; charset=utf-8")]), None
        )
        assert req.mimetype == "application/json"

    @pytest.mark.asyncio
    async def test_body_is_read_once_and_cached(self) -> None:
        req = Request.from_asgi(_scope(), _receiver(b'{"a"', b": 1}"))
        assert await req.body() == b'{"a": 1}'
        assert await req.body() == b'{"a": 1}'
        assert req.data == b'{"a": 1}'
        assert req.get_json() == {"a": 1}

    @pytest.mark.asyncio
    async def test_body_limit(self) -> None:
        req = Request.from_asgi(_scope(), _receiver(b"x" * 10))
        with pytest.raises(PayloadTooLarge):
            await req.body(limit=5)

    def test_data_before_read_raises(self) -> None:
        req = Request.from_asgi(_scope(), _receiver(b"x"))
        with pytest.raises(RuntimeError, match="not been read"):
            req.data  # noqa: B018

    @pytest.mark.asyncio
    async def test_with_path_params_shares_body(self) -> None:
        req = Request.from_asgi(_scope(), _receiver(b"abc"))
        await req.body()
        copy = req.with_path_params({"path": "x"})
        assert copy.path_params == {"path": "x"}
        assert copy.data == b"abc"

    @pytest.mark.asyncio
    async def test_empty_json_is_none(self) -> None:
        req = Request.from_asgi(_scope(), _receiver(b""))
        assert await req.json() is None
