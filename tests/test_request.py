"""Tests for sncustomws.http.request — ASGI scope to Request."""

from sncustomws.http.request import Request


def _receiver(*chunks: bytes):
    messages = [
        {"type": "http.request", "body": chunk, "more_body": i < len(chunks) - 1}
        for i, chunk in enumerate(chunks)
    ]

    async def receive() -> dict:
        return messages.pop(0)

    return receive


def _scope(**overrides: object) -> dict:
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/electronics/productAvailabilities",
        "query_string": b"filters=a%3AEA",
        "headers": [(b"Content-Type", b"application/json"), (b"accept", b"application/json")],
        "client": ("10.0.0.1", 5000),
    }
    scope.update(overrides)
    return scope


class TestFromAsgi:
    def test_fields(self) -> None:
        request = Request.from_asgi(_scope(), _receiver(b""))
        assert request.method == "GET"
        assert request.path == "/electronics/productAvailabilities"
        assert request.query["filters"] == "a:EA"
        assert request.client == ("10.0.0.1", 5000)
        assert request.path_params == {}

    def test_headers_lowercased(self) -> None:
        request = Request.from_asgi(_scope(), _receiver(b""))
        assert request.headers["content-type"] == "application/json"
        assert request.content_type == "application/json"
        assert request.accept == "application/json"

    def test_defaults(self) -> None:
        request = Request.from_asgi(_scope(headers=[], client=None), _receiver(b""))
        assert request.content_type is None
        assert request.accept == "*/*"
        assert request.client is None


class TestBody:
    async def test_chunks_joined_and_cached(self) -> None:
        request = Request.from_asgi(_scope(), _receiver(b'{"a":', b" 1}"))
        assert await request.body() == b'{"a": 1}'
        assert await request.body() == b'{"a": 1}'
        assert await request.json() == {"a": 1}

    async def test_path_params_copy_shares_body(self) -> None:
        request = Request.from_asgi(_scope(), _receiver(b"payload"))
        routed = request.with_path_params({"baseSiteId": "electronics"})
        assert routed.path_params == {"baseSiteId": "electronics"}
        assert request.path_params == {}
        assert await routed.body() == b"payload"
        assert await request.body() == b"payload"
