"""In-process test client for sncustomws applications.

Requests go straight into the app's ASGI callable, without a socket, and
come back as the same ``Response`` type handlers return. The lifespan
hooks run on ``async with`` entry and exit, and the route table is built
on entry, so a conflicting mapping fails there rather than on the first
request.
"""

from __future__ import annotations

import json as json_module
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlencode

from sncustomws._internal.invoke import invoke
from sncustomws.app import App
from sncustomws.http.response import Response

QueryValue = str | int


class _ResponseRecorder:
    """ASGI ``send`` callable that assembles the emitted messages."""

    __slots__ = ("body", "headers", "status")

    def __init__(self) -> None:
        self.status = 500
        self.headers: list[tuple[str, str]] = []
        self.body = bytearray()

    async def __call__(self, message: dict[str, Any]) -> None:
        if message["type"] == "http.response.start":
            self.status = message["status"]
            self.headers = [
                (name.decode("latin-1"), value.decode("latin-1"))
                for name, value in message.get("headers", ())
            ]
        elif message["type"] == "http.response.body":
            self.body += message.get("body", b"")

    def response(self) -> Response:
        content_type = "text/plain; charset=utf-8"
        extra: list[tuple[str, str]] = []
        for name, value in self.headers:
            if name == "content-type":
                content_type = value
            elif name != "content-length":
                extra.append((name, value))
        return Response(
            body=bytes(self.body),
            status=self.status,
            content_type=content_type,
            headers=tuple(extra),
        )


class TestClient:
    """Drive an App from tests.

    Usage::

        async with TestClient(app) as client:
            response = await client.product_availability("electronics", "3318057_A:EA,PC")
            assert response.status == 200
    """

    __test__ = False

    __slots__ = ("app",)

    def __init__(self, app: App) -> None:
        self.app = app

    async def __aenter__(self) -> TestClient:
        self.app._ensure_frozen()
        for hook in self.app._startup_hooks:
            await invoke(hook)
        return self

    async def __aexit__(self, *args: object) -> None:
        for hook in self.app._shutdown_hooks:
            await invoke(hook)

    # -- Web service shortcuts --

    async def product_availability(
        self,
        base_site_id: str,
        filters: str | None = None,
        *,
        headers: Mapping[str, str] | None = None,
    ) -> Response:
        """``GET /{baseSiteId}/productAvailabilities``; ``filters`` is sent unencoded."""
        query = {"filters": filters} if filters is not None else None
        return await self.get(
            f"/{base_site_id}/productAvailabilities", query=query, headers=headers
        )

    async def product_search(
        self,
        base_site_id: str,
        query: str | None = None,
        **params: QueryValue,
    ) -> Response:
        """``GET /{baseSiteId}/products/search`` with paging given as keyword params."""
        if query is not None:
            params["query"] = query
        return await self.get(f"/{base_site_id}/products/search", query=params)

    # -- Plain requests --

    async def get(
        self,
        path: str,
        *,
        query: Mapping[str, QueryValue] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Response:
        return await self.request("GET", path, query=query, headers=headers)

    async def post(
        self,
        path: str,
        *,
        json: Any = None,
        body: bytes = b"",
        headers: Mapping[str, str] | None = None,
    ) -> Response:
        """POST *body*, or *json* serialized with a JSON content type."""
        all_headers = dict(headers or {})
        if json is not None:
            body = json_module.dumps(json).encode("utf-8")
            all_headers.setdefault("content-type", "application/json")
        return await self.request("POST", path, body=body, headers=all_headers)

    async def request(
        self,
        method: str,
        path: str,
        *,
        query: Mapping[str, QueryValue] | None = None,
        headers: Mapping[str, str] | None = None,
        body: bytes = b"",
    ) -> Response:
        """Send one request through the app and return what it answered."""
        path, _, query_string = path.partition("?")
        if query:
            encoded = urlencode({name: str(value) for name, value in query.items()})
            query_string = f"{query_string}&{encoded}" if query_string else encoded

        scope: dict[str, Any] = {
            "type": "http",
            "asgi": {"version": "3.0"},
            "http_version": "1.1",
            "method": method.upper(),
            "path": path,
            "raw_path": path.encode("latin-1"),
            "query_string": query_string.encode("latin-1"),
            "root_path": "",
            "headers": [
                (name.lower().encode("latin-1"), value.encode("latin-1"))
                for name, value in (headers or {}).items()
            ],
            "server": ("testserver", 80),
            "client": ("127.0.0.1", 0),
        }

        pending = [{"type": "http.request", "body": body, "more_body": False}]

        async def receive() -> dict[str, Any]:
            return pending.pop() if pending else {"type": "http.disconnect"}

        recorder = _ResponseRecorder()
        await self.app(scope, receive, recorder)
        return recorder.response()
