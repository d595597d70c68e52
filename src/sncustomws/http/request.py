"""Immutable HTTP request.

Frozen metadata with async body access.
"""

from __future__ import annotations

import json as json_module
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from sncustomws._internal.asgi import Receive, Scope
from sncustomws.http.query import QueryParams


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    Header names are lower-cased. Body is read once through ``.body()``
    and cached.
    """

    method: str
    path: str
    headers: Mapping[str, str]
    query: QueryParams
    path_params: dict[str, str]
    client: tuple[str, int] | None

    # Private: ASGI receive callable for body streaming
    _receive: Receive

    # Private: mutable cache for the body
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    @property
    def accept(self) -> str:
        """The Accept header value, ``*/*`` when absent."""
        return self.headers.get("accept", "*/*")

    async def body(self) -> bytes:
        """Read the full request body."""
        if "_body" in self._cache:
            return self._cache["_body"]
        chunks: list[bytes] = []
        while True:
            message = await self._receive()
            chunk = message.get("body", b"")
            if chunk:
                chunks.append(chunk)
            if not message.get("more_body", False):
                break
        result = b"".join(chunks)
        self._cache["_body"] = result
        return result

    async def json(self) -> Any:
        """Parse the body as JSON."""
        return json_module.loads(await self.body())

    def with_path_params(self, path_params: dict[str, str]) -> Request:
        """Return a copy carrying *path_params*, sharing the body cache."""
        return Request(
            method=self.method,
            path=self.path,
            headers=self.headers,
            query=self.query,
            path_params=path_params,
            client=self.client,
            _receive=self._receive,
            _cache=self._cache,
        )

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive) -> Request:
        """Create a Request from an ASGI scope and receive callable."""
        headers = {
            name.decode("latin-1").lower(): value.decode("latin-1")
            for name, value in scope.get("headers", ())
        }
        client = scope.get("client")
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=headers,
            query=QueryParams(scope.get("query_string", b"")),
            path_params={},
            client=tuple(client) if client else None,
            _receive=receive,
        )
