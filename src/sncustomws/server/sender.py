"""Write a Response to the ASGI ``send`` channel.

Every response is sent whole: one ``http.response.start`` carrying the
status and headers, then a single ``http.response.body``.
"""

from sncustomws._internal.asgi import Send
from sncustomws.http.response import Response

# Statuses that never carry a message body
_BODYLESS = frozenset({204, 304})


def _encode_headers(response: Response, content_length: int) -> list[tuple[bytes, bytes]]:
    pairs = [("content-type", response.content_type), *response.headers]
    pairs.append(("content-length", str(content_length)))
    return [(name.lower().encode("latin-1"), value.encode("latin-1")) for name, value in pairs]


async def send_response(response: Response, send: Send) -> None:
    """Emit *response*; informational and bodyless statuses get an empty body."""
    if response.status < 200 or response.status in _BODYLESS:
        body = b""
    else:
        body = response.body_bytes

    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": _encode_headers(response, len(body)),
        }
    )
    await send({"type": "http.response.body", "body": body})
