"""Content negotiation — maps handler return values to Response objects.

isinstance-based dispatch, no magic, fully predictable.
"""

import dataclasses
from typing import Any

from sncustomws.http.response import Response


def _is_dataclass_instance(value: Any) -> bool:
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


def negotiate(value: Any) -> Response:
    """Convert a route handler's return value to a Response.

    Dispatch order:

    1. ``Response``           -> pass through
    2. ``None``               -> 204, empty body
    3. ``dict`` / ``list``    -> 200, application/json
    4. dataclass instance     -> 200, application/json (``dataclasses.asdict``)
    5. ``str``                -> 200, text/plain
    6. ``bytes``              -> 200, application/octet-stream
    7. ``(value, int)``       -> negotiate value, override status
    8. ``(value, int, dict)`` -> negotiate value, override status + headers
    """
    match value:
        case Response():
            return value
        case None:
            return Response(status=204)
        case dict() | list():
            return Response.json(value)
        case _ if _is_dataclass_instance(value):
            return Response.json(dataclasses.asdict(value))
        case str():
            return Response(body=value)
        case bytes():
            return Response(body=value, content_type="application/octet-stream")
        case (body, int() as status):
            return negotiate(body).with_status(status)
        case (body, int() as status, dict() as headers):
            return negotiate(body).with_status(status).with_headers(headers)
    msg = f"Cannot convert {type(value).__name__} to a response."
    raise TypeError(msg)
