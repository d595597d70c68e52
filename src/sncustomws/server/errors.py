"""Error handling pipeline.

Maps HTTPError exceptions and unexpected failures to error-list responses::

    {"errors": [{"type": "RequestParameterError", "message": "...",
                 "reason": "invalid", "subject": "filters",
                 "subjectType": "parameter"}]}

Registered error handlers take precedence over the default shape.
"""

import inspect
import logging
from collections.abc import Callable
from typing import Any

from sncustomws._internal.invoke import invoke
from sncustomws.errors import HTTPError, RequestParameterError
from sncustomws.http.request import Request
from sncustomws.http.response import Response
from sncustomws.server.negotiation import negotiate

logger = logging.getLogger("sncustomws.server")


def error_entry(exc: HTTPError) -> dict[str, str]:
    """Describe *exc* as one entry of the error list."""
    entry = {"type": exc.error_type, "message": exc.detail or str(exc.status)}
    if isinstance(exc, RequestParameterError):
        entry["reason"] = exc.reason
        if exc.subject:
            entry["subject"] = exc.subject
            entry["subjectType"] = "parameter"
    return entry


def error_list(*entries: dict[str, str]) -> dict[str, list[dict[str, str]]]:
    """Wrap *entries* in the ``{"errors": [...]}`` envelope."""
    return {"errors": list(entries)}


async def call_error_handler(
    handler: Callable[..., Any],
    request: Request,
    exc: Exception,
) -> Response:
    """Invoke a user-registered error handler with introspected arguments.

    Error handlers may accept zero, one (request), or two (request, exc) args.
    """
    params = list(inspect.signature(handler).parameters.values())

    if len(params) >= 2:
        result = await invoke(handler, request, exc)
    elif len(params) == 1:
        result = await invoke(handler, request)
    else:
        result = await invoke(handler)

    return negotiate(result)


async def handle_http_error(
    exc: HTTPError,
    request: Request,
    error_handlers: dict[int | type, Callable[..., Any]],
) -> Response:
    """Map an HTTPError to a Response using registered error handlers."""
    logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)

    # Most specific exception type first, then status code
    handler = None
    for exc_type in type(exc).__mro__:
        handler = error_handlers.get(exc_type)
        if handler is not None:
            break
    handler = handler or error_handlers.get(exc.status)

    if handler is not None:
        response = await call_error_handler(handler, request, exc)
        # Preserve the HTTP status from the exception unless the handler
        # explicitly returned a Response with its own status
        if response.status == 200:
            response = response.with_status(exc.status)
        return response

    response = Response.json(error_list(error_entry(exc)), status=exc.status)
    for name, value in exc.headers:
        response = response.with_header(name, value)
    return response


async def handle_internal_error(
    exc: Exception,
    request: Request,
    error_handlers: dict[int | type, Callable[..., Any]],
    debug: bool,
) -> Response:
    """Handle unexpected exceptions as 500 errors."""
    logger.exception("500 %s %s", request.method, request.path)

    handler = error_handlers.get(type(exc)) or error_handlers.get(500)
    if handler is not None:
        response = await call_error_handler(handler, request, exc)
        if response.status == 200:
            response = response.with_status(500)
        return response

    message = str(exc) if debug else "Internal Server Error"
    entry = {"type": "SystemError", "message": message}
    return Response.json(error_list(entry), status=500)
