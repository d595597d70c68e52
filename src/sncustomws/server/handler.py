"""ASGI handler — translates ASGI scope/messages to sncustomws types.

The only component that touches raw HTTP scopes. Converts the scope to a
Request, matches it against the active router, calls the handler, and
sends the Response back through ASGI send().
"""

import inspect
from collections.abc import Callable
from typing import Any

from sncustomws._internal.asgi import Receive, Scope, Send
from sncustomws._internal.invoke import invoke
from sncustomws.errors import HTTPError, RequestParameterError
from sncustomws.http.request import Request
from sncustomws.http.response import Response
from sncustomws.routing.route import RouteMatch
from sncustomws.routing.router import Router
from sncustomws.server.errors import handle_http_error, handle_internal_error
from sncustomws.server.negotiation import negotiate
from sncustomws.server.sender import send_response

_SCALAR_TYPES = (str, int, float)


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    error_handlers: dict[int | type, Callable[..., Any]],
    providers: dict[type, Callable[..., Any]] | None = None,
    debug: bool = False,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)

    try:
        match = router.match(
            request.method,
            request.path,
            content_type=request.content_type,
            accept=request.accept,
        )
        response = await _invoke_handler(match, request, providers=providers)
    except HTTPError as exc:
        response = await handle_http_error(exc, request, error_handlers)
    except Exception as exc:
        response = await handle_internal_error(exc, request, error_handlers, debug)

    await send_response(response, send)


async def _invoke_handler(
    match: RouteMatch,
    request: Request,
    *,
    providers: dict[type, Callable[..., Any]] | None = None,
) -> Response:
    """Call the matched route handler, converting params and return value."""
    handler = match.route.handler
    request = request.with_path_params(match.path_params)
    kwargs = await build_handler_kwargs(handler, request, providers)
    result = await invoke(handler, **kwargs)
    return negotiate(result)


def _convert(value: str, annotation: Any) -> Any:
    if annotation in _SCALAR_TYPES:
        return annotation(value)
    return value


async def build_handler_kwargs(
    handler: Callable[..., Any],
    request: Request,
    providers: dict[type, Callable[..., Any]] | None = None,
) -> dict[str, Any]:
    """Inspect handler signature and build kwargs from the request.

    Resolution order:
    1. ``request`` parameter (by name or ``Request`` annotation)
    2. Path parameters (by name, with type conversion)
    3. Service providers (by type annotation via ``app.provide()``)
    4. Query parameters (by name, with type conversion)

    A parameter with no match and no default raises
    ``RequestParameterError`` (reason ``missing``).
    """
    sig = inspect.signature(handler, eval_str=True)
    kwargs: dict[str, Any] = {}

    for name, param in sig.parameters.items():
        annotation = param.annotation
        if name == "request" or annotation is Request:
            kwargs[name] = request
        elif name in request.path_params:
            try:
                kwargs[name] = _convert(request.path_params[name], annotation)
            except ValueError:
                kwargs[name] = request.path_params[name]
        elif providers and annotation in providers:
            kwargs[name] = await invoke(providers[annotation])
        elif name in request.query:
            value = request.query[name]
            try:
                kwargs[name] = _convert(value, annotation)
            except ValueError as exc:
                msg = f"Parameter '{name}' has an invalid value '{value}'."
                raise RequestParameterError(msg, subject=name) from exc
        elif param.default is inspect.Parameter.empty and param.kind not in (
            inspect.Parameter.VAR_POSITIONAL,
            inspect.Parameter.VAR_KEYWORD,
        ):
            msg = f"Required parameter '{name}' is missing."
            raise RequestParameterError(msg, reason=RequestParameterError.MISSING, subject=name)

    return kwargs
