"""sncustomws exception hierarchy.

Shared across the codecs, the handler mapping, and the request handler so
every module raises and catches the same types.
"""

from dataclasses import dataclass


class SnCustomWsError(Exception):
    """Base for all sncustomws-specific errors."""


class ConfigurationError(SnCustomWsError):
    """Raised when the route table or app configuration is invalid.

    Typically raised while the app freezes at startup.
    """


class MissingContextError(ConfigurationError):
    """No handler context was available when scanning for overrides.

    Fatal: startup must abort rather than serve a partially built route table.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(SnCustomWsError):
    """An error that maps directly to an HTTP status code.

    Raised by the router, the codecs, or handlers. The ASGI handler
    catches these and shapes them into an error-list response.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)

    @property
    def error_type(self) -> str:
        """Name reported in the ``type`` field of the error list."""
        return type(self).__name__


class NotFound(HTTPError):  # noqa: N818
    """404: no route matched the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)

    @property
    def error_type(self) -> str:
        return "UnknownResourceError"


class MethodNotAllowed(HTTPError):  # noqa: N818
    """405: route exists but not for this HTTP method.

    Includes an ``Allow`` header listing the valid methods.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        default_detail = f"Method not allowed. Allowed methods: {allow_value}"
        super().__init__(
            status=405,
            detail=detail or default_detail,
            headers=(("Allow", allow_value),),
        )


class NotAcceptable(HTTPError):  # noqa: N818
    """406: the route exists but produces nothing the Accept header allows."""

    def __init__(self, accept: str | None = None) -> None:
        super().__init__(status=406, detail=f"No representation matches Accept: {accept or '*/*'}")


class UnsupportedMediaType(HTTPError):  # noqa: N818
    """415: the route exists but does not consume the request's Content-Type."""

    def __init__(self, content_type: str | None = None) -> None:
        if content_type:
            detail = f"Content type '{content_type}' is not supported"
        else:
            detail = "A Content-Type header is required"
        super().__init__(status=415, detail=detail)


class RequestParameterError(HTTPError):
    """400: a request parameter is missing or does not parse.

    ``reason`` is ``"missing"`` or ``"invalid"``; ``subject`` names the
    offending parameter.
    """

    MISSING = "missing"
    INVALID = "invalid"

    def __init__(self, detail: str, *, reason: str = INVALID, subject: str = "") -> None:
        super().__init__(status=400, detail=detail)
        object.__setattr__(self, "_reason", reason)
        object.__setattr__(self, "_subject", subject)

    @property
    def reason(self) -> str:
        return self._reason

    @property
    def subject(self) -> str:
        return self._subject

    @property
    def error_type(self) -> str:
        return "RequestParameterError"


class MissingFilterError(RequestParameterError):
    """A mandatory filter parameter was absent or blank."""

    def __init__(self, detail: str, *, subject: str = "filters") -> None:
        super().__init__(detail, reason=RequestParameterError.MISSING, subject=subject)


class MalformedFilterError(RequestParameterError):
    """A filter string does not match its delimiter grammar."""

    def __init__(self, detail: str, *, subject: str = "filters") -> None:
        super().__init__(detail, reason=RequestParameterError.INVALID, subject=subject)


InvalidFilterError = MalformedFilterError


class TooManyProductsError(RequestParameterError):
    """An availability filter names more distinct products than allowed."""

    def __init__(self, detail: str, *, subject: str = "filters") -> None:
        super().__init__(detail, reason=RequestParameterError.INVALID, subject=subject)
