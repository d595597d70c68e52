"""Controllers: groups of handlers under a shared base path.

A controller is the unit the handler mapping scans. Its ``api_version``
restricts it to the mapping serving that version; its ``name`` is the owner
used when deriving override priority properties.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from sncustomws.routing.override import RouteCandidate, get_override
from sncustomws.routing.route import Handler, RouteKey, join_path


@dataclass(slots=True)
class _PendingRoute:
    """A handler waiting to be scanned."""

    path: str
    handler: Handler
    methods: list[str] | None
    consumes: tuple[str, ...]
    produces: tuple[str, ...]
    name: str | None


def _media_types(value: str | Sequence[str]) -> tuple[str, ...]:
    if isinstance(value, str):
        return (value,) if value else ()
    return tuple(value)


def default_owner(handler: Handler) -> str:
    """Owner of *handler*: its module, plus the enclosing class for methods."""
    module = getattr(handler, "__module__", None) or "__main__"
    qualname = getattr(handler, "__qualname__", "")
    enclosing = qualname.rpartition(".")[0].replace(".<locals>", "")
    return f"{module}.{enclosing}" if enclosing else module


class Controller:
    """A set of route handlers sharing a base path.

    Usage::

        carts = Controller("/{baseSiteId}/users/{userId}/carts", api_version="v2")

        @carts.get("/{cartId}", produces="application/json")
        def get_cart(baseSiteId: str, userId: str, cartId: str): ...

        app.include(carts)
    """

    __slots__ = ("_pending_routes", "api_version", "base_path", "name")

    def __init__(
        self,
        base_path: str = "",
        *,
        api_version: str | None = None,
        name: str | None = None,
    ) -> None:
        self.base_path = base_path
        self.api_version = api_version
        self.name = name
        self._pending_routes: list[_PendingRoute] = []

    def __repr__(self) -> str:
        return f"Controller({self.base_path!r}, api_version={self.api_version!r})"

    # -- Route registration --

    def route(
        self,
        path: str = "",
        *,
        methods: list[str] | None = None,
        consumes: str | Sequence[str] = (),
        produces: str | Sequence[str] = (),
        name: str | None = None,
    ) -> Callable[[Handler], Handler]:
        """Register a route handler via decorator.

        Args:
            path: Path below ``base_path``. Use ``{param}`` for path parameters.
            methods: HTTP methods. Defaults to ``["GET"]``.
            consumes: Request media types this handler accepts.
            produces: Response media types this handler emits.
            name: Optional route name.
        """

        def decorator(func: Handler) -> Handler:
            self._pending_routes.append(
                _PendingRoute(
                    path,
                    func,
                    methods,
                    _media_types(consumes),
                    _media_types(produces),
                    name,
                )
            )
            return func

        return decorator

    def get(self, path: str = "", **kwargs: object) -> Callable[[Handler], Handler]:
        return self.route(path, methods=["GET"], **kwargs)  # type: ignore[arg-type]

    def post(self, path: str = "", **kwargs: object) -> Callable[[Handler], Handler]:
        return self.route(path, methods=["POST"], **kwargs)  # type: ignore[arg-type]

    def put(self, path: str = "", **kwargs: object) -> Callable[[Handler], Handler]:
        return self.route(path, methods=["PUT"], **kwargs)  # type: ignore[arg-type]

    def patch(self, path: str = "", **kwargs: object) -> Callable[[Handler], Handler]:
        return self.route(path, methods=["PATCH"], **kwargs)  # type: ignore[arg-type]

    def delete(self, path: str = "", **kwargs: object) -> Callable[[Handler], Handler]:
        return self.route(path, methods=["DELETE"], **kwargs)  # type: ignore[arg-type]

    # -- Scanning --

    def candidates(self) -> list[RouteCandidate]:
        """Describe every registered handler as a ``RouteCandidate``.

        Markers are read now, so decorator order does not matter.
        """
        result: list[RouteCandidate] = []
        for pending in self._pending_routes:
            key = RouteKey(
                methods=frozenset(m.upper() for m in (pending.methods or ["GET"])),
                path=join_path(self.base_path, pending.path),
                consumes=frozenset(pending.consumes),
                produces=frozenset(pending.produces),
            )
            result.append(
                RouteCandidate(
                    owner=self.name or default_owner(pending.handler),
                    method_name=pending.handler.__name__,
                    route_key=key,
                    override=get_override(pending.handler),
                    handler=pending.handler,
                    name=pending.name,
                )
            )
        return result
