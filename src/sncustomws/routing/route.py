"""RouteKey, Route, and RouteMatch frozen dataclasses."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeAlias

# User-defined handler with a variable signature
Handler: TypeAlias = Callable[..., Any]


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route path.

    Static:  ``/carts``  (is_param=False)
    Param:   ``/{cartId}``   (is_param=True, param_name="cartId")
    Typed:   ``/{entry:int}`` (is_param=True, param_name="entry", param_type="int")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None
    param_type: str = "str"


@dataclass(frozen=True, slots=True)
class RouteKey:
    """Identity of a route registration: methods, path, and media types.

    Two handlers with equal keys compete for the same requests.
    """

    methods: frozenset[str]
    path: str
    consumes: frozenset[str] = frozenset()
    produces: frozenset[str] = frozenset()

    def __str__(self) -> str:
        parts = [f"{{[{self.path}]", f"methods=[{','.join(sorted(self.methods))}]"]
        if self.consumes:
            parts.append(f"consumes=[{','.join(sorted(self.consumes))}]")
        if self.produces:
            parts.append(f"produces=[{','.join(sorted(self.produces))}]")
        return ", ".join(parts) + "}"


def join_path(base: str, path: str) -> str:
    """Join a controller base path and a handler path into one route path."""
    joined = "/".join(p.strip("/") for p in (base, path) if p.strip("/"))
    return f"/{joined}"


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen route definition.

    Created while the handler mapping builds, compiled into the router.
    """

    path: str
    handler: Handler
    methods: frozenset[str]
    name: str | None = None
    key: RouteKey | None = None

    @property
    def consumes(self) -> frozenset[str]:
        """Request media types this route accepts; empty accepts any."""
        return self.key.consumes if self.key is not None else frozenset()

    @property
    def produces(self) -> frozenset[str]:
        """Response media types this route emits; empty satisfies any Accept."""
        return self.key.produces if self.key is not None else frozenset()


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    route: Route
    path_params: dict[str, str]
