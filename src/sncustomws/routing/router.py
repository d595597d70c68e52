"""Compiled router with trie-based path matching.

Routes are added by the handler mapping and compiled into an immutable
lookup structure before the first request is dispatched.

Several routes may share a method and path when their media types differ
(``consumes``/``produces`` on the ``RouteKey``). ``match`` picks among them
by the request's Content-Type and Accept headers, preferring routes that
declare media types over routes that accept anything.

Parameter names belong to the route, not to the trie: ``/{baseSiteId}/carts``
and ``/{siteId}/orders`` share one parameter edge, and each handler receives
the captured segment under its own name.
"""

import re
from dataclasses import dataclass, field

from sncustomws.errors import (
    ConfigurationError,
    MethodNotAllowed,
    NotAcceptable,
    NotFound,
    UnsupportedMediaType,
)
from sncustomws.routing.route import PathSegment, Route, RouteMatch

# (regex_pattern, python_type) for each supported converter
CONVERTERS: dict[str, tuple[str, type]] = {
    "str": (r"[^/]+", str),
    "int": (r"\d+", int),
    "path": (r".+", str),
}


def convert_param(value: str, param_type: str) -> str | int:
    """Convert a captured path parameter string to the target type.

    Raises ``ValueError`` if the string cannot be converted.
    Raises ``KeyError`` if *param_type* is not a registered converter.
    """
    _, target_type = CONVERTERS[param_type]
    return target_type(value)


def parse_path(path: str) -> list[PathSegment]:
    """Parse a route path string into segments.

    Examples::

        "/carts"                 -> [PathSegment("carts")]
        "/{baseSiteId}/carts"    -> [PathSegment("{baseSiteId}", is_param=True, ...), ...]
        "/entries/{number:int}"  -> [..., PathSegment("{number:int}", param_type="int")]
    """
    segments: list[PathSegment] = []
    for part in path.strip("/").split("/"):
        if not part:
            continue
        if part.startswith("<") and part.endswith(">"):
            msg = (
                f"Route {path!r} uses <param> placeholders; "
                "write path parameters as {param} instead."
            )
            raise ConfigurationError(msg)
        if part.startswith("{") and part.endswith("}"):
            param_name, _, param_type = part[1:-1].partition(":")
            param_type = param_type or "str"
            if param_type not in CONVERTERS:
                msg = f"Unknown converter {param_type!r} in route {path!r}."
                raise ConfigurationError(msg)
            segments.append(
                PathSegment(
                    value=part,
                    is_param=True,
                    param_name=param_name,
                    param_type=param_type,
                )
            )
        else:
            segments.append(PathSegment(value=part))
    return segments


# -- Media types --


def _media_ranges(header: str | None) -> list[str]:
    """``"application/json; q=0.9, */*"`` -> ``["application/json", "*/*"]``."""
    if not header:
        return []
    return [part.split(";", 1)[0].strip().lower() for part in header.split(",") if part.strip()]


def _compatible(left: str, right: str) -> bool:
    left_type, _, left_sub = left.partition("/")
    right_type, _, right_sub = right.partition("/")
    return (left_type == "*" or right_type == "*" or left_type == right_type) and (
        left_sub == "*" or right_sub == "*" or left_sub == right_sub
    )


def _any_compatible(declared: frozenset[str], requested: list[str]) -> bool:
    return any(_compatible(d.lower(), r) for d in declared for r in requested)


def _consumes_ok(route: Route, content_type: str | None) -> bool:
    if not route.consumes:
        return True
    return _any_compatible(route.consumes, _media_ranges(content_type))


def _produces_ok(route: Route, accept: str | None) -> bool:
    if not route.produces:
        return True
    return _any_compatible(route.produces, _media_ranges(accept) or ["*/*"])


def _specificity(route: Route) -> tuple[bool, bool]:
    # Declared media types sort first
    return (not route.produces, not route.consumes)


# -- Trie --


@dataclass(slots=True)
class _Endpoint:
    """Routes registered at one trie position, grouped by method."""

    routes_by_method: dict[str, list[Route]] = field(default_factory=dict)

    def register(self, route: Route) -> None:
        for method in route.methods:
            routes = self.routes_by_method.setdefault(method, [])
            for existing in routes:
                if existing is not route and (existing.consumes, existing.produces) == (
                    route.consumes,
                    route.produces,
                ):
                    msg = (
                        f"Ambiguous mapping: cannot map {_describe(route)} to {method} "
                        f"{route.path!r}; {_describe(existing)} is already mapped there."
                    )
                    raise ConfigurationError(msg)
            routes.append(route)
            routes.sort(key=_specificity)


class _TrieNode:
    """A node in the route trie. Mutable during compilation only."""

    __slots__ = ("catch_all", "children", "endpoint", "param_child")

    def __init__(self) -> None:
        self.children: dict[str, _TrieNode] = {}
        # One parameter edge per level, shared by every route's own param name
        self.param_child: _ParamEdge | None = None
        # Routes whose last segment is a {name:path} parameter
        self.catch_all: _Endpoint | None = None
        # Routes ending exactly here
        self.endpoint = _Endpoint()


@dataclass(slots=True)
class _ParamEdge:
    param_type: str
    regex: re.Pattern[str]
    node: _TrieNode


def _describe(route: Route) -> str:
    handler = route.handler
    return f"{getattr(handler, '__module__', '?')}.{getattr(handler, '__qualname__', handler)!s}"


class Router:
    """Compiled router with trie-based path matching.

    Usage::

        router = Router()
        router.add(Route("/{baseSiteId}/carts", handler, frozenset({"GET"})))
        router.compile()
        match = router.match("GET", "/electronics/carts", accept="application/json")
    """

    __slots__ = ("_compiled", "_param_names", "_root")

    def __init__(self) -> None:
        self._root = _TrieNode()
        self._compiled = False
        self._param_names: dict[int, tuple[str, ...]] = {}

    def add(self, route: Route) -> None:
        """Add a route to the router. Must be called before compile().

        Raises ``ConfigurationError`` if another route already answers the
        same method on the same path with the same media types, or if two
        routes put parameters with different converters at one position.
        """
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)

        segments = parse_path(route.path)
        self._param_names[id(route)] = tuple(s.param_name or "" for s in segments if s.is_param)
        node = self._root

        for seg in segments:
            if seg.is_param and seg.param_type == "path":
                # Catch-all: consumes rest of path, must be last segment
                if node.catch_all is None:
                    node.catch_all = _Endpoint()
                node.catch_all.register(route)
                return

            if seg.is_param:
                edge = node.param_child
                if edge is None:
                    pattern, _ = CONVERTERS[seg.param_type]
                    edge = _ParamEdge(
                        param_type=seg.param_type,
                        regex=re.compile(f"^{pattern}$"),
                        node=_TrieNode(),
                    )
                    node.param_child = edge
                elif edge.param_type != seg.param_type:
                    msg = (
                        f"Route {route.path!r} declares {seg.value} where another route "
                        f"already uses a {edge.param_type!r} parameter."
                    )
                    raise ConfigurationError(msg)
                node = edge.node
            else:
                node = node.children.setdefault(seg.value, _TrieNode())

        node.endpoint.register(route)

    @property
    def routes(self) -> list[Route]:
        """All registered routes, each once, in trie order."""
        seen: set[int] = set()
        result: list[Route] = []
        self._collect_routes(self._root, seen, result)
        return result

    def _collect_routes(self, node: _TrieNode, seen: set[int], result: list[Route]) -> None:
        endpoints = [node.endpoint] if node.catch_all is None else [node.endpoint, node.catch_all]
        for endpoint in endpoints:
            for routes in endpoint.routes_by_method.values():
                for route in routes:
                    if id(route) not in seen:
                        seen.add(id(route))
                        result.append(route)

        for child in node.children.values():
            self._collect_routes(child, seen, result)

        if node.param_child is not None:
            self._collect_routes(node.param_child.node, seen, result)

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._compiled = True

    def match(
        self,
        method: str,
        path: str,
        *,
        content_type: str | None = None,
        accept: str | None = None,
    ) -> RouteMatch:
        """Match a request against compiled routes.

        Raises ``NotFound`` if no route matches the path,
        ``MethodNotAllowed`` if the path matches but the method doesn't,
        ``UnsupportedMediaType`` if no route for the method consumes
        *content_type*, and ``NotAcceptable`` if none produces what
        *accept* asks for.
        """
        parts = [p for p in path.strip("/").split("/") if p]
        result = self._match_node(self._root, parts, 0, ())

        if result is None:
            raise NotFound(f"No route matches {method} {path!r}")

        endpoint, captured = result
        candidates = endpoint.routes_by_method.get(method)
        if not candidates:
            raise MethodNotAllowed(frozenset(endpoint.routes_by_method))

        consumable = [r for r in candidates if _consumes_ok(r, content_type)]
        if not consumable:
            raise UnsupportedMediaType(content_type)
        for route in consumable:
            if _produces_ok(route, accept):
                names = self._param_names[id(route)]
                return RouteMatch(route=route, path_params=dict(zip(names, captured, strict=True)))
        raise NotAcceptable(accept)

    def _match_node(
        self,
        node: _TrieNode,
        parts: list[str],
        index: int,
        captured: tuple[str, ...],
    ) -> tuple[_Endpoint, tuple[str, ...]] | None:
        """Recursively match path parts against the trie."""
        if index == len(parts):
            if node.endpoint.routes_by_method:
                return node.endpoint, captured
            return None

        part = parts[index]

        # 1. Static child first (exact match)
        child = node.children.get(part)
        if child is not None:
            result = self._match_node(child, parts, index + 1, captured)
            if result is not None:
                return result

        # 2. Parameter child
        edge = node.param_child
        if edge is not None and edge.regex.match(part):
            result = self._match_node(edge.node, parts, index + 1, (*captured, part))
            if result is not None:
                return result

        # 3. Catch-all
        if node.catch_all is not None:
            return node.catch_all, (*captured, "/".join(parts[index:]))

        return None
