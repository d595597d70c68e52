"""Tests for sncustomws.routing.router — trie router and path parsing."""

import pytest

from sncustomws.errors import (
    ConfigurationError,
    MethodNotAllowed,
    NotAcceptable,
    NotFound,
    UnsupportedMediaType,
)
from sncustomws.routing.route import Route, RouteKey, join_path
from sncustomws.routing.router import Router, convert_param, parse_path


def _handler() -> str:
    return "ok"


def _other() -> str:
    return "other"


def _route(path: str, *methods: str, handler=_handler) -> Route:
    return Route(path=path, handler=handler, methods=frozenset(methods or ("GET",)))


def _router(*routes: Route) -> Router:
    router = Router()
    for route in routes:
        router.add(route)
    router.compile()
    return router


class TestParsePath:
    def test_static_segments(self) -> None:
        segments = parse_path("/electronics/carts")
        assert [s.value for s in segments] == ["electronics", "carts"]
        assert not any(s.is_param for s in segments)

    def test_param(self) -> None:
        [site, _] = parse_path("/{baseSiteId}/carts")
        assert site.is_param is True
        assert site.param_name == "baseSiteId"
        assert site.param_type == "str"

    def test_typed_param(self) -> None:
        segments = parse_path("/carts/{cartId}/entries/{entryNumber:int}")
        assert segments[-1].param_name == "entryNumber"
        assert segments[-1].param_type == "int"

    def test_root(self) -> None:
        assert parse_path("/") == []

    def test_rejects_angle_brackets(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            parse_path("/carts/<cartId>")
        assert "{param}" in str(exc_info.value)
        assert "/carts/<cartId>" in str(exc_info.value)

    def test_rejects_unknown_converter(self) -> None:
        with pytest.raises(ConfigurationError, match="Unknown converter 'uuid'"):
            parse_path("/carts/{cartId:uuid}")

    def test_convert_param(self) -> None:
        assert convert_param("42", "int") == 42
        assert convert_param("a", "str") == "a"
        with pytest.raises(ValueError):
            convert_param("x", "int")


class TestJoinPath:
    @pytest.mark.parametrize(
        ("base", "path", "expected"),
        [
            ("/{baseSiteId}/carts", "", "/{baseSiteId}/carts"),
            ("/{baseSiteId}/carts", "/{cartId}", "/{baseSiteId}/carts/{cartId}"),
            ("/{baseSiteId}/carts/", "{cartId}", "/{baseSiteId}/carts/{cartId}"),
            ("", "/search", "/search"),
            ("", "", "/"),
        ],
    )
    def test_join(self, base: str, path: str, expected: str) -> None:
        assert join_path(base, path) == expected


class TestRouteKey:
    def test_str(self) -> None:
        key = RouteKey(
            methods=frozenset({"POST", "GET"}),
            path="/{baseSiteId}/carts",
            produces=frozenset({"application/json"}),
        )
        assert str(key) == "{[/{baseSiteId}/carts], methods=[GET,POST], produces=[application/json]}"

    def test_equal_keys_compete(self) -> None:
        left = RouteKey(methods=frozenset({"GET"}), path="/carts")
        right = RouteKey(methods=frozenset({"GET"}), path="/carts")
        assert left == right
        assert hash(left) == hash(right)


class TestRouterMatch:
    def test_static(self) -> None:
        router = _router(_route("/carts"))
        assert router.match("GET", "/carts").path_params == {}

    def test_trailing_slash_ignored(self) -> None:
        router = _router(_route("/carts"))
        assert router.match("GET", "/carts/").route.path == "/carts"

    def test_params(self) -> None:
        router = _router(_route("/{baseSiteId}/carts/{cartId}"))
        match = router.match("GET", "/electronics/carts/00001")
        assert match.path_params == {"baseSiteId": "electronics", "cartId": "00001"}

    def test_int_param_rejects_non_digits(self) -> None:
        router = _router(_route("/entries/{entryNumber:int}"))
        assert router.match("GET", "/entries/3").path_params == {"entryNumber": "3"}
        with pytest.raises(NotFound):
            router.match("GET", "/entries/three")

    def test_path_param_takes_rest(self) -> None:
        router = _router(_route("/media/{location:path}"))
        match = router.match("GET", "/media/images/a/b.png")
        assert match.path_params == {"location": "images/a/b.png"}

    def test_static_before_param(self) -> None:
        router = _router(
            _route("/{baseSiteId}/products/search"),
            _route("/{baseSiteId}/products/{productCode}"),
        )
        assert router.match("GET", "/s/products/search").route.path.endswith("/search")
        assert router.match("GET", "/s/products/123").path_params["productCode"] == "123"

    def test_methods_on_same_path(self) -> None:
        router = _router(_route("/carts", "GET"), _route("/carts", "POST", handler=_other))
        assert router.match("GET", "/carts").route.handler is _handler
        assert router.match("POST", "/carts").route.handler is _other

    def test_method_not_allowed(self) -> None:
        router = _router(_route("/carts", "GET", "HEAD"))
        with pytest.raises(MethodNotAllowed) as exc_info:
            router.match("DELETE", "/carts")
        assert exc_info.value.status == 405
        assert dict(exc_info.value.headers)["Allow"] == "GET, HEAD"

    def test_not_found(self) -> None:
        router = _router(_route("/carts"))
        with pytest.raises(NotFound) as exc_info:
            router.match("GET", "/wishlists")
        assert exc_info.value.status == 404

    def test_routes_collected(self) -> None:
        carts = _route("/carts", "GET", "POST")
        entries = _route("/carts/{cartId}/entries")
        router = _router(carts, entries)
        assert router.routes == [carts, entries]


class TestRouterRegistration:
    def test_add_after_compile(self) -> None:
        router = _router()
        with pytest.raises(RuntimeError, match="Cannot add routes after compilation"):
            router.add(_route("/carts"))

    def test_duplicate_method_is_ambiguous(self) -> None:
        router = Router()
        router.add(_route("/carts/{cartId}"))
        with pytest.raises(ConfigurationError, match="Ambiguous mapping"):
            router.add(_route("/carts/{id}", handler=_other))

    def test_overlapping_methods_are_ambiguous(self) -> None:
        router = Router()
        router.add(_route("/carts", "GET", "POST"))
        with pytest.raises(ConfigurationError, match="POST"):
            router.add(_route("/carts", "POST", handler=_other))

    def test_catch_all_duplicate_is_ambiguous(self) -> None:
        router = Router()
        router.add(_route("/media/{location:path}"))
        with pytest.raises(ConfigurationError, match="Ambiguous mapping"):
            router.add(_route("/media/{rest:path}", handler=_other))


def _media_route(
    path: str,
    handler,
    *,
    produces: frozenset[str] = frozenset(),
    consumes: frozenset[str] = frozenset(),
    method: str = "GET",
) -> Route:
    methods = frozenset({method})
    key = RouteKey(methods=methods, path=path, consumes=consumes, produces=produces)
    return Route(path=path, handler=handler, methods=methods, key=key)


def _xml() -> str:
    return "xml"


def _json() -> str:
    return "json"


class TestRouterMediaTypes:
    def test_same_path_different_produces(self) -> None:
        router = _router(
            _media_route("/carts", _xml, produces=frozenset({"application/xml"})),
            _media_route("/carts", _json, produces=frozenset({"application/json"})),
        )

        assert router.match("GET", "/carts", accept="application/json").route.handler is _json
        assert router.match("GET", "/carts", accept="application/xml").route.handler is _xml
        assert len(router.routes) == 2

    def test_accept_parameters_and_lists(self) -> None:
        router = _router(_media_route("/carts", _json, produces=frozenset({"application/json"})))
        match = router.match("GET", "/carts", accept="text/html, application/json;q=0.9")
        assert match.route.handler is _json

    def test_wildcard_accept(self) -> None:
        router = _router(_media_route("/carts", _json, produces=frozenset({"application/json"})))
        assert router.match("GET", "/carts", accept="*/*").route.handler is _json
        assert router.match("GET", "/carts", accept="application/*").route.handler is _json
        assert router.match("GET", "/carts").route.handler is _json

    def test_declared_produces_preferred_over_open_route(self) -> None:
        router = _router(
            _media_route("/carts", _handler),
            _media_route("/carts", _json, produces=frozenset({"application/json"})),
        )

        assert router.match("GET", "/carts", accept="*/*").route.handler is _json
        assert router.match("GET", "/carts", accept="text/csv").route.handler is _handler

    def test_not_acceptable(self) -> None:
        router = _router(_media_route("/carts", _json, produces=frozenset({"application/json"})))
        with pytest.raises(NotAcceptable) as exc_info:
            router.match("GET", "/carts", accept="application/xml")
        assert exc_info.value.status == 406

    def test_consumes(self) -> None:
        router = _router(
            _media_route(
                "/carts", _json, consumes=frozenset({"application/json"}), method="POST"
            )
        )

        match = router.match("POST", "/carts", content_type="application/json; charset=utf-8")
        assert match.route.handler is _json
        with pytest.raises(UnsupportedMediaType) as exc_info:
            router.match("POST", "/carts", content_type="text/plain")
        assert exc_info.value.status == 415
        with pytest.raises(UnsupportedMediaType):
            router.match("POST", "/carts")

    def test_same_media_types_are_ambiguous(self) -> None:
        router = Router()
        router.add(_media_route("/carts", _xml, produces=frozenset({"application/json"})))
        with pytest.raises(ConfigurationError, match="Ambiguous mapping"):
            router.add(_media_route("/carts", _json, produces=frozenset({"application/json"})))


class TestRouterParamNames:
    def test_each_route_keeps_its_own_names(self) -> None:
        router = _router(
            _route("/{baseSiteId}/carts"),
            _route("/{siteId}/orders/{code}", handler=_other),
        )

        carts = router.match("GET", "/electronics/carts")
        orders = router.match("GET", "/electronics/orders/o1")

        assert carts.path_params == {"baseSiteId": "electronics"}
        assert orders.path_params == {"siteId": "electronics", "code": "o1"}

    def test_catch_all_after_shared_param(self) -> None:
        router = _router(
            _route("/{baseSiteId}/carts"),
            _route("/{site}/media/{location:path}", handler=_other),
        )
        match = router.match("GET", "/s1/media/a/b.png")
        assert match.path_params == {"site": "s1", "location": "a/b.png"}

    def test_conflicting_converters_rejected(self) -> None:
        router = Router()
        router.add(_route("/carts/{cartId}"))
        with pytest.raises(ConfigurationError, match="'str' parameter"):
            router.add(_route("/carts/{entryNumber:int}/entries", handler=_other))
