"""sncustomws — storefront web services over an external commerce platform.

Controllers expose REST endpoints; the local logic is limited to the compact
filter codecs and the request mapping override resolution.

Basic usage::

    from sncustomws import App, Controller, request_mapping_override

    carts = Controller("/{baseSiteId}/carts", api_version="v2")

    @carts.get("/{cartId}")
    @request_mapping_override(priority_property="carts.get.priority")
    def get_cart(baseSiteId: str, cartId: str):
        return {"code": cartId}

    app = App(properties={"carts.get.priority": "10"})
    app.include(carts)
    app.run()
"""

__version__ = "0.1.0.dev0"
__all__ = [
    "App",
    "ConfigurationError",
    "Controller",
    "HTTPError",
    "MalformedFilterError",
    "MissingContextError",
    "MissingFilterError",
    "Properties",
    "Request",
    "RequestParameterError",
    "Response",
    "SnCustomWsError",
    "TooManyProductsError",
    "WsConfig",
    "request_mapping_override",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import sncustomws`` fast while providing a clean top-level API.
    """
    if name == "App":
        from sncustomws.app import App

        return App

    if name in ("WsConfig", "Properties"):
        from sncustomws import config

        return getattr(config, name)

    if name == "Controller":
        from sncustomws.controller import Controller

        return Controller

    if name == "request_mapping_override":
        from sncustomws.routing.override import request_mapping_override

        return request_mapping_override

    if name == "Request":
        from sncustomws.http.request import Request

        return Request

    if name == "Response":
        from sncustomws.http.response import Response

        return Response

    if name in (
        "ConfigurationError",
        "HTTPError",
        "MalformedFilterError",
        "MissingContextError",
        "MissingFilterError",
        "RequestParameterError",
        "SnCustomWsError",
        "TooManyProductsError",
    ):
        from sncustomws import errors

        return getattr(errors, name)

    msg = f"module 'sncustomws' has no attribute {name!r}"
    raise AttributeError(msg)
