"""sncustomws application class.

Mutable during setup (controllers, providers, error handlers).
Frozen at runtime when app.run() or __call__() is first invoked.
"""

import threading
from collections.abc import Callable, Mapping
from typing import Any

from sncustomws._internal.asgi import Receive, Scope, Send
from sncustomws._internal.invoke import invoke
from sncustomws.config import Properties, WsConfig
from sncustomws.controller import Controller
from sncustomws.routing.mapping import HandlerMapping
from sncustomws.routing.override import OverrideTable
from sncustomws.routing.router import Router
from sncustomws.server.handler import handle_request

ErrorHandler = Callable[..., Any]


class App:
    """The web services application.

    Mutable during setup (controller registration, providers, error
    handlers). Frozen at runtime when ``app.run()`` or ``__call__()`` is
    first invoked: freezing scans the controllers, resolves request mapping
    overrides, and compiles the router.

    Thread safety:
        The setup phase is single-threaded (decorators at import time).
        The freeze transition uses a Lock + double-check so exactly one
        thread builds the handler mapping. ``reload_routes()`` builds a
        new mapping state and swaps it in with a single assignment.
    """

    __slots__ = (
        "_controllers",
        "_error_handlers",
        "_freeze_lock",
        "_frozen",
        "_handler_mapping",
        "_providers",
        "_shutdown_hooks",
        "_startup_hooks",
        "config",
        "properties",
    )

    def __init__(
        self,
        config: WsConfig | None = None,
        *,
        properties: Properties | Mapping[str, str] | None = None,
    ) -> None:
        self.config: WsConfig = config or WsConfig()
        self.properties: Properties = _as_properties(properties)
        self._controllers: list[Controller] = []
        self._error_handlers: dict[int | type, ErrorHandler] = {}
        self._providers: dict[type, Callable[..., Any]] = {
            WsConfig: lambda: self.config,
            Properties: lambda: self.properties,
        }
        self._startup_hooks: list[Callable[..., Any]] = []
        self._shutdown_hooks: list[Callable[..., Any]] = []
        self._handler_mapping: HandlerMapping | None = None
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

    # -- Registration --

    @property
    def controllers(self) -> tuple[Controller, ...]:
        """Controllers in registration order."""
        return tuple(self._controllers)

    def include(self, *controllers: Controller) -> None:
        """Register controllers. Their routes are scanned when the app freezes."""
        self._check_not_frozen()
        self._controllers.extend(controllers)

    def provide(self, annotation: type, factory: Callable[..., Any]) -> None:
        """Register a provider factory for dependency injection.

        When a handler parameter's type annotation matches *annotation*,
        the factory is called (with no arguments) and its result injected::

            app.provide(ProductAvailabilityFacade, lambda: facade)
        """
        self._check_not_frozen()
        self._providers[annotation] = factory

    def error(self, *keys: int | type) -> Callable[[ErrorHandler], ErrorHandler]:
        """Register an error handler for status codes or exception types.

        The handler may take ``()``, ``(request)``, or ``(request, exc)``.
        """

        def decorator(func: ErrorHandler) -> ErrorHandler:
            self._check_not_frozen()
            for key in keys:
                self._error_handlers[key] = func
            return func

        return decorator

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register a hook run on ASGI lifespan startup (sync or async)."""
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register a hook run on ASGI lifespan shutdown (sync or async)."""
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    # -- Route table --

    @property
    def router(self) -> Router:
        """The active router (freezes the app if needed)."""
        return self._ensure_frozen().router

    @property
    def overrides(self) -> OverrideTable:
        """The active override table (freezes the app if needed)."""
        return self._ensure_frozen().overrides

    def reload_routes(self, properties: Properties | Mapping[str, str] | None = None) -> Router:
        """Rebuild the route table, optionally with new properties.

        Requests in flight keep the router they matched against; later
        requests see the new one. If the rebuild fails, the previous
        properties and routes stay active.
        """
        mapping = self._ensure_frozen()
        previous = self.properties
        if properties is not None:
            self.properties = _as_properties(properties)
        try:
            return mapping.rebuild()
        except Exception:
            self.properties = previous
            raise

    # -- Server --

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Serve the app with pounce (``pip install sncustomws[server]``)."""
        self._ensure_frozen()

        from pounce.config import ServerConfig
        from pounce.server import Server

        config = ServerConfig(
            host=host or self.config.host,
            port=port or self.config.port,
            workers=1,
            reload=self.config.debug,
            reload_include=self.config.reload_include,
            reload_dirs=self.config.reload_dirs,
        )
        Server(config, self).run()

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        mapping = self._ensure_frozen()
        await handle_request(
            scope,
            receive,
            send,
            router=mapping.router,
            error_handlers=self._error_handlers,
            providers=self._providers,
            debug=self.config.debug,
        )

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol.

        Builds the route table at startup; a failed build (for example a
        missing handler context or an ambiguous mapping) fails startup.
        """
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    self._ensure_frozen()
                    for hook in self._startup_hooks:
                        await invoke(hook)
                except Exception as exc:
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                for hook in self._shutdown_hooks:
                    await invoke(hook)
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Internal --

    def _ensure_frozen(self) -> HandlerMapping:
        """Thread-safe freeze with double-check locking."""
        if self._handler_mapping is not None:
            return self._handler_mapping
        with self._freeze_lock:
            if self._handler_mapping is None:
                self._freeze()
            assert self._handler_mapping is not None
            return self._handler_mapping

    def _freeze(self) -> None:
        """Build the handler mapping. MUST only be called while holding _freeze_lock."""
        self._frozen = True
        mapping = HandlerMapping(
            self,
            api_version=self.config.api_version,
            lookup=self._lookup_priority,
            default_priority=self.config.default_override_priority,
        )
        try:
            mapping.rebuild()
        except Exception:
            self._frozen = False
            raise
        self._handler_mapping = mapping

    def _lookup_priority(self, name: str, default: int) -> int:
        return self.properties.get_int(name, default)

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register controllers, providers, and error handlers before calling app.run()."
            )
            raise RuntimeError(msg)


def _as_properties(value: Properties | Mapping[str, str] | None) -> Properties:
    if value is None:
        return Properties()
    if isinstance(value, Properties):
        return value
    return Properties(value)
