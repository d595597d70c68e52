"""Handler mapping: scan controllers, resolve overrides, compile the router.

The active state (override table + router) is replaced as a whole on every
rebuild, so readers see either the old routes or the new ones, never a
partially populated table.

Candidates that tie on priority are all left unsuppressed by the resolver
and all offered to the router. When their keys are identical (same methods,
path and media types) the router refuses the second one as an ambiguous
mapping and the rebuild fails; this is intended, and a tie has to be broken
in configuration. Candidates whose keys differ only in media types are
registered side by side and chosen per request by Content-Type and Accept.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from sncustomws.errors import ConfigurationError, MissingContextError
from sncustomws.routing.override import (
    OverrideTable,
    PriorityLookup,
    RequestMappingResolver,
    RouteCandidate,
)
from sncustomws.routing.route import Route
from sncustomws.routing.router import Router

if TYPE_CHECKING:
    from sncustomws.controller import Controller

logger = logging.getLogger("sncustomws.routing")


class HandlerContext(Protocol):
    """Anything that can list the controllers to scan (the app)."""

    @property
    def controllers(self) -> Sequence[Controller]: ...


@dataclass(frozen=True, slots=True)
class _MappingState:
    table: OverrideTable
    router: Router


class HandlerMapping:
    """Registers controller handlers, honoring override priorities.

    Args:
        context: Source of controllers. ``None`` fails at build time with
            ``MissingContextError``.
        api_version: Controllers declaring a different ``api_version`` are
            skipped. ``None`` accepts every controller.
        lookup: ``(property name, default) -> int`` priority lookup.
        default_priority: Priority for marked handlers with no configured value.
    """

    __slots__ = ("_state", "api_version", "context", "resolver")

    def __init__(
        self,
        context: HandlerContext | None,
        *,
        api_version: str | None = None,
        lookup: PriorityLookup | None = None,
        default_priority: int = 0,
    ) -> None:
        self.context = context
        self.api_version = api_version
        self.resolver = RequestMappingResolver(lookup, default_priority=default_priority)
        self._state: _MappingState | None = None

    def is_handler(self, controller: Controller) -> bool:
        """True if *controller* belongs to this mapping's API version."""
        if controller.api_version is None or self.api_version is None:
            return True
        return controller.api_version == self.api_version

    def scan(self) -> list[RouteCandidate]:
        """Collect candidates from every controller this mapping serves."""
        if self.context is None:
            msg = "Handler context cannot be None when scanning for handler methods."
            raise MissingContextError(msg)
        logger.debug("Looking for handler methods in context: %r", self.context)

        candidates: list[RouteCandidate] = []
        for controller in self.context.controllers:
            if self.is_handler(controller):
                candidates.extend(controller.candidates())
        return candidates

    def rebuild(self) -> Router:
        """Build a new override table and router, then swap them in.

        The table is complete before any candidate is registered.
        """
        candidates = self.scan()
        table = self.resolver.build(candidates)

        router = Router()
        for candidate in candidates:
            if self.resolver.is_suppressed(table, candidate):
                logger.debug(
                    "Mapping %s from %s.%s suppressed by a higher priority override",
                    candidate.route_key,
                    candidate.owner,
                    candidate.method_name,
                )
                continue
            if candidate.handler is None:
                msg = (
                    f"Route candidate {candidate.owner}.{candidate.method_name} for "
                    f"{candidate.route_key} has no handler."
                )
                raise ConfigurationError(msg)
            router.add(
                Route(
                    path=candidate.route_key.path,
                    handler=candidate.handler,
                    methods=candidate.route_key.methods,
                    name=candidate.name,
                    key=candidate.route_key,
                )
            )
        router.compile()

        self._state = _MappingState(table=table, router=router)
        return router

    @property
    def router(self) -> Router:
        """The active router. Raises ``RuntimeError`` before the first build."""
        return self._require_state().router

    @property
    def overrides(self) -> OverrideTable:
        """The active override table. Raises ``RuntimeError`` before the first build."""
        return self._require_state().table

    def _require_state(self) -> _MappingState:
        state = self._state
        if state is None:
            msg = "Handler mapping has not been built yet; call rebuild() first."
            raise RuntimeError(msg)
        return state
