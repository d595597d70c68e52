"""Priority-based resolution of conflicting route registrations.

A customization layer may register a handler for a route that a base
controller already serves. Handlers carrying the ``request_mapping_override``
marker take part in resolution: each reads a numeric priority from
configuration, the highest priority per ``RouteKey`` is recorded, and every
marked handler whose priority differs from that maximum is left out of the
route table.

Resolution is two-phase. ``RequestMappingResolver.build`` scans all
candidates into an ``OverrideTable``; only then does the registration pass
consult it through ``is_suppressed``. Ties keep the first recorded value, so
equal-priority candidates all compare equal to the maximum and none of them
is suppressed.
"""

import logging
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any, TypeAlias, TypeVar

from sncustomws.errors import MissingContextError
from sncustomws.routing.route import RouteKey

logger = logging.getLogger("sncustomws.routing")

# (property name, default) -> priority
PriorityLookup: TypeAlias = Callable[[str, int], int]

F = TypeVar("F", bound=Callable[..., Any])

_MARKER_ATTR = "__request_mapping_override__"


@dataclass(frozen=True, slots=True)
class RequestMappingOverride:
    """Marker for handlers that take part in override resolution.

    ``priority_property`` names the configuration property holding the
    priority. Empty means ``<owner>.<handler name>.priority``.
    """

    priority_property: str = ""


def request_mapping_override(
    func: F | None = None, *, priority_property: str = ""
) -> F | Callable[[F], F]:
    """Mark a handler as override-capable.

    Works bare or with arguments, above or below the route decorator::

        @carts.get("/{cartId}")
        @request_mapping_override(priority_property="carts.get.priority")
        def get_cart(cartId: str): ...
    """
    marker = RequestMappingOverride(priority_property=priority_property)

    def decorator(f: F) -> F:
        setattr(f, _MARKER_ATTR, marker)
        return f

    if func is not None:
        return decorator(func)
    return decorator


def get_override(handler: Callable[..., Any]) -> RequestMappingOverride | None:
    """Return the override marker on *handler*, or ``None``."""
    return getattr(handler, _MARKER_ATTR, None)


@dataclass(frozen=True, slots=True)
class RouteCandidate:
    """A handler offered for registration, described as plain data."""

    owner: str
    method_name: str
    route_key: RouteKey
    override: RequestMappingOverride | None = None
    handler: Callable[..., Any] | None = None
    name: str | None = None

    @property
    def priority_property(self) -> str | None:
        """Property holding this candidate's priority; ``None`` without a marker."""
        if self.override is None:
            return None
        if self.override.priority_property:
            return self.override.priority_property
        return f"{self.owner}.{self.method_name}.priority"


class OverrideTable(Mapping[RouteKey, int]):
    """Read-only ``RouteKey -> highest priority`` table."""

    _data: dict[RouteKey, int]

    __slots__ = ("_data",)

    def __init__(self, data: Mapping[RouteKey, int] | None = None) -> None:
        object.__setattr__(self, "_data", dict(data or {}))

    def __getitem__(self, key: RouteKey) -> int:
        return self._data[key]

    def __iter__(self) -> Iterator[RouteKey]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        items = ", ".join(f"{k}: {v}" for k, v in self._data.items())
        return f"OverrideTable({{{items}}})"


class RequestMappingResolver:
    """Builds override tables and answers "is this route suppressed?".

    Args:
        lookup: ``(property name, default) -> int``. Misses and values the
            lookup cannot parse fall back to *default_priority*.
        default_priority: Priority used when no property is configured.
    """

    __slots__ = ("_lookup", "default_priority")

    def __init__(self, lookup: PriorityLookup | None = None, *, default_priority: int = 0) -> None:
        self._lookup = lookup
        self.default_priority = default_priority

    def priority_of(self, candidate: RouteCandidate) -> int | None:
        """Return *candidate*'s priority, or ``None`` if it carries no marker."""
        name = candidate.priority_property
        if name is None:
            return None
        if self._lookup is None:
            return self.default_priority
        try:
            return int(self._lookup(name, self.default_priority))
        except (TypeError, ValueError):
            logger.debug("Priority %s is not an integer, using %d", name, self.default_priority)
            return self.default_priority

    def build(self, candidates: Iterable[RouteCandidate] | None) -> OverrideTable:
        """Scan *candidates* into a fresh table.

        Raises ``MissingContextError`` if there is nothing to scan.
        """
        if candidates is None:
            msg = "Handler context cannot be None when scanning for request mapping overrides."
            raise MissingContextError(msg)

        highest: dict[RouteKey, int] = {}
        for candidate in candidates:
            priority = self.priority_of(candidate)
            if priority is None:
                continue
            current = highest.get(candidate.route_key)
            if current is None or current < priority:
                highest[candidate.route_key] = priority
            logger.info('Mapping "%s" overridden with priority = %d', candidate.route_key, priority)
        return OverrideTable(highest)

    def is_suppressed(self, table: OverrideTable, candidate: RouteCandidate) -> bool:
        """True if *candidate* lost resolution for its route.

        Candidates without the marker are never suppressed.
        """
        priority = self.priority_of(candidate)
        if priority is None:
            return False
        highest = table.get(candidate.route_key)
        if highest is None:
            return False
        return priority != highest
