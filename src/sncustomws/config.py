"""Application configuration.

WsConfig is a frozen dataclass: immutable after creation, IDE-autocompletable,
no string-key dict lookups.

Properties holds the free-form ``name=value`` settings that handlers and the
override resolver look up by name (``project.properties``/``local.properties``
style files, later sources win).
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger("sncustomws.config")


@dataclass(frozen=True, slots=True)
class WsConfig:
    """Web services configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = WsConfig(api_version="v2", default_override_priority=10)
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False

    # Reload (development mode, requires debug=True)
    reload_include: tuple[str, ...] = ()
    reload_dirs: tuple[str, ...] = ()

    # Handler mapping
    api_version: str = "v2"
    default_override_priority: int = 0

    # Product availability
    max_availability_products: int = 50


class Properties(Mapping[str, str]):
    """Immutable string properties.

    ``get_int`` never raises: a missing or non-numeric value degrades to
    the supplied default.
    """

    _data: dict[str, str]

    __slots__ = ("_data",)

    def __init__(self, *sources: Mapping[str, str]) -> None:
        merged: dict[str, str] = {}
        for source in sources:
            merged.update(source)
        object.__setattr__(self, "_data", merged)

    @classmethod
    def load(cls, *paths: str | Path) -> Properties:
        """Read one or more ``.properties`` files; later files override earlier ones."""
        return cls(*(parse_properties(Path(p).read_text(encoding="utf-8")) for p in paths))

    def __getitem__(self, key: str) -> str:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"Properties({len(self._data)} entries)"

    def with_overrides(self, overrides: Mapping[str, str]) -> Properties:
        """Return new Properties with *overrides* applied on top."""
        return Properties(self._data, overrides)

    def get_int(self, key: str, default: int) -> int:
        """Return value as int, or *default* if missing or not numeric."""
        value = self._data.get(key)
        if value is None:
            return default
        try:
            return int(value.strip())
        except ValueError:
            logger.debug("Property %s=%r is not an integer, using %d", key, value, default)
            return default


def parse_properties(text: str) -> dict[str, str]:
    """Parse ``key=value`` lines.

    Blank lines and lines starting with ``#`` or ``!`` are skipped. Keys and
    values are stripped; a line without ``=`` maps the whole key to ``""``.
    """
    result: dict[str, str] = {}
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line[0] in "#!":
            continue
        key, _, value = line.partition("=")
        result[key.strip()] = value.strip()
    return result
