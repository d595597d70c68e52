"""Query string parameters.

The compact filter parameters (``filters=3318057_A:EA,PC;4112097_B:EA``,
``query=camera:relevance:brand:Canon``) travel percent-encoded. They are
decoded once here, so the codecs only ever see plain strings. Only ``&``
separates parameters; ``;`` is part of a value.
"""

from collections.abc import Iterator, Mapping
from urllib.parse import parse_qs


class QueryParams(Mapping[str, str]):
    """Read-only view of a request's query parameters.

    Indexing yields the first value of a repeated parameter; ``get_list``
    yields all of them. A parameter given without a value (``?filters=``) is
    present with value ``""``, which the codecs report as missing.
    """

    _values: dict[str, list[str]]

    __slots__ = ("_values",)

    def __init__(self, query_string: bytes = b"") -> None:
        values = parse_qs(
            query_string.decode("latin-1"),
            keep_blank_values=True,
            encoding="utf-8",
        )
        object.__setattr__(self, "_values", values)

    def __getitem__(self, name: str) -> str:
        return self._values[name][0]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"QueryParams({dict(self)!r})"

    def get_list(self, name: str) -> list[str]:
        """Every value given for *name*, in request order."""
        return list(self._values.get(name, ()))
