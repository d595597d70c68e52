"""Search query codec — ``freeText:sort:key:value:key:value``.

The first token is the free-text search, the second the sort, and every
following pair a filter term. Delimiters inside values are not escaped, so
a ``:`` in free text or a term value does not survive a round trip.
"""

from dataclasses import dataclass

from sncustomws.errors import MalformedFilterError

DELIMITER = ":"

# Index of the first term key; terms are consumed in (key, value) steps
_FIRST_TERM = 2
_NEXT_TERM = 2


@dataclass(frozen=True, slots=True)
class SearchQueryTerm:
    """A single ``key:value`` filter term."""

    key: str
    value: str


@dataclass(frozen=True, slots=True)
class SearchQuery:
    """Decoded search query. The default instance is the empty query."""

    free_text_search: str | None = None
    sort: str | None = None
    filter_terms: tuple[SearchQueryTerm, ...] = ()


def _split(query: str) -> list[str]:
    """Split on the delimiter, dropping trailing empty tokens.

    ``"a:b:"`` -> ``["a", "b"]``; ``""`` -> ``[""]``; ``":"`` -> ``[]``.
    """
    parts = query.split(DELIMITER)
    if len(parts) == 1:
        return parts
    while parts and not parts[-1]:
        parts.pop()
    return parts


class SearchQueryCodec:
    """Convert between the compact query string and ``SearchQuery``.

    Stateless; one instance can be shared across requests.
    """

    __slots__ = ()

    def decode_query(self, query: str | None) -> SearchQuery:
        """Decode *query*. ``None`` yields the empty ``SearchQuery``.

        Raises ``MalformedFilterError`` when the last term key has no value.
        """
        if query is None:
            return SearchQuery()

        parts = _split(query)
        free_text = parts[0] if parts else None
        sort = parts[1] if len(parts) > 1 else None

        terms: list[SearchQueryTerm] = []
        for i in range(_FIRST_TERM, len(parts), _NEXT_TERM):
            if i + 1 >= len(parts):
                msg = (
                    f"The query '{query}' ends with the term key '{parts[i]}' "
                    "that has no value."
                )
                raise MalformedFilterError(msg, subject="query")
            terms.append(SearchQueryTerm(key=parts[i], value=parts[i + 1]))

        return SearchQuery(free_text_search=free_text, sort=sort, filter_terms=tuple(terms))

    def encode_query(self, query: SearchQuery | None) -> str | None:
        """Encode *query* back to its string form. ``None`` yields ``None``."""
        if query is None:
            return None

        out = [query.free_text_search or ""]
        if query.sort is not None or query.filter_terms:
            out.append(query.sort or "")
        for term in query.filter_terms:
            out.append(term.key)
            out.append(term.value)
        return DELIMITER.join(out)


_default_codec = SearchQueryCodec()


def decode_query(query: str | None) -> SearchQuery:
    """Decode *query* with the default codec."""
    return _default_codec.decode_query(query)


def encode_query(query: SearchQuery | None) -> str | None:
    """Encode *query* with the default codec."""
    return _default_codec.encode_query(query)
