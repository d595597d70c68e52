"""Compact query-string codecs.

Two delimiter formats arrive as single (already URL-decoded) request
parameters:

- search queries: ``freeText:sort:key:value...`` (``search_query``)
- availability filters: ``product:unit,unit;product:unit`` (``availability``)
"""

from sncustomws.codec.availability import (
    FilterCollection,
    FilterEntry,
    ProductAvailabilityFilterCodec,
    decode_availability_filters,
)
from sncustomws.codec.search_query import (
    SearchQuery,
    SearchQueryCodec,
    SearchQueryTerm,
    decode_query,
    encode_query,
)

__all__ = [
    "FilterCollection",
    "FilterEntry",
    "ProductAvailabilityFilterCodec",
    "SearchQuery",
    "SearchQueryCodec",
    "SearchQueryTerm",
    "decode_availability_filters",
    "decode_query",
    "encode_query",
]
