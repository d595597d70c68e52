"""Product availability filter codec.

Decodes ``productA:EA,PC;productB:EA`` into an ordered ``FilterCollection``
of product codes and the units to check. Request-side only: there is no
encoder.
"""

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import overload

from sncustomws.errors import MalformedFilterError, MissingFilterError, TooManyProductsError

PRODUCT_SEPARATOR = ";"
CODE_SEPARATOR = ":"
UNIT_SEPARATOR = ","

MAX_SUPPORTED_PRODUCTS = 50

FILTERS_IS_MANDATORY = (
    "The request isn’t allowed. The 'filters' field can’t be empty. "
    "Please provide a valid value."
)

FILTERS_IS_INVALID = (
    "The request isn’t allowed because the provided value '{segment}' doesn't adhere "
    "to the required format. Please provide product codes and their respective units "
    "in the 'filter' field using this format - "
    "productCodeA:unitCodeA,unitCodeB;productCodeB:unitCodeA,unitCodeB. "
    "For example: 3318057_A:EA,PC;4112097_B:EA."
)

PRODUCTS_EXCEED_MAXIMUM = (
    "The request isn’t allowed. The maximum number of product types to be retrieved is {limit}."
)


@dataclass(frozen=True, slots=True)
class FilterEntry:
    """A key (product code) and its ordered, duplicate-free values (units)."""

    key: str
    values: tuple[str, ...]


class FilterCollection(Sequence[FilterEntry]):
    """Immutable, insertion-ordered sequence of entries with unique keys."""

    _entries: tuple[FilterEntry, ...]

    __slots__ = ("_entries",)

    def __init__(self, entries: Sequence[FilterEntry] = ()) -> None:
        object.__setattr__(self, "_entries", tuple(entries))

    @overload
    def __getitem__(self, index: int) -> FilterEntry: ...
    @overload
    def __getitem__(self, index: slice) -> Sequence[FilterEntry]: ...
    def __getitem__(self, index: int | slice) -> FilterEntry | Sequence[FilterEntry]:
        return self._entries[index]

    def __iter__(self) -> Iterator[FilterEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FilterCollection):
            return self._entries == other._entries
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._entries)

    def __repr__(self) -> str:
        items = ", ".join(f"{e.key!r}: {list(e.values)!r}" for e in self._entries)
        return f"FilterCollection({{{items}}})"

    def keys(self) -> list[str]:
        """Return the keys in insertion order."""
        return [e.key for e in self._entries]

    def get(self, key: str) -> tuple[str, ...] | None:
        """Return the values for *key*, or ``None`` if absent."""
        for entry in self._entries:
            if entry.key == key:
                return entry.values
        return None


def _invalid(segment: str) -> MalformedFilterError:
    return MalformedFilterError(FILTERS_IS_INVALID.format(segment=segment))


def _tokens(value: str, separator: str) -> list[str]:
    # Adjacent separators produce no token
    return [token for token in value.split(separator) if token]


class ProductAvailabilityFilterCodec:
    """Decode and validate availability filters.

    Usage::

        codec = ProductAvailabilityFilterCodec()
        products = codec.decode("3318057_A:EA,PC;4112097_B:EA")
        products.get("3318057_A")  # ("EA", "PC")
    """

    __slots__ = ("max_products",)

    def __init__(self, max_products: int = MAX_SUPPORTED_PRODUCTS) -> None:
        self.max_products = max_products

    def decode(self, filters: str | None) -> FilterCollection:
        """Decode *filters* into one entry per distinct product code.

        Raises ``MissingFilterError`` for a blank value, ``MalformedFilterError``
        for a segment that does not match ``product:unit[,unit]*``, and
        ``TooManyProductsError`` when more than ``max_products`` distinct
        products are requested.
        """
        if filters is None or not filters.strip():
            raise MissingFilterError(FILTERS_IS_MANDATORY)

        units_by_product: dict[str, list[str]] = {}
        for segment in _tokens(filters, PRODUCT_SEPARATOR):
            product_code, units = self._decode_segment(segment)
            known = units_by_product.setdefault(product_code, [])
            for unit in units:
                if unit not in known:
                    known.append(unit)

        if len(units_by_product) > self.max_products:
            raise TooManyProductsError(PRODUCTS_EXCEED_MAXIMUM.format(limit=self.max_products))

        return FilterCollection(
            [FilterEntry(key=code, values=tuple(units)) for code, units in units_by_product.items()]
        )

    def _decode_segment(self, segment: str) -> tuple[str, list[str]]:
        """Split ``product:unit,unit`` into the trimmed code and trimmed units."""
        parts = _tokens(segment, CODE_SEPARATOR)
        if len(parts) != 2:
            raise _invalid(segment)

        product_code = parts[0].strip()
        units_value = parts[1].strip()
        if not product_code or not units_value:
            raise _invalid(segment)

        units: list[str] = []
        for unit in _tokens(units_value, UNIT_SEPARATOR):
            if not unit.strip():
                raise _invalid(segment)
            units.append(unit.strip())
        return product_code, units


def decode_availability_filters(
    filters: str | None, *, max_products: int = MAX_SUPPORTED_PRODUCTS
) -> FilterCollection:
    """Decode *filters* with a one-off codec."""
    return ProductAvailabilityFilterCodec(max_products).decode(filters)
