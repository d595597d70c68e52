"""Product search endpoint.

``GET /{baseSiteId}/products/search?query=camera:relevance:brand:Canon``
"""

from dataclasses import dataclass, field
from typing import Any, Protocol

from sncustomws.codec.search_query import SearchQuery, decode_query, encode_query
from sncustomws.controller import Controller


@dataclass(frozen=True, slots=True)
class ProductSearchPage:
    products: list[dict[str, Any]] = field(default_factory=list)
    total_results: int = 0
    sort: str | None = None


class ProductSearchFacade(Protocol):
    """Search backend provided by the commerce platform."""

    def search(
        self, base_site_id: str, query: SearchQuery, *, current_page: int, page_size: int
    ) -> ProductSearchPage: ...


products = Controller("/{baseSiteId}/products", api_version="v2")


@products.get("/search", produces="application/json")
def search_products(
    baseSiteId: str,  # noqa: N803
    facade: ProductSearchFacade,
    query: str | None = None,
    currentPage: int = 0,  # noqa: N803
    pageSize: int = 20,  # noqa: N803
) -> dict[str, Any]:
    """Search products; ``currentQuery`` echoes the canonical query string."""
    search_query = decode_query(query)
    page = facade.search(baseSiteId, search_query, current_page=currentPage, page_size=pageSize)
    return {
        "products": page.products,
        "sorts": [page.sort] if page.sort else [],
        "pagination": {
            "currentPage": currentPage,
            "pageSize": pageSize,
            "totalResults": page.total_results,
        },
        "currentQuery": {"query": {"value": encode_query(search_query)}},
    }
