"""Product availability endpoint.

``GET /{baseSiteId}/productAvailabilities?filters=3318057_A:EA,PC;4112097_B:EA``
"""

from typing import Any, Protocol

from sncustomws.codec.availability import FilterCollection, ProductAvailabilityFilterCodec
from sncustomws.config import WsConfig
from sncustomws.controller import Controller
from sncustomws.mapping.availability import AvailabilityData, map_availability


class ProductAvailabilityFacade(Protocol):
    """Stock lookup provided by the commerce platform."""

    def get_availability(self, base_site_id: str, products: FilterCollection) -> AvailabilityData: ...


product_availability = Controller("/{baseSiteId}/productAvailabilities", api_version="v2")


@product_availability.get(produces="application/json")
def get_product_availability(
    baseSiteId: str,  # noqa: N803
    facade: ProductAvailabilityFacade,
    config: WsConfig,
    filters: str | None = None,
) -> dict[str, Any]:
    """Retrieve stock availability for the requested products and units."""
    codec = ProductAvailabilityFilterCodec(config.max_availability_products)
    products = codec.decode(filters)
    return map_availability(facade.get_availability(baseSiteId, products))
