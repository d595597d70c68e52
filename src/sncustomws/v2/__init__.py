"""Version 2 web service controllers."""

from sncustomws.v2.product_availability import ProductAvailabilityFacade, product_availability
from sncustomws.v2.products import ProductSearchFacade, ProductSearchPage, products

CONTROLLERS = (product_availability, products)

__all__ = [
    "CONTROLLERS",
    "ProductAvailabilityFacade",
    "ProductSearchFacade",
    "ProductSearchPage",
    "product_availability",
    "products",
]
