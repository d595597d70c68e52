"""Product availability data and its web service representation.

The facade answers in ``AvailabilityData``; ``map_availability`` turns that
into the response body::

    {"availabilityItems": [
        {"productCode": "3318057_A",
         "unitAvailabilities": [{"unit": "EA", "quantity": 12, "status": "IN_STOCK"}]}
    ]}
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class StockLevelStatus(Enum):
    INSTOCK = "inStock"
    LOWSTOCK = "lowStock"
    OUTOFSTOCK = "outOfStock"


_STATUS_NAMES = {
    StockLevelStatus.INSTOCK: "IN_STOCK",
    StockLevelStatus.LOWSTOCK: "LOW_STOCK",
    StockLevelStatus.OUTOFSTOCK: "OUT_OF_STOCK",
}


@dataclass(frozen=True, slots=True)
class UnitAvailability:
    unit: str
    quantity: int | None = None
    status: StockLevelStatus | None = None


@dataclass(frozen=True, slots=True)
class ProductAvailability:
    product_code: str
    units: tuple[UnitAvailability, ...] = ()


@dataclass(frozen=True, slots=True)
class AvailabilityData:
    products: tuple[ProductAvailability, ...] = ()


def map_unit_availability(data: UnitAvailability) -> dict[str, Any]:
    """Map one unit. Unset quantity and unknown statuses are left out."""
    result: dict[str, Any] = {"unit": data.unit}
    if data.quantity is not None:
        result["quantity"] = data.quantity
    status = _STATUS_NAMES.get(data.status) if data.status is not None else None
    if status is not None:
        result["status"] = status
    return result


def map_availability(data: AvailabilityData) -> dict[str, Any]:
    return {
        "availabilityItems": [
            {
                "productCode": product.product_code,
                "unitAvailabilities": [map_unit_availability(u) for u in product.units],
            }
            for product in data.products
        ]
    }
