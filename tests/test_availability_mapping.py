"""Tests for sncustomws.mapping.availability — availability response bodies."""

from sncustomws.mapping.availability import (
    AvailabilityData,
    ProductAvailability,
    StockLevelStatus,
    UnitAvailability,
    map_availability,
    map_unit_availability,
)


class TestMapUnitAvailability:
    def test_full(self) -> None:
        unit = UnitAvailability("EA", quantity=12, status=StockLevelStatus.INSTOCK)
        assert map_unit_availability(unit) == {"unit": "EA", "quantity": 12, "status": "IN_STOCK"}

    def test_statuses(self) -> None:
        low = UnitAvailability("EA", status=StockLevelStatus.LOWSTOCK)
        out = UnitAvailability("EA", status=StockLevelStatus.OUTOFSTOCK)
        assert map_unit_availability(low)["status"] == "LOW_STOCK"
        assert map_unit_availability(out)["status"] == "OUT_OF_STOCK"

    def test_unset_fields_left_out(self) -> None:
        assert map_unit_availability(UnitAvailability("PC")) == {"unit": "PC"}

    def test_zero_quantity_kept(self) -> None:
        assert map_unit_availability(UnitAvailability("PC", quantity=0))["quantity"] == 0


class TestMapAvailability:
    def test_products_in_order(self) -> None:
        data = AvailabilityData(
            products=(
                ProductAvailability(
                    "3318057_A",
                    units=(
                        UnitAvailability("EA", 12, StockLevelStatus.INSTOCK),
                        UnitAvailability("PC", 0, StockLevelStatus.OUTOFSTOCK),
                    ),
                ),
                ProductAvailability("4112097_B"),
            )
        )

        assert map_availability(data) == {
            "availabilityItems": [
                {
                    "productCode": "3318057_A",
                    "unitAvailabilities": [
                        {"unit": "EA", "quantity": 12, "status": "IN_STOCK"},
                        {"unit": "PC", "quantity": 0, "status": "OUT_OF_STOCK"},
                    ],
                },
                {"productCode": "4112097_B", "unitAvailabilities": []},
            ]
        }

    def test_empty(self) -> None:
        assert map_availability(AvailabilityData()) == {"availabilityItems": []}
