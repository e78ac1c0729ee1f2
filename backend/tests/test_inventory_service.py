"""
Stock ledger tests.

Verifies:
- Restocking adds stock, a Purchase movement and the supplier's due
- current_stock == opening_stock + purchases - sales, per product
- Movement filters and ordering
"""

from datetime import timedelta

import pytest

from showroom.services import inventory_service, products_service, sales_service, supplier_service
from showroom.time_utils import to_utc_z
from showroom.validation import NotFoundError, ValidationError


class TestRestockProduct:

    def test_restock_scenario(self, seeded):
        product = inventory_service.restock_product("PROD-001", 10)

        assert product.current_stock == 60
        assert supplier_service.get_supplier("SUP-001").due_balance_cents == 800000

        latest = inventory_service.list_stock_movements()[0]
        assert latest.type == "Purchase"
        assert latest.product_id == "PROD-001"
        assert latest.quantity == 10
        assert latest.updated_stock == 60

    def test_restock_note_becomes_reference(self, seeded):
        inventory_service.restock_product("PROD-001", 5, note="Eid shipment")
        assert inventory_service.list_stock_movements()[0].reference == "Eid shipment"

    def test_restock_without_supplier(self, app):
        products_service.add_product({
            "name": "Walk-in Stock",
            "category": "Shirt",
            "size": "S",
            "color": "Green",
            "purchase_price_cents": 10000,
            "selling_price_cents": 20000,
            "opening_stock": 0,
        })
        product = inventory_service.restock_product("PROD-001", 4)
        assert product.current_stock == 4

    @pytest.mark.parametrize("quantity", [0, -5, "1.5"])
    def test_invalid_quantity(self, seeded, quantity):
        with pytest.raises(ValidationError):
            inventory_service.restock_product("PROD-001", quantity)

        assert products_service.get_product("PROD-001").current_stock == 50
        assert supplier_service.get_supplier("SUP-001").due_balance_cents == 0
        assert len(inventory_service.list_stock_movements()) == 1

    def test_unknown_product(self, seeded):
        with pytest.raises(NotFoundError):
            inventory_service.restock_product("PROD-404", 3)
        assert len(inventory_service.list_stock_movements()) == 1


class TestStockConservation:

    def test_stock_matches_movements(self, seeded):
        inventory_service.restock_product("PROD-001", 10)
        sales_service.record_sale("CUST-001", [{"product_id": "PROD-001", "quantity": 4}], "Cash")
        inventory_service.restock_product("PROD-001", 3)
        sales_service.record_sale("CUST-001", [{"product_id": "PROD-001", "quantity": 9}], "Due")

        movements = inventory_service.get_product_movements("PROD-001")
        purchases = sum(m.quantity for m in movements if m.type == "Purchase")
        sold = sum(m.quantity for m in movements if m.type == "Sale")
        product = products_service.get_product("PROD-001")

        # Opening stock is itself a Purchase movement
        assert purchases - sold == product.current_stock == 50
        restocked = sum(m.quantity for m in movements if m.type == "Purchase" and m.reference != "Opening stock")
        assert product.opening_stock + restocked - sold == product.current_stock
        assert inventory_service.get_quantity_on_hand("PROD-001") == 50

    def test_updated_stock_tracks_running_total(self, seeded):
        inventory_service.restock_product("PROD-001", 10)
        sales_service.record_sale("CUST-001", [{"product_id": "PROD-001", "quantity": 4}], "Cash")

        running = [m.updated_stock for m in reversed(inventory_service.get_product_movements("PROD-001"))]
        assert running == [50, 60, 56]

    def test_quantity_on_hand_unknown_product(self, app):
        with pytest.raises(NotFoundError):
            inventory_service.get_quantity_on_hand("PROD-404")


class TestListStockMovements:

    def test_newest_first_with_unique_ids(self, seeded):
        inventory_service.restock_product("PROD-001", 1)
        inventory_service.restock_product("PROD-001", 2)

        movements = inventory_service.list_stock_movements()
        assert [m.quantity for m in movements] == [2, 1, 50]
        assert [m.id for m in movements] == ["SM-000003", "SM-000002", "SM-000001"]

    def test_filter_by_type(self, seeded):
        sales_service.record_sale("CUST-001", [{"product_id": "PROD-001", "quantity": 1}], "Cash")
        assert [m.type for m in inventory_service.list_stock_movements(movement_type="Sale")] == ["Sale"]
        with pytest.raises(ValidationError):
            inventory_service.list_stock_movements(movement_type="Adjustment")

    def test_date_bounds_are_inclusive(self, seeded):
        opening = inventory_service.list_stock_movements()[0]

        assert inventory_service.list_stock_movements(start=opening.date, end=opening.date) == [opening]
        assert inventory_service.list_stock_movements(start=to_utc_z(opening.date + timedelta(seconds=1))) == []
        assert inventory_service.list_stock_movements(end=opening.date - timedelta(seconds=1)) == []

    def test_invalid_date(self, seeded):
        with pytest.raises(ValidationError):
            inventory_service.list_stock_movements(start="yesterday")
