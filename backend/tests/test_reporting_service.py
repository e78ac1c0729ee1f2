"""
Dashboard and movement report tests.
"""

from datetime import timedelta

import pytest

from showroom.services import customer_service, inventory_service, products_service, sales_service
from showroom.services.reporting_service import ReportError, dashboard_summary, stock_movement_report


@pytest.fixture
def two_products(seeded, supplier):
    products_service.add_product({
        "name": "Silk Saree",
        "category": "Saree",
        "size": "Free Size",
        "color": "Red",
        "supplier_id": supplier.id,
        "purchase_price_cents": 250000,
        "selling_price_cents": 400000,
        "opening_stock": 20,
    })
    return seeded


class TestDashboardSummary:

    def test_empty_ledger(self, app):
        summary = dashboard_summary()

        assert summary["todays_sales_cents"] == 0
        assert summary["total_customers"] == 0
        assert summary["current_stock_value_cents"] == 0
        assert summary["total_profit_cents"] == 0
        assert summary["sales_trend"] == []
        assert summary["top_products"] == []
        assert summary["recent_sales"] == []

    def test_headline_numbers(self, two_products):
        sale = sales_service.record_sale("CUST-001", [{"product_id": "PROD-001", "quantity": 2}], "Cash")
        sales_service.record_sale("CUST-001", [{"product_id": "PROD-002", "quantity": 1}], "Due")

        summary = dashboard_summary(today=sale.date.date())

        assert summary["todays_sales_cents"] == 300000 + 400000
        assert summary["total_customers"] == 1
        assert summary["total_profit_cents"] == 140000 + 150000
        # 48 jeans at 800.00 + 19 sarees at 2500.00
        assert summary["current_stock_value_cents"] == 48 * 80000 + 19 * 250000

    def test_other_day_has_no_sales(self, seeded):
        sale = sales_service.record_sale("CUST-001", [{"product_id": "PROD-001", "quantity": 1}], "Cash")
        summary = dashboard_summary(today=sale.date.date() - timedelta(days=1))
        assert summary["todays_sales_cents"] == 0
        assert summary["total_profit_cents"] == 70000

    def test_stock_value_ignores_negative_stock(self, app_factory):
        app = app_factory(ENFORCE_STOCK_LEVELS=False)
        with app.app_context():
            customer_service.add_customer({"name": "Walk-in"})
            products_service.add_product({
                "name": "Cotton Polo Shirt",
                "category": "Shirt",
                "size": "M",
                "color": "White",
                "purchase_price_cents": 50000,
                "selling_price_cents": 95000,
                "opening_stock": 1,
            })
            sales_service.record_sale("CUST-001", [{"product_id": "PROD-001", "quantity": 2}], "Cash")

            assert dashboard_summary()["current_stock_value_cents"] == 0

    def test_trend_groups_by_day(self, seeded):
        first = sales_service.record_sale("CUST-001", [{"product_id": "PROD-001", "quantity": 1}], "Cash")
        sales_service.record_sale("CUST-001", [{"product_id": "PROD-001", "quantity": 2}], "Cash")

        trend = dashboard_summary()["sales_trend"]
        # Both sales fall on the same UTC day unless the test straddles midnight
        assert sum(row["sales_cents"] for row in trend) == 450000
        assert sum(row["profit_cents"] for row in trend) == 210000
        assert trend[0]["date"] == first.date.date().isoformat()

    def test_top_products_by_amount(self, two_products):
        sales_service.record_sale("CUST-001", [{"product_id": "PROD-001", "quantity": 2}], "Cash")
        sales_service.record_sale("CUST-001", [{"product_id": "PROD-002", "quantity": 1}], "Cash")

        top = dashboard_summary()["top_products"]

        assert [row["product_id"] for row in top] == ["PROD-002", "PROD-001"]
        assert top[0] == {"product_id": "PROD-002", "name": "Silk Saree", "quantity": 1, "sales_cents": 400000}

    def test_top_products_names_deleted_as_unknown(self, seeded):
        sales_service.record_sale("CUST-001", [{"product_id": "PROD-001", "quantity": 1}], "Cash")
        products_service.delete_product("PROD-001")

        assert dashboard_summary()["top_products"][0]["name"] == "Unknown"

    def test_recent_sales_newest_first_limited(self, seeded):
        for _ in range(7):
            sales_service.record_sale("CUST-001", [{"product_id": "PROD-001", "quantity": 1}], "Cash")

        recent = dashboard_summary()["recent_sales"]

        assert [row["invoice_no"] for row in recent] == ["INV-0007", "INV-0006", "INV-0005", "INV-0004", "INV-0003"]
        assert recent[0]["customer_name"] == "Anisul Islam"


class TestStockMovementReport:

    def test_totals_per_type(self, seeded):
        inventory_service.restock_product("PROD-001", 10)
        sales_service.record_sale("CUST-001", [{"product_id": "PROD-001", "quantity": 4}], "Cash")

        report = stock_movement_report(product_id="PROD-001")

        assert report["totals"] == {"Purchase": 60, "Sale": 4}
        assert [m["type"] for m in report["movements"]] == ["Sale", "Purchase", "Purchase"]

    def test_rejects_bad_range(self, seeded):
        with pytest.raises(ReportError):
            stock_movement_report(start="2026-02-01T00:00:00Z", end="2026-01-01T00:00:00Z")
        with pytest.raises(ReportError):
            stock_movement_report(start="not-a-date")
        with pytest.raises(ReportError):
            stock_movement_report(movement_type="Transfer")
