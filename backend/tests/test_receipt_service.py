import pytest

from showroom.services import products_service, sales_service, settings_service
from showroom.services.receipt_service import build_receipt, format_amount, render_receipt_text
from showroom.validation import NotFoundError


class TestBuildReceipt:

    def test_receipt_contents(self, seeded):
        sale = sales_service.record_sale("CUST-001", [{"product_id": "PROD-001", "quantity": 2}], "Bkash")

        receipt = build_receipt(sale.invoice_no)

        assert receipt["invoice_no"] == "INV-0001"
        assert receipt["company"]["company_name"] == "Test Showroom"
        assert receipt["customer"]["name"] == "Anisul Islam"
        assert receipt["lines"] == [{
            "product_id": "PROD-001",
            "product_name": "Classic Blue Jeans",
            "quantity": 2,
            "unit_price_cents": 150000,
            "total_cents": 300000,
        }]
        assert receipt["subtotal_cents"] == receipt["total_cents"] == 300000
        assert receipt["payment_method"] == "Bkash"
        assert receipt["payment_status"] == "Paid"
        assert receipt["date"].endswith("Z")

    def test_deleted_product_shows_unknown(self, seeded):
        sale = sales_service.record_sale("CUST-001", [{"product_id": "PROD-001", "quantity": 1}], "Cash")
        products_service.delete_product("PROD-001")

        assert build_receipt(sale.invoice_no)["lines"][0]["product_name"] == "Unknown"

    def test_uses_edited_company_profile(self, seeded):
        sale = sales_service.record_sale("CUST-001", [{"product_id": "PROD-001", "quantity": 1}], "Cash")
        settings_service.update_company_profile({"company_name": "Dhaka Fashion House"})

        assert build_receipt(sale.invoice_no)["company"]["company_name"] == "Dhaka Fashion House"

    def test_unknown_invoice(self, app):
        with pytest.raises(NotFoundError):
            build_receipt("INV-0404")


class TestRenderReceipt:

    def test_text_layout(self, seeded):
        sale = sales_service.record_sale("CUST-001", [{"product_id": "PROD-001", "quantity": 2}], "Due")

        text = render_receipt_text(build_receipt(sale.invoice_no))

        assert "Test Showroom" in text
        assert "Invoice #: INV-0001" in text
        assert "Billed to: Anisul Islam" in text
        assert "Classic Blue Jeans x2" in text
        assert "Tk 3,000.00" in text
        assert "Payment Method: Due (Due)" in text
        assert all(len(line) <= 48 for line in text.splitlines())

    def test_format_amount(self):
        assert format_amount(0) == "Tk 0.00"
        assert format_amount(150050) == "Tk 1,500.50"
        assert format_amount(-5000) == "-Tk 50.00"
