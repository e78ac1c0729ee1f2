# Overview: Printable receipt for one invoice, combining the sale with the company profile.

from __future__ import annotations

from ..extensions import ledger
from ..time_utils import to_utc_z
from ..validation import NotFoundError
from .settings_service import get_company_profile


def format_amount(cents: int) -> str:
    """Currency display used on receipts and CLI tables (Taka, 2 decimals)."""
    sign = "-" if cents < 0 else ""
    return f"{sign}Tk {abs(cents) / 100:,.2f}"


def build_receipt(invoice_no: str) -> dict:
    """
    Receipt payload for an invoice.

    Product and customer names are resolved at render time; records deleted
    since the sale show as "Unknown" / "N/A".

    Raises:
        NotFoundError: invoice does not exist
    """
    company = get_company_profile()
    with ledger.reading() as state:
        sale = state.sales.get(invoice_no)
        if sale is None:
            raise NotFoundError(f"Sale {invoice_no} not found", details={"invoice_no": invoice_no})
        customer = state.customers.get(sale.customer_id)
        names = {
            item.product_id: (state.products[item.product_id].name if item.product_id in state.products else "Unknown")
            for item in sale.items
        }

    return {
        "company": company.to_dict(),
        "invoice_no": sale.invoice_no,
        "date": to_utc_z(sale.date),
        "customer": {
            "id": sale.customer_id,
            "name": customer.name if customer else "N/A",
            "phone": customer.phone if customer else "",
            "address": customer.address if customer else "",
        },
        "lines": [
            {
                "product_id": item.product_id,
                "product_name": names[item.product_id],
                "quantity": item.quantity,
                "unit_price_cents": item.unit_price_cents,
                "total_cents": item.total_cents,
            }
            for item in sale.items
        ],
        "subtotal_cents": sale.total_sale_cents,
        "total_cents": sale.total_sale_cents,
        "payment_method": sale.payment_method,
        "payment_status": sale.payment_status,
    }


def render_receipt_text(receipt: dict, width: int = 48) -> str:
    company = receipt["company"]
    lines = [company["company_name"].center(width)]
    for address_line in (company["company_address"] or "").splitlines():
        lines.append(address_line.center(width))
    lines.append("=" * width)
    lines.append(f"Invoice #: {receipt['invoice_no']}")
    lines.append(f"Date: {receipt['date'][:10]}")
    lines.append(f"Billed to: {receipt['customer']['name']}")
    lines.append("-" * width)
    for line in receipt["lines"]:
        label = f"{line['product_name']} x{line['quantity']}"
        amount = format_amount(line["total_cents"])
        lines.append(f"{label[:width - len(amount) - 1]:<{width - len(amount)}}{amount}")
    lines.append("-" * width)
    subtotal = format_amount(receipt["subtotal_cents"])
    total = format_amount(receipt["total_cents"])
    lines.append(f"{'Subtotal:':<{width - len(subtotal)}}{subtotal}")
    lines.append(f"{'Total:':<{width - len(total)}}{total}")
    lines.append("=" * width)
    lines.append(f"Payment Method: {receipt['payment_method']} ({receipt['payment_status']})")
    lines.append("Thank you for your business!".center(width))
    return "\n".join(lines)
