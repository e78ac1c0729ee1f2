# Overview: Read-only dashboard and movement reports computed from a ledger snapshot.

from __future__ import annotations

from datetime import date, datetime

from ..constants import MOVEMENT_TYPES
from ..extensions import ledger
from ..time_utils import coerce_range, to_utc_z, utcnow
from .inventory_service import list_stock_movements

TOP_PRODUCTS_LIMIT = 5
RECENT_SALES_LIMIT = 5


class ReportError(Exception):
    """Raised when report generation fails."""
    pass


def _parse_range(start: str | None, end: str | None) -> tuple[datetime | None, datetime | None]:
    try:
        return coerce_range(start, end)
    except ValueError as exc:
        raise ReportError(f"Invalid date range: {exc}")


def dashboard_summary(today: date | None = None) -> dict:
    """
    Headline numbers for the dashboard.

    - todays_sales_cents: sales dated on `today` (UTC calendar day)
    - current_stock_value_cents: positive stock valued at purchase price
    - sales_trend: one row per calendar day that has sales, oldest first
    - top_products: best sellers by sales amount across all invoices
    - recent_sales: newest invoices first, with the customer name resolved
    """
    if today is None:
        today = utcnow().date()

    state = ledger.snapshot()
    sales = list(state.sales.values())

    trend: dict[date, dict] = {}
    per_product: dict[str, dict] = {}
    for sale in sales:
        day = sale.date.date()
        row = trend.setdefault(day, {"date": day.isoformat(), "sales_cents": 0, "profit_cents": 0})
        row["sales_cents"] += sale.total_sale_cents
        row["profit_cents"] += sale.total_profit_cents

        for item in sale.items:
            entry = per_product.setdefault(item.product_id, {"quantity": 0, "sales_cents": 0})
            entry["quantity"] += item.quantity
            entry["sales_cents"] += item.total_cents

    # sorted() is stable, so ties keep first-sold order
    ranked = sorted(per_product.items(), key=lambda kv: kv[1]["sales_cents"], reverse=True)
    top_products = []
    for product_id, totals in ranked[:TOP_PRODUCTS_LIMIT]:
        product = state.products.get(product_id)
        top_products.append({
            "product_id": product_id,
            "name": product.name if product else "Unknown",
            "quantity": totals["quantity"],
            "sales_cents": totals["sales_cents"],
        })

    recent_sales = []
    for sale in reversed(sales[-RECENT_SALES_LIMIT:]):
        customer = state.customers.get(sale.customer_id)
        recent_sales.append({
            "invoice_no": sale.invoice_no,
            "date": to_utc_z(sale.date),
            "customer_name": customer.name if customer else "N/A",
            "total_sale_cents": sale.total_sale_cents,
            "payment_status": sale.payment_status,
        })

    return {
        "date": today.isoformat(),
        "todays_sales_cents": sum(s.total_sale_cents for s in sales if s.date.date() == today),
        "total_customers": len(state.customers),
        "current_stock_value_cents": sum(
            p.current_stock * p.purchase_price_cents
            for p in state.products.values()
            if p.current_stock > 0
        ),
        "total_profit_cents": sum(s.total_profit_cents for s in sales),
        "sales_trend": [trend[day] for day in sorted(trend)],
        "top_products": top_products,
        "recent_sales": recent_sales,
    }


def stock_movement_report(
    *,
    product_id: str | None = None,
    movement_type: str | None = None,
    start: str | None = None,
    end: str | None = None,
) -> dict:
    """Stock ledger rows (newest first) plus quantity totals per movement type."""
    if movement_type is not None and movement_type not in MOVEMENT_TYPES:
        raise ReportError(f"movement_type must be one of: {', '.join(MOVEMENT_TYPES)}")
    start_dt, end_dt = _parse_range(start, end)

    movements = list_stock_movements(
        product_id=product_id,
        movement_type=movement_type,
        start=start_dt,
        end=end_dt,
    )
    totals = {t: 0 for t in MOVEMENT_TYPES}
    for movement in movements:
        totals[movement.type] += movement.quantity

    return {
        "filters": {
            "product_id": product_id,
            "movement_type": movement_type,
            "start": to_utc_z(start_dt),
            "end": to_utc_z(end_dt),
        },
        "totals": totals,
        "movements": [m.to_dict() for m in movements],
    }
