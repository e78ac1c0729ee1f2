"""
Sales Service - invoice recording and the cascade it drives

WHY: A sale touches four stores at once (sales ledger, product stock,
customer accumulators, stock ledger). All of it is staged on one unit of
work so the ledger commits it together or not at all.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from ..constants import (
    LOYALTY_CENTS_PER_POINT,
    MOVEMENT_SALE,
    PAYMENT_DUE,
    PAYMENT_METHODS,
    PAYMENT_STATUSES,
    SEQ_INVOICE,
    STATUS_DUE,
    STATUS_PAID,
)
from ..entities import Sale, SaleItem
from ..extensions import ledger
from ..ledger import UnitOfWork
from ..validation import (
    InsufficientStockError,
    NotFoundError,
    ValidationError,
    require_positive_int,
)
from .document_service import next_document_number
from .inventory_service import record_stock_movement

logger = logging.getLogger(__name__)


def _normalize_lines(items) -> dict[str, int]:
    """
    Validate requested lines and merge repeats of the same product.

    Returns {product_id: quantity} in first-seen order.
    """
    if not items:
        raise ValidationError("Cannot record a sale with no items")

    quantities: dict[str, int] = {}
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            raise ValidationError(f"items[{index}] must be an object with product_id and quantity")
        product_id = item.get("product_id")
        if not isinstance(product_id, str) or not product_id.strip():
            raise ValidationError(f"items[{index}].product_id must be a non-empty string")
        quantity = require_positive_int(f"items[{index}].quantity", item.get("quantity"))
        quantities[product_id] = quantities.get(product_id, 0) + quantity
    return quantities


def _validate_on_hand(uow: UnitOfWork, quantities: dict[str, int]) -> None:
    insufficient = []
    for product_id, qty in quantities.items():
        on_hand = uow.require_product(product_id).current_stock
        if on_hand < qty:
            insufficient.append({
                "product_id": product_id,
                "requested_quantity": qty,
                "on_hand": on_hand,
            })

    if insufficient:
        raise InsufficientStockError(
            "Insufficient stock to record sale",
            details={"items": insufficient},
        )


def _record_sale_locked(
    uow: UnitOfWork,
    customer_id: str,
    quantities: dict[str, int],
    payment_method: str,
) -> Sale:
    customer = uow.require_customer(customer_id)
    products = {product_id: uow.require_product(product_id) for product_id in quantities}

    if uow.policy.enforce_stock_levels:
        _validate_on_hand(uow, quantities)

    invoice_no = next_document_number(uow, SEQ_INVOICE)

    items = []
    for product_id, quantity in quantities.items():
        product = products[product_id]
        items.append(SaleItem(
            product_id=product_id,
            quantity=quantity,
            unit_price_cents=product.selling_price_cents,
            unit_cost_cents=product.purchase_price_cents,
            total_cents=quantity * product.selling_price_cents,
        ))

        sold = replace(product, current_stock=product.current_stock - quantity)
        uow.put_product(sold)
        record_stock_movement(
            uow,
            product_id=product_id,
            movement_type=MOVEMENT_SALE,
            quantity=quantity,
            updated_stock=sold.current_stock,
            reference=invoice_no,
        )

    total_sale = sum(item.total_cents for item in items)
    total_profit = sum(item.profit_cents for item in items)

    sale = Sale(
        invoice_no=invoice_no,
        date=uow.now,
        customer_id=customer_id,
        items=tuple(items),
        total_sale_cents=total_sale,
        total_profit_cents=total_profit,
        payment_method=payment_method,
        payment_status=STATUS_DUE if payment_method == PAYMENT_DUE else STATUS_PAID,
    )
    uow.put_sale(sale)

    uow.put_customer(replace(
        customer,
        total_purchases_cents=customer.total_purchases_cents + total_sale,
        loyalty_points=customer.loyalty_points + total_sale // LOYALTY_CENTS_PER_POINT,
    ))
    return sale


def record_sale(customer_id: str, items, payment_method: str) -> Sale:
    """
    Record a completed sale.

    items: [{"product_id": ..., "quantity": ...}, ...]; lines for the same
    product are merged into one invoice item.

    Raises:
        ValidationError: empty items, bad quantity, unknown payment method
        NotFoundError: unknown customer or product
        InsufficientStockError: stock too low (strict stock policy only)
    """
    if payment_method not in PAYMENT_METHODS:
        raise ValidationError(
            f"payment_method must be one of: {', '.join(PAYMENT_METHODS)}",
            details={"payment_method": payment_method},
        )
    quantities = _normalize_lines(items)

    def _op(uow: UnitOfWork) -> Sale:
        return _record_sale_locked(uow, customer_id, quantities, payment_method)

    sale = ledger.execute(_op, action="sale.recorded")
    logger.info(
        "Recorded sale %s customer=%s total=%d method=%s",
        sale.invoice_no,
        customer_id,
        sale.total_sale_cents,
        payment_method,
    )
    return sale


def update_payment_status(invoice_no: str, status: str) -> Sale:
    """
    Mark an invoice Paid or Due. Setting the current status again changes nothing.

    Raises:
        ValidationError: status is not Paid/Due
        NotFoundError: invoice does not exist
    """
    if status not in PAYMENT_STATUSES:
        raise ValidationError(f"status must be one of: {', '.join(PAYMENT_STATUSES)}")

    def _op(uow: UnitOfWork) -> Sale:
        sale = uow.get_sale(invoice_no)
        if sale is None:
            raise NotFoundError(f"Sale {invoice_no} not found", details={"invoice_no": invoice_no})
        if sale.payment_status == status:
            return sale
        updated = replace(sale, payment_status=status)
        uow.put_sale(updated)
        return updated

    return ledger.execute(_op, action="sale.payment_status_updated")


def get_sale(invoice_no: str) -> Sale | None:
    with ledger.reading() as state:
        return state.sales.get(invoice_no)


def list_sales(*, customer_id: str | None = None, payment_status: str | None = None) -> list[Sale]:
    """Invoices in ledger order (oldest first)."""
    if payment_status is not None and payment_status not in PAYMENT_STATUSES:
        raise ValidationError(f"payment_status must be one of: {', '.join(PAYMENT_STATUSES)}")
    with ledger.reading() as state:
        sales = list(state.sales.values())
    return [
        s for s in sales
        if (customer_id is None or s.customer_id == customer_id)
        and (payment_status is None or s.payment_status == payment_status)
    ]


def get_customer_sales(customer_id: str) -> list[Sale]:
    return list_sales(customer_id=customer_id)
