# Overview: Stock ledger and restocking; the only place stock movements are created.

# backend/showroom/services/inventory_service.py

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime

from ..constants import MOVEMENT_PURCHASE, MOVEMENT_TYPES, SEQ_STOCK_MOVEMENT
from ..entities import Product, StockMovement
from ..extensions import ledger
from ..ledger import UnitOfWork
from ..time_utils import coerce_bound, within
from ..validation import NotFoundError, ValidationError, require_positive_int
from .document_service import next_document_number
"""
Showroom Stock Invariants (authoritative)

Stock model:
- Product.current_stock is the live quantity; every change to it appends
  exactly one StockMovement in the same ledger operation.
- StockMovement.updated_stock is the product's current_stock right after the
  movement was applied.
- Purchase movements come from product creation (opening stock) and restocks;
  Sale movements come only from recorded sales.

Append-only:
- Movements are never updated or deleted, and survive product deletion.
- Movement ids come from the STOCK_MOVEMENT sequence, so two movements
  written in the same instant still get distinct ids.

Supplier dues:
- A restock is always bought on credit: the product's supplier (if any) is
  owed quantity * purchase_price_cents more.
"""

logger = logging.getLogger(__name__)


def record_stock_movement(
    uow: UnitOfWork,
    *,
    product_id: str,
    movement_type: str,
    quantity: int,
    updated_stock: int,
    reference: str | None = None,
) -> StockMovement:
    """Append one movement to the stock ledger of the running operation."""
    if movement_type not in MOVEMENT_TYPES:
        raise ValidationError(f"Unknown stock movement type {movement_type!r}")

    movement = StockMovement(
        id=next_document_number(uow, SEQ_STOCK_MOVEMENT),
        date=uow.now,
        type=movement_type,
        product_id=product_id,
        quantity=quantity,
        updated_stock=updated_stock,
        reference=reference,
    )
    uow.append_stock_movement(movement)
    return movement


def _restock_locked(uow: UnitOfWork, product_id: str, quantity: int, note: str | None) -> Product:
    product = uow.require_product(product_id)

    restocked = replace(product, current_stock=product.current_stock + quantity)
    uow.put_product(restocked)

    record_stock_movement(
        uow,
        product_id=product_id,
        movement_type=MOVEMENT_PURCHASE,
        quantity=quantity,
        updated_stock=restocked.current_stock,
        reference=note,
    )

    if product.supplier_id:
        supplier = uow.get_supplier(product.supplier_id)
        if supplier is None:
            logger.warning(
                "Restock of %s references missing supplier %s; no dues recorded",
                product_id,
                product.supplier_id,
            )
        else:
            restock_cost = product.purchase_price_cents * quantity
            uow.put_supplier(replace(supplier, due_balance_cents=supplier.due_balance_cents + restock_cost))

    return restocked


def restock_product(product_id: str, quantity, note: str | None = None) -> Product:
    """
    Receive more units of a product from its supplier.

    Raises:
        ValidationError: quantity is not a positive integer
        NotFoundError: product does not exist
    """
    quantity = require_positive_int("quantity", quantity)

    def _op(uow: UnitOfWork) -> Product:
        return _restock_locked(uow, product_id, quantity, note)

    product = ledger.execute(_op, action="product.restocked")
    logger.info("Restocked %s by %d (now %d)", product_id, quantity, product.current_stock)
    return product


def get_quantity_on_hand(product_id: str) -> int:
    with ledger.reading() as state:
        product = state.products.get(product_id)
        if product is None:
            raise NotFoundError(f"Product {product_id} not found", details={"product_id": product_id})
        return product.current_stock


def _parse_bound(value) -> datetime | None:
    try:
        return coerce_bound(value)
    except ValueError:
        raise ValidationError(f"Invalid datetime {value!r}")


def list_stock_movements(
    *,
    product_id: str | None = None,
    movement_type: str | None = None,
    start=None,
    end=None,
) -> list[StockMovement]:
    """
    Stock ledger, most recent first.

    start/end accept datetimes or ISO-8601 strings and are inclusive.
    """
    if movement_type is not None and movement_type not in MOVEMENT_TYPES:
        raise ValidationError(f"movement_type must be one of: {', '.join(MOVEMENT_TYPES)}")
    start_dt = _parse_bound(start)
    end_dt = _parse_bound(end)

    with ledger.reading() as state:
        movements = list(state.stock_movements)

    result = []
    for movement in reversed(movements):
        if product_id is not None and movement.product_id != product_id:
            continue
        if movement_type is not None and movement.type != movement_type:
            continue
        if not within(movement.date, start_dt, end_dt):
            continue
        result.append(movement)
    return result


def get_product_movements(product_id: str) -> list[StockMovement]:
    return list_stock_movements(product_id=product_id)
