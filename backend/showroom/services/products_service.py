# backend/showroom/services/products_service.py
"""
Products Service

Catalog operations. Every write goes through the ledger so a new product and
its opening-stock movement are committed together.

- add_product validates the payload and assigns PROD-NNN ids
- update_product replaces the editable fields; stock fields are ledger-owned
- delete_product removes the product; sales and movements keep their
  references (orphans are expected in history)
"""
from __future__ import annotations

import logging
from dataclasses import replace

from ..constants import CATEGORIES, MOVEMENT_PURCHASE, SEQ_PRODUCT, STOCK_STATUSES
from ..entities import Product
from ..extensions import ledger
from ..ledger import UnitOfWork
from ..validation import (
    INT,
    STR,
    ModelValidationPolicy,
    ValidationError,
    enforce_rules_product,
    validate_payload,
)
from .document_service import next_document_number
from .inventory_service import record_stock_movement

logger = logging.getLogger(__name__)

PRODUCT_MUTABLE_FIELDS = {
    "name": STR,
    "category": STR,
    "size": STR,
    "color": STR,
    "supplier_id": STR,
    "purchase_price_cents": INT,
    "selling_price_cents": INT,
}

PRODUCT_CREATE_POLICY = ModelValidationPolicy(
    field_types={**PRODUCT_MUTABLE_FIELDS, "opening_stock": INT},
    required_on_create={
        "name",
        "category",
        "size",
        "color",
        "purchase_price_cents",
        "selling_price_cents",
        "opening_stock",
    },
    nullable_fields={"supplier_id"},
    max_lengths={"name": 255},
)

PRODUCT_UPDATE_POLICY = ModelValidationPolicy(
    field_types=PRODUCT_MUTABLE_FIELDS,
    nullable_fields={"supplier_id"},
    max_lengths={"name": 255},
)


def _clean_product_patch(payload: dict, *, partial: bool) -> dict:
    policy = PRODUCT_UPDATE_POLICY if partial else PRODUCT_CREATE_POLICY
    patch = validate_payload(payload=payload, policy=policy, partial=partial)
    if patch.get("supplier_id") == "":
        patch["supplier_id"] = None
    enforce_rules_product(patch)
    return patch


def add_product(data: dict) -> Product:
    """
    Create a product with its opening stock.

    Raises:
        ValidationError: payload fails validation
        NotFoundError: supplier_id does not name a supplier
    """
    patch = _clean_product_patch(data, partial=False)

    def _op(uow: UnitOfWork) -> Product:
        if patch.get("supplier_id"):
            uow.require_supplier(patch["supplier_id"])

        product = Product(
            id=next_document_number(uow, SEQ_PRODUCT),
            name=patch["name"],
            category=patch["category"],
            size=patch["size"],
            color=patch["color"],
            supplier_id=patch.get("supplier_id"),
            purchase_price_cents=patch["purchase_price_cents"],
            selling_price_cents=patch["selling_price_cents"],
            opening_stock=patch["opening_stock"],
            current_stock=patch["opening_stock"],
        )
        uow.put_product(product)

        record_stock_movement(
            uow,
            product_id=product.id,
            movement_type=MOVEMENT_PURCHASE,
            quantity=product.opening_stock,
            updated_stock=product.current_stock,
            reference="Opening stock",
        )
        return product

    product = ledger.execute(_op, action="product.created")
    logger.info("Created product %s name=%r", product.id, product.name)
    return product


def update_product(product_id: str, data: dict) -> Product | None:
    """
    Replace a product's editable fields.

    Returns:
        Updated product, or None if not found
    """
    patch = _clean_product_patch(data, partial=True)

    def _op(uow: UnitOfWork) -> Product | None:
        product = uow.get_product(product_id)
        if product is None:
            return None
        if patch.get("supplier_id"):
            uow.require_supplier(patch["supplier_id"])

        updated = replace(product, **patch)
        if updated != product:
            uow.put_product(updated)
        return updated

    product = ledger.execute(_op, action="product.updated")
    if product is not None:
        logger.info("Updated product %s fields: %s", product_id, ", ".join(sorted(patch.keys())))
    return product


def delete_product(product_id: str) -> bool:
    """
    Remove a product from the catalog.

    Returns:
        True if deleted, False if not found
    """
    def _op(uow: UnitOfWork) -> bool:
        if uow.get_product(product_id) is None:
            return False
        uow.remove_product(product_id)
        return True

    deleted = ledger.execute(_op, action="product.deleted")
    if deleted:
        logger.info("Deleted product %s", product_id)
    return deleted


def get_product(product_id: str) -> Product | None:
    with ledger.reading() as state:
        return state.products.get(product_id)


def list_products(
    *,
    search: str | None = None,
    category: str | None = None,
    supplier_id: str | None = None,
    stock_status: str | None = None,
) -> list[Product]:
    """
    Catalog listing with the product screen's filters.

    - search: case-insensitive substring of the name
    - stock_status: "Out of Stock", "Low Stock" or "In Stock"
    """
    if category is not None and category not in CATEGORIES:
        raise ValidationError(f"category must be one of: {', '.join(CATEGORIES)}")
    if stock_status is not None and stock_status not in STOCK_STATUSES:
        raise ValidationError(f"stock_status must be one of: {', '.join(STOCK_STATUSES)}")

    needle = search.strip().lower() if search else ""
    threshold = ledger.policy.low_stock_threshold

    with ledger.reading() as state:
        products = list(state.products.values())

    return [
        p for p in products
        if (not needle or needle in p.name.lower())
        and (category is None or p.category == category)
        and (supplier_id is None or p.supplier_id == supplier_id)
        and (stock_status is None or p.stock_status(threshold) == stock_status)
    ]


def list_available_products() -> list[Product]:
    """Products that can be put on a new sale (stock > 0)."""
    with ledger.reading() as state:
        return [p for p in state.products.values() if p.current_stock > 0]
