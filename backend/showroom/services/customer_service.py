# Overview: Customer master data; loyalty accumulators are only moved by recorded sales.

from __future__ import annotations

import logging
from dataclasses import replace

from ..constants import SEQ_CUSTOMER, TIER_BRONZE
from ..entities import Customer
from ..extensions import ledger
from ..ledger import UnitOfWork
from ..validation import STR, ModelValidationPolicy, enforce_rules_customer, validate_payload
from .document_service import next_document_number

logger = logging.getLogger(__name__)

CUSTOMER_FIELDS = {
    "name": STR,
    "phone": STR,
    "email": STR,
    "address": STR,
    "loyalty_tier": STR,
}

CUSTOMER_POLICY = ModelValidationPolicy(
    field_types=CUSTOMER_FIELDS,
    required_on_create={"name"},
    max_lengths={"name": 255, "phone": 32, "email": 255},
)


def add_customer(data: dict) -> Customer:
    """Register a customer with empty purchase history (CUST-NNN)."""
    patch = validate_payload(payload=data, policy=CUSTOMER_POLICY, partial=False)
    enforce_rules_customer(patch)

    def _op(uow: UnitOfWork) -> Customer:
        customer = Customer(
            id=next_document_number(uow, SEQ_CUSTOMER),
            name=patch["name"],
            phone=patch.get("phone", ""),
            email=patch.get("email", ""),
            address=patch.get("address", ""),
            loyalty_tier=patch.get("loyalty_tier", TIER_BRONZE),
            loyalty_points=0,
            total_purchases_cents=0,
        )
        uow.put_customer(customer)
        return customer

    customer = ledger.execute(_op, action="customer.created")
    logger.info("Created customer %s name=%r", customer.id, customer.name)
    return customer


def update_customer(customer_id: str, data: dict) -> Customer | None:
    """
    Replace contact fields and the (manually assigned) loyalty tier.

    Returns:
        Updated customer, or None if not found
    """
    patch = validate_payload(payload=data, policy=CUSTOMER_POLICY, partial=True)
    enforce_rules_customer(patch)

    def _op(uow: UnitOfWork) -> Customer | None:
        customer = uow.get_customer(customer_id)
        if customer is None:
            return None
        updated = replace(customer, **patch)
        if updated != customer:
            uow.put_customer(updated)
        return updated

    return ledger.execute(_op, action="customer.updated")


def get_customer(customer_id: str) -> Customer | None:
    with ledger.reading() as state:
        return state.customers.get(customer_id)


def list_customers(search: str | None = None) -> list[Customer]:
    needle = search.strip().lower() if search else ""
    with ledger.reading() as state:
        customers = list(state.customers.values())
    if not needle:
        return customers
    return [
        c for c in customers
        if needle in c.name.lower() or needle in c.phone.lower() or needle in c.email.lower()
    ]
