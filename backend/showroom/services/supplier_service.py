# Overview: Supplier master data, payments and due balances.

"""
Supplier Service

Suppliers are owed money for every restock of their products (see
inventory_service.restock_product) and are paid down here.

INVARIANT: due_balance_cents == sum(restock costs) - sum(payments), which is
why neither the balance nor the last payment date is editable through
update_supplier.

OVERPAYMENT: by default a payment may exceed the balance (it goes negative,
i.e. credit with the supplier). With ALLOW_SUPPLIER_OVERPAYMENT=False such
payments are rejected.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from ..constants import SEQ_SUPPLIER, SEQ_SUPPLIER_PAYMENT
from ..entities import Supplier, SupplierPayment
from ..extensions import ledger
from ..ledger import UnitOfWork
from ..validation import (
    STR,
    ModelValidationPolicy,
    ValidationError,
    require_positive_int,
    validate_payload,
)
from .document_service import next_document_number

logger = logging.getLogger(__name__)

SUPPLIER_POLICY = ModelValidationPolicy(
    field_types={
        "name": STR,
        "company_name": STR,
        "mobile": STR,
        "address": STR,
    },
    required_on_create={"name"},
    max_lengths={"name": 255, "company_name": 255, "mobile": 32},
)


def add_supplier(data: dict) -> Supplier:
    """
    Create a new supplier (SUP-NNN) with nothing owed.

    Raises:
        ValidationError: If validation fails (e.g., missing name)
    """
    patch = validate_payload(payload=data, policy=SUPPLIER_POLICY, partial=False)

    def _op(uow: UnitOfWork) -> Supplier:
        supplier = Supplier(
            id=next_document_number(uow, SEQ_SUPPLIER),
            name=patch["name"],
            company_name=patch.get("company_name", ""),
            mobile=patch.get("mobile", ""),
            address=patch.get("address", ""),
            due_balance_cents=0,
            last_payment_date=None,
        )
        uow.put_supplier(supplier)
        return supplier

    supplier = ledger.execute(_op, action="supplier.created")
    logger.info("Created supplier %s name=%r", supplier.id, supplier.name)
    return supplier


def update_supplier(supplier_id: str, data: dict) -> Supplier | None:
    """
    Replace a supplier's contact fields.

    Returns:
        Updated supplier, or None if not found
    """
    patch = validate_payload(payload=data, policy=SUPPLIER_POLICY, partial=True)

    def _op(uow: UnitOfWork) -> Supplier | None:
        supplier = uow.get_supplier(supplier_id)
        if supplier is None:
            return None
        updated = replace(supplier, **patch)
        if updated != supplier:
            uow.put_supplier(updated)
        return updated

    return ledger.execute(_op, action="supplier.updated")


def record_supplier_payment(supplier_id: str, amount_cents) -> Supplier:
    """
    Pay a supplier.

    Raises:
        ValidationError: amount is not positive, or it exceeds the balance
            while overpayment is disallowed
        NotFoundError: supplier does not exist
    """
    amount_cents = require_positive_int("amount_cents", amount_cents)

    def _op(uow: UnitOfWork) -> Supplier:
        supplier = uow.require_supplier(supplier_id)

        if not uow.policy.allow_supplier_overpayment and amount_cents > supplier.due_balance_cents:
            raise ValidationError(
                "Payment exceeds due balance",
                details={
                    "supplier_id": supplier_id,
                    "amount_cents": amount_cents,
                    "due_balance_cents": supplier.due_balance_cents,
                },
            )

        paid = replace(
            supplier,
            due_balance_cents=supplier.due_balance_cents - amount_cents,
            last_payment_date=uow.now,
        )
        uow.put_supplier(paid)
        uow.append_supplier_payment(SupplierPayment(
            id=next_document_number(uow, SEQ_SUPPLIER_PAYMENT),
            supplier_id=supplier_id,
            amount_cents=amount_cents,
            date=uow.now,
            due_balance_after_cents=paid.due_balance_cents,
        ))
        return paid

    supplier = ledger.execute(_op, action="supplier.paid")
    logger.info("Paid supplier %s %d cents (due now %d)", supplier_id, amount_cents, supplier.due_balance_cents)
    return supplier


def get_supplier(supplier_id: str) -> Supplier | None:
    with ledger.reading() as state:
        return state.suppliers.get(supplier_id)


def list_suppliers() -> list[Supplier]:
    with ledger.reading() as state:
        return list(state.suppliers.values())


def list_supplier_payments(supplier_id: str | None = None) -> list[SupplierPayment]:
    """Payments in the order they were recorded."""
    with ledger.reading() as state:
        payments = list(state.supplier_payments)
    if supplier_id is None:
        return payments
    return [p for p in payments if p.supplier_id == supplier_id]
