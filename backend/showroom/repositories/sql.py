# Overview: Flask-SQLAlchemy backend for the ledger; needs an application context.

from __future__ import annotations

from sqlalchemy import func

from ..entities import LedgerState
from ..extensions import db
from ..models import (
    CompanySetting,
    CustomerRecord,
    DocumentSequence,
    ProductRecord,
    SaleItemRecord,
    SaleRecord,
    StockMovementRecord,
    SupplierPaymentRecord,
    SupplierRecord,
)
from ..services.concurrency import run_with_retry
from .base import ChangeSet, LedgerRepository

COMPANY_SETTINGS_ID = 1


def _next_position(model) -> int:
    current = db.session.query(func.coalesce(func.max(model.position), 0)).scalar()
    return int(current or 0) + 1


def _in_sequence_order(model) -> list:
    # PREFIX-NNN ids widen past 999, so shorter ids were issued first
    return sorted(db.session.query(model), key=lambda record: (len(record.id), record.id))


def _upsert(model, key, entity) -> None:
    record = db.session.get(model, key)
    if record is None:
        record = model(id=key)
        db.session.add(record)
    record.update_from(entity)


class SqlRepository(LedgerRepository):
    """
    Persists the ledger through Flask-SQLAlchemy.

    Each change set is written in one database transaction: either every row
    lands or the session is rolled back and the error propagates.
    """

    def load(self) -> LedgerState:
        state = LedgerState()
        for record in _in_sequence_order(ProductRecord):
            state.products[record.id] = record.to_entity()
        for record in _in_sequence_order(CustomerRecord):
            state.customers[record.id] = record.to_entity()
        for record in _in_sequence_order(SupplierRecord):
            state.suppliers[record.id] = record.to_entity()
        for record in db.session.query(SaleRecord).order_by(SaleRecord.position.asc()):
            state.sales[record.invoice_no] = record.to_entity()
        state.stock_movements = [
            record.to_entity()
            for record in db.session.query(StockMovementRecord).order_by(StockMovementRecord.position.asc())
        ]
        state.supplier_payments = [
            record.to_entity()
            for record in db.session.query(SupplierPaymentRecord).order_by(SupplierPaymentRecord.position.asc())
        ]
        state.sequences = {
            seq.document_type: seq.last_number
            for seq in db.session.query(DocumentSequence)
        }
        company = db.session.get(CompanySetting, COMPANY_SETTINGS_ID)
        state.company = company.to_entity() if company else None
        # Read-only: end the implicit transaction
        db.session.rollback()
        return state

    def commit(self, changes: ChangeSet) -> None:
        def _op():
            self._stage(changes)
            db.session.commit()

        try:
            run_with_retry(_op)
        except Exception:
            db.session.rollback()
            raise

    def _stage(self, changes: ChangeSet) -> None:
        for product_id, product in changes.products.items():
            _upsert(ProductRecord, product_id, product)
        for product_id in changes.deleted_products:
            record = db.session.get(ProductRecord, product_id)
            if record is not None:
                db.session.delete(record)

        for customer_id, customer in changes.customers.items():
            _upsert(CustomerRecord, customer_id, customer)
        for supplier_id, supplier in changes.suppliers.items():
            _upsert(SupplierRecord, supplier_id, supplier)

        if changes.sales:
            position = _next_position(SaleRecord)
            for invoice_no, sale in changes.sales.items():
                record = db.session.get(SaleRecord, invoice_no)
                if record is not None:
                    # Invoices are append-only apart from their payment status
                    record.payment_status = sale.payment_status
                    continue
                record = SaleRecord(
                    invoice_no=invoice_no,
                    position=position,
                    date=sale.date,
                    customer_id=sale.customer_id,
                    total_sale_cents=sale.total_sale_cents,
                    total_profit_cents=sale.total_profit_cents,
                    payment_method=sale.payment_method,
                    payment_status=sale.payment_status,
                )
                for line_number, item in enumerate(sale.items, start=1):
                    record.items.append(SaleItemRecord(
                        line_number=line_number,
                        product_id=item.product_id,
                        quantity=item.quantity,
                        unit_price_cents=item.unit_price_cents,
                        unit_cost_cents=item.unit_cost_cents,
                        total_cents=item.total_cents,
                    ))
                db.session.add(record)
                position += 1

        if changes.stock_movements:
            position = _next_position(StockMovementRecord)
            for offset, movement in enumerate(changes.stock_movements):
                db.session.add(StockMovementRecord(
                    id=movement.id,
                    position=position + offset,
                    date=movement.date,
                    type=movement.type,
                    product_id=movement.product_id,
                    quantity=movement.quantity,
                    updated_stock=movement.updated_stock,
                    reference=movement.reference,
                ))

        if changes.supplier_payments:
            position = _next_position(SupplierPaymentRecord)
            for offset, payment in enumerate(changes.supplier_payments):
                db.session.add(SupplierPaymentRecord(
                    id=payment.id,
                    position=position + offset,
                    supplier_id=payment.supplier_id,
                    amount_cents=payment.amount_cents,
                    date=payment.date,
                    due_balance_after_cents=payment.due_balance_after_cents,
                ))

        for document_type, last_number in changes.sequences.items():
            seq = db.session.get(DocumentSequence, document_type)
            if seq is None:
                seq = DocumentSequence(document_type=document_type)
                db.session.add(seq)
            seq.last_number = last_number

        if changes.company is not None:
            _upsert(CompanySetting, COMPANY_SETTINGS_ID, changes.company)

    def close(self) -> None:
        db.session.remove()
