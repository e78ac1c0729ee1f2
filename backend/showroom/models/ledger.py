from __future__ import annotations

from ..extensions import db
from ..entities import Sale, SaleItem, StockMovement, SupplierPayment


class SaleRecord(db.Model):
    """
    Invoice header. Only payment_status is ever updated after insert.

    position preserves ledger order (invoice numbers stop sorting
    lexically once the sequence outgrows its padding).
    """
    __tablename__ = "sales"
    __table_args__ = (
        db.Index("ix_sales_customer", "customer_id"),
        db.Index("ix_sales_date", "date"),
    )

    invoice_no = db.Column(db.String(32), primary_key=True)
    position = db.Column(db.Integer, nullable=False, unique=True)
    date = db.Column(db.DateTime, nullable=False)
    customer_id = db.Column(db.String(32), nullable=False)

    total_sale_cents = db.Column(db.Integer, nullable=False)
    total_profit_cents = db.Column(db.Integer, nullable=False)

    payment_method = db.Column(db.String(16), nullable=False)
    payment_status = db.Column(db.String(16), nullable=False, index=True)

    items = db.relationship(
        "SaleItemRecord",
        order_by="SaleItemRecord.line_number",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def to_entity(self) -> Sale:
        return Sale(
            invoice_no=self.invoice_no,
            date=self.date,
            customer_id=self.customer_id,
            items=tuple(item.to_entity() for item in self.items),
            total_sale_cents=self.total_sale_cents,
            total_profit_cents=self.total_profit_cents,
            payment_method=self.payment_method,
            payment_status=self.payment_status,
        )


class SaleItemRecord(db.Model):
    """Individual line items on an invoice."""
    __tablename__ = "sale_items"
    __table_args__ = (
        db.UniqueConstraint("invoice_no", "line_number", name="uq_sale_items_invoice_line"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    invoice_no = db.Column(db.String(32), db.ForeignKey("sales.invoice_no"), nullable=False, index=True)
    line_number = db.Column(db.Integer, nullable=False)

    # No FK: deleted products leave orphaned references in history
    product_id = db.Column(db.String(32), nullable=False, index=True)
    quantity = db.Column(db.Integer, nullable=False)
    unit_price_cents = db.Column(db.Integer, nullable=False)
    unit_cost_cents = db.Column(db.Integer, nullable=False)
    total_cents = db.Column(db.Integer, nullable=False)

    def to_entity(self) -> SaleItem:
        return SaleItem(
            product_id=self.product_id,
            quantity=self.quantity,
            unit_price_cents=self.unit_price_cents,
            unit_cost_cents=self.unit_cost_cents,
            total_cents=self.total_cents,
        )


class StockMovementRecord(db.Model):
    """Append-only stock ledger. Rows are never updated or deleted."""
    __tablename__ = "stock_movements"
    __table_args__ = (
        db.Index("ix_stock_movements_product_date", "product_id", "date"),
    )

    id = db.Column(db.String(32), primary_key=True)
    position = db.Column(db.Integer, nullable=False, unique=True)
    date = db.Column(db.DateTime, nullable=False)
    type = db.Column(db.String(16), nullable=False, index=True)
    product_id = db.Column(db.String(32), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    updated_stock = db.Column(db.Integer, nullable=False)
    reference = db.Column(db.Text, nullable=True)

    def to_entity(self) -> StockMovement:
        return StockMovement(
            id=self.id,
            date=self.date,
            type=self.type,
            product_id=self.product_id,
            quantity=self.quantity,
            updated_stock=self.updated_stock,
            reference=self.reference,
        )


class SupplierPaymentRecord(db.Model):
    """Append-only supplier payments."""
    __tablename__ = "supplier_payments"

    id = db.Column(db.String(32), primary_key=True)
    position = db.Column(db.Integer, nullable=False, unique=True)
    supplier_id = db.Column(db.String(32), nullable=False, index=True)
    amount_cents = db.Column(db.Integer, nullable=False)
    date = db.Column(db.DateTime, nullable=False)
    due_balance_after_cents = db.Column(db.Integer, nullable=False)

    def to_entity(self) -> SupplierPayment:
        return SupplierPayment(
            id=self.id,
            supplier_id=self.supplier_id,
            amount_cents=self.amount_cents,
            date=self.date,
            due_balance_after_cents=self.due_balance_after_cents,
        )


class DocumentSequence(db.Model):
    """High-water mark per document type (PRODUCT, INVOICE, STOCK_MOVEMENT, ...)."""
    __tablename__ = "document_sequences"

    document_type = db.Column(db.String(32), primary_key=True)
    last_number = db.Column(db.Integer, nullable=False, default=0)
