from __future__ import annotations

from ..extensions import db
from ..entities import Customer, Product, Supplier


class ProductRecord(db.Model):
    """
    Product master data for the SQL backend.

    Ids are assigned by the ledger (PROD-NNN); the table never generates them.
    """
    __tablename__ = "products"
    __table_args__ = (
        db.Index("ix_products_category", "category"),
        db.Index("ix_products_supplier", "supplier_id"),
    )

    id = db.Column(db.String(32), primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    category = db.Column(db.String(32), nullable=False)
    size = db.Column(db.String(32), nullable=False)
    color = db.Column(db.String(32), nullable=False)

    # No FK: suppliers are never deleted, products may be (orphans tolerated)
    supplier_id = db.Column(db.String(32), nullable=True)

    # Authoritative storage in cents
    purchase_price_cents = db.Column(db.Integer, nullable=False, default=0)
    selling_price_cents = db.Column(db.Integer, nullable=False, default=0)

    opening_stock = db.Column(db.Integer, nullable=False, default=0)
    current_stock = db.Column(db.Integer, nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<ProductRecord id={self.id!r} name={self.name!r} stock={self.current_stock}>"

    def update_from(self, product: Product) -> None:
        self.name = product.name
        self.category = product.category
        self.size = product.size
        self.color = product.color
        self.supplier_id = product.supplier_id
        self.purchase_price_cents = product.purchase_price_cents
        self.selling_price_cents = product.selling_price_cents
        self.opening_stock = product.opening_stock
        self.current_stock = product.current_stock

    def to_entity(self) -> Product:
        return Product(
            id=self.id,
            name=self.name,
            category=self.category,
            size=self.size,
            color=self.color,
            supplier_id=self.supplier_id,
            purchase_price_cents=self.purchase_price_cents,
            selling_price_cents=self.selling_price_cents,
            opening_stock=self.opening_stock,
            current_stock=self.current_stock,
        )


class CustomerRecord(db.Model):
    __tablename__ = "customers"

    id = db.Column(db.String(32), primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    phone = db.Column(db.String(32), nullable=False, default="")
    email = db.Column(db.String(255), nullable=False, default="")
    address = db.Column(db.Text, nullable=False, default="")

    loyalty_tier = db.Column(db.String(16), nullable=False, default="Bronze")

    # Denormalized aggregates (updated when sales are recorded)
    loyalty_points = db.Column(db.Integer, nullable=False, default=0)
    total_purchases_cents = db.Column(db.Integer, nullable=False, default=0)

    def update_from(self, customer: Customer) -> None:
        self.name = customer.name
        self.phone = customer.phone
        self.email = customer.email
        self.address = customer.address
        self.loyalty_tier = customer.loyalty_tier
        self.loyalty_points = customer.loyalty_points
        self.total_purchases_cents = customer.total_purchases_cents

    def to_entity(self) -> Customer:
        return Customer(
            id=self.id,
            name=self.name,
            phone=self.phone,
            email=self.email,
            address=self.address,
            loyalty_tier=self.loyalty_tier,
            loyalty_points=self.loyalty_points,
            total_purchases_cents=self.total_purchases_cents,
        )


class SupplierRecord(db.Model):
    __tablename__ = "suppliers"

    id = db.Column(db.String(32), primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    company_name = db.Column(db.String(255), nullable=False, default="")
    mobile = db.Column(db.String(32), nullable=False, default="")
    address = db.Column(db.Text, nullable=False, default="")

    # Signed; increases on restock, decreases on payment
    due_balance_cents = db.Column(db.Integer, nullable=False, default=0)
    last_payment_date = db.Column(db.DateTime, nullable=True)

    def update_from(self, supplier: Supplier) -> None:
        self.name = supplier.name
        self.company_name = supplier.company_name
        self.mobile = supplier.mobile
        self.address = supplier.address
        self.due_balance_cents = supplier.due_balance_cents
        self.last_payment_date = supplier.last_payment_date

    def to_entity(self) -> Supplier:
        return Supplier(
            id=self.id,
            name=self.name,
            company_name=self.company_name,
            mobile=self.mobile,
            address=self.address,
            due_balance_cents=self.due_balance_cents,
            last_payment_date=self.last_payment_date,
        )
