# Overview: Immutable ledger records handed to services, repositories and presentation.

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from .constants import STOCK_IN, STOCK_LOW, STOCK_OUT, TIER_BRONZE
from .time_utils import to_utc_z


@dataclass(frozen=True)
class Product:
    """
    Catalog entry.

    opening_stock is fixed at creation; current_stock only moves through
    restocks and sales so that it always equals
    opening_stock + restocked - sold.
    """
    id: str
    name: str
    category: str
    size: str
    color: str
    supplier_id: str | None
    purchase_price_cents: int
    selling_price_cents: int
    opening_stock: int
    current_stock: int

    def stock_status(self, low_stock_threshold: int) -> str:
        if self.current_stock <= 0:
            return STOCK_OUT
        if self.current_stock <= low_stock_threshold:
            return STOCK_LOW
        return STOCK_IN

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "size": self.size,
            "color": self.color,
            "supplier_id": self.supplier_id,
            "purchase_price_cents": self.purchase_price_cents,
            "selling_price_cents": self.selling_price_cents,
            "opening_stock": self.opening_stock,
            "current_stock": self.current_stock,
        }


@dataclass(frozen=True)
class Customer:
    id: str
    name: str
    phone: str = ""
    email: str = ""
    address: str = ""
    loyalty_tier: str = TIER_BRONZE
    # Accumulators, only moved by recorded sales
    loyalty_points: int = 0
    total_purchases_cents: int = 0

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "phone": self.phone,
            "email": self.email,
            "address": self.address,
            "loyalty_tier": self.loyalty_tier,
            "loyalty_points": self.loyalty_points,
            "total_purchases_cents": self.total_purchases_cents,
        }


@dataclass(frozen=True)
class Supplier:
    id: str
    name: str
    company_name: str = ""
    mobile: str = ""
    address: str = ""
    # Signed: what the store owes the supplier
    due_balance_cents: int = 0
    last_payment_date: datetime | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "company_name": self.company_name,
            "mobile": self.mobile,
            "address": self.address,
            "due_balance_cents": self.due_balance_cents,
            "last_payment_date": to_utc_z(self.last_payment_date),
        }


@dataclass(frozen=True)
class SaleItem:
    product_id: str
    quantity: int
    unit_price_cents: int
    unit_cost_cents: int
    total_cents: int

    @property
    def profit_cents(self) -> int:
        return (self.unit_price_cents - self.unit_cost_cents) * self.quantity

    def to_dict(self) -> dict:
        return {
            "product_id": self.product_id,
            "quantity": self.quantity,
            "unit_price_cents": self.unit_price_cents,
            "unit_cost_cents": self.unit_cost_cents,
            "total_cents": self.total_cents,
        }


@dataclass(frozen=True)
class Sale:
    """Invoice. Append-only apart from payment_status."""
    invoice_no: str
    date: datetime
    customer_id: str
    items: tuple[SaleItem, ...]
    total_sale_cents: int
    total_profit_cents: int
    payment_method: str
    payment_status: str

    def to_dict(self) -> dict:
        return {
            "invoice_no": self.invoice_no,
            "date": to_utc_z(self.date),
            "customer_id": self.customer_id,
            "items": [item.to_dict() for item in self.items],
            "total_sale_cents": self.total_sale_cents,
            "total_profit_cents": self.total_profit_cents,
            "payment_method": self.payment_method,
            "payment_status": self.payment_status,
        }


@dataclass(frozen=True)
class StockMovement:
    id: str
    date: datetime
    type: str
    product_id: str
    quantity: int
    updated_stock: int
    reference: str | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "date": to_utc_z(self.date),
            "type": self.type,
            "product_id": self.product_id,
            "quantity": self.quantity,
            "updated_stock": self.updated_stock,
            "reference": self.reference,
        }


@dataclass(frozen=True)
class SupplierPayment:
    id: str
    supplier_id: str
    amount_cents: int
    date: datetime
    due_balance_after_cents: int

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "supplier_id": self.supplier_id,
            "amount_cents": self.amount_cents,
            "date": to_utc_z(self.date),
            "due_balance_after_cents": self.due_balance_after_cents,
        }


@dataclass(frozen=True)
class CompanyProfile:
    company_name: str = "Your Brand Name"
    company_address: str = ""
    # data:image/...;base64,... or "" when no logo is set
    company_logo: str = ""

    def to_dict(self) -> dict:
        return {
            "company_name": self.company_name,
            "company_address": self.company_address,
            "company_logo": self.company_logo,
        }


@dataclass
class LedgerState:
    """
    Everything the ledger owns. Mutated only by LedgerState.apply() after a
    change set has been committed to the repository.
    """
    products: dict[str, Product] = field(default_factory=dict)
    customers: dict[str, Customer] = field(default_factory=dict)
    suppliers: dict[str, Supplier] = field(default_factory=dict)
    sales: dict[str, Sale] = field(default_factory=dict)
    stock_movements: list[StockMovement] = field(default_factory=list)
    supplier_payments: list[SupplierPayment] = field(default_factory=list)
    sequences: dict[str, int] = field(default_factory=dict)
    company: CompanyProfile | None = None

    def apply(self, changes) -> None:
        self.products.update(changes.products)
        for product_id in changes.deleted_products:
            self.products.pop(product_id, None)
        self.customers.update(changes.customers)
        self.suppliers.update(changes.suppliers)
        # dict assignment keeps the ledger position of updated invoices
        self.sales.update(changes.sales)
        self.stock_movements.extend(changes.stock_movements)
        self.supplier_payments.extend(changes.supplier_payments)
        self.sequences.update(changes.sequences)
        if changes.company is not None:
            self.company = changes.company

    def copy(self) -> "LedgerState":
        return LedgerState(
            products=dict(self.products),
            customers=dict(self.customers),
            suppliers=dict(self.suppliers),
            sales=dict(self.sales),
            stock_movements=list(self.stock_movements),
            supplier_payments=list(self.supplier_payments),
            sequences=dict(self.sequences),
            company=self.company,
        )
