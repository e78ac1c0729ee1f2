# Overview: Persistence seam for the ledger: load everything on start, save every committed change set.

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from ..entities import (
    CompanyProfile,
    Customer,
    LedgerState,
    Product,
    Sale,
    StockMovement,
    Supplier,
    SupplierPayment,
)


@dataclass
class ChangeSet:
    """
    Everything one ledger operation wants to write.

    Upserts are keyed by id; stock movements and supplier payments are
    append-only; sequences hold the new high-water mark per document type.
    """
    products: dict[str, Product] = field(default_factory=dict)
    deleted_products: set[str] = field(default_factory=set)
    customers: dict[str, Customer] = field(default_factory=dict)
    suppliers: dict[str, Supplier] = field(default_factory=dict)
    sales: dict[str, Sale] = field(default_factory=dict)
    stock_movements: list[StockMovement] = field(default_factory=list)
    supplier_payments: list[SupplierPayment] = field(default_factory=list)
    sequences: dict[str, int] = field(default_factory=dict)
    company: CompanyProfile | None = None

    def is_empty(self) -> bool:
        return not (
            self.products
            or self.deleted_products
            or self.customers
            or self.suppliers
            or self.sales
            or self.stock_movements
            or self.supplier_payments
            or self.sequences
            or self.company is not None
        )

    def summary(self) -> str:
        parts = [
            f"{name}={len(value)}"
            for name, value in (
                ("products", self.products),
                ("deleted_products", self.deleted_products),
                ("customers", self.customers),
                ("suppliers", self.suppliers),
                ("sales", self.sales),
                ("stock_movements", self.stock_movements),
                ("supplier_payments", self.supplier_payments),
            )
            if value
        ]
        if self.company is not None:
            parts.append("company=1")
        return ", ".join(parts) or "nothing"


class RepositoryError(Exception):
    """Raised when a backend cannot load or persist ledger state."""


class LedgerRepository(ABC):
    """
    Storage backend for ShowroomLedger.

    commit() must be all-or-nothing: if it raises, nothing of the change set
    may be visible on the next load().
    """

    @abstractmethod
    def load(self) -> LedgerState:
        """Return the full persisted state."""

    @abstractmethod
    def commit(self, changes: ChangeSet) -> None:
        """Persist one change set atomically."""

    def close(self) -> None:
        """Release backend resources. Optional."""
