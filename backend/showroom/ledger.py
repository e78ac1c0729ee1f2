# Overview: Coordinating ledger service; the only writer of catalog, party, sales and stock state.

"""
Showroom Ledger Invariants (authoritative)

- Every mutation runs as ShowroomLedger.execute(op): op stages its writes on a
  UnitOfWork, the repository commits the resulting ChangeSet, and only then is
  the in-memory state updated. A failure at any point publishes nothing.
- Composite operations are serialized by one re-entrant lock; readers take the
  same lock, so nobody observes a half-applied sale or restock.
- Records are frozen dataclasses: a reader may keep what it got without
  seeing later writes.
- Document numbers come from monotonic per-type sequences stored with the
  state, never from collection sizes.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterator, TypeVar

from .config import parse_flag
from .entities import (
    CompanyProfile,
    Customer,
    LedgerState,
    Product,
    Sale,
    StockMovement,
    Supplier,
    SupplierPayment,
)
from .repositories import ChangeSet, InMemoryRepository, LedgerRepository, RepositoryError
from .time_utils import utcnow
from .validation import NotFoundError, ShowroomError

logger = logging.getLogger(__name__)

T = TypeVar("T")

EXTENSION_KEY = "showroom_ledger"


@dataclass(frozen=True)
class LedgerPolicy:
    """Business-rule switches read from app config."""
    enforce_stock_levels: bool = True
    allow_supplier_overpayment: bool = True
    low_stock_threshold: int = 10

    @classmethod
    def from_config(cls, config) -> "LedgerPolicy":
        return cls(
            enforce_stock_levels=parse_flag(config.get("ENFORCE_STOCK_LEVELS"), True),
            allow_supplier_overpayment=parse_flag(config.get("ALLOW_SUPPLIER_OVERPAYMENT"), True),
            low_stock_threshold=int(config.get("LOW_STOCK_THRESHOLD", 10)),
        )


class UnitOfWork:
    """
    Staging area for one ledger operation.

    Reads see this operation's own staged writes first, then the committed
    state. Nothing here touches the committed state.
    """

    def __init__(self, state: LedgerState, policy: LedgerPolicy, now: datetime):
        self._state = state
        self.policy = policy
        # One timestamp for every record the operation writes
        self.now = now
        self.changes = ChangeSet()

    # --- products -----------------------------------------------------------

    def get_product(self, product_id: str) -> Product | None:
        if product_id in self.changes.deleted_products:
            return None
        if product_id in self.changes.products:
            return self.changes.products[product_id]
        return self._state.products.get(product_id)

    def require_product(self, product_id: str) -> Product:
        product = self.get_product(product_id)
        if product is None:
            raise NotFoundError(f"Product {product_id} not found", details={"product_id": product_id})
        return product

    def put_product(self, product: Product) -> None:
        self.changes.deleted_products.discard(product.id)
        self.changes.products[product.id] = product

    def remove_product(self, product_id: str) -> None:
        self.changes.products.pop(product_id, None)
        self.changes.deleted_products.add(product_id)

    # --- parties ------------------------------------------------------------

    def get_customer(self, customer_id: str) -> Customer | None:
        if customer_id in self.changes.customers:
            return self.changes.customers[customer_id]
        return self._state.customers.get(customer_id)

    def require_customer(self, customer_id: str) -> Customer:
        customer = self.get_customer(customer_id)
        if customer is None:
            raise NotFoundError(f"Customer {customer_id} not found", details={"customer_id": customer_id})
        return customer

    def put_customer(self, customer: Customer) -> None:
        self.changes.customers[customer.id] = customer

    def get_supplier(self, supplier_id: str) -> Supplier | None:
        if supplier_id in self.changes.suppliers:
            return self.changes.suppliers[supplier_id]
        return self._state.suppliers.get(supplier_id)

    def require_supplier(self, supplier_id: str) -> Supplier:
        supplier = self.get_supplier(supplier_id)
        if supplier is None:
            raise NotFoundError(f"Supplier {supplier_id} not found", details={"supplier_id": supplier_id})
        return supplier

    def put_supplier(self, supplier: Supplier) -> None:
        self.changes.suppliers[supplier.id] = supplier

    # --- ledgers ------------------------------------------------------------

    def get_sale(self, invoice_no: str) -> Sale | None:
        if invoice_no in self.changes.sales:
            return self.changes.sales[invoice_no]
        return self._state.sales.get(invoice_no)

    def put_sale(self, sale: Sale) -> None:
        self.changes.sales[sale.invoice_no] = sale

    def append_stock_movement(self, movement: StockMovement) -> None:
        self.changes.stock_movements.append(movement)

    def append_supplier_payment(self, payment: SupplierPayment) -> None:
        self.changes.supplier_payments.append(payment)

    def set_company(self, profile: CompanyProfile) -> None:
        self.changes.company = profile

    def next_number(self, sequence_key: str) -> int:
        current = self.changes.sequences.get(sequence_key)
        if current is None:
            current = self._state.sequences.get(sequence_key, 0)
        current += 1
        self.changes.sequences[sequence_key] = current
        return current


class ShowroomLedger:
    """
    Flask extension owning the showroom state.

    Usable standalone too: ShowroomLedger(repository=InMemoryRepository()).
    """

    def __init__(self, app=None, repository: LedgerRepository | None = None):
        self._lock = threading.RLock()
        self._repository: LedgerRepository | None = repository
        self._state: LedgerState | None = None
        self.policy = LedgerPolicy()
        self.default_company = CompanyProfile()
        if app is not None:
            self.init_app(app, repository=repository)

    def init_app(self, app, repository: LedgerRepository | None = None) -> None:
        if repository is None:
            repository = _build_repository(app.config.get("LEDGER_BACKEND", "memory"))

        with self._lock:
            self._repository = repository
            self._state = None  # loaded lazily; the SQL backend needs an app context
            self.policy = LedgerPolicy.from_config(app.config)
            self.default_company = CompanyProfile(
                company_name=app.config.get("COMPANY_NAME", CompanyProfile.company_name),
                company_address=app.config.get("COMPANY_ADDRESS", ""),
            )

        app.extensions[EXTENSION_KEY] = self

    @property
    def repository(self) -> LedgerRepository:
        if self._repository is None:
            self._repository = InMemoryRepository()
        return self._repository

    def _ensure_loaded(self) -> LedgerState:
        if self._state is None:
            self._state = self.repository.load()
            logger.info(
                "Loaded ledger: %d products, %d customers, %d suppliers, %d sales",
                len(self._state.products),
                len(self._state.customers),
                len(self._state.suppliers),
                len(self._state.sales),
            )
        return self._state

    def reload(self) -> None:
        """Drop the cached state; the next access reloads it from the repository."""
        with self._lock:
            self._state = None

    @contextmanager
    def reading(self) -> Iterator[LedgerState]:
        """Hold the ledger lock while the caller reads committed state."""
        with self._lock:
            yield self._ensure_loaded()

    def snapshot(self) -> LedgerState:
        with self._lock:
            return self._ensure_loaded().copy()

    def execute(self, op: Callable[[UnitOfWork], T], *, action: str) -> T:
        """
        Run one ledger operation atomically.

        op receives a UnitOfWork, stages its writes and returns its result.
        Raising anywhere (inside op or while committing) discards everything
        op staged.
        """
        with self._lock:
            state = self._ensure_loaded()
            uow = UnitOfWork(state, self.policy, utcnow())
            try:
                result = op(uow)
            except ShowroomError as exc:
                logger.info("Rejected %s: %s", action, exc)
                raise
            except Exception:
                logger.exception("Failed while staging %s", action)
                raise

            if uow.changes.is_empty():
                return result

            try:
                self.repository.commit(uow.changes)
            except Exception:
                logger.exception("Failed to persist %s", action)
                raise

            state.apply(uow.changes)
            logger.debug("Committed %s (%s)", action, uow.changes.summary())
            return result


def _build_repository(backend: str) -> LedgerRepository:
    if backend == "memory":
        return InMemoryRepository()
    if backend == "sql":
        from .repositories.sql import SqlRepository
        return SqlRepository()
    raise RepositoryError(f"Unknown LEDGER_BACKEND {backend!r} (expected 'memory' or 'sql')")
