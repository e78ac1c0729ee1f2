"""
Ledger coordination tests.

Verifies:
- A commit failure publishes nothing (no partial cascades)
- An operation that raises halfway discards its staged writes
- Sequences only advance on success
- Concurrent sales never oversell or reuse invoice numbers
"""

import threading
from dataclasses import replace

import pytest

from showroom.extensions import ledger
from showroom.repositories import InMemoryRepository, RepositoryError
from showroom.services import customer_service, inventory_service, products_service, sales_service, supplier_service


class FlakyRepository(InMemoryRepository):
    """In-memory backend that can be told to fail the next commit."""

    def __init__(self):
        super().__init__()
        self.fail_next = False

    def commit(self, changes):
        if self.fail_next:
            self.fail_next = False
            raise RepositoryError("disk full")
        super().commit(changes)


@pytest.fixture
def flaky(app_factory):
    repository = FlakyRepository()
    app = app_factory(LEDGER_REPOSITORY=repository)
    with app.app_context():
        supplier_service.add_supplier({"name": "Mr. Rahim"})
        products_service.add_product({
            "name": "Classic Blue Jeans",
            "category": "Pant",
            "size": "L",
            "color": "Blue",
            "supplier_id": "SUP-001",
            "purchase_price_cents": 80000,
            "selling_price_cents": 150000,
            "opening_stock": 50,
        })
        customer_service.add_customer({"name": "Anisul Islam"})
        yield repository


class TestCommitFailure:

    def test_failed_sale_changes_nothing(self, flaky):
        before = ledger.snapshot()
        flaky.fail_next = True

        with pytest.raises(RepositoryError):
            sales_service.record_sale("CUST-001", [{"product_id": "PROD-001", "quantity": 2}], "Cash")

        after = ledger.snapshot()
        assert after == before
        # Committed copy agrees with what readers see
        assert flaky.load() == after

    def test_failed_restock_changes_nothing(self, flaky):
        flaky.fail_next = True

        with pytest.raises(RepositoryError):
            inventory_service.restock_product("PROD-001", 10)

        assert products_service.get_product("PROD-001").current_stock == 50
        assert supplier_service.get_supplier("SUP-001").due_balance_cents == 0
        assert len(inventory_service.list_stock_movements()) == 1

    def test_ledger_usable_after_failure(self, flaky):
        flaky.fail_next = True
        with pytest.raises(RepositoryError):
            sales_service.record_sale("CUST-001", [{"product_id": "PROD-001", "quantity": 2}], "Cash")

        sale = sales_service.record_sale("CUST-001", [{"product_id": "PROD-001", "quantity": 2}], "Cash")

        assert sale.invoice_no == "INV-0001"
        assert products_service.get_product("PROD-001").current_stock == 48
        assert inventory_service.list_stock_movements()[0].id == "SM-000002"

    def test_noop_operations_skip_commit(self, flaky):
        commits = flaky.commit_count
        customer_service.update_customer("CUST-001", {"name": "Anisul Islam"})
        assert flaky.commit_count == commits


class TestOperationFailure:

    def test_exception_mid_operation_discards_staged_writes(self, app, seeded):
        before = ledger.snapshot()

        def _op(uow):
            uow.put_product(replace(uow.require_product("PROD-001"), current_stock=0))
            uow.next_number("INVOICE")
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            ledger.execute(_op, action="test.boom")

        assert ledger.snapshot() == before

    def test_staged_reads_see_own_writes(self, app, seeded):
        def _op(uow):
            first = uow.next_number("INVOICE")
            second = uow.next_number("INVOICE")
            uow.remove_product("PROD-001")
            return first, second, uow.get_product("PROD-001")

        assert ledger.execute(_op, action="test.staging") == (1, 2, None)
        assert products_service.get_product("PROD-001") is None


class TestConcurrentSales:

    def test_parallel_sales_do_not_oversell(self, app, seeded):
        errors = []
        invoices = []

        def _sell():
            try:
                invoices.append(
                    sales_service.record_sale("CUST-001", [{"product_id": "PROD-001", "quantity": 3}], "Cash").invoice_no
                )
            except Exception as exc:
                errors.append(exc)

        threads = [threading.Thread(target=_sell) for _ in range(20)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        # 50 in stock, 3 per sale -> 16 succeed
        assert len(invoices) == 16
        assert len(set(invoices)) == 16
        assert len(errors) == 4
        assert products_service.get_product("PROD-001").current_stock == 2
        assert customer_service.get_customer("CUST-001").total_purchases_cents == 16 * 3 * 150000
