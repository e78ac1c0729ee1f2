"""
Pytest fixtures for showroom ledger tests.

Every test gets its own app (and therefore a fresh in-memory ledger); SQL
backend tests opt in through the sql_app fixture.
"""

import pytest

from showroom import create_app
from showroom.extensions import db, ledger
from showroom.services import customer_service, products_service, supplier_service


TEST_CONFIG = {
    'TESTING': True,
    'SECRET_KEY': 'test',
    'LEDGER_BACKEND': 'memory',
    'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
    'SQLALCHEMY_TRACK_MODIFICATIONS': False,
    'ENFORCE_STOCK_LEVELS': True,
    'ALLOW_SUPPLIER_OVERPAYMENT': True,
    'LOW_STOCK_THRESHOLD': 10,
    'COMPANY_NAME': 'Test Showroom',
    'COMPANY_ADDRESS': 'House 1, Road 2, Dhaka',
}


def make_app(**overrides):
    return create_app({**TEST_CONFIG, **overrides})


@pytest.fixture(scope='function')
def app_factory():
    """Build an app with config overrides; the caller pushes its context."""
    return make_app


@pytest.fixture(scope='function')
def app():
    """Create application for testing (in-memory ledger)."""
    app = make_app()
    with app.app_context():
        yield app


@pytest.fixture(scope='function')
def sql_app():
    """Application backed by the SQL repository on an in-memory SQLite database."""
    app = make_app(LEDGER_BACKEND='sql')
    with app.app_context():
        db.create_all()
        ledger.reload()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def runner(app):
    """Flask CLI runner."""
    return app.test_cli_runner()


@pytest.fixture(scope='function')
def supplier(app):
    """SUP-001, nothing owed."""
    return supplier_service.add_supplier({
        "name": "Mr. Rahim",
        "company_name": "Fashion Hub Ltd.",
        "mobile": "01711-000000",
        "address": "Dhaka",
    })


@pytest.fixture(scope='function')
def product(app, supplier):
    """PROD-001: cost 800.00, price 1500.00, 50 in stock."""
    return products_service.add_product({
        "name": "Classic Blue Jeans",
        "category": "Pant",
        "size": "L",
        "color": "Blue",
        "supplier_id": supplier.id,
        "purchase_price_cents": 80000,
        "selling_price_cents": 150000,
        "opening_stock": 50,
    })


@pytest.fixture(scope='function')
def customer(app):
    """CUST-001, Bronze, no purchases yet."""
    return customer_service.add_customer({
        "name": "Anisul Islam",
        "phone": "01911-000000",
        "email": "anisul@email.com",
        "address": "Banani, Dhaka",
    })


@pytest.fixture(scope='function')
def seeded(app, supplier, product, customer):
    """One supplier, one product and one customer."""
    return {"supplier": supplier, "product": product, "customer": customer}
