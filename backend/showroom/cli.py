# Overview: Flask CLI command groups for bootstrap, catalog, parties, sales and reports.

# backend/showroom/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Set LEDGER_BACKEND=sql to keep data between commands; the default
#   in-memory ledger only lives for one command.
# - Use: python -m flask <group> <command> [options]
#
# System:
# - python -m flask system init-db
#   Create all tables (SQL backend).
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
# - python -m flask system seed-demo
#   Load the demo suppliers, products and customers into an empty ledger.
#
# Catalog:
# - python -m flask products list [--search jeans] [--category Pant] [--stock-status "Low Stock"]
# - python -m flask products add --name "Denim Jacket" --category Jacket --size L --color Blue
#       --supplier SUP-001 --purchase-price 1200 --selling-price 2200 --opening-stock 15
# - python -m flask products restock PROD-001 10 [--note "Eid shipment"]
# - python -m flask products delete PROD-001 --yes
#
# Parties:
# - python -m flask customers list [--search anisul]
# - python -m flask customers add --name "Rafiq" --phone 01700-000000 [--tier Silver]
# - python -m flask suppliers list
# - python -m flask suppliers add --name "Mr. Rahim" --company "Fashion Hub Ltd."
# - python -m flask suppliers pay SUP-001 5000
#
# Sales:
# - python -m flask sales list [--customer CUST-001] [--status Due]
# - python -m flask sales record --customer CUST-001 --item PROD-001:2 --item PROD-003:1 --method Cash
# - python -m flask sales set-status INV-0001 Paid
# - python -m flask sales receipt INV-0001
#
# Reports:
# - python -m flask reports dashboard
# - python -m flask reports movements [--product PROD-001] [--type Sale]
#
# Money options are entered in currency units ("1500" or "1500.50") and
# stored as integer cents.

from decimal import Decimal, InvalidOperation

import click
from flask.cli import with_appcontext

from .constants import (
    CATEGORIES,
    COLORS,
    LOYALTY_TIERS,
    MOVEMENT_TYPES,
    PAYMENT_METHODS,
    PAYMENT_STATUSES,
    SIZES,
    STOCK_STATUSES,
)
from .extensions import db, ledger
from .services import customer_service, products_service, sales_service, supplier_service
from .services.inventory_service import restock_product
from .services.receipt_service import build_receipt, format_amount, render_receipt_text
from .services.reporting_service import ReportError, dashboard_summary, stock_movement_report
from .validation import ShowroomError


def _to_cents(value: str, label: str) -> int:
    try:
        amount = Decimal(value)
    except InvalidOperation:
        raise click.BadParameter(f"{value!r} is not a number", param_hint=label)
    if not amount.is_finite():
        raise click.BadParameter(f"{value!r} is not a number", param_hint=label)
    cents = amount * 100
    if cents != cents.to_integral_value():
        raise click.BadParameter("at most two decimal places", param_hint=label)
    return int(cents)


def _fail(exc: ShowroomError) -> None:
    click.echo(f"FAIL {exc}")
    for key, value in exc.details.items():
        click.echo(f"     {key}: {value}")


# =============================================================================
# SYSTEM COMMANDS
# =============================================================================

@click.group('system')
def system_group():
    """Database bootstrap and demo data."""


@system_group.command('init-db')
@with_appcontext
def init_db():
    """Create all ledger tables (no-op for tables that already exist)."""
    db.create_all()
    ledger.reload()
    click.echo("PASS Database tables created.")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """
    DANGER: Drop all tables and recreate schema.

    This will DELETE ALL DATA!
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("DELETE  Dropping all tables...")
    db.drop_all()

    click.echo("BUILD  Creating all tables...")
    db.create_all()
    ledger.reload()

    click.echo("PASS Database reset complete. Run 'python -m flask system seed-demo' for sample data.")


DEMO_SUPPLIERS = [
    {"name": "Mr. Rahim", "company_name": "Fashion Hub Ltd.", "mobile": "01711-xxxxxx", "address": "Dhaka"},
    {"name": "Ms. Karima", "company_name": "Garments World", "mobile": "01812-xxxxxx", "address": "Chittagong"},
]

# (name, category, size, color, supplier index, purchase, selling, opening stock)
DEMO_PRODUCTS = [
    ("Classic Blue Jeans", "Pant", "L", "Blue", 0, 800, 1500, 50),
    ("Silk Saree", "Saree", "Free Size", "Red", 1, 2500, 4000, 20),
    ("Cotton Polo Shirt", "Shirt", "M", "White", 0, 500, 950, 100),
    ("Graphic T-Shirt", "T-Shirt", "XL", "Black", 1, 300, 600, 120),
]

DEMO_CUSTOMERS = [
    {"name": "Anisul Islam", "phone": "01911-xxxxxx", "email": "anisul@email.com",
     "address": "Banani, Dhaka", "loyalty_tier": "Bronze"},
    {"name": "Fatima Begum", "phone": "01512-xxxxxx", "email": "fatima@email.com",
     "address": "Gulshan, Dhaka", "loyalty_tier": "Silver"},
]


@system_group.command('seed-demo')
@with_appcontext
def seed_demo():
    """Load demo suppliers, products and customers (empty ledger only)."""
    snapshot = ledger.snapshot()
    if snapshot.products or snapshot.customers or snapshot.suppliers:
        click.echo("FAIL Ledger already has data; seed-demo only runs on an empty ledger")
        return

    suppliers = [supplier_service.add_supplier(data) for data in DEMO_SUPPLIERS]
    click.echo(f"PASS Created {len(suppliers)} suppliers")

    for name, category, size, color, supplier_index, purchase, selling, opening in DEMO_PRODUCTS:
        products_service.add_product({
            "name": name,
            "category": category,
            "size": size,
            "color": color,
            "supplier_id": suppliers[supplier_index].id,
            "purchase_price_cents": purchase * 100,
            "selling_price_cents": selling * 100,
            "opening_stock": opening,
        })
    click.echo(f"PASS Created {len(DEMO_PRODUCTS)} products")

    for data in DEMO_CUSTOMERS:
        customer_service.add_customer(data)
    click.echo(f"PASS Created {len(DEMO_CUSTOMERS)} customers")


# =============================================================================
# CATALOG COMMANDS
# =============================================================================

@click.group('products')
def products_group():
    """Catalog inspection and stock commands."""


@products_group.command('list')
@click.option('--search', help='Name contains (case-insensitive)')
@click.option('--category', type=click.Choice(CATEGORIES))
@click.option('--supplier', 'supplier_id', help='Supplier id')
@click.option('--stock-status', type=click.Choice(STOCK_STATUSES))
@with_appcontext
def list_products_cli(search, category, supplier_id, stock_status):
    """List catalog products with their stock status."""
    products = products_service.list_products(
        search=search,
        category=category,
        supplier_id=supplier_id,
        stock_status=stock_status,
    )

    if not products:
        click.echo("No products found.")
        return

    threshold = ledger.policy.low_stock_threshold
    click.echo("\n" + "="*110)
    click.echo(f"{'ID':<10} {'Name':<25} {'Category':<10} {'Size':<10} {'Color':<8} "
               f"{'Purchase':>14} {'Selling':>14} {'Stock':>6}  {'Status'}")
    click.echo("="*110)

    for p in products:
        click.echo(f"{p.id:<10} {p.name[:25]:<25} {p.category:<10} {p.size:<10} {p.color:<8} "
                   f"{format_amount(p.purchase_price_cents):>14} {format_amount(p.selling_price_cents):>14} "
                   f"{p.current_stock:>6}  {p.stock_status(threshold)}")

    click.echo("="*110 + "\n")


@products_group.command('add')
@click.option('--name', required=True)
@click.option('--category', type=click.Choice(CATEGORIES), required=True)
@click.option('--size', type=click.Choice(SIZES), required=True)
@click.option('--color', type=click.Choice(COLORS), required=True)
@click.option('--supplier', 'supplier_id', help='Supplier id (optional)')
@click.option('--purchase-price', required=True, help='Unit cost, currency units')
@click.option('--selling-price', required=True, help='Unit price, currency units')
@click.option('--opening-stock', type=int, default=0, show_default=True)
@with_appcontext
def add_product_cli(name, category, size, color, supplier_id, purchase_price, selling_price, opening_stock):
    """Add a product to the catalog."""
    try:
        product = products_service.add_product({
            "name": name,
            "category": category,
            "size": size,
            "color": color,
            "supplier_id": supplier_id,
            "purchase_price_cents": _to_cents(purchase_price, "--purchase-price"),
            "selling_price_cents": _to_cents(selling_price, "--selling-price"),
            "opening_stock": opening_stock,
        })
    except ShowroomError as exc:
        _fail(exc)
        return

    click.echo(f"PASS Created product: {product.name} (ID: {product.id}, Stock: {product.current_stock})")


@products_group.command('restock')
@click.argument('product_id')
@click.argument('quantity', type=int)
@click.option('--note', help='Reference stored on the stock movement')
@with_appcontext
def restock_cli(product_id, quantity, note):
    """Receive QUANTITY more units of PRODUCT_ID (adds to the supplier's due)."""
    try:
        product = restock_product(product_id, quantity, note=note)
    except ShowroomError as exc:
        _fail(exc)
        return

    click.echo(f"PASS Restocked {product.id}: stock now {product.current_stock}")


@products_group.command('delete')
@click.argument('product_id')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def delete_product_cli(product_id, yes):
    """Remove a product; past sales and movements keep referencing it."""
    if not yes:
        click.confirm(f"WARN Delete product {product_id}?", abort=True)

    if products_service.delete_product(product_id):
        click.echo(f"PASS Deleted product {product_id}")
    else:
        click.echo(f"FAIL Product {product_id} not found")


# =============================================================================
# PARTY COMMANDS
# =============================================================================

@click.group('customers')
def customers_group():
    """Customer inspection and registration commands."""


@customers_group.command('list')
@click.option('--search', help='Name, phone or email contains')
@with_appcontext
def list_customers_cli(search):
    """List customers with loyalty standing."""
    customers = customer_service.list_customers(search)

    if not customers:
        click.echo("No customers found.")
        return

    click.echo("\n" + "="*100)
    click.echo(f"{'ID':<10} {'Name':<25} {'Phone':<15} {'Tier':<8} {'Points':>7} {'Purchases':>16}")
    click.echo("="*100)

    for c in customers:
        click.echo(f"{c.id:<10} {c.name[:25]:<25} {c.phone or '-':<15} {c.loyalty_tier:<8} "
                   f"{c.loyalty_points:>7} {format_amount(c.total_purchases_cents):>16}")

    click.echo("="*100 + "\n")


@customers_group.command('add')
@click.option('--name', required=True)
@click.option('--phone', default='')
@click.option('--email', default='')
@click.option('--address', default='')
@click.option('--tier', 'loyalty_tier', type=click.Choice(LOYALTY_TIERS), default=LOYALTY_TIERS[0], show_default=True)
@with_appcontext
def add_customer_cli(name, phone, email, address, loyalty_tier):
    """Register a customer."""
    try:
        customer = customer_service.add_customer({
            "name": name,
            "phone": phone,
            "email": email,
            "address": address,
            "loyalty_tier": loyalty_tier,
        })
    except ShowroomError as exc:
        _fail(exc)
        return

    click.echo(f"PASS Created customer: {customer.name} (ID: {customer.id})")


@click.group('suppliers')
def suppliers_group():
    """Supplier inspection and payment commands."""


@suppliers_group.command('list')
@with_appcontext
def list_suppliers_cli():
    """List suppliers with what the store owes them."""
    suppliers = supplier_service.list_suppliers()

    if not suppliers:
        click.echo("No suppliers found.")
        return

    click.echo("\n" + "="*100)
    click.echo(f"{'ID':<9} {'Name':<20} {'Company':<22} {'Mobile':<15} {'Due':>16}  {'Last payment'}")
    click.echo("="*100)

    for s in suppliers:
        last_paid = str(s.last_payment_date)[:19] if s.last_payment_date else "-"
        click.echo(f"{s.id:<9} {s.name[:20]:<20} {s.company_name[:22] or '-':<22} {s.mobile or '-':<15} "
                   f"{format_amount(s.due_balance_cents):>16}  {last_paid}")

    click.echo("="*100 + "\n")


@suppliers_group.command('add')
@click.option('--name', required=True)
@click.option('--company', 'company_name', default='')
@click.option('--mobile', default='')
@click.option('--address', default='')
@with_appcontext
def add_supplier_cli(name, company_name, mobile, address):
    """Register a supplier."""
    try:
        supplier = supplier_service.add_supplier({
            "name": name,
            "company_name": company_name,
            "mobile": mobile,
            "address": address,
        })
    except ShowroomError as exc:
        _fail(exc)
        return

    click.echo(f"PASS Created supplier: {supplier.name} (ID: {supplier.id})")


@suppliers_group.command('pay')
@click.argument('supplier_id')
@click.argument('amount')
@with_appcontext
def pay_supplier_cli(supplier_id, amount):
    """Pay AMOUNT (currency units) to SUPPLIER_ID."""
    try:
        supplier = supplier_service.record_supplier_payment(supplier_id, _to_cents(amount, "AMOUNT"))
    except ShowroomError as exc:
        _fail(exc)
        return

    click.echo(f"PASS Paid {supplier.id}; due now {format_amount(supplier.due_balance_cents)}")


# =============================================================================
# SALES COMMANDS
# =============================================================================

@click.group('sales')
def sales_group():
    """Invoice recording and inspection commands."""


@sales_group.command('list')
@click.option('--customer', 'customer_id', help='Customer id')
@click.option('--status', type=click.Choice(PAYMENT_STATUSES))
@with_appcontext
def list_sales_cli(customer_id, status):
    """List invoices, oldest first."""
    sales = sales_service.list_sales(customer_id=customer_id, payment_status=status)

    if not sales:
        click.echo("No sales found.")
        return

    click.echo("\n" + "="*100)
    click.echo(f"{'Invoice':<10} {'Date':<20} {'Customer':<10} {'Items':>5} {'Total':>16} {'Profit':>16} "
               f"{'Method':<7} {'Status'}")
    click.echo("="*100)

    for s in sales:
        click.echo(f"{s.invoice_no:<10} {str(s.date)[:19]:<20} {s.customer_id:<10} {len(s.items):>5} "
                   f"{format_amount(s.total_sale_cents):>16} {format_amount(s.total_profit_cents):>16} "
                   f"{s.payment_method:<7} {s.payment_status}")

    click.echo("="*100 + "\n")


def _parse_item(value: str) -> dict:
    product_id, sep, quantity = value.rpartition(":")
    if not sep or not product_id:
        raise click.BadParameter(f"{value!r} must look like PRODUCT_ID:QUANTITY", param_hint="--item")
    try:
        return {"product_id": product_id, "quantity": int(quantity)}
    except ValueError:
        raise click.BadParameter(f"quantity in {value!r} must be an integer", param_hint="--item")


@sales_group.command('record')
@click.option('--customer', 'customer_id', required=True)
@click.option('--item', 'items', multiple=True, required=True, help='PRODUCT_ID:QUANTITY (repeatable)')
@click.option('--method', 'payment_method', type=click.Choice(PAYMENT_METHODS), default=PAYMENT_METHODS[0],
              show_default=True)
@with_appcontext
def record_sale_cli(customer_id, items, payment_method):
    """Record a sale and print its invoice number."""
    lines = [_parse_item(value) for value in items]
    try:
        sale = sales_service.record_sale(customer_id, lines, payment_method)
    except ShowroomError as exc:
        _fail(exc)
        return

    click.echo(f"PASS Recorded {sale.invoice_no}: total {format_amount(sale.total_sale_cents)}, "
               f"profit {format_amount(sale.total_profit_cents)} ({sale.payment_status})")


@sales_group.command('set-status')
@click.argument('invoice_no')
@click.argument('status', type=click.Choice(PAYMENT_STATUSES))
@with_appcontext
def set_status_cli(invoice_no, status):
    """Mark INVOICE_NO as Paid or Due."""
    try:
        sale = sales_service.update_payment_status(invoice_no, status)
    except ShowroomError as exc:
        _fail(exc)
        return

    click.echo(f"PASS {sale.invoice_no} is now {sale.payment_status}")


@sales_group.command('receipt')
@click.argument('invoice_no')
@with_appcontext
def receipt_cli(invoice_no):
    """Print the receipt for INVOICE_NO."""
    try:
        receipt = build_receipt(invoice_no)
    except ShowroomError as exc:
        _fail(exc)
        return

    click.echo(render_receipt_text(receipt))


# =============================================================================
# REPORT COMMANDS
# =============================================================================

@click.group('reports')
def reports_group():
    """Dashboard and stock ledger reports."""


@reports_group.command('dashboard')
@with_appcontext
def dashboard_cli():
    """Print today's headline numbers, top products and recent sales."""
    summary = dashboard_summary()

    click.echo("\n" + "="*60)
    click.echo(f"Dashboard for {summary['date']}")
    click.echo("="*60)
    click.echo(f"{'Today Sales:':<22}{format_amount(summary['todays_sales_cents'])}")
    click.echo(f"{'Total Customers:':<22}{summary['total_customers']}")
    click.echo(f"{'Stock Value:':<22}{format_amount(summary['current_stock_value_cents'])}")
    click.echo(f"{'Total Profit:':<22}{format_amount(summary['total_profit_cents'])}")

    click.echo("\nTop products")
    if not summary["top_products"]:
        click.echo("  (no sales yet)")
    for row in summary["top_products"]:
        click.echo(f"  {row['product_id']:<10} {row['name'][:25]:<25} {row['quantity']:>5} "
                   f"{format_amount(row['sales_cents']):>16}")

    click.echo("\nRecent sales")
    if not summary["recent_sales"]:
        click.echo("  (no sales yet)")
    for row in summary["recent_sales"]:
        click.echo(f"  {row['invoice_no']:<10} {row['customer_name'][:25]:<25} "
                   f"{format_amount(row['total_sale_cents']):>16} {row['payment_status']}")

    click.echo("="*60 + "\n")


@reports_group.command('movements')
@click.option('--product', 'product_id', help='Product id')
@click.option('--type', 'movement_type', type=click.Choice(MOVEMENT_TYPES))
@click.option('--start', help='ISO-8601 lower bound (inclusive)')
@click.option('--end', help='ISO-8601 upper bound (inclusive)')
@with_appcontext
def movements_cli(product_id, movement_type, start, end):
    """List stock movements, newest first."""
    try:
        report = stock_movement_report(product_id=product_id, movement_type=movement_type, start=start, end=end)
    except ReportError as exc:
        click.echo(f"FAIL {exc}")
        return

    if not report["movements"]:
        click.echo("No stock movements found.")
        return

    click.echo("\n" + "="*90)
    click.echo(f"{'ID':<10} {'Date':<21} {'Type':<9} {'Product':<10} {'Qty':>6} {'Stock':>6}  {'Reference'}")
    click.echo("="*90)

    for m in report["movements"]:
        click.echo(f"{m['id']:<10} {m['date']:<21} {m['type']:<9} {m['product_id']:<10} "
                   f"{m['quantity']:>6} {m['updated_stock']:>6}  {m['reference'] or '-'}")

    click.echo("="*90)
    totals = ", ".join(f"{t}: {q}" for t, q in report["totals"].items())
    click.echo(f"Totals - {totals}\n")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(products_group)
    app.cli.add_command(customers_group)
    app.cli.add_command(suppliers_group)
    app.cli.add_command(sales_group)
    app.cli.add_command(reports_group)
