"""initial showroom schema

Revision ID: sl001
Revises:
Create Date: 2026-10-17 00:00:00.000000

Creates the full showroom ledger schema:
- products, customers, suppliers: master data keyed by ledger-assigned ids
- sales, sale_items: invoices and their lines (price/cost snapshots)
- stock_movements, supplier_payments: append-only ledgers
- document_sequences: per-document-type high-water marks
- company_settings: single-row company profile
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'sl001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    """
    Create all tables from scratch.

    WHY: Ids are strings assigned by the ledger (PROD-001, INV-0001, ...), and
    history tables carry no FK to products because deleted products leave
    orphaned references behind.
    """

    # ============================================================================
    # Master data
    # ============================================================================
    op.create_table(
        'products',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('category', sa.String(length=32), nullable=False),
        sa.Column('size', sa.String(length=32), nullable=False),
        sa.Column('color', sa.String(length=32), nullable=False),
        sa.Column('supplier_id', sa.String(length=32), nullable=True),
        sa.Column('purchase_price_cents', sa.Integer(), nullable=False),
        sa.Column('selling_price_cents', sa.Integer(), nullable=False),
        sa.Column('opening_stock', sa.Integer(), nullable=False),
        sa.Column('current_stock', sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_products_category', 'products', ['category'])
    op.create_index('ix_products_supplier', 'products', ['supplier_id'])

    op.create_table(
        'customers',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=32), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('address', sa.Text(), nullable=False),
        sa.Column('loyalty_tier', sa.String(length=16), nullable=False),
        sa.Column('loyalty_points', sa.Integer(), nullable=False),
        sa.Column('total_purchases_cents', sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'suppliers',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('company_name', sa.String(length=255), nullable=False),
        sa.Column('mobile', sa.String(length=32), nullable=False),
        sa.Column('address', sa.Text(), nullable=False),
        sa.Column('due_balance_cents', sa.Integer(), nullable=False),
        sa.Column('last_payment_date', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )

    # ============================================================================
    # Sales ledger
    # ============================================================================
    op.create_table(
        'sales',
        sa.Column('invoice_no', sa.String(length=32), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('date', sa.DateTime(), nullable=False),
        sa.Column('customer_id', sa.String(length=32), nullable=False),
        sa.Column('total_sale_cents', sa.Integer(), nullable=False),
        sa.Column('total_profit_cents', sa.Integer(), nullable=False),
        sa.Column('payment_method', sa.String(length=16), nullable=False),
        sa.Column('payment_status', sa.String(length=16), nullable=False),
        sa.PrimaryKeyConstraint('invoice_no'),
        sa.UniqueConstraint('position'),
    )
    op.create_index('ix_sales_customer', 'sales', ['customer_id'])
    op.create_index('ix_sales_date', 'sales', ['date'])
    op.create_index('ix_sales_payment_status', 'sales', ['payment_status'])

    op.create_table(
        'sale_items',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('invoice_no', sa.String(length=32), nullable=False),
        sa.Column('line_number', sa.Integer(), nullable=False),
        sa.Column('product_id', sa.String(length=32), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('unit_price_cents', sa.Integer(), nullable=False),
        sa.Column('unit_cost_cents', sa.Integer(), nullable=False),
        sa.Column('total_cents', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['invoice_no'], ['sales.invoice_no']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('invoice_no', 'line_number', name='uq_sale_items_invoice_line'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_sale_items_invoice_no', 'sale_items', ['invoice_no'])
    op.create_index('ix_sale_items_product_id', 'sale_items', ['product_id'])

    # ============================================================================
    # Append-only ledgers
    # ============================================================================
    op.create_table(
        'stock_movements',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('date', sa.DateTime(), nullable=False),
        sa.Column('type', sa.String(length=16), nullable=False),
        sa.Column('product_id', sa.String(length=32), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('updated_stock', sa.Integer(), nullable=False),
        sa.Column('reference', sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('position'),
    )
    op.create_index('ix_stock_movements_product_date', 'stock_movements', ['product_id', 'date'])
    op.create_index('ix_stock_movements_type', 'stock_movements', ['type'])

    op.create_table(
        'supplier_payments',
        sa.Column('id', sa.String(length=32), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('supplier_id', sa.String(length=32), nullable=False),
        sa.Column('amount_cents', sa.Integer(), nullable=False),
        sa.Column('date', sa.DateTime(), nullable=False),
        sa.Column('due_balance_after_cents', sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('position'),
    )
    op.create_index('ix_supplier_payments_supplier_id', 'supplier_payments', ['supplier_id'])

    # ============================================================================
    # Sequences and settings
    # ============================================================================
    op.create_table(
        'document_sequences',
        sa.Column('document_type', sa.String(length=32), nullable=False),
        sa.Column('last_number', sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint('document_type'),
    )

    op.create_table(
        'company_settings',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('company_name', sa.String(length=255), nullable=False),
        sa.Column('company_address', sa.Text(), nullable=False),
        sa.Column('company_logo', sa.Text(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False,
                  server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id'),
    )


def downgrade():
    op.drop_table('company_settings')
    op.drop_table('document_sequences')
    op.drop_index('ix_supplier_payments_supplier_id', table_name='supplier_payments')
    op.drop_table('supplier_payments')
    op.drop_index('ix_stock_movements_type', table_name='stock_movements')
    op.drop_index('ix_stock_movements_product_date', table_name='stock_movements')
    op.drop_table('stock_movements')
    op.drop_index('ix_sale_items_product_id', table_name='sale_items')
    op.drop_index('ix_sale_items_invoice_no', table_name='sale_items')
    op.drop_table('sale_items')
    op.drop_index('ix_sales_payment_status', table_name='sales')
    op.drop_index('ix_sales_date', table_name='sales')
    op.drop_index('ix_sales_customer', table_name='sales')
    op.drop_table('sales')
    op.drop_table('suppliers')
    op.drop_table('customers')
    op.drop_index('ix_products_supplier', table_name='products')
    op.drop_index('ix_products_category', table_name='products')
    op.drop_table('products')
