"""Create master data, reference data and document tables.

Revision ID: 001_create_document_tables
Revises:
Create Date: 2025-01-10

Tables:
- vendors, recipients, recipient_vendors, materials
- units, tax_codes, exchange_rates
- purchase_orders, purchase_order_items
- delivery_notes, delivery_note_items
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001_create_document_tables'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create all tables."""

    # Check if tables already exist (created by init_db on startup)
    conn = op.get_bind()
    inspector = sa.inspect(conn)
    if 'purchase_orders' in inspector.get_table_names():
        print("Document tables already exist, skipping...")
        return

    # ==================== Master Data ====================
    op.create_table(
        'vendors',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('vendor_code', sa.String(20), nullable=False, unique=True),
        sa.Column('company_code', sa.String(10), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('street', sa.String(200), nullable=True),
        sa.Column('zip_code', sa.String(20), nullable=True),
        sa.Column('city', sa.String(100), nullable=True),
        sa.Column('country', sa.String(2), nullable=True),
        sa.Column('po_box_zip', sa.String(20), nullable=True),
        sa.Column('vat_number', sa.String(30), nullable=True),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('url', sa.String(200), nullable=True),
        sa.Column('bank_name', sa.String(200), nullable=True),
        sa.Column('iban', sa.String(34), nullable=True),
        sa.Column('bic', sa.String(11), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_vendors_vendor_code', 'vendors', ['vendor_code'])
    op.create_index('ix_vendors_company_code', 'vendors', ['company_code'])

    op.create_table(
        'recipients',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('recipient_code', sa.String(20), nullable=False, unique=True),
        sa.Column('company_code', sa.String(10), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('street', sa.String(200), nullable=True),
        sa.Column('zip_code', sa.String(20), nullable=True),
        sa.Column('city', sa.String(100), nullable=True),
        sa.Column('country', sa.String(2), nullable=True),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('email', sa.String(200), nullable=True),
        sa.Column('vat_number', sa.String(30), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_recipients_company_code', 'recipients', ['company_code'])

    op.create_table(
        'recipient_vendors',
        sa.Column('recipient_id', sa.Integer, sa.ForeignKey('recipients.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('vendor_id', sa.Integer, sa.ForeignKey('vendors.id', ondelete='CASCADE'), primary_key=True),
    )

    op.create_table(
        'materials',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('material_number', sa.String(40), nullable=False),
        sa.Column('description', sa.String(255), nullable=False),
        sa.Column('material_type', sa.String(20), nullable=True),
        sa.Column('tax_code', sa.String(10), nullable=True),
        sa.Column('tax_rate', sa.Numeric(6, 4), nullable=True),
        sa.Column('unit', sa.String(10), nullable=True),
        sa.Column('net_amount', sa.Numeric(14, 2), nullable=True),
        sa.Column('currency', sa.String(3), nullable=False, server_default='EUR'),
    )
    op.create_index('ix_materials_material_number', 'materials', ['material_number'])

    # ==================== Reference Data ====================
    op.create_table(
        'units',
        sa.Column('code', sa.String(10), primary_key=True),
        sa.Column('language', sa.String(5), primary_key=True),
        sa.Column('abbreviation', sa.String(20), nullable=False),
        sa.Column('description', sa.String(100), nullable=True),
    )

    op.create_table(
        'tax_codes',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('code', sa.String(10), nullable=False),
        sa.Column('company_code', sa.String(10), nullable=False),
        sa.Column('country', sa.String(2), nullable=True),
        sa.Column('rate', sa.Numeric(6, 4), nullable=False),
        sa.Column('description', sa.String(100), nullable=True),
        sa.Column('scenario', sa.String(20), nullable=False, server_default='default'),
        sa.Column('valid_from', sa.Date, nullable=False),
        sa.Column('valid_to', sa.Date, nullable=False),
    )
    op.create_index('ix_tax_codes_code_company', 'tax_codes', ['code', 'company_code'])

    op.create_table(
        'exchange_rates',
        sa.Column('currency', sa.String(3), primary_key=True),
        sa.Column('rate', sa.Numeric(12, 6), nullable=False),
    )

    # ==================== Purchase Orders ====================
    op.create_table(
        'purchase_orders',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('external_number', sa.String(20), nullable=False),
        sa.Column('order_date', sa.Date, nullable=False),
        sa.Column('company_code', sa.String(10), nullable=False),
        sa.Column('recipient_id', sa.Integer, sa.ForeignKey('recipients.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('vendor_id', sa.Integer, sa.ForeignKey('vendors.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('terms_of_payment_id', sa.Integer, nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint('company_code', 'external_number', name='uq_po_company_number'),
    )
    op.create_index('ix_purchase_orders_company_code', 'purchase_orders', ['company_code'])
    op.create_index('ix_purchase_orders_recipient_id', 'purchase_orders', ['recipient_id'])
    op.create_index('ix_po_vendor_date', 'purchase_orders', ['vendor_id', 'order_date'])

    op.create_table(
        'purchase_order_items',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('purchase_order_id', sa.Integer, sa.ForeignKey('purchase_orders.id', ondelete='CASCADE'), nullable=False),
        sa.Column('line_number', sa.String(10), nullable=False),
        sa.Column('item_type', sa.String(20), nullable=True),
        sa.Column('customer_article_number', sa.String(40), nullable=True),
        sa.Column('vendor_article_number', sa.String(40), nullable=True),
        sa.Column('description', sa.String(255), nullable=True),
        sa.Column('tax_rate', sa.Numeric(6, 4), nullable=True),
        sa.Column('tax_code', sa.String(10), nullable=True),
        sa.Column('net_amount', sa.Numeric(14, 2), nullable=False),
        sa.Column('upper_limit_amount', sa.Numeric(14, 2), nullable=True),
        sa.Column('quantity', sa.Numeric(14, 3), nullable=False),
        sa.Column('unit', sa.String(10), nullable=True),
        sa.Column('currency', sa.String(3), nullable=False),
        sa.Column('gr_expected', sa.Boolean, nullable=True, server_default=sa.true()),
        sa.Column('gr_post_per_gr', sa.Boolean, nullable=True, server_default=sa.true()),
    )
    op.create_index('ix_purchase_order_items_purchase_order_id', 'purchase_order_items', ['purchase_order_id'])

    # ==================== Delivery Notes ====================
    op.create_table(
        'delivery_notes',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('internal_number', sa.String(50), nullable=False, unique=True),
        sa.Column('external_number', sa.String(20), nullable=False, unique=True),
        sa.Column('note_type', sa.String(20), nullable=True),
        sa.Column('delivery_date', sa.Date, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index('ix_delivery_notes_external_number', 'delivery_notes', ['external_number'])

    op.create_table(
        'delivery_note_items',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('line_number', sa.String(10), nullable=False),
        sa.Column('delivery_note_id', sa.Integer, sa.ForeignKey('delivery_notes.id', ondelete='CASCADE'), nullable=False),
        sa.Column('purchase_order_id', sa.Integer, sa.ForeignKey('purchase_orders.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('purchase_order_item_id', sa.Integer, sa.ForeignKey('purchase_order_items.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('net_amount', sa.Numeric(14, 2), nullable=False),
        sa.Column('quantity', sa.Numeric(14, 3), nullable=False),
        sa.Column('unit', sa.String(10), nullable=True),
        sa.Column('total_amount', sa.Numeric(14, 2), nullable=False),
        sa.Column('currency', sa.String(3), nullable=False),
    )
    op.create_index('ix_delivery_note_items_delivery_note_id', 'delivery_note_items', ['delivery_note_id'])
    op.create_index('ix_delivery_note_items_purchase_order_item_id', 'delivery_note_items', ['purchase_order_item_id'])

    print("Created document tables")


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table('delivery_note_items')
    op.drop_table('delivery_notes')
    op.drop_table('purchase_order_items')
    op.drop_table('purchase_orders')
    op.drop_table('exchange_rates')
    op.drop_table('tax_codes')
    op.drop_table('units')
    op.drop_table('materials')
    op.drop_table('recipient_vendors')
    op.drop_table('recipients')
    op.drop_table('vendors')
