"""Create catalog, order and review tables.

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
    ]


def upgrade() -> None:
    """Create catalog tables and seed the default statuses."""
    # Status lookup table
    statuses = op.create_table(
        'product_statuses',
        sa.Column('name', sa.String(50), primary_key=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
    )
    op.bulk_insert(
        statuses,
        [
            {'name': 'PUBLISHED', 'description': 'Visible in the storefront'},
            {'name': 'DRAFT', 'description': 'Hidden until published'},
            {'name': 'ARCHIVED', 'description': 'No longer sold'},
        ],
    )

    op.create_table(
        'categories',
        sa.Column('id', postgresql.UUID(as_uuid=False), primary_key=True),
        sa.Column('name', sa.String(200), nullable=False, unique=True, index=True),
        sa.Column('slug', sa.String(200), nullable=False, unique=True),
        sa.Column('image', sa.String(1000), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        'products',
        sa.Column('id', postgresql.UUID(as_uuid=False), primary_key=True),
        sa.Column('title', sa.String(500), nullable=False),
        sa.Column('slug', sa.String(500), nullable=False, unique=True, index=True),
        sa.Column('short_description', sa.Text(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', sa.String(50), sa.ForeignKey('product_statuses.name'),
                  nullable=False, server_default='PUBLISHED', index=True),
        sa.Column('metadata', postgresql.JSONB(), nullable=True),
        sa.Column('category_id', postgresql.UUID(as_uuid=False),
                  sa.ForeignKey('categories.id'), nullable=True, index=True),
        *_timestamps(),
    )
    op.create_index('ix_products_created_at', 'products', ['created_at'])
    # Related-product lookups filter on metadata->>'category'
    op.create_index(
        'ix_products_metadata_category',
        'products',
        [sa.text("(metadata->>'category')")],
    )

    op.create_table(
        'product_images',
        sa.Column('id', postgresql.UUID(as_uuid=False), primary_key=True),
        sa.Column('product_id', postgresql.UUID(as_uuid=False),
                  sa.ForeignKey('products.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('url', sa.String(1000), nullable=False),
        sa.Column('alt', sa.String(500), nullable=True),
        sa.Column('is_primary', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
    )

    op.create_table(
        'product_variants',
        sa.Column('id', postgresql.UUID(as_uuid=False), primary_key=True),
        sa.Column('product_id', postgresql.UUID(as_uuid=False),
                  sa.ForeignKey('products.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('sku_prefix', sa.String(100), nullable=True),
        sa.Column('color_code', sa.String(50), nullable=True),
        sa.Column('color_name', sa.String(100), nullable=True, index=True),
        sa.Column('material', sa.String(100), nullable=True, index=True),
        sa.Column('price', sa.Numeric(12, 2), nullable=False),
        sa.Column('compare_at_price', sa.Numeric(12, 2), nullable=True),
        sa.Column('image', sa.String(1000), nullable=True),
        sa.CheckConstraint('price >= 0', name='ck_product_variants_price_non_negative'),
        *_timestamps(),
    )

    op.create_table(
        'inventory',
        sa.Column('id', postgresql.UUID(as_uuid=False), primary_key=True),
        sa.Column('sku', sa.String(100), nullable=False, unique=True),
        sa.Column('variant_id', postgresql.UUID(as_uuid=False),
                  sa.ForeignKey('product_variants.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('quantity', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('reserved', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('location', sa.String(200), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.CheckConstraint('quantity >= 0', name='ck_inventory_quantity_non_negative'),
        sa.CheckConstraint('reserved >= 0', name='ck_inventory_reserved_non_negative'),
    )

    # Orders and reviews feed the sales and rating aggregates
    op.create_table(
        'orders',
        sa.Column('id', postgresql.UUID(as_uuid=False), primary_key=True),
        sa.Column('order_number', sa.String(50), nullable=False, unique=True),
        sa.Column('status', sa.String(50), nullable=False, server_default='CREATED', index=True),
        sa.Column('total', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
    )

    op.create_table(
        'order_items',
        sa.Column('id', postgresql.UUID(as_uuid=False), primary_key=True),
        sa.Column('order_id', postgresql.UUID(as_uuid=False),
                  sa.ForeignKey('orders.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('product_id', postgresql.UUID(as_uuid=False),
                  sa.ForeignKey('products.id', ondelete='SET NULL'), nullable=True, index=True),
        sa.Column('variant_id', postgresql.UUID(as_uuid=False), nullable=True),
        sa.Column('sku', sa.String(100), nullable=True),
        sa.Column('name', sa.String(500), nullable=False),
        sa.Column('price', sa.Numeric(12, 2), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
    )

    op.create_table(
        'reviews',
        sa.Column('id', postgresql.UUID(as_uuid=False), primary_key=True),
        sa.Column('product_id', postgresql.UUID(as_uuid=False),
                  sa.ForeignKey('products.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(200), nullable=True),
        sa.Column('body', sa.Text(), nullable=True),
        sa.Column('approved', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.CheckConstraint('rating BETWEEN 1 AND 5', name='ck_reviews_rating_range'),
    )


def downgrade() -> None:
    """Drop catalog tables."""
    op.drop_table('reviews')
    op.drop_table('order_items')
    op.drop_table('orders')
    op.drop_table('inventory')
    op.drop_table('product_variants')
    op.drop_table('product_images')
    op.drop_index('ix_products_metadata_category', table_name='products')
    op.drop_index('ix_products_created_at', table_name='products')
    op.drop_table('products')
    op.drop_table('categories')
    op.drop_table('product_statuses')
