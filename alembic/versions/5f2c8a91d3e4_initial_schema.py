"""Initial schema: restaurants, catalog, customers, orders and calls

Revision ID: 5f2c8a91d3e4
Revises:
Create Date: 2026-10-19 09:12:44.318207

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5f2c8a91d3e4'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create all tables."""
    op.create_table(
        'restaurants',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('slug', sa.String(), nullable=False, unique=True),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('website_url', sa.String(), nullable=True),
        sa.Column('timezone', sa.String(), nullable=False, server_default='America/New_York'),
        sa.Column('business_hours', sa.JSON(), nullable=False),
        sa.Column('delivery_enabled', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('delivery_fee', sa.Float(), nullable=False, server_default='0'),
        sa.Column('tax_rate', sa.Float(), nullable=False, server_default='0'),
        sa.Column('retell_agent_id', sa.String(), nullable=True),
        sa.Column('retell_phone_number', sa.String(), nullable=True, unique=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_restaurants_id', 'restaurants', ['id'])
    op.create_index('ix_restaurants_retell_agent_id', 'restaurants', ['retell_agent_id'])

    op.create_table(
        'customers',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('restaurant_id', sa.Integer(), sa.ForeignKey('restaurants.id'), nullable=False),
        sa.Column('phone', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint('restaurant_id', 'phone', name='uix_customer_restaurant_phone'),
    )
    op.create_index('ix_customers_id', 'customers', ['id'])
    op.create_index('ix_customers_restaurant_id', 'customers', ['restaurant_id'])

    op.create_table(
        'menu_categories',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('restaurant_id', sa.Integer(), sa.ForeignKey('restaurants.id'), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_available', sa.Boolean(), nullable=False, server_default=sa.true()),
    )
    op.create_index('ix_menu_categories_id', 'menu_categories', ['id'])
    op.create_index('ix_menu_categories_restaurant_id', 'menu_categories', ['restaurant_id'])

    op.create_table(
        'menu_items',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('restaurant_id', sa.Integer(), sa.ForeignKey('restaurants.id'), nullable=False),
        sa.Column('category_id', sa.Integer(), sa.ForeignKey('menu_categories.id'), nullable=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('base_price', sa.Float(), nullable=False),
        sa.Column('is_available', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
    )
    op.create_index('ix_menu_items_id', 'menu_items', ['id'])
    op.create_index('ix_menu_items_restaurant_id', 'menu_items', ['restaurant_id'])
    op.create_index('ix_menu_items_category_id', 'menu_items', ['category_id'])

    op.create_table(
        'modifier_groups',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('menu_item_id', sa.Integer(), sa.ForeignKey('menu_items.id', ondelete='CASCADE'), nullable=False),
        sa.Column('restaurant_id', sa.Integer(), sa.ForeignKey('restaurants.id'), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('required', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('min_selections', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('max_selections', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
    )
    op.create_index('ix_modifier_groups_id', 'modifier_groups', ['id'])
    op.create_index('ix_modifier_groups_menu_item_id', 'modifier_groups', ['menu_item_id'])

    op.create_table(
        'modifier_options',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('modifier_group_id', sa.Integer(), sa.ForeignKey('modifier_groups.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('price_adjustment', sa.Float(), nullable=False, server_default='0'),
        sa.Column('is_default', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
    )
    op.create_index('ix_modifier_options_id', 'modifier_options', ['id'])

    # orders.call_id and calls.order_id reference each other; the orders side
    # gets its foreign key once calls exists.
    op.create_table(
        'orders',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('restaurant_id', sa.Integer(), sa.ForeignKey('restaurants.id'), nullable=False),
        sa.Column('customer_id', sa.Integer(), sa.ForeignKey('customers.id'), nullable=True),
        sa.Column('call_id', sa.Integer(), nullable=True),
        sa.Column('order_type', sa.String(), nullable=False, server_default='pickup'),
        sa.Column('status', sa.String(), nullable=False, server_default='pending'),
        sa.Column('delivery_address', sa.String(), nullable=True),
        sa.Column('subtotal', sa.Float(), nullable=False, server_default='0'),
        sa.Column('tax', sa.Float(), nullable=False, server_default='0'),
        sa.Column('delivery_fee', sa.Float(), nullable=False, server_default='0'),
        sa.Column('total', sa.Float(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('confirmed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('ready_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('cancelled_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_orders_id', 'orders', ['id'])
    op.create_index('ix_orders_restaurant_id', 'orders', ['restaurant_id'])
    op.create_index('ix_orders_call_id', 'orders', ['call_id'])
    op.create_index('ix_orders_status', 'orders', ['status'])
    op.create_index('ix_orders_created_at', 'orders', ['created_at'])
    op.create_index('ix_orders_restaurant_status_created_at', 'orders', ['restaurant_id', 'status', 'created_at'])

    op.create_table(
        'order_items',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('order_id', sa.Integer(), sa.ForeignKey('orders.id'), nullable=False),
        sa.Column('menu_item_id', sa.Integer(), sa.ForeignKey('menu_items.id'), nullable=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('unit_price', sa.Float(), nullable=False),
        sa.Column('modifiers', sa.JSON(), nullable=False),
        sa.Column('item_total', sa.Float(), nullable=False),
        sa.Column('special_instructions', sa.Text(), nullable=True),
    )
    op.create_index('ix_order_items_id', 'order_items', ['id'])
    op.create_index('ix_order_items_order_id', 'order_items', ['order_id'])

    op.create_table(
        'calls',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('restaurant_id', sa.Integer(), sa.ForeignKey('restaurants.id'), nullable=False),
        sa.Column('retell_call_id', sa.String(), nullable=False),
        sa.Column('customer_id', sa.Integer(), sa.ForeignKey('customers.id'), nullable=True),
        sa.Column('order_id', sa.Integer(), sa.ForeignKey('orders.id'), nullable=True),
        sa.Column('caller_phone', sa.String(), nullable=True),
        sa.Column('status', sa.String(), nullable=False, server_default='in_progress'),
        sa.Column('started_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('ended_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('duration_ms', sa.Integer(), nullable=True),
        sa.Column('transcript', sa.JSON(), nullable=True),
        sa.Column('call_analysis', sa.JSON(), nullable=True),
        sa.Column('recording_url', sa.String(), nullable=True),
        sa.Column('disconnection_reason', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_calls_id', 'calls', ['id'])
    op.create_index('ix_calls_restaurant_id', 'calls', ['restaurant_id'])
    op.create_index('ix_calls_retell_call_id', 'calls', ['retell_call_id'], unique=True)
    op.create_index('ix_calls_status', 'calls', ['status'])

    with op.batch_alter_table('orders') as batch_op:
        batch_op.create_foreign_key('fk_orders_call_id_calls', 'calls', ['call_id'], ['id'])


def downgrade() -> None:
    """Drop all tables."""
    with op.batch_alter_table('orders') as batch_op:
        batch_op.drop_constraint('fk_orders_call_id_calls', type_='foreignkey')

    op.drop_table('calls')
    op.drop_table('order_items')
    op.drop_table('orders')
    op.drop_table('modifier_options')
    op.drop_table('modifier_groups')
    op.drop_table('menu_items')
    op.drop_table('menu_categories')
    op.drop_table('customers')
    op.drop_table('restaurants')
