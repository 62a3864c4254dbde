"""
Initial schema - 13 tables and vw_order_summary

Revision ID: 001
Revises: None
Create Date: 2026-10-18
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

from ecommerce_store.db.views import ORDER_SUMMARY_VIEW, CreateView, DropView, order_summary_select

revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _money(name: str, **kw) -> sa.Column:
    return sa.Column(name, sa.Numeric(10, 2), **kw)


def upgrade() -> None:
    # 1. Customers
    op.create_table(
        "customers",
        sa.Column("customer_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("phone", sa.String(30)),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
    )

    # 2. Customer profiles (PK = FK, one-to-one)
    op.create_table(
        "customer_profiles",
        sa.Column(
            "customer_id",
            sa.Integer,
            sa.ForeignKey("customers.customer_id", ondelete="CASCADE", onupdate="CASCADE"),
            primary_key=True,
            autoincrement=False,
        ),
        sa.Column("birthday", sa.Date),
        sa.Column("gender", sa.String(10)),
        sa.Column("preferred_language", sa.String(10), server_default="en"),
        sa.Column("marketing_opt_in", sa.Boolean, nullable=False, server_default="0"),
        sa.CheckConstraint("gender in ('male','female','other')", name="gender"),
    )

    # 3. Addresses
    op.create_table(
        "addresses",
        sa.Column("address_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "customer_id",
            sa.Integer,
            sa.ForeignKey("customers.customer_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("label", sa.String(50)),
        sa.Column("line1", sa.String(255), nullable=False),
        sa.Column("line2", sa.String(255)),
        sa.Column("city", sa.String(100), nullable=False),
        sa.Column("state", sa.String(100)),
        sa.Column("postal_code", sa.String(30)),
        sa.Column("country", sa.String(100), nullable=False),
        sa.Column("is_default", sa.Boolean, nullable=False, server_default="0"),
    )
    op.create_index("ix_addresses_customer_id", "addresses", ["customer_id"])

    # 4. Suppliers
    op.create_table(
        "suppliers",
        sa.Column("supplier_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("contact_name", sa.String(150)),
        sa.Column("phone", sa.String(50)),
        sa.Column("email", sa.String(255), unique=True),
        sa.Column("address", sa.String(255)),
    )

    # 5. Products
    op.create_table(
        "products",
        sa.Column("product_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("sku", sa.String(50), nullable=False, unique=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text),
        _money("price", nullable=False),
        _money("cost"),
        sa.Column("vendor", sa.String(150)),
        sa.Column("stock_quantity", sa.Integer, nullable=False, server_default="0"),
        sa.Column("active", sa.Boolean, nullable=False, server_default="1"),
        sa.Column(
            "supplier_id",
            sa.Integer,
            sa.ForeignKey("suppliers.supplier_id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("price >= 0", name="price_non_negative"),
        sa.CheckConstraint("cost >= 0", name="cost_non_negative"),
        sa.CheckConstraint("stock_quantity >= 0", name="stock_quantity_non_negative"),
    )
    op.create_index("idx_products_active_price", "products", ["active", "price"])
    if op.get_context().dialect.name == "mysql":
        op.create_index("ft_name_description", "products", ["name", "description"], mysql_prefix="FULLTEXT")

    # 6. Categories (self-referencing tree)
    op.create_table(
        "categories",
        sa.Column("category_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("slug", sa.String(120), nullable=False, unique=True),
        sa.Column("description", sa.String(255)),
        sa.Column(
            "parent_id",
            sa.Integer,
            sa.ForeignKey("categories.category_id", ondelete="SET NULL"),
            nullable=True,
        ),
    )

    # 7. Product <-> category junction
    op.create_table(
        "product_categories",
        sa.Column("product_id", sa.Integer, sa.ForeignKey("products.product_id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "category_id", sa.Integer, sa.ForeignKey("categories.category_id", ondelete="CASCADE"), nullable=False
        ),
        sa.PrimaryKeyConstraint("product_id", "category_id"),
    )

    # 8. Inventory movements
    op.create_table(
        "inventory_transactions",
        sa.Column("inventory_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "product_id",
            sa.Integer,
            sa.ForeignKey("products.product_id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("change", sa.Integer, nullable=False),
        sa.Column("reason", sa.String(100)),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_inventory_transactions_product_id", "inventory_transactions", ["product_id"])

    # 9. Orders
    op.create_table(
        "orders",
        sa.Column("order_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "customer_id",
            sa.Integer,
            sa.ForeignKey("customers.customer_id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("order_status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("order_date", sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.Column("shipped_date", sa.DateTime),
        sa.Column(
            "billing_address_id",
            sa.Integer,
            sa.ForeignKey("addresses.address_id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column(
            "shipping_address_id",
            sa.Integer,
            sa.ForeignKey("addresses.address_id", ondelete="SET NULL"),
            nullable=True,
        ),
        _money("subtotal", nullable=False, server_default="0.00"),
        _money("shipping_cost", nullable=False, server_default="0.00"),
        _money("tax_amount", nullable=False, server_default="0.00"),
        _money("total", nullable=False, server_default="0.00"),
        sa.Column("payment_status", sa.String(20), nullable=False, server_default="unpaid"),
        sa.CheckConstraint(
            "order_status in ('pending','processing','shipped','delivered','cancelled','refunded')",
            name="order_status",
        ),
        sa.CheckConstraint("payment_status in ('unpaid','paid','refunded')", name="payment_status"),
        sa.CheckConstraint("subtotal >= 0", name="subtotal_non_negative"),
        sa.CheckConstraint("shipping_cost >= 0", name="shipping_cost_non_negative"),
        sa.CheckConstraint("tax_amount >= 0", name="tax_amount_non_negative"),
        sa.CheckConstraint("total >= 0", name="total_non_negative"),
    )
    op.create_index("ix_orders_customer_id", "orders", ["customer_id"])

    # 10. Order lines (composite key)
    op.create_table(
        "order_items",
        sa.Column("order_id", sa.Integer, sa.ForeignKey("orders.order_id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "product_id", sa.Integer, sa.ForeignKey("products.product_id", ondelete="RESTRICT"), nullable=False
        ),
        sa.Column("quantity", sa.Integer, nullable=False),
        _money("unit_price", nullable=False),
        _money("discount", nullable=False, server_default="0.00"),
        sa.PrimaryKeyConstraint("order_id", "product_id"),
        sa.CheckConstraint("quantity > 0", name="quantity_positive"),
    )

    # 11. Payments
    op.create_table(
        "payments",
        sa.Column("payment_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("order_id", sa.Integer, sa.ForeignKey("orders.order_id", ondelete="CASCADE"), nullable=False),
        _money("amount", nullable=False),
        sa.Column("payment_method", sa.String(20), nullable=False),
        sa.Column("payment_date", sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.Column("transaction_reference", sa.String(255), unique=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="initiated"),
        sa.CheckConstraint(
            "payment_method in ('card','paypal','bank_transfer','cash_on_delivery')",
            name="payment_method",
        ),
        sa.CheckConstraint("status in ('initiated','completed','failed','refunded')", name="status"),
    )
    op.create_index("ix_payments_order_id", "payments", ["order_id"])

    # 12. Product reviews
    op.create_table(
        "product_reviews",
        sa.Column("review_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "product_id", sa.Integer, sa.ForeignKey("products.product_id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column(
            "customer_id", sa.Integer, sa.ForeignKey("customers.customer_id", ondelete="SET NULL"), nullable=True
        ),
        sa.Column("rating", sa.SmallInteger, nullable=False),
        sa.Column("title", sa.String(200)),
        sa.Column("body", sa.Text),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.Column("approved", sa.Boolean, nullable=False, server_default="0"),
        sa.CheckConstraint("rating BETWEEN 1 AND 5", name="rating_range"),
    )
    op.create_index("ix_product_reviews_product_id", "product_reviews", ["product_id"])

    # 13. Activity log
    op.create_table(
        "activity_logs",
        sa.Column("log_id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("actor_type", sa.String(20), nullable=False),
        sa.Column("actor_id", sa.Integer),
        sa.Column("action", sa.String(100), nullable=False),
        sa.Column("details", sa.JSON),
        sa.Column("created_at", sa.DateTime, nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("actor_type in ('customer','admin','system')", name="actor_type"),
    )

    # Views
    op.execute(CreateView(ORDER_SUMMARY_VIEW, order_summary_select()))


def downgrade() -> None:
    op.execute(DropView(ORDER_SUMMARY_VIEW))
    for table in (
        "activity_logs",
        "product_reviews",
        "payments",
        "order_items",
        "orders",
        "inventory_transactions",
        "product_categories",
        "categories",
        "products",
        "suppliers",
        "addresses",
        "customer_profiles",
        "customers",
    ):
        op.drop_table(table)
