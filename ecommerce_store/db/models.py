"""
SQLAlchemy declarations for the e-commerce store schema.

Each foreign key carries an explicit on-delete policy:
- CASCADE where the child has no meaning without its parent,
- RESTRICT where the child preserves history and must block the delete,
- SET NULL where the child survives with the link severed.

Relationships use `passive_deletes` so deletes are left to the database and the
declared policy is what actually runs, including RESTRICT.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    PrimaryKeyConstraint,
    SmallInteger,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ecommerce_store.db.base import Base

GENDERS = ("male", "female", "other")
ORDER_STATUSES = ("pending", "processing", "shipped", "delivered", "cancelled", "refunded")
ORDER_PAYMENT_STATUSES = ("unpaid", "paid", "refunded")
PAYMENT_METHODS = ("card", "paypal", "bank_transfer", "cash_on_delivery")
PAYMENT_STATUSES = ("initiated", "completed", "failed", "refunded")
ACTOR_TYPES = ("customer", "admin", "system")

# DECIMAL(10,2) everywhere money is stored.
Money = Numeric(10, 2)


def _one_of(column: str, values: tuple[str, ...]) -> str:
    """Render a CHECK expression restricting `column` to a fixed value set."""
    quoted = ",".join(f"'{value}'" for value in values)
    return f"{column} in ({quoted})"


class TimestampMixin:
    """created_at / updated_at pair; updated_at is touched on every ORM update."""

    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), onupdate=func.now(), nullable=False
    )


class Customer(Base, TimestampMixin):
    """customers table."""

    __tablename__ = "customers"

    customer_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)

    # Relationships
    profile: Mapped[Optional["CustomerProfile"]] = relationship(
        "CustomerProfile",
        back_populates="customer",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    addresses: Mapped[List["Address"]] = relationship(
        "Address", back_populates="customer", cascade="all, delete-orphan", passive_deletes=True
    )
    # RESTRICT: the ORM must never null out orders.customer_id on its own.
    orders: Mapped[List["Order"]] = relationship("Order", back_populates="customer", passive_deletes="all")
    reviews: Mapped[List["ProductReview"]] = relationship(
        "ProductReview", back_populates="customer", passive_deletes=True
    )


class CustomerProfile(Base):
    """customer_profiles table; shares its primary key with customers (one-to-one)."""

    __tablename__ = "customer_profiles"

    customer_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("customers.customer_id", ondelete="CASCADE", onupdate="CASCADE"),
        primary_key=True,
        autoincrement=False,
    )
    birthday: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    gender: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)
    preferred_language: Mapped[Optional[str]] = mapped_column(String(10), nullable=True, server_default="en")
    marketing_opt_in: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default="0")

    customer: Mapped[Customer] = relationship("Customer", back_populates="profile")

    __table_args__ = (CheckConstraint(_one_of("gender", GENDERS), name="gender"),)


class Address(Base):
    """addresses table."""

    __tablename__ = "addresses"

    address_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    customer_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("customers.customer_id", ondelete="CASCADE"), nullable=False, index=True
    )

    label: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    line1: Mapped[str] = mapped_column(String(255), nullable=False)
    line2: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    city: Mapped[str] = mapped_column(String(100), nullable=False)
    state: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    postal_code: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    country: Mapped[str] = mapped_column(String(100), nullable=False)

    is_default: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default="0")

    customer: Mapped[Customer] = relationship("Customer", back_populates="addresses")


class Supplier(Base):
    """suppliers table."""

    __tablename__ = "suppliers"

    supplier_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    contact_name: Mapped[Optional[str]] = mapped_column(String(150), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, unique=True)
    address: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    products: Mapped[List["Product"]] = relationship("Product", back_populates="supplier", passive_deletes=True)


class Category(Base):
    """categories table; a tree through the nullable parent_id."""

    __tablename__ = "categories"

    category_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(120), nullable=False, unique=True)
    description: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    parent_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("categories.category_id", ondelete="SET NULL"), nullable=True
    )

    parent: Mapped[Optional["Category"]] = relationship(
        "Category", remote_side="Category.category_id", back_populates="children"
    )
    children: Mapped[List["Category"]] = relationship("Category", back_populates="parent", passive_deletes=True)

    products: Mapped[List["Product"]] = relationship(
        "Product",
        secondary="product_categories",
        back_populates="categories",
        passive_deletes=True,
    )


class Product(Base, TimestampMixin):
    """products table."""

    __tablename__ = "products"

    product_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    sku: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    price: Mapped[Decimal] = mapped_column(Money, nullable=False)
    cost: Mapped[Optional[Decimal]] = mapped_column(Money, nullable=True)
    vendor: Mapped[Optional[str]] = mapped_column(String(150), nullable=True)
    stock_quantity: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default="1")

    supplier_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("suppliers.supplier_id", ondelete="SET NULL"), nullable=True
    )

    supplier: Mapped[Optional[Supplier]] = relationship("Supplier", back_populates="products")
    categories: Mapped[List[Category]] = relationship(
        "Category",
        secondary="product_categories",
        back_populates="products",
        passive_deletes=True,
    )
    inventory_transactions: Mapped[List["InventoryTransaction"]] = relationship(
        "InventoryTransaction", back_populates="product", cascade="all, delete-orphan", passive_deletes=True
    )
    reviews: Mapped[List["ProductReview"]] = relationship(
        "ProductReview", back_populates="product", cascade="all, delete-orphan", passive_deletes=True
    )
    # RESTRICT: order history pins the product.
    order_items: Mapped[List["OrderItem"]] = relationship(
        "OrderItem", back_populates="product", passive_deletes="all"
    )

    __table_args__ = (
        CheckConstraint("price >= 0", name="price_non_negative"),
        CheckConstraint("cost >= 0", name="cost_non_negative"),
        CheckConstraint("stock_quantity >= 0", name="stock_quantity_non_negative"),
        Index("idx_products_active_price", "active", "price"),
        # MySQL only; elsewhere this would be a B-tree over a TEXT column.
        Index("ft_name_description", "name", "description", mysql_prefix="FULLTEXT").ddl_if(dialect="mysql"),
    )


class ProductCategory(Base):
    """product_categories junction table."""

    __tablename__ = "product_categories"

    product_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("products.product_id", ondelete="CASCADE"), primary_key=True
    )
    category_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("categories.category_id", ondelete="CASCADE"), primary_key=True
    )


class InventoryTransaction(Base):
    """inventory_transactions table; signed stock movements per product."""

    __tablename__ = "inventory_transactions"

    inventory_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    product_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("products.product_id", ondelete="CASCADE"), nullable=False, index=True
    )
    change: Mapped[int] = mapped_column(Integer, nullable=False)
    reason: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), nullable=False)

    product: Mapped[Product] = relationship("Product", back_populates="inventory_transactions")


class Order(Base):
    """orders table."""

    __tablename__ = "orders"

    order_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    customer_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("customers.customer_id", ondelete="RESTRICT"), nullable=False, index=True
    )

    order_status: Mapped[str] = mapped_column(String(20), nullable=False, server_default="pending")
    order_date: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), nullable=False)
    shipped_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    billing_address_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("addresses.address_id", ondelete="SET NULL"), nullable=True
    )
    shipping_address_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("addresses.address_id", ondelete="SET NULL"), nullable=True
    )

    subtotal: Mapped[Decimal] = mapped_column(Money, nullable=False, server_default="0.00")
    shipping_cost: Mapped[Decimal] = mapped_column(Money, nullable=False, server_default="0.00")
    tax_amount: Mapped[Decimal] = mapped_column(Money, nullable=False, server_default="0.00")
    total: Mapped[Decimal] = mapped_column(Money, nullable=False, server_default="0.00")

    payment_status: Mapped[str] = mapped_column(String(20), nullable=False, server_default="unpaid")

    customer: Mapped[Customer] = relationship("Customer", back_populates="orders")
    billing_address: Mapped[Optional[Address]] = relationship("Address", foreign_keys=[billing_address_id])
    shipping_address: Mapped[Optional[Address]] = relationship("Address", foreign_keys=[shipping_address_id])

    items: Mapped[List["OrderItem"]] = relationship(
        "OrderItem", back_populates="order", cascade="all, delete-orphan", passive_deletes=True
    )
    payments: Mapped[List["Payment"]] = relationship(
        "Payment", back_populates="order", cascade="all, delete-orphan", passive_deletes=True
    )

    __table_args__ = (
        CheckConstraint(_one_of("order_status", ORDER_STATUSES), name="order_status"),
        CheckConstraint(_one_of("payment_status", ORDER_PAYMENT_STATUSES), name="payment_status"),
        CheckConstraint("subtotal >= 0", name="subtotal_non_negative"),
        CheckConstraint("shipping_cost >= 0", name="shipping_cost_non_negative"),
        CheckConstraint("tax_amount >= 0", name="tax_amount_non_negative"),
        CheckConstraint("total >= 0", name="total_non_negative"),
    )


class OrderItem(Base):
    """order_items table; one line per (order, product)."""

    __tablename__ = "order_items"

    order_id: Mapped[int] = mapped_column(Integer, ForeignKey("orders.order_id", ondelete="CASCADE"))
    product_id: Mapped[int] = mapped_column(Integer, ForeignKey("products.product_id", ondelete="RESTRICT"))

    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    # Price at the time of the order, independent of products.price.
    unit_price: Mapped[Decimal] = mapped_column(Money, nullable=False)
    discount: Mapped[Decimal] = mapped_column(Money, nullable=False, server_default="0.00")

    order: Mapped[Order] = relationship("Order", back_populates="items")
    product: Mapped[Product] = relationship("Product", back_populates="order_items")

    __table_args__ = (
        PrimaryKeyConstraint("order_id", "product_id"),
        CheckConstraint("quantity > 0", name="quantity_positive"),
    )


class Payment(Base):
    """payments table."""

    __tablename__ = "payments"

    payment_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("orders.order_id", ondelete="CASCADE"), nullable=False, index=True
    )

    amount: Mapped[Decimal] = mapped_column(Money, nullable=False)
    payment_method: Mapped[str] = mapped_column(String(20), nullable=False)
    payment_date: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), nullable=False)
    transaction_reference: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, unique=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, server_default="initiated")

    order: Mapped[Order] = relationship("Order", back_populates="payments")

    __table_args__ = (
        CheckConstraint(_one_of("payment_method", PAYMENT_METHODS), name="payment_method"),
        CheckConstraint(_one_of("status", PAYMENT_STATUSES), name="status"),
    )


class ProductReview(Base):
    """product_reviews table."""

    __tablename__ = "product_reviews"

    review_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    product_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("products.product_id", ondelete="CASCADE"), nullable=False, index=True
    )
    customer_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("customers.customer_id", ondelete="SET NULL"), nullable=True
    )

    rating: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    title: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    body: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), nullable=False)
    approved: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default="0")

    product: Mapped[Product] = relationship("Product", back_populates="reviews")
    customer: Mapped[Optional[Customer]] = relationship("Customer", back_populates="reviews")

    __table_args__ = (CheckConstraint("rating BETWEEN 1 AND 5", name="rating_range"),)


class ActivityLog(Base):
    """activity_logs table; append-only audit entries."""

    __tablename__ = "activity_logs"

    log_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    actor_type: Mapped[str] = mapped_column(String(20), nullable=False)
    # Polymorphic over actor_type; no foreign key.
    actor_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    action: Mapped[str] = mapped_column(String(100), nullable=False)
    details: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), nullable=False)

    __table_args__ = (CheckConstraint(_one_of("actor_type", ACTOR_TYPES), name="actor_type"),)
