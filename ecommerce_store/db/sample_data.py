"""
Sample rows for a fresh store schema.

Two customers, two top-level categories, one supplier and two products linked to
their categories. Loading is optional and runs inside the caller's session; the
caller decides whether to commit.
"""

from __future__ import annotations

from decimal import Decimal

import structlog
from sqlalchemy.orm import Session

from ecommerce_store.db.models import Category, Customer, Product, Supplier

logger = structlog.get_logger()

# Seed data constants
CUSTOMERS = [
    ("alice@example.com", "hash_xxx", "Alice", "Brown", "08012345678"),
    ("bob@example.com", "hash_yyy", "Bob", "Smith", "08098765432"),
]
CATEGORIES = [("Electronics", "electronics"), ("Accessories", "accessories")]
SUPPLIER_NAME = "Acme Supplies"
PRODUCTS = [
    # sku, name, description, price, stock, category slug
    ("SKU-001", "Laptop A", "Powerful laptop", Decimal("1500.00"), 10, "electronics"),
    ("SKU-002", "Wireless Mouse", "Ergonomic mouse", Decimal("25.00"), 200, "accessories"),
]


# PUBLIC_INTERFACE
def load_sample_data(db: Session) -> dict:
    """
    Insert the sample rows and flush so generated keys are populated.

    Returns:
        dict: {"customers": [...], "categories": {slug: Category}, "supplier": Supplier,
        "products": {sku: Product}}
    """
    customers = []
    for email, password_hash, first_name, last_name, phone in CUSTOMERS:
        customer = Customer(
            email=email,
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name,
            phone=phone,
        )
        db.add(customer)
        customers.append(customer)

    categories = {}
    for name, slug in CATEGORIES:
        category = Category(name=name, slug=slug)
        db.add(category)
        categories[slug] = category

    supplier = Supplier(name=SUPPLIER_NAME)
    db.add(supplier)

    products = {}
    for sku, name, description, price, stock, category_slug in PRODUCTS:
        product = Product(
            sku=sku,
            name=name,
            description=description,
            price=price,
            stock_quantity=stock,
            supplier=supplier,
            categories=[categories[category_slug]],
        )
        db.add(product)
        products[sku] = product

    db.flush()
    logger.info(
        "Sample data loaded",
        customers=len(customers),
        categories=len(categories),
        products=len(products),
    )
    return {"customers": customers, "categories": categories, "supplier": supplier, "products": products}
