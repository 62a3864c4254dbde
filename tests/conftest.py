"""
Test Configuration — Fixtures for a throwaway SQLite store schema.

Each test gets its own database file with foreign keys enforced, so cascade,
restrict and set-null policies behave as they would on PostgreSQL or MySQL.
"""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker

from ecommerce_store.api.main import app
from ecommerce_store.db.models import Customer, Order, OrderItem, Product
from ecommerce_store.db.schema import create_schema
from ecommerce_store.db.session import build_engine, get_db


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite:///{tmp_path / 'store.db'}"


@pytest.fixture
def engine(database_url):
    """Engine with the full schema (tables, indexes, views) created."""
    engine = build_engine(database_url, echo=False)
    create_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    with Session(engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture
def client(engine):
    """API client whose get_db dependency is bound to the test engine."""
    TestSession = sessionmaker(bind=engine, expire_on_commit=False)

    def override_get_db():
        session = TestSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def make_customer(db: Session, email: str = "alice@example.com") -> Customer:
    customer = Customer(email=email, password_hash="hash_xxx", first_name="Alice", last_name="Brown")
    db.add(customer)
    db.flush()
    return customer


def make_product(db: Session, sku: str = "SKU-001", price: str = "10.00") -> Product:
    product = Product(sku=sku, name=f"Product {sku}", price=Decimal(price), stock_quantity=5)
    db.add(product)
    db.flush()
    return product


def make_order(db: Session, customer: Customer, **kw) -> Order:
    order = Order(customer_id=customer.customer_id, **kw)
    db.add(order)
    db.flush()
    return order


@pytest.fixture
def seeded_db(db):
    """One customer, two products and an order holding one line of the first product."""
    customer = make_customer(db)
    laptop = make_product(db, "SKU-001", "10.00")
    mouse = make_product(db, "SKU-002", "5.00")
    order = make_order(db, customer)
    db.add(OrderItem(order_id=order.order_id, product_id=laptop.product_id, quantity=1, unit_price=Decimal("10.00")))
    db.commit()
    return {"db": db, "customer": customer, "laptop": laptop, "mouse": mouse, "order": order}
