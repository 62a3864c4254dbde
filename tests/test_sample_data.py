from decimal import Decimal

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from ecommerce_store.db.models import Category, Customer, Product, ProductCategory, Supplier
from ecommerce_store.db.sample_data import load_sample_data


def test_loads_sample_rows(db):
    loaded = load_sample_data(db)
    db.commit()

    assert db.execute(select(func.count()).select_from(Customer)).scalar_one() == 2
    assert db.execute(select(func.count()).select_from(Category)).scalar_one() == 2
    assert db.execute(select(func.count()).select_from(Supplier)).scalar_one() == 1
    assert db.execute(select(func.count()).select_from(ProductCategory)).scalar_one() == 2

    assert sorted(c.email for c in loaded["customers"]) == ["alice@example.com", "bob@example.com"]
    assert all(c.customer_id is not None for c in loaded["customers"])


def test_products_link_supplier_and_categories(db):
    load_sample_data(db)
    db.commit()

    laptop = db.execute(select(Product).where(Product.sku == "SKU-001")).scalar_one()
    mouse = db.execute(select(Product).where(Product.sku == "SKU-002")).scalar_one()

    assert laptop.price == Decimal("1500.00")
    assert laptop.stock_quantity == 10
    assert laptop.active is True
    assert laptop.supplier.name == "Acme Supplies"
    assert [c.slug for c in laptop.categories] == ["electronics"]
    assert [c.slug for c in mouse.categories] == ["accessories"]


def test_loading_twice_hits_unique_constraints(db):
    load_sample_data(db)
    db.commit()

    with pytest.raises(IntegrityError):
        load_sample_data(db)
    db.rollback()
