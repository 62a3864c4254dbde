from decimal import Decimal

import pytest
from sqlalchemy.exc import ArgumentError

from ecommerce_store.api import main
from ecommerce_store.db import session
from ecommerce_store.db.models import OrderItem
from ecommerce_store.db.session import db_healthcheck


def test_health(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.json() == {"message": "Healthy"}


def test_db_health_ok(client, engine, monkeypatch):
    monkeypatch.setattr(main, "db_healthcheck", lambda: db_healthcheck(engine))
    resp = client.get("/health/db")
    assert resp.status_code == 200
    assert resp.json() == {"database": "ok", "ok": True}


def test_db_health_unreachable(client, monkeypatch):
    monkeypatch.setattr(main, "db_healthcheck", lambda: False)
    resp = client.get("/health/db")
    assert resp.json() == {"database": "unreachable", "ok": False}


def test_schema_tables_lists_policies(client):
    resp = client.get("/schema/tables")
    assert resp.status_code == 200

    tables = {t["name"]: t["foreign_keys"] for t in resp.json()["tables"]}
    assert len(tables) == 13
    order_fks = {fk["column"]: fk["on_delete"] for fk in tables["orders"]}
    assert order_fks == {
        "billing_address_id": "SET NULL",
        "customer_id": "RESTRICT",
        "shipping_address_id": "SET NULL",
    }

    names = [t["name"] for t in resp.json()["tables"]]
    assert names.index("orders") < names.index("order_items")


def test_order_summary(client, seeded_db):
    db = seeded_db["db"]
    order = seeded_db["order"]
    db.add(
        OrderItem(
            order_id=order.order_id,
            product_id=seeded_db["mouse"].product_id,
            quantity=1,
            unit_price=Decimal("5.00"),
            discount=Decimal("1.00"),
        )
    )
    db.commit()

    resp = client.get(f"/orders/{order.order_id}/summary")

    assert resp.status_code == 200
    body = resp.json()
    assert body["order_id"] == order.order_id
    # 10.00 * 1 + (5.00 * 1 - 1.00)
    assert body["computed_items_total"] == 14.0
    assert body["total"] == 0.0


def test_order_summary_not_found(client):
    resp = client.get("/orders/999/summary")
    assert resp.status_code == 404


@pytest.mark.parametrize(
    "error",
    [
        ImportError("No module named 'psycopg2'"),
        ArgumentError("Could not parse SQLAlchemy URL from string 'nonsense'"),
    ],
)
def test_db_health_unusable_url(client, monkeypatch, error):
    def broken_engine():
        raise error

    monkeypatch.setattr(session, "get_engine", broken_engine)
    resp = client.get("/health/db")
    assert resp.status_code == 200
    assert resp.json() == {"database": "unreachable", "ok": False}
