from decimal import Decimal

from sqlalchemy import inspect, select

from conftest import make_customer, make_order, make_product
from ecommerce_store.db.models import OrderItem
from ecommerce_store.db.views import ORDER_SUMMARY_VIEW, fetch_order_summary, order_summary


def _order_with_two_lines(db, total="30.00"):
    customer = make_customer(db)
    laptop = make_product(db, "SKU-001", "12.00")
    mouse = make_product(db, "SKU-002", "6.00")
    order = make_order(
        db,
        customer,
        shipping_cost=Decimal("4.00"),
        tax_amount=Decimal("2.00"),
        total=Decimal(total),
    )
    db.add_all(
        [
            OrderItem(
                order_id=order.order_id,
                product_id=laptop.product_id,
                quantity=2,
                unit_price=Decimal("10.00"),
                discount=Decimal("0.00"),
            ),
            OrderItem(
                order_id=order.order_id,
                product_id=mouse.product_id,
                quantity=1,
                unit_price=Decimal("5.00"),
                discount=Decimal("1.00"),
            ),
        ]
    )
    db.commit()
    return order


def test_view_is_created_with_schema(engine):
    assert ORDER_SUMMARY_VIEW in inspect(engine).get_view_names()


def test_computed_items_total(db):
    order = _order_with_two_lines(db)

    row = fetch_order_summary(db.connection(), order.order_id)

    assert row is not None
    # 10.00 * 2 + (5.00 * 1 - 1.00)
    assert row["computed_items_total"] == Decimal("24.00")
    assert row["customer_id"] == order.customer_id
    assert row["shipping_cost"] == Decimal("4.00")
    assert row["tax_amount"] == Decimal("2.00")


def test_stored_total_is_reported_not_reconciled(db):
    order = _order_with_two_lines(db, total="99.99")

    row = fetch_order_summary(db.connection(), order.order_id)

    assert row["total"] == Decimal("99.99")
    assert row["computed_items_total"] == Decimal("24.00")


def test_order_without_lines_is_absent(db):
    customer = make_customer(db)
    order = make_order(db, customer)
    db.commit()

    assert fetch_order_summary(db.connection(), order.order_id) is None


def test_one_row_per_order(db):
    first = _order_with_two_lines(db)
    product = make_product(db, "SKU-003", "1.00")
    second = make_order(db, first.customer)
    db.add(OrderItem(order_id=second.order_id, product_id=product.product_id, quantity=3, unit_price=Decimal("1.50")))
    db.commit()

    rows = db.execute(select(order_summary).order_by(order_summary.c.order_id)).mappings().all()

    assert [r["order_id"] for r in rows] == [first.order_id, second.order_id]
    assert rows[1]["computed_items_total"] == Decimal("4.50")
