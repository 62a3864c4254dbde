"""
Derived views over the store schema.

`vw_order_summary` joins orders to their line items and aggregates the computed
item total per order. It does not check the stored `total` against that figure;
comparing the two is left to whoever reads the view.

Views are plain DDL elements hooked onto `Base.metadata`, so `create_all` creates
them after the tables and `drop_all` drops them before the tables.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import DateTime, Integer, Numeric, Select, event, func, inspect, select
from sqlalchemy.engine import Connection
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.schema import DDLElement
from sqlalchemy.sql import column, table
from sqlalchemy.sql.expression import TableClause

from ecommerce_store.db.base import Base
from ecommerce_store.db.models import Order, OrderItem

ORDER_SUMMARY_VIEW = "vw_order_summary"


class CreateView(DDLElement):
    """CREATE VIEW <name> AS <select>."""

    def __init__(self, name: str, selectable: Select):
        self.name = name
        self.selectable = selectable


class DropView(DDLElement):
    """DROP VIEW IF EXISTS <name>."""

    def __init__(self, name: str):
        self.name = name


@compiles(CreateView)
def _compile_create_view(element, compiler, **kw):
    body = compiler.sql_compiler.process(element.selectable, literal_binds=True)
    return f"CREATE VIEW {element.name} AS {body}"


@compiles(DropView)
def _compile_drop_view(element, compiler, **kw):
    return f"DROP VIEW IF EXISTS {element.name}"


def order_summary_select() -> Select:
    """The SELECT behind vw_order_summary."""
    computed_items_total = func.sum(OrderItem.unit_price * OrderItem.quantity - OrderItem.discount)
    return (
        select(
            Order.order_id,
            Order.customer_id,
            Order.order_date,
            computed_items_total.label("computed_items_total"),
            Order.shipping_cost,
            Order.tax_amount,
            Order.total,
        )
        .join(OrderItem, Order.order_id == OrderItem.order_id)
        .group_by(
            Order.order_id,
            Order.customer_id,
            Order.order_date,
            Order.shipping_cost,
            Order.tax_amount,
            Order.total,
        )
    )


# Read-side handle on the view; not part of Base.metadata so create_all never
# tries to build it as a table.
order_summary: TableClause = table(
    ORDER_SUMMARY_VIEW,
    column("order_id", Integer),
    column("customer_id", Integer),
    column("order_date", DateTime),
    column("computed_items_total", Numeric(12, 2)),
    column("shipping_cost", Numeric(10, 2)),
    column("tax_amount", Numeric(10, 2)),
    column("total", Numeric(10, 2)),
)

VIEWS: dict[str, Select] = {ORDER_SUMMARY_VIEW: order_summary_select()}


# PUBLIC_INTERFACE
def fetch_order_summary(conn: Connection, order_id: int) -> Optional[dict]:
    """
    Read one row of vw_order_summary.

    Returns:
        dict | None: the view row as a mapping, or None when the order has no lines
        (the view inner-joins order_items) or does not exist.
    """
    row = conn.execute(select(order_summary).where(order_summary.c.order_id == order_id)).mappings().first()
    return dict(row) if row is not None else None


def _view_missing(ddl, target, bind, **kw) -> bool:
    return ddl.name not in inspect(bind).get_view_names()


for _name, _selectable in VIEWS.items():
    event.listen(Base.metadata, "after_create", CreateView(_name, _selectable).execute_if(callable_=_view_missing))
    event.listen(Base.metadata, "before_drop", DropView(_name))
