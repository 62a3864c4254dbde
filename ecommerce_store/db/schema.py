"""
Schema lifecycle: create, drop and render the store schema in dependency order.

Tables are issued parents-before-children (`MetaData.sorted_tables`), indexes follow
their table, and views come last. Dropping walks the same order in reverse.
"""

from __future__ import annotations

from typing import Optional

import structlog
from sqlalchemy import Index, Table
from sqlalchemy.dialects import mysql, postgresql, sqlite
from sqlalchemy.engine import Dialect, Engine
from sqlalchemy.schema import CreateIndex, CreateTable

# Imported for their side effects: models populate Base.metadata and views hook
# their DDL onto it.
from ecommerce_store.db import models, views  # noqa: F401
from ecommerce_store.db.base import Base

logger = structlog.get_logger()

DIALECTS = {
    "postgresql": postgresql.dialect,
    "mysql": mysql.dialect,
    "sqlite": sqlite.dialect,
}


def sorted_tables() -> list[Table]:
    return list(Base.metadata.sorted_tables)


# PUBLIC_INTERFACE
def table_creation_order() -> list[str]:
    """Table names in the order they must be created (parents before children)."""
    return [t.name for t in sorted_tables()]


# PUBLIC_INTERFACE
def foreign_key_policies() -> dict[str, list[dict[str, Optional[str]]]]:
    """
    Every foreign key per table with its on-delete/on-update policy.

    Returns:
        dict: table name -> list of {column, references, on_delete, on_update}.
    """
    policies: dict[str, list[dict[str, Optional[str]]]] = {}
    for tbl in sorted_tables():
        entries = []
        for fk in sorted(tbl.foreign_keys, key=lambda fk: fk.parent.name):
            entries.append(
                {
                    "column": fk.parent.name,
                    "references": fk.target_fullname,
                    "on_delete": fk.ondelete,
                    "on_update": fk.onupdate,
                }
            )
        policies[tbl.name] = entries
    return policies


# PUBLIC_INTERFACE
def create_schema(engine: Engine) -> None:
    """Create all tables, indexes and views that do not exist yet."""
    logger.info("Creating store schema", backend=engine.dialect.name, tables=len(Base.metadata.tables))
    Base.metadata.create_all(engine)
    logger.info("Store schema created", views=list(views.VIEWS))


# PUBLIC_INTERFACE
def drop_schema(engine: Engine) -> None:
    """Drop views, then tables children-first."""
    logger.info("Dropping store schema", backend=engine.dialect.name)
    Base.metadata.drop_all(engine)


def _index_applies(index: Index, dialect: Dialect) -> bool:
    # Mirrors the ddl_if(dialect="mysql") guard create_all applies to FULLTEXT indexes.
    return dialect.name == "mysql" or index.dialect_options["mysql"]["prefix"] != "FULLTEXT"


def _resolve_dialect(dialect_name: str) -> Dialect:
    try:
        return DIALECTS[dialect_name]()
    except KeyError:
        raise ValueError(
            f"Unsupported dialect {dialect_name!r}; expected one of {', '.join(sorted(DIALECTS))}"
        ) from None


# PUBLIC_INTERFACE
def render_ddl(dialect_name: str = "postgresql") -> list[str]:
    """
    Render the full DDL script for a dialect without connecting to a database.

    Returns:
        list[str]: one statement per entry, in execution order.
    """
    dialect = _resolve_dialect(dialect_name)
    statements = []
    for tbl in sorted_tables():
        statements.append(str(CreateTable(tbl).compile(dialect=dialect)).strip())
        indexes = [ix for ix in tbl.indexes if _index_applies(ix, dialect)]
        for index in sorted(indexes, key=lambda ix: str(ix.name or "")):
            statements.append(str(CreateIndex(index).compile(dialect=dialect)).strip())
    for name, selectable in views.VIEWS.items():
        statements.append(str(views.CreateView(name, selectable).compile(dialect=dialect)).strip())
    return statements
