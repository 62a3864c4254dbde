"""
SQLAlchemy declarative base shared by all schema declarations.

Every table, constraint and index of the store schema hangs off `Base.metadata`;
`ecommerce_store.db.schema` issues it against a live engine and the Alembic
migration mirrors it.
"""

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

# Naming conventions keep constraint names identical across PostgreSQL, MySQL and
# SQLite so rejections can be traced back to the declaration that caused them.
NAMING_CONVENTION = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Declarative base for schema declarations."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)
