"""
Typed constraint rejections.

Every write the schema refuses surfaces from SQLAlchemy as a `DBAPIError` whose
shape depends on the driver. Most drivers raise `IntegrityError`; MySQL drivers
report CHECK failures (errno 3819) and missing defaults (errno 1364) as
`OperationalError`. `classify_integrity_error` maps either onto one of the
`ConstraintViolation` subclasses below:

- PostgreSQL: SQLSTATE class 23 codes (`pgcode` on psycopg2, `sqlstate` on psycopg 3)
- MySQL: server errno (`args[0]` on the DBAPI exception)
- SQLite: the message prefix (`UNIQUE constraint failed: ...`)
"""

from __future__ import annotations

from typing import Optional

import structlog
from sqlalchemy.exc import DBAPIError, IntegrityError

logger = structlog.get_logger()


class ConstraintViolation(Exception):
    """A write rejected by a schema constraint."""

    kind = "constraint"

    def __init__(self, message: str, constraint: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.constraint = constraint


class UniqueViolation(ConstraintViolation):
    """Duplicate value for a unique column or composite key."""

    kind = "unique"


class CheckViolation(ConstraintViolation):
    """Value outside a CHECK range or enumeration."""

    kind = "check"


class NotNullViolation(ConstraintViolation):
    """Missing value for a NOT NULL column."""

    kind = "not_null"


class ForeignKeyViolation(ConstraintViolation):
    """Missing parent row, or a delete blocked by a RESTRICT reference."""

    kind = "foreign_key"


_PG_SQLSTATE = {
    "23505": UniqueViolation,
    "23514": CheckViolation,
    "23502": NotNullViolation,
    "23503": ForeignKeyViolation,
    "23001": ForeignKeyViolation,  # restrict_violation
}

_MYSQL_ERRNO = {
    1062: UniqueViolation,
    1586: UniqueViolation,
    3819: CheckViolation,
    1048: NotNullViolation,
    1364: NotNullViolation,
    1216: ForeignKeyViolation,
    1217: ForeignKeyViolation,
    1451: ForeignKeyViolation,
    1452: ForeignKeyViolation,
}

_SQLITE_PREFIXES = (
    ("UNIQUE constraint failed", UniqueViolation),
    ("CHECK constraint failed", CheckViolation),
    ("NOT NULL constraint failed", NotNullViolation),
    ("FOREIGN KEY constraint failed", ForeignKeyViolation),
)


def _classify(orig: BaseException) -> tuple[type[ConstraintViolation], Optional[str]]:
    sqlstate = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if sqlstate in _PG_SQLSTATE:
        diag = getattr(orig, "diag", None)
        return _PG_SQLSTATE[sqlstate], getattr(diag, "constraint_name", None)

    errno = _mysql_errno(orig)
    if errno in _MYSQL_ERRNO:
        return _MYSQL_ERRNO[errno], None

    message = str(orig)
    for prefix, violation in _SQLITE_PREFIXES:
        if message.startswith(prefix):
            detail = message[len(prefix) :].lstrip(": ").strip()
            return violation, detail or None

    return ConstraintViolation, None


def _mysql_errno(orig: BaseException) -> Optional[int]:
    args = getattr(orig, "args", ())
    return args[0] if args and isinstance(args[0], int) else None


# PUBLIC_INTERFACE
def is_constraint_rejection(exc: DBAPIError) -> bool:
    """True for an IntegrityError, or a MySQL OperationalError carrying a constraint errno."""
    return isinstance(exc, IntegrityError) or _mysql_errno(exc.orig) in _MYSQL_ERRNO


# PUBLIC_INTERFACE
def classify_integrity_error(exc: DBAPIError) -> ConstraintViolation:
    """
    Translate a rejected write into a typed ConstraintViolation.

    Accepts any `DBAPIError` so MySQL's OperationalError rejections are covered;
    check `is_constraint_rejection` first for errors that may be unrelated.
    The returned exception is not raised; callers typically `raise ... from exc`.
    """
    violation_cls, constraint = _classify(exc.orig)
    violation = violation_cls(str(exc.orig), constraint=constraint)
    logger.info("Write rejected by constraint", kind=violation.kind, constraint=constraint)
    return violation
