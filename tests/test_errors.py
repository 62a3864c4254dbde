from decimal import Decimal
from types import SimpleNamespace

import pytest
from sqlalchemy import delete, insert
from sqlalchemy.exc import IntegrityError, OperationalError

from conftest import make_customer
from ecommerce_store.db.errors import (
    CheckViolation,
    ConstraintViolation,
    ForeignKeyViolation,
    NotNullViolation,
    UniqueViolation,
    classify_integrity_error,
    is_constraint_rejection,
)
from ecommerce_store.db.models import Customer, OrderItem, ProductReview


def _rejected(db, statement) -> IntegrityError:
    with pytest.raises(IntegrityError) as excinfo:
        db.execute(statement)
    db.rollback()
    return excinfo.value


class TestSQLiteRejections:
    def test_duplicate_email_is_unique_violation(self, db):
        make_customer(db, "alice@example.com")
        db.commit()
        exc = _rejected(
            db,
            insert(Customer).values(email="alice@example.com", password_hash="h", first_name="A", last_name="B"),
        )

        violation = classify_integrity_error(exc)

        assert isinstance(violation, UniqueViolation)
        assert violation.kind == "unique"
        assert violation.constraint == "customers.email"

    def test_zero_quantity_is_check_violation(self, seeded_db):
        db = seeded_db["db"]
        exc = _rejected(
            db,
            insert(OrderItem).values(
                order_id=seeded_db["order"].order_id,
                product_id=seeded_db["mouse"].product_id,
                quantity=0,
                unit_price=Decimal("1.00"),
            ),
        )
        assert isinstance(classify_integrity_error(exc), CheckViolation)

    def test_missing_email_is_not_null_violation(self, db):
        exc = _rejected(db, insert(Customer).values(password_hash="h", first_name="A", last_name="B"))

        violation = classify_integrity_error(exc)

        assert isinstance(violation, NotNullViolation)
        assert violation.constraint == "customers.email"

    def test_restricted_delete_is_foreign_key_violation(self, seeded_db):
        db = seeded_db["db"]
        exc = _rejected(db, delete(Customer).where(Customer.customer_id == seeded_db["customer"].customer_id))
        assert isinstance(classify_integrity_error(exc), ForeignKeyViolation)

    def test_missing_parent_is_foreign_key_violation(self, db):
        exc = _rejected(db, insert(ProductReview).values(product_id=404, rating=3))
        assert isinstance(classify_integrity_error(exc), ForeignKeyViolation)


class _PgError(Exception):
    def __init__(self, message, pgcode, constraint_name=None):
        super().__init__(message)
        self.pgcode = pgcode
        self.diag = SimpleNamespace(constraint_name=constraint_name)


class _MySQLError(Exception):
    """Shaped like pymysql.err.MySQLError: args are (errno, message)."""


class TestDriverCodes:
    @pytest.mark.parametrize(
        "pgcode,expected",
        [
            ("23505", UniqueViolation),
            ("23514", CheckViolation),
            ("23502", NotNullViolation),
            ("23503", ForeignKeyViolation),
            ("23001", ForeignKeyViolation),
        ],
    )
    def test_postgres_sqlstate(self, pgcode, expected):
        orig = _PgError("rejected", pgcode, constraint_name="uq_customers_email")
        violation = classify_integrity_error(IntegrityError("INSERT ...", {}, orig))
        assert type(violation) is expected
        assert violation.constraint == "uq_customers_email"

    @pytest.mark.parametrize(
        "errno,expected",
        [
            (1062, UniqueViolation),
            (1048, NotNullViolation),
            (1451, ForeignKeyViolation),
            (1452, ForeignKeyViolation),
        ],
    )
    def test_mysql_integrity_errno(self, errno, expected):
        orig = _MySQLError(errno, "rejected")
        violation = classify_integrity_error(IntegrityError("INSERT ...", {}, orig))
        assert type(violation) is expected

    @pytest.mark.parametrize(
        "errno,expected",
        [
            (3819, CheckViolation),
            (1364, NotNullViolation),
        ],
    )
    def test_mysql_operational_errno(self, errno, expected):
        # PyMySQL raises CHECK and missing-default failures as OperationalError.
        exc = OperationalError("INSERT ...", {}, _MySQLError(errno, "rejected"))
        assert is_constraint_rejection(exc)
        assert type(classify_integrity_error(exc)) is expected

    def test_unrelated_operational_error_is_not_a_rejection(self):
        exc = OperationalError("SELECT 1", {}, _MySQLError(2013, "Lost connection to MySQL server"))
        assert not is_constraint_rejection(exc)

    def test_integrity_error_is_always_a_rejection(self):
        assert is_constraint_rejection(IntegrityError("INSERT ...", {}, Exception("something odd")))

    def test_unknown_error_falls_back_to_base(self):
        violation = classify_integrity_error(IntegrityError("INSERT ...", {}, Exception("something odd")))
        assert type(violation) is ConstraintViolation
        assert violation.constraint is None
        assert violation.message == "something odd"
