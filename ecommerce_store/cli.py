"""
Store schema command line.

Run: ecommerce-store create|drop|seed|ddl|order-summary [--database-url URL]
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Optional, Sequence

import structlog
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from ecommerce_store.core.config import get_settings
from ecommerce_store.core.logger import configure_logging
from ecommerce_store.db.errors import classify_integrity_error, is_constraint_rejection
from ecommerce_store.db.sample_data import load_sample_data
from ecommerce_store.db.schema import DIALECTS, create_schema, drop_schema, render_ddl
from ecommerce_store.db.session import build_engine
from ecommerce_store.db.views import fetch_order_summary

logger = structlog.get_logger()


def _cmd_create(args: argparse.Namespace) -> int:
    create_schema(build_engine(args.database_url))
    return 0


def _cmd_drop(args: argparse.Namespace) -> int:
    if not args.yes:
        print("Refusing to drop the schema without --yes", file=sys.stderr)
        return 2
    drop_schema(build_engine(args.database_url))
    return 0


def _cmd_seed(args: argparse.Namespace) -> int:
    engine = build_engine(args.database_url)
    with Session(engine) as db:
        try:
            load_sample_data(db)
            db.commit()
        except (IntegrityError, OperationalError) as exc:
            db.rollback()
            if not is_constraint_rejection(exc):
                raise
            raise classify_integrity_error(exc) from exc
    return 0


def _cmd_ddl(args: argparse.Namespace) -> int:
    for statement in render_ddl(args.dialect):
        print(f"{statement};\n")
    return 0


def _cmd_order_summary(args: argparse.Namespace) -> int:
    engine = build_engine(args.database_url)
    with engine.connect() as conn:
        row = fetch_order_summary(conn, args.order_id)
    if row is None:
        print(f"No summary for order {args.order_id}", file=sys.stderr)
        return 1
    print(json.dumps(row, default=str, indent=2 if args.pretty else None))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ecommerce-store", description="Manage the e-commerce store schema")
    parser.add_argument(
        "--database-url",
        default=None,
        help="SQLAlchemy URL; defaults to DATABASE_URL from the environment/.env",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("create", help="Create tables, indexes and views").set_defaults(func=_cmd_create)

    drop = sub.add_parser("drop", help="Drop views and tables")
    drop.add_argument("--yes", action="store_true", help="Confirm dropping every store table")
    drop.set_defaults(func=_cmd_drop)

    sub.add_parser("seed", help="Insert the sample customers, categories and products").set_defaults(
        func=_cmd_seed
    )

    ddl = sub.add_parser("ddl", help="Print the DDL script for a dialect")
    ddl.add_argument("--dialect", choices=sorted(DIALECTS), default="postgresql")
    ddl.set_defaults(func=_cmd_ddl)

    summary = sub.add_parser("order-summary", help="Print one row of vw_order_summary")
    summary.add_argument("--order-id", type=int, required=True)
    summary.add_argument("--pretty", action="store_true", help="Pretty-print JSON output")
    summary.set_defaults(func=_cmd_order_summary)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(get_settings().log_level)
    logger.debug("Running command", command=args.command)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
