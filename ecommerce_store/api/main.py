from contextlib import asynccontextmanager

import structlog
from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session

from ecommerce_store.core.config import get_settings
from ecommerce_store.core.logger import configure_logging
from ecommerce_store.db.schema import foreign_key_policies, table_creation_order
from ecommerce_store.db.session import db_healthcheck, get_db
from ecommerce_store.db.views import fetch_order_summary

settings = get_settings()
configure_logging(settings.log_level)
logger = structlog.get_logger()

openapi_tags = [
    {"name": "Health", "description": "Service and dependency health checks."},
    {"name": "Schema", "description": "Declared tables and their foreign-key policies."},
    {"name": "Orders", "description": "Read-only order summaries from vw_order_summary."},
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    logger.info("Store API starting up", version=settings.app_version, env=settings.app_env)
    yield
    logger.info("Store API shutting down")


app = FastAPI(
    title=settings.app_name,
    description="Schema, health and order-summary endpoints for the e-commerce store database.",
    version=settings.app_version,
    openapi_tags=openapi_tags,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/", tags=["Health"], summary="Service health check")
def health_check():
    """Basic health check for the backend service (no external dependencies)."""
    return {"message": "Healthy"}


@app.get("/health/db", tags=["Health"], summary="Database health check")
def health_db_check():
    """
    Check database connectivity.

    Returns a JSON payload indicating whether the database is reachable.
    """
    ok = db_healthcheck()
    return {"database": "ok" if ok else "unreachable", "ok": ok}


@app.get("/schema/tables", tags=["Schema"], summary="Tables in creation order")
def schema_tables():
    """List tables parents-first, each with its foreign keys and on-delete policies."""
    policies = foreign_key_policies()
    return {
        "tables": [{"name": name, "foreign_keys": policies[name]} for name in table_creation_order()],
    }


@app.get("/orders/{order_id}/summary", tags=["Orders"], summary="Computed order totals")
def order_summary(order_id: int, db: Session = Depends(get_db)):
    """
    Return the vw_order_summary row for an order.

    `computed_items_total` is derived from the order lines; `total` is what the order
    stores. The two are returned side by side and not reconciled.
    """
    row = fetch_order_summary(db.connection(), order_id)
    if row is None:
        raise HTTPException(status_code=404, detail=f"No summary for order {order_id}")
    return row
