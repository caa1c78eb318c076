from __future__ import annotations

import logging

from sqlalchemy import inspect
from sqlalchemy.engine import Engine

from tablepos.core.config import DATABASE_URL, IS_PROD

logger = logging.getLogger(__name__)
STARTUP_PREFIX = "[STARTUP]"

REQUIRED_TABLES = {"dishes", "dining_tables", "orders", "order_items", "system_config"}


def validate_database_environment() -> None:
    if IS_PROD and DATABASE_URL.startswith("sqlite"):
        logger.critical("%s SQLite is forbidden in production", STARTUP_PREFIX)
        raise RuntimeError("SQLite is forbidden in production environment")


def ensure_schema_present(*, engine: Engine) -> None:
    inspector = inspect(engine)
    missing = [table for table in REQUIRED_TABLES if not inspector.has_table(table)]
    if missing:
        logger.critical("%s tables missing=%s", STARTUP_PREFIX, ",".join(sorted(missing)))
        raise RuntimeError("Database schema is incomplete")
    logger.info("%s schema verified", STARTUP_PREFIX)
