"""Startup validation and bootstrap helpers."""

from __future__ import annotations

import logging

from pipeline_crm.core.config import Config, get_config
from pipeline_crm.core.exceptions import DatabaseError
from pipeline_crm.core.logging_config import configure_logging
from pipeline_crm.database.db import Database
from pipeline_crm.database.schema import SchemaReport, ensure_schema
from pipeline_crm.database.seed import load_seed_if_empty
from pipeline_crm.services.user_service import UserService

logger = logging.getLogger(__name__)


def validate_startup_config(config: Config, database: Database) -> None:
    """Fail-fast connectivity check."""
    if not database.verify_connection():
        raise DatabaseError("Database connectivity check failed.")

    if config.is_production and database.dialect_name == "sqlite":
        logger.warning(
            "startup.production.sqlite_detected",
            extra={"event": "startup.production.sqlite_detected"},
        )

    logger.info(
        "startup.config.validated",
        extra={
            "event": "startup.config.validated",
            "env": config.ENV,
            "database_url_scheme": config.DATABASE_URL.split("://", 1)[0],
            "object_store_backend": config.OBJECT_STORE_BACKEND,
        },
    )


def prepare_database(config: Config, database: Database) -> SchemaReport:
    """Bootstrap the schema, then the admin role and optional seed data."""
    report = ensure_schema(database.engine)
    with database.session() as db:
        if config.SEED_DATA_PATH:
            load_seed_if_empty(db, config.SEED_DATA_PATH)
        UserService(db, admin_email=config.ADMIN_EMAIL).ensure_admin_role()
    return report


def bootstrap(config: Config | None = None, database: Database | None = None) -> Database:
    """Initialize logging, open the store and prepare it for serving."""
    config = config or get_config()
    configure_logging(config)
    database = database or Database(config.DATABASE_URL, echo=config.DEBUG)
    database.open()
    try:
        validate_startup_config(config, database)
        prepare_database(config, database)
    except Exception:
        database.close()
        raise
    logger.info("startup.completed", extra={"event": "startup.completed"})
    return database
