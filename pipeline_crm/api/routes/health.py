"""Health endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from pipeline_crm.api.dependencies import get_database, get_settings
from pipeline_crm.core.config import Config
from pipeline_crm.database.db import Database

router = APIRouter(tags=["health"])


@router.get("/health")
def health(
    settings: Config = Depends(get_settings),
    database: Database = Depends(get_database),
) -> dict:
    database_ok = database.is_open and database.verify_connection()
    return {
        "status": "ok" if database_ok else "degraded",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "database": database_ok,
    }
