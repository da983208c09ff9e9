"""Application entrypoint."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from pipeline_crm.api.errors import register_exception_handlers
from pipeline_crm.api.router import get_api_router
from pipeline_crm.core.config import Config, get_config
from pipeline_crm.core.startup import bootstrap
from pipeline_crm.database.db import Database
from pipeline_crm.storage.object_store import ObjectStore, build_object_store


def create_app(
    config: Config | None = None,
    database: Database | None = None,
    object_store: ObjectStore | None = None,
) -> FastAPI:
    """Create the FastAPI application.

    The database handle and object store may be injected (tests); otherwise
    they are built from configuration when the application starts.
    """
    cfg = config or get_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app.state.database = bootstrap(cfg, app.state.database or Database(cfg.DATABASE_URL, echo=cfg.DEBUG))
        if app.state.object_store is None:
            app.state.object_store = build_object_store(cfg)
        try:
            yield
        finally:
            app.state.database.close()

    app = FastAPI(title=cfg.APP_NAME, version=cfg.APP_VERSION, lifespan=lifespan)
    app.state.config = cfg
    app.state.database = database
    app.state.object_store = object_store
    register_exception_handlers(app)
    app.include_router(get_api_router(cfg.API_PREFIX))

    @app.get("/")
    def root() -> dict:
        return {"service": cfg.APP_NAME, "version": cfg.APP_VERSION, "api_prefix": cfg.API_PREFIX}

    return app


# Expose ASGI app for `uvicorn pipeline_crm.main:app`.
app = create_app()


if __name__ == "__main__":
    settings = get_config()
    uvicorn.run("pipeline_crm.main:app", host=settings.API_HOST, port=settings.API_PORT)
