"""Database connection and session management."""

from __future__ import annotations

import logging
from collections.abc import Generator
from contextlib import contextmanager

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _build_engine(database_url: str, echo: bool = False) -> Engine:
    if database_url.startswith("sqlite"):
        engine = create_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
        )
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine
    return create_engine(
        database_url,
        echo=echo,
        pool_pre_ping=True,
        pool_recycle=3600,
        pool_size=10,
        max_overflow=20,
    )


class Database:
    """Explicit store handle owning the engine and session factory.

    The process entry point calls ``open()`` before serving and ``close()``
    on shutdown; components receive the handle instead of importing globals.
    """

    def __init__(self, database_url: str, echo: bool = False) -> None:
        self.database_url = database_url
        self.echo = echo
        self._engine: Engine | None = None
        self._sessionmaker: sessionmaker | None = None

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError("Database is not open.")
        return self._engine

    @property
    def dialect_name(self) -> str:
        return self.engine.dialect.name

    def open(self) -> "Database":
        if self._engine is None:
            self._engine = _build_engine(self.database_url, echo=self.echo)
            self._sessionmaker = sessionmaker(
                autocommit=False,
                autoflush=False,
                expire_on_commit=False,
                bind=self._engine,
            )
            logger.info(
                "database.opened",
                extra={"event": "database.opened", "database_url_scheme": self.database_url.split("://", 1)[0]},
            )
        return self

    def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._sessionmaker = None
            logger.info("database.closed", extra={"event": "database.closed"})

    def new_session(self) -> Session:
        if self._sessionmaker is None:
            raise RuntimeError("Database is not open.")
        return self._sessionmaker()

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """Context-manager wrapper for safe DB session lifecycle."""
        db = self.new_session()
        try:
            yield db
        finally:
            db.close()

    def verify_connection(self) -> bool:
        """Verify DB connectivity."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except Exception as exc:
            logger.error(
                "database.connection_failed: %s",
                exc,
                extra={"event": "database.connection_failed"},
            )
            return False
