"""Idempotent, additive schema bootstrap run once before serving.

Tables missing from the database are created with their full column set.
Columns that exist on the models but not in an existing table are added.
Nothing is ever dropped or renamed, so running this against a fully migrated
database is a no-op and running it against a partially migrated one only
applies the missing pieces.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from sqlalchemy import Column, Table, inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql.elements import ClauseElement

from pipeline_crm.core.exceptions import DatabaseError
from pipeline_crm.database.models import Base

logger = logging.getLogger(__name__)

# Startup aborts when one of these cannot be created.
FOUNDATIONAL_TABLES = frozenset(
    {"users", "prospects", "interlocuteurs", "next_actions", "status_history"}
)


@dataclass
class SchemaReport:
    created_tables: list[str] = field(default_factory=list)
    added_columns: list[str] = field(default_factory=list)
    failed_tables: list[str] = field(default_factory=list)
    failed_columns: list[str] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.created_tables or self.added_columns)


def _default_sql(engine: Engine, column: Column) -> str | None:
    server_default = column.server_default
    if server_default is None:
        return None
    arg = getattr(server_default, "arg", None)
    if isinstance(arg, ClauseElement):
        return str(arg.compile(dialect=engine.dialect))
    if isinstance(arg, str):
        escaped = arg.replace("'", "''")
        return f"'{escaped}'"
    return None


def _add_column_ddl(engine: Engine, table: Table, column: Column) -> str:
    preparer = engine.dialect.identifier_preparer
    column_type = column.type.compile(dialect=engine.dialect)
    parts = [f"{preparer.quote(column.name)} {column_type}"]

    default_sql = _default_sql(engine, column)
    if default_sql is not None:
        parts.append(f"DEFAULT {default_sql}")
        # Existing rows get the default, so NOT NULL is safe to declare.
        if not column.nullable:
            parts.append("NOT NULL")

    add_clause = "ADD COLUMN IF NOT EXISTS" if engine.dialect.name == "postgresql" else "ADD COLUMN"
    return f"ALTER TABLE {preparer.format_table(table)} {add_clause} {' '.join(parts)}"


def _ensure_tables(engine: Engine, report: SchemaReport) -> None:
    existing = set(inspect(engine).get_table_names())
    for table in Base.metadata.sorted_tables:
        if table.name in existing:
            continue
        try:
            table.create(bind=engine, checkfirst=True)
        except SQLAlchemyError as exc:
            if table.name in FOUNDATIONAL_TABLES:
                logger.exception(
                    "schema.table.create_failed",
                    extra={"event": "schema.table.create_failed", "table": table.name},
                )
                raise DatabaseError(f"Could not create table '{table.name}'.") from exc
            logger.warning(
                "schema.table.create_skipped: %s",
                exc,
                extra={"event": "schema.table.create_skipped", "table": table.name},
            )
            report.failed_tables.append(table.name)
            continue
        report.created_tables.append(table.name)
        logger.info("schema.table.created", extra={"event": "schema.table.created", "table": table.name})


def _ensure_columns(engine: Engine, report: SchemaReport) -> None:
    inspector = inspect(engine)
    existing_tables = set(inspector.get_table_names())
    for table in Base.metadata.sorted_tables:
        if table.name not in existing_tables or table.name in report.created_tables:
            continue
        present = {col["name"] for col in inspector.get_columns(table.name)}
        for column in table.columns:
            if column.name in present:
                continue
            ddl = _add_column_ddl(engine, table, column)
            try:
                with engine.begin() as conn:
                    conn.execute(text(ddl))
            except SQLAlchemyError as exc:
                logger.warning(
                    "schema.column.add_failed: %s",
                    exc,
                    extra={"event": "schema.column.add_failed", "table": table.name, "column": column.name},
                )
                report.failed_columns.append(f"{table.name}.{column.name}")
                continue
            report.added_columns.append(f"{table.name}.{column.name}")
            logger.info(
                "schema.column.added",
                extra={"event": "schema.column.added", "table": table.name, "column": column.name},
            )


def ensure_schema(engine: Engine) -> SchemaReport:
    """Bring the database up to the current model definitions, additively."""
    report = SchemaReport()
    _ensure_tables(engine, report)
    _ensure_columns(engine, report)
    logger.info(
        "schema.ensured",
        extra={
            "event": "schema.ensured",
            "count": len(report.created_tables) + len(report.added_columns),
        },
    )
    return report
