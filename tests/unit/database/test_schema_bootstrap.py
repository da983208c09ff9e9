from __future__ import annotations

import pytest
from sqlalchemy import inspect, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.schema import Table

from pipeline_crm.core.exceptions import DatabaseError
from pipeline_crm.database import schema as schema_module
from pipeline_crm.database.models import Base
from pipeline_crm.database.schema import ensure_schema


def _columns(engine, table_name):
    return {col["name"] for col in inspect(engine).get_columns(table_name)}


def test_fresh_database_gets_every_table(database):
    report = ensure_schema(database.engine)
    tables = set(inspect(database.engine).get_table_names())
    assert {table.name for table in Base.metadata.sorted_tables} <= tables
    assert "interlocuteurs" in report.created_tables
    assert report.added_columns == []


def test_second_run_is_a_no_op(database):
    ensure_schema(database.engine)
    report = ensure_schema(database.engine)
    assert not report.changed
    assert report.failed_columns == []


def test_legacy_tables_get_missing_columns_and_keep_rows(database):
    with database.engine.begin() as conn:
        conn.execute(
            text(
                "CREATE TABLE users (id INTEGER PRIMARY KEY, email VARCHAR(320) UNIQUE NOT NULL, "
                "password VARCHAR(255) NOT NULL, name VARCHAR(255) NOT NULL)"
            )
        )
        conn.execute(
            text(
                "CREATE TABLE prospects (id INTEGER PRIMARY KEY, name VARCHAR(255) NOT NULL, "
                "status VARCHAR(80), setup_amount NUMERIC(12, 2), user_id INTEGER)"
            )
        )
        conn.execute(text("INSERT INTO users (id, email, password, name) VALUES (1, 'old@example.com', 'x', 'Old')"))
        conn.execute(text("INSERT INTO prospects (id, name, status, user_id) VALUES (1, 'Legacy Co', 'Prospection', 1)"))

    report = ensure_schema(database.engine)

    assert "users.role" in report.added_columns
    assert "users.temp_password" in report.added_columns
    assert "prospects.status_date" in report.added_columns
    assert "prospects.annual_amount" in report.added_columns
    assert "prospects.pdf_key" in report.added_columns
    assert {"role", "temp_password"} <= _columns(database.engine, "users")

    with database.engine.connect() as conn:
        role = conn.execute(text("SELECT role FROM users WHERE id = 1")).scalar_one()
        name = conn.execute(text("SELECT name FROM prospects WHERE id = 1")).scalar_one()
        annual = conn.execute(text("SELECT annual_amount FROM prospects WHERE id = 1")).scalar_one()
    assert role == "user"
    assert name == "Legacy Co"
    assert float(annual) == 0

    assert not ensure_schema(database.engine).changed


def test_failed_optional_column_is_tolerated(database, monkeypatch):
    ensure_schema(database.engine)
    with database.engine.begin() as conn:
        conn.execute(text("ALTER TABLE next_actions RENAME TO next_actions_old"))
        conn.execute(
            text(
                "CREATE TABLE next_actions (id INTEGER PRIMARY KEY, prospect_id INTEGER, "
                "action_type VARCHAR(120), planned_date DATE, actor VARCHAR(255), completed BOOLEAN, "
                "completed_date DATE, user_id INTEGER, created_at DATETIME)"
            )
        )

    original = schema_module._add_column_ddl

    def _broken_ddl(engine, table, column):
        if column.name == "completed_note":
            return "ALTER TABLE next_actions ADD COLUMN completed_note NOT A TYPE ((("
        return original(engine, table, column)

    monkeypatch.setattr(schema_module, "_add_column_ddl", _broken_ddl)
    report = ensure_schema(database.engine)
    assert report.failed_columns == ["next_actions.completed_note"]


def test_foundational_table_failure_aborts(database, monkeypatch):
    def _fail_create(self, bind=None, checkfirst=False):
        raise OperationalError("CREATE TABLE", {}, Exception("disk full"))

    monkeypatch.setattr(Table, "create", _fail_create)
    with pytest.raises(DatabaseError):
        ensure_schema(database.engine)
