from __future__ import annotations

import json
from dataclasses import replace

import pytest

import pipeline_crm.core.startup as startup_module
from pipeline_crm.core.exceptions import DatabaseError
from pipeline_crm.database.db import Database
from pipeline_crm.database.models import User


def test_bootstrap_prepares_schema_seed_and_admin(settings, tmp_path):
    seed_file = tmp_path / "seed-data.json"
    seed_file.write_text(
        json.dumps({"users": [{"id": 1, "email": settings.ADMIN_EMAIL, "password": "legacy", "name": "Boss"}]}),
        encoding="utf-8",
    )
    cfg = replace(settings, SEED_DATA_PATH=str(seed_file))

    database = startup_module.bootstrap(cfg, Database(cfg.DATABASE_URL))
    try:
        with database.session() as db:
            admin = db.query(User).filter(User.email == settings.ADMIN_EMAIL).one()
            assert admin.role == "admin"
    finally:
        database.close()


def test_bootstrap_is_repeatable(settings):
    startup_module.bootstrap(settings, Database(settings.DATABASE_URL)).close()
    database = startup_module.bootstrap(settings, Database(settings.DATABASE_URL))
    assert database.is_open
    database.close()


def test_startup_raises_when_database_unreachable(settings, monkeypatch):
    monkeypatch.setattr(Database, "verify_connection", lambda self: False)
    database = Database(settings.DATABASE_URL)

    with pytest.raises(DatabaseError, match="Database connectivity check failed"):
        startup_module.bootstrap(settings, database)
    assert not database.is_open
