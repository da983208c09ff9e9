from __future__ import annotations

from dataclasses import replace

import pytest
from fastapi.testclient import TestClient

from pipeline_crm.core.config import get_config
from pipeline_crm.database.db import Database
from pipeline_crm.database.schema import ensure_schema
from pipeline_crm.main import create_app
from pipeline_crm.storage.object_store import LocalObjectStore

ADMIN_EMAIL = "admin@example.com"


@pytest.fixture
def settings(tmp_path):
    return replace(
        get_config(),
        DATABASE_URL=f"sqlite:///{tmp_path / 'pipeline_test.db'}",
        JWT_SECRET="test-secret",
        ADMIN_EMAIL=ADMIN_EMAIL,
        OBJECT_STORE_BACKEND="local",
        LOCAL_STORAGE_PATH=str(tmp_path / "uploads"),
        MAX_UPLOAD_BYTES=1024 * 1024,
        SEED_DATA_PATH="",
    )


@pytest.fixture
def database(settings):
    db = Database(settings.DATABASE_URL).open()
    yield db
    db.close()


@pytest.fixture
def session(database):
    ensure_schema(database.engine)
    db = database.new_session()
    yield db
    db.close()


@pytest.fixture
def object_store(tmp_path):
    return LocalObjectStore(tmp_path / "uploads")


@pytest.fixture
def client(settings, database, object_store):
    app = create_app(config=settings, database=database, object_store=object_store)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def register_user(client):
    def _register(email: str, name: str, password: str = "secret-pass") -> dict:
        response = client.post("/api/auth/register", json={"email": email, "password": password, "name": name})
        assert response.status_code == 200, response.text
        return response.json()

    return _register


@pytest.fixture
def user_headers(register_user):
    token = register_user("alice@example.com", "Alice")["token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(register_user):
    token = register_user(ADMIN_EMAIL, "Admin")["token"]
    return {"Authorization": f"Bearer {token}"}
