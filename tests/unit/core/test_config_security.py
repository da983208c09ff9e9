from __future__ import annotations

from dataclasses import replace

import bcrypt
import pytest

from pipeline_crm.core import config as config_module
from pipeline_crm.core.exceptions import ConfigurationError
from pipeline_crm.core.security import generate_temp_password, hash_password, is_legacy_hash, verify_password


def test_default_config_is_valid(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    cfg = config_module._build_config("development")
    assert cfg.DATABASE_URL.startswith("sqlite")
    assert cfg.JWT_TTL_DAYS == 30
    assert cfg.API_PREFIX == "/api"


def test_production_rejects_placeholder_secret(monkeypatch):
    monkeypatch.setenv("JWT_SECRET", "change_me_jwt_secret")
    with pytest.raises(ConfigurationError):
        config_module._build_config("production")


def test_gcs_backend_requires_bucket():
    cfg = replace(config_module._build_config("development"), OBJECT_STORE_BACKEND="gcs", GCS_BUCKET_NAME="")
    with pytest.raises(ConfigurationError):
        config_module._validate_config(cfg)


def test_unsupported_database_scheme_is_rejected():
    with pytest.raises(ConfigurationError):
        config_module._validate_database_url("mysql://user:pw@host/db")


def test_password_hash_roundtrip():
    hashed = hash_password("s3cret", iterations=1000)
    assert hashed.startswith("pbkdf2_sha256$1000$")
    assert verify_password("s3cret", hashed)
    assert not verify_password("wrong", hashed)


def test_foreign_hash_format_never_verifies():
    assert not verify_password("anything", "md5$5f4dcc3b5aa765d61d8327deb882cf99")
    assert not verify_password("anything", "$2a$10$notarealbcrypthash")
    assert not verify_password("anything", None)


def test_legacy_bcrypt_hash_verifies():
    legacy = bcrypt.hashpw(b"secret-pass", bcrypt.gensalt(rounds=4, prefix=b"2a")).decode("utf-8")
    assert is_legacy_hash(legacy)
    assert verify_password("secret-pass", legacy)
    assert not verify_password("wrong", legacy)
    assert not is_legacy_hash(hash_password("secret-pass", iterations=1000))


def test_temp_password_shape():
    password = generate_temp_password()
    assert len(password) == 10
    assert password != generate_temp_password()
