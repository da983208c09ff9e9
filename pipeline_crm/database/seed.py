"""Seed-data import with insert-or-ignore semantics."""

from __future__ import annotations

import json
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any

from sqlalchemy import func, text
from sqlalchemy.orm import Session

from pipeline_crm.core.exceptions import ValidationError
from pipeline_crm.database.models import (
    Activity,
    Base,
    NextAction,
    Prospect,
    StatusHistoryEntry,
    User,
)

logger = logging.getLogger(__name__)

# Import order follows foreign-key dependencies.
SEED_SECTIONS: tuple[tuple[str, type[Base]], ...] = (
    ("users", User),
    ("prospects", Prospect),
    ("activities", Activity),
    ("next_actions", NextAction),
    ("status_history", StatusHistoryEntry),
)


def _coerce(column_type: Any, value: Any) -> Any:
    if value in ("", None):
        return None
    python_type = getattr(column_type, "python_type", None)
    try:
        if python_type is datetime and isinstance(value, str):
            return datetime.fromisoformat(value.replace("Z", "+00:00")).replace(tzinfo=None)
        if python_type is date and isinstance(value, str):
            return date.fromisoformat(value[:10])
        if python_type is bool:
            return bool(value)
    except (NotImplementedError, ValueError) as exc:
        raise ValidationError(f"Invalid seed value {value!r}.") from exc
    return value


def _build_row(model: type[Base], record: dict[str, Any]) -> Base:
    columns = model.__table__.columns
    values = {
        name: _coerce(columns[name].type, value)
        for name, value in record.items()
        if name in columns
    }
    return model(**values)


def _sync_sequence(session: Session, table_name: str) -> None:
    # Explicit ids bypass SERIAL sequences; move them past the imported rows.
    session.execute(
        text(
            f"SELECT setval(pg_get_serial_sequence('{table_name}', 'id'), "
            f"COALESCE((SELECT MAX(id) FROM {table_name}), 1))"
        )
    )


def read_seed_file(path: str | Path) -> dict[str, list[dict[str, Any]]]:
    seed_path = Path(path)
    try:
        payload = json.loads(seed_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValidationError(f"Seed file {seed_path} is not valid JSON.") from exc
    if not isinstance(payload, dict):
        raise ValidationError(f"Seed file {seed_path} must contain a JSON object.")
    return payload


def import_seed_data(session: Session, payload: dict[str, list[dict[str, Any]]]) -> dict[str, int]:
    """Insert seed rows, skipping any whose id already exists."""
    inserted: dict[str, int] = {}
    for section, model in SEED_SECTIONS:
        records = payload.get(section) or []
        count = 0
        for record in records:
            record_id = record.get("id")
            if record_id is not None and session.get(model, record_id) is not None:
                continue
            if model is User and session.query(User).filter(User.email == record.get("email")).first():
                continue
            session.add(_build_row(model, record))
            count += 1
        session.flush()
        inserted[section] = count
        if count and session.get_bind().dialect.name == "postgresql":
            _sync_sequence(session, model.__tablename__)
        if count:
            logger.info("seed.section.imported", extra={"event": "seed.section.imported", "table": section, "count": count})
    session.commit()
    return inserted


def load_seed_if_empty(session: Session, path: str | Path) -> dict[str, int] | None:
    """Load seed data only when the users table is empty and the file exists."""
    if (session.query(func.count(User.id)).scalar() or 0) > 0:
        logger.info("seed.skipped.already_initialized", extra={"event": "seed.skipped.already_initialized"})
        return None
    seed_path = Path(path)
    if not seed_path.exists():
        logger.warning("seed.skipped.file_missing", extra={"event": "seed.skipped.file_missing", "path": str(seed_path)})
        return None
    return import_seed_data(session, read_seed_file(seed_path))
