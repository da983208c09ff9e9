"""Interlocutor (prospect contact) service.

At most one interlocutor per prospect is principal. Promoting one clears the
flag on its siblings inside the same transaction, with the parent prospect
row locked so two concurrent promotions serialize.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import update

from pipeline_crm.core.exceptions import NotFoundError, ValidationError
from pipeline_crm.database.models import Interlocutor, Prospect
from pipeline_crm.services.base_service import BaseService
from pipeline_crm.utils.validators import sanitize_text

TEXT_FIELDS = ("name", "role", "email", "phone")


def _values(data: dict[str, Any]) -> dict[str, Any]:
    values = {field: sanitize_text(data.get(field)) for field in TEXT_FIELDS}
    if not values["name"]:
        raise ValidationError("Interlocutor name is required.")
    values["is_principal"] = bool(data.get("is_principal"))
    values["is_decision_maker"] = bool(data.get("is_decision_maker"))
    return values


class InterlocutorService(BaseService):
    def _lock_prospect(self, prospect_id: int, owner_id: int) -> Prospect:
        prospect = (
            self.db.query(Prospect)
            .filter(Prospect.id == prospect_id, Prospect.user_id == owner_id)
            .with_for_update()
            .first()
        )
        if prospect is None:
            self.rollback()
            raise NotFoundError("Prospect not found.")
        return prospect

    def _clear_principal(self, prospect_id: int, keep_id: int) -> None:
        self.db.execute(
            update(Interlocutor)
            .where(
                Interlocutor.prospect_id == prospect_id,
                Interlocutor.id != keep_id,
                Interlocutor.is_principal.is_(True),
            )
            .values(is_principal=False)
            .execution_options(synchronize_session="fetch")
        )

    def list_interlocutors(self, prospect_id: int, owner_id: int) -> list[Interlocutor]:
        prospect = (
            self.db.query(Prospect)
            .filter(Prospect.id == prospect_id, Prospect.user_id == owner_id)
            .first()
        )
        if prospect is None:
            raise NotFoundError("Prospect not found.")
        return (
            self.db.query(Interlocutor)
            .filter(Interlocutor.prospect_id == prospect_id)
            .order_by(Interlocutor.is_principal.desc(), Interlocutor.name.asc(), Interlocutor.id.asc())
            .all()
        )

    def create_interlocutor(self, prospect_id: int, owner_id: int, data: dict[str, Any]) -> Interlocutor:
        values = _values(data)
        self._lock_prospect(prospect_id, owner_id)
        interlocutor = Interlocutor(prospect_id=prospect_id, **values)
        self.db.add(interlocutor)
        self.db.flush()
        if interlocutor.is_principal:
            self._clear_principal(prospect_id, keep_id=interlocutor.id)
        self.commit()
        self.db.refresh(interlocutor)
        return interlocutor

    def update_interlocutor(
        self, prospect_id: int, interlocutor_id: int, owner_id: int, data: dict[str, Any]
    ) -> Interlocutor:
        values = _values(data)
        self._lock_prospect(prospect_id, owner_id)
        interlocutor = (
            self.db.query(Interlocutor)
            .filter(Interlocutor.id == interlocutor_id, Interlocutor.prospect_id == prospect_id)
            .first()
        )
        if interlocutor is None:
            self.rollback()
            raise NotFoundError("Interlocutor not found.")
        for field, value in values.items():
            setattr(interlocutor, field, value)
        self.db.flush()
        if interlocutor.is_principal:
            self._clear_principal(prospect_id, keep_id=interlocutor.id)
        self.commit()
        self.db.refresh(interlocutor)
        return interlocutor

    def delete_interlocutor(self, prospect_id: int, interlocutor_id: int, owner_id: int) -> None:
        self._lock_prospect(prospect_id, owner_id)
        interlocutor = (
            self.db.query(Interlocutor)
            .filter(Interlocutor.id == interlocutor_id, Interlocutor.prospect_id == prospect_id)
            .first()
        )
        if interlocutor is None:
            self.rollback()
            raise NotFoundError("Interlocutor not found.")
        self.db.delete(interlocutor)
        self.commit()
