"""Prospect service: owner-scoped CRUD plus status history."""

from __future__ import annotations

from datetime import date
from typing import Any

from pipeline_crm.core.enums import DEFAULT_CHANCE_PERCENT, DEFAULT_PROSPECT_STATUS
from pipeline_crm.core.exceptions import NotFoundError, ValidationError
from pipeline_crm.database.models import Prospect, StatusHistoryEntry
from pipeline_crm.services.base_service import BaseService
from pipeline_crm.services.status_transitions import apply_status
from pipeline_crm.utils.validators import sanitize_text

AMOUNT_FIELDS = (
    "setup_amount",
    "monthly_amount",
    "annual_amount",
    "training_amount",
    "material_amount",
)
TEXT_FIELDS = (
    "name",
    "contact_name",
    "email",
    "phone",
    "assigned_to",
    "next_action",
    "decision_maker",
    "notes",
)
DATE_FIELDS = ("deadline", "quote_date")


def _mutable_values(data: dict[str, Any]) -> dict[str, Any]:
    """Full-row values for every mutable field, defaults filled in."""
    values: dict[str, Any] = {}
    for field in TEXT_FIELDS:
        values[field] = sanitize_text(data.get(field))
    for field in AMOUNT_FIELDS:
        amount = data.get(field)
        values[field] = float(amount) if amount is not None else 0.0
        if values[field] < 0:
            raise ValidationError(f"{field} must be >= 0.")
    chance = data.get("chance_percent")
    values["chance_percent"] = int(chance) if chance is not None else DEFAULT_CHANCE_PERCENT
    if not 0 <= values["chance_percent"] <= 100:
        raise ValidationError("chance_percent must be between 0 and 100.")
    for field in DATE_FIELDS:
        values[field] = data.get(field)
    if not values["name"]:
        raise ValidationError("Prospect name is required.")
    return values


class ProspectService(BaseService):
    """Prospects are always scoped to their owner."""

    def _owned_query(self, prospect_id: int, owner_id: int):
        return self.db.query(Prospect).filter(Prospect.id == prospect_id, Prospect.user_id == owner_id)

    def create_prospect(self, owner_id: int, data: dict[str, Any]) -> Prospect:
        values = _mutable_values(data)
        prospect = Prospect(
            **values,
            status=sanitize_text(data.get("status")) or DEFAULT_PROSPECT_STATUS,
            status_date=date.today(),
            user_id=owner_id,
        )
        self.db.add(prospect)
        self.commit()
        self.db.refresh(prospect)
        return prospect

    def list_prospects(self, owner_id: int) -> list[Prospect]:
        return (
            self.db.query(Prospect)
            .filter(Prospect.user_id == owner_id)
            .order_by(Prospect.created_at.desc(), Prospect.id.desc())
            .all()
        )

    def get_prospect(self, prospect_id: int, owner_id: int) -> Prospect:
        prospect = self._owned_query(prospect_id, owner_id).first()
        if prospect is None:
            raise NotFoundError("Prospect not found.")
        return prospect

    def update_prospect(
        self, prospect_id: int, owner_id: int, data: dict[str, Any]
    ) -> tuple[Prospect, StatusHistoryEntry | None]:
        """Replace mutable fields; a status transition is recorded atomically.

        The prospect row is locked for the duration of the transaction so the
        status read, the row update and the history insert cannot interleave
        with a concurrent update of the same prospect. An omitted ``status``
        keeps the current one.
        """
        values = _mutable_values(data)
        prospect = self._owned_query(prospect_id, owner_id).with_for_update().first()
        if prospect is None:
            self.rollback()
            raise NotFoundError("Prospect not found.")

        for field, value in values.items():
            setattr(prospect, field, value)

        new_status = sanitize_text(data.get("status")) if "status" in data else None
        entry = None
        if new_status is not None:
            entry = apply_status(
                self.db,
                prospect,
                new_status,
                notes=values["notes"],
                actor_id=owner_id,
            )
        self.commit()
        self.db.refresh(prospect)
        return prospect, entry

    def delete_prospect(self, prospect_id: int, owner_id: int) -> None:
        """Delete the prospect and every dependent row in one transaction."""
        prospect = self._owned_query(prospect_id, owner_id).first()
        if prospect is None:
            raise NotFoundError("Prospect not found.")
        self.db.delete(prospect)
        self.commit()

    def list_status_history(self, prospect_id: int, owner_id: int) -> list[StatusHistoryEntry]:
        self.get_prospect(prospect_id, owner_id)
        return (
            self.db.query(StatusHistoryEntry)
            .filter(StatusHistoryEntry.prospect_id == prospect_id)
            .order_by(StatusHistoryEntry.created_at.desc(), StatusHistoryEntry.id.desc())
            .all()
        )

    def set_attachment_key(self, prospect_id: int, owner_id: int, key: str | None) -> str | None:
        """Swap the stored attachment key; returns the previous one."""
        prospect = self._owned_query(prospect_id, owner_id).with_for_update().first()
        if prospect is None:
            self.rollback()
            raise NotFoundError("Prospect not found.")
        previous = prospect.pdf_key
        prospect.pdf_key = key
        self.commit()
        return previous
