"""Next-action (scheduled follow-up) service."""

from __future__ import annotations

from datetime import date
from typing import Any

from pipeline_crm.core.exceptions import NotFoundError
from pipeline_crm.database.models import NextAction, Prospect
from pipeline_crm.services.base_service import BaseService
from pipeline_crm.utils.validators import sanitize_text


class NextActionService(BaseService):
    def _require_prospect(self, prospect_id: int, owner_id: int) -> Prospect:
        prospect = (
            self.db.query(Prospect)
            .filter(Prospect.id == prospect_id, Prospect.user_id == owner_id)
            .first()
        )
        if prospect is None:
            raise NotFoundError("Prospect not found.")
        return prospect

    def _owned_action(self, action_id: int, owner_id: int) -> NextAction:
        action = (
            self.db.query(NextAction)
            .filter(NextAction.id == action_id, NextAction.user_id == owner_id)
            .first()
        )
        if action is None:
            raise NotFoundError("Next action not found.")
        return action

    def list_next_actions(self, prospect_id: int, owner_id: int) -> list[NextAction]:
        self._require_prospect(prospect_id, owner_id)
        return (
            self.db.query(NextAction)
            .filter(NextAction.prospect_id == prospect_id, NextAction.user_id == owner_id)
            .order_by(
                NextAction.planned_date.is_(None),
                NextAction.planned_date.asc(),
                NextAction.id.asc(),
            )
            .all()
        )

    def create_next_action(self, prospect_id: int, owner_id: int, data: dict[str, Any]) -> NextAction:
        self._require_prospect(prospect_id, owner_id)
        action = NextAction(
            prospect_id=prospect_id,
            action_type=sanitize_text(data.get("action_type")),
            planned_date=data.get("planned_date"),
            actor=sanitize_text(data.get("actor")),
            user_id=owner_id,
        )
        self.db.add(action)
        self.commit()
        self.db.refresh(action)
        return action

    def update_next_action(self, action_id: int, owner_id: int, data: dict[str, Any]) -> NextAction:
        """Update completion state and any scheduling fields that were sent.

        Completing stamps today's date unless the action was already complete;
        reopening clears it.
        """
        action = self._owned_action(action_id, owner_id)
        for field in ("action_type", "actor"):
            if data.get(field) is not None:
                setattr(action, field, sanitize_text(data[field]))
        if data.get("planned_date") is not None:
            action.planned_date = data["planned_date"]

        completed = bool(data.get("completed"))
        if completed and not action.completed_date:
            action.completed_date = date.today()
        elif not completed:
            action.completed_date = None
        action.completed = completed
        action.completed_note = sanitize_text(data.get("completed_note"))
        self.commit()
        self.db.refresh(action)
        return action

    def delete_next_action(self, action_id: int, owner_id: int) -> None:
        action = self._owned_action(action_id, owner_id)
        self.db.delete(action)
        self.commit()
