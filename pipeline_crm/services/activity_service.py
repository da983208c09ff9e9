"""Activity log attached to prospects (calls, meetings, emails)."""

from __future__ import annotations

from typing import Any

from pipeline_crm.core.exceptions import NotFoundError
from pipeline_crm.database.models import Activity, Prospect
from pipeline_crm.services.base_service import BaseService
from pipeline_crm.utils.validators import sanitize_text


class ActivityService(BaseService):
    def _require_prospect(self, prospect_id: int, owner_id: int) -> None:
        exists = (
            self.db.query(Prospect.id)
            .filter(Prospect.id == prospect_id, Prospect.user_id == owner_id)
            .first()
        )
        if exists is None:
            raise NotFoundError("Prospect not found.")

    def list_activities(self, prospect_id: int, owner_id: int) -> list[Activity]:
        self._require_prospect(prospect_id, owner_id)
        return (
            self.db.query(Activity)
            .filter(Activity.prospect_id == prospect_id)
            .order_by(Activity.activity_date.desc(), Activity.id.desc())
            .all()
        )

    def create_activity(
        self, prospect_id: int, owner_id: int, created_by: str, data: dict[str, Any]
    ) -> Activity:
        self._require_prospect(prospect_id, owner_id)
        activity = Activity(
            prospect_id=prospect_id,
            activity_type=sanitize_text(data.get("activity_type")),
            description=sanitize_text(data.get("description")),
            created_by=created_by,
            user_id=owner_id,
        )
        self.db.add(activity)
        self.commit()
        self.db.refresh(activity)
        return activity
