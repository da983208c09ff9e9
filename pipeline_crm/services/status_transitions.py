"""Status transition recorder for prospects.

A transition is an update where the previous status was non-empty and
differs from the new one. Every transition stamps the prospect's
``status_date`` with today's date and appends exactly one immutable
``StatusHistoryEntry``; anything else leaves both untouched.
"""

from __future__ import annotations

import logging
from datetime import date

from sqlalchemy.orm import Session

from pipeline_crm.database.models import Prospect, StatusHistoryEntry

logger = logging.getLogger(__name__)


def is_transition(old_status: str | None, new_status: str | None) -> bool:
    """First-ever status assignment does not count as a transition."""
    return bool(old_status) and old_status != new_status


def apply_status(
    session: Session,
    prospect: Prospect,
    new_status: str | None,
    notes: str | None = None,
    actor_id: int | None = None,
    today: date | None = None,
) -> StatusHistoryEntry | None:
    """Set ``new_status`` on ``prospect`` and record the history row if it is a transition.

    The caller owns the transaction; the prospect row and the history entry
    are flushed together by its commit.
    """
    old_status = prospect.status
    prospect.status = new_status
    if not is_transition(old_status, new_status):
        return None

    stamp = today or date.today()
    prospect.status_date = stamp
    entry = StatusHistoryEntry(
        prospect_id=prospect.id,
        old_status=old_status,
        new_status=new_status,
        status_date=stamp,
        notes=notes,
        user_id=actor_id,
    )
    session.add(entry)
    logger.info(
        "prospect.status.transition",
        extra={
            "event": "prospect.status.transition",
            "prospect_id": prospect.id,
            "old_status": old_status,
            "new_status": new_status,
            "user_id": actor_id,
        },
    )
    return entry
