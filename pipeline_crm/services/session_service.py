"""Login session bookkeeping.

A new login deactivates the user's previous active sessions. The flag is
informational (admin visibility and logout); requests are not rejected
based on it.
"""

from __future__ import annotations

from sqlalchemy import update

from pipeline_crm.database.models import User, UserSession
from pipeline_crm.services.base_service import BaseService


class SessionService(BaseService):
    def start_session(self, user: User, ip_address: str | None = None) -> UserSession:
        self.db.execute(
            update(UserSession)
            .where(UserSession.user_id == user.id, UserSession.is_active.is_(True))
            .values(is_active=False)
            .execution_options(synchronize_session="fetch")
        )
        session_row = UserSession(
            user_id=user.id,
            email=user.email,
            name=user.name,
            ip_address=ip_address,
            is_active=True,
        )
        self.db.add(session_row)
        self.commit()
        self.db.refresh(session_row)
        return session_row

    def end_session(self, user_id: int, session_id: int | None) -> bool:
        query = self.db.query(UserSession).filter(
            UserSession.user_id == user_id, UserSession.is_active.is_(True)
        )
        if session_id is not None:
            query = query.filter(UserSession.id == session_id)
        rows = query.all()
        for row in rows:
            row.is_active = False
        self.commit()
        return bool(rows)

    def list_active_sessions(self) -> list[UserSession]:
        return (
            self.db.query(UserSession)
            .filter(UserSession.is_active.is_(True))
            .order_by(UserSession.login_at.desc(), UserSession.id.desc())
            .all()
        )
