from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    false,
    true,
)
from sqlalchemy.orm import declarative_base, relationship

from pipeline_crm.core.enums import DEFAULT_CHANCE_PERCENT, DEFAULT_PROSPECT_STATUS, UserRole

Base = declarative_base()


def utcnow_naive() -> datetime:
    """Return UTC now as a naive datetime for TIMESTAMP columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _amount_column() -> Column:
    return Column(Numeric(12, 2, asdecimal=False), nullable=False, default=0, server_default="0")


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(320), nullable=False, unique=True)
    password = Column(String(255), nullable=False)
    temp_password = Column(String(255))
    name = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default=UserRole.USER.value, server_default=UserRole.USER.value)
    created_at = Column(DateTime, default=utcnow_naive, nullable=False)

    prospects = relationship("Prospect", back_populates="owner")
    sessions = relationship("UserSession", back_populates="user", cascade="all, delete-orphan")


class Prospect(Base):
    __tablename__ = "prospects"
    __table_args__ = (
        Index("idx_prospects_user_created", "user_id", "created_at"),
        Index("idx_prospects_status", "status"),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    contact_name = Column(String(255))
    email = Column(String(320))
    phone = Column(String(64))
    status = Column(String(80), default=DEFAULT_PROSPECT_STATUS, server_default=DEFAULT_PROSPECT_STATUS)
    status_date = Column(Date)
    setup_amount = _amount_column()
    monthly_amount = _amount_column()
    annual_amount = _amount_column()
    training_amount = _amount_column()
    material_amount = _amount_column()
    chance_percent = Column(
        Integer,
        nullable=False,
        default=DEFAULT_CHANCE_PERCENT,
        server_default=str(DEFAULT_CHANCE_PERCENT),
    )
    assigned_to = Column(String(255))
    next_action = Column(Text)
    deadline = Column(Date)
    quote_date = Column(Date)
    decision_maker = Column(String(255))
    notes = Column(Text)
    pdf_key = Column(String(512))
    user_id = Column(Integer, ForeignKey("users.id"), index=True)
    created_at = Column(DateTime, default=utcnow_naive, nullable=False)
    updated_at = Column(DateTime, default=utcnow_naive, onupdate=utcnow_naive, nullable=False)

    owner = relationship("User", back_populates="prospects")
    interlocutors = relationship(
        "Interlocutor", back_populates="prospect", cascade="all, delete-orphan"
    )
    next_actions = relationship(
        "NextAction", back_populates="prospect", cascade="all, delete-orphan"
    )
    status_history = relationship(
        "StatusHistoryEntry", back_populates="prospect", cascade="all, delete-orphan"
    )
    activities = relationship(
        "Activity", back_populates="prospect", cascade="all, delete-orphan"
    )


class Interlocutor(Base):
    __tablename__ = "interlocuteurs"
    __table_args__ = (Index("idx_interlocuteurs_prospect", "prospect_id"),)

    id = Column(Integer, primary_key=True, index=True)
    prospect_id = Column(Integer, ForeignKey("prospects.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(255), nullable=False)
    role = Column(String(255))
    email = Column(String(320))
    phone = Column(String(64))
    is_principal = Column(Boolean, nullable=False, default=False, server_default=false())
    is_decision_maker = Column(Boolean, nullable=False, default=False, server_default=false())
    created_at = Column(DateTime, default=utcnow_naive, nullable=False)

    prospect = relationship("Prospect", back_populates="interlocutors")


class NextAction(Base):
    __tablename__ = "next_actions"
    __table_args__ = (Index("idx_next_actions_prospect_planned", "prospect_id", "planned_date"),)

    id = Column(Integer, primary_key=True, index=True)
    prospect_id = Column(Integer, ForeignKey("prospects.id", ondelete="CASCADE"), nullable=False)
    action_type = Column(String(120))
    planned_date = Column(Date)
    actor = Column(String(255))
    completed = Column(Boolean, nullable=False, default=False, server_default=false())
    completed_date = Column(Date)
    completed_note = Column(Text)
    user_id = Column(Integer, ForeignKey("users.id"))
    created_at = Column(DateTime, default=utcnow_naive, nullable=False)

    prospect = relationship("Prospect", back_populates="next_actions")


class StatusHistoryEntry(Base):
    __tablename__ = "status_history"
    __table_args__ = (Index("idx_status_history_prospect", "prospect_id", "created_at"),)

    id = Column(Integer, primary_key=True, index=True)
    prospect_id = Column(Integer, ForeignKey("prospects.id", ondelete="CASCADE"), nullable=False)
    old_status = Column(String(80))
    new_status = Column(String(80))
    status_date = Column(Date)
    notes = Column(Text)
    user_id = Column(Integer, ForeignKey("users.id"))
    created_at = Column(DateTime, default=utcnow_naive, nullable=False)

    prospect = relationship("Prospect", back_populates="status_history")


class Activity(Base):
    __tablename__ = "activities"
    __table_args__ = (Index("idx_activities_prospect", "prospect_id", "activity_date"),)

    id = Column(Integer, primary_key=True, index=True)
    prospect_id = Column(Integer, ForeignKey("prospects.id", ondelete="CASCADE"), nullable=False)
    activity_type = Column(String(120))
    description = Column(Text)
    activity_date = Column(DateTime, default=utcnow_naive, nullable=False)
    created_by = Column(String(255))
    user_id = Column(Integer, ForeignKey("users.id"))

    prospect = relationship("Prospect", back_populates="activities")


class UserSession(Base):
    __tablename__ = "user_sessions"
    __table_args__ = (Index("idx_user_sessions_user_active", "user_id", "is_active"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    email = Column(String(320))
    name = Column(String(255))
    login_at = Column(DateTime, default=utcnow_naive, nullable=False)
    ip_address = Column(String(64))
    is_active = Column(Boolean, nullable=False, default=True, server_default=true())

    user = relationship("User", back_populates="sessions")
