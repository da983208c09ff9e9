"""User accounts: registration, credentials and admin management."""

from __future__ import annotations

import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from pipeline_crm.core.enums import UserRole
from pipeline_crm.core.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from pipeline_crm.core.security import (
    generate_temp_password,
    hash_password,
    is_legacy_hash,
    verify_password,
)
from pipeline_crm.database.models import Prospect, User
from pipeline_crm.services.base_service import BaseService
from pipeline_crm.utils.validators import normalize_email, sanitize_text

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials."


class UserService(BaseService):
    def __init__(self, db, admin_email: str = "") -> None:
        super().__init__(db)
        self.admin_email = normalize_email(admin_email) if admin_email else ""

    def _role_for(self, email: str) -> str:
        if self.admin_email and email == self.admin_email:
            return UserRole.ADMIN.value
        return UserRole.USER.value

    def get_user(self, user_id: int) -> User:
        user = self.db.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found.")
        return user

    def get_by_email(self, email: str) -> User | None:
        return self.db.query(User).filter(func.lower(User.email) == normalize_email(email)).first()

    def create_user(self, email: str, password: str, name: str, keep_recovery_password: bool = True) -> User:
        """Create an account; duplicate email raises ConflictError."""
        email = normalize_email(email or "")
        name = sanitize_text(name)
        if not email or not password or not name:
            raise ValidationError("Email, password and name are required.")
        if self.get_by_email(email) is not None:
            raise ConflictError("Email already exists.")

        user = User(
            email=email,
            password=hash_password(password),
            temp_password=password if keep_recovery_password else None,
            name=name,
            role=self._role_for(email),
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise ConflictError("Email already exists.") from exc
        self.db.refresh(user)
        logger.info("user.created", extra={"event": "user.created", "user_id": user.id})
        return user

    def register(self, email: str, password: str, name: str) -> User:
        return self.create_user(email, password, name, keep_recovery_password=False)

    def verify_credentials(self, email: str, password: str) -> User:
        """Same error for unknown email and wrong password."""
        user = self.get_by_email(email or "")
        if user is None or not verify_password(password or "", user.password):
            raise ValidationError(INVALID_CREDENTIALS)
        if is_legacy_hash(user.password):
            user.password = hash_password(password)
            self.commit()
            logger.info("user.password.rehashed", extra={"event": "user.password.rehashed", "user_id": user.id})
        return user

    def list_users(self) -> list[User]:
        return self.db.query(User).order_by(User.name.asc(), User.id.asc()).all()

    def set_password(self, user_id: int, password: str) -> str:
        """Admin reset: the new password is also kept as recovery password."""
        if not password:
            raise ValidationError("Password is required.")
        user = self.get_user(user_id)
        user.password = hash_password(password)
        user.temp_password = password
        self.commit()
        logger.info("user.password.reset", extra={"event": "user.password.reset", "user_id": user_id})
        return password

    def issue_temp_password(self, user_id: int) -> str:
        return self.set_password(user_id, generate_temp_password())

    def change_own_password(self, user_id: int, current_password: str, new_password: str) -> None:
        user = self.get_user(user_id)
        if not verify_password(current_password or "", user.password):
            raise ValidationError(INVALID_CREDENTIALS)
        if not new_password:
            raise ValidationError("New password is required.")
        user.password = hash_password(new_password)
        user.temp_password = None
        self.commit()

    def delete_user(self, actor_id: int, user_id: int) -> None:
        target = self.get_user(user_id)
        if target.role == UserRole.ADMIN.value:
            raise AuthorizationError("The admin account cannot be deleted.")
        if target.id == actor_id:
            raise AuthorizationError("You cannot delete your own account.")
        owned = self.db.query(func.count(Prospect.id)).filter(Prospect.user_id == user_id).scalar() or 0
        if owned:
            raise ConflictError("User still owns prospects.")
        self.db.delete(target)
        self.commit()
        logger.info("user.deleted", extra={"event": "user.deleted", "user_id": user_id})

    def ensure_admin_role(self) -> User | None:
        """Elevate the configured admin identity; no-op when it does not exist yet."""
        if not self.admin_email:
            return None
        user = self.get_by_email(self.admin_email)
        if user is None:
            logger.warning("admin.account.missing", extra={"event": "admin.account.missing"})
            return None
        if user.role != UserRole.ADMIN.value:
            user.role = UserRole.ADMIN.value
            self.commit()
            logger.info("admin.account.elevated", extra={"event": "admin.account.elevated", "user_id": user.id})
        return user
