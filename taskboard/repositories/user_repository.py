from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from taskboard.errors import ConflictError, NotFoundError, StorageError
from taskboard.models.user_model import PROFILE_FIELDS, User
from taskboard.utils.db import Database

logger = logging.getLogger(__name__)

USER_COLUMNS = "id, name, email, password, phone, organization, plan, created_at"


class UserRepository:
    def __init__(self, db: Database):
        self.db = db

    def _fetch_one(self, where: str, params: Mapping[str, Any]) -> Optional[User]:
        try:
            row = self.db.execute(f"SELECT {USER_COLUMNS} FROM users WHERE {where}", params).first()
        except SQLAlchemyError as exc:
            logger.exception("Error retrieving user: %s", exc)
            raise StorageError("Error retrieving user", detail=str(exc)) from exc
        return User.from_row(row) if row else None

    def find_by_email(self, email: str) -> Optional[User]:
        return self._fetch_one("email = :email", {"email": email.strip().lower()})

    def find_by_id(self, user_id: int) -> Optional[User]:
        return self._fetch_one("id = :id", {"id": user_id})

    def create(self, *, name: str, email: str, password_hash: str, plan: str, phone=None, organization=None) -> User:
        params = {
            "name": name,
            "email": email.strip().lower(),
            "password": password_hash,
            "phone": phone,
            "organization": organization,
            "plan": plan,
        }
        try:
            result = self.db.execute(
                "INSERT INTO users (name, email, password, phone, organization, plan) "
                "VALUES (:name, :email, :password, :phone, :organization, :plan)",
                params,
            )
        except IntegrityError as exc:
            # Unique index on email decides concurrent signups
            raise ConflictError("Email already in use") from exc
        except SQLAlchemyError as exc:
            logger.exception("Error creating user: %s", exc)
            raise StorageError("An error occurred during registration", detail=str(exc)) from exc
        return User(id=int(result.lastrowid), password=password_hash, **{k: v for k, v in params.items() if k != "password"})

    def update_password(self, user_id: int, password_hash: str) -> None:
        try:
            result = self.db.execute(
                "UPDATE users SET password = :password WHERE id = :id",
                {"password": password_hash, "id": user_id},
            )
        except SQLAlchemyError as exc:
            logger.exception("Error updating password: %s", exc)
            raise StorageError("Error updating password", detail=str(exc)) from exc
        if result.rowcount == 0:
            raise NotFoundError("User not found")

    def update_profile(self, user_id: int, updates: Mapping[str, Any]) -> User:
        changes = {key: updates[key] for key in PROFILE_FIELDS if key in updates}
        if changes:
            assignments = ", ".join(f"{key} = :{key}" for key in changes)
            try:
                result = self.db.execute(f"UPDATE users SET {assignments} WHERE id = :user_id", {**changes, "user_id": user_id})
            except SQLAlchemyError as exc:
                logger.exception("Error updating profile: %s", exc)
                raise StorageError("Error updating profile", detail=str(exc)) from exc
            if result.rowcount == 0:
                raise NotFoundError("User not found")
        user = self.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user
