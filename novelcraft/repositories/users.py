"""User repository."""

import json
from typing import Any

from sqlalchemy.orm import Session

from novelcraft.core.exceptions import RowNotFoundError
from novelcraft.db.types import utcnow
from novelcraft.models.user import User
from novelcraft.repositories.base import apply_updates, save


class UserRepository:
    """Data access for ``users``. Users are never hard-deleted."""

    @staticmethod
    def create(
        db: Session,
        username: str,
        password_hash: str,
        auth_method: str = "password",
    ) -> User:
        user = User(
            username=username,
            password_hash=password_hash,
            auth_method=auth_method,
        )
        return save(db, user)

    @staticmethod
    def get_by_id(db: Session, user_id: int) -> User | None:
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def get_by_username(db: Session, username: str) -> User | None:
        return db.query(User).filter(User.username == username).first()

    @staticmethod
    def update(db: Session, user_id: int, updates: dict[str, Any]) -> User:
        user = UserRepository.get_by_id(db, user_id)
        if not user:
            raise RowNotFoundError("users", user_id)
        apply_updates(user, updates)
        return save(db, user)

    @staticmethod
    def update_last_login(db: Session, user_id: int) -> User:
        return UserRepository.update(db, user_id, {"last_login_at": utcnow()})

    @staticmethod
    def update_to_passkey_auth(db: Session, user_id: int, credential: str) -> User:
        return UserRepository.update(
            db, user_id, {"auth_method": "passkey", "passkey_credential": credential}
        )

    @staticmethod
    def update_to_password_auth(db: Session, user_id: int) -> User:
        return UserRepository.update(
            db, user_id, {"auth_method": "password", "passkey_credential": None}
        )

    @staticmethod
    def uses_passkey_auth(db: Session, user_id: int) -> bool:
        user = UserRepository.get_by_id(db, user_id)
        return bool(user and user.auth_method == "passkey" and user.passkey_credential)

    @staticmethod
    def get_passkey_credential(db: Session, user_id: int) -> str | None:
        user = UserRepository.get_by_id(db, user_id)
        return user.passkey_credential if user else None

    @staticmethod
    def get_by_credential_id(db: Session, credential_id: str) -> User | None:
        """Find the user whose stored passkey credential has the given id."""
        candidates = (
            db.query(User)
            .filter(User.passkey_credential.isnot(None))
            .filter(User.passkey_credential.contains(credential_id))
            .all()
        )
        for user in candidates:
            try:
                stored = json.loads(user.passkey_credential)
            except ValueError:
                continue
            if isinstance(stored, dict) and stored.get("id") == credential_id:
                return user
        return None
