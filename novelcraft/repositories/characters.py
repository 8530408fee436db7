"""Character repository."""

from typing import Any

from sqlalchemy.orm import Session

from novelcraft.core.exceptions import RowNotFoundError
from novelcraft.db.types import utcnow
from novelcraft.models.character import Character
from novelcraft.repositories.base import apply_updates, save


class CharacterRepository:
    @staticmethod
    def create(
        db: Session,
        project_id: int,
        name: str,
        description: str,
        alias: str | None = None,
        avatar_url: str | None = None,
        tags: list[str] | None = None,
    ) -> Character:
        character = Character(
            project_id=project_id,
            name=name,
            description=description,
            alias=alias,
            avatar_url=avatar_url,
            tags=tags,
        )
        return save(db, character)

    @staticmethod
    def get_by_id(db: Session, character_id: int) -> Character | None:
        return (
            db.query(Character)
            .filter(Character.id == character_id, Character.deleted_at.is_(None))
            .first()
        )

    @staticmethod
    def list_by_project(db: Session, project_id: int) -> list[Character]:
        return (
            db.query(Character)
            .filter(Character.project_id == project_id, Character.deleted_at.is_(None))
            .order_by(Character.created_at.asc(), Character.id.asc())
            .all()
        )

    @staticmethod
    def update(db: Session, character_id: int, updates: dict[str, Any]) -> Character:
        character = CharacterRepository.get_by_id(db, character_id)
        if not character:
            raise RowNotFoundError("characters", character_id)
        apply_updates(character, updates)
        return save(db, character)

    @staticmethod
    def soft_delete(db: Session, character_id: int) -> Character:
        character = db.query(Character).filter(Character.id == character_id).first()
        if not character:
            raise RowNotFoundError("characters", character_id)
        now = utcnow()
        character.deleted_at = now
        character.updated_at = now
        return save(db, character)

    @staticmethod
    def restore(db: Session, character_id: int) -> Character:
        character = db.query(Character).filter(Character.id == character_id).first()
        if not character:
            raise RowNotFoundError("characters", character_id)
        character.deleted_at = None
        character.updated_at = utcnow()
        return save(db, character)
