"""World book repository."""

from typing import Any

from sqlalchemy.orm import Session

from novelcraft.models.world_book import WorldBook
from novelcraft.repositories.base import apply_updates, save


class WorldBookRepository:
    """One world book per project, written with upsert semantics."""

    @staticmethod
    def get_by_project(db: Session, project_id: int) -> WorldBook | None:
        return db.query(WorldBook).filter(WorldBook.project_id == project_id).first()

    @staticmethod
    def upsert(
        db: Session,
        project_id: int,
        content: str = "",
        outline: Any = None,
    ) -> WorldBook:
        world_book = WorldBookRepository.get_by_project(db, project_id)
        if world_book:
            apply_updates(world_book, {"content": content, "outline": outline})
            return save(db, world_book)

        world_book = WorldBook(project_id=project_id, content=content, outline=outline)
        return save(db, world_book)
