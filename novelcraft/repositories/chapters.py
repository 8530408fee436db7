"""Chapter repository."""

from typing import Any

from sqlalchemy.orm import Session

from novelcraft.core.exceptions import RowNotFoundError
from novelcraft.db.types import utcnow
from novelcraft.models.chapter import Chapter, ChapterType
from novelcraft.repositories.base import apply_updates, save


def count_words(content: str | None) -> int:
    """Character count, which is how CJK manuscripts are measured."""
    return len(content or "")


class ChapterRepository:
    """Data access for ``chapters``; reads hide soft-deleted rows."""

    @staticmethod
    def create(
        db: Session,
        project_id: int,
        title: str,
        content: str = "",
        type: str = ChapterType.CHAPTER.value,
        parent_id: int | None = None,
        order_index: int = 0,
    ) -> Chapter:
        chapter = Chapter(
            project_id=project_id,
            title=title,
            content=content,
            word_count=count_words(content),
            type=type,
            parent_id=parent_id,
            order_index=order_index,
        )
        return save(db, chapter)

    @staticmethod
    def get_by_id(db: Session, chapter_id: int) -> Chapter | None:
        return (
            db.query(Chapter)
            .filter(Chapter.id == chapter_id, Chapter.deleted_at.is_(None))
            .first()
        )

    @staticmethod
    def list_by_project(db: Session, project_id: int) -> list[Chapter]:
        return (
            db.query(Chapter)
            .filter(Chapter.project_id == project_id, Chapter.deleted_at.is_(None))
            .order_by(Chapter.order_index.asc(), Chapter.created_at.asc(), Chapter.id.asc())
            .all()
        )

    @staticmethod
    def update(
        db: Session, chapter_id: int, updates: dict[str, Any], commit: bool = True
    ) -> Chapter:
        chapter = ChapterRepository.get_by_id(db, chapter_id)
        if not chapter:
            raise RowNotFoundError("chapters", chapter_id)
        if "content" in updates:
            updates = {**updates, "word_count": count_words(updates["content"])}
        apply_updates(chapter, updates)
        return save(db, chapter, commit=commit)

    @staticmethod
    def update_word_count(db: Session, chapter_id: int, content: str) -> Chapter:
        return ChapterRepository.update(db, chapter_id, {"word_count": count_words(content)})

    @staticmethod
    def soft_delete(db: Session, chapter_id: int) -> Chapter:
        chapter = db.query(Chapter).filter(Chapter.id == chapter_id).first()
        if not chapter:
            raise RowNotFoundError("chapters", chapter_id)
        now = utcnow()
        chapter.deleted_at = now
        chapter.updated_at = now
        return save(db, chapter)

    @staticmethod
    def restore(db: Session, chapter_id: int) -> Chapter:
        chapter = db.query(Chapter).filter(Chapter.id == chapter_id).first()
        if not chapter:
            raise RowNotFoundError("chapters", chapter_id)
        chapter.deleted_at = None
        chapter.updated_at = utcnow()
        return save(db, chapter)
