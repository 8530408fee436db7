"""Chapter version repository."""

from sqlalchemy import func
from sqlalchemy.orm import Session

from novelcraft.models.chapter_version import ChapterVersion
from novelcraft.repositories.base import save


class ChapterVersionRepository:
    """Data access for ``chapter_versions``. Versions are never updated."""

    @staticmethod
    def create(
        db: Session,
        chapter_id: int,
        version_number: int,
        content: str,
        created_by: str | None = None,
        commit: bool = True,
    ) -> ChapterVersion:
        version = ChapterVersion(
            chapter_id=chapter_id,
            version_number=version_number,
            content=content,
            created_by=created_by,
        )
        return save(db, version, commit=commit)

    @staticmethod
    def list_by_chapter(db: Session, chapter_id: int) -> list[ChapterVersion]:
        """Newest first."""
        return (
            db.query(ChapterVersion)
            .filter(ChapterVersion.chapter_id == chapter_id)
            .order_by(ChapterVersion.version_number.desc())
            .all()
        )

    @staticmethod
    def get_by_chapter_and_version(
        db: Session, chapter_id: int, version_number: int
    ) -> ChapterVersion | None:
        return (
            db.query(ChapterVersion)
            .filter(
                ChapterVersion.chapter_id == chapter_id,
                ChapterVersion.version_number == version_number,
            )
            .first()
        )

    @staticmethod
    def count_by_chapter(db: Session, chapter_id: int) -> int:
        return (
            db.query(ChapterVersion)
            .filter(ChapterVersion.chapter_id == chapter_id)
            .count()
        )

    @staticmethod
    def max_version_number(db: Session, chapter_id: int) -> int:
        """Highest retained version number, 0 when there are none."""
        return (
            db.query(func.max(ChapterVersion.version_number))
            .filter(ChapterVersion.chapter_id == chapter_id)
            .scalar()
            or 0
        )

    @staticmethod
    def cleanup_old_versions(db: Session, chapter_id: int, commit: bool = True) -> int:
        """
        Delete the single oldest version (lowest version_number) of a chapter.

        Exactly one row is removed per call regardless of how many versions
        exist; callers decide when pruning is needed. Returns the number of
        rows deleted (0 or 1).
        """
        oldest = (
            db.query(ChapterVersion)
            .filter(ChapterVersion.chapter_id == chapter_id)
            .order_by(ChapterVersion.version_number.asc())
            .first()
        )
        if oldest is None:
            return 0
        db.delete(oldest)
        if commit:
            db.commit()
        else:
            db.flush()
        return 1
