"""Project repository."""

from typing import Any

from sqlalchemy.orm import Session

from novelcraft.core.exceptions import RowNotFoundError
from novelcraft.db.types import utcnow
from novelcraft.models.project import Project, ProjectStatus
from novelcraft.repositories.base import apply_updates, save


class ProjectRepository:
    """Data access for ``projects``; reads hide soft-deleted rows."""

    @staticmethod
    def create(
        db: Session,
        user_id: int,
        title: str,
        description: str | None = None,
        status: str = ProjectStatus.ACTIVE.value,
        cover_image: str | None = None,
    ) -> Project:
        project = Project(
            user_id=user_id,
            title=title,
            description=description,
            status=status,
            cover_image=cover_image,
            current_chapter_id=None,
        )
        return save(db, project)

    @staticmethod
    def get_by_id(db: Session, project_id: int) -> Project | None:
        return (
            db.query(Project)
            .filter(Project.id == project_id, Project.deleted_at.is_(None))
            .first()
        )

    @staticmethod
    def get_by_id_including_deleted(db: Session, project_id: int) -> Project | None:
        return db.query(Project).filter(Project.id == project_id).first()

    @staticmethod
    def list_by_user(db: Session, user_id: int) -> list[Project]:
        return (
            db.query(Project)
            .filter(Project.user_id == user_id, Project.deleted_at.is_(None))
            .order_by(Project.created_at.desc(), Project.id.desc())
            .all()
        )

    @staticmethod
    def update(db: Session, project_id: int, updates: dict[str, Any]) -> Project:
        project = ProjectRepository.get_by_id(db, project_id)
        if not project:
            raise RowNotFoundError("projects", project_id)
        apply_updates(project, updates)
        return save(db, project)

    @staticmethod
    def soft_delete(db: Session, project_id: int) -> Project:
        project = ProjectRepository.get_by_id_including_deleted(db, project_id)
        if not project:
            raise RowNotFoundError("projects", project_id)
        now = utcnow()
        project.deleted_at = now
        project.updated_at = now
        return save(db, project)

    @staticmethod
    def restore(db: Session, project_id: int) -> Project:
        project = ProjectRepository.get_by_id_including_deleted(db, project_id)
        if not project:
            raise RowNotFoundError("projects", project_id)
        project.deleted_at = None
        project.updated_at = utcnow()
        return save(db, project)
