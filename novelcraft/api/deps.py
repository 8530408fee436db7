"""API Dependencies for dependency injection."""

from collections.abc import Generator

from fastapi import Depends, Path, Request
from sqlalchemy.orm import Session

from novelcraft.core.exceptions import (
    AuthenticationError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from novelcraft.db.base import SessionLocal
from novelcraft.models.chapter import Chapter
from novelcraft.models.character import Character
from novelcraft.models.project import Project
from novelcraft.models.user import User
from novelcraft.repositories.chapters import ChapterRepository
from novelcraft.repositories.characters import CharacterRepository
from novelcraft.repositories.projects import ProjectRepository
from novelcraft.repositories.users import UserRepository
from novelcraft.schemas.auth import TokenData
from novelcraft.schemas.common import MAX_ROW_ID
from novelcraft.services.passkey import PasskeyService
from novelcraft.services.rate_limiter import RateLimiter


def get_db() -> Generator[Session, None, None]:
    """Get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_rate_limiter(request: Request) -> RateLimiter:
    """The limiter instance created with the application."""
    return request.app.state.rate_limiter


def get_passkey_service(request: Request) -> PasskeyService:
    return request.app.state.passkey_service


def get_current_identity(request: Request) -> TokenData:
    """Identity verified by AuthMiddleware for this request."""
    identity = getattr(request.state, "identity", None)
    if identity is None:
        raise AuthenticationError("Unauthorized", error="Missing or invalid token")
    return identity


def get_current_user(
    identity: TokenData = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> User:
    user = UserRepository.get_by_id(db, identity.user_id)
    if not user:
        raise AuthenticationError("Unauthorized", error="User no longer exists")
    return user


def check_project_ownership(db: Session, project_id: int, user_id: int) -> Project:
    """Load a live project, 404 if missing and 403 if owned by someone else."""
    project = ProjectRepository.get_by_id(db, project_id)
    if not project:
        raise NotFoundError("Project not found", error="Project does not exist or was deleted")
    if project.user_id != user_id:
        raise PermissionDeniedError("Forbidden", error="You do not have access to this project")
    return project


def get_owned_project(
    project_id: int = Path(..., ge=1, le=MAX_ROW_ID),
    identity: TokenData = Depends(get_current_identity),
    db: Session = Depends(get_db),
) -> Project:
    return check_project_ownership(db, project_id, identity.user_id)


def get_project_chapter(
    chapter_id: int = Path(..., ge=1, le=MAX_ROW_ID),
    project: Project = Depends(get_owned_project),
    db: Session = Depends(get_db),
) -> Chapter:
    chapter = ChapterRepository.get_by_id(db, chapter_id)
    if not chapter:
        raise NotFoundError("Chapter not found")
    if chapter.project_id != project.id:
        raise ValidationError("Chapter does not belong to this project")
    return chapter


def get_project_character(
    character_id: int = Path(..., ge=1, le=MAX_ROW_ID),
    project: Project = Depends(get_owned_project),
    db: Session = Depends(get_db),
) -> Character:
    character = CharacterRepository.get_by_id(db, character_id)
    if not character:
        raise NotFoundError("Character not found")
    if character.project_id != project.id:
        raise ValidationError("Character does not belong to this project")
    return character
