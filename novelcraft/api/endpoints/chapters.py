"""Chapter and chapter version endpoints."""

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session

from novelcraft.api import deps
from novelcraft.core.exceptions import NotFoundError
from novelcraft.models.chapter import Chapter
from novelcraft.models.project import Project
from novelcraft.repositories.chapter_versions import ChapterVersionRepository
from novelcraft.repositories.chapters import ChapterRepository
from novelcraft.schemas.auth import TokenData
from novelcraft.schemas.chapter import (
    ChapterCreate,
    ChapterResponse,
    ChapterTree,
    ChapterUpdate,
    ChapterVersionResponse,
    VolumeResponse,
)
from novelcraft.schemas.common import MAX_ROW_ID, ok
from novelcraft.services import chapters as chapter_service

router = APIRouter()


@router.get("")
def list_chapters(
    project: Project = Depends(deps.get_owned_project),
    db: Session = Depends(deps.get_db),
):
    """Chapters of a project grouped under their volumes."""
    tree = chapter_service.build_chapter_tree(
        ChapterRepository.list_by_project(db, project.id)
    )
    volumes = [
        VolumeResponse(
            **ChapterResponse.model_validate(node["volume"]).model_dump(),
            children=[ChapterResponse.model_validate(c) for c in node["children"]],
        )
        for node in tree["volumes"]
    ]
    loose = [ChapterResponse.model_validate(c) for c in tree["chapters"]]
    return ok("Chapters loaded", ChapterTree(volumes=volumes, chapters=loose))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_chapter(
    chapter_in: ChapterCreate,
    project: Project = Depends(deps.get_owned_project),
    db: Session = Depends(deps.get_db),
):
    chapter_service.validate_parent(
        db, project.id, chapter_in.parent_id, is_volume=chapter_in.type == "volume"
    )
    chapter = ChapterRepository.create(
        db,
        project_id=project.id,
        title=chapter_in.title,
        content=chapter_in.content,
        type=chapter_in.type,
        parent_id=chapter_in.parent_id,
        order_index=chapter_in.order_index,
    )
    return ok("Chapter created", ChapterResponse.model_validate(chapter))


@router.get("/{chapter_id}")
def get_chapter(chapter: Chapter = Depends(deps.get_project_chapter)):
    return ok("Chapter loaded", ChapterResponse.model_validate(chapter))


@router.put("/{chapter_id}")
def update_chapter(
    chapter_update: ChapterUpdate,
    chapter: Chapter = Depends(deps.get_project_chapter),
    identity: TokenData = Depends(deps.get_current_identity),
    db: Session = Depends(deps.get_db),
):
    """Update a chapter, optionally saving the new content as a version."""
    fields = chapter_update.model_dump(exclude_unset=True, exclude={"create_version"})
    # parent_id=None detaches from a volume; other nulls mean "unchanged"
    updates = {k: v for k, v in fields.items() if v is not None or k == "parent_id"}

    chapter = chapter_service.update_chapter(
        db,
        chapter,
        updates,
        create_version=chapter_update.create_version,
        created_by=identity.username,
    )
    return ok("Chapter updated", ChapterResponse.model_validate(chapter))


@router.delete("/{chapter_id}")
def delete_chapter(
    chapter: Chapter = Depends(deps.get_project_chapter),
    db: Session = Depends(deps.get_db),
):
    chapter = ChapterRepository.soft_delete(db, chapter.id)
    return ok("Chapter deleted", {"id": chapter.id, "deleted_at": chapter.deleted_at})


@router.get("/{chapter_id}/versions")
def list_versions(
    chapter: Chapter = Depends(deps.get_project_chapter),
    db: Session = Depends(deps.get_db),
):
    """Stored versions, newest first."""
    versions = ChapterVersionRepository.list_by_chapter(db, chapter.id)
    return ok("Versions loaded", [ChapterVersionResponse.model_validate(v) for v in versions])


@router.get("/{chapter_id}/versions/{version_number}")
def get_version(
    version_number: int = Path(..., ge=1, le=MAX_ROW_ID),
    chapter: Chapter = Depends(deps.get_project_chapter),
    db: Session = Depends(deps.get_db),
):
    version = ChapterVersionRepository.get_by_chapter_and_version(
        db, chapter.id, version_number
    )
    if not version:
        raise NotFoundError("Version not found")
    return ok("Version loaded", ChapterVersionResponse.model_validate(version))


@router.post("/{chapter_id}/versions/{version_number}/restore")
def restore_version(
    version_number: int = Path(..., ge=1, le=MAX_ROW_ID),
    chapter: Chapter = Depends(deps.get_project_chapter),
    db: Session = Depends(deps.get_db),
):
    """Load a version's content into the chapter; save a version afterwards to keep it."""
    chapter = chapter_service.restore_version(db, chapter, version_number)
    return ok("Version restored", ChapterResponse.model_validate(chapter))
