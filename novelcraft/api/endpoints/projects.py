"""Project management endpoints."""

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session

from novelcraft.api import deps
from novelcraft.core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from novelcraft.models.project import Project
from novelcraft.repositories.chapters import ChapterRepository
from novelcraft.repositories.projects import ProjectRepository
from novelcraft.schemas.auth import TokenData
from novelcraft.schemas.common import MAX_ROW_ID, ok
from novelcraft.schemas.project import ProjectCreate, ProjectResponse, ProjectUpdate

router = APIRouter()


def project_to_response(project: Project) -> ProjectResponse:
    return ProjectResponse.model_validate(project)


@router.get("")
def list_projects(
    db: Session = Depends(deps.get_db),
    identity: TokenData = Depends(deps.get_current_identity),
):
    """List all projects for the current user."""
    projects = ProjectRepository.list_by_user(db, identity.user_id)
    return ok("Projects loaded", [project_to_response(p) for p in projects])


@router.post("", status_code=status.HTTP_201_CREATED)
def create_project(
    project_in: ProjectCreate,
    db: Session = Depends(deps.get_db),
    identity: TokenData = Depends(deps.get_current_identity),
):
    """Create a new project."""
    project = ProjectRepository.create(
        db,
        user_id=identity.user_id,
        title=project_in.title,
        description=project_in.description or None,
        status=project_in.status,
    )
    return ok("Project created", project_to_response(project))


@router.get("/{project_id}")
def get_project(project: Project = Depends(deps.get_owned_project)):
    """Get a specific project."""
    return ok("Project loaded", project_to_response(project))


@router.put("/{project_id}")
def update_project(
    project_update: ProjectUpdate,
    project: Project = Depends(deps.get_owned_project),
    db: Session = Depends(deps.get_db),
):
    """Update a project."""
    fields = project_update.model_dump(exclude_unset=True)
    updates = {}

    if fields.get("title"):
        updates["title"] = fields["title"]
    if "description" in fields:
        updates["description"] = fields["description"] or None
    if "cover_image" in fields:
        cover = fields["cover_image"]
        updates["cover_image"] = cover.strip() if cover and cover.strip() else None
    if fields.get("status"):
        updates["status"] = fields["status"]
    if "current_chapter_id" in fields:
        chapter_id = fields["current_chapter_id"]
        if chapter_id is not None:
            chapter = ChapterRepository.get_by_id(db, chapter_id)
            if not chapter or chapter.project_id != project.id:
                raise ValidationError("Chapter does not belong to this project")
        updates["current_chapter_id"] = chapter_id

    project = ProjectRepository.update(db, project.id, updates)
    return ok("Project updated", project_to_response(project))


@router.delete("/{project_id}")
def delete_project(
    project: Project = Depends(deps.get_owned_project),
    db: Session = Depends(deps.get_db),
):
    """Soft-delete a project; it can be restored later."""
    project = ProjectRepository.soft_delete(db, project.id)
    return ok("Project deleted", {"id": project.id, "deleted_at": project.deleted_at})


@router.post("/{project_id}/restore")
def restore_project(
    project_id: int = Path(..., ge=1, le=MAX_ROW_ID),
    db: Session = Depends(deps.get_db),
    identity: TokenData = Depends(deps.get_current_identity),
):
    """Bring back a soft-deleted project."""
    project = ProjectRepository.get_by_id_including_deleted(db, project_id)
    if not project:
        raise NotFoundError("Project not found")
    if project.user_id != identity.user_id:
        raise PermissionDeniedError("Forbidden", error="You do not have access to this project")

    project = ProjectRepository.restore(db, project.id)
    return ok("Project restored", project_to_response(project))
