"""World book endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from novelcraft.api import deps
from novelcraft.models.project import Project
from novelcraft.repositories.world_books import WorldBookRepository
from novelcraft.schemas.common import ok
from novelcraft.schemas.world_book import WorldBookResponse, WorldBookUpsert

router = APIRouter()


@router.get("")
def get_world_book(
    project: Project = Depends(deps.get_owned_project),
    db: Session = Depends(deps.get_db),
):
    """The project's world book; data is null until one is saved."""
    world_book = WorldBookRepository.get_by_project(db, project.id)
    data = WorldBookResponse.model_validate(world_book) if world_book else None
    return ok("World book loaded", data)


@router.post("")
@router.put("")
def save_world_book(
    world_book_in: WorldBookUpsert,
    project: Project = Depends(deps.get_owned_project),
    db: Session = Depends(deps.get_db),
):
    world_book = WorldBookRepository.upsert(
        db,
        project_id=project.id,
        content=world_book_in.content or "",
        outline=world_book_in.outline or None,
    )
    return ok("World book saved", WorldBookResponse.model_validate(world_book))
