"""Character endpoints."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from novelcraft.api import deps
from novelcraft.models.character import Character
from novelcraft.models.project import Project
from novelcraft.repositories.characters import CharacterRepository
from novelcraft.schemas.character import CharacterCreate, CharacterResponse, CharacterUpdate
from novelcraft.schemas.common import ok

router = APIRouter()


@router.get("")
def list_characters(
    project: Project = Depends(deps.get_owned_project),
    db: Session = Depends(deps.get_db),
):
    characters = CharacterRepository.list_by_project(db, project.id)
    return ok("Characters loaded", [CharacterResponse.model_validate(c) for c in characters])


@router.post("", status_code=status.HTTP_201_CREATED)
def create_character(
    character_in: CharacterCreate,
    project: Project = Depends(deps.get_owned_project),
    db: Session = Depends(deps.get_db),
):
    character = CharacterRepository.create(
        db,
        project_id=project.id,
        name=character_in.name,
        description=character_in.description,
        alias=character_in.alias or None,
        avatar_url=character_in.avatar_url or None,
        tags=character_in.tags,
    )
    return ok("Character created", CharacterResponse.model_validate(character))


@router.get("/{character_id}")
def get_character(character: Character = Depends(deps.get_project_character)):
    return ok("Character loaded", CharacterResponse.model_validate(character))


@router.put("/{character_id}")
def update_character(
    character_update: CharacterUpdate,
    character: Character = Depends(deps.get_project_character),
    db: Session = Depends(deps.get_db),
):
    fields = character_update.model_dump(exclude_unset=True)
    # name and description are required columns
    updates = {
        k: v for k, v in fields.items() if v is not None or k not in ("name", "description")
    }
    character = CharacterRepository.update(db, character.id, updates)
    return ok("Character updated", CharacterResponse.model_validate(character))


@router.delete("/{character_id}")
def delete_character(
    character: Character = Depends(deps.get_project_character),
    db: Session = Depends(deps.get_db),
):
    character = CharacterRepository.soft_delete(db, character.id)
    return ok("Character deleted", {"id": character.id, "deleted_at": character.deleted_at})
