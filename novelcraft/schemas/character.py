from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from novelcraft.schemas.common import Title


class CharacterCreate(BaseModel):
    name: Title
    description: str = Field(..., min_length=1)
    alias: str | None = None
    avatar_url: str | None = None
    tags: list[str] | None = None


class CharacterUpdate(BaseModel):
    name: Title | None = None
    description: str | None = Field(None, min_length=1)
    alias: str | None = None
    avatar_url: str | None = None
    tags: list[str] | None = None


class CharacterResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    project_id: int
    name: str
    alias: str | None = None
    description: str
    avatar_url: str | None = None
    tags: list[str] | None = None
    created_at: datetime
    updated_at: datetime
