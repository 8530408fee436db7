from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict

from novelcraft.schemas.common import Description, RowId, Title

ProjectStatusValue = Literal["active", "archived"]


class ProjectCreate(BaseModel):
    title: Title
    description: Description | None = None
    status: ProjectStatusValue = "active"


class ProjectUpdate(BaseModel):
    title: Title | None = None
    description: Description | None = None
    cover_image: str | None = None
    status: ProjectStatusValue | None = None
    current_chapter_id: RowId | None = None


class ProjectResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    title: str
    description: str | None = None
    cover_image: str | None = None
    status: str
    current_chapter_id: int | None = None
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None
