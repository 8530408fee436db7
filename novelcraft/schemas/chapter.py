from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from novelcraft.schemas.common import MAX_ROW_ID, RowId, Title

ChapterTypeValue = Literal["volume", "chapter"]


class ChapterCreate(BaseModel):
    title: Title
    content: str = ""
    type: ChapterTypeValue = "chapter"
    parent_id: RowId | None = None
    order_index: int = Field(0, ge=0, le=MAX_ROW_ID)


class ChapterUpdate(BaseModel):
    title: Title | None = None
    content: str | None = None
    parent_id: RowId | None = None
    order_index: int | None = Field(None, ge=0, le=MAX_ROW_ID)
    create_version: bool = False


class ChapterResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    project_id: int
    title: str
    content: str
    word_count: int
    type: str
    parent_id: int | None = None
    order_index: int
    created_at: datetime
    updated_at: datetime


class VolumeResponse(ChapterResponse):
    children: list[ChapterResponse] = []


class ChapterTree(BaseModel):
    volumes: list[VolumeResponse]
    chapters: list[ChapterResponse]


class ChapterVersionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    chapter_id: int
    version_number: int
    content: str
    created_by: str | None = None
    created_at: datetime
