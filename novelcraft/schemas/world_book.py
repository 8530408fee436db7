from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict


class WorldBookUpsert(BaseModel):
    content: str | None = ""
    outline: Any = None


class WorldBookResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    project_id: int
    content: str
    outline: Any = None
    created_at: datetime
    updated_at: datetime
