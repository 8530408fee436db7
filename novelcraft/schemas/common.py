from typing import Annotated, Any

from pydantic import BaseModel, Field, StringConstraints

# Trimmed, non-empty strings with the caps the UI enforces
Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]
Description = Annotated[str, StringConstraints(strip_whitespace=True, max_length=500)]

# Largest value a SQLite INTEGER column can hold
MAX_ROW_ID = 2**63 - 1
RowId = Annotated[int, Field(ge=1, le=MAX_ROW_ID)]


class ApiResponse(BaseModel):
    """JSON envelope returned by every endpoint."""

    success: bool
    message: str
    data: Any = None
    error: str | None = None


def ok(message: str, data: Any = None) -> ApiResponse:
    return ApiResponse(success=True, message=message, data=data)
