from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class UserLogin(BaseModel):
    """Schema for user login"""

    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserRegister(BaseModel):
    """Schema for user registration"""

    model_config = ConfigDict(populate_by_name=True)

    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    confirm_password: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("confirm_password", "confirmPassword"),
    )


class TokenData(BaseModel):
    """Verified identity carried by a token"""

    model_config = ConfigDict(frozen=True)

    user_id: int
    username: str
    auth_method: str
    expires_at: datetime | None = None


class UserResponse(BaseModel):
    """Schema for user response"""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    auth_method: str
    last_login_at: datetime | None = None
    created_at: datetime | None = None


class AuthData(BaseModel):
    """Payload of a successful login"""

    token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Token expiration time in seconds")
    user: UserResponse


class PasskeyVerifyRequest(BaseModel):
    """Browser response to a passkey ceremony"""

    username: str | None = None
    credential: dict[str, Any] | None = None
    challenge: str | None = None
