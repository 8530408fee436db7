"""Authentication endpoints."""

import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from novelcraft.api.deps import get_current_user, get_db, get_rate_limiter
from novelcraft.core.config import settings
from novelcraft.core.exceptions import (
    AuthenticationError,
    PermissionDeniedError,
    RateLimitExceededError,
    ValidationError,
)
from novelcraft.models.user import User
from novelcraft.repositories.users import UserRepository
from novelcraft.schemas.auth import AuthData, UserLogin, UserRegister, UserResponse
from novelcraft.schemas.common import ok
from novelcraft.services.auth import AuthService, validate_username
from novelcraft.services.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

router = APIRouter()


def login_payload(response: Response, user: User, auth_method: str | None = None) -> dict:
    """Issue a token for ``user``, set the cookie and build the response data."""
    token = AuthService.issue_token_for(user, auth_method)
    expires_in = settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60
    response.set_cookie(
        settings.TOKEN_COOKIE_NAME,
        token,
        max_age=expires_in,
        httponly=False,
        samesite="lax",
        secure=settings.is_production,
    )
    return AuthData(
        token=token,
        expires_in=expires_in,
        user=UserResponse.model_validate(user),
    ).model_dump()


@router.post("/login")
def login(
    credentials: UserLogin,
    response: Response,
    db: Session = Depends(get_db),
    rate_limiter: RateLimiter = Depends(get_rate_limiter),
):
    """Login user and return access token."""
    username = credentials.username.strip()
    if not validate_username(username):
        raise ValidationError("Username must be a valid email address")

    limit = rate_limiter.is_limited(username)
    if limit.limited:
        raise RateLimitExceededError(retry_after=limit.remaining_time or 0)

    user = AuthService.authenticate_user(db, username, credentials.password)
    if not user:
        rate_limiter.record_attempt(username)
        logger.info("Failed login for %s", username)
        raise AuthenticationError("Incorrect username or password")

    rate_limiter.reset_attempts(username)
    previous_login = user.last_login_at
    user = UserRepository.update_last_login(db, user.id)

    data = login_payload(response, user)
    # Report the login before this one, like "last seen"
    data["user"]["last_login_at"] = previous_login
    return ok("Login successful", data)


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(user_data: UserRegister, db: Session = Depends(get_db)):
    """Register a new user. Disabled in production unless explicitly allowed."""
    if settings.is_production and not settings.ALLOW_REGISTRATION:
        raise PermissionDeniedError("Registration is disabled, contact the administrator")

    user = AuthService.register_user(
        db,
        username=user_data.username.strip(),
        password=user_data.password,
        confirm_password=user_data.confirm_password,
    )
    return ok("User registered", UserResponse.model_validate(user))


@router.post("/demo")
def demo_login(response: Response, db: Session = Depends(get_db)):
    """Log in as the shared demo user, creating it on first use."""
    user = AuthService.get_or_create_demo_user(db)
    user = UserRepository.update_last_login(db, user.id)
    return ok("Demo login successful", login_payload(response, user))


@router.post("/logout")
def logout(response: Response):
    response.delete_cookie(settings.TOKEN_COOKIE_NAME)
    return ok("Logged out")


@router.get("/me")
def read_current_user(current_user: User = Depends(get_current_user)):
    return ok("Current user", UserResponse.model_validate(current_user))
