"""
Password hashing, JWT handling and credential validation.
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from novelcraft.core.config import settings
from novelcraft.core.exceptions import ConflictError, ValidationError
from novelcraft.models.user import User
from novelcraft.repositories.users import UserRepository
from novelcraft.schemas.auth import TokenData

logger = logging.getLogger(__name__)

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)

USERNAME_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
SPECIAL_CHARACTERS = re.compile(r"[!@#$%^&*()_+\-=\[\]{};':\"\\|,.<>/?]")
REPEATED_CHARACTERS = re.compile(r"(.)\1{2,}")
COMMON_PATTERNS = re.compile(r"12345|abcde|qwerty|asdfgh")
WEAK_PASSWORDS = frozenset(
    {
        "password",
        "12345678",
        "qwertyui",
        "admin123",
        "letmein",
        "welcome",
        "monkey",
        "dragon",
        "sunshine",
        "iloveyou",
    }
)


@dataclass(frozen=True)
class PasswordCheck:
    valid: bool
    message: str


def hash_password(password: str) -> str:
    """Hash a password"""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash; unknown hash formats never match."""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        return False


def generate_token(
    user_id: int,
    username: str,
    auth_method: str,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a signed JWT access token"""
    now = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode = {
        "sub": str(user_id),
        "username": username,
        "auth_method": auth_method,
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def verify_token(token: str | None) -> TokenData | None:
    """Verify and decode a JWT token. Any failure yields None."""
    try:
        # Handle edge cases
        if not token or not isinstance(token, str):
            return None

        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        user_id = payload.get("sub")
        username = payload.get("username")
        auth_method = payload.get("auth_method")
        if user_id is None or not username or not auth_method:
            return None

        exp = payload.get("exp")
        return TokenData(
            user_id=int(user_id),
            username=username,
            auth_method=auth_method,
            expires_at=datetime.fromtimestamp(exp, tz=timezone.utc) if exp else None,
        )
    except JWTError as e:
        logger.debug("JWT verification failed: %s", e)
        return None
    except (TypeError, ValueError, OverflowError):
        # Malformed claims (e.g. a non-numeric subject)
        return None


def validate_username(username: str) -> bool:
    """Usernames are email addresses."""
    return bool(username) and USERNAME_PATTERN.match(username) is not None


def validate_password_strength(password: str) -> PasswordCheck:
    """Check a password against the policy, reporting the first violation only."""
    if len(password) < 8:
        return PasswordCheck(False, "Password must be at least 8 characters long")
    if not re.search(r"[A-Z]", password):
        return PasswordCheck(False, "Password must contain at least one uppercase letter")
    if not re.search(r"[a-z]", password):
        return PasswordCheck(False, "Password must contain at least one lowercase letter")
    if not re.search(r"\d", password):
        return PasswordCheck(False, "Password must contain at least one digit")
    if not SPECIAL_CHARACTERS.search(password):
        return PasswordCheck(
            False, "Password must contain at least one special character (e.g. !@#$%)"
        )
    if password.lower() in WEAK_PASSWORDS:
        return PasswordCheck(False, "Password is too common, choose a stronger one")
    if REPEATED_CHARACTERS.search(password):
        return PasswordCheck(False, "Password contains too many repeated characters")
    if COMMON_PATTERNS.search(password.lower()):
        return PasswordCheck(False, "Password contains a common, easily guessed pattern")
    return PasswordCheck(True, "Password meets the strength requirements")


class AuthService:
    """Service for handling authentication operations"""

    @staticmethod
    def authenticate_user(db: Session, username: str, password: str) -> User | None:
        """Authenticate a user by username and password"""
        user = UserRepository.get_by_username(db, username)
        if not user:
            return None
        if not verify_password(password, user.password_hash):
            return None
        return user

    @staticmethod
    def register_user(
        db: Session, username: str, password: str, confirm_password: str
    ) -> User:
        """Validate and create a password-authenticated user."""
        if not validate_username(username):
            raise ValidationError("Username must be a valid email address")

        check = validate_password_strength(password)
        if not check.valid:
            raise ValidationError(check.message)

        if password != confirm_password:
            raise ValidationError("Passwords do not match")

        if UserRepository.get_by_username(db, username):
            raise ConflictError("Username already exists")

        user = UserRepository.create(
            db,
            username=username,
            password_hash=hash_password(password),
            auth_method="password",
        )
        logger.info("Registered user %s (id=%s)", user.username, user.id)
        return user

    @staticmethod
    def get_or_create_demo_user(db: Session) -> User:
        """Get or create the shared demo account."""
        user = UserRepository.get_by_username(db, settings.DEMO_USERNAME)
        if user:
            return user

        user = UserRepository.create(
            db,
            username=settings.DEMO_USERNAME,
            password_hash=hash_password(settings.DEMO_PASSWORD),
            auth_method="password",
        )
        logger.info("Created demo user %s", user.username)
        return user

    @staticmethod
    def issue_token_for(user: User, auth_method: str | None = None) -> str:
        return generate_token(user.id, user.username, auth_method or user.auth_method)
