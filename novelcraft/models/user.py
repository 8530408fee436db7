"""
User model for authentication.
"""

from sqlalchemy import Column, Integer, String, Text
from sqlalchemy.orm import relationship

from novelcraft.db.base import Base
from novelcraft.db.types import UTCDateTime, utcnow


class User(Base):
    """An author account; the username is an email address."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)

    # "password" or "passkey", see novelcraft.services.passkey.AuthMethod
    auth_method = Column(String(20), nullable=False, default="password")
    passkey_credential = Column(Text)  # JSON encoded credential

    # Timestamps
    last_login_at = Column(UTCDateTime())
    created_at = Column(UTCDateTime(), nullable=False, default=utcnow)
    updated_at = Column(UTCDateTime(), nullable=False, default=utcnow)

    # Relationships
    projects = relationship("Project", back_populates="owner")
