"""
Project model for novels.
"""

import enum

from sqlalchemy import Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from novelcraft.db.base import Base
from novelcraft.db.types import UTCDateTime, utcnow


class ProjectStatus(str, enum.Enum):
    """Project status enumeration."""

    ACTIVE = "active"
    ARCHIVED = "archived"


class Project(Base):
    """A novel owned by one user. Rows are soft-deleted via ``deleted_at``."""

    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(100), nullable=False)
    description = Column(String(500))
    cover_image = Column(Text)

    # Status
    status = Column(String(20), nullable=False, default=ProjectStatus.ACTIVE.value)

    # Chapter the author last worked on
    current_chapter_id = Column(Integer)

    # Owner
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # Timestamps
    created_at = Column(UTCDateTime(), nullable=False, default=utcnow)
    updated_at = Column(UTCDateTime(), nullable=False, default=utcnow)
    deleted_at = Column(UTCDateTime())

    # Relationships
    owner = relationship("User", back_populates="projects")
    chapters = relationship("Chapter", back_populates="project")
    characters = relationship("Character", back_populates="project")
    world_book = relationship("WorldBook", back_populates="project", uselist=False)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None
