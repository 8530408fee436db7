"""
World book model: one per project.
"""

from sqlalchemy import JSON, Column, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship

from novelcraft.db.base import Base
from novelcraft.db.types import UTCDateTime, utcnow


class WorldBook(Base):
    """Free-text world notes plus a structured outline."""

    __tablename__ = "world_books"

    id = Column(Integer, primary_key=True, autoincrement=True)
    project_id = Column(
        Integer, ForeignKey("projects.id"), nullable=False, unique=True, index=True
    )

    content = Column(Text, nullable=False, default="")
    outline = Column(JSON)

    # Timestamps
    created_at = Column(UTCDateTime(), nullable=False, default=utcnow)
    updated_at = Column(UTCDateTime(), nullable=False, default=utcnow)

    # Relationships
    project = relationship("Project", back_populates="world_book")
