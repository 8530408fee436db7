"""
Character model.
"""

from sqlalchemy import JSON, Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from novelcraft.db.base import Base
from novelcraft.db.types import UTCDateTime, utcnow


class Character(Base):
    __tablename__ = "characters"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    alias = Column(String(255))
    description = Column(Text, nullable=False)
    avatar_url = Column(Text)
    tags = Column(JSON)  # list of strings

    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)

    # Timestamps
    created_at = Column(UTCDateTime(), nullable=False, default=utcnow)
    updated_at = Column(UTCDateTime(), nullable=False, default=utcnow)
    deleted_at = Column(UTCDateTime())

    # Relationships
    project = relationship("Project", back_populates="characters")
