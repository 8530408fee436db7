"""
Chapter model for novel content.
"""

import enum

from sqlalchemy import Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from novelcraft.db.base import Base
from novelcraft.db.types import UTCDateTime, utcnow


class ChapterType(str, enum.Enum):
    """A volume groups chapters; a chapter holds text."""

    VOLUME = "volume"
    CHAPTER = "chapter"


class Chapter(Base):
    """Chapter or volume node inside a project."""

    __tablename__ = "chapters"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(100), nullable=False)

    # Content
    content = Column(Text, nullable=False, default="")
    word_count = Column(Integer, nullable=False, default=0)  # len(content)

    # Tree position
    type = Column(String(20), nullable=False, default=ChapterType.CHAPTER.value)
    parent_id = Column(Integer, ForeignKey("chapters.id"))
    order_index = Column(Integer, nullable=False, default=0)

    # Foreign keys
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)

    # Timestamps
    created_at = Column(UTCDateTime(), nullable=False, default=utcnow)
    updated_at = Column(UTCDateTime(), nullable=False, default=utcnow)
    deleted_at = Column(UTCDateTime())

    # Relationships
    project = relationship("Project", back_populates="chapters")
    versions = relationship(
        "ChapterVersion",
        back_populates="chapter",
        order_by="ChapterVersion.version_number",
    )

    @property
    def is_volume(self) -> bool:
        return self.type == ChapterType.VOLUME.value
