"""
Chapter version model: immutable content snapshots.
"""

from sqlalchemy import Column, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from novelcraft.db.base import Base
from novelcraft.db.types import UTCDateTime, utcnow


class ChapterVersion(Base):
    """Snapshot of a chapter's content, numbered from 1 per chapter."""

    __tablename__ = "chapter_versions"
    __table_args__ = (
        UniqueConstraint("chapter_id", "version_number", name="uq_chapter_version"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    version_number = Column(Integer, nullable=False)

    # Content
    content = Column(Text, nullable=False)

    # Chapter
    chapter_id = Column(Integer, ForeignKey("chapters.id"), nullable=False, index=True)

    # Username or agent name
    created_by = Column(String(255))

    # Timestamps
    created_at = Column(UTCDateTime(), nullable=False, default=utcnow)

    # Relationships
    chapter = relationship("Chapter", back_populates="versions")
