"""
Database models for NovelCraft.
"""

from novelcraft.models.chapter import Chapter, ChapterType
from novelcraft.models.chapter_version import ChapterVersion
from novelcraft.models.character import Character
from novelcraft.models.project import Project, ProjectStatus
from novelcraft.models.user import User
from novelcraft.models.world_book import WorldBook

__all__ = [
    "User",
    "Project",
    "ProjectStatus",
    "Chapter",
    "ChapterType",
    "ChapterVersion",
    "Character",
    "WorldBook",
]
