"""
Repositories: one per table, each a set of static methods over a Session.
"""

from novelcraft.repositories.chapter_versions import ChapterVersionRepository
from novelcraft.repositories.chapters import ChapterRepository
from novelcraft.repositories.characters import CharacterRepository
from novelcraft.repositories.projects import ProjectRepository
from novelcraft.repositories.users import UserRepository
from novelcraft.repositories.world_books import WorldBookRepository

__all__ = [
    "UserRepository",
    "ProjectRepository",
    "ChapterRepository",
    "ChapterVersionRepository",
    "CharacterRepository",
    "WorldBookRepository",
]
