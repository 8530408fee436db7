"""NovelCraft: a novel-writing project management API."""

__version__ = "0.1.0"
