"""
Chapter tree building, parent validation and version snapshots.
"""

import logging
from typing import Any

from sqlalchemy.orm import Session

from novelcraft.core.exceptions import NotFoundError, ValidationError
from novelcraft.models.chapter import Chapter, ChapterType
from novelcraft.models.chapter_version import ChapterVersion
from novelcraft.repositories.chapter_versions import ChapterVersionRepository
from novelcraft.repositories.chapters import ChapterRepository

logger = logging.getLogger(__name__)

MAX_VERSIONS_PER_CHAPTER = 10


def build_chapter_tree(chapters: list[Chapter]) -> dict[str, list[Any]]:
    """
    Group a project's chapters for the sidebar.

    Returns ``{"volumes": [...], "chapters": [...]}`` where each volume
    carries its ``children`` and ``chapters`` holds top-level chapters.
    Input order (order_index, created_at) is preserved.
    """
    volumes = [c for c in chapters if c.type == ChapterType.VOLUME.value]
    volume_ids = {v.id for v in volumes}
    loose = [
        c
        for c in chapters
        if c.type == ChapterType.CHAPTER.value
        and (c.parent_id is None or c.parent_id not in volume_ids)
    ]
    return {
        "volumes": [
            {"volume": v, "children": [c for c in chapters if c.parent_id == v.id]}
            for v in volumes
        ],
        "chapters": loose,
    }


def validate_parent(
    db: Session,
    project_id: int,
    parent_id: int | None,
    chapter_id: int | None = None,
    is_volume: bool = False,
) -> None:
    """A parent must be an existing volume of the same project; volumes stay top level."""
    if parent_id is None:
        return
    if is_volume:
        raise ValidationError("A volume cannot be placed inside another volume")
    if chapter_id is not None and parent_id == chapter_id:
        raise ValidationError("A chapter cannot be its own parent")

    parent = ChapterRepository.get_by_id(db, parent_id)
    if not parent or parent.project_id != project_id:
        raise ValidationError("Parent volume not found in this project")
    if not parent.is_volume:
        raise ValidationError("Parent must be a volume")


def save_version(
    db: Session,
    chapter_id: int,
    content: str,
    created_by: str | None = None,
    commit: bool = True,
) -> ChapterVersion:
    """
    Snapshot ``content`` as the chapter's next version.

    Oldest versions are pruned first so that at most
    ``MAX_VERSIONS_PER_CHAPTER`` remain once the new one is written.
    """
    while (
        ChapterVersionRepository.count_by_chapter(db, chapter_id)
        >= MAX_VERSIONS_PER_CHAPTER
    ):
        ChapterVersionRepository.cleanup_old_versions(db, chapter_id, commit=False)

    next_number = ChapterVersionRepository.max_version_number(db, chapter_id) + 1
    version = ChapterVersionRepository.create(
        db,
        chapter_id=chapter_id,
        version_number=next_number,
        content=content,
        created_by=created_by,
        commit=commit,
    )
    logger.info("Saved version %d of chapter %d", next_number, chapter_id)
    return version


def update_chapter(
    db: Session,
    chapter: Chapter,
    updates: dict[str, Any],
    create_version: bool = False,
    created_by: str | None = None,
) -> Chapter:
    """
    Apply partial updates to a chapter.

    With ``create_version`` and non-empty new content, the new content is
    also stored as a version; snapshot and update commit together.
    """
    if "parent_id" in updates:
        validate_parent(
            db,
            chapter.project_id,
            updates["parent_id"],
            chapter_id=chapter.id,
            is_volume=chapter.is_volume,
        )

    content = updates.get("content")
    if create_version and content:
        save_version(db, chapter.id, content, created_by=created_by, commit=False)

    return ChapterRepository.update(db, chapter.id, updates)


def restore_version(db: Session, chapter: Chapter, version_number: int) -> Chapter:
    """Copy a stored version back into the live chapter without snapshotting."""
    version = ChapterVersionRepository.get_by_chapter_and_version(
        db, chapter.id, version_number
    )
    if not version:
        raise NotFoundError("Version not found")
    logger.info("Restoring chapter %d to version %d", chapter.id, version_number)
    return ChapterRepository.update(db, chapter.id, {"content": version.content})
