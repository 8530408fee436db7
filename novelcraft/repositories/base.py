"""Helpers shared by the repositories."""

from typing import Any

from sqlalchemy.orm import Session

from novelcraft.db.types import utcnow


def apply_updates(row, updates: dict[str, Any]) -> None:
    """Merge partial fields into a row and stamp ``updated_at``."""
    for key, value in updates.items():
        if not hasattr(row, key):
            raise AttributeError(f"{type(row).__name__} has no field {key!r}")
        setattr(row, key, value)
    if hasattr(row, "updated_at"):
        row.updated_at = utcnow()


def save(db: Session, row, commit: bool = True):
    db.add(row)
    if commit:
        db.commit()
        db.refresh(row)
    else:
        db.flush()
    return row
