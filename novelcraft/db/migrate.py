"""
SQL migration runner.

Migrations are plain ``.sql`` files in ``novelcraft/db/migrations``. They are
applied in filename order, each statement separated by ``;``, and every
applied file (name without extension) is recorded in the ``migrations``
table so it only runs once.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from sqlalchemy import (
    Column,
    DateTime,
    Integer,
    MetaData,
    String,
    Table,
    func,
    inspect,
    select,
    text,
)
from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).parent / "migrations"
MIGRATION_TABLE_NAME = "migrations"

_metadata = MetaData()

migrations_table = Table(
    MIGRATION_TABLE_NAME,
    _metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(255), nullable=False, unique=True),
    Column("applied_at", DateTime, nullable=False, server_default=func.now()),
)


@dataclass
class MigrationFile:
    name: str
    path: Path

    def statements(self) -> list[str]:
        sql = self.path.read_text(encoding="utf-8")
        return [s.strip() for s in sql.split(";") if s.strip()]


@dataclass
class MigrationStatus:
    applied: list[str] = field(default_factory=list)
    pending: list[str] = field(default_factory=list)
    total: int = 0


class MigrationManager:
    """Applies pending SQL migrations against an engine."""

    def __init__(self, engine: Engine, migrations_dir: Path = MIGRATIONS_DIR):
        self.engine = engine
        self.migrations_dir = Path(migrations_dir)

    def initialize(self) -> None:
        """Create the tracking table if needed."""
        _metadata.create_all(self.engine, tables=[migrations_table])

    def get_migration_files(self) -> list[MigrationFile]:
        if not self.migrations_dir.exists():
            return []
        return [
            MigrationFile(name=path.stem, path=path)
            for path in sorted(self.migrations_dir.glob("*.sql"), key=lambda p: p.name)
        ]

    def get_applied_migrations(self) -> set[str]:
        if not inspect(self.engine).has_table(MIGRATION_TABLE_NAME):
            return set()
        with self.engine.connect() as conn:
            rows = conn.execute(select(migrations_table.c.name))
            return {row.name for row in rows}

    def run_migrations(self) -> list[str]:
        """Apply every pending migration; returns the names applied."""
        self.initialize()
        applied = self.get_applied_migrations()
        newly_applied = []

        for migration in self.get_migration_files():
            if migration.name in applied:
                continue
            logger.info("Applying migration %s", migration.name)
            # One transaction per file: statements and bookkeeping commit together
            with self.engine.begin() as conn:
                for statement in migration.statements():
                    conn.execute(text(statement))
                conn.execute(migrations_table.insert().values(name=migration.name))
            newly_applied.append(migration.name)

        logger.info("Migrations complete (%d applied)", len(newly_applied))
        return newly_applied

    def status(self) -> MigrationStatus:
        applied = self.get_applied_migrations()
        names = [m.name for m in self.get_migration_files()]
        return MigrationStatus(
            applied=sorted(applied),
            pending=[name for name in names if name not in applied],
            total=len(names),
        )


def run_migrations(engine: Engine) -> list[str]:
    return MigrationManager(engine).run_migrations()


def get_migration_status(engine: Engine) -> MigrationStatus:
    return MigrationManager(engine).status()
