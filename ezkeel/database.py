"""Detection of an application's database engine and migration tool."""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from ezkeel.framework import read_package_json


class DBEngine(str, Enum):
    """A database engine; NONE means nothing was detected."""

    NONE = ""
    POSTGRES = "postgres"
    MYSQL = "mysql"
    SQLITE = "sqlite"

    def __str__(self) -> str:
        return self.value


class Migrator(str, Enum):
    """A database migration tool; NONE means nothing was detected."""

    NONE = ""
    PRISMA = "prisma"
    DRIZZLE = "drizzle"
    ALEMBIC = "alembic"
    DJANGO = "django"

    def __str__(self) -> str:
        return self.value


@dataclass
class DatabaseResult:
    """The detected engine, migrator and migration command.

    ``version`` is only set from a deploy spec; detection leaves it empty.
    """

    engine: DBEngine = DBEngine.NONE
    migrator: Migrator = Migrator.NONE
    migrate_cmd: str = ""
    version: str = ""


def _read_text(path: Path) -> str | None:
    try:
        return path.read_bytes().decode("utf-8", errors="replace")
    except OSError:
        return None


def _engine_from_text(lower: str) -> DBEngine:
    if "postgresql" in lower or "postgres" in lower:
        return DBEngine.POSTGRES
    if "mysql" in lower:
        return DBEngine.MYSQL
    if "sqlite" in lower:
        return DBEngine.SQLITE
    return DBEngine.NONE


def _prisma_provider(content: str) -> DBEngine:
    for line in content.split("\n"):
        line = line.strip()
        if not line.startswith("provider"):
            continue
        engine = _engine_from_text(line.lower())
        if engine is not DBEngine.NONE:
            return engine
    return DBEngine.NONE


def _detect_prisma(root: Path) -> DatabaseResult | None:
    content = _read_text(root / "prisma" / "schema.prisma")
    if content is None:
        return None
    engine = _prisma_provider(content)
    if engine is DBEngine.NONE:
        return None
    return DatabaseResult(
        engine=engine,
        migrator=Migrator.PRISMA,
        migrate_cmd="npx prisma migrate deploy",
    )


def _detect_drizzle(root: Path) -> DatabaseResult | None:
    content = next(
        (
            text
            for text in (
                _read_text(root / name)
                for name in ("drizzle.config.ts", "drizzle.config.js")
            )
            if text is not None
        ),
        "",
    )
    if not content:
        return None
    engine = _engine_from_text(content.lower())
    if engine is DBEngine.NONE:
        return None
    return DatabaseResult(engine=engine, migrator=Migrator.DRIZZLE)


_NODE_CLIENTS: tuple[tuple[DBEngine, tuple[str, ...]], ...] = (
    (DBEngine.POSTGRES, ("pg", "@neondatabase/serverless", "postgres")),
    (DBEngine.MYSQL, ("mysql2", "mysql")),
    (DBEngine.SQLITE, ("better-sqlite3", "sqlite3", "@libsql/client")),
)


def _detect_node(root: Path) -> DatabaseResult | None:
    package = read_package_json(root)
    if package is None:
        return None
    for engine, deps in _NODE_CLIENTS:
        if any(package.has_dep(dep) for dep in deps):
            return DatabaseResult(engine=engine)
    return None


def _detect_python(root: Path) -> DatabaseResult | None:
    text = _read_text(root / "requirements.txt")
    if text is None:
        return None
    content = text.lower()

    if "alembic" in content:
        migrator = Migrator.ALEMBIC
    elif "django" in content:
        migrator = Migrator.DJANGO
    else:
        migrator = Migrator.NONE

    if any(name in content for name in ("psycopg2", "asyncpg", "psycopg")):
        return DatabaseResult(engine=DBEngine.POSTGRES, migrator=migrator)
    if any(name in content for name in ("mysqlclient", "pymysql", "aiomysql")):
        return DatabaseResult(engine=DBEngine.MYSQL, migrator=migrator)
    # SQLAlchemy without a known adapter is assumed to target Postgres.
    if "sqlalchemy" in content:
        return DatabaseResult(engine=DBEngine.POSTGRES, migrator=migrator)
    if "django" in content:
        return DatabaseResult(engine=DBEngine.SQLITE, migrator=Migrator.DJANGO)
    return None


def _detect_env_example(root: Path) -> DatabaseResult | None:
    text = _read_text(root / ".env.example")
    if text is None:
        return None
    for line in text.split("\n"):
        line = line.strip()
        if not line.upper().startswith("DATABASE_URL"):
            continue
        lower = line.lower()
        if "postgresql://" in lower or "postgres://" in lower:
            return DatabaseResult(engine=DBEngine.POSTGRES)
        if "mysql://" in lower:
            return DatabaseResult(engine=DBEngine.MYSQL)
        if "sqlite://" in lower or "sqlite3://" in lower:
            return DatabaseResult(engine=DBEngine.SQLITE)
    return None


_DETECTORS: tuple[Callable[[Path], DatabaseResult | None], ...] = (
    _detect_prisma,
    _detect_drizzle,
    _detect_node,
    _detect_python,
    _detect_env_example,
)


def detect_database(directory: str | os.PathLike) -> DatabaseResult:
    """Scan ``directory`` and return the best-matching database settings.

    Priority: Prisma schema, Drizzle config, package.json clients, Python
    requirements, then DATABASE_URL in .env.example.
    """
    root = Path(directory)
    for detector in _DETECTORS:
        result = detector(root)
        if result is not None:
            return result
    return DatabaseResult()