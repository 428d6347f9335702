"""
Startup schema bootstrap.

Runs before the app serves traffic:
1. create the database if it does not exist
2. create the `users` table if it does not exist
3. insert the seed users if they are missing

Every step is idempotent. Any failure raises `BootstrapError`, which aborts
application startup.
"""

from __future__ import annotations

import logging

import asyncpg

from .config import Settings

logger = logging.getLogger(__name__)

SEED_USERS: list[tuple[str, str]] = [
    ("123e4567-e89b-12d3-a456-426614174000", "Alice"),
    ("123e4567-e89b-12d3-a456-426614174001", "Bob"),
    ("123e4567-e89b-12d3-a456-426614174002", "Charlie"),
]

CREATE_USERS_TABLE = """
CREATE TABLE IF NOT EXISTS users (
    uuid VARCHAR(36) PRIMARY KEY,
    name VARCHAR(100) NOT NULL
)
"""

INSERT_SEED_USER = """
INSERT INTO users (uuid, name)
VALUES ($1, $2)
ON CONFLICT (uuid) DO NOTHING
"""


class BootstrapError(RuntimeError):
    pass


# Databases that exist on every PostgreSQL server, tried in order.
MAINTENANCE_DATABASES = ("postgres", "template1")


def _quote_ident(name: str) -> str:
    return '"' + name.replace('"', '""') + '"'


async def _connect_server(settings: Settings) -> asyncpg.Connection:
    """
    Open a server-level connection through a maintenance database.

    The login role may have no database of its own name, so the DSN's
    default database cannot be relied on.
    """
    for database in MAINTENANCE_DATABASES[:-1]:
        try:
            return await asyncpg.connect(dsn=settings.dsn(), database=database)
        except asyncpg.InvalidCatalogNameError:
            logger.info("maintenance_database_missing name=%s", database)
    return await asyncpg.connect(dsn=settings.dsn(), database=MAINTENANCE_DATABASES[-1])


async def ensure_database(settings: Settings) -> bool:
    """
    Create `settings.db_name` if missing. Returns True when it was created.
    """
    conn = await _connect_server(settings)
    try:
        exists = await conn.fetchval("SELECT 1 FROM pg_database WHERE datname = $1", settings.db_name)
        if exists:
            return False
        try:
            # CREATE DATABASE takes no bind parameters.
            await conn.execute(f"CREATE DATABASE {_quote_ident(settings.db_name)}")
        except asyncpg.DuplicateDatabaseError:
            return False
        return True
    finally:
        await conn.close()


async def ensure_schema(settings: Settings) -> None:
    conn = await asyncpg.connect(dsn=settings.dsn(settings.db_name))
    try:
        await conn.execute(CREATE_USERS_TABLE)
        await conn.executemany(INSERT_SEED_USER, SEED_USERS)
    finally:
        await conn.close()


async def run(settings: Settings) -> None:
    logger.info("bootstrap_started dsn=%s", settings.redacted_dsn(settings.db_name))
    try:
        created = await ensure_database(settings)
        logger.info("database_ready name=%s created=%s", settings.db_name, created)
        await ensure_schema(settings)
    except (OSError, asyncpg.PostgresError, asyncpg.InterfaceError) as exc:
        logger.exception("bootstrap_failed name=%s", settings.db_name)
        raise BootstrapError(f"Database bootstrap failed: {exc}") from exc
    logger.info("bootstrap_complete table=users seed_users=%d", len(SEED_USERS))
