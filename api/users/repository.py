"""
Users persistence (raw SQL).
"""

from __future__ import annotations

from typing import Any

from core.db import Database


async def list_users(database: Database) -> list[dict[str, Any]]:
    # No ORDER BY: rows come back in whatever order the store returns them.
    return await database.fetch_all(
        """
        SELECT uuid, name
        FROM users
        """
    )


async def create_user(database: Database, *, uuid: str, name: str) -> None:
    await database.execute(
        """
        INSERT INTO users (uuid, name)
        VALUES ($1, $2)
        """,
        uuid,
        name,
    )
