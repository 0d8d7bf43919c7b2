"""
Post persistence.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

from core.db import Database, affected_rows

_COLUMNS = "id, title, body, images, videos, audio, created_at, updated_at"


async def list_posts(database: Database) -> list[dict[str, Any]]:
    return await database.fetch_all(
        f"""
        SELECT {_COLUMNS}
        FROM posts
        ORDER BY created_at DESC, seq DESC
        """
    )


async def search_posts(database: Database, query: str) -> list[dict[str, Any]]:
    """
    Case-insensitive literal substring match on title or body.
    """
    return await database.fetch_all(
        f"""
        SELECT {_COLUMNS}
        FROM posts
        WHERE strpos(lower(title), lower($1)) > 0
           OR strpos(lower(COALESCE(body, '')), lower($1)) > 0
        ORDER BY created_at DESC, seq DESC
        """,
        query,
    )


async def get_post(database: Database, post_id: UUID) -> dict[str, Any] | None:
    return await database.fetch_one(
        f"""
        SELECT {_COLUMNS}
        FROM posts
        WHERE id = $1
        """,
        post_id,
    )


async def create_post(
    database: Database,
    *,
    title: str,
    body: str | None,
    images: list[str],
    videos: list[str],
    audio: list[str],
) -> dict[str, Any]:
    row = await database.fetch_one(
        f"""
        INSERT INTO posts (title, body, images, videos, audio)
        VALUES ($1, $2, $3::text[], $4::text[], $5::text[])
        RETURNING {_COLUMNS}
        """,
        title,
        body,
        images,
        videos,
        audio,
    )
    if row is None:
        raise RuntimeError("Failed to insert post.")
    return row


async def update_post(
    database: Database,
    post_id: UUID,
    *,
    title: str | None = None,
    body: str | None = None,
) -> dict[str, Any] | None:
    # Media lists are fixed at creation.
    return await database.fetch_one(
        f"""
        UPDATE posts
        SET title = COALESCE($2, title),
            body = COALESCE($3, body),
            updated_at = now()
        WHERE id = $1
        RETURNING {_COLUMNS}
        """,
        post_id,
        title,
        body,
    )


async def delete_post(database: Database, post_id: UUID) -> bool:
    status = await database.execute(
        """
        DELETE FROM posts
        WHERE id = $1
        """,
        post_id,
    )
    return affected_rows(status) > 0
