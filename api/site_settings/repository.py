"""
Singleton settings persistence (fonts, platforms, contacts).

Each table holds at most one live row. `replace_*` deletes and inserts inside
one transaction while holding a SHARE ROW EXCLUSIVE lock, so two concurrent
replaces serialize and readers keep seeing the previous row until commit.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

from core.db import Database, affected_rows, row_dict

_FONT_COLUMNS = "id, font_color, font_size, font_family, created_at, updated_at"
_PLATFORM_COLUMNS = "id, text, image, created_at, updated_at"
_CONTACT_COLUMNS = "id, text, created_at, updated_at"


# Fonts

async def get_font(database: Database) -> dict[str, Any] | None:
    return await database.fetch_one(
        f"""
        SELECT {_FONT_COLUMNS}
        FROM fonts
        ORDER BY created_at DESC
        LIMIT 1
        """
    )


async def replace_font(
    database: Database,
    *,
    font_color: str | None,
    font_size: int | None,
    font_family: str | None,
) -> dict[str, Any]:
    async with database.transaction() as conn:
        await conn.execute("LOCK TABLE fonts IN SHARE ROW EXCLUSIVE MODE")
        await conn.execute("DELETE FROM fonts")
        row = await conn.fetchrow(
            f"""
            INSERT INTO fonts (font_color, font_size, font_family)
            VALUES ($1, $2, $3)
            RETURNING {_FONT_COLUMNS}
            """,
            font_color,
            font_size,
            font_family,
        )
    if row is None:
        raise RuntimeError("Failed to insert font.")
    return row_dict(row)


async def update_font(
    database: Database,
    font_id: UUID,
    *,
    font_color: str | None = None,
    font_size: int | None = None,
    font_family: str | None = None,
) -> dict[str, Any] | None:
    return await database.fetch_one(
        f"""
        UPDATE fonts
        SET font_color = COALESCE($2, font_color),
            font_size = COALESCE($3, font_size),
            font_family = COALESCE($4, font_family),
            updated_at = now()
        WHERE id = $1
        RETURNING {_FONT_COLUMNS}
        """,
        font_id,
        font_color,
        font_size,
        font_family,
    )


async def delete_font(database: Database, font_id: UUID) -> bool:
    status = await database.execute("DELETE FROM fonts WHERE id = $1", font_id)
    return affected_rows(status) > 0


# Platform

async def get_platform(database: Database) -> dict[str, Any] | None:
    return await database.fetch_one(
        f"""
        SELECT {_PLATFORM_COLUMNS}
        FROM platforms
        ORDER BY created_at DESC
        LIMIT 1
        """
    )


async def replace_platform(
    database: Database,
    *,
    text: str | None,
    image: str | None,
) -> dict[str, Any]:
    async with database.transaction() as conn:
        await conn.execute("LOCK TABLE platforms IN SHARE ROW EXCLUSIVE MODE")
        await conn.execute("DELETE FROM platforms")
        row = await conn.fetchrow(
            f"""
            INSERT INTO platforms (text, image)
            VALUES ($1, $2)
            RETURNING {_PLATFORM_COLUMNS}
            """,
            text,
            image,
        )
    if row is None:
        raise RuntimeError("Failed to insert platform.")
    return row_dict(row)


async def update_platform(
    database: Database,
    platform_id: UUID,
    *,
    text: str | None = None,
    image: str | None = None,
) -> dict[str, Any] | None:
    return await database.fetch_one(
        f"""
        UPDATE platforms
        SET text = COALESCE($2, text),
            image = COALESCE($3, image),
            updated_at = now()
        WHERE id = $1
        RETURNING {_PLATFORM_COLUMNS}
        """,
        platform_id,
        text,
        image,
    )


async def delete_platform(database: Database, platform_id: UUID) -> bool:
    status = await database.execute("DELETE FROM platforms WHERE id = $1", platform_id)
    return affected_rows(status) > 0


# Contact

async def get_contact(database: Database) -> dict[str, Any] | None:
    return await database.fetch_one(
        f"""
        SELECT {_CONTACT_COLUMNS}
        FROM contacts
        ORDER BY created_at DESC
        LIMIT 1
        """
    )


async def replace_contact(database: Database, *, text: str | None) -> dict[str, Any]:
    async with database.transaction() as conn:
        await conn.execute("LOCK TABLE contacts IN SHARE ROW EXCLUSIVE MODE")
        await conn.execute("DELETE FROM contacts")
        row = await conn.fetchrow(
            f"""
            INSERT INTO contacts (text)
            VALUES ($1)
            RETURNING {_CONTACT_COLUMNS}
            """,
            text,
        )
    if row is None:
        raise RuntimeError("Failed to insert contact.")
    return row_dict(row)


async def update_contact(
    database: Database,
    contact_id: UUID,
    *,
    text: str | None = None,
) -> dict[str, Any] | None:
    return await database.fetch_one(
        f"""
        UPDATE contacts
        SET text = COALESCE($2, text),
            updated_at = now()
        WHERE id = $1
        RETURNING {_CONTACT_COLUMNS}
        """,
        contact_id,
        text,
    )


async def delete_contact(database: Database, contact_id: UUID) -> bool:
    status = await database.execute("DELETE FROM contacts WHERE id = $1", contact_id)
    return affected_rows(status) > 0
