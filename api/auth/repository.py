"""
Account persistence helpers.
"""

from __future__ import annotations

from uuid import UUID

from core.db import Database, affected_rows

# Columns safe to hand back to callers; the password hash is only selected
# by `get_user_by_email` for credential checks.
_PUBLIC_COLUMNS = "id, name, email, role, created_at, updated_at"


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


async def create_user(
    database: Database,
    *,
    name: str,
    email: str,
    password_hash: str,
    role: str = "normal",
) -> dict:
    row = await database.fetch_one(
        f"""
        INSERT INTO users (name, email, password_hash, role)
        VALUES ($1, $2, $3, $4)
        RETURNING {_PUBLIC_COLUMNS}
        """,
        name,
        normalize_email(email),
        password_hash,
        role,
    )
    if row is None:
        raise RuntimeError("Failed to create user.")
    return row


async def get_user_by_email(database: Database, email: str) -> dict | None:
    return await database.fetch_one(
        f"""
        SELECT {_PUBLIC_COLUMNS}, password_hash
        FROM users
        WHERE email = $1
        """,
        normalize_email(email),
    )


async def get_user_by_id(database: Database, user_id: UUID) -> dict | None:
    return await database.fetch_one(
        f"""
        SELECT {_PUBLIC_COLUMNS}
        FROM users
        WHERE id = $1
        """,
        user_id,
    )


async def list_users(database: Database) -> list[dict]:
    return await database.fetch_all(
        f"""
        SELECT {_PUBLIC_COLUMNS}
        FROM users
        ORDER BY created_at, id
        """
    )


async def update_user(
    database: Database,
    user_id: UUID,
    *,
    name: str | None = None,
    email: str | None = None,
    password_hash: str | None = None,
) -> dict | None:
    """
    Apply a sparse update; None leaves the column untouched.
    """
    return await database.fetch_one(
        f"""
        UPDATE users
        SET name = COALESCE($2, name),
            email = COALESCE($3, email),
            password_hash = COALESCE($4, password_hash),
            updated_at = now()
        WHERE id = $1
        RETURNING {_PUBLIC_COLUMNS}
        """,
        user_id,
        name,
        normalize_email(email) if email is not None else None,
        password_hash,
    )


async def set_user_role(database: Database, user_id: UUID, role: str) -> dict | None:
    return await database.fetch_one(
        f"""
        UPDATE users
        SET role = $2,
            updated_at = now()
        WHERE id = $1
        RETURNING {_PUBLIC_COLUMNS}
        """,
        user_id,
        role,
    )


async def delete_user(database: Database, user_id: UUID) -> bool:
    status = await database.execute(
        """
        DELETE FROM users
        WHERE id = $1
        """,
        user_id,
    )
    return affected_rows(status) > 0
