"""
Podcast persistence.

Questions live in `podcast_questions` and are always read through their
podcast: every read returns the podcast with its questions aggregated in
insertion order.
"""

from __future__ import annotations

import json
from typing import Any
from uuid import UUID

from core.db import Database, affected_rows

_SELECT_PODCASTS = """
    SELECT
      p.id,
      p.title,
      p.content,
      p.image,
      p.created_at,
      p.updated_at,
      COALESCE(q.questions, '[]'::json) AS questions
    FROM podcasts p
    LEFT JOIN LATERAL (
      SELECT json_agg(
               json_build_object('id', pq.id, 'question', pq.question, 'answer', pq.answer)
               ORDER BY pq.seq
             ) AS questions
      FROM podcast_questions pq
      WHERE pq.podcast_id = p.id
    ) q ON true
"""


def _decode_row(row: dict[str, Any]) -> dict[str, Any]:
    """
    asyncpg hands json columns back as text; decode the aggregated questions.
    """
    questions = row.get("questions")
    if isinstance(questions, str):
        row["questions"] = json.loads(questions)
    elif questions is None:
        row["questions"] = []
    return row


async def list_podcasts(database: Database) -> list[dict[str, Any]]:
    """
    All podcasts, newest first.
    """
    rows = await database.fetch_all(
        _SELECT_PODCASTS
        + """
        ORDER BY p.created_at DESC, p.seq DESC
        """
    )
    return [_decode_row(r) for r in rows]


async def search_podcasts(database: Database, query: str) -> list[dict[str, Any]]:
    """
    Case-insensitive literal substring match on title or content.
    """
    rows = await database.fetch_all(
        _SELECT_PODCASTS
        + """
        WHERE strpos(lower(p.title), lower($1)) > 0
           OR strpos(lower(COALESCE(p.content, '')), lower($1)) > 0
        ORDER BY p.created_at DESC, p.seq DESC
        """,
        query,
    )
    return [_decode_row(r) for r in rows]


async def get_podcast(database: Database, podcast_id: UUID) -> dict[str, Any] | None:
    row = await database.fetch_one(
        _SELECT_PODCASTS
        + """
        WHERE p.id = $1
        """,
        podcast_id,
    )
    return _decode_row(row) if row is not None else None


async def create_podcast(
    database: Database,
    *,
    title: str,
    content: str | None,
    image: str | None,
) -> dict[str, Any]:
    row = await database.fetch_one(
        """
        INSERT INTO podcasts (title, content, image)
        VALUES ($1, $2, $3)
        RETURNING id
        """,
        title,
        content,
        image,
    )
    if row is None or "id" not in row:
        raise RuntimeError("Failed to insert podcast.")

    podcast = await get_podcast(database, row["id"])
    if podcast is None:
        raise RuntimeError("Inserted podcast could not be read back.")
    return podcast


async def update_podcast(
    database: Database,
    podcast_id: UUID,
    *,
    title: str | None = None,
    content: str | None = None,
    image: str | None = None,
) -> dict[str, Any] | None:
    row = await database.fetch_one(
        """
        UPDATE podcasts
        SET title = COALESCE($2, title),
            content = COALESCE($3, content),
            image = COALESCE($4, image),
            updated_at = now()
        WHERE id = $1
        RETURNING id
        """,
        podcast_id,
        title,
        content,
        image,
    )
    if row is None:
        return None
    return await get_podcast(database, podcast_id)


async def delete_podcast(database: Database, podcast_id: UUID) -> bool:
    # podcast_questions rows go with it (ON DELETE CASCADE).
    status = await database.execute(
        """
        DELETE FROM podcasts
        WHERE id = $1
        """,
        podcast_id,
    )
    return affected_rows(status) > 0


async def add_question(
    database: Database,
    podcast_id: UUID,
    *,
    question: str,
    answer: str,
) -> bool:
    """
    Append a question. Returns False when the podcast does not exist.
    """
    row = await database.fetch_one(
        """
        INSERT INTO podcast_questions (podcast_id, question, answer)
        SELECT p.id, $2, $3
        FROM podcasts p
        WHERE p.id = $1
        RETURNING id
        """,
        podcast_id,
        question,
        answer,
    )
    return row is not None


async def update_question(
    database: Database,
    podcast_id: UUID,
    question_id: UUID,
    *,
    question: str | None = None,
    answer: str | None = None,
) -> bool:
    """
    Returns False when the podcast or the question does not exist.
    """
    row = await database.fetch_one(
        """
        UPDATE podcast_questions
        SET question = COALESCE($3, question),
            answer = COALESCE($4, answer)
        WHERE podcast_id = $1
          AND id = $2
        RETURNING id
        """,
        podcast_id,
        question_id,
        question,
        answer,
    )
    return row is not None


async def delete_question(database: Database, podcast_id: UUID, question_id: UUID) -> bool:
    status = await database.execute(
        """
        DELETE FROM podcast_questions
        WHERE podcast_id = $1
          AND id = $2
        """,
        podcast_id,
        question_id,
    )
    return affected_rows(status) > 0
