"""
Podcast business logic.
"""

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from core.context import AppContext
from core.errors import NotFoundError, ValidationError
from core.text import clean_text

from . import repository, schemas

logger = logging.getLogger(__name__)

PODCAST_NOT_FOUND = "Podcast not found"
QUESTION_NOT_FOUND = "Podcast or question not found"


async def list_podcasts(ctx: AppContext) -> list[dict[str, Any]]:
    return await repository.list_podcasts(ctx.database)


async def search_podcasts(ctx: AppContext, query: str) -> list[dict[str, Any]]:
    q = clean_text(query)
    if q is None:
        raise ValidationError("Search query 'q' is required.")
    return await repository.search_podcasts(ctx.database, q)


async def get_podcast(ctx: AppContext, podcast_id: UUID) -> dict[str, Any]:
    podcast = await repository.get_podcast(ctx.database, podcast_id)
    if podcast is None:
        raise NotFoundError(PODCAST_NOT_FOUND)
    return podcast


async def create_podcast(
    ctx: AppContext,
    *,
    title: str,
    content: str | None = None,
    image: str | None = None,
) -> dict[str, Any]:
    title_clean = clean_text(title)
    if title_clean is None:
        raise ValidationError("title is required.")

    podcast = await repository.create_podcast(
        ctx.database,
        title=title_clean,
        content=clean_text(content),
        image=image,
    )
    logger.info("Podcast created id=%s", podcast["id"])
    return podcast


async def update_podcast(
    ctx: AppContext,
    podcast_id: UUID,
    patch: schemas.PodcastUpdate,
) -> dict[str, Any]:
    if patch.is_empty():
        return await get_podcast(ctx, podcast_id)

    podcast = await repository.update_podcast(
        ctx.database,
        podcast_id,
        title=patch.title,
        content=patch.content,
        image=patch.image,
    )
    if podcast is None:
        raise NotFoundError(PODCAST_NOT_FOUND)
    return podcast


async def delete_podcast(ctx: AppContext, podcast_id: UUID) -> dict[str, str]:
    deleted = await repository.delete_podcast(ctx.database, podcast_id)
    if not deleted:
        raise NotFoundError(PODCAST_NOT_FOUND)
    logger.info("Podcast deleted id=%s", podcast_id)
    return {"message": "Podcast deleted"}


async def add_question(
    ctx: AppContext,
    podcast_id: UUID,
    payload: schemas.QuestionCreateRequest,
) -> dict[str, Any]:
    question = clean_text(payload.question)
    answer = clean_text(payload.answer)
    if question is None or answer is None:
        raise ValidationError("question and answer are required.")

    added = await repository.add_question(
        ctx.database,
        podcast_id,
        question=question,
        answer=answer,
    )
    if not added:
        raise NotFoundError(PODCAST_NOT_FOUND)
    return await get_podcast(ctx, podcast_id)


async def update_question(
    ctx: AppContext,
    podcast_id: UUID,
    question_id: UUID,
    payload: schemas.QuestionUpdateRequest,
) -> dict[str, Any]:
    question = clean_text(payload.question)
    answer = clean_text(payload.answer)
    if question is None and answer is None:
        raise ValidationError("No fields provided for update")

    updated = await repository.update_question(
        ctx.database,
        podcast_id,
        question_id,
        question=question,
        answer=answer,
    )
    if not updated:
        raise NotFoundError(QUESTION_NOT_FOUND)
    return await get_podcast(ctx, podcast_id)


async def delete_question(ctx: AppContext, podcast_id: UUID, question_id: UUID) -> dict[str, Any]:
    deleted = await repository.delete_question(ctx.database, podcast_id, question_id)
    if not deleted:
        raise NotFoundError(QUESTION_NOT_FOUND)
    return await get_podcast(ctx, podcast_id)
