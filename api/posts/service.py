"""
Post business logic.
"""

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from core.context import AppContext
from core.errors import NotFoundError, ValidationError
from core.text import clean_text

from . import repository

logger = logging.getLogger(__name__)

POST_NOT_FOUND = "Post not found"


async def list_posts(ctx: AppContext) -> list[dict[str, Any]]:
    return await repository.list_posts(ctx.database)


async def search_posts(ctx: AppContext, query: str) -> list[dict[str, Any]]:
    q = clean_text(query)
    if q is None:
        raise ValidationError("Search query 'q' is required.")
    return await repository.search_posts(ctx.database, q)


async def get_post(ctx: AppContext, post_id: UUID) -> dict[str, Any]:
    post = await repository.get_post(ctx.database, post_id)
    if post is None:
        raise NotFoundError(POST_NOT_FOUND)
    return post


async def create_post(
    ctx: AppContext,
    *,
    title: str,
    body: str | None = None,
    images: list[str] | None = None,
    videos: list[str] | None = None,
    audio: list[str] | None = None,
) -> dict[str, Any]:
    title_clean = clean_text(title)
    if title_clean is None:
        raise ValidationError("title is required.")

    post = await repository.create_post(
        ctx.database,
        title=title_clean,
        body=clean_text(body),
        images=list(images or []),
        videos=list(videos or []),
        audio=list(audio or []),
    )
    logger.info(
        "Post created id=%s images=%d videos=%d audio=%d",
        post["id"],
        len(post.get("images") or []),
        len(post.get("videos") or []),
        len(post.get("audio") or []),
    )
    return post


async def update_post(
    ctx: AppContext,
    post_id: UUID,
    *,
    title: str | None = None,
    body: str | None = None,
) -> dict[str, Any]:
    title = clean_text(title)
    body = clean_text(body)
    if title is None and body is None:
        return await get_post(ctx, post_id)

    post = await repository.update_post(ctx.database, post_id, title=title, body=body)
    if post is None:
        raise NotFoundError(POST_NOT_FOUND)
    return post


async def delete_post(ctx: AppContext, post_id: UUID) -> dict[str, str]:
    deleted = await repository.delete_post(ctx.database, post_id)
    if not deleted:
        raise NotFoundError(POST_NOT_FOUND)
    logger.info("Post deleted id=%s", post_id)
    return {"message": "Post deleted"}
