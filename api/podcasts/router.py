"""
Podcast API endpoints (podcasts + nested questions).
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status

from auth import dependencies as auth_dependencies
from auth.security import Principal
from core.context import AppContext, get_context
from core.ids import parse_id
from core.text import clean_text
from uploads import service as uploads

from . import schemas, service

router = APIRouter()


@router.get("/podcasts")
async def list_podcasts(ctx: AppContext = Depends(get_context)) -> list[dict]:
    """
    All podcasts, newest first.
    """
    return await service.list_podcasts(ctx)


@router.get("/podcasts/search")
async def search_podcasts(
    q: str = Query(default="", max_length=500),
    ctx: AppContext = Depends(get_context),
) -> list[dict]:
    return await service.search_podcasts(ctx, q)


@router.get("/podcasts/{podcast_id}")
async def get_podcast(podcast_id: str, ctx: AppContext = Depends(get_context)) -> dict:
    return await service.get_podcast(ctx, parse_id(podcast_id, not_found=service.PODCAST_NOT_FOUND))


@router.post("/podcasts", status_code=status.HTTP_201_CREATED)
async def create_podcast(
    title: str = Form(...),
    content: str | None = Form(default=None),
    image: UploadFile | None = File(default=None),
    _: Principal = Depends(auth_dependencies.require_admin),
    ctx: AppContext = Depends(get_context),
) -> dict:
    image_ref = await uploads.materialize(
        ctx.storage,
        image,
        uploads.image_policy(ctx.settings, folder="podcasts"),
    )
    try:
        return await service.create_podcast(ctx, title=title, content=content, image=image_ref)
    except BaseException:
        await uploads.discard(ctx.storage, [image_ref] if image_ref else [])
        raise


@router.put("/podcasts/{podcast_id}")
async def update_podcast(
    podcast_id: str,
    title: str | None = Form(default=None),
    content: str | None = Form(default=None),
    image: UploadFile | None = File(default=None),
    _: Principal = Depends(auth_dependencies.require_admin),
    ctx: AppContext = Depends(get_context),
) -> dict:
    podcast_uuid = parse_id(podcast_id, not_found=service.PODCAST_NOT_FOUND)
    image_ref = await uploads.materialize(
        ctx.storage,
        image,
        uploads.image_policy(ctx.settings, folder="podcasts"),
    )
    patch = schemas.PodcastUpdate(
        title=clean_text(title),
        content=clean_text(content),
        image=image_ref,
    )
    try:
        return await service.update_podcast(ctx, podcast_uuid, patch)
    except BaseException:
        await uploads.discard(ctx.storage, [image_ref] if image_ref else [])
        raise


@router.delete("/podcasts/{podcast_id}")
async def delete_podcast(
    podcast_id: str,
    _: Principal = Depends(auth_dependencies.require_admin),
    ctx: AppContext = Depends(get_context),
) -> dict:
    return await service.delete_podcast(ctx, parse_id(podcast_id, not_found=service.PODCAST_NOT_FOUND))


@router.post("/podcasts/{podcast_id}/questions")
async def add_question(
    podcast_id: str,
    request: schemas.QuestionCreateRequest,
    _: Principal = Depends(auth_dependencies.require_admin),
    ctx: AppContext = Depends(get_context),
) -> dict:
    return await service.add_question(
        ctx,
        parse_id(podcast_id, not_found=service.PODCAST_NOT_FOUND),
        request,
    )


@router.put("/podcasts/{podcast_id}/questions/{question_id}")
async def update_question(
    podcast_id: str,
    question_id: str,
    request: schemas.QuestionUpdateRequest,
    _: Principal = Depends(auth_dependencies.require_admin),
    ctx: AppContext = Depends(get_context),
) -> dict:
    return await service.update_question(
        ctx,
        parse_id(podcast_id, not_found=service.QUESTION_NOT_FOUND),
        parse_id(question_id, not_found=service.QUESTION_NOT_FOUND),
        request,
    )


@router.delete("/podcasts/{podcast_id}/questions/{question_id}")
async def delete_question(
    podcast_id: str,
    question_id: str,
    _: Principal = Depends(auth_dependencies.require_admin),
    ctx: AppContext = Depends(get_context),
) -> dict:
    return await service.delete_question(
        ctx,
        parse_id(podcast_id, not_found=service.QUESTION_NOT_FOUND),
        parse_id(question_id, not_found=service.QUESTION_NOT_FOUND),
    )
