"""
Post API endpoints. Media is uploaded as multipart lists on create only.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status

from auth import dependencies as auth_dependencies
from auth.security import Principal
from core.context import AppContext, get_context
from core.ids import parse_id
from uploads import service as uploads

from . import service

router = APIRouter()


def _merge(*groups: list[UploadFile] | None) -> list[UploadFile]:
    return [file for group in groups for file in group or []]


@router.get("/posts")
async def list_posts(ctx: AppContext = Depends(get_context)) -> list[dict]:
    return await service.list_posts(ctx)


@router.get("/posts/search")
async def search_posts(
    q: str = Query(default="", max_length=500),
    ctx: AppContext = Depends(get_context),
) -> list[dict]:
    return await service.search_posts(ctx, q)


@router.get("/posts/{post_id}")
async def get_post(post_id: str, ctx: AppContext = Depends(get_context)) -> dict:
    return await service.get_post(ctx, parse_id(post_id, not_found=service.POST_NOT_FOUND))


@router.post("/posts", status_code=status.HTTP_201_CREATED)
async def create_post(
    title: str = Form(...),
    body: str | None = Form(default=None),
    images: list[UploadFile] | None = File(default=None),
    videos: list[UploadFile] | None = File(default=None),
    audio: list[UploadFile] | None = File(default=None),
    # Form-style array names sent by browser clients.
    images_array: list[UploadFile] | None = File(default=None, alias="images[]"),
    videos_array: list[UploadFile] | None = File(default=None, alias="videos[]"),
    audio_array: list[UploadFile] | None = File(default=None, alias="audio[]"),
    _: Principal = Depends(auth_dependencies.require_admin),
    ctx: AppContext = Depends(get_context),
) -> dict:
    """
    Create a post. Every file is stored before the post is written; if any
    file or the insert fails, nothing from this request is kept.

    Each media field is read under both its plain name and its `name[]` form.
    The combined size of all files is capped at `max_media_upload_bytes`.
    """
    policies = uploads.post_media_policies(ctx.settings)
    stored = await uploads.materialize_fields(
        ctx.storage,
        [
            (policies["images"], _merge(images, images_array)),
            (policies["videos"], _merge(videos, videos_array)),
            (policies["audio"], _merge(audio, audio_array)),
        ],
        max_request_bytes=ctx.settings.max_media_upload_bytes,
    )
    try:
        return await service.create_post(
            ctx,
            title=title,
            body=body,
            images=stored["images"],
            videos=stored["videos"],
            audio=stored["audio"],
        )
    except BaseException:
        await uploads.discard(ctx.storage, [ref for refs in stored.values() for ref in refs])
        raise


@router.put("/posts/{post_id}")
async def update_post(
    post_id: str,
    title: str | None = Form(default=None),
    body: str | None = Form(default=None),
    _: Principal = Depends(auth_dependencies.require_admin),
    ctx: AppContext = Depends(get_context),
) -> dict:
    return await service.update_post(
        ctx,
        parse_id(post_id, not_found=service.POST_NOT_FOUND),
        title=title,
        body=body,
    )


@router.delete("/posts/{post_id}")
async def delete_post(
    post_id: str,
    _: Principal = Depends(auth_dependencies.require_admin),
    ctx: AppContext = Depends(get_context),
) -> dict:
    return await service.delete_post(ctx, parse_id(post_id, not_found=service.POST_NOT_FOUND))
