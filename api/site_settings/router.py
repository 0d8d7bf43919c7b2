"""
Singleton settings API endpoints: /fonts, /platform, /contact.

Reads are open; mutations require an admin.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from auth import dependencies as auth_dependencies
from auth.security import Principal
from core.context import AppContext, get_context
from core.ids import parse_id
from uploads import service as uploads

from . import schemas, service

router = APIRouter()


@router.get("/fonts")
async def get_font(ctx: AppContext = Depends(get_context)) -> dict | None:
    return await service.get_font(ctx)


@router.post("/fonts", status_code=status.HTTP_201_CREATED)
async def create_font(
    request: schemas.FontRequest,
    _: Principal = Depends(auth_dependencies.require_admin),
    ctx: AppContext = Depends(get_context),
) -> dict:
    return await service.replace_font(ctx, request)


@router.put("/fonts/{font_id}")
async def update_font(
    font_id: str,
    request: schemas.FontUpdateRequest,
    _: Principal = Depends(auth_dependencies.require_admin),
    ctx: AppContext = Depends(get_context),
) -> dict:
    return await service.update_font(ctx, parse_id(font_id, not_found=service.FONT_NOT_FOUND), request)


@router.delete("/fonts/{font_id}")
async def delete_font(
    font_id: str,
    _: Principal = Depends(auth_dependencies.require_admin),
    ctx: AppContext = Depends(get_context),
) -> dict:
    return await service.delete_font(ctx, parse_id(font_id, not_found=service.FONT_NOT_FOUND))


@router.get("/platform")
async def get_platform(ctx: AppContext = Depends(get_context)) -> dict | None:
    return await service.get_platform(ctx)


@router.post("/platform", status_code=status.HTTP_201_CREATED)
async def create_platform(
    text: str | None = Form(default=None),
    image: UploadFile | None = File(default=None),
    _: Principal = Depends(auth_dependencies.require_admin),
    ctx: AppContext = Depends(get_context),
) -> dict:
    image_ref = await uploads.materialize(
        ctx.storage,
        image,
        uploads.image_policy(ctx.settings, folder="platform"),
    )
    try:
        return await service.replace_platform(ctx, text=text, image=image_ref)
    except BaseException:
        await uploads.discard(ctx.storage, [image_ref] if image_ref else [])
        raise


@router.put("/platform/{platform_id}")
async def update_platform(
    platform_id: str,
    text: str | None = Form(default=None),
    image: UploadFile | None = File(default=None),
    _: Principal = Depends(auth_dependencies.require_admin),
    ctx: AppContext = Depends(get_context),
) -> dict:
    platform_uuid = parse_id(platform_id, not_found=service.PLATFORM_NOT_FOUND)
    image_ref = await uploads.materialize(
        ctx.storage,
        image,
        uploads.image_policy(ctx.settings, folder="platform"),
    )
    try:
        return await service.update_platform(ctx, platform_uuid, text=text, image=image_ref)
    except BaseException:
        await uploads.discard(ctx.storage, [image_ref] if image_ref else [])
        raise


@router.delete("/platform/{platform_id}")
async def delete_platform(
    platform_id: str,
    _: Principal = Depends(auth_dependencies.require_admin),
    ctx: AppContext = Depends(get_context),
) -> dict:
    return await service.delete_platform(ctx, parse_id(platform_id, not_found=service.PLATFORM_NOT_FOUND))


@router.get("/contact")
async def get_contact(ctx: AppContext = Depends(get_context)) -> dict | None:
    return await service.get_contact(ctx)


@router.post("/contact", status_code=status.HTTP_201_CREATED)
async def create_contact(
    request: schemas.ContactRequest,
    _: Principal = Depends(auth_dependencies.require_admin),
    ctx: AppContext = Depends(get_context),
) -> dict:
    return await service.replace_contact(ctx, request)


@router.put("/contact/{contact_id}")
async def update_contact(
    contact_id: str,
    request: schemas.ContactUpdateRequest,
    _: Principal = Depends(auth_dependencies.require_admin),
    ctx: AppContext = Depends(get_context),
) -> dict:
    return await service.update_contact(
        ctx,
        parse_id(contact_id, not_found=service.CONTACT_NOT_FOUND),
        request,
    )


@router.delete("/contact/{contact_id}")
async def delete_contact(
    contact_id: str,
    _: Principal = Depends(auth_dependencies.require_admin),
    ctx: AppContext = Depends(get_context),
) -> dict:
    return await service.delete_contact(ctx, parse_id(contact_id, not_found=service.CONTACT_NOT_FOUND))
