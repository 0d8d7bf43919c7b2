"""
Singleton settings business logic.

Creating a font, platform or contact replaces whatever was there before;
reads return the live document or None.
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

FONT_NOT_FOUND = "Font not found"
PLATFORM_NOT_FOUND = "Platform not found"
CONTACT_NOT_FOUND = "Contact not found"


async def get_font(ctx: AppContext) -> dict[str, Any] | None:
    return await repository.get_font(ctx.database)


async def replace_font(ctx: AppContext, payload: schemas.FontRequest) -> dict[str, Any]:
    fields = {
        "font_color": clean_text(payload.font_color),
        "font_size": payload.font_size,
        "font_family": clean_text(payload.font_family),
    }
    # An unrecognized payload must not replace the live font with an empty row.
    if all(value is None for value in fields.values()):
        raise ValidationError("At least one of font_color, font_size, font_family is required.")

    font = await repository.replace_font(ctx.database, **fields)
    logger.info("Font settings replaced id=%s", font["id"])
    return font


async def update_font(
    ctx: AppContext,
    font_id: UUID,
    payload: schemas.FontUpdateRequest,
) -> dict[str, Any]:
    font = await repository.update_font(
        ctx.database,
        font_id,
        font_color=clean_text(payload.font_color),
        font_size=payload.font_size,
        font_family=clean_text(payload.font_family),
    )
    if font is None:
        raise NotFoundError(FONT_NOT_FOUND)
    return font


async def delete_font(ctx: AppContext, font_id: UUID) -> dict[str, str]:
    if not await repository.delete_font(ctx.database, font_id):
        raise NotFoundError(FONT_NOT_FOUND)
    return {"message": "Font deleted"}


async def get_platform(ctx: AppContext) -> dict[str, Any] | None:
    return await repository.get_platform(ctx.database)


async def replace_platform(
    ctx: AppContext,
    *,
    text: str | None,
    image: str | None,
) -> dict[str, Any]:
    platform = await repository.replace_platform(ctx.database, text=clean_text(text), image=image)
    logger.info("Platform settings replaced id=%s", platform["id"])
    return platform


async def update_platform(
    ctx: AppContext,
    platform_id: UUID,
    *,
    text: str | None = None,
    image: str | None = None,
) -> dict[str, Any]:
    platform = await repository.update_platform(
        ctx.database,
        platform_id,
        text=clean_text(text),
        image=image,
    )
    if platform is None:
        raise NotFoundError(PLATFORM_NOT_FOUND)
    return platform


async def delete_platform(ctx: AppContext, platform_id: UUID) -> dict[str, str]:
    if not await repository.delete_platform(ctx.database, platform_id):
        raise NotFoundError(PLATFORM_NOT_FOUND)
    return {"message": "Platform deleted"}


async def get_contact(ctx: AppContext) -> dict[str, Any] | None:
    return await repository.get_contact(ctx.database)


async def replace_contact(ctx: AppContext, payload: schemas.ContactRequest) -> dict[str, Any]:
    contact = await repository.replace_contact(ctx.database, text=clean_text(payload.text))
    logger.info("Contact settings replaced id=%s", contact["id"])
    return contact


async def update_contact(
    ctx: AppContext,
    contact_id: UUID,
    payload: schemas.ContactUpdateRequest,
) -> dict[str, Any]:
    contact = await repository.update_contact(ctx.database, contact_id, text=clean_text(payload.text))
    if contact is None:
        raise NotFoundError(CONTACT_NOT_FOUND)
    return contact


async def delete_contact(ctx: AppContext, contact_id: UUID) -> dict[str, str]:
    if not await repository.delete_contact(ctx.database, contact_id):
        raise NotFoundError(CONTACT_NOT_FOUND)
    return {"message": "Contact deleted"}
