"""
Account management business logic (admin surface).
"""

from __future__ import annotations

import logging
from uuid import UUID

import asyncpg

from auth import repository, security
from auth.schemas import AccountResponse, MessageResponse
from auth.service import to_account_response
from core.context import AppContext
from core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from core.text import clean_text

from . import schemas

logger = logging.getLogger(__name__)

USER_NOT_FOUND = "User not found"


async def list_users(ctx: AppContext) -> list[AccountResponse]:
    rows = await repository.list_users(ctx.database)
    return [to_account_response(row) for row in rows]


async def get_user(ctx: AppContext, user_id: UUID) -> AccountResponse:
    row = await repository.get_user_by_id(ctx.database, user_id)
    if row is None:
        raise NotFoundError(USER_NOT_FOUND)
    return to_account_response(row)


async def delete_user(ctx: AppContext, user_id: UUID) -> MessageResponse:
    deleted = await repository.delete_user(ctx.database, user_id)
    if not deleted:
        raise NotFoundError(USER_NOT_FOUND)
    logger.info("Account deleted id=%s", user_id)
    return MessageResponse(message="User deleted")


async def promote_to_admin(ctx: AppContext, user_id: UUID) -> AccountResponse:
    row = await repository.set_user_role(ctx.database, user_id, security.ROLE_ADMIN)
    if row is None:
        raise NotFoundError(USER_NOT_FOUND)
    logger.info("Account promoted to admin id=%s", user_id)
    return to_account_response(row)


async def update_user(
    ctx: AppContext,
    user_id: UUID,
    payload: schemas.UserUpdateRequest,
    *,
    principal: security.Principal,
) -> AccountResponse:
    if not principal.is_admin and principal.id != user_id:
        raise ForbiddenError("You can only update your own account.")

    name = clean_text(payload.name)
    email = clean_text(payload.email)
    password = payload.password or None
    if name is None and email is None and password is None:
        raise ValidationError("No fields provided for update")

    if email is not None:
        existing = await repository.get_user_by_email(ctx.database, email)
        if existing is not None and existing["id"] != user_id:
            raise ConflictError("Email is already registered.")

    try:
        row = await repository.update_user(
            ctx.database,
            user_id,
            name=name,
            email=email,
            password_hash=security.hash_password(password) if password is not None else None,
        )
    except asyncpg.UniqueViolationError as exc:
        raise ConflictError("Email is already registered.") from exc

    if row is None:
        raise NotFoundError(USER_NOT_FOUND)
    return to_account_response(row)
