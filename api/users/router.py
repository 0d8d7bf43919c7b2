"""
Account management API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from auth import dependencies as auth_dependencies
from auth.schemas import AccountResponse, MessageResponse
from auth.security import Principal
from core.context import AppContext, get_context
from core.ids import parse_id

from . import schemas, service

router = APIRouter()


@router.get("/users", response_model=list[AccountResponse])
async def list_users(
    _: Principal = Depends(auth_dependencies.require_admin),
    ctx: AppContext = Depends(get_context),
) -> list[AccountResponse]:
    return await service.list_users(ctx)


@router.get("/users/{user_id}", response_model=AccountResponse)
async def get_user(
    user_id: str,
    _: Principal = Depends(auth_dependencies.require_admin),
    ctx: AppContext = Depends(get_context),
) -> AccountResponse:
    return await service.get_user(ctx, parse_id(user_id, not_found=service.USER_NOT_FOUND))


@router.delete("/users/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: str,
    _: Principal = Depends(auth_dependencies.require_admin),
    ctx: AppContext = Depends(get_context),
) -> MessageResponse:
    return await service.delete_user(ctx, parse_id(user_id, not_found=service.USER_NOT_FOUND))


@router.put("/users/{user_id}/admin", response_model=AccountResponse)
async def promote_user(
    user_id: str,
    _: Principal = Depends(auth_dependencies.require_admin),
    ctx: AppContext = Depends(get_context),
) -> AccountResponse:
    return await service.promote_to_admin(ctx, parse_id(user_id, not_found=service.USER_NOT_FOUND))


@router.put("/users/{user_id}", response_model=AccountResponse)
async def update_user(
    user_id: str,
    request: schemas.UserUpdateRequest,
    principal: Principal = Depends(auth_dependencies.get_principal),
    ctx: AppContext = Depends(get_context),
) -> AccountResponse:
    """
    Update name, email or password. Admins may edit any account; other
    users only their own.
    """
    return await service.update_user(
        ctx,
        parse_id(user_id, not_found=service.USER_NOT_FOUND),
        request,
        principal=principal,
    )
