"""
Auth API endpoints: signup, signin, current user, logout.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from core.context import AppContext, get_context

from . import dependencies, schemas, security, service

router = APIRouter()


@router.post(
    "/signup",
    status_code=status.HTTP_201_CREATED,
    response_model=schemas.MessageResponse,
)
async def signup(
    request: schemas.SignupRequest,
    ctx: AppContext = Depends(get_context),
) -> schemas.MessageResponse:
    return await service.signup(ctx, request)


@router.post("/signin", response_model=schemas.SigninResponse)
async def signin(
    request: schemas.SigninRequest,
    ctx: AppContext = Depends(get_context),
) -> schemas.SigninResponse:
    return await service.signin(ctx, request)


@router.get("/get-current-user", response_model=schemas.AccountResponse)
async def get_current_user(
    principal: security.Principal = Depends(dependencies.get_principal),
    ctx: AppContext = Depends(get_context),
) -> schemas.AccountResponse:
    return await service.current_user(ctx, principal)


@router.post("/logout", response_model=schemas.LogoutResponse)
async def logout(
    _: security.Principal = Depends(dependencies.get_principal),
) -> schemas.LogoutResponse:
    # Tokens are stateless; the client discards its copy.
    return schemas.LogoutResponse(message="Logout successful", token=None)
