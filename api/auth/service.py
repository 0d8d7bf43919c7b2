"""
Auth business logic.
"""

from __future__ import annotations

import logging

import asyncpg

from core.context import AppContext
from core.errors import ConflictError, ForbiddenError, UnauthenticatedError, ValidationError

from . import repository, schemas, security

logger = logging.getLogger(__name__)


def to_account_response(user_row: dict) -> schemas.AccountResponse:
    # Built field by field so a stray password_hash can never leak.
    return schemas.AccountResponse(
        id=user_row["id"],
        name=str(user_row["name"]),
        email=str(user_row["email"]),
        role=str(user_row["role"]),
        created_at=user_row["created_at"],
    )


def issue_token(ctx: AppContext, user_row: dict) -> str:
    settings = ctx.settings
    return security.build_access_token(
        user_id=user_row["id"],
        role=str(user_row["role"]),
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        expire_minutes=settings.access_token_expire_minutes,
    )


async def signup(ctx: AppContext, payload: schemas.SignupRequest) -> schemas.MessageResponse:
    name = payload.name.strip()
    email = repository.normalize_email(payload.email)
    if not name:
        raise ValidationError("name is required.")
    if not email:
        raise ValidationError("email is required.")

    existing = await repository.get_user_by_email(ctx.database, email)
    if existing is not None:
        raise ConflictError("Email is already registered.")

    password_hash = security.hash_password(payload.password)
    try:
        user_row = await repository.create_user(
            ctx.database,
            name=name,
            email=email,
            password_hash=password_hash,
        )
    except asyncpg.UniqueViolationError as exc:
        # Lost a race with a concurrent signup for the same email.
        raise ConflictError("Email is already registered.") from exc

    logger.info("Account created id=%s", user_row["id"])
    return schemas.MessageResponse(message="User created")


async def signin(ctx: AppContext, payload: schemas.SigninRequest) -> schemas.SigninResponse:
    user_row = await repository.get_user_by_email(ctx.database, payload.email)
    if user_row is None:
        raise UnauthenticatedError("Invalid credentials")

    is_valid = security.verify_password(payload.password, str(user_row.get("password_hash") or ""))
    if not is_valid:
        logger.warning("Failed signin for account id=%s", user_row["id"])
        raise UnauthenticatedError("Invalid credentials")

    return schemas.SigninResponse(
        user=to_account_response(user_row),
        token=issue_token(ctx, user_row),
    )


def authenticate(ctx: AppContext, token: str) -> security.Principal:
    """
    Verify a bearer token and return its principal.

    A token that is present but fails verification is reported as 403, the
    status existing clients already handle for bad tokens.
    """
    settings = ctx.settings
    try:
        payload = security.decode_access_token(
            token,
            secret=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
        )
        return security.principal_from_payload(payload)
    except security.AuthSecurityError as exc:
        logger.warning("Rejected access token: %s", exc)
        raise ForbiddenError(str(exc)) from exc


def require_role(principal: security.Principal, role: str) -> security.Principal:
    if principal.role != role:
        raise ForbiddenError("Admin access required" if role == security.ROLE_ADMIN else "Forbidden")
    return principal


async def current_user(ctx: AppContext, principal: security.Principal) -> schemas.AccountResponse:
    user_row = await repository.get_user_by_id(ctx.database, principal.id)
    if user_row is None:
        raise UnauthenticatedError("User not found.")
    return to_account_response(user_row)
