"""
Auth dependencies for protected FastAPI routes.
"""

from __future__ import annotations

from fastapi import Depends, Header

from core.context import AppContext, get_context
from core.errors import UnauthenticatedError

from . import security, service


def _extract_token(authorization: str | None, token: str | None) -> str:
    raw = (authorization or "").strip()
    if raw:
        parts = raw.split(" ", 1)
        if len(parts) != 2:
            raise UnauthenticatedError("Invalid Authorization header format.")

        scheme, value = parts[0].strip().lower(), parts[1].strip()
        if scheme != "bearer" or not value:
            raise UnauthenticatedError("Authorization must be: Bearer <token>.")
        return value

    # Older clients send the raw token in a `token` header.
    legacy = (token or "").strip()
    if legacy:
        return legacy

    raise UnauthenticatedError("No token provided")


async def get_access_token(
    authorization: str | None = Header(default=None),
    token: str | None = Header(default=None),
) -> str:
    return _extract_token(authorization, token)


async def get_principal(
    access_token: str = Depends(get_access_token),
    ctx: AppContext = Depends(get_context),
) -> security.Principal:
    return service.authenticate(ctx, access_token)


async def require_admin(
    principal: security.Principal = Depends(get_principal),
) -> security.Principal:
    return service.require_role(principal, security.ROLE_ADMIN)
