"""
Auth security helpers.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any
from uuid import UUID

import bcrypt
import jwt

ROLE_NORMAL = "normal"
ROLE_ADMIN = "admin"
ROLES = (ROLE_NORMAL, ROLE_ADMIN)


class AuthSecurityError(RuntimeError):
    pass


@dataclass(frozen=True)
class Principal:
    """Identity + role attached to an authenticated request."""

    id: UUID
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


def now_epoch_s() -> int:
    return int(time.time())


def hash_password(plain_password: str) -> str:
    password = (plain_password or "").encode("utf-8")
    if not password:
        raise AuthSecurityError("Password is empty.")
    return bcrypt.hashpw(password, bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    password = (plain_password or "").encode("utf-8")
    hashed = (password_hash or "").encode("utf-8")
    if not password or not hashed:
        return False
    try:
        return bcrypt.checkpw(password, hashed)
    except ValueError:
        return False


def build_access_token(
    *,
    user_id: UUID,
    role: str,
    secret: str,
    algorithm: str = "HS256",
    expire_minutes: int = 1440,
) -> str:
    issued_at = now_epoch_s()
    expires_at = issued_at + (expire_minutes * 60)

    payload = {
        "sub": str(user_id),
        "role": role,
        "type": "access",
        "iat": issued_at,
        "exp": expires_at,
    }
    return jwt.encode(payload, secret, algorithm=algorithm)


def decode_access_token(token: str, *, secret: str, algorithm: str = "HS256") -> dict[str, Any]:
    raw = (token or "").strip()
    if not raw:
        raise AuthSecurityError("Access token is empty.")

    try:
        payload = jwt.decode(
            raw,
            secret,
            algorithms=[algorithm],
            options={"require": ["exp", "sub"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise AuthSecurityError("Access token has expired.") from exc
    except jwt.InvalidTokenError as exc:
        raise AuthSecurityError("Invalid token.") from exc

    token_type = str(payload.get("type") or "").strip().lower()
    if token_type != "access":
        raise AuthSecurityError("Token is not an access token.")

    return payload


def principal_from_payload(payload: dict[str, Any]) -> Principal:
    try:
        user_id = UUID(str(payload.get("sub") or "").strip())
    except ValueError as exc:
        raise AuthSecurityError("Invalid access token subject.") from exc

    role = str(payload.get("role") or "").strip().lower()
    if role not in ROLES:
        raise AuthSecurityError("Invalid access token role.")
    return Principal(id=user_id, role=role)
