"""
Environment-backed settings.

Settings are read once at startup (see `main.create_app`) and carried on the
application context. Secrets have no fallback: the process refuses to start
without them.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

DEFAULT_MAX_IMAGE_UPLOAD_BYTES = 10 * 1024 * 1024  # 10 MiB
DEFAULT_MAX_MEDIA_UPLOAD_BYTES = 5000 * 1024 * 1024  # 5000 MiB

UPLOAD_BACKENDS = {"local", "s3"}


def _env_str(name: str, default: str = "") -> str:
    return os.environ.get(name, "").strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _require(name: str) -> str:
    value = _env_str(name)
    if not value:
        raise RuntimeError(f"{name} is not set.")
    return value


def _sanitize_database_url(url: str) -> str:
    # asyncpg rejects libpq's sslmode query parameter.
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


@dataclass(frozen=True)
class Settings:
    database_url: str
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 1440

    host: str = "0.0.0.0"
    port: int = 9000
    cors_origins: tuple[str, ...] = ("*",)

    upload_backend: str = "local"
    upload_dir: str = "uploads"
    upload_url_prefix: str = "/uploads"
    s3_bucket: str | None = None
    s3_region: str | None = None
    s3_endpoint_url: str | None = None
    s3_public_base_url: str | None = None
    max_image_upload_bytes: int = DEFAULT_MAX_IMAGE_UPLOAD_BYTES
    max_media_upload_bytes: int = DEFAULT_MAX_MEDIA_UPLOAD_BYTES

    log_level: str = "INFO"
    log_format: str = "plain"


def _cors_origins() -> tuple[str, ...]:
    raw = _env_str("CORS_ORIGINS", "*")
    origins = tuple(o.strip() for o in raw.split(",") if o.strip())
    return origins or ("*",)


def _positive(value: int, default: int) -> int:
    return value if value > 0 else default


def load_settings() -> Settings:
    """
    Build `Settings` from the process environment.
    """
    upload_backend = _env_str("UPLOAD_BACKEND", "local").lower()
    if upload_backend not in UPLOAD_BACKENDS:
        raise RuntimeError(
            f"Invalid UPLOAD_BACKEND '{upload_backend}'. Allowed: {sorted(UPLOAD_BACKENDS)}"
        )

    s3_bucket = _env_str("S3_BUCKET") or None
    if upload_backend == "s3" and not s3_bucket:
        raise RuntimeError("S3_BUCKET is not set (required when UPLOAD_BACKEND=s3).")

    return Settings(
        database_url=_sanitize_database_url(_require("DATABASE_URL")),
        jwt_secret=_require("JWT_SECRET"),
        jwt_algorithm=_env_str("JWT_ALG", "HS256"),
        access_token_expire_minutes=_positive(_env_int("ACCESS_TOKEN_EXPIRE_MIN", 1440), 1440),
        host=_env_str("HOST", "0.0.0.0"),
        port=_env_int("PORT", 9000),
        cors_origins=_cors_origins(),
        upload_backend=upload_backend,
        upload_dir=_env_str("UPLOAD_DIR", "uploads"),
        s3_bucket=s3_bucket,
        s3_region=_env_str("S3_REGION") or None,
        s3_endpoint_url=_env_str("S3_ENDPOINT_URL") or None,
        s3_public_base_url=_env_str("S3_PUBLIC_BASE_URL") or None,
        max_image_upload_bytes=_positive(
            _env_int("MAX_IMAGE_UPLOAD_BYTES", DEFAULT_MAX_IMAGE_UPLOAD_BYTES),
            DEFAULT_MAX_IMAGE_UPLOAD_BYTES,
        ),
        max_media_upload_bytes=_positive(
            _env_int("MAX_MEDIA_UPLOAD_BYTES", DEFAULT_MAX_MEDIA_UPLOAD_BYTES),
            DEFAULT_MAX_MEDIA_UPLOAD_BYTES,
        ),
        log_level=_env_str("LOG_LEVEL", "INFO").upper(),
        log_format=_env_str("LOG_FORMAT", "plain").lower(),
    )
