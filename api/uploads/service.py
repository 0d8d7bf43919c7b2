"""
Upload materialization.

Routers call `materialize` / `materialize_many` before handing fields to a
feature service. Each upload is:
- validated by extension
- streamed to a temp file while enforcing the policy's size ceiling
- handed to the storage backend, which returns a reference string
"""

from __future__ import annotations

import logging
import os
import re
import secrets
import tempfile
import time
from dataclasses import dataclass
from pathlib import Path

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from core.config import Settings
from core.errors import PayloadTooLargeError, ValidationError

from .storage import UploadStorage

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024  # 1 MiB

IMAGE_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png"})
MEDIA_IMAGE_EXTENSIONS = IMAGE_EXTENSIONS | {".gif", ".webp"}
VIDEO_EXTENSIONS = frozenset({".mp4", ".mov", ".webm", ".mkv"})
AUDIO_EXTENSIONS = frozenset({".mp3", ".wav", ".ogg", ".m4a", ".aac"})

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


@dataclass(frozen=True)
class UploadPolicy:
    field: str
    folder: str
    allowed_extensions: frozenset[str]
    max_bytes: int


class RequestBudget:
    """
    Running byte total across every file of one request.
    """

    def __init__(self, max_bytes: int) -> None:
        self.max_bytes = max_bytes
        self.used = 0

    def check(self, pending: int) -> None:
        if self.used + pending > self.max_bytes:
            raise PayloadTooLargeError(f"Request uploads too large. Max is {self.max_bytes} bytes in total.")


def image_policy(settings: Settings, *, field: str = "image", folder: str = "images") -> UploadPolicy:
    return UploadPolicy(
        field=field,
        folder=folder,
        allowed_extensions=IMAGE_EXTENSIONS,
        max_bytes=settings.max_image_upload_bytes,
    )


def post_media_policies(settings: Settings) -> dict[str, UploadPolicy]:
    limit = settings.max_media_upload_bytes
    return {
        "images": UploadPolicy("images", "posts/images", frozenset(MEDIA_IMAGE_EXTENSIONS), limit),
        "videos": UploadPolicy("videos", "posts/videos", VIDEO_EXTENSIONS, limit),
        "audio": UploadPolicy("audio", "posts/audio", AUDIO_EXTENSIONS, limit),
    }


def _file_ext(filename: str) -> str:
    return Path(filename).suffix.lower()


def safe_filename(filename: str) -> str:
    name = _UNSAFE_CHARS.sub("_", Path(filename).name).strip("._")
    return name or "upload"


def object_key(policy: UploadPolicy, filename: str) -> str:
    stamp = int(time.time() * 1000)
    return f"{policy.folder}/{stamp}-{secrets.token_hex(4)}-{safe_filename(filename)}"


def is_empty_upload(file: UploadFile | None) -> bool:
    # Browsers send an empty part with no filename when a file input is left blank.
    return file is None or not (file.filename or "").strip()


def validate_upload(file: UploadFile, policy: UploadPolicy) -> str:
    """
    Return the normalized file extension if this upload is acceptable.
    """
    ext = _file_ext(file.filename or "")
    if ext not in policy.allowed_extensions:
        raise ValidationError(
            f"Unsupported file type '{ext}' for '{policy.field}'. "
            f"Allowed: {sorted(policy.allowed_extensions)}"
        )
    return ext


async def spool_upload(
    file: UploadFile,
    policy: UploadPolicy,
    budget: RequestBudget | None = None,
) -> tuple[str, int]:
    """
    Copy the upload to a temp file, enforcing the per-file ceiling and, when a
    budget is given, the per-request total.

    Returns (temp_path, size_bytes). The caller owns the temp file.
    """
    fd, tmp_path = tempfile.mkstemp(prefix="upload-", suffix=_file_ext(file.filename or ""))
    size = 0
    try:
        with os.fdopen(fd, "wb") as out:
            while True:
                chunk = await file.read(CHUNK_SIZE)
                if not chunk:
                    break
                size += len(chunk)
                if size > policy.max_bytes:
                    raise PayloadTooLargeError(
                        f"File too large for '{policy.field}'. Max is {policy.max_bytes} bytes."
                    )
                if budget is not None:
                    budget.check(size)
                await run_in_threadpool(out.write, chunk)
    except BaseException:
        _remove_quietly(tmp_path)
        raise
    if budget is not None:
        budget.used += size
    return tmp_path, size


def _remove_quietly(path: str) -> None:
    try:
        os.unlink(path)
    except FileNotFoundError:
        pass


async def materialize(
    storage: UploadStorage,
    file: UploadFile | None,
    policy: UploadPolicy,
    budget: RequestBudget | None = None,
) -> str | None:
    """
    Store one optional upload and return its reference (None if no file was sent).
    """
    if is_empty_upload(file):
        return None

    validate_upload(file, policy)
    tmp_path, size = await spool_upload(file, policy, budget)
    try:
        reference = await run_in_threadpool(
            storage.save,
            tmp_path,
            object_key(policy, file.filename or ""),
            file.content_type,
        )
    finally:
        _remove_quietly(tmp_path)

    logger.info("Stored upload field=%s size=%d ref=%s", policy.field, size, reference)
    return reference


async def materialize_many(
    storage: UploadStorage,
    files: list[UploadFile] | None,
    policy: UploadPolicy,
    budget: RequestBudget | None = None,
) -> list[str]:
    """
    Store every upload in `files`. All-or-nothing: on failure, objects stored
    earlier in this call are removed before the error propagates.
    """
    references: list[str] = []
    try:
        for file in files or []:
            reference = await materialize(storage, file, policy, budget)
            if reference is not None:
                references.append(reference)
    except BaseException:
        await discard(storage, references)
        raise
    return references


async def discard(storage: UploadStorage, references: list[str]) -> None:
    for reference in references:
        try:
            await run_in_threadpool(storage.delete, reference)
        except Exception:
            logger.warning("Failed to remove stored upload %s", reference, exc_info=True)


async def materialize_fields(
    storage: UploadStorage,
    uploads: list[tuple[UploadPolicy, list[UploadFile] | None]],
    *,
    max_request_bytes: int | None = None,
) -> dict[str, list[str]]:
    """
    Store several multi-file fields as one unit, keyed by policy field name.

    `max_request_bytes` caps the combined size of every file in the call.
    """
    budget = RequestBudget(max_request_bytes) if max_request_bytes is not None else None
    stored: dict[str, list[str]] = {}
    try:
        for policy, files in uploads:
            stored[policy.field] = await materialize_many(storage, files, policy, budget)
    except BaseException:
        await discard(storage, [ref for refs in stored.values() for ref in refs])
        raise
    return stored
