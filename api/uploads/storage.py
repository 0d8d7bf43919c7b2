"""
Upload storage backends.

- `LocalDiskStorage`: files under a directory the app serves at `/uploads`.
- `S3Storage`: S3-compatible object storage through boto3.

Both take an already-spooled file on disk and return the reference string
that gets persisted on the document. Calls are blocking; callers run them in
the threadpool.
"""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Protocol

import boto3
from botocore.config import Config

from core.config import Settings


class UploadStorage(Protocol):
    """Operations the materializer needs from a storage backend."""

    def save(self, src_path: str, key: str, content_type: str | None = None) -> str:
        ...

    def delete(self, reference: str) -> None:
        ...


class LocalDiskStorage:
    def __init__(self, root: str | Path, *, url_prefix: str = "/uploads") -> None:
        self.root = Path(root)
        self.url_prefix = "/" + url_prefix.strip("/")

    def ensure_root(self) -> Path:
        self.root.mkdir(parents=True, exist_ok=True)
        return self.root

    def save(self, src_path: str, key: str, content_type: str | None = None) -> str:
        dest = self.root / key
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.move(src_path, dest)
        return f"{self.url_prefix}/{key}"

    def path_for(self, reference: str) -> Path | None:
        prefix = self.url_prefix + "/"
        if not reference.startswith(prefix):
            return None
        return self.root / reference[len(prefix):]

    def delete(self, reference: str) -> None:
        path = self.path_for(reference)
        if path is not None:
            path.unlink(missing_ok=True)


class S3Storage:
    def __init__(
        self,
        bucket: str,
        *,
        region: str | None = None,
        endpoint_url: str | None = None,
        public_base_url: str | None = None,
        client=None,
    ) -> None:
        self.bucket = bucket
        self.public_base_url = public_base_url.rstrip("/") if public_base_url else None
        # Credentials come from boto3's default chain (env, profile, instance role).
        self.client = client or boto3.client(
            "s3",
            region_name=region,
            endpoint_url=endpoint_url,
            config=Config(signature_version="s3v4"),
        )

    def reference_for(self, key: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url}/{key}"
        return f"s3://{self.bucket}/{key}"

    def key_for(self, reference: str) -> str | None:
        for prefix in (f"{self.public_base_url}/" if self.public_base_url else None, f"s3://{self.bucket}/"):
            if prefix and reference.startswith(prefix):
                return reference[len(prefix):]
        return None

    def save(self, src_path: str, key: str, content_type: str | None = None) -> str:
        extra_args = {"ContentType": content_type} if content_type else None
        self.client.upload_file(src_path, self.bucket, key, ExtraArgs=extra_args)
        return self.reference_for(key)

    def delete(self, reference: str) -> None:
        key = self.key_for(reference)
        if key is not None:
            self.client.delete_object(Bucket=self.bucket, Key=key)


def build_storage(settings: Settings) -> UploadStorage:
    if settings.upload_backend == "s3":
        if not settings.s3_bucket:
            raise RuntimeError("S3_BUCKET is not set (required when UPLOAD_BACKEND=s3).")
        return S3Storage(
            settings.s3_bucket,
            region=settings.s3_region,
            endpoint_url=settings.s3_endpoint_url,
            public_base_url=settings.s3_public_base_url,
        )
    return LocalDiskStorage(settings.upload_dir, url_prefix=settings.upload_url_prefix)
