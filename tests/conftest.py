from __future__ import annotations

from typing import Callable

import pytest
from fastapi.testclient import TestClient

from auth import security
from core.config import Settings
from core.db import Database
from fakes import FakeStore
from main import create_app
from uploads.storage import LocalDiskStorage

TEST_SECRET = "test-secret-not-for-production"


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        database_url="postgresql://unused@localhost/unused",
        jwt_secret=TEST_SECRET,
        upload_dir=str(tmp_path / "uploads"),
        max_image_upload_bytes=1024,
        max_media_upload_bytes=4096,
    )


@pytest.fixture
def storage(settings) -> LocalDiskStorage:
    return LocalDiskStorage(settings.upload_dir, url_prefix=settings.upload_url_prefix)


@pytest.fixture
def store(monkeypatch) -> FakeStore:
    return FakeStore().install(monkeypatch)


@pytest.fixture
def app(settings, storage, store):
    # The lifespan (and so the pool) only starts inside `with TestClient(...)`;
    # tests use the client directly, so the fake store is the only backend.
    return create_app(settings, database=Database(settings.database_url), storage=storage)


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def make_account(store) -> Callable[..., dict]:
    def _make(*, name="Someone", email=None, password="pw", role="normal") -> dict:
        email = email or f"{name.lower().replace(' ', '.')}.{len(store.users)}@example.com"
        return store.add_user(
            name=name,
            email=email,
            password_hash=security.hash_password(password),
            role=role,
        )

    return _make


@pytest.fixture
def auth_headers(settings) -> Callable[[dict], dict[str, str]]:
    def _headers(account: dict) -> dict[str, str]:
        token = security.build_access_token(
            user_id=account["id"],
            role=account["role"],
            secret=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            expire_minutes=settings.access_token_expire_minutes,
        )
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def admin(make_account) -> dict:
    return make_account(name="Admin", email="admin@example.com", role="admin")


@pytest.fixture
def admin_headers(admin, auth_headers) -> dict[str, str]:
    return auth_headers(admin)


@pytest.fixture
def member(make_account) -> dict:
    return make_account(name="Member", email="member@example.com")


@pytest.fixture
def member_headers(member, auth_headers) -> dict[str, str]:
    return auth_headers(member)
