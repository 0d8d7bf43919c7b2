from __future__ import annotations

from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from auth import router as auth_router
from core.config import Settings, load_settings
from core.context import AppContext
from core.db import Database
from core.errors import register_error_handlers
from core.logging import configure_logging
from podcasts import router as podcasts_router
from posts import router as posts_router
from site_settings import router as site_settings_router
from uploads.storage import LocalDiskStorage, UploadStorage, build_storage
from users import router as users_router


def create_app(
    settings: Settings | None = None,
    *,
    database: Database | None = None,
    storage: UploadStorage | None = None,
) -> FastAPI:
    settings = settings or load_settings()
    configure_logging(settings.log_level, settings.log_format)

    context = AppContext(
        settings=settings,
        database=database or Database(settings.database_url),
        storage=storage or build_storage(settings),
    )

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        # One pool per process, closed on shutdown.
        await context.database.connect()
        try:
            yield
        finally:
            await context.database.close()

    app = FastAPI(title="Podcast Studio API", lifespan=lifespan)
    app.state.context = context

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials="*" not in settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    app.include_router(auth_router.router, tags=["auth"])
    app.include_router(users_router.router, tags=["users"])
    app.include_router(podcasts_router.router, tags=["podcasts"])
    app.include_router(posts_router.router, tags=["posts"])
    app.include_router(site_settings_router.router, tags=["site-settings"])

    # Disk uploads are served back by the app itself.
    if isinstance(context.storage, LocalDiskStorage):
        app.mount(
            context.storage.url_prefix,
            StaticFiles(directory=context.storage.ensure_root()),
            name="uploads",
        )

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    @app.get("/")
    def root() -> dict:
        return {"message": "podcast-studio api"}

    return app


def run() -> None:
    settings = load_settings()
    uvicorn.run(
        "main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    run()
