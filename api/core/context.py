"""
Application context: the explicitly constructed handles a request needs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from fastapi import Request

from .config import Settings
from .db import Database

if TYPE_CHECKING:
    from uploads.storage import UploadStorage


@dataclass(frozen=True)
class AppContext:
    settings: Settings
    database: Database
    storage: "UploadStorage"


def get_context(request: Request) -> AppContext:
    ctx = getattr(request.app.state, "context", None)
    if ctx is None:
        raise RuntimeError("Application context is not configured. Build the app with create_app().")
    return ctx
