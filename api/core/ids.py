"""
Path identifier parsing.
"""

from __future__ import annotations

from uuid import UUID

from .errors import NotFoundError


def parse_id(raw: str, *, not_found: str) -> UUID:
    """
    Parse a document id from a path segment.

    A malformed id cannot name an existing document, so it reports the same
    404 as a missing one.
    """
    try:
        return UUID((raw or "").strip())
    except ValueError as exc:
        raise NotFoundError(not_found) from exc
