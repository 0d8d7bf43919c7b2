"""
Pydantic schemas for podcast endpoints.
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, Field


class QuestionCreateRequest(BaseModel):
    question: str = Field(..., min_length=1, max_length=5000)
    answer: str = Field(..., min_length=1, max_length=20000)


class QuestionUpdateRequest(BaseModel):
    question: str | None = Field(default=None, max_length=5000)
    answer: str | None = Field(default=None, max_length=20000)


@dataclass(frozen=True)
class PodcastUpdate:
    """Sparse podcast patch; None means "leave as is"."""

    title: str | None = None
    content: str | None = None
    image: str | None = None

    def is_empty(self) -> bool:
        return self.title is None and self.content is None and self.image is None
