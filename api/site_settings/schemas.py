"""
Pydantic schemas for the singleton settings endpoints.
"""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, Field


class FontRequest(BaseModel):
    # Older clients send camelCase keys.
    font_color: str | None = Field(
        default=None,
        max_length=64,
        validation_alias=AliasChoices("font_color", "fontColor"),
    )
    font_size: int | None = Field(
        default=None,
        gt=0,
        le=512,
        validation_alias=AliasChoices("font_size", "fontSize"),
    )
    font_family: str | None = Field(
        default=None,
        max_length=200,
        validation_alias=AliasChoices("font_family", "fontFamily"),
    )


class FontUpdateRequest(FontRequest):
    """Same fields as create; omitted fields are left untouched."""


class ContactRequest(BaseModel):
    text: str = Field(..., min_length=1, max_length=20000)


class ContactUpdateRequest(BaseModel):
    text: str | None = Field(default=None, max_length=20000)
