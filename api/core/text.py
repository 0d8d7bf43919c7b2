"""
Input normalization shared by the feature services.
"""

from __future__ import annotations


def clean_text(value: str | None) -> str | None:
    """
    Strip a text field and treat blank values (empty form inputs) as absent.
    """
    if value is None:
        return None
    value = value.strip()
    return value or None
