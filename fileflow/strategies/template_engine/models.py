"""Template engine domain models.

Pydantic models specific to template registration and rendering.
These models are kept here to avoid circular imports with the API layer.
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Template(BaseModel):
    """A registered template document."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), description="Template identifier")
    name: str = Field(default="", description="Original file name without extension")
    original_file: str = Field(description="Path of the stored original document")
    variables: list[str] = Field(
        default_factory=list,
        description="Distinct variable names, computed once at registration",
    )
    original_text: str = Field(default="", description="Body text extracted at registration")
    created_at: datetime = Field(default_factory=_utcnow)
    saved_values: dict[str, Any] = Field(
        default_factory=dict, description="Stored default values per variable"
    )


class TemplateStats(BaseModel):
    """Text statistics of a template document."""

    word_count: int
    character_count: int
    line_count: int
    variable_count: int
    variables: list[str]


class TemplatePreview(BaseModel):
    """Leading excerpt and full body text of a template document."""

    preview: str
    full_text: str
    truncated: bool = False
