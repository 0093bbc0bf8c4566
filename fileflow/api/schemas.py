"""API request and response schemas.

Pydantic v2 models for API serialization/deserialization.
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

from fileflow.strategies.template_engine.models import Template

OutputFormat = Literal["docx", "pdf", "txt"]
Fidelity = Literal["high", "fast"]


# =============================================================================
# Error Schemas
# =============================================================================


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str = Field(description="Error message")
    error_code: str | None = Field(default=None, description="Application-specific error code")
    extra: dict[str, Any] | None = Field(default=None, description="Additional error context")


class StrategyFailureResponse(BaseModel):
    """One failed conversion strategy."""

    strategy: str
    reason: str


# =============================================================================
# Template Schemas
# =============================================================================


class TemplateResponse(BaseModel):
    """A registered template."""

    id: str
    name: str
    variables: list[str]
    variable_count: int
    saved_values: dict[str, Any]
    created_at: datetime

    @classmethod
    def from_template(cls, template: Template) -> "TemplateResponse":
        return cls(
            id=template.id,
            name=template.name,
            variables=template.variables,
            variable_count=len(template.variables),
            saved_values=template.saved_values,
            created_at=template.created_at,
        )


class TemplateListResponse(BaseModel):
    """Response for listing templates."""

    templates: list[TemplateResponse]
    total: int


class SaveValuesRequest(BaseModel):
    """Default values to merge into a template."""

    values: dict[str, Any] = Field(description="Variable name to value")


class GenerateRequest(BaseModel):
    """Request to fill a template."""

    values: dict[str, Any] = Field(
        default_factory=dict,
        description="Variable values; saved defaults fill the rest",
    )
    format: OutputFormat = Field(default="docx", description="Output format")
    fidelity: Fidelity | None = Field(
        default=None, description="Conversion fidelity for non-native formats"
    )


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    success: bool = True
    message: str


# =============================================================================
# Document Schemas
# =============================================================================


class DocumentResponse(BaseModel):
    """A generated or converted document ready for download."""

    file_name: str
    download_url: str
    strategy: str = Field(description="Strategy that produced the document")
    failures: list[StrategyFailureResponse] = Field(
        default_factory=list,
        description="Strategies that failed before the successful one",
    )
