"""Template engine strategies.

Implements placeholder extraction, substitution and template rendering
for Word and plain-text documents.
"""

from fileflow.strategies.template_engine.models import Template, TemplatePreview, TemplateStats
from fileflow.strategies.template_engine.renderer import DocxTemplateRenderer, TextTemplateRenderer
from fileflow.strategies.template_engine.variables import (
    PLACEHOLDER_PATTERN,
    VariableEngine,
    extract_from_regions,
    extract_variables,
    find_malformed_placeholders,
    substitute,
)

__all__ = [
    "Template",
    "TemplatePreview",
    "TemplateStats",
    "DocxTemplateRenderer",
    "TextTemplateRenderer",
    "PLACEHOLDER_PATTERN",
    "VariableEngine",
    "extract_from_regions",
    "extract_variables",
    "find_malformed_placeholders",
    "substitute",
]
