"""Application services built on the strategies."""

from fileflow.services.cascade import ConversionCascade
from fileflow.services.documents import OUTPUT_FORMATS, DocumentService, format_of
from fileflow.services.registry import TemplateRegistry

__all__ = [
    "OUTPUT_FORMATS",
    "ConversionCascade",
    "DocumentService",
    "TemplateRegistry",
    "format_of",
]
