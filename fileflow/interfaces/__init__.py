"""Abstract base classes for document processing strategies."""

from fileflow.interfaces.blocks import Block, BlockKind
from fileflow.interfaces.builder import BaseDocumentBuilder, BasePageRenderer
from fileflow.interfaces.converter import (
    CascadeExhausted,
    ConversionError,
    ConversionOptions,
    ConversionResult,
    ConversionStrategy,
    EmptyOutputError,
    PageGeometry,
    StrategyFailure,
)
from fileflow.interfaces.extractor import BaseExtractor, ExtractedText, ExtractionWarning
from fileflow.interfaces.template import (
    BaseTemplateRenderer,
    RenderError,
    TemplateError,
    TemplateNotFoundError,
)

__all__ = [
    "Block",
    "BlockKind",
    "BaseDocumentBuilder",
    "BasePageRenderer",
    "BaseExtractor",
    "ExtractedText",
    "ExtractionWarning",
    "ConversionStrategy",
    "ConversionOptions",
    "ConversionResult",
    "PageGeometry",
    "ConversionError",
    "StrategyFailure",
    "EmptyOutputError",
    "CascadeExhausted",
    "BaseTemplateRenderer",
    "TemplateError",
    "TemplateNotFoundError",
    "RenderError",
]
