"""Concrete strategy implementations."""

from fileflow.strategies.assemblers import (
    DocxDocumentBuilder,
    HtmlDocumentBuilder,
    WeasyPrintRenderer,
)
from fileflow.strategies.extractors import (
    DocxTextExtractor,
    PdfTextExtractor,
    PlainTextExtractor,
)
from fileflow.strategies.reconstruction import (
    TextReconstructor,
)
from fileflow.strategies.template_engine import (
    DocxTemplateRenderer,
    TextTemplateRenderer,
    VariableEngine,
)

__all__ = [
    "DocxDocumentBuilder",
    "HtmlDocumentBuilder",
    "WeasyPrintRenderer",
    "DocxTextExtractor",
    "PdfTextExtractor",
    "PlainTextExtractor",
    "TextReconstructor",
    "DocxTemplateRenderer",
    "TextTemplateRenderer",
    "VariableEngine",
]
