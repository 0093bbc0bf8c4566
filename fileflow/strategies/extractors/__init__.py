"""Concrete text extractor implementations."""

from fileflow.strategies.extractors.docx import DocxTextExtractor
from fileflow.strategies.extractors.pdf import PdfTextExtractor
from fileflow.strategies.extractors.text import PlainTextExtractor

__all__ = [
    "DocxTextExtractor",
    "PdfTextExtractor",
    "PlainTextExtractor",
]
