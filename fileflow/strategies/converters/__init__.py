"""Conversion strategies tried in order by a conversion cascade."""

from fileflow.strategies.converters.office import (
    DOCX_VARIANTS,
    PDF_VARIANTS,
    OfficeProcessError,
    OfficeSuiteStrategy,
    OfficeVariant,
)
from fileflow.strategies.converters.pdf2docx import Pdf2DocxStrategy
from fileflow.strategies.converters.reconstruction import (
    BasicTextStrategy,
    PlainTextStrategy,
    TextReconstructionStrategy,
)
from fileflow.strategies.converters.render import DocxHtmlRenderStrategy

__all__ = [
    "DOCX_VARIANTS",
    "PDF_VARIANTS",
    "BasicTextStrategy",
    "DocxHtmlRenderStrategy",
    "OfficeProcessError",
    "OfficeSuiteStrategy",
    "OfficeVariant",
    "Pdf2DocxStrategy",
    "PlainTextStrategy",
    "TextReconstructionStrategy",
]
