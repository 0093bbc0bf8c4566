"""Document assemblers and page renderers."""

from fileflow.strategies.assemblers.docx import DocxDocumentBuilder
from fileflow.strategies.assemblers.html import HtmlDocumentBuilder
from fileflow.strategies.assemblers.pdf import WeasyPrintRenderer

__all__ = [
    "DocxDocumentBuilder",
    "HtmlDocumentBuilder",
    "WeasyPrintRenderer",
]
