"""Headless page renderer.

Prints HTML pages to PDF with WeasyPrint.
"""

import logging

from fileflow.interfaces.builder import BasePageRenderer
from fileflow.interfaces.converter import PageGeometry
from fileflow.strategies.assemblers.html import page_css

logger = logging.getLogger(__name__)


class WeasyPrintRenderer(BasePageRenderer):
    """Renders HTML to PDF using WeasyPrint."""

    def render(self, html: str, geometry: PageGeometry) -> bytes:
        """Render an HTML page to PDF bytes.

        Args:
            html: Complete HTML document.
            geometry: Page geometry; applied as an extra stylesheet so it
                wins over any @page rule in the document.

        Returns:
            PDF bytes.

        Raises:
            RuntimeError: If WeasyPrint fails.
        """
        try:
            from weasyprint import CSS, HTML
        except ImportError as e:
            raise ImportError(
                "weasyprint is required for PDF rendering. "
                "Install it with: pip install weasyprint"
            ) from e

        try:
            pdf = HTML(string=html).write_pdf(stylesheets=[CSS(string=page_css(geometry))])
        except Exception as e:
            logger.error(f"PDF rendering failed: {e}", exc_info=True)
            raise RuntimeError(f"Failed to convert HTML to PDF: {e}") from e

        logger.info(f"Rendered PDF ({len(pdf)} bytes)")
        return pdf
