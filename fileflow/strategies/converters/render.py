"""Style-aware DOCX to PDF rendering.

Reads the Word document's paragraph styles and tables, lays them out as
HTML and prints the page to PDF. Used when no office suite is installed.
"""

import asyncio
import logging
from pathlib import Path

from fileflow.interfaces.builder import BasePageRenderer
from fileflow.interfaces.converter import ConversionOptions, ConversionStrategy
from fileflow.strategies.assemblers.html import HtmlDocumentBuilder
from fileflow.strategies.extractors.docx import DocxTextExtractor

logger = logging.getLogger(__name__)


class DocxHtmlRenderStrategy(ConversionStrategy):
    """DOCX to PDF through HTML and a headless page renderer."""

    name = "docx_html_render"

    def __init__(
        self,
        extractor: DocxTextExtractor,
        builder: HtmlDocumentBuilder,
        renderer: BasePageRenderer,
        timeout: float = 120.0,
    ) -> None:
        super().__init__(timeout=timeout)
        self._extractor = extractor
        self._builder = builder
        self._renderer = renderer

    async def convert(
        self,
        input_path: Path,
        output_path: Path,
        options: ConversionOptions,
    ) -> Path:
        """Render a Word document to PDF.

        Args:
            input_path: The source .docx file.
            output_path: The requested .pdf destination.
            options: Page geometry and table grouping.

        Returns:
            The requested output path.
        """
        blocks = await self._extractor.read_blocks(str(input_path))
        if not blocks:
            raise RuntimeError(f"{input_path.name} has no content to render")

        html = self._builder.build(blocks, options)
        pdf = await asyncio.to_thread(self._renderer.render, html, options.geometry)

        output_path.parent.mkdir(parents=True, exist_ok=True)
        await asyncio.to_thread(output_path.write_bytes, pdf)
        logger.info(f"Rendered {len(blocks)} blocks to PDF: {output_path}")
        return output_path

    async def cleanup(self, output_path: Path) -> None:
        """Remove a partially written PDF."""
        output_path.unlink(missing_ok=True)
