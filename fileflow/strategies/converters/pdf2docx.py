"""pdf2docx conversion strategy.

Rebuilds a Word document from the PDF's layout (text blocks, tables,
images) with the pdf2docx library.
"""

import asyncio
import logging
from pathlib import Path

from fileflow.interfaces.converter import ConversionOptions, ConversionStrategy

logger = logging.getLogger(__name__)


class Pdf2DocxStrategy(ConversionStrategy):
    """PDF to DOCX conversion with pdf2docx."""

    name = "pdf2docx"

    async def convert(
        self,
        input_path: Path,
        output_path: Path,
        options: ConversionOptions,
    ) -> Path:
        """Convert a PDF into a Word document.

        Args:
            input_path: The source PDF.
            output_path: The requested .docx destination.
            options: Unused; pdf2docx keeps the source layout.

        Returns:
            The requested output path.
        """
        output_path.parent.mkdir(parents=True, exist_ok=True)
        await asyncio.to_thread(self._convert_sync, input_path, output_path)
        logger.info(f"pdf2docx conversion successful: {output_path}")
        return output_path

    @staticmethod
    def _convert_sync(input_path: Path, output_path: Path) -> None:
        try:
            from pdf2docx import Converter
        except ImportError as e:
            raise ImportError(
                "pdf2docx is required for layout-preserving PDF conversion. "
                "Install it with: pip install pdf2docx"
            ) from e

        converter = Converter(str(input_path))
        try:
            converter.convert(str(output_path), start=0, end=None)
        finally:
            converter.close()

    async def cleanup(self, output_path: Path) -> None:
        """Remove a partially written document."""
        output_path.unlink(missing_ok=True)
