"""Text-based conversion strategies.

These strategies work from the extracted text only. They are the
fallbacks when no layout-preserving converter is available, and the
primary path for plain-text sources.
"""

import asyncio
import logging
from collections.abc import Sequence
from pathlib import Path

from fileflow.interfaces.blocks import Block, BlockKind
from fileflow.interfaces.builder import BaseDocumentBuilder, BasePageRenderer
from fileflow.interfaces.converter import ConversionOptions, ConversionStrategy
from fileflow.interfaces.extractor import BaseExtractor
from fileflow.strategies.reconstruction import TextReconstructor, normalize_text

logger = logging.getLogger(__name__)


class _TextStrategy(ConversionStrategy):
    """Shared extraction and output handling."""

    def __init__(
        self,
        extractor: BaseExtractor,
        builder: BaseDocumentBuilder,
        renderer: BasePageRenderer | None = None,
        timeout: float = 120.0,
    ) -> None:
        super().__init__(timeout=timeout)
        if builder.output_extension == ".html" and renderer is None:
            raise ValueError("An HTML builder needs a page renderer to produce PDF output")
        self._extractor = extractor
        self._builder = builder
        self._renderer = renderer

    async def _read_text(self, input_path: Path) -> str:
        extracted = await self._extractor.extract(str(input_path))
        for warning in extracted.warnings:
            logger.warning(f"{input_path.name}: {warning}")
        if not extracted.content.strip():
            raise RuntimeError(f"No text could be extracted from {input_path.name}")
        return extracted.content

    async def _write(self, blocks: Sequence[Block], output_path: Path, options: ConversionOptions) -> Path:
        document = self._builder.build(blocks, options)
        if isinstance(document, str):
            document = await asyncio.to_thread(self._renderer.render, document, options.geometry)

        output_path.parent.mkdir(parents=True, exist_ok=True)
        await asyncio.to_thread(output_path.write_bytes, document)
        return output_path

    async def cleanup(self, output_path: Path) -> None:
        """Remove a partially written document."""
        output_path.unlink(missing_ok=True)


class TextReconstructionStrategy(_TextStrategy):
    """Extract text, infer structure and assemble a new document.

    Produces a Word document when given the DOCX builder, or a PDF when
    given the HTML builder together with a page renderer.
    """

    name = "text_reconstruction"

    async def convert(
        self,
        input_path: Path,
        output_path: Path,
        options: ConversionOptions,
    ) -> Path:
        """Rebuild the document from its text.

        Args:
            input_path: The source document.
            output_path: The requested destination.
            options: Page geometry, table grouping and heading markers.

        Returns:
            The requested output path.
        """
        text = await self._read_text(input_path)
        blocks = TextReconstructor(markdown_headings=options.markdown_headings).reconstruct(text)
        await self._write(blocks, output_path, options)
        logger.info(f"Text reconstruction produced {len(blocks)} blocks: {output_path}")
        return output_path


class BasicTextStrategy(_TextStrategy):
    """Write every non-blank line as a plain paragraph."""

    name = "basic_text"

    async def convert(
        self,
        input_path: Path,
        output_path: Path,
        options: ConversionOptions,
    ) -> Path:
        text = await self._read_text(input_path)
        blocks = [
            Block(BlockKind.PARAGRAPH, line.strip()) if line.strip() else Block(BlockKind.BLANK)
            for line in normalize_text(text).split("\n")
        ]
        await self._write(blocks, output_path, options)
        logger.info(f"Basic text conversion successful: {output_path}")
        return output_path


class PlainTextStrategy(ConversionStrategy):
    """Write the extracted body text to a .txt file."""

    name = "plain_text"

    def __init__(self, extractor: BaseExtractor, encoding: str = "utf-8", timeout: float = 120.0) -> None:
        super().__init__(timeout=timeout)
        self._extractor = extractor
        self._encoding = encoding

    async def convert(
        self,
        input_path: Path,
        output_path: Path,
        options: ConversionOptions,
    ) -> Path:
        """Extract the text of a document.

        Args:
            input_path: The source document.
            output_path: The requested .txt destination.
            options: Unused.

        Returns:
            The requested output path.
        """
        extracted = await self._extractor.extract(str(input_path))
        for warning in extracted.warnings:
            logger.warning(f"{input_path.name}: {warning}")

        text = normalize_text(extracted.content)
        if not text:
            raise RuntimeError(f"No text could be extracted from {input_path.name}")

        output_path.parent.mkdir(parents=True, exist_ok=True)
        await asyncio.to_thread(output_path.write_text, text + "\n", encoding=self._encoding)
        logger.info(f"Wrote {len(text)} characters of text: {output_path}")
        return output_path

    async def cleanup(self, output_path: Path) -> None:
        """Remove a partially written file."""
        output_path.unlink(missing_ok=True)
