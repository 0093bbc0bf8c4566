"""Plain text extractor.

A lightweight extractor for text files that reads them as-is.
"""

import asyncio
import logging
from pathlib import Path

from fileflow.interfaces.extractor import BaseExtractor, ExtractedText

logger = logging.getLogger(__name__)


class PlainTextExtractor(BaseExtractor):
    """Extractor for plain text and markdown files."""

    def __init__(self, encoding: str = "utf-8") -> None:
        """Initialize the plain text extractor.

        Args:
            encoding: The character encoding to use when reading files.
        """
        self._encoding = encoding

    async def extract(self, file_path: str) -> ExtractedText:
        """Read a plain text document.

        Args:
            file_path: Path to the text file.

        Returns:
            ExtractedText with the file's content.

        Raises:
            FileNotFoundError: If the file doesn't exist.
            UnicodeDecodeError: If the file encoding is incorrect.
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        try:
            content = await asyncio.to_thread(path.read_text, encoding=self._encoding)
        except UnicodeDecodeError as e:
            logger.error(f"Encoding error reading {file_path}: {e}")
            raise

        logger.info(f"Read {len(content)} characters from {file_path}")
        return ExtractedText(
            content=content,
            metadata={
                "extractor": "plain_text",
                "source_file": path.name,
                "file_size": path.stat().st_size,
            },
        )

    @property
    def supported_extensions(self) -> set[str]:
        """Return supported file extensions."""
        return {".txt", ".md"}
