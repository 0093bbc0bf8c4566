"""PDF text extractor.

Uses pdfplumber to read the text layer page by page. Scanned,
image-only PDFs have no text layer and are reported with a warning.
Lines are rebuilt from word positions so that wide column gaps survive
as tabs.
"""

import asyncio
import logging
from pathlib import Path

from fileflow.interfaces.extractor import BaseExtractor, ExtractedText, ExtractionWarning

logger = logging.getLogger(__name__)


def layout_lines(words: list[dict], column_gap: float = 0.5, line_tolerance: float = 3.0) -> list[str]:
    """Rebuild text lines from pdfplumber words, keeping column gaps.

    Words whose `top` differs by at most `line_tolerance` points share a
    line. A horizontal gap wider than `column_gap` times the line height
    becomes a tab, so tabular rows stay recognizable; narrower gaps
    become one space.

    Args:
        words: Output of `page.extract_words()`.
        column_gap: Gap threshold, as a fraction of the line height.
        line_tolerance: Vertical tolerance in points.

    Returns:
        Lines in reading order (top to bottom, left to right).
    """
    rows: list[list[dict]] = []
    for word in sorted(words, key=lambda w: (w["top"], w["x0"])):
        if rows and abs(word["top"] - rows[-1][0]["top"]) <= line_tolerance:
            rows[-1].append(word)
        else:
            rows.append([word])

    lines = []
    for row in rows:
        row.sort(key=lambda w: w["x0"])
        parts = [row[0]["text"]]
        for prev, word in zip(row, row[1:]):
            height = max(word["bottom"] - word["top"], prev["bottom"] - prev["top"])
            parts.append("\t" if word["x0"] - prev["x1"] > column_gap * height else " ")
            parts.append(word["text"])
        lines.append("".join(parts))
    return lines


class PdfTextExtractor(BaseExtractor):
    """Extractor for .pdf files.

    Attributes:
        page_separator: Text inserted between pages.
        column_gap: Word gap, as a fraction of the line height, that
            separates table columns.
    """

    def __init__(self, page_separator: str = "\n\n", column_gap: float = 0.5) -> None:
        """Initialize the PDF extractor.

        Args:
            page_separator: Text inserted between consecutive pages.
            column_gap: Gaps wider than this fraction of the line height
                are emitted as tabs.
        """
        self._page_separator = page_separator
        self._column_gap = column_gap

    async def extract(self, file_path: str) -> ExtractedText:
        """Extract the text layer of a PDF.

        Args:
            file_path: Path to the PDF file.

        Returns:
            ExtractedText with page text joined by the page separator.

        Raises:
            FileNotFoundError: If the file doesn't exist.
            RuntimeError: If the PDF cannot be opened.
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        logger.info(f"Extracting text from PDF: {file_path}")

        try:
            return await asyncio.to_thread(self._extract_sync, path)
        except FileNotFoundError:
            raise
        except Exception as e:
            logger.error(f"Failed to parse {file_path}: {e}")
            raise RuntimeError(f"Failed to extract text from PDF: {e}") from e

    def _extract_sync(self, path: Path) -> ExtractedText:
        import pdfplumber

        pages: list[str] = []
        warnings: list[ExtractionWarning] = []

        with pdfplumber.open(str(path)) as pdf:
            page_count = len(pdf.pages)
            for page_number, page in enumerate(pdf.pages, start=1):
                try:
                    pages.append("\n".join(layout_lines(page.extract_words(), self._column_gap)))
                except Exception as e:
                    logger.warning(f"Page {page_number} of {path.name} unreadable: {e}")
                    warnings.append(ExtractionWarning(region=f"page {page_number}", message=str(e)))
                    pages.append("")

        content = self._page_separator.join(pages)
        if not content.strip():
            warnings.append(
                ExtractionWarning(
                    region="document",
                    message="No text layer found; scanned PDFs are not supported",
                )
            )

        logger.info(f"Extracted {len(content)} characters from {page_count} pages of {path.name}")
        return ExtractedText(
            content=content,
            warnings=tuple(warnings),
            metadata={
                "extractor": "pdfplumber",
                "source_file": path.name,
                "page_count": page_count,
            },
        )

    @property
    def supported_extensions(self) -> set[str]:
        """Return supported file extensions."""
        return {".pdf"}
