"""Word document extractor.

Reads body text with python-docx and scans the raw header/footer XML
parts of the package as auxiliary regions.
"""

import asyncio
import logging
import re
import zipfile
from pathlib import Path

from fileflow.interfaces.blocks import Block, BlockKind
from fileflow.interfaces.extractor import BaseExtractor, ExtractedText, ExtractionWarning
from fileflow.strategies.template_engine.variables import strip_tags

logger = logging.getLogger(__name__)

HEADER_FOOTER_PART = re.compile(r"^word/(header|footer)\d*\.xml$")
HEADING_STYLE = re.compile(r"^Heading\s*(\d+)$", re.IGNORECASE)


class DocxTextExtractor(BaseExtractor):
    """Extractor for .docx files.

    Body paragraphs and tables are read in document order; table rows are
    emitted as tab-separated lines so the text reconstructor recognises
    them. Header and footer parts are read straight from the zip package.
    A region that cannot be read produces an ExtractionWarning instead of
    failing the extraction.
    """

    async def extract(self, file_path: str) -> ExtractedText:
        """Extract text from a Word document.

        Args:
            file_path: Path to the .docx file.

        Returns:
            ExtractedText with the body, header/footer regions and warnings.

        Raises:
            FileNotFoundError: If the file doesn't exist.
            RuntimeError: If the body cannot be read.
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        logger.info(f"Extracting text from DOCX: {file_path}")

        try:
            body = await asyncio.to_thread(self._read_body, path)
        except Exception as e:
            logger.error(f"Failed to read DOCX body {file_path}: {e}")
            raise RuntimeError(f"Failed to extract text from DOCX: {e}") from e

        regions, warnings = await asyncio.to_thread(self._read_regions, path)

        logger.info(
            f"Extracted {len(body)} characters and {len(regions)} header/footer regions "
            f"from {path.name}"
        )
        return ExtractedText(
            content=body,
            regions=regions,
            warnings=tuple(warnings),
            metadata={
                "extractor": "docx",
                "source_file": path.name,
                "file_size": path.stat().st_size,
            },
        )

    def _read_body(self, path: Path) -> str:
        from docx import Document
        from docx.table import Table

        doc = Document(str(path))
        lines: list[str] = []
        for item in doc.iter_inner_content():
            if isinstance(item, Table):
                lines.extend("\t".join(cells) for cells in _table_rows(item))
            else:
                lines.append(item.text)
        return "\n".join(lines)

    def _read_regions(self, path: Path) -> tuple[dict[str, str], list[ExtractionWarning]]:
        regions: dict[str, str] = {}
        warnings: list[ExtractionWarning] = []

        try:
            with zipfile.ZipFile(path) as package:
                names = [n for n in package.namelist() if HEADER_FOOTER_PART.match(n)]
                for name in sorted(names):
                    try:
                        xml = package.read(name).decode("utf-8")
                    except (KeyError, UnicodeDecodeError, zipfile.BadZipFile) as e:
                        warnings.append(ExtractionWarning(region=name, message=str(e)))
                        continue
                    regions[name] = strip_tags(xml)
        except (OSError, zipfile.BadZipFile) as e:
            warnings.append(
                ExtractionWarning(region="headers/footers", message=f"Package not readable: {e}")
            )

        for warning in warnings:
            logger.warning(f"Skipping region of {path.name}: {warning}")

        return regions, warnings

    async def read_blocks(self, file_path: str) -> list[Block]:
        """Read the document's own structure as typed blocks.

        Heading styles map to headings, list styles to list items, centred
        all-bold paragraphs to emphasized text and tables to table rows.

        Args:
            file_path: Path to the .docx file.

        Returns:
            Ordered list of blocks.

        Raises:
            FileNotFoundError: If the file doesn't exist.
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")
        return await asyncio.to_thread(self._read_blocks_sync, path)

    def _read_blocks_sync(self, path: Path) -> list[Block]:
        from docx import Document
        from docx.enum.text import WD_ALIGN_PARAGRAPH
        from docx.table import Table

        doc = Document(str(path))
        blocks: list[Block] = []

        for item in doc.iter_inner_content():
            if isinstance(item, Table):
                for cells in _table_rows(item):
                    blocks.append(
                        Block(kind=BlockKind.TABLE_ROW, text="\t".join(cells), cells=tuple(cells))
                    )
                continue

            text = item.text.strip()
            if not text:
                blocks.append(Block(kind=BlockKind.BLANK))
                continue

            style = item.style.name if item.style is not None else ""
            heading = HEADING_STYLE.match(style)
            if style == "Title":
                blocks.append(Block(kind=BlockKind.HEADING, text=text, level=1))
            elif heading:
                level = min(max(int(heading.group(1)), 1), 4)
                blocks.append(Block(kind=BlockKind.HEADING, text=text, level=level))
            elif style.startswith("List Bullet"):
                blocks.append(Block(kind=BlockKind.BULLET_ITEM, text=text))
            elif style.startswith("List Number"):
                blocks.append(Block(kind=BlockKind.NUMBERED_ITEM, text=text))
            elif (
                item.alignment == WD_ALIGN_PARAGRAPH.CENTER
                and item.runs
                and all(run.bold for run in item.runs if run.text.strip())
            ):
                blocks.append(Block(kind=BlockKind.EMPHASIZED, text=text))
            else:
                blocks.append(Block(kind=BlockKind.PARAGRAPH, text=text))

        logger.debug(f"Read {len(blocks)} structural blocks from {path.name}")
        return blocks

    @property
    def supported_extensions(self) -> set[str]:
        """Return supported file extensions."""
        return {".docx"}


def _table_rows(table) -> list[list[str]]:
    """Return cell texts per row, with horizontally merged cells listed once."""
    rows: list[list[str]] = []
    for row in table.rows:
        cells: list[str] = []
        previous = None
        for cell in row.cells:
            if previous is not None and cell._tc is previous:
                continue
            previous = cell._tc
            cells.append(cell.text.strip())
        rows.append(cells)
    return rows
