"""Text reconstructor.

Infers document structure from flat extracted text by normalizing it,
classifying each line and emitting an ordered sequence of typed blocks.
"""

import logging
import re

from fileflow.interfaces.blocks import Block, BlockKind
from fileflow.strategies.reconstruction.classifier import classify

logger = logging.getLogger(__name__)

BLANK_RUN = re.compile(r"\n[ \t\f\v]*(?:\n[ \t\f\v]*)*\n")
CELL_SEPARATOR = re.compile(r"\t|\s{2,}")
MARKDOWN_HEADING = re.compile(r"^(#{1,4})\s+(.*)$")


def normalize_text(text: str) -> str:
    """Normalize line endings and blank-line runs.

    Converts CRLF and CR to LF, collapses every run of blank or
    whitespace-only lines into a single blank line and trims the result.

    Args:
        text: Raw extracted text.

    Returns:
        The normalized text.
    """
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = BLANK_RUN.sub("\n\n", text)
    return text.strip()


def split_cells(line: str) -> list[str]:
    """Split a table-like line into non-empty cells."""
    return [cell.strip() for cell in CELL_SEPARATOR.split(line) if cell.strip()]


class TextReconstructor:
    """Builds typed blocks from raw extracted text.

    Attributes:
        markdown_headings: When True, lines starting with one to four '#'
            markers become headings of that level before any other rule
            is tried. Used for hand-written plain text.
    """

    def __init__(self, markdown_headings: bool = False) -> None:
        """Initialize the reconstructor.

        Args:
            markdown_headings: Honour '#' heading markers.
        """
        self._markdown_headings = markdown_headings

    def reconstruct(self, text: str) -> list[Block]:
        """Reconstruct document structure from text.

        Args:
            text: Raw extracted text, any line-ending style.

        Returns:
            One Block per line, in document order. Empty input yields
            an empty list.
        """
        normalized = normalize_text(text or "")
        if not normalized:
            return []

        blocks = [self._line_to_block(line) for line in normalized.split("\n")]

        logger.debug(
            f"Reconstructed {len(blocks)} blocks "
            f"({sum(b.kind is BlockKind.HEADING for b in blocks)} headings, "
            f"{sum(b.kind is BlockKind.TABLE_ROW for b in blocks)} table rows)"
        )
        return blocks

    def _line_to_block(self, raw_line: str) -> Block:
        line = raw_line.strip()

        if self._markdown_headings:
            match = MARKDOWN_HEADING.match(line)
            if match and match.group(2).strip():
                return Block(
                    kind=BlockKind.HEADING,
                    text=match.group(2).strip(),
                    level=len(match.group(1)),
                )

        kind, level = classify(line)

        if kind is BlockKind.TABLE_ROW:
            cells = split_cells(line)
            if len(cells) < 2:
                # A single cell means the gap was a layout artefact, not a table.
                return Block(kind=BlockKind.PARAGRAPH, text=line, monospace=True)
            return Block(kind=kind, text=line, cells=tuple(cells))

        return Block(kind=kind, text=line, level=level)


def reconstruct(text: str, markdown_headings: bool = False) -> list[Block]:
    """Reconstruct document structure from text.

    Args:
        text: Raw extracted text.
        markdown_headings: Honour '#' heading markers.

    Returns:
        Ordered list of blocks.
    """
    return TextReconstructor(markdown_headings=markdown_headings).reconstruct(text)
