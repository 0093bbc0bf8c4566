"""Typed document blocks.

A Block is one classified unit of reconstructed document structure,
produced from a single line of extracted text.
"""

from dataclasses import dataclass
from enum import Enum


class BlockKind(str, Enum):
    """Semantic type of a reconstructed block."""

    HEADING = "heading"
    BULLET_ITEM = "bullet_item"
    NUMBERED_ITEM = "numbered_item"
    TABLE_ROW = "table_row"
    EMPHASIZED = "emphasized"
    PARAGRAPH = "paragraph"
    BLANK = "blank"


@dataclass(frozen=True)
class Block:
    """A typed unit of document content.

    Attributes:
        kind: The semantic block type.
        text: The line content; placeholder tokens are left unresolved.
        level: Heading level (1-4) for headings, 0 otherwise.
        cells: Cell texts for table rows, empty otherwise.
        monospace: True for rows that looked tabular but had a single cell.
    """

    kind: BlockKind
    text: str = ""
    level: int = 0
    cells: tuple[str, ...] = ()
    monospace: bool = False
