"""Word document assembler.

Materializes a reconstructed block sequence as a .docx document using
python-docx.
"""

import io
import logging
import re
from collections.abc import Sequence

from fileflow.interfaces.blocks import Block, BlockKind
from fileflow.interfaces.builder import BaseDocumentBuilder
from fileflow.interfaces.converter import ConversionOptions

logger = logging.getLogger(__name__)

BULLET_MARKER = re.compile(r"^[•\-\*]\s+")
NUMBER_MARKER = re.compile(r"^\d+\.\s+")
BOLD_MARKERS = re.compile(r"\*\*|__")

MONOSPACE_FONT = "Courier New"
BODY_SIZE_PT = 12
EMPHASIS_SIZE_PT = 14


class DocxDocumentBuilder(BaseDocumentBuilder):
    """Builds Word documents from typed blocks.

    Mapping:
        Heading(level)   -> Heading style, 12pt before / 6pt after
        Bullet/Numbered  -> List Bullet / List Number at level 0
        TableRow run     -> one grid table (or Courier New lines)
        Emphasized       -> bold, centered, 14pt
        Paragraph        -> body text, 6pt before / after
        Blank            -> empty paragraph for vertical spacing
    """

    def build(self, blocks: Sequence[Block], options: ConversionOptions) -> bytes:
        """Build a .docx document.

        Args:
            blocks: Ordered blocks from the text reconstructor.
            options: Page geometry and table grouping preference.

        Returns:
            The serialized .docx bytes.
        """
        from docx import Document

        doc = Document()
        self._apply_geometry(doc, options)

        pending_rows: list[Block] = []
        for block in blocks:
            if block.kind is BlockKind.TABLE_ROW:
                pending_rows.append(block)
                continue
            if pending_rows:
                self._add_rows(doc, pending_rows, options)
                pending_rows = []
            self._add_block(doc, block)

        if pending_rows:
            self._add_rows(doc, pending_rows, options)

        buffer = io.BytesIO()
        doc.save(buffer)
        data = buffer.getvalue()
        logger.info(f"Built DOCX from {len(blocks)} blocks ({len(data)} bytes)")
        return data

    def _apply_geometry(self, doc, options: ConversionOptions) -> None:
        from docx.shared import Inches, Mm

        geometry = options.geometry
        width, height = geometry.dimensions_mm
        section = doc.sections[0]
        section.page_width = Mm(width)
        section.page_height = Mm(height)
        section.top_margin = Inches(geometry.margin_top)
        section.right_margin = Inches(geometry.margin_right)
        section.bottom_margin = Inches(geometry.margin_bottom)
        section.left_margin = Inches(geometry.margin_left)

    def _add_block(self, doc, block: Block) -> None:
        from docx.enum.text import WD_ALIGN_PARAGRAPH
        from docx.shared import Pt

        match block.kind:
            case BlockKind.HEADING:
                paragraph = doc.add_heading(block.text, level=min(max(block.level, 1), 4))
                self._spacing(paragraph, before=12, after=6)
            case BlockKind.BULLET_ITEM:
                paragraph = doc.add_paragraph(style="List Bullet")
                self._add_run(paragraph, BULLET_MARKER.sub("", block.text))
                self._spacing(paragraph, before=3, after=3)
            case BlockKind.NUMBERED_ITEM:
                paragraph = doc.add_paragraph(style="List Number")
                self._add_run(paragraph, NUMBER_MARKER.sub("", block.text))
                self._spacing(paragraph, before=3, after=3)
            case BlockKind.EMPHASIZED:
                paragraph = doc.add_paragraph()
                run = self._add_run(paragraph, BOLD_MARKERS.sub("", block.text), size=EMPHASIS_SIZE_PT)
                run.bold = True
                paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER
                self._spacing(paragraph, before=6, after=6)
            case BlockKind.BLANK:
                paragraph = doc.add_paragraph()
                paragraph.paragraph_format.space_after = Pt(0)
            case _:
                paragraph = doc.add_paragraph()
                font = MONOSPACE_FONT if block.monospace else None
                self._add_run(paragraph, block.text, font=font)
                self._spacing(paragraph, before=6, after=6)

    def _add_rows(self, doc, rows: list[Block], options: ConversionOptions) -> None:
        if not options.group_tables:
            for row in rows:
                paragraph = doc.add_paragraph()
                self._add_run(paragraph, row.text, font=MONOSPACE_FONT)
                self._spacing(paragraph, before=6, after=6)
            return

        columns = max(len(row.cells) for row in rows)
        table = doc.add_table(rows=len(rows), cols=columns)
        table.style = "Table Grid"
        for row_idx, row in enumerate(rows):
            cells = table.rows[row_idx].cells
            for col_idx in range(columns):
                cells[col_idx].text = row.cells[col_idx] if col_idx < len(row.cells) else ""

        logger.debug(f"Grouped {len(rows)} table rows into a {len(rows)}x{columns} table")

    @staticmethod
    def _add_run(paragraph, text: str, size: int = BODY_SIZE_PT, font: str | None = None):
        from docx.shared import Pt

        run = paragraph.add_run(text)
        run.font.size = Pt(size)
        if font:
            run.font.name = font
        return run

    @staticmethod
    def _spacing(paragraph, before: int, after: int) -> None:
        from docx.shared import Pt

        paragraph.paragraph_format.space_before = Pt(before)
        paragraph.paragraph_format.space_after = Pt(after)

    @property
    def output_extension(self) -> str:
        """Return the produced file extension."""
        return ".docx"
