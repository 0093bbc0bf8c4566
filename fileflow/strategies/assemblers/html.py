"""HTML document assembler.

Turns a reconstructed block sequence into a standalone HTML page that
a headless page renderer can print to PDF.
"""

import html
import logging
import re
from collections.abc import Sequence

from fileflow.interfaces.blocks import Block, BlockKind
from fileflow.interfaces.builder import BaseDocumentBuilder
from fileflow.interfaces.converter import ConversionOptions, PageGeometry

logger = logging.getLogger(__name__)

BULLET_MARKER = re.compile(r"^[•\-\*]\s+")
NUMBER_MARKER = re.compile(r"^\d+\.\s+")
BOLD_MARKERS = re.compile(r"\*\*|__")

BASE_CSS = """
body { font-family: Arial, sans-serif; font-size: 12pt; line-height: 1.6; color: #333; margin: 0; }
p { margin: 0.5em 0; text-align: justify; }
h1, h2, h3, h4 { margin: 1em 0 0.5em 0; font-weight: bold; page-break-after: avoid; }
h1 { font-size: 1.8em; }
h2 { font-size: 1.5em; }
h3 { font-size: 1.3em; }
h4 { font-size: 1.1em; }
p.emphasized { font-weight: bold; font-size: 14pt; text-align: center; }
.mono { font-family: 'Courier New', monospace; white-space: pre-wrap; text-align: left; }
div.blank { height: 0.5em; }
table { border-collapse: collapse; width: 100%; margin: 12px 0; }
th, td { border: 1px solid #999; padding: 6px 8px; text-align: left; }
"""


def page_css(geometry: PageGeometry) -> str:
    """Return the @page rule for a page geometry."""
    return (
        f"@page {{ size: {geometry.size}; margin: {geometry.margin_top}in "
        f"{geometry.margin_right}in {geometry.margin_bottom}in {geometry.margin_left}in; }}"
    )


class HtmlDocumentBuilder(BaseDocumentBuilder):
    """Builds HTML pages from typed blocks.

    Consecutive paragraph lines are joined into one <p> until a blank
    line or a different block type closes it; consecutive list items
    share one list and consecutive table rows one table.
    """

    def __init__(self, custom_css: str = "") -> None:
        """Initialize the builder.

        Args:
            custom_css: Extra CSS appended after the base stylesheet.
        """
        self._custom_css = custom_css

    def build(self, blocks: Sequence[Block], options: ConversionOptions) -> str:
        """Build an HTML document.

        Args:
            blocks: Ordered blocks from the text reconstructor.
            options: Page geometry, table grouping and title.

        Returns:
            The complete HTML document.
        """
        body = "\n".join(self._render_body(blocks, options))
        document = (
            "<!DOCTYPE html>\n"
            "<html>\n<head>\n<meta charset=\"UTF-8\">\n"
            f"<title>{html.escape(options.title)}</title>\n"
            f"<style>\n{page_css(options.geometry)}\n{BASE_CSS}{self._custom_css}\n</style>\n"
            "</head>\n<body>\n<div class=\"content\">\n"
            f"{body}\n"
            "</div>\n</body>\n</html>\n"
        )
        logger.info(f"Built HTML from {len(blocks)} blocks ({len(document)} characters)")
        return document

    def _render_body(self, blocks: Sequence[Block], options: ConversionOptions) -> list[str]:
        out: list[str] = []
        paragraph: list[str] = []
        group_kind: BlockKind | None = None
        group: list[Block] = []

        def flush_paragraph() -> None:
            if paragraph:
                out.append(f"<p>{' '.join(paragraph)}</p>")
                paragraph.clear()

        def flush_group() -> None:
            nonlocal group_kind
            if group:
                out.append(self._render_group(group_kind, group, options))
                group.clear()
            group_kind = None

        for block in blocks:
            if block.kind in (BlockKind.BULLET_ITEM, BlockKind.NUMBERED_ITEM, BlockKind.TABLE_ROW):
                flush_paragraph()
                if group_kind is not block.kind:
                    flush_group()
                    group_kind = block.kind
                group.append(block)
                continue

            flush_group()

            if block.kind is BlockKind.PARAGRAPH and not block.monospace:
                paragraph.append(html.escape(block.text))
                continue

            flush_paragraph()
            match block.kind:
                case BlockKind.HEADING:
                    level = min(max(block.level, 1), 4)
                    out.append(f"<h{level}>{html.escape(block.text)}</h{level}>")
                case BlockKind.EMPHASIZED:
                    text = html.escape(BOLD_MARKERS.sub("", block.text))
                    out.append(f"<p class=\"emphasized\">{text}</p>")
                case BlockKind.BLANK:
                    out.append("<div class=\"blank\"></div>")
                case _:
                    out.append(f"<p class=\"mono\">{html.escape(block.text)}</p>")

        flush_paragraph()
        flush_group()
        return out

    def _render_group(
        self, kind: BlockKind | None, blocks: list[Block], options: ConversionOptions
    ) -> str:
        if kind is BlockKind.BULLET_ITEM:
            items = "".join(
                f"<li>{html.escape(BULLET_MARKER.sub('', b.text))}</li>" for b in blocks
            )
            return f"<ul>{items}</ul>"

        if kind is BlockKind.NUMBERED_ITEM:
            items = "".join(
                f"<li>{html.escape(NUMBER_MARKER.sub('', b.text))}</li>" for b in blocks
            )
            return f"<ol>{items}</ol>"

        if not options.group_tables:
            return "\n".join(f"<p class=\"mono\">{html.escape(b.text)}</p>" for b in blocks)

        columns = max(len(b.cells) for b in blocks)
        rows = []
        for b in blocks:
            cells = list(b.cells) + [""] * (columns - len(b.cells))
            rows.append("<tr>" + "".join(f"<td>{html.escape(c)}</td>" for c in cells) + "</tr>")
        return "<table>" + "".join(rows) + "</table>"

    @property
    def output_extension(self) -> str:
        """Return the produced file extension."""
        return ".html"
