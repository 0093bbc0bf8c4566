"""Unit tests for the text extractors."""

import asyncio
import zipfile

import pytest
from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH

from fileflow.interfaces.blocks import BlockKind
from fileflow.interfaces.converter import ConversionOptions
from fileflow.strategies.assemblers import DocxDocumentBuilder
from fileflow.strategies.converters import TextReconstructionStrategy
from fileflow.strategies.extractors import DocxTextExtractor, PdfTextExtractor, PlainTextExtractor
from fileflow.strategies.extractors.pdf import layout_lines
from fileflow.strategies.reconstruction import TextReconstructor


# =============================================================================
# DOCX Extractor Tests
# =============================================================================


class TestDocxTextExtractor:
    """Test suite for DocxTextExtractor."""

    @pytest.fixture
    def extractor(self):
        """Create a DOCX extractor instance."""
        return DocxTextExtractor()

    def test_supported_extensions(self, extractor):
        """Test that only .docx files are supported."""
        assert extractor.supported_extensions == {".docx"}
        assert extractor.supports_file("Letter.DOCX")
        assert not extractor.supports_file("letter.pdf")

    def test_extract_nonexistent_file(self, extractor):
        """Test that extracting a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            asyncio.run(extractor.extract("/nonexistent/file.docx"))

    def test_body_and_tables_in_order(self, extractor, make_docx):
        """Test that paragraphs and tab-separated table rows are extracted."""
        path = make_docx(["Intro", "Details"], table=[["Item", "Qty"], ["Pens", "3"]])

        extracted = asyncio.run(extractor.extract(str(path)))

        assert extracted.content.split("\n") == ["Intro", "Details", "Item\tQty", "Pens\t3"]
        assert extracted.warnings == ()
        assert extracted.metadata["extractor"] == "docx"

    def test_header_region(self, extractor, make_docx):
        """Test that header text is returned as an auxiliary region."""
        path = make_docx(["Body"], header="Confidential {{Client}}")

        extracted = asyncio.run(extractor.extract(str(path)))

        header = [text for name, text in extracted.regions.items() if "header" in name]
        assert header and "Confidential {{Client}}" in header[0]

    def test_unreadable_region_degrades(self, extractor, make_docx, tmp_path):
        """Test that a corrupt header part becomes a warning, not a failure."""
        source = make_docx(["Body {{Name}}"])
        damaged = tmp_path / "damaged.docx"
        with zipfile.ZipFile(source) as src, zipfile.ZipFile(damaged, "w") as dst:
            for item in src.infolist():
                dst.writestr(item, src.read(item.filename))
            dst.writestr("word/header9.xml", b"\xff\xfe\xfa not utf-8")

        extracted = asyncio.run(extractor.extract(str(damaged)))

        assert extracted.content == "Body {{Name}}"
        assert len(extracted.warnings) == 1
        assert extracted.warnings[0].region == "word/header9.xml"

    def test_invalid_package(self, extractor, tmp_path):
        """Test that a file that is not a Word package raises RuntimeError."""
        path = tmp_path / "fake.docx"
        path.write_bytes(b"not a zip file")

        with pytest.raises(RuntimeError):
            asyncio.run(extractor.extract(str(path)))

    def test_read_blocks_from_styles(self, extractor, tmp_path):
        """Test that paragraph styles map to block kinds."""
        doc = Document()
        doc.add_heading("Quarterly Report", level=1)
        doc.add_heading("Scope", level=2)
        doc.add_paragraph("first point", style="List Bullet")
        doc.add_paragraph("first step", style="List Number")
        centered = doc.add_paragraph()
        centered.add_run("Key Notice").bold = True
        centered.alignment = WD_ALIGN_PARAGRAPH.CENTER
        doc.add_paragraph("")
        doc.add_paragraph("Closing words.")
        table = doc.add_table(rows=1, cols=2)
        table.cell(0, 0).text = "A"
        table.cell(0, 1).text = "B"
        path = tmp_path / "styled.docx"
        doc.save(str(path))

        blocks = asyncio.run(extractor.read_blocks(str(path)))

        assert [(b.kind, b.level) for b in blocks] == [
            (BlockKind.HEADING, 1),
            (BlockKind.HEADING, 2),
            (BlockKind.BULLET_ITEM, 0),
            (BlockKind.NUMBERED_ITEM, 0),
            (BlockKind.EMPHASIZED, 0),
            (BlockKind.BLANK, 0),
            (BlockKind.PARAGRAPH, 0),
            (BlockKind.TABLE_ROW, 0),
        ]
        assert blocks[-1].cells == ("A", "B")


# =============================================================================
# PDF Extractor Tests
# =============================================================================


class TestPdfTextExtractor:
    """Test suite for PdfTextExtractor."""

    @pytest.fixture
    def extractor(self):
        """Create a PDF extractor instance."""
        return PdfTextExtractor()

    def test_supported_extensions(self, extractor):
        """Test that only .pdf files are supported."""
        assert extractor.supported_extensions == {".pdf"}

    def test_extract_text_layer(self, extractor, make_pdf):
        """Test that the text layer is read line by line."""
        path = make_pdf(["REVENUE GROWTH", "1. Increase budget"])

        extracted = asyncio.run(extractor.extract(str(path)))

        lines = [line.strip() for line in extracted.content.split("\n")]
        assert "REVENUE GROWTH" in lines
        assert "1. Increase budget" in lines
        assert extracted.metadata["page_count"] == 1
        assert extracted.warnings == ()

    def test_no_text_layer_warns(self, extractor, make_pdf):
        """Test that an image-only PDF produces a warning and empty text."""
        path = make_pdf([])

        extracted = asyncio.run(extractor.extract(str(path)))

        assert extracted.content.strip() == ""
        assert "No text layer" in extracted.warnings[0].message

    def test_invalid_pdf(self, extractor, tmp_path):
        """Test that a corrupt PDF raises RuntimeError."""
        path = tmp_path / "broken.pdf"
        path.write_bytes(b"this is not a pdf")

        with pytest.raises(RuntimeError):
            asyncio.run(extractor.extract(str(path)))

    def test_column_gaps_become_tabs(self, extractor, make_pdf):
        """Test that wide gaps between words are kept as column separators."""
        path = make_pdf(["quarter      revenue      cost", "q1      100      80", "plain prose line"])

        extracted = asyncio.run(extractor.extract(str(path)))

        lines = [line.strip() for line in extracted.content.split("\n") if line.strip()]
        assert lines == ["quarter\trevenue\tcost", "q1\t100\t80", "plain prose line"]

    def test_column_gaps_reconstruct_as_table(self, extractor, make_pdf, tmp_path):
        """Test that a column-gapped PDF becomes a Word table through text reconstruction."""
        path = make_pdf(["quarter      revenue      cost", "q1      100      80"])
        output = tmp_path / "table.docx"
        strategy = TextReconstructionStrategy(extractor, DocxDocumentBuilder())

        asyncio.run(strategy.convert(path, output, ConversionOptions()))

        blocks = TextReconstructor().reconstruct(asyncio.run(extractor.extract(str(path))).content)
        assert [b.kind for b in blocks] == [BlockKind.TABLE_ROW, BlockKind.TABLE_ROW]

        doc = Document(str(output))
        assert len(doc.tables) == 1
        table = doc.tables[0]
        assert table.style.name == "Table Grid"
        assert [cell.text for cell in table.rows[0].cells] == ["quarter", "revenue", "cost"]
        assert [cell.text for cell in table.rows[1].cells] == ["q1", "100", "80"]


class TestLayoutLines:
    """Test suite for layout_lines."""

    @staticmethod
    def word(text, x0, x1, top=100.0, height=12.0):
        return {"text": text, "x0": x0, "x1": x1, "top": top, "bottom": top + height}

    def test_groups_by_line_and_orders_by_x(self):
        """Test that words are grouped into lines top to bottom, left to right."""
        words = [
            self.word("second", 10, 40, top=130),
            self.word("world", 40, 65, top=101),
            self.word("hello", 10, 36),
        ]

        assert layout_lines(words) == ["hello world", "second"]

    def test_wide_gap_is_tab(self):
        """Test that a gap wider than half the line height becomes a tab."""
        words = [self.word("a", 10, 16), self.word("b", 19, 25), self.word("c", 60, 66)]

        assert layout_lines(words) == ["a b\tc"]

    def test_no_words(self):
        """Test that an empty page has no lines."""
        assert layout_lines([]) == []


# =============================================================================
# Plain Text Extractor Tests
# =============================================================================


class TestPlainTextExtractor:
    """Test suite for PlainTextExtractor."""

    def test_read(self, tmp_path):
        """Test that text files are read as-is."""
        path = tmp_path / "notes.md"
        path.write_text("# Title\nbody", encoding="utf-8")

        extracted = asyncio.run(PlainTextExtractor().extract(str(path)))

        assert extracted.content == "# Title\nbody"
        assert extracted.regions == {}

    def test_missing(self):
        """Test that a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            asyncio.run(PlainTextExtractor().extract("/nonexistent/notes.txt"))
