"""Shared pytest fixtures.

Storage and log directories are pointed at a scratch directory before
the application module is imported, and no real office suite is used.
"""

import os
import tempfile
from pathlib import Path

import pytest

_SCRATCH = Path(tempfile.mkdtemp(prefix="fileflow-tests-"))
os.environ.setdefault("UPLOAD_DIR", str(_SCRATCH / "uploads"))
os.environ.setdefault("TEMP_DIR", str(_SCRATCH / "temp"))
os.environ.setdefault("OUTPUT_DIR", str(_SCRATCH / "output"))
os.environ.setdefault("LOG_DIR", str(_SCRATCH / "logs"))
os.environ.setdefault("OFFICE_BINARIES", '["fileflow-test-no-office-suite"]')


def _pdf_escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace("(", "\\(").replace(")", "\\)")


def write_pdf(path: Path, lines: list[str]) -> Path:
    """Write a one-page PDF whose text layer holds `lines`."""
    content = ["BT", "/F1 12 Tf", "72 720 Td", "16 TL"]
    content += [f"({_pdf_escape(line)}) Tj T*" for line in lines]
    content.append("ET")
    stream = "\n".join(content).encode("latin-1")

    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] /Contents 4 0 R "
        b"/Resources << /Font << /F1 5 0 R >> >> >>",
        b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]

    data = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(data))
        data += b"%d 0 obj\n" % number + body + b"\nendobj\n"

    xref_at = len(data)
    data += b"xref\n0 %d\n" % (len(objects) + 1)
    data += b"0000000000 65535 f \n"
    for offset in offsets:
        data += b"%010d 00000 n \n" % offset
    data += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (
        len(objects) + 1,
        xref_at,
    )

    path.write_bytes(bytes(data))
    return path


@pytest.fixture
def make_pdf(tmp_path):
    """Factory fixture: make_pdf(lines, name="sample.pdf") -> Path."""

    def _make(lines: list[str], name: str = "sample.pdf") -> Path:
        return write_pdf(tmp_path / name, lines)

    return _make


@pytest.fixture
def make_docx(tmp_path):
    """Factory fixture: make_docx(paragraphs, name=..., header=None, table=None) -> Path."""
    from docx import Document

    def _make(
        paragraphs: list[str],
        name: str = "sample.docx",
        header: str | None = None,
        table: list[list[str]] | None = None,
    ) -> Path:
        doc = Document()
        for text in paragraphs:
            doc.add_paragraph(text)
        if table:
            grid = doc.add_table(rows=len(table), cols=len(table[0]))
            for r, row in enumerate(table):
                for c, value in enumerate(row):
                    grid.cell(r, c).text = value
        if header is not None:
            doc.sections[0].header.paragraphs[0].text = header
        path = tmp_path / name
        doc.save(str(path))
        return path

    return _make


@pytest.fixture
def settings(tmp_path):
    """Settings with every directory under the test's tmp_path."""
    from fileflow.core.config import Settings

    return Settings(
        upload_dir=tmp_path / "uploads",
        temp_dir=tmp_path / "temp",
        output_dir=tmp_path / "output",
        log_dir=tmp_path / "logs",
        office_binaries=["fileflow-test-no-office-suite"],
    )


@pytest.fixture
def weasyprint_available():
    """Skip the test when WeasyPrint or its system libraries are missing."""
    try:
        import weasyprint  # noqa: F401
    except (ImportError, OSError) as e:
        pytest.skip(f"WeasyPrint unavailable: {e}")
