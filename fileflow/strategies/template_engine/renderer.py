"""Template renderer strategies.

Fills `{{ name }}` placeholders in Word and plain-text templates while
preserving the original document's formatting, tables and numbering.
"""

import asyncio
import logging
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Any

from fileflow.interfaces.template import BaseTemplateRenderer, RenderError
from fileflow.strategies.template_engine.variables import (
    OPEN_DELIMITER,
    PLACEHOLDER_PATTERN,
    extract_variables,
    find_malformed_placeholders,
    normalize_value,
    substitute,
)

logger = logging.getLogger(__name__)


def _malformed_error(problems: list[str]) -> RenderError:
    explanation = "; ".join(
        f"Malformed placeholder {fragment!r}" for fragment in problems
    )
    return RenderError(placeholders=problems, explanation=explanation)


class DocxTemplateRenderer(BaseTemplateRenderer):
    """Renders Word templates with python-docx.

    The template is loaded into memory, placeholders are replaced run by
    run so that styles are kept, and the copy is saved to a new path. The
    original file is never modified.
    """

    async def render(
        self,
        template_path: str,
        values: Mapping[str, Any],
        output_path: str | None = None,
    ) -> str:
        """Render a Word template.

        Args:
            template_path: Path to the .docx template.
            values: Variable name to value mapping.
            output_path: Where to save the rendered document (optional).

        Returns:
            Path to the rendered document.

        Raises:
            FileNotFoundError: If the template doesn't exist.
            RenderError: If the template contains malformed placeholders.
            RuntimeError: If rendering fails for another reason.
        """
        logger.info(f"Starting template rendering: {template_path}")

        path = Path(template_path)
        if not path.exists():
            raise FileNotFoundError(f"Template file not found: {template_path}")

        if output_path is None:
            output_path = str(path.parent / f"{path.stem}_filled{path.suffix}")

        try:
            return await asyncio.to_thread(self._render_sync, path, values, Path(output_path))
        except (FileNotFoundError, RenderError):
            raise
        except Exception as e:
            logger.error(f"Template rendering failed: {e}", exc_info=True)
            raise RuntimeError(f"Template rendering failed: {e}") from e

    def _render_sync(self, path: Path, values: Mapping[str, Any], output_path: Path) -> str:
        from docx import Document

        doc = Document(str(path))

        paragraphs = list(self._iter_paragraphs(doc))
        problems: list[str] = []
        for paragraph in paragraphs:
            problems.extend(find_malformed_placeholders(self._runs_text(paragraph)))
        if problems:
            logger.error(f"Template {path.name} has malformed placeholders: {problems}")
            raise _malformed_error(problems)

        referenced: set[str] = set()
        replacement_count = 0
        for paragraph in paragraphs:
            text = self._runs_text(paragraph)
            if OPEN_DELIMITER not in text:
                continue
            referenced |= extract_variables(text)
            replacement_count += self._replace_in_paragraph(paragraph, values)

        missing = sorted(name for name in referenced if values.get(name) is None)
        if missing:
            logger.info(f"Rendering {len(missing)} variables as empty: {missing}")

        output_path.parent.mkdir(parents=True, exist_ok=True)
        doc.save(str(output_path))
        logger.info(
            f"Rendered template saved: {output_path} ({replacement_count} replacements)"
        )
        return str(output_path)

    def _iter_paragraphs(self, doc) -> Iterator[Any]:
        """Yield every paragraph of the body, tables, headers and footers."""
        yield from self._iter_container(doc)

        seen_parts: set[int] = set()
        for section in doc.sections:
            for story in (
                section.header,
                section.footer,
                section.first_page_header,
                section.first_page_footer,
                section.even_page_header,
                section.even_page_footer,
            ):
                # Linked stories have no definition of their own; touching
                # them would add one.
                if story.is_linked_to_previous:
                    continue
                part_id = id(story.part)
                if part_id in seen_parts:
                    continue
                seen_parts.add(part_id)
                yield from self._iter_container(story)

    def _iter_container(self, container) -> Iterator[Any]:
        yield from container.paragraphs
        for table in container.tables:
            for row in table.rows:
                for cell in row.cells:
                    yield from self._iter_container(cell)

    @staticmethod
    def _paragraph_runs(paragraph) -> list[Any]:
        """Return the runs of a paragraph in order, including runs inside hyperlinks."""
        from docx.text.hyperlink import Hyperlink

        runs = []
        for item in paragraph.iter_inner_content():
            if isinstance(item, Hyperlink):
                runs.extend(item.runs)
            else:
                runs.append(item)
        return runs

    def _runs_text(self, paragraph) -> str:
        return "".join(run.text for run in self._paragraph_runs(paragraph))

    def _replace_in_paragraph(self, paragraph, values: Mapping[str, Any]) -> int:
        """Replace placeholders in a paragraph while preserving run styles.

        Word splits text into runs at arbitrary points, so a placeholder may
        span several runs. The replacement value is written into the run
        where the placeholder starts and the remaining pieces are removed
        from the following runs.

        Args:
            paragraph: The python-docx paragraph object.
            values: Variable name to value mapping.

        Returns:
            Number of placeholders replaced.
        """
        runs = self._paragraph_runs(paragraph)
        original = [run.text for run in runs]
        texts = list(original)

        # Start offset of each run within the joined paragraph text.
        offsets: list[int] = []
        position = 0
        for text in original:
            offsets.append(position)
            position += len(text)

        def run_at(char_index: int) -> int:
            for idx in range(len(offsets) - 1, -1, -1):
                if offsets[idx] <= char_index and original[idx]:
                    return idx
            return 0

        matches = list(PLACEHOLDER_PATTERN.finditer("".join(original)))
        # Right to left, so earlier offsets stay valid.
        for match in reversed(matches):
            value = normalize_value(values.get(match.group(1).strip()))
            first = run_at(match.start())
            last = run_at(match.end() - 1)
            start_local = match.start() - offsets[first]
            end_local = match.end() - offsets[last]

            if first == last:
                texts[first] = texts[first][:start_local] + value + texts[first][end_local:]
                continue

            texts[first] = texts[first][:start_local] + value
            for idx in range(first + 1, last):
                texts[idx] = ""
            texts[last] = texts[last][end_local:]

        for run, text in zip(runs, texts):
            if run.text != text:
                run.text = text

        return len(matches)

    @property
    def supported_extensions(self) -> set[str]:
        """Return supported file extensions."""
        return {".docx"}


class TextTemplateRenderer(BaseTemplateRenderer):
    """Renders plain-text templates."""

    def __init__(self, encoding: str = "utf-8") -> None:
        self._encoding = encoding

    async def render(
        self,
        template_path: str,
        values: Mapping[str, Any],
        output_path: str | None = None,
    ) -> str:
        """Render a plain-text template.

        Args:
            template_path: Path to the text template.
            values: Variable name to value mapping.
            output_path: Where to save the rendered text (optional).

        Returns:
            Path to the rendered file.

        Raises:
            FileNotFoundError: If the template doesn't exist.
            RenderError: If the template contains malformed placeholders.
        """
        path = Path(template_path)
        if not path.exists():
            raise FileNotFoundError(f"Template file not found: {template_path}")

        if output_path is None:
            output_path = str(path.parent / f"{path.stem}_filled{path.suffix}")

        text = await asyncio.to_thread(path.read_text, encoding=self._encoding)

        problems = find_malformed_placeholders(text)
        if problems:
            logger.error(f"Template {path.name} has malformed placeholders: {problems}")
            raise _malformed_error(problems)

        rendered = substitute(text, values)

        out = Path(output_path)
        out.parent.mkdir(parents=True, exist_ok=True)
        await asyncio.to_thread(out.write_text, rendered, encoding=self._encoding)
        logger.info(f"Rendered text template saved: {out}")
        return str(out)

    @property
    def supported_extensions(self) -> set[str]:
        """Return supported file extensions."""
        return {".txt", ".md"}
