"""Document generation and conversion service.

Fills registered templates and converts uploaded files, choosing the
conversion cascade by source format, target format and fidelity.
"""

import dataclasses
import logging
import uuid
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from fileflow.interfaces.converter import ConversionOptions, ConversionResult
from fileflow.interfaces.template import BaseTemplateRenderer
from fileflow.services.cascade import ConversionCascade
from fileflow.services.registry import TemplateRegistry

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ("docx", "pdf", "txt")

CascadeProvider = Callable[[str, str, str], ConversionCascade]


def format_of(path: str | Path) -> str:
    """Return the document format of a path ("docx", "pdf" or "txt").

    Markdown files are treated as plain text.

    Raises:
        ValueError: If the extension is not a supported document format.
    """
    suffix = Path(path).suffix.lower().lstrip(".")
    if suffix == "md":
        return "txt"
    if suffix not in OUTPUT_FORMATS:
        raise ValueError(f"Unsupported document format: {suffix or path}")
    return suffix


class DocumentService:
    """Generates documents from templates and converts files.

    Attributes:
        registry: Registered templates.
        output_dir: Where finished documents are written.
    """

    def __init__(
        self,
        registry: TemplateRegistry,
        renderers: list[BaseTemplateRenderer],
        cascade_for: CascadeProvider,
        output_dir: Path,
        work_dir: Path,
        options: ConversionOptions | None = None,
        default_fidelity: str = "high",
    ) -> None:
        """Initialize the service.

        Args:
            registry: Registered templates.
            renderers: Template renderers, chosen by template file extension.
            cascade_for: Returns the cascade for (source, target, fidelity).
            output_dir: Where finished documents are written.
            work_dir: Where intermediate documents are written.
            options: Base conversion options (page geometry, table grouping).
            default_fidelity: Fidelity used when a call does not give one.
        """
        self.registry = registry
        self.output_dir = Path(output_dir)
        self._work_dir = Path(work_dir)
        self._renderers = renderers
        self._cascade_for = cascade_for
        self._options = options or ConversionOptions()
        self._default_fidelity = default_fidelity

    def _renderer_for(self, file_path: str) -> BaseTemplateRenderer:
        suffix = Path(file_path).suffix.lower()
        for renderer in self._renderers:
            if suffix in renderer.supported_extensions:
                return renderer
        raise ValueError(f"No template renderer for {suffix or file_path}")

    def _output_path(self, stem: str, fmt: str) -> Path:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        return self.output_dir / f"{stem}_{uuid.uuid4().hex[:12]}.{fmt}"

    async def generate_document(
        self,
        template_id: str,
        values: Mapping[str, Any],
        fmt: str = "docx",
        fidelity: str | None = None,
    ) -> ConversionResult:
        """Fill a template and write it in the requested format.

        Saved default values are merged under `values`. The template is
        first rendered in its own format; other formats go through the
        matching conversion cascade.

        Args:
            template_id: The registered template.
            values: Variable values for this document.
            fmt: "docx", "pdf" or "txt".
            fidelity: "high" or "fast"; defaults to the configured fidelity.

        Returns:
            The generated document's path and the strategy that produced it.

        Raises:
            TemplateNotFoundError: If the template is unknown.
            RenderError: If the template has malformed placeholders.
            CascadeExhausted: If no conversion strategy succeeded.
            ValueError: If the format is unsupported.
        """
        if fmt not in OUTPUT_FORMATS:
            raise ValueError(f"Unsupported output format: {fmt}. Valid options: {', '.join(OUTPUT_FORMATS)}")

        template = self.registry.get(template_id)
        merged = {**template.saved_values, **values}
        source_fmt = format_of(template.original_file)
        renderer = self._renderer_for(template.original_file)
        output_path = self._output_path(f"generated_{template.name}", fmt)

        if source_fmt == fmt:
            await renderer.render(template.original_file, merged, str(output_path))
            logger.info(f"Generated {output_path.name} from template {template_id}")
            return ConversionResult(output_path=output_path, strategy="template")

        self._work_dir.mkdir(parents=True, exist_ok=True)
        filled = self._work_dir / f"{uuid.uuid4().hex}{Path(template.original_file).suffix.lower()}"
        try:
            await renderer.render(template.original_file, merged, str(filled))
            options = dataclasses.replace(self._options, title=template.name)
            result = await self._cascade_for(source_fmt, fmt, fidelity or self._default_fidelity).run(
                filled, output_path, options
            )
        finally:
            filled.unlink(missing_ok=True)

        logger.info(
            f"Generated {output_path.name} from template {template_id} via {result.strategy}"
        )
        return result

    async def convert_file(
        self,
        input_path: str | Path,
        target_format: str,
        fidelity: str | None = None,
        markdown_headings: bool = False,
    ) -> ConversionResult:
        """Convert a stored document to another format.

        Args:
            input_path: The document to convert.
            target_format: "docx", "pdf" or "txt".
            fidelity: "high" or "fast"; defaults to the configured fidelity.
            markdown_headings: Treat leading '#' markers as headings.

        Returns:
            The converted document's path, the winning strategy and the
            failures recorded before it.

        Raises:
            FileNotFoundError: If the input does not exist.
            ValueError: If the format pair is unsupported.
            CascadeExhausted: If no conversion strategy succeeded.
        """
        input_path = Path(input_path)
        source_fmt = format_of(input_path)
        cascade = self._cascade_for(source_fmt, target_format, fidelity or self._default_fidelity)

        options = dataclasses.replace(
            self._options, title=input_path.stem, markdown_headings=markdown_headings
        )
        output_path = self._output_path(input_path.stem, target_format)
        return await cascade.run(input_path, output_path, options)
