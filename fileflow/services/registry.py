"""In-memory template registry.

Templates are registered once, when their variables are extracted, and
are afterwards only changed by merging default values or deleted.
"""

import asyncio
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from fileflow.interfaces.template import TemplateNotFoundError
from fileflow.strategies.template_engine.models import Template, TemplatePreview, TemplateStats
from fileflow.strategies.template_engine.variables import VariableEngine

logger = logging.getLogger(__name__)


class TemplateRegistry:
    """Stores registered templates keyed by id.

    Writers of one template (value merges, deletion) are serialized by a
    lock per template id. Readers get the current snapshot; a template
    is replaced, never mutated in place.

    Example:
        ```python
        registry = TemplateRegistry(VariableEngine([DocxTextExtractor()]))
        template = await registry.register("uploads/letter.docx")
        await registry.set_default_values(template.id, {"Name": "Alice"})
        ```
    """

    def __init__(self, engine: VariableEngine, preview_chars: int = 500) -> None:
        """Initialize the registry.

        Args:
            engine: Variable engine used to read documents at registration.
            preview_chars: Length of the excerpt returned by `preview`.
        """
        self._engine = engine
        self._preview_chars = preview_chars
        self._templates: dict[str, Template] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def __len__(self) -> int:
        return len(self._templates)

    def _lock(self, template_id: str) -> asyncio.Lock:
        return self._locks.setdefault(template_id, asyncio.Lock())

    async def register(self, file_path: str | Path, name: str | None = None) -> Template:
        """Extract a document's variables and register it.

        Args:
            file_path: Path of the stored template document.
            name: Display name; defaults to the file stem.

        Returns:
            The registered template.

        Raises:
            FileNotFoundError: If the file doesn't exist.
            ValueError: If the file type is unsupported.
        """
        path = Path(file_path)
        variables, extracted = await self._engine.extract_document(str(path))

        template = Template(
            name=name or path.stem,
            original_file=str(path),
            variables=sorted(variables),
            original_text=extracted.content,
        )
        async with self._lock(template.id):
            self._templates[template.id] = template

        logger.info(
            f"Registered template {template.id} ({template.name}) "
            f"with {len(template.variables)} variables"
        )
        return template

    def get(self, template_id: str) -> Template:
        """Return a template.

        Raises:
            TemplateNotFoundError: If the id is unknown.
        """
        try:
            return self._templates[template_id]
        except KeyError:
            raise TemplateNotFoundError(template_id) from None

    def list(self) -> list[Template]:
        """Return all templates, oldest first."""
        return sorted(self._templates.values(), key=lambda t: t.created_at)

    async def set_default_values(self, template_id: str, values: Mapping[str, Any]) -> Template:
        """Merge values into a template's saved defaults.

        Keys present in `values` overwrite saved ones; other saved keys
        are kept.

        Args:
            template_id: The template to update.
            values: Values to merge.

        Returns:
            The updated template.

        Raises:
            TemplateNotFoundError: If the id is unknown.
        """
        self.get(template_id)
        async with self._lock(template_id):
            template = self._templates.get(template_id)
            if template is None:
                self._locks.pop(template_id, None)
                raise TemplateNotFoundError(template_id)
            merged = {**template.saved_values, **values}
            updated = template.model_copy(update={"saved_values": merged})
            self._templates[template_id] = updated

        unknown = set(values) - set(updated.variables)
        if unknown:
            logger.warning(f"Template {template_id} has no variables named {sorted(unknown)}")
        logger.info(f"Saved {len(values)} default values for template {template_id}")
        return updated

    async def delete(self, template_id: str) -> None:
        """Remove a template and its stored document.

        Raises:
            TemplateNotFoundError: If the id is unknown.
        """
        self.get(template_id)
        async with self._lock(template_id):
            template = self._templates.pop(template_id, None)
            if template is None:
                self._locks.pop(template_id, None)
                raise TemplateNotFoundError(template_id)
            await asyncio.to_thread(Path(template.original_file).unlink, missing_ok=True)

        self._locks.pop(template_id, None)
        logger.info(f"Deleted template {template_id} and {template.original_file}")

    def stats(self, template_id: str) -> TemplateStats:
        """Return word, character, line and variable counts of a template."""
        template = self.get(template_id)
        text = template.original_text
        return TemplateStats(
            word_count=len(text.split()),
            character_count=len(text),
            line_count=len(text.split("\n")),
            variable_count=len(template.variables),
            variables=list(template.variables),
        )

    def preview(self, template_id: str) -> TemplatePreview:
        """Return the leading excerpt and full text of a template."""
        text = self.get(template_id).original_text
        truncated = len(text) > self._preview_chars
        excerpt = text[: self._preview_chars] + ("..." if truncated else "")
        return TemplatePreview(preview=excerpt, full_text=text, truncated=truncated)
