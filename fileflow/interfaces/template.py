"""Template rendering interfaces.

Defines the abstract base class for template renderers and the
template error taxonomy.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any


class TemplateError(Exception):
    """Base exception for template operations."""


class TemplateNotFoundError(TemplateError):
    """Raised when a template id is not registered."""

    def __init__(self, template_id: str) -> None:
        self.template_id = template_id
        super().__init__(f"Template not found: {template_id}")


class RenderError(TemplateError):
    """Template rendering failed on unresolved or malformed placeholders.

    Attributes:
        placeholders: The offending placeholder fragments.
        explanation: Human-readable explanation.
    """

    def __init__(self, placeholders: list[str], explanation: str) -> None:
        self.placeholders = list(placeholders)
        self.explanation = explanation
        super().__init__(f"Failed to render template: {explanation}")


class BaseTemplateRenderer(ABC):
    """Abstract base class for template rendering strategies.

    Renders a template document with a ValueMap while preserving the
    document's non-text structure.
    """

    @abstractmethod
    async def render(
        self,
        template_path: str,
        values: Mapping[str, Any],
        output_path: str | None = None,
    ) -> str:
        """Render a template with the given values.

        Args:
            template_path: Path to the original template.
            values: Variable name to value mapping. Missing names and
                None values render as empty strings.
            output_path: Where to save the rendered document (optional).

        Returns:
            Path to the rendered document.

        Raises:
            FileNotFoundError: If the template file doesn't exist.
            RenderError: If placeholders are malformed.
        """

    @property
    @abstractmethod
    def supported_extensions(self) -> set[str]:
        """Return supported file extensions."""
