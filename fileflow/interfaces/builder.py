"""Document assembly interfaces.

Defines abstract base classes for turning a reconstructed block
sequence into a target-format document, and for rendering HTML pages
into PDF.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from fileflow.interfaces.blocks import Block
from fileflow.interfaces.converter import ConversionOptions, PageGeometry


class BaseDocumentBuilder(ABC):
    """Abstract base class for document assembly strategies.

    Example:
        ```python
        class DocxDocumentBuilder(BaseDocumentBuilder):
            def build(self, blocks, options) -> bytes:
                # Implementation here
                pass
        ```
    """

    @abstractmethod
    def build(self, blocks: Sequence[Block], options: ConversionOptions) -> bytes | str:
        """Materialize blocks as a document.

        Args:
            blocks: Ordered blocks from the text reconstructor.
            options: Styling and page geometry.

        Returns:
            Serialized document (bytes for binary formats, str for markup).
        """

    @property
    @abstractmethod
    def output_extension(self) -> str:
        """Return the extension of the produced format (e.g. '.docx')."""


class BasePageRenderer(ABC):
    """Abstract base class for headless HTML-to-PDF renderers."""

    @abstractmethod
    def render(self, html: str, geometry: PageGeometry) -> bytes:
        """Render an HTML page to PDF.

        Args:
            html: Complete HTML document.
            geometry: Page geometry to apply.

        Returns:
            PDF bytes.

        Raises:
            RuntimeError: If rendering fails.
        """
