"""Abstract base class for document text extractors.

The Strategy Pattern allows different extraction implementations
(DOCX, PDF, plain text) to be interchangeable at runtime.
"""

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ExtractionWarning:
    """A non-fatal problem met while extracting a document.

    Attributes:
        region: The part of the document that could not be read
            (e.g. "word/header1.xml", "page 3").
        message: Human-readable description of the problem.
    """

    region: str
    message: str

    def __str__(self) -> str:
        return f"{self.region}: {self.message}"


@dataclass(frozen=True)
class ExtractedText:
    """Raw text extracted from a document.

    Attributes:
        content: The body text of the document.
        regions: Auxiliary text regions keyed by name (headers, footers),
            already stripped of markup.
        warnings: Non-fatal warnings collected during extraction.
        metadata: Extractor-specific information (page count, source file, ...).
    """

    content: str
    regions: dict[str, str] = field(default_factory=dict)
    warnings: tuple[ExtractionWarning, ...] = ()
    metadata: dict[str, Any] = field(default_factory=dict)


class BaseExtractor(ABC):
    """Abstract base class for document text extraction strategies.

    All concrete extractors must inherit from this class and implement
    the `extract` method.

    Example:
        ```python
        class PdfTextExtractor(BaseExtractor):
            async def extract(self, file_path: str) -> ExtractedText:
                # Implementation here
                pass
        ```
    """

    @abstractmethod
    async def extract(self, file_path: str) -> ExtractedText:
        """Asynchronously extract text from a document.

        Args:
            file_path: The path to the document file.

        Returns:
            The extracted body text, auxiliary regions and warnings.

        Raises:
            FileNotFoundError: If the file does not exist.
            RuntimeError: If the body text cannot be extracted.
        """
        ...

    @property
    @abstractmethod
    def supported_extensions(self) -> set[str]:
        """Return the set of file extensions supported by this extractor.

        Returns:
            A set of file extensions (e.g., {'.pdf'}).
        """
        ...

    def supports_file(self, file_path: str) -> bool:
        """Check if this extractor supports the given file.

        Args:
            file_path: The path to the file to check.

        Returns:
            True if the file extension is supported, False otherwise.
        """
        _, ext = os.path.splitext(file_path)
        return ext.lower() in self.supported_extensions
