"""Conversion strategy interfaces.

Defines the abstract base class for conversion strategies run by the
conversion cascade, along with the options passed to them and the
conversion error taxonomy.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path

PAGE_SIZES_MM: dict[str, tuple[float, float]] = {
    "A4": (210.0, 297.0),
    "LETTER": (215.9, 279.4),
}


@dataclass(frozen=True)
class PageGeometry:
    """Page size and margins of a generated document.

    Attributes:
        size: Page size name, "A4" or "Letter".
        margin_top: Top margin in inches.
        margin_right: Right margin in inches.
        margin_bottom: Bottom margin in inches.
        margin_left: Left margin in inches.
    """

    size: str = "A4"
    margin_top: float = 1.0
    margin_right: float = 1.0
    margin_bottom: float = 1.0
    margin_left: float = 1.0

    @property
    def dimensions_mm(self) -> tuple[float, float]:
        """Return (width, height) in millimetres."""
        try:
            return PAGE_SIZES_MM[self.size.upper()]
        except KeyError as e:
            raise ValueError(
                f"Unknown page size: {self.size}. Valid options: 'A4', 'Letter'"
            ) from e


@dataclass(frozen=True)
class ConversionOptions:
    """Options shared by all strategies of one conversion.

    Attributes:
        geometry: Page geometry for generated documents.
        group_tables: Group consecutive table rows into a real table.
        markdown_headings: Treat leading '#' markers as heading levels.
        title: Document title used by HTML/PDF output.
    """

    geometry: PageGeometry = field(default_factory=PageGeometry)
    group_tables: bool = True
    markdown_headings: bool = False
    title: str = "Document"


class ConversionError(Exception):
    """Base exception for conversion failures."""


class StrategyFailure(ConversionError):
    """One cascade strategy failed.

    Attributes:
        strategy: Name of the failed strategy.
        reason: Why it failed.
    """

    def __init__(self, strategy: str, reason: str) -> None:
        self.strategy = strategy
        self.reason = reason
        super().__init__(f"{strategy}: {reason}")


class EmptyOutputError(StrategyFailure):
    """A strategy reported success but produced a missing or zero-byte file."""


class CascadeExhausted(ConversionError):
    """Every strategy of a cascade failed.

    Attributes:
        failures: One StrategyFailure per strategy, in strategy order.
    """

    def __init__(self, failures: list[StrategyFailure], cascade: str = "") -> None:
        self.failures = list(failures)
        self.cascade = cascade
        reasons = "; ".join(str(f) for f in self.failures)
        prefix = f"All {cascade} strategies failed" if cascade else "All strategies failed"
        super().__init__(f"{prefix}: {reasons}")


@dataclass(frozen=True)
class ConversionResult:
    """Outcome of a successful cascade run.

    Attributes:
        output_path: Where the converted document was written.
        strategy: Name of the strategy that produced it.
        failures: Failures recorded for the strategies tried before it.
    """

    output_path: Path
    strategy: str
    failures: tuple[StrategyFailure, ...] = ()


class ConversionStrategy(ABC):
    """Abstract base class for one conversion attempt within a cascade.

    A strategy converts `input_path` into a document at (or movable to)
    `output_path`. It may try several internal sub-variants before
    failing. Intermediate files it creates are its own to clean up.

    Example:
        ```python
        class Pdf2DocxStrategy(ConversionStrategy):
            name = "pdf2docx"

            async def convert(self, input_path, output_path, options):
                # Implementation here
                return output_path
        ```
    """

    name: str = "strategy"

    def __init__(self, timeout: float = 120.0) -> None:
        """Initialize the strategy.

        Args:
            timeout: Seconds the cascade allows this strategy to run.
        """
        self.timeout = timeout

    @abstractmethod
    async def convert(
        self,
        input_path: Path,
        output_path: Path,
        options: ConversionOptions,
    ) -> Path:
        """Convert a document.

        Args:
            input_path: The source document.
            output_path: The requested destination.
            options: Shared conversion options.

        Returns:
            Path of the produced file; the cascade moves it onto
            `output_path` when the two differ.

        Raises:
            Exception: Any failure; the cascade records it and moves on.
        """

    async def cleanup(self, output_path: Path) -> None:
        """Remove intermediates left behind by a failed attempt.

        The default implementation has nothing to clean up.

        Args:
            output_path: The requested destination of the failed attempt.
        """
        return None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, timeout={self.timeout})"
