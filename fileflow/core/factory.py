"""Component Factory for strategy instantiation.

The Factory Pattern allows the application to assemble extractors,
builders and conversion cascades at runtime from configuration.
"""

import logging

from fileflow.core.config import Settings, get_settings
from fileflow.interfaces.converter import ConversionOptions, ConversionStrategy, PageGeometry
from fileflow.interfaces.template import BaseTemplateRenderer
from fileflow.services.cascade import ConversionCascade
from fileflow.services.documents import DocumentService
from fileflow.services.registry import TemplateRegistry
from fileflow.strategies.assemblers import DocxDocumentBuilder, HtmlDocumentBuilder, WeasyPrintRenderer
from fileflow.strategies.converters import (
    DOCX_VARIANTS,
    PDF_VARIANTS,
    BasicTextStrategy,
    DocxHtmlRenderStrategy,
    OfficeSuiteStrategy,
    Pdf2DocxStrategy,
    PlainTextStrategy,
    TextReconstructionStrategy,
)
from fileflow.strategies.extractors import DocxTextExtractor, PdfTextExtractor, PlainTextExtractor
from fileflow.strategies.template_engine import DocxTemplateRenderer, TextTemplateRenderer, VariableEngine

logger = logging.getLogger(__name__)

FIDELITIES = ("high", "fast")


class ComponentFactory:
    """Factory for creating component instances based on configuration.

    Stateless components are created once and cached; cascades are built
    per call because each request runs its own.

    Example:
        ```python
        settings = get_settings()
        factory = ComponentFactory(settings)

        cascade = factory.get_cascade("pdf", "docx", "high")
        result = await cascade.run(pdf_path, docx_path, factory.conversion_options())
        ```
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize the factory with optional settings.

        Args:
            settings: Application settings. If None, uses global settings.
        """
        self._settings = settings or get_settings()
        self._docx_extractor = DocxTextExtractor()
        self._pdf_extractor = PdfTextExtractor()
        self._text_extractor = PlainTextExtractor()
        self._page_renderer = WeasyPrintRenderer()
        self._registry_cache: TemplateRegistry | None = None
        self._document_service_cache: DocumentService | None = None

    def conversion_options(self) -> ConversionOptions:
        """Return conversion options from the page and table settings."""
        margin = self._settings.margin_inches
        return ConversionOptions(
            geometry=PageGeometry(
                size=self._settings.page_size,
                margin_top=margin,
                margin_right=margin,
                margin_bottom=margin,
                margin_left=margin,
            ),
            group_tables=self._settings.group_tables,
        )

    def get_extractor(self, fmt: str):
        """Get the text extractor for a document format.

        Raises:
            ValueError: If the format is unknown.
        """
        match fmt:
            case "docx":
                return self._docx_extractor
            case "pdf":
                return self._pdf_extractor
            case "txt":
                return self._text_extractor
            case _:
                raise ValueError(f"Unknown document format: {fmt}. Valid options: 'docx', 'pdf', 'txt'")

    def get_variable_engine(self) -> VariableEngine:
        """Get a variable engine over the template extractors (DOCX and text)."""
        return VariableEngine([self._docx_extractor, self._text_extractor])

    def get_template_renderers(self) -> list[BaseTemplateRenderer]:
        """Get the template renderers, one per template format."""
        return [DocxTemplateRenderer(), TextTemplateRenderer()]

    def _office(self, variants, run_timeout: float, infilter: str | None = None) -> OfficeSuiteStrategy:
        return OfficeSuiteStrategy(
            variants=variants,
            binaries=self._settings.office_binaries,
            infilter=infilter,
            work_dir=self._settings.temp_dir,
            run_timeout=run_timeout,
        )

    def _strategies(self, source: str, target: str, fidelity: str) -> list[ConversionStrategy]:
        timeout = self._settings.strategy_timeout
        high = fidelity == "high"

        match (source, target):
            case ("docx", "pdf"):
                strategies: list[ConversionStrategy] = []
                if high:
                    strategies.append(self._office(PDF_VARIANTS, self._settings.office_docx_to_pdf_timeout))
                strategies.append(
                    DocxHtmlRenderStrategy(
                        self._docx_extractor, HtmlDocumentBuilder(), self._page_renderer, timeout=timeout
                    )
                )
                return strategies

            case ("pdf", "docx"):
                strategies = []
                if high:
                    strategies.append(
                        self._office(
                            DOCX_VARIANTS,
                            self._settings.office_pdf_to_docx_timeout,
                            infilter="writer_pdf_import",
                        )
                    )
                    strategies.append(Pdf2DocxStrategy(timeout=timeout))
                strategies.append(
                    TextReconstructionStrategy(self._pdf_extractor, DocxDocumentBuilder(), timeout=timeout)
                )
                strategies.append(BasicTextStrategy(self._pdf_extractor, DocxDocumentBuilder(), timeout=timeout))
                return strategies

            case ("txt", "docx"):
                return [TextReconstructionStrategy(self._text_extractor, DocxDocumentBuilder(), timeout=timeout)]

            case ("txt", "pdf"):
                return [
                    TextReconstructionStrategy(
                        self._text_extractor, HtmlDocumentBuilder(), self._page_renderer, timeout=timeout
                    )
                ]

            case ("docx" | "pdf", "txt"):
                return [PlainTextStrategy(self.get_extractor(source), timeout=timeout)]

            case _:
                raise ValueError(f"Unsupported conversion: {source} -> {target}")

    def get_cascade(self, source: str, target: str, fidelity: str | None = None) -> ConversionCascade:
        """Build the conversion cascade for a format pair.

        Args:
            source: Source format ("docx", "pdf" or "txt").
            target: Target format ("docx", "pdf" or "txt").
            fidelity: "high" tries layout-preserving converters first,
                "fast" uses only in-process strategies. If None, uses settings.

        Returns:
            A cascade of strategies in the order they are tried.

        Raises:
            ValueError: If the fidelity or the format pair is unsupported.
        """
        fidelity = fidelity or self._settings.default_fidelity
        if fidelity not in FIDELITIES:
            raise ValueError(f"Unknown fidelity: {fidelity}. Valid options: 'high', 'fast'")

        strategies = self._strategies(source, target, fidelity)
        name = f"{source}->{target}/{fidelity}"
        logger.info(f"Instantiating cascade {name}: {[s.name for s in strategies]}")
        return ConversionCascade(strategies, name=name)

    def get_registry(self) -> TemplateRegistry:
        """Get the template registry (created once per factory)."""
        if self._registry_cache is None:
            logger.info("Instantiating template registry")
            self._registry_cache = TemplateRegistry(
                self.get_variable_engine(),
                preview_chars=self._settings.preview_chars,
            )
        return self._registry_cache

    def get_document_service(self) -> DocumentService:
        """Get the document service (created once per factory)."""
        if self._document_service_cache is None:
            self._document_service_cache = DocumentService(
                registry=self.get_registry(),
                renderers=self.get_template_renderers(),
                cascade_for=self.get_cascade,
                output_dir=self._settings.output_dir,
                work_dir=self._settings.temp_dir,
                options=self.conversion_options(),
                default_fidelity=self._settings.default_fidelity,
            )
        return self._document_service_cache
