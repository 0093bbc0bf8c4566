"""Application configuration using Pydantic v2 Settings.

Every value can be overridden through an environment variable of the
same name (case-insensitive) or a `.env` file, e.g.
`OFFICE_BINARIES='["/opt/libreoffice/program/soffice"]'` or
`DEFAULT_FIDELITY=fast`.
"""

import logging
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """FileFlow settings: storage, converters, page layout, API and logging."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Storage
    upload_dir: Path = Field(default=Path("./uploads"), description="Uploaded templates and source files.")
    temp_dir: Path = Field(default=Path("./temp"), description="Intermediate conversion files.")
    output_dir: Path = Field(default=Path("./output"), description="Generated and converted documents.")

    # LibreOffice
    office_binaries: list[str] = Field(
        default=["soffice", "libreoffice"],
        min_length=1,
        description="LibreOffice executables to try, in order.",
    )
    office_docx_to_pdf_timeout: float = Field(
        default=30.0, gt=0, description="Seconds allowed for one DOCX to PDF run."
    )
    office_pdf_to_docx_timeout: float = Field(
        default=180.0, gt=0, description="Seconds allowed for one PDF to DOCX run."
    )

    # Conversion
    strategy_timeout: float = Field(
        default=120.0, gt=0, description="Seconds allowed for each in-process strategy."
    )
    default_fidelity: Literal["high", "fast"] = Field(
        default="high",
        description="'high' tries LibreOffice and pdf2docx first, 'fast' only reconstructs text.",
    )
    page_size: Literal["A4", "Letter"] = Field(default="A4", description="Page size of assembled documents.")
    margin_inches: float = Field(default=1.0, gt=0, description="Page margin on every side.")
    group_tables: bool = Field(
        default=True, description="Assemble consecutive table-like lines into one table."
    )

    # Templates
    preview_chars: int = Field(default=500, gt=0, description="Length of the template preview excerpt.")

    # API
    api_host: str = Field(default="0.0.0.0", description="Bind address for `python -m fileflow.main`.")
    api_port: int = Field(default=8000, description="Bind port for `python -m fileflow.main`.")
    api_reload: bool = Field(default=False, description="Enable uvicorn auto-reload.")
    cors_origins: list[str] = Field(default=["*"], description="Allowed CORS origins.")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level: DEBUG, INFO, WARNING, ERROR.")
    log_dir: Path = Field(default=Path("./logs"), description="Directory for info.log and error.log.")
    log_json: bool = Field(
        default=True, description="Render structlog events as JSON; plain key=value otherwise."
    )

    @field_validator("upload_dir", "temp_dir", "output_dir", "log_dir")
    @classmethod
    def ensure_directory(cls, v: Path) -> Path:
        """Create the directory if needed and store it as an absolute path."""
        v.mkdir(parents=True, exist_ok=True)
        return v.resolve()

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Normalize log level to uppercase."""
        return v.upper()

    def configure_logging(self) -> None:
        """Route structlog through the standard library at the configured level."""
        import structlog

        level = getattr(logging, self.log_level, logging.INFO)
        renderer = (
            structlog.processors.JSONRenderer()
            if self.log_json
            else structlog.processors.KeyValueRenderer(key_order=["timestamp", "level", "event"])
        )

        structlog.configure(
            processors=[
                structlog.stdlib.filter_by_level,
                structlog.stdlib.add_logger_name,
                structlog.stdlib.add_log_level,
                structlog.stdlib.PositionalArgumentsFormatter(),
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                renderer,
            ],
            wrapper_class=structlog.stdlib.BoundLogger,
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )

        logging.basicConfig(format="%(message)s", level=level)
        logger.setLevel(level)


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global Settings instance.

    Returns:
        The singleton Settings instance.
    """
    global _settings
    if _settings is None:
        _settings = Settings()
        _settings.configure_logging()
    return _settings
