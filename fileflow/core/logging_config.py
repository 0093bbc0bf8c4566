"""Logging setup for the API process.

Writes two files under `settings.log_dir`:
- info.log: everything at INFO and above
- error.log: ERROR and above only

Console output mirrors info.log. The PDF and font libraries used during
conversion are very chatty and are capped at WARNING.
"""

import logging
import sys
from pathlib import Path

from fileflow.core.config import Settings, get_settings

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"
CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"

# pdfplumber (pdfminer), pdf2docx (fitz) and weasyprint (fontTools)
NOISY_LOGGERS = ("pdfminer", "pdf2docx", "fontTools", "weasyprint")


def _handler(handler: logging.Handler, level: int, fmt: str) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=fmt, datefmt=DATE_FORMAT))
    return handler


def setup_logging(settings: Settings | None = None) -> logging.Logger:
    """Install file and console handlers on the root logger.

    Safe to call more than once; previous handlers are replaced.

    Args:
        settings: Application settings. If None, uses global settings.

    Returns:
        The configured root logger.
    """
    settings = settings or get_settings()
    level = getattr(logging, settings.log_level, logging.INFO)

    log_dir = Path(settings.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    for old in list(root_logger.handlers):
        root_logger.removeHandler(old)
        old.close()
    root_logger.setLevel(level)

    root_logger.addHandler(
        _handler(logging.FileHandler(log_dir / "info.log", encoding="utf-8"), logging.INFO, FILE_FORMAT)
    )
    root_logger.addHandler(
        _handler(logging.FileHandler(log_dir / "error.log", encoding="utf-8"), logging.ERROR, FILE_FORMAT)
    )
    root_logger.addHandler(_handler(logging.StreamHandler(sys.stdout), level, CONSOLE_FORMAT))

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    return root_logger
