"""Unit tests for settings and logging setup."""

import logging

import pytest
from pydantic import ValidationError

from fileflow.core.config import Settings
from fileflow.core.logging_config import setup_logging


class TestSettings:
    """Test suite for Settings."""

    def test_directories_created_and_resolved(self, tmp_path):
        """Test that storage directories exist and are absolute."""
        settings = Settings(upload_dir=tmp_path / "a" / "b", log_dir=tmp_path / "logs")

        assert settings.upload_dir.is_dir()
        assert settings.upload_dir.is_absolute()

    def test_log_level_normalized(self, settings):
        """Test that the log level is upper-cased."""
        assert Settings(log_level="debug", log_dir=settings.log_dir).log_level == "DEBUG"

    def test_environment_override(self, monkeypatch, tmp_path):
        """Test that environment variables override defaults."""
        monkeypatch.setenv("DEFAULT_FIDELITY", "fast")
        monkeypatch.setenv("OFFICE_BINARIES", '["/opt/office/soffice"]')

        settings = Settings(log_dir=tmp_path / "logs")

        assert settings.default_fidelity == "fast"
        assert settings.office_binaries == ["/opt/office/soffice"]

    @pytest.mark.parametrize(
        "field, value",
        [
            ("default_fidelity", "perfect"),
            ("page_size", "A3"),
            ("margin_inches", 0),
            ("office_binaries", []),
        ],
    )
    def test_invalid_values(self, tmp_path, field, value):
        """Test that out-of-range values are rejected."""
        with pytest.raises(ValidationError):
            Settings(log_dir=tmp_path / "logs", **{field: value})


class TestSetupLogging:
    """Test suite for setup_logging."""

    def test_installs_file_handlers(self, settings):
        """Test that info.log and error.log handlers are installed once."""
        root = setup_logging(settings)
        setup_logging(settings)

        files = sorted(
            h.baseFilename for h in root.handlers if isinstance(h, logging.FileHandler)
        )
        assert files == [str(settings.log_dir / "error.log"), str(settings.log_dir / "info.log")]

    def test_writes_errors_to_error_log(self, settings):
        """Test that errors reach error.log and info does not."""
        root = setup_logging(settings)

        logging.getLogger("fileflow.test").info("routine event")
        logging.getLogger("fileflow.test").error("broken event")
        for handler in root.handlers:
            handler.flush()

        error_log = (settings.log_dir / "error.log").read_text(encoding="utf-8")
        assert "broken event" in error_log
        assert "routine event" not in error_log
