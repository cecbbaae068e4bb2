"""Unit tests for configuration loading and logging setup."""

import logging

import pytest
import structlog

from codestruct.core.config import LoggingConfig, ScanSettings, load_config
from codestruct.core.exceptions import ConfigError
from codestruct.core.logging import configure_logging


@pytest.fixture
def restore_logging():
    """Restore root logger state and structlog defaults after a test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()


class TestConfig:
    """Tests for defaults, env vars and overrides."""

    def test_defaults(self) -> None:
        config = load_config()

        assert config.scan.doc_window == 20
        assert config.scan.comment_window == 5
        assert config.scan.labels.description == "Description:"
        assert config.logging.level == "WARNING"
        assert config.logging.json_format is False

    def test_env_vars(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CODESTRUCT__SCAN__DOC_WINDOW", "30")
        monkeypatch.setenv("CODESTRUCT__SCAN__LABELS__RETURNS", "Yields:")
        monkeypatch.setenv("CODESTRUCT__LOGGING__LEVEL", "DEBUG")

        config = load_config()

        assert config.scan.doc_window == 30
        assert config.scan.labels.returns == "Yields:"
        assert config.logging.level == "DEBUG"

    def test_kwargs_override_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CODESTRUCT__SCAN__DOC_WINDOW", "30")

        config = load_config(scan=ScanSettings(doc_window=7))

        assert config.scan.doc_window == 7

    def test_invalid_window(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            load_config(scan={"doc_window": 0})

        assert "Invalid configuration" in str(exc_info.value)

    def test_invalid_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CODESTRUCT__LOGGING__LEVEL", "LOUD")

        with pytest.raises(ConfigError):
            load_config()


class TestLogging:
    """Tests for logging configuration."""

    @pytest.mark.usefixtures("restore_logging")
    def test_level_from_params(self) -> None:
        configure_logging(level="DEBUG")

        assert logging.getLogger().level == logging.DEBUG
        assert len(logging.getLogger().handlers) == 1

    @pytest.mark.usefixtures("restore_logging")
    def test_level_from_config(self) -> None:
        configure_logging(config=LoggingConfig(level="ERROR", json_format=True), level="DEBUG")

        assert logging.getLogger().level == logging.ERROR

    @pytest.mark.usefixtures("restore_logging")
    def test_unknown_level_defaults_to_warning(self) -> None:
        configure_logging(level="verbose")

        assert logging.getLogger().level == logging.WARNING
