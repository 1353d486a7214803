"""Tests for structlog configuration."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator

import pytest
import structlog

from libforge.config.logging import configure_logging, library_context


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore root logger state after each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    lf = logging.getLogger("libforge")
    lf_level = lf.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    lf.setLevel(lf_level)


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbose=True, log_json=False)
        assert logging.getLogger("libforge").level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING

    def test_non_verbose_sets_warning(self) -> None:
        configure_logging(verbose=False, log_json=False)
        assert logging.getLogger("libforge").level == logging.WARNING

    def test_json_mode_output(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        structlog.get_logger("libforge.test").warning("json test", answer=42)
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "json test"
        assert parsed["answer"] == 42
        assert parsed["level"] == "warning"
        assert parsed["logger"] == "libforge.test"
        assert "timestamp" in parsed

    def test_stdlib_logger_carries_library(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        with library_context("kit-sql", version="1.4.0"):
            logging.getLogger("libforge.services.pipeline").info("Packaged")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "Packaged"
        assert parsed["library"] == "kit-sql"
        assert parsed["version"] == "1.4.0"

    def test_context_is_unbound_after_block(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        with library_context("kit-sql"):
            pass
        logging.getLogger("libforge.test").warning("after")
        assert "library" not in json.loads(capfd.readouterr().err.strip())

    def test_third_party_debug_is_suppressed(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("urllib3.connectionpool").debug("Starting new HTTPS connection")
        assert capfd.readouterr().err == ""

    def test_idempotent_calls(self) -> None:
        """Multiple configure_logging calls don't stack handlers."""
        configure_logging(verbose=True, log_json=False)
        configure_logging(verbose=True, log_json=True)
        assert len(logging.getLogger().handlers) == 1
