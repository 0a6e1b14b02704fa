"""Tests for the shared logging setup.

Tests cover:
- Console output only on a terminal with the console format selected
- Structlog and loguru following the same settings
- Settings fields and the VERITAS_ environment prefix
"""

import io
import json
import sys
from unittest.mock import MagicMock

import pytest
import structlog
from loguru import logger

from veritas_analysis.config import logging as log_config
from veritas_analysis.config.settings import Settings, settings
from veritas_analysis.utils import logging as structured


def stream(tty: bool) -> MagicMock:
    fake = MagicMock()
    fake.isatty.return_value = tty
    return fake


class TestConsoleOutput:
    """Tests for console_output_enabled."""

    @pytest.mark.parametrize(
        "tty, log_format, expected",
        [
            (True, "console", True),
            (True, "CONSOLE", True),
            (True, "json", False),
            (False, "console", False),
        ],
    )
    def test_decision(self, monkeypatch, tty, log_format, expected):
        monkeypatch.setattr(settings, "log_format", log_format)
        assert log_config.console_output_enabled(stream(tty)) is expected

    def test_default_format_is_json(self, monkeypatch):
        monkeypatch.delenv("VERITAS_LOG_FORMAT", raising=False)
        assert Settings(_env_file=None).log_format == "json"


class TestStructuredLogging:
    """Tests for configure_structured_logging."""

    def test_renderer_follows_settings(self, monkeypatch):
        with monkeypatch.context() as patched:
            patched.setattr(structured, "console_output_enabled", lambda: True)
            structured.configure_structured_logging()
            console = structlog.get_config()["processors"][-1]

            patched.setattr(structured, "console_output_enabled", lambda: False)
            structured.configure_structured_logging()
            plain = structlog.get_config()["processors"][-1]
        structured.configure_structured_logging()

        assert isinstance(console, structlog.dev.ConsoleRenderer)
        assert isinstance(plain, structlog.processors.JSONRenderer)

    def test_bound_context(self):
        log = structured.get_structured_logger("AnalysisPipeline", run_id="run-1", hops=3)
        context = structlog.get_context(log)
        assert context["component"] == "AnalysisPipeline"
        assert context["run_id"] == "run-1"
        assert context["hops"] == 3


class TestLoguru:
    """Tests for configure_logging and get_logger."""

    def test_get_logger_binds_component(self):
        records = []
        sink = logger.add(lambda message: records.append(message.record), level="INFO")
        try:
            log_config.get_logger("DeviationAnalyzer").info("measured")
        finally:
            logger.remove(sink)

        assert records[-1]["extra"]["component"] == "DeviationAnalyzer"

    def test_level_follows_settings(self, monkeypatch):
        buffer = io.StringIO()
        with monkeypatch.context() as patched:
            patched.setattr(settings, "log_level", "warning")
            patched.setattr(sys, "stderr", buffer)
            log_config.configure_logging()
            logger.info("below threshold")
            logger.warning("above threshold")
        log_config.configure_logging()

        lines = [json.loads(line) for line in buffer.getvalue().splitlines()]
        assert [line["record"]["message"] for line in lines] == ["above threshold"]


class TestSettings:
    """Tests for Settings."""

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("VERITAS_MAX_WORKERS", "4")
        monkeypatch.setenv("VERITAS_SNAPSHOT_PATH", "graph.json")
        loaded = Settings(_env_file=None)
        assert loaded.max_workers == 4
        assert loaded.snapshot_path == "graph.json"

    def test_only_consumed_fields(self):
        assert set(Settings.model_fields) == {
            "log_level",
            "log_format",
            "max_workers",
            "snapshot_path",
        }
