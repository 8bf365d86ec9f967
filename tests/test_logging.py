"""Tests for logging configuration."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from loguru import logger

from activity_sync.logging import (
    bind_resource,
    get_logger,
    reset_logging,
    setup_logging,
)

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture(autouse=True)
def _reset_logging_state() -> Generator[None, None, None]:
    """Reset loguru state before and after each test."""
    reset_logging()
    yield
    reset_logging()


def _capture(level: str = "DEBUG", fmt: str = "{message}") -> tuple[list[str], int]:
    messages: list[str] = []
    handler_id = logger.add(lambda msg: messages.append(str(msg)), level=level, format=fmt)
    return messages, handler_id


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_reset_logging_drops_sinks(self, capsys: pytest.CaptureFixture[str]) -> None:
        setup_logging(level="INFO")
        reset_logging()

        get_logger("test").warning("after reset")

        assert "after reset" not in capsys.readouterr().err

    def test_verbose_wins_over_quiet(self, capsys: pytest.CaptureFixture[str]) -> None:
        setup_logging(level="WARNING", verbose=True, quiet=True)

        get_logger("test").debug("debug message")

        assert "debug message" in capsys.readouterr().err

    def test_quiet_hides_info(self, capsys: pytest.CaptureFixture[str]) -> None:
        setup_logging(level="DEBUG", quiet=True)

        get_logger("test").info("info message")
        get_logger("test").warning("warning message")

        err = capsys.readouterr().err
        assert "info message" not in err
        assert "warning message" in err

    def test_file_sink(self, tmp_path: Path) -> None:
        log_file = tmp_path / "sync.log"
        setup_logging(level="WARNING", log_file=log_file)

        get_logger("activity_sync.test").debug("to file only")
        logger.complete()

        assert "to file only" in log_file.read_text()

    def test_stdlib_records_are_forwarded(self) -> None:
        setup_logging(level="DEBUG")
        messages, handler_id = _capture()
        try:
            logging.getLogger("httpx").debug("HTTP Request: GET https://api.github.com")
        finally:
            logger.remove(handler_id)

        assert any("HTTP Request" in m for m in messages)

    def test_httpx_quiet_outside_debug(self) -> None:
        setup_logging(level="INFO")
        assert logging.getLogger("httpx").level == logging.WARNING


class TestBindings:
    """Tests for bound loggers."""

    def test_get_logger_binds_name(self) -> None:
        setup_logging()
        messages, handler_id = _capture(fmt="{extra[name]}|{message}")
        try:
            get_logger("activity_sync.sync").info("hello")
        finally:
            logger.remove(handler_id)

        assert messages == ["activity_sync.sync|hello\n"]

    def test_resource_tag_with_scope(self) -> None:
        setup_logging()
        messages, handler_id = _capture(fmt="{extra[resource_tag]}|{message}")
        try:
            bind_resource("pull", "octocat/hello-world").info("Syncing")
            bind_resource("pull-commit").info("Skipped")
            get_logger("x").info("plain")
        finally:
            logger.remove(handler_id)

        assert messages == [
            " [pull octocat/hello-world]|Syncing\n",
            " [pull-commit]|Skipped\n",
            "|plain\n",
        ]
