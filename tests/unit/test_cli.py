"""Tests for the command-line entry point and logging setup."""

from __future__ import annotations

import logging
from pathlib import Path

from photobooth.cli import parse_args
from photobooth.config.settings import LoggingConfig
from photobooth.utils.logging import setup_logging


class TestParseArgs:
    def test_run_defaults(self) -> None:
        args = parse_args(["run"])
        assert args.command == "run"
        assert args.duration is None
        assert args.config is None

    def test_run_with_duration_and_config(self) -> None:
        args = parse_args(["-c", "booth.yaml", "-v", "run", "--duration", "30"])
        assert args.config == Path("booth.yaml")
        assert args.verbose is True
        assert args.duration == 30.0

    def test_capture_test_output(self) -> None:
        args = parse_args(["capture-test", "--output", "frame.png"])
        assert args.output == Path("frame.png")


class TestSetupLogging:
    def test_sets_level_and_file(self, tmp_path) -> None:
        log_file = tmp_path / "booth.log"
        logger = logging.getLogger("photobooth")
        before = list(logger.handlers)
        try:
            setup_logging(LoggingConfig(level="debug", file=str(log_file)))
            assert logger.level == logging.DEBUG
            logging.getLogger("photobooth.test").debug("hello")
            for handler in logger.handlers:
                handler.flush()
            assert "hello" in log_file.read_text()
        finally:
            for handler in logger.handlers[len(before):]:
                handler.close()
            logger.handlers = before
            logger.setLevel(logging.NOTSET)
