"""
Tests for the structlog setup helpers.
"""

import json
import logging

import pytest
import structlog
from structlog.testing import capture_logs

from psc_validator.core.logging import get_logger, setup_logging


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    structlog.reset_defaults()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestGetLogger:

    def test_named_logger_logs_with_its_name(self):
        with capture_logs() as logs:
            get_logger("psc_validator.x").info("Archive loaded", entries=2)

        assert logs == [{
            "event": "Archive loaded",
            "entries": 2,
            "logger_name": "psc_validator.x",
            "log_level": "info",
        }]

    def test_bound_context_is_kept(self):
        with capture_logs() as logs:
            get_logger("psc_validator.x").bind(execution_id="abc").warning("Step failed")

        assert logs[0]["execution_id"] == "abc"
        assert logs[0]["logger_name"] == "psc_validator.x"

    def test_unnamed_logger(self):
        with capture_logs() as logs:
            get_logger().info("hello")

        assert logs[0]["event"] == "hello"

    def test_module_level_logger_follows_later_setup(self, capsys, restore_logging):
        logger = get_logger("psc_validator.tasks")
        setup_logging("INFO", json_logs=True)

        logger.info("Validation task started", key="2024/05/PSC/a.zip")

        line = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        assert line["event"] == "Validation task started"
        assert line["logger_name"] == "psc_validator.tasks"
        assert line["level"] == "info"
        assert "timestamp" in line

    def test_level_filtering(self, capsys, restore_logging):
        setup_logging("WARNING", json_logs=True)

        get_logger("psc_validator.x").info("quiet")
        get_logger("psc_validator.x").warning("loud")

        out = capsys.readouterr().out
        assert "quiet" not in out
        assert "loud" in out
