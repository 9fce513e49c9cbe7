"""
Tests for logging configuration.

Each test restores the package logger so that handlers installed by
setup_logging do not leak into other tests.
"""

import json
import logging

import pytest

from edgeMarkov.common.logging_config import (
    ROOT_LOGGER_NAME,
    JSONFormatter,
    LoggingTimer,
    configure_external_library_logging,
    get_logger,
    setup_logging,
    _resolve_logging_config
)


@pytest.fixture(autouse=True)
def restore_package_logger():
    root = logging.getLogger(ROOT_LOGGER_NAME)
    saved = (list(root.handlers), root.level, root.propagate)
    yield
    for handler in list(root.handlers):
        root.removeHandler(handler)
        if handler not in saved[0]:
            handler.close()
    for handler in saved[0]:
        root.addHandler(handler)
    root.setLevel(saved[1])
    root.propagate = saved[2]


class TestSetupLogging:
    """Test logger setup from arguments and environment."""

    def test_module_loggers_belong_to_package(self):
        logger = get_logger("edgeMarkov.models.edge_markovian")
        assert logger.name.startswith(ROOT_LOGGER_NAME)

    def test_level_argument(self):
        logger = setup_logging(level="DEBUG", console=True, force_setup=True)

        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

    def test_invalid_level(self):
        with pytest.raises(ValueError, match="Invalid logging level"):
            setup_logging(level="LOUD", force_setup=True)

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "logs" / "run.log"
        logger = setup_logging(log_file=str(log_file), console=False, force_setup=True)
        logger.info("hello")

        assert log_file.exists()

    def test_environment_variables(self, monkeypatch, tmp_path):
        monkeypatch.setenv("EDGEMARKOV_LOG_LEVEL", "WARNING")
        monkeypatch.setenv("EDGEMARKOV_LOG_DIR", str(tmp_path))
        monkeypatch.setenv("EDGEMARKOV_LOG_CONSOLE", "off")
        monkeypatch.setenv("EDGEMARKOV_LOG_JSON", "yes")

        config = _resolve_logging_config()

        assert config["level"] == "WARNING"
        assert config["log_file"].endswith("edgemarkov.log")
        assert config["console"] is False
        assert config["json_format"] is True

    def test_arguments_override_environment(self, monkeypatch):
        monkeypatch.setenv("EDGEMARKOV_LOG_LEVEL", "WARNING")
        assert _resolve_logging_config(level="ERROR")["level"] == "ERROR"

    def test_second_call_keeps_handlers(self):
        first = setup_logging(console=True, force_setup=True)
        handlers = list(first.handlers)
        second = setup_logging(level="DEBUG")

        assert second.handlers == handlers


class TestFormattersAndHelpers:
    """Test JSON output, timers and third-party logger levels."""

    def test_json_formatter(self):
        record = logging.LogRecord(
            "edgeMarkov.test", logging.INFO, __file__, 10, "Simulated %d steps", (5,), None
        )
        record.steps = 5
        payload = json.loads(JSONFormatter().format(record))

        assert payload["message"] == "Simulated 5 steps"
        assert payload["level"] == "INFO"
        assert payload["steps"] == 5

    def test_logging_timer_records_elapsed(self):
        with LoggingTimer("unit", {"steps": 3}) as timer:
            pass

        assert timer.elapsed is not None
        assert timer.elapsed >= 0.0

    def test_external_library_levels(self):
        configure_external_library_logging({"networkit": "ERROR"})
        assert logging.getLogger("networkit").level == logging.ERROR
