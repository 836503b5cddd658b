#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for logging configuration."""

import logging

import pytest

from mathfield.logging_utils import ComponentFilter, configure_logging, resolve_level


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Put the root logger back the way pytest left it."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.mark.unit
class TestConfigureLogging:
    """Test root logger setup."""

    def test_level_by_name(self):
        """Test a string level."""
        logger = configure_logging("info")

        assert logger is logging.getLogger()
        assert logger.level == logging.INFO
        assert len(logger.handlers) == 1

    def test_default_level(self):
        """Test that the default level is WARNING."""
        logger = configure_logging()

        assert logger.level == logging.WARNING

    def test_unknown_level_name(self):
        """Test that an unknown level name falls back to the default."""
        assert resolve_level("chatty") == logging.WARNING
        assert resolve_level(15) == 15

    def test_console_format_names_package(self):
        """Test that plain messages are prefixed with the package name."""
        logger = configure_logging("info")
        record = logging.LogRecord("mathfield.controller", logging.WARNING, __file__, 1, "bad markup", None, None)

        assert logger.handlers[0].format(record) == "mathfield: WARNING: bad markup"

    def test_trace_format(self):
        """Test that trace mode includes the component name."""
        logger = configure_logging(logging.DEBUG, trace_mode=True)

        assert "%(component)s" in logger.handlers[0].formatter._fmt

    def test_log_file(self, tmp_path):
        """Test teeing output to a file."""
        log_file = tmp_path / "mathfield.log"
        logger = configure_logging(logging.INFO, log_file=str(log_file))
        logging.getLogger("mathfield.test").info("hello")
        for handler in logger.handlers:
            handler.flush()

        assert len(logger.handlers) == 2
        assert "hello" in log_file.read_text(encoding="utf-8")

    def test_unwritable_log_file(self, tmp_path):
        """Test that a bad log path keeps console logging only."""
        logger = configure_logging(logging.WARNING, log_file=str(tmp_path / "missing" / "x.log"))

        assert len(logger.handlers) == 1


@pytest.mark.unit
class TestComponentFilter:
    """Test the component attribute added to records."""

    @pytest.mark.parametrize(
        "name,component",
        [
            ("mathfield.parser.latex", "parser.latex"),
            ("mathfield", "mathfield"),
            ("mathfieldish", "mathfieldish"),
            ("yaml", "yaml"),
        ],
    )
    def test_component_names(self, name, component):
        """Test stripping the package prefix from logger names."""
        record = logging.LogRecord(name, logging.DEBUG, __file__, 1, "msg", None, None)

        assert ComponentFilter().filter(record)
        assert record.component == component
