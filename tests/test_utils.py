"""Tests for logging setup."""

import io
import logging

from loadpath.utils import LOG_FORMAT, LoadPathLogFilter, init_loadpath_logging


def _record(name="loadpath.filesystem.memory", **extra):
    record = logging.LogRecord(name, logging.INFO, __file__, 1, "hello", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestLoadPathLogFilter:
    """Tests for LoadPathLogFilter."""

    def test_default_store(self):
        record = _record()
        assert LoadPathLogFilter().filter(record) is True
        assert record.store == "-"

    def test_store_kept(self):
        record = _record(store="hybrid")
        LoadPathLogFilter().filter(record)
        assert record.store == "hybrid"

    def test_logger_name_untouched(self):
        record = _record(name="root")
        LoadPathLogFilter().filter(record)
        assert record.name == "root"


class TestInitLoadPathLogging:
    """Tests for init_loadpath_logging."""

    def test_installs_filtered_handler(self, restore_root_logger):
        handler = init_loadpath_logging(level=logging.DEBUG)
        assert handler in restore_root_logger.handlers
        assert restore_root_logger.level == logging.DEBUG
        assert any(isinstance(f, LoadPathLogFilter) for f in handler.filters)
        assert handler.formatter._fmt == LOG_FORMAT

    def test_repeat_call_replaces_own_handler(self, restore_root_logger):
        """Test that only the previously installed load path handler is replaced."""
        foreign = logging.NullHandler()
        restore_root_logger.addHandler(foreign)
        first = init_loadpath_logging()
        second = init_loadpath_logging()
        assert first not in restore_root_logger.handlers
        assert restore_root_logger.handlers == [foreign, second]

    def test_store_tag_in_output(self, restore_root_logger):
        """Test that records from a store carry its tag into the output."""
        stream = io.StringIO()
        init_loadpath_logging(level=logging.DEBUG, stream=stream)
        logging.getLogger("loadpath.filesystem.memory").debug("wrote", extra={"store": "memory"})
        logging.getLogger("elsewhere").info("plain")
        lines = stream.getvalue().splitlines()
        assert any("[loadpath.filesystem.memory] [memory] wrote" in line for line in lines)
        assert any("[elsewhere] [-] plain" in line for line in lines)
