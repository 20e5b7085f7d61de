import json
import logging
import logging.handlers

import pytest
import structlog

from plugfetch.internal.logging import setup_logging, get_logger

# --- Fixtures ---

@pytest.fixture(autouse=True)
def reset_logging(monkeypatch):
    """Ensure logging state is clean for each test."""
    monkeypatch.setattr("plugfetch.internal.logging._LOGGING_CONFIGURED", False)
    monkeypatch.delenv("PLUGFETCH_LOG_LEVEL", raising=False)
    yield
    for handler in logging.root.handlers[:]:
        handler.close()
        logging.root.removeHandler(handler)
    structlog.reset_defaults()


@pytest.fixture
def json_log(tmp_path):
    """Configures JSON file logging and returns a reader for the written entries."""
    log_file = tmp_path / "logs" / "test.log.json"

    def _setup(level="DEBUG"):
        setup_logging(log_level_name=level, log_file_path=log_file, console_output=False)

        def read():
            for handler in logging.root.handlers:
                handler.flush()
            return [json.loads(line) for line in log_file.read_text().splitlines() if line.strip()]
        return read

    return _setup

# --- Tests ---

def test_logging_is_structured_json(json_log):
    read = json_log("INFO")
    logger = get_logger("test.module")

    logger.info("Successfully downloaded", artifact="Example", platform="MODRINTH")

    entry = read()[0]
    assert entry["event"] == "Successfully downloaded"
    assert entry["artifact"] == "Example"
    assert entry["platform"] == "MODRINTH"
    assert entry["level"] == "info"
    assert entry["logger"] == "test.module"
    assert "timestamp" in entry

def test_logging_level_filtering(json_log):
    read = json_log("WARNING")
    logger = get_logger("filter.test")

    logger.info("Info message - should not appear")
    logger.warning("Warning message - should appear")
    logger.error("Error message - should appear")

    events = [e["event"] for e in read()]
    assert events == ["Warning message - should appear", "Error message - should appear"]

def test_environment_overrides_level(json_log, monkeypatch):
    monkeypatch.setenv("PLUGFETCH_LOG_LEVEL", "error")
    read = json_log("DEBUG")
    logger = get_logger("env.test")

    logger.warning("hidden")
    logger.error("shown")

    assert [e["event"] for e in read()] == ["shown"]

def test_logging_console_output(capsys):
    setup_logging(log_level_name="INFO", log_file_path=None, console_output=True)
    get_logger("console.test").info("Hello console!")

    captured = capsys.readouterr()
    assert "Hello console!" in captured.out

def test_logging_without_handlers_is_silent(capsys):
    setup_logging(log_level_name="INFO", log_file_path=None, console_output=False)
    get_logger("null.test").info("This should not be seen.")

    assert "This should not be seen." not in capsys.readouterr().out

def test_setup_is_idempotent(tmp_path):
    setup_logging(log_file_path=tmp_path / "a.log.json")
    setup_logging(log_file_path=tmp_path / "b.log.json")

    assert (tmp_path / "a.log.json").exists()
    assert not (tmp_path / "b.log.json").exists()
