import json
import logging
from logging.handlers import RotatingFileHandler

import pytest
import structlog

from Ulidkit.config import Settings
from Ulidkit.logging import setup_logging


@pytest.fixture
def _restore_logging():
    yield None
    root = logging.getLogger()
    for h in list(root.handlers):
        # Leave pytest capture handlers alone
        if type(h) not in (logging.StreamHandler, RotatingFileHandler):
            continue
        h.close()
        root.removeHandler(h)
    structlog.reset_defaults()


def test_file_handler_writes_json_lines(tmp_path, monkeypatch, _restore_logging):
    monkeypatch.chdir(tmp_path)
    path = tmp_path / "logs" / "ulidkit.jsonl"
    settings = Settings(
        logging_level="DEBUG",
        logging_console="NONE",
        logging_file="INFO",
        logging_file_path=str(path),
    )
    setup_logging(settings)

    structlog.get_logger("ulid.test").info("ulid.test.event", generated=3)
    structlog.get_logger("ulid.test").debug("ulid.test.filtered")
    for h in logging.getLogger().handlers:
        h.flush()

    lines = [json.loads(line) for line in path.read_text().splitlines()]
    assert [rec["event"] for rec in lines] == ["ulid.test.event"]
    assert lines[0]["level"] == "info"
    assert lines[0]["generated"] == 3
    assert "timestamp" in lines[0]


def test_default_setup_has_console_only(_restore_logging):
    setup_logging()
    handlers = logging.getLogger().handlers
    assert len(handlers) == 1
    assert isinstance(handlers[0], logging.StreamHandler)
    assert not isinstance(handlers[0], logging.FileHandler)
