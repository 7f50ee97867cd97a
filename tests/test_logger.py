"""
Tests for logger setup and contact redaction.
"""

from __future__ import annotations

import logging
from pathlib import Path

from medquote.utils.logger import mask_emails, setup_logger


def test_mask_emails() -> None:
    assert mask_emails("quote from ada.lovelace@example.com") == "quote from a***@example.com"
    assert mask_emails("no address here") == "no address here"


def test_log_file_gets_masked_records(tmp_path: Path) -> None:
    path = tmp_path / "logs" / "medquote.log"
    log = setup_logger("medquote.test.file", level="debug", log_file=path)
    try:
        assert log.level == logging.DEBUG
        log.info("Quote from %s for %d items", "ada@example.com", 2)
        for h in log.handlers:
            h.flush()
        text = path.read_text(encoding="utf-8")
        assert "a***@example.com" in text
        assert "ada@example.com" not in text
        assert "for 2 items" in text
    finally:
        for h in list(log.handlers):
            h.close()
            log.removeHandler(h)


def test_setup_is_idempotent_and_unknown_level_is_info() -> None:
    log = setup_logger("medquote.test.idem", level="chatty")
    try:
        assert setup_logger("medquote.test.idem") is log
        assert len(log.handlers) == 1
        assert log.level == logging.INFO
    finally:
        for h in list(log.handlers):
            log.removeHandler(h)
