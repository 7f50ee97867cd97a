"""Logging setup for the quote cart.

Quote requests carry customer contact details, so every handler installed here
masks email addresses before a record is written.
"""

import logging
import re
import sys
from pathlib import Path
from typing import Optional

_EMAIL_RE = re.compile(r"([A-Za-z0-9._%+-])[A-Za-z0-9._%+-]*@([A-Za-z0-9.-]+\.[A-Za-z]{2,})")


def mask_emails(text: str) -> str:
    """`ada.lovelace@example.com` -> `a***@example.com`."""
    if "@" not in text:
        return text
    return _EMAIL_RE.sub(r"\1***@\2", text)


class ContactRedactionFilter(logging.Filter):
    """Rewrite the formatted message with email addresses masked."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        masked = mask_emails(message)
        if masked != message:
            record.msg = masked
            record.args = None
        return True


def setup_logger(
    name: str = "medquote",
    level: int | str = logging.INFO,
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """
    Configure and return the application logger.

    Calling it again is a no-op once handlers exist, so Streamlit reruns do
    not stack duplicate handlers.

    Args:
        name: Logger name.
        level: Logging level, as an int or a level name such as "DEBUG".
            Unknown names fall back to INFO.
        log_file: Optional path to log file (LOG_FILE). If None, logs to stderr only.

    Returns:
        Configured logger.
    """
    log = logging.getLogger(name)
    if log.handlers:
        return log

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    log.setLevel(level)
    fmt = logging.Formatter(
        "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    redact = ContactRedactionFilter()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    for h in handlers:
        h.setFormatter(fmt)
        h.addFilter(redact)
        log.addHandler(h)

    return log


def get_logger(name: str = "medquote") -> logging.Logger:
    """Return the application logger. Use after setup_logger has been called."""
    return logging.getLogger(name)
