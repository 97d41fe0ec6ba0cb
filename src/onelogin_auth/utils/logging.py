"""Logging configuration for the OneLogin authentication client.

Handlers installed by :func:`setup_logging` carry a :class:`RedactSecretsFilter`
so credentials logged under the ``onelogin_auth`` logger never reach the
console or log file. Records from other loggers (``urllib3``, ``requests``)
do not pass through these handlers and are not redacted.
"""

import logging
import re
import sys
from pathlib import Path
from typing import Optional

_SECRET_PATTERNS = (
    # Authorization: bearer:<token>
    re.compile(r"(?i)(bearer[:\s]\s*)([^\s,'\"]+)"),
    # Authorization: client_id: <id>, client_secret: <secret>
    re.compile(r"(?i)(client_secret[\"']?\s*[:=]\s*[\"']?)([^\s,'\"}]+)"),
    # JSON bodies
    re.compile(
        r"(?i)([\"']?(?:access_token|refresh_token|state_token|session_token|password)"
        r"[\"']?\s*[:=]\s*[\"']?)([^\s,'\"}]+)"
    ),
)


def mask_sensitive(value: Optional[str], keep: int = 4) -> str:
    """Keep the first ``keep`` characters of a secret and mask the rest."""
    if not value:
        return ""
    return f"{value[:keep]}****"


def redact(text: str) -> str:
    """Mask every credential found in ``text``."""
    for pattern in _SECRET_PATTERNS:
        text = pattern.sub(lambda m: m.group(1) + mask_sensitive(m.group(2)), text)
    return text


class RedactSecretsFilter(logging.Filter):
    """Mask tokens, secrets and passwords in log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = redact(message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """
    Configure library logging.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional log file path

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger("onelogin_auth")
    logger.setLevel(getattr(logging, level.upper()))

    # Remove existing handlers
    logger.handlers.clear()
    redact_filter = RedactSecretsFilter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(getattr(logging, level.upper()))
    console_handler.setFormatter(
        logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    )
    console_handler.addFilter(redact_filter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s"
            )
        )
        file_handler.addFilter(redact_filter)
        logger.addHandler(file_handler)

    return logger
