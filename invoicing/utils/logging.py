"""
Logging setup for the invoicing backend.

configure_logging() installs one stream handler on the root logger at
startup; modules then log through logging.getLogger(__name__) or
get_logger(). Every record passing through that handler is scrubbed by
RedactingFilter.

SECURITY RULES:
- NEVER log passwords, access tokens or refresh tokens
- NEVER log invoice amounts in clear form
- NEVER log raw form payloads (they may carry credentials)

Acceptable logging:
- High-level events (e.g., "Invoice created", "Sign-in rejected")
- Identifiers (invoice_id, customer_id, user_id)
- Failure kinds and sanitized error messages
"""

import logging
import re
from typing import Optional

from invoicing.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_SECRET_PATTERNS = (
    re.compile(r"(Bearer\s+)[A-Za-z0-9\-_.=]+", re.IGNORECASE),
    re.compile(r"((?:password|access_token|refresh_token)['\"]?\s*[:=]\s*['\"]?)[^\s,'\"}]+", re.IGNORECASE),
)


class RedactingFilter(logging.Filter):
    """Masks bearer tokens and credential values in rendered messages."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = message
        for pattern in _SECRET_PATTERNS:
            redacted = pattern.sub(r"\1[REDACTED]", redacted)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def configure_logging(level: Optional[int] = None) -> logging.Handler:
    """
    Attach the service's stream handler to the root logger.

    Calling it again replaces the handler instead of adding a second one.

    Args:
        level: Root level (defaults to settings.LOG_LEVEL)

    Returns:
        The installed handler
    """
    root = logging.getLogger()
    for existing in list(root.handlers):
        if getattr(existing, "_invoicing_handler", False):
            root.removeHandler(existing)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    handler.addFilter(RedactingFilter())
    handler._invoicing_handler = True
    root.addHandler(handler)
    root.setLevel(settings.log_level if level is None else level)
    return handler


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """
    Logger for a module, set to the configured level.

    Usage:
        >>> from invoicing.utils.logging import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.info("High-level event occurred")
    """
    logger = logging.getLogger(name)
    logger.setLevel(settings.log_level if level is None else level)
    return logger
