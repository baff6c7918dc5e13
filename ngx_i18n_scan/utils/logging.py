"""
Logging helpers for ngx-i18n-scan.

- One package logger ("ngx_i18n_scan") writing to stderr as "LEVEL: message".
- Level comes from the scan config ("log_level", e.g. "INFO", "DEBUG"); --verbose forces DEBUG.
- Small helpers to shorten long literals for log lines.
"""

import logging
from typing import Optional

LOGGER_NAME = "ngx_i18n_scan"


# ---------------------------
# Level helpers
# ---------------------------

def _level_from_string(level_str: Optional[str], default: int = logging.WARNING) -> int:
    """Map string level to logging constant; falls back to `default` on unknown."""
    if not level_str:
        return default
    level = getattr(logging, str(level_str).upper(), None)
    return level if isinstance(level, int) else default


# ---------------------------
# Public logger factory
# ---------------------------

def get_scan_logger(
    name: str = LOGGER_NAME,
    *,
    default_level: int = logging.WARNING,
) -> logging.Logger:
    """
    Create or return the package logger.

    Child modules log through logging.getLogger(__name__) and propagate here,
    so only this logger carries a handler.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        logger.addHandler(h)
        logger.setLevel(default_level)
    return logger


def configure_logging(level: Optional[str] = None, *, verbose: bool = False) -> logging.Logger:
    """Apply the configured level to the package logger."""
    logger = get_scan_logger()
    logger.setLevel(logging.DEBUG if verbose else _level_from_string(level))
    return logger


# ---------------------------
# Format utilities
# ---------------------------

def shorten(text: Optional[str], limit: int = 80) -> str:
    """Single-line, truncated rendering of a literal for log lines."""
    if text is None:
        return "<none>"
    s = " ".join(str(text).split())
    return s if len(s) <= limit else s[:limit] + "…(truncated)"
