# -*- coding: utf-8 -*-
"""Exceptions raised by ngx-i18n-scan.

Input and catalog errors are fatal for a run; RewriteError is caught per file
by the orchestrator so one bad file does not abort the batch.
"""
from __future__ import annotations

import pathlib
from typing import Optional

__all__ = [
    "I18nScanError",
    "SourcePathError",
    "ScanConfigError",
    "CatalogError",
    "CatalogNotFoundError",
    "CatalogParseError",
    "RewriteError",
]


class I18nScanError(Exception):
    """Base exception for ngx-i18n-scan."""


class SourcePathError(I18nScanError):
    """Raised when the source directory does not exist."""


class ScanConfigError(I18nScanError):
    """Raised when the configuration file cannot be read or parsed."""


class CatalogError(I18nScanError):
    """Base for translation catalog failures."""

    def __init__(self, message: str, path: Optional[pathlib.Path] = None) -> None:
        super().__init__(message)
        self.path = path


class CatalogNotFoundError(CatalogError):
    """Raised when the catalog file is missing or unreadable."""


class CatalogParseError(CatalogError):
    """Raised when the catalog is not a JSON object."""

    def __init__(self, message: str, path: Optional[pathlib.Path] = None, cause: Optional[Exception] = None) -> None:
        super().__init__(message, path)
        self.cause = cause


class RewriteError(I18nScanError):
    """Raised when a source file cannot be rewritten without breaking it."""
