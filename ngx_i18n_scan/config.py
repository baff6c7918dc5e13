"""Scan configuration: SCAN_DEFAULTS overlaid with an optional .ngx-i18n-scan.json."""
from __future__ import annotations

import dataclasses
import json
import logging
import pathlib
from typing import Any, Dict, Optional, Tuple

from .errors import ScanConfigError
from .utils.fs import DEFAULT_IGNORES

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".ngx-i18n-scan.json"

SCAN_DEFAULTS: Dict[str, Any] = {
    "log_level": "WARNING",
    "app_dir": "src/app",
    "ignore": list(DEFAULT_IGNORES),
    "ui_properties": ["message", "title", "confirmButtonText", "cancelButtonText"],
    "dialog_callees": ["Swal.fire", "alert", "confirm", "MatSnackBar.open"],
    "translate_service": "TranslateService",
    "translate_module": "@ngx-translate/core",
    "translate_param": "translateService",
    "missing_value": "TODO",
    "catalog_layout": "nested",
    "html_aggregate": True,
    "html_fragment_scan": True,
}

CATALOG_LAYOUTS = ("nested", "flat", "auto")


@dataclasses.dataclass(frozen=True)
class ScanConfig:
    log_level: str = SCAN_DEFAULTS["log_level"]
    app_dir: str = SCAN_DEFAULTS["app_dir"]
    ignore: Tuple[str, ...] = tuple(SCAN_DEFAULTS["ignore"])
    ui_properties: Tuple[str, ...] = tuple(SCAN_DEFAULTS["ui_properties"])
    dialog_callees: Tuple[str, ...] = tuple(SCAN_DEFAULTS["dialog_callees"])
    translate_service: str = SCAN_DEFAULTS["translate_service"]
    translate_module: str = SCAN_DEFAULTS["translate_module"]
    translate_param: str = SCAN_DEFAULTS["translate_param"]
    missing_value: str = SCAN_DEFAULTS["missing_value"]
    catalog_layout: str = SCAN_DEFAULTS["catalog_layout"]
    html_aggregate: bool = SCAN_DEFAULTS["html_aggregate"]
    html_fragment_scan: bool = SCAN_DEFAULTS["html_fragment_scan"]

    @classmethod
    def from_mapping(cls, data: Dict[str, Any]) -> "ScanConfig":
        known = {f.name for f in dataclasses.fields(cls)}
        values: Dict[str, Any] = {}
        for key, value in data.items():
            if key not in known:
                logger.warning("Ignoring unknown config key: %s", key)
                continue
            if isinstance(value, list):
                value = tuple(value)
            values[key] = value
        cfg = cls(**values)
        if cfg.catalog_layout not in CATALOG_LAYOUTS:
            raise ScanConfigError(
                f"catalog_layout must be one of {', '.join(CATALOG_LAYOUTS)}, got {cfg.catalog_layout!r}"
            )
        return cfg


DEFAULT_CONFIG = ScanConfig()


def find_config_file(*dirs: pathlib.Path) -> Optional[pathlib.Path]:
    """Return the first CONFIG_FILENAME found in `dirs`, in order."""
    for d in dirs:
        candidate = d / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def load_scan_config(path: Optional[pathlib.Path] = None, search_dirs: Tuple[pathlib.Path, ...] = ()) -> ScanConfig:
    """Load the scan config.

    An explicit `path` must exist; otherwise the first config file found in
    `search_dirs` is used, and SCAN_DEFAULTS apply when there is none.
    """
    if path is None:
        path = find_config_file(*search_dirs)
        if path is None:
            logger.debug("No %s found; using defaults", CONFIG_FILENAME)
            return DEFAULT_CONFIG
    elif not path.is_file():
        raise ScanConfigError(f"Config file not found: {path}")

    try:
        raw = path.read_text(encoding="utf-8")
        data = json.loads(raw or "{}")
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ScanConfigError(f"Failed to read/parse {path}: {e}") from e
    if not isinstance(data, dict):
        raise ScanConfigError(f"Config file {path} must contain a JSON object")

    merged = dict(SCAN_DEFAULTS)
    merged.update(data)
    logger.debug("Loaded config from %s", path)
    return ScanConfig.from_mapping(merged)
