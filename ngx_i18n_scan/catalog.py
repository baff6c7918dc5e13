# -*- coding: utf-8 -*-
"""
Translation catalog I/O.

A catalog is a JSON object whose string leaves are reachable by dot-separated
paths. In memory it is held flat ({"text.hello": "Hello"}); on disk it is
written nested (or flat, see ScanConfig.catalog_layout).

Leaf/prefix collisions ("text.save" and "text.save.1") are stored by keeping
the remainder of the longer key as a literal dotted key inside the deepest
object that does not clash:

    {"text": {"save": "Save!", "save.1": "Save?"}}

so that flatten(unflatten(flatten(c))) == flatten(c) for every catalog.
"""
from __future__ import annotations

import dataclasses
import json
import logging
import pathlib
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .errors import CatalogNotFoundError, CatalogParseError
from .utils.fs import atomic_write

logger = logging.getLogger(__name__)

__all__ = [
    "Catalog",
    "flatten",
    "unflatten",
    "load_catalog",
    "dump_catalog",
]


# ── Flat <-> nested ───────────────────────────────────────────────────────────

def flatten(obj: Dict[str, Any], prefix: Optional[str] = None) -> Dict[str, Any]:
    """Flatten nested objects into dot-path keys. Non-object values are leaves."""
    out: Dict[str, Any] = {}
    for k, v in obj.items():
        path = k if prefix is None else f"{prefix}.{k}"
        if isinstance(v, dict):
            out.update(flatten(v, path))
        else:
            out[path] = v
    return out


def unflatten(flat: Dict[str, Any]) -> Dict[str, Any]:
    """Rebuild nested objects from dot-path keys (see module docstring for collisions)."""
    leaves = set(flat)
    root: Dict[str, Any] = {}
    for key, value in flat.items():
        parts = key.split(".")
        node = root
        i = 0
        # Descend while the prefix is not itself a leaf key
        while i < len(parts) - 1:
            prefix = ".".join(parts[: i + 1])
            if prefix in leaves:
                break
            child = node.get(parts[i])
            if not isinstance(child, dict):
                child = {}
                node[parts[i]] = child
            node = child
            i += 1
        node[".".join(parts[i:])] = value
    return root


# ── Duplicate-aware parsing ───────────────────────────────────────────────────

class _Pairs(list):
    """Raw key/value pairs of one JSON object, in document order."""


def _build(value: Any, prefix: str, counts: Dict[str, int]) -> Any:
    if isinstance(value, _Pairs):
        obj: Dict[str, Any] = {}
        seen: Dict[str, int] = {}
        for k, v in value:
            seen[k] = seen.get(k, 0) + 1
            path = f"{prefix}.{k}" if prefix else k
            obj[k] = _build(v, path, counts)
        for k, n in seen.items():
            if n > 1:
                counts[f"{prefix}.{k}" if prefix else k] = n
        return obj
    if isinstance(value, list):
        return [_build(v, prefix, counts) for v in value]
    return value


def parse_catalog_text(text: str, path: Optional[pathlib.Path] = None) -> Tuple[Dict[str, Any], Dict[str, int]]:
    """Parse catalog JSON; returns (nested object, {dotted key: occurrence count} for duplicates).

    Later duplicates win, as with a plain json.loads.
    """
    text = text.strip()
    if not text:
        return {}, {}
    try:
        raw = json.loads(text, object_pairs_hook=_Pairs)
    except json.JSONDecodeError as e:
        raise CatalogParseError(f"Failed to parse JSON file {path}: {e}", path, e) from e
    if not isinstance(raw, _Pairs):
        raise CatalogParseError(f"Catalog {path} must contain a JSON object at the top level", path)
    counts: Dict[str, int] = {}
    return _build(raw, "", counts), counts


# ── Catalog ───────────────────────────────────────────────────────────────────

@dataclasses.dataclass
class Catalog:
    path: pathlib.Path
    entries: Dict[str, Any] = dataclasses.field(default_factory=dict)
    # layout the file was loaded in, used when saving with layout="auto"
    nested: bool = True
    duplicates: Dict[str, int] = dataclasses.field(default_factory=dict)

    def __contains__(self, key: str) -> bool:
        return key in self.entries

    def __len__(self) -> int:
        return len(self.entries)

    def get(self, key: str, default: Any = None) -> Any:
        return self.entries.get(key, default)

    def keys(self) -> List[str]:
        return list(self.entries)

    def find_key_for_value(self, text: str, exclude: Iterable[str] = ()) -> Optional[str]:
        """First key (catalog order) whose string value equals `text`, skipping `exclude`."""
        exclude = set(exclude)
        for key, value in self.entries.items():
            if isinstance(value, str) and value == text and key not in exclude:
                return key
        return None

    def merge(self, staged: Dict[str, str]) -> int:
        """Merge staged key -> text pairs; returns the number of keys whose value changed."""
        changed = 0
        for key, text in staged.items():
            if self.entries.get(key) != text:
                changed += 1
            self.entries[key] = text
        return changed

    def remove(self, keys: Iterable[str]) -> int:
        removed = 0
        for key in keys:
            if self.entries.pop(key, None) is not None:
                removed += 1
        return removed

    def to_json(self, layout: str = "nested") -> str:
        nested = self.nested if layout == "auto" else layout == "nested"
        data = unflatten(self.entries) if nested else dict(self.entries)
        return dump_catalog(data)

    def save(self, layout: str = "nested") -> None:
        atomic_write(self.path, self.to_json(layout))
        logger.info("Wrote %d key(s) to %s", len(self.entries), self.path)


def dump_catalog(data: Dict[str, Any]) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def load_catalog(path: pathlib.Path) -> Catalog:
    """Load and flatten a catalog file.

    Raises CatalogNotFoundError when the file is missing/unreadable and
    CatalogParseError on malformed JSON; nothing is mutated in either case.
    """
    path = pathlib.Path(path)
    if not path.is_file():
        raise CatalogNotFoundError(f"File not found: {path}", path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise CatalogNotFoundError(f"Cannot read {path}: {e}", path) from e

    data, duplicates = parse_catalog_text(text, path)
    has_objects = any(isinstance(v, dict) for v in data.values())
    dotted = any("." in k for k in data)
    catalog = Catalog(
        path=path,
        entries=flatten(data),
        nested=has_objects or not dotted,
        duplicates=duplicates,
    )
    logger.debug("Loaded %d key(s) from %s (%d duplicate(s))", len(catalog), path, len(duplicates))
    return catalog
