# -*- coding: utf-8 -*-
"""Turn detected texts into unique dot-separated translation keys."""
from __future__ import annotations

import dataclasses
import hashlib
import re
from typing import Dict, Iterable, Set

from ..catalog import Catalog
from .detector import Occurrence

KEY_PREFIX = "text"
_NON_KEY_CHARS_RE = re.compile(r"[^a-z0-9\s]")


def base_key(text: str) -> str:
    """'Save changes!' -> 'text.save.changes'.

    Texts with nothing left after normalization (punctuation, non-Latin scripts)
    get a short content hash so the key stays a valid dot path.
    """
    parts = _NON_KEY_CHARS_RE.sub("", text.lower()).split()
    if not parts:
        parts = ["h" + hashlib.sha1(text.encode("utf-8")).hexdigest()[:8]]
    return ".".join([KEY_PREFIX] + parts)


@dataclasses.dataclass
class KeyAssignment:
    replacements: Dict[str, str] = dataclasses.field(default_factory=dict)  # text -> key
    staged: Dict[str, str] = dataclasses.field(default_factory=dict)  # key -> text
    reused: Set[str] = dataclasses.field(default_factory=set)


class KeyGenerator:
    """Assigns one key per distinct text; first occurrence wins."""

    def __init__(self, catalog: Catalog) -> None:
        self.catalog = catalog
        self.generated: Set[str] = set()
        self.assignment = KeyAssignment()

    def _is_taken(self, key: str, text: str) -> bool:
        if key in self.generated:
            return True
        return key in self.catalog and self.catalog.get(key) != text

    def assign(self, text: str) -> str:
        existing = self.assignment.replacements.get(text)
        if existing is not None:
            return existing

        key = self.catalog.find_key_for_value(text, exclude=self.generated)
        if key is not None:
            self.assignment.reused.add(key)
        else:
            base = base_key(text)
            key = base
            suffix = 1
            while self._is_taken(key, text):
                key = f"{base}.{suffix}"
                suffix += 1

        self.generated.add(key)
        self.assignment.replacements[text] = key
        self.assignment.staged[key] = text
        return key


def generate_keys(occurrences: Iterable[Occurrence], catalog: Catalog) -> KeyAssignment:
    gen = KeyGenerator(catalog)
    for occ in occurrences:
        gen.assign(occ.text)
    return gen.assignment
