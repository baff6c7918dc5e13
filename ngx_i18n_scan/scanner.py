# -*- coding: utf-8 -*-
"""Collect translation keys already used through the translate pipe or service."""
from __future__ import annotations

import logging
import pathlib
import re
from typing import List, Optional, Sequence, Set

from .utils.fs import discover_files, read_text

logger = logging.getLogger(__name__)

KEY_CHARS = r"[a-zA-Z0-9_.-]+"

TRANSLATION_KEY_RES = [
    # {{ 'key' | translate }}
    re.compile(r"['\"`](" + KEY_CHARS + r")['\"`]\s*\|\s*translate"),
    # this.translate.get('key'), translateService.get("key")
    re.compile(r"[\w$.]*translate\w*\s*\.\s*get\s*\(\s*['\"`](" + KEY_CHARS + r")['\"`]\s*\)"),
    # translate.instant('key')
    re.compile(r"[\w$.]*translate\w*\s*\.\s*instant\s*\(\s*['\"`](" + KEY_CHARS + r")['\"`]\s*\)"),
    # {{ (cond ? 'key1' : 'key2') | translate }} and [attr]="(cond ? 'key1' : 'key2') | translate"
    re.compile(
        r"\(\s*[^?]+?\s*\?\s*['\"`](" + KEY_CHARS + r")['\"`]\s*:\s*['\"`](" + KEY_CHARS + r")['\"`]\s*\)\s*\|\s*translate"
    ),
]

SOURCE_SUFFIXES = (".ts", ".html")


def extract_keys_from_text(text: str) -> Set[str]:
    keys: Set[str] = set()
    for pattern in TRANSLATION_KEY_RES:
        for m in pattern.finditer(text):
            keys.update(g for g in m.groups() if g)
    return keys


def extract_keys_from_source(src_dir: pathlib.Path, ignore_globs: Optional[Sequence[str]] = None) -> List[str]:
    """Scan .ts/.html files below `src_dir`; returns the sorted unique keys."""
    keys: Set[str] = set()
    for p in discover_files(pathlib.Path(src_dir), SOURCE_SUFFIXES, ignore_globs):
        try:
            text = read_text(p)
        except (UnicodeDecodeError, OSError) as e:
            logger.warning("Failed to read %s: %s", p, e)
            continue
        keys |= extract_keys_from_text(text)
    return sorted(keys)
