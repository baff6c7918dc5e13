# -*- coding: utf-8 -*-
"""Find hardcoded user-facing text in Angular templates and component classes."""
from __future__ import annotations

import dataclasses
import logging
import pathlib
from typing import Iterator, List

from ..config import DEFAULT_CONFIG, ScanConfig
from ..utils.fs import discover_files, read_text
from ..utils.logging import shorten
from .markup import MIN_TEXT_LENGTH, is_translation_key, scan_markup_lines
from .syntax import (
    is_html_dialog_property,
    is_ui_text,
    iter_string_literals,
    literal_value,
    parse_source,
)

logger = logging.getLogger(__name__)

MARKUP_SUFFIXES = (".html",)
COMPONENT_SUFFIXES = (".component.ts",)


@dataclasses.dataclass(frozen=True)
class Occurrence:
    file: pathlib.Path
    line: int
    text: str


def resolve_app_dir(src: pathlib.Path, config: ScanConfig = DEFAULT_CONFIG) -> pathlib.Path:
    """<src>/<app_dir> when it exists (an Angular workspace), else <src> itself."""
    candidate = src / config.app_dir if config.app_dir else src
    return candidate if candidate.is_dir() else src


def _read(p: pathlib.Path):
    try:
        return read_text(p)
    except (UnicodeDecodeError, OSError) as e:
        logger.warning("Failed to read %s: %s", p, e)
        return None


# ── Markup ────────────────────────────────────────────────────────────────────

def scan_markup_source(path: pathlib.Path, content: str) -> Iterator[Occurrence]:
    for index, text in scan_markup_lines(content):
        yield Occurrence(path, index + 1, text)


def iter_hardcoded_text_in_html(directory: pathlib.Path, config: ScanConfig = DEFAULT_CONFIG) -> Iterator[Occurrence]:
    for p in discover_files(pathlib.Path(directory), MARKUP_SUFFIXES, config.ignore):
        content = _read(p)
        if content is None:
            continue
        yield from scan_markup_source(p, content)


def detect_hardcoded_text_in_html(directory: pathlib.Path, config: ScanConfig = DEFAULT_CONFIG) -> List[Occurrence]:
    return list(iter_hardcoded_text_in_html(directory, config))


# ── Component classes ─────────────────────────────────────────────────────────

def scan_component_source(path: pathlib.Path, content: str, config: ScanConfig = DEFAULT_CONFIG) -> Iterator[Occurrence]:
    """Occurrences in one component-class source, in document order.

    A string under `html:` in a dialog call is reported line by line through the
    markup heuristics and, with html_aggregate, once more as a whole.
    """
    tree = parse_source(content.encode("utf-8"))
    if tree.root_node.has_error:
        logger.warning("Syntax errors in %s; scanning best effort", path)

    for node in iter_string_literals(tree.root_node):
        text = literal_value(node).strip()
        if not text:
            continue
        base_line = node.start_point[0]

        if is_ui_text(node, text, config.ui_properties, config.dialog_callees):
            yield Occurrence(path, base_line + 1, text)

        if is_html_dialog_property(node, config.dialog_callees):
            logger.debug("html dialog content in %s:%d: %s", path, base_line + 1, shorten(text))
            if config.html_fragment_scan:
                for index, fragment in scan_markup_lines(text):
                    yield Occurrence(path, base_line + index + 1, fragment)
            if config.html_aggregate and len(text) >= MIN_TEXT_LENGTH and not is_translation_key(text):
                yield Occurrence(path, base_line + 1, text)


def iter_hardcoded_text_in_ts(directory: pathlib.Path, config: ScanConfig = DEFAULT_CONFIG) -> Iterator[Occurrence]:
    for p in discover_files(pathlib.Path(directory), COMPONENT_SUFFIXES, config.ignore):
        content = _read(p)
        if content is None:
            continue
        yield from scan_component_source(p, content, config)


def detect_hardcoded_text_in_ts(directory: pathlib.Path, config: ScanConfig = DEFAULT_CONFIG) -> List[Occurrence]:
    return list(iter_hardcoded_text_in_ts(directory, config))
