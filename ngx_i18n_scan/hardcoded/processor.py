# -*- coding: utf-8 -*-
"""
Detect hardcoded text, assign keys and (optionally) rewrite sources + catalog.

Order of work:
  1) scan <src>/<app_dir> templates, then component classes
  2) load the catalog unless one is passed in (missing/broken catalogs abort
     here, before any write)
  3) assign one key per distinct text
  4) with replace_hardcoded: rewrite each implicated file, then merge the
     staged keys into the catalog and save it once
"""
from __future__ import annotations

import dataclasses
import logging
import pathlib
from typing import Dict, List, Optional, Tuple

from ..catalog import Catalog, load_catalog
from ..config import DEFAULT_CONFIG, ScanConfig
from ..errors import RewriteError, SourcePathError
from .detector import Occurrence, iter_hardcoded_text_in_html, iter_hardcoded_text_in_ts, resolve_app_dir
from .keygen import KeyAssignment, generate_keys
from .rewriter import RewriteResult, rewrite_file

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class ProcessReport:
    occurrences: List[Occurrence] = dataclasses.field(default_factory=list)
    assignment: KeyAssignment = dataclasses.field(default_factory=KeyAssignment)
    results: List[RewriteResult] = dataclasses.field(default_factory=list)
    failures: List[Tuple[pathlib.Path, str]] = dataclasses.field(default_factory=list)
    catalog_saved: bool = False

    @property
    def changed_files(self) -> List[pathlib.Path]:
        return [r.path for r in self.results if r.changed]


def group_texts_by_file(occurrences: List[Occurrence]) -> Dict[pathlib.Path, List[str]]:
    """Distinct texts per file, files and texts in first-seen order."""
    grouped: Dict[pathlib.Path, List[str]] = {}
    for occ in occurrences:
        texts = grouped.setdefault(occ.file, [])
        if occ.text not in texts:
            texts.append(occ.text)
    return grouped


def process_hardcoded_text(
    src_path: pathlib.Path,
    catalog_path: pathlib.Path,
    *,
    detect_hardcoded: bool = True,
    replace_hardcoded: bool = False,
    dry_run: bool = False,
    show_diff: bool = False,
    config: Optional[ScanConfig] = None,
    catalog: Optional[Catalog] = None,
) -> ProcessReport:
    """Detect, key and optionally replace hardcoded text under `src_path`.

    `catalog` is a catalog already loaded from `catalog_path` (and possibly
    mutated) by the caller; the one save at the end then covers both.
    """
    config = config or DEFAULT_CONFIG
    report = ProcessReport()
    if not detect_hardcoded:
        return report

    src_path = pathlib.Path(src_path)
    if not src_path.is_dir():
        raise SourcePathError(f"Source directory not found: {src_path}")
    app_dir = resolve_app_dir(src_path, config)
    logger.debug("Scanning %s", app_dir)

    print("\nScanning for hardcoded text in Angular component files...")
    report.occurrences = list(iter_hardcoded_text_in_html(app_dir, config))
    report.occurrences += iter_hardcoded_text_in_ts(app_dir, config)
    if not report.occurrences:
        print("No hardcoded text found.")
        return report

    if catalog is None:
        catalog = load_catalog(catalog_path)

    print(f"Found {len(report.occurrences)} hardcoded string(s):")
    for occ in report.occurrences:
        print(f"  {occ.file}:{occ.line}: {occ.text}")

    report.assignment = generate_keys(report.occurrences, catalog)
    replacements = report.assignment.replacements
    print("\nKeys:")
    for index, (text, key) in enumerate(replacements.items(), 1):
        suffix = " (existing)" if key in report.assignment.reused else ""
        print(f"{index}. {text} -> {key}{suffix}")

    if not replace_hardcoded:
        print("\nUse --replace-hardcoded to auto-replace and update the translation JSON.")
        return report

    for path, texts in group_texts_by_file(report.occurrences).items():
        try:
            result = rewrite_file(path, texts, replacements, config, dry_run=dry_run)
        except (RewriteError, OSError, UnicodeDecodeError) as e:
            logger.error("Failed to rewrite %s: %s", path, e)
            report.failures.append((path, str(e)))
            continue
        report.results.append(result)
        if not result.changed:
            print(f"No changes: {path}")
            continue
        print(f"{'Would update' if dry_run else 'Updated'} {path}")
        if show_diff or dry_run:
            print(result.diff, end="")

    if dry_run:
        print(f"\nDry run: {len(report.changed_files)} file(s) would change; nothing written.")
        return report

    changed = catalog.merge(report.assignment.staged)
    logger.debug("%d catalog value(s) added or changed", changed)
    catalog.save(config.catalog_layout)
    report.catalog_saved = True
    if report.failures:
        print(f"\n{len(report.failures)} file(s) could not be rewritten; see errors above.")
    print("\nHardcoded text replaced and translation JSON updated.")
    return report
