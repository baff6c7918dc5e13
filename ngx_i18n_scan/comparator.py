# -*- coding: utf-8 -*-
"""
Reconcile keys used in source against the translation catalog.

compare_keys() reports present / missing / unused / duplicate keys and, when
asked, adds missing keys, drops unused ones and re-saves the catalog (which
also collapses duplicate JSON keys, the last one winning).
"""
from __future__ import annotations

import dataclasses
import logging
import pathlib
from typing import Dict, List, Optional, Sequence

from .catalog import Catalog, load_catalog

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class DiffOptions:
    add_missing: bool = False
    list_missing: bool = False
    remove_unused: bool = False
    list_unused: bool = False
    remove_duplicates: bool = False
    list_duplicates: bool = False

    @property
    def mutates(self) -> bool:
        return self.add_missing or self.remove_unused or self.remove_duplicates


@dataclasses.dataclass
class CompareResult:
    new_keys: List[str]
    unused_keys: List[str]
    duplicate_keys: List[str]
    present_keys: List[str]
    duplicate_counts: Dict[str, int] = dataclasses.field(default_factory=dict)
    saved: bool = False


def compare_keys(
    source_keys: Sequence[str],
    catalog_path: pathlib.Path,
    options: Optional[DiffOptions] = None,
    *,
    missing_value: str = "TODO",
    layout: str = "nested",
    catalog: Optional[Catalog] = None,
    save: bool = True,
) -> CompareResult:
    """Compare `source_keys` with the catalog at `catalog_path`.

    Raises CatalogNotFoundError / CatalogParseError before anything is written.
    An already loaded `catalog` is used as is; with save=False its mutations
    are left for the caller to persist.
    """
    options = options or DiffOptions()
    if catalog is None:
        catalog = load_catalog(catalog_path)
    source = list(dict.fromkeys(source_keys))
    source_set = set(source)
    catalog_keys = catalog.keys()
    catalog_set = set(catalog_keys)

    result = CompareResult(
        new_keys=[k for k in source if k not in catalog_set],
        unused_keys=[k for k in catalog_keys if k not in source_set],
        duplicate_keys=list(catalog.duplicates),
        present_keys=[k for k in source if k in catalog_set],
        duplicate_counts=dict(catalog.duplicates),
    )
    logger.debug(
        "%d source key(s), %d catalog key(s): %d missing, %d unused",
        len(source), len(catalog_keys), len(result.new_keys), len(result.unused_keys),
    )

    if options.list_unused and result.unused_keys:
        print("\nUnused Keys:")
        for k in result.unused_keys:
            print(f" - {k}")

    if options.list_duplicates and result.duplicate_keys:
        print("\nDuplicate Keys:")
        for k in result.duplicate_keys:
            print(f" - {k} (count: {result.duplicate_counts[k]})")

    if options.list_missing and result.new_keys:
        print("\nMissing Keys:")
        for k in result.new_keys:
            print(f" - {k}")

    if options.remove_unused and result.unused_keys:
        catalog.remove(result.unused_keys)
        print(f"\nRemoved {len(result.unused_keys)} unused key(s).")

    if options.remove_duplicates and result.duplicate_keys:
        # parsing already kept the last value of each duplicate; saving drops the rest
        print(f"\nRemoved {len(result.duplicate_keys)} duplicate key(s) (by overwriting on re-save).")

    if options.add_missing and result.new_keys:
        print(f"\nAuto-updating JSON with {len(result.new_keys)} new key(s)...")
        catalog.merge({k: missing_value for k in result.new_keys})

    if options.mutates and save:
        catalog.save(layout)
        result.saved = True
        print(f"Updated file: {catalog_path}")

    return result
