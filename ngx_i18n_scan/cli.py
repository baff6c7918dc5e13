# -*- coding: utf-8 -*-
"""
ngx-i18n-scan command line.

Usage Examples
--------------

1. Report missing / unused / duplicate keys against the only catalog under ./**/i18n/:
   ngx-i18n-scan --list-missing --list-unused --list-duplicates

2. Add missing keys (value "TODO") and drop unused ones:
   ngx-i18n-scan --src . --json src/assets/i18n/en.json --add-missing --remove-unused

3. Preview hardcoded-text replacement without writing anything:
   ngx-i18n-scan --detect-hardcoded --replace-hardcoded --dry-run

4. Apply it, printing a unified diff per rewritten file:
   ngx-i18n-scan --replace-hardcoded --diff

Exit status: 0 on success, 2 for input errors (missing source directory, no
catalog found, bad config), 1 when the catalog cannot be parsed.
"""
from __future__ import annotations

import argparse
import dataclasses
import os
import pathlib
import sys
from typing import Callable, List, Optional, Sequence

from . import __version__
from .catalog import load_catalog
from .comparator import DiffOptions, compare_keys
from .config import load_scan_config
from .errors import CatalogNotFoundError, CatalogParseError, I18nScanError, ScanConfigError, SourcePathError
from .hardcoded.processor import process_hardcoded_text
from .scanner import extract_keys_from_source
from .utils.logging import configure_logging

I18N_DIR_NAME = "i18n"
IGNORED_DIR_NAMES = {"node_modules", ".git", "dist", ".angular"}


class CatalogSelectionError(I18nScanError):
    """Raised when no translation catalog can be chosen."""


def find_i18n_json_files(start: pathlib.Path) -> List[pathlib.Path]:
    """Every *.json directly inside a directory named i18n (any case) below `start`."""
    found: List[pathlib.Path] = []
    for root, dirs, _files in os.walk(start):
        dirs[:] = sorted(d for d in dirs if d not in IGNORED_DIR_NAMES)
        for d in list(dirs):
            if d.lower() != I18N_DIR_NAME:
                continue
            i18n_dir = pathlib.Path(root) / d
            found.extend(sorted(p for p in i18n_dir.iterdir() if p.is_file() and p.suffix == ".json"))
            dirs.remove(d)
    return found


def prompt_choice(
    files: Sequence[pathlib.Path],
    *,
    input_fn: Callable[[str], str] = input,
    interactive: Optional[bool] = None,
) -> pathlib.Path:
    """Numbered picker on stdin; re-asks until a valid number is given."""
    if interactive is None:
        interactive = sys.stdin.isatty()
    if not interactive:
        raise CatalogSelectionError(
            "Multiple translation files found and stdin is not interactive; pass --json PATH"
        )
    print("Multiple translation files found. Please select one:")
    for i, p in enumerate(files, 1):
        print(f"  {i}. {p}")
    while True:
        try:
            answer = input_fn(f"Select [1-{len(files)}]: ").strip()
        except EOFError as e:
            raise CatalogSelectionError("No translation file selected") from e
        if answer.isdigit() and 1 <= int(answer) <= len(files):
            return files[int(answer) - 1]
        print(f"Please enter a number between 1 and {len(files)}.")


def resolve_catalog_path(
    json_arg: Optional[str],
    root: pathlib.Path,
    *,
    input_fn: Callable[[str], str] = input,
    interactive: Optional[bool] = None,
) -> pathlib.Path:
    if json_arg:
        p = pathlib.Path(json_arg)
        if p.is_file():
            return p
        print(f"Translation file not found: {p}; searching for i18n folders instead.")

    candidates = find_i18n_json_files(root)
    if not candidates:
        raise CatalogSelectionError("No translation JSON files found in project (looked for i18n folders)")
    if len(candidates) == 1:
        print(f"Using detected translation file: {candidates[0]}")
        return candidates[0]
    return prompt_choice(candidates, input_fn=input_fn, interactive=interactive)


def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="ngx-i18n-scan",
        description="Scan and manage translation keys in Angular projects.",
    )
    ap.add_argument("--src", default="", help="Path to the source directory (default: current directory)")
    ap.add_argument("--json", help="Path to the translation JSON file")
    ap.add_argument("--add-missing", action="store_true", help="Add missing keys to the JSON")
    ap.add_argument("--list-missing", action="store_true", help="List keys used in source but missing from the JSON")
    ap.add_argument("--remove-unused", action="store_true", help="Remove unused keys from the JSON")
    ap.add_argument("--list-unused", action="store_true", help="List keys in the JSON not used in source")
    ap.add_argument("--remove-duplicates", action="store_true", help="Remove duplicate keys from the JSON")
    ap.add_argument("--list-duplicates", action="store_true", help="List duplicate keys in the JSON")
    ap.add_argument("--detect-hardcoded", action="store_true", help="Detect hardcoded text in templates and components")
    ap.add_argument(
        "--replace-hardcoded",
        action="store_true",
        help="Replace detected hardcoded text with translation keys and update the JSON (implies --detect-hardcoded)",
    )
    ap.add_argument("--dry-run", action="store_true", help="Report only; no writes to sources or the JSON")
    ap.add_argument("--diff", action="store_true", help="Print a unified diff for every rewritten file")
    ap.add_argument("--ignore", action="append", default=[], help="Glob patterns to exclude (repeatable)")
    ap.add_argument("--config", help="Path to a .ngx-i18n-scan.json config file")
    ap.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return ap


def run(args: argparse.Namespace, *, input_fn: Callable[[str], str] = input, interactive: Optional[bool] = None) -> int:
    configure_logging(verbose=args.verbose)
    root = pathlib.Path.cwd()
    src = pathlib.Path(args.src) if args.src else root

    print("\nStarting ngx-i18n-scan...")
    print(f"Source directory: {src}")
    if not src.is_dir():
        print(f"Source path does not exist: {src}")
        return 2

    try:
        config = load_scan_config(
            pathlib.Path(args.config) if args.config else None,
            search_dirs=(src, root),
        )
    except ScanConfigError as e:
        print(f"Config error: {e}")
        return 2
    configure_logging(config.log_level, verbose=args.verbose)
    if args.ignore:
        config = dataclasses.replace(config, ignore=tuple(dict.fromkeys([*config.ignore, *args.ignore])))

    try:
        catalog_path = resolve_catalog_path(args.json, root, input_fn=input_fn, interactive=interactive)
    except CatalogSelectionError as e:
        print(str(e))
        return 2

    mutating = not args.dry_run
    options = DiffOptions(
        add_missing=args.add_missing and mutating,
        list_missing=args.list_missing,
        remove_unused=args.remove_unused and mutating,
        list_unused=args.list_unused,
        remove_duplicates=args.remove_duplicates and mutating,
        list_duplicates=args.list_duplicates,
    )

    try:
        print("\nExtracting translation keys from source files...")
        source_keys = extract_keys_from_source(src, config.ignore)
        print(f"Extracted {len(source_keys)} key(s) from source.")

        print("\nComparing source keys with translation JSON...")
        catalog = load_catalog(catalog_path)
        result = compare_keys(
            source_keys,
            catalog_path,
            options,
            missing_value=config.missing_value,
            layout=config.catalog_layout,
            catalog=catalog,
            save=False,
        )

        print("\nSummary Report:\n")
        print(f"- Present keys: {len(result.present_keys)}")
        print(f"- New keys to add: {len(result.new_keys)}")
        print(f"- Unused keys: {len(result.unused_keys)}")
        print(f"- Duplicate keys: {len(result.duplicate_keys)}")

        catalog_saved = False
        if args.detect_hardcoded or args.replace_hardcoded:
            report = process_hardcoded_text(
                src,
                catalog_path,
                detect_hardcoded=True,
                replace_hardcoded=args.replace_hardcoded,
                dry_run=args.dry_run,
                show_diff=args.diff,
                config=config,
                catalog=catalog,
            )
            catalog_saved = report.catalog_saved
            if report.failures:
                print(f"{len(report.failures)} file(s) failed to rewrite.")

        # one save covers key reconciliation and hardcoded-text keys
        if options.mutates and not catalog_saved:
            catalog.save(config.catalog_layout)
            print(f"Updated file: {catalog_path}")
    except (SourcePathError, CatalogNotFoundError) as e:
        print(str(e))
        return 2
    except CatalogParseError as e:
        print(str(e))
        return 1

    print("\nngx-i18n-scan process completed.\n")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = build_arg_parser().parse_args(argv)
    sys.exit(run(args))


if __name__ == "__main__":
    main()
