# -*- coding: utf-8 -*-
"""Filesystem helpers: ignore globs, depth-first discovery, atomic writes, diffs."""
from __future__ import annotations

import difflib
import fnmatch
import logging
import os
import pathlib
import tempfile
from typing import Iterable, Iterator, Optional, Sequence

logger = logging.getLogger(__name__)

# Vendor/build trees that never hold application sources
DEFAULT_IGNORES = [
    "**/node_modules/**",
    "**/dist/**",
    "**/.git/**",
    "**/.angular/**",
    "**/.cache/**",
    "**/coverage/**",
    "**/build/**",
]


def is_ignored(base: pathlib.Path, path: pathlib.Path, ignore_globs: Sequence[str]) -> bool:
    try:
        rel = str(path.relative_to(base)).replace("\\", "/")
    except ValueError:
        return True
    # "**/x/**" should also match a top-level "x/..." path
    candidates = (rel, "/" + rel, "/" + rel + "/")
    return any(fnmatch.fnmatch(c, pat) for pat in ignore_globs for c in candidates)


def discover_files(
    base: pathlib.Path,
    suffixes: Iterable[str],
    ignore_globs: Optional[Sequence[str]] = None,
) -> Iterator[pathlib.Path]:
    """Depth-first walk below `base` yielding files whose name ends with one of `suffixes`.

    Entries are sorted per directory; ignored directories are pruned, not descended.
    """
    suffixes = tuple(suffixes)
    ignore_globs = list(DEFAULT_IGNORES if ignore_globs is None else ignore_globs)
    for root, dirs, files in os.walk(base, topdown=True):
        root_path = pathlib.Path(root)
        dirs[:] = sorted(d for d in dirs if not is_ignored(base, root_path / d, ignore_globs))
        for name in sorted(files):
            if not name.endswith(suffixes):
                continue
            p = root_path / name
            if is_ignored(base, p, ignore_globs):
                continue
            yield p


def read_text(path: pathlib.Path) -> str:
    # newline="" keeps CRLF files byte-for-byte on write-back
    with path.open("r", encoding="utf-8", newline="") as f:
        return f.read()


def atomic_write(path: pathlib.Path, data: str) -> None:
    """Atomically write ``data`` to ``path``.

    Writes to a temporary file in the same directory, fsyncs, then replaces the
    target. Permission bits of an existing target are preserved.
    """
    tmp_dir = path.parent
    tmp_dir.mkdir(parents=True, exist_ok=True)
    orig_mode = None
    try:
        orig_mode = path.stat().st_mode & 0o777
    except OSError:
        orig_mode = None

    tmp_name = None
    try:
        with tempfile.NamedTemporaryFile("w", delete=False, dir=tmp_dir, encoding="utf-8", newline="") as tf:
            tmp_name = tf.name
            tf.write(data)
            tf.flush()
            os.fsync(tf.fileno())
        os.replace(tmp_name, str(path))
        tmp_name = None
        if orig_mode is not None:
            try:
                os.chmod(str(path), orig_mode)
            except OSError:
                logger.debug("Failed to chmod %s", path)
    finally:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)


def unified_diff(a: str, b: str, path: pathlib.Path) -> str:
    return "".join(
        difflib.unified_diff(
            a.splitlines(keepends=True),
            b.splitlines(keepends=True),
            fromfile=f"a/{path}",
            tofile=f"b/{path}",
        )
    )

