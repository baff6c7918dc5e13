# -*- coding: utf-8 -*-
"""Tests for scanner.py (existing translation key extraction)."""
from __future__ import annotations

import pathlib
import tempfile
import textwrap
import unittest

from ngx_i18n_scan.scanner import extract_keys_from_source, extract_keys_from_text


class TestExtractKeysFromText(unittest.TestCase):

    def test_pipe(self):
        html = "<h1>{{ 'home.title' | translate }}</h1><p>{{ \"home.body\"|translate }}</p>"
        self.assertEqual(extract_keys_from_text(html), {"home.title", "home.body"})

    def test_service_get_and_instant(self):
        ts = textwrap.dedent(
            """\
            this.translate.get('menu.open').subscribe();
            const label = this.translateService.instant("menu.close");
            """
        )
        self.assertEqual(extract_keys_from_text(ts), {"menu.open", "menu.close"})

    def test_ternary_pipe(self):
        html = '<span [title]="(isNew ? \'btn.create\' : \'btn.update\') | translate"></span>'
        self.assertEqual(extract_keys_from_text(html), {"btn.create", "btn.update"})

    def test_unrelated_calls_ignored(self):
        self.assertEqual(extract_keys_from_text("this.http.get('api/users')"), set())


class TestExtractKeysFromSource(unittest.TestCase):

    def test_walks_ts_and_html_sorted_unique(self):
        with tempfile.TemporaryDirectory() as d:
            base = pathlib.Path(d)
            (base / "app").mkdir()
            (base / "node_modules" / "lib").mkdir(parents=True)
            (base / "app" / "a.component.html").write_text("{{ 'b.key' | translate }}", encoding="utf-8")
            (base / "app" / "a.component.ts").write_text("t.translate.instant('a.key'); t.translate.get('b.key')", encoding="utf-8")
            (base / "app" / "notes.md").write_text("{{ 'md.key' | translate }}", encoding="utf-8")
            (base / "node_modules" / "lib" / "x.ts").write_text("translate.get('vendor.key')", encoding="utf-8")

            self.assertEqual(extract_keys_from_source(base), ["a.key", "b.key"])


if __name__ == "__main__":
    unittest.main()
