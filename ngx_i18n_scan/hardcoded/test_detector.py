# -*- coding: utf-8 -*-
"""Tests for detector.py"""
from __future__ import annotations

import dataclasses
import pathlib
import tempfile
import textwrap
import unittest

from ngx_i18n_scan.config import DEFAULT_CONFIG
from ngx_i18n_scan.hardcoded.detector import (
    Occurrence,
    detect_hardcoded_text_in_html,
    detect_hardcoded_text_in_ts,
    iter_hardcoded_text_in_html,
    resolve_app_dir,
    scan_component_source,
)

COMPONENT = textwrap.dedent(
    """\
    import { Component } from '@angular/core';

    enum Status { Active = 'Active state' }

    @Component({
      selector: 'app-demo',
      templateUrl: './demo.component.html',
    })
    export class DemoComponent {
      save() {
        Swal.fire({
          title: 'Saved successfully',
          icon: 'success',
          confirmButtonText: 'OK',
        });
      }

      remove() {
        alert({ message: this.translateService.instant('text.removed') });
      }
    }
    """
)

HTML_DIALOG = textwrap.dedent(
    """\
    export class HelpComponent {
      show() {
        Swal.fire({
          title: 'Help',
          html: 'Read the guide\\n<b>Contact support</b>',
        });
      }
    }
    """
)


class TestComponentScan(unittest.TestCase):

    def setUp(self):
        self.path = pathlib.Path("demo.component.ts")

    def test_only_ui_literals_reported(self):
        found = list(scan_component_source(self.path, COMPONENT))
        self.assertEqual(found, [Occurrence(self.path, 12, "Saved successfully")])

    def test_html_property_fragments_then_aggregate(self):
        found = [(o.line, o.text) for o in scan_component_source(self.path, HTML_DIALOG)]
        self.assertEqual(
            found,
            [
                (4, "Help"),
                (5, "Read the guide"),
                (6, "Contact support"),
                (5, "Read the guide\n<b>Contact support</b>"),
            ],
        )

    def test_html_property_switches(self):
        config = dataclasses.replace(DEFAULT_CONFIG, html_aggregate=False)
        texts = [o.text for o in scan_component_source(self.path, HTML_DIALOG, config)]
        self.assertEqual(texts, ["Help", "Read the guide", "Contact support"])

        config = dataclasses.replace(DEFAULT_CONFIG, html_fragment_scan=False)
        texts = [o.text for o in scan_component_source(self.path, HTML_DIALOG, config)]
        self.assertEqual(texts, ["Help", "Read the guide\n<b>Contact support</b>"])

    def test_syntax_errors_warn_but_scan(self):
        source = "export class Broken {\n  save() { alert({ title: 'Still found' }); \n"
        with self.assertLogs("ngx_i18n_scan.hardcoded.detector", level="WARNING"):
            found = [o.text for o in scan_component_source(self.path, source)]
        self.assertIn("Still found", found)


class TestDirectoryScan(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.base = pathlib.Path(self._tmp.name)

    def write(self, rel: str, content: str) -> pathlib.Path:
        p = self.base / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(content, encoding="utf-8")
        return p

    def test_html_walk(self):
        a = self.write("b/list.component.html", "<span>Hello</span>\n<p>Goodbye</p>\n")
        self.write("node_modules/pkg/x.html", "<span>Vendor</span>")
        self.write("b/notes.txt", "<span>Ignored</span>")
        z = self.write("a/z.html", "<h1>Title text</h1>")

        self.assertEqual(
            detect_hardcoded_text_in_html(self.base),
            [
                Occurrence(z, 1, "Title text"),
                Occurrence(a, 1, "Hello"),
                Occurrence(a, 2, "Goodbye"),
            ],
        )

    def test_html_scan_is_lazy_and_restartable(self):
        self.write("x.html", "<span>Hello</span>")
        it = iter_hardcoded_text_in_html(self.base)
        self.assertEqual(next(it).text, "Hello")
        self.assertEqual([o.text for o in iter_hardcoded_text_in_html(self.base)], ["Hello"])

    def test_ts_walk_only_component_files(self):
        self.write("app/demo.component.ts", COMPONENT)
        self.write("app/demo.service.ts", "alert({ title: 'Service text' });")
        texts = [o.text for o in detect_hardcoded_text_in_ts(self.base)]
        self.assertEqual(texts, ["Saved successfully"])

    def test_custom_ignores(self):
        self.write("legacy/old.html", "<span>Legacy</span>")
        self.write("new/new.html", "<span>Fresh</span>")
        config = dataclasses.replace(DEFAULT_CONFIG, ignore=("**/legacy/**",))
        self.assertEqual([o.text for o in detect_hardcoded_text_in_html(self.base, config)], ["Fresh"])

    def test_resolve_app_dir(self):
        self.assertEqual(resolve_app_dir(self.base), self.base)
        (self.base / "src" / "app").mkdir(parents=True)
        self.assertEqual(resolve_app_dir(self.base), self.base / "src" / "app")


if __name__ == "__main__":
    unittest.main()
