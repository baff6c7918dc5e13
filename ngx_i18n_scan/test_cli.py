# -*- coding: utf-8 -*-
"""
Test suite for cli.py

Argument parsing, catalog discovery and end-to-end runs with exit codes.
"""
from __future__ import annotations

import io
import json
import os
import pathlib
import tempfile
import textwrap
import unittest
from unittest import mock

from ngx_i18n_scan.catalog import Catalog
from ngx_i18n_scan.cli import (
    CatalogSelectionError,
    build_arg_parser,
    find_i18n_json_files,
    prompt_choice,
    resolve_catalog_path,
    run,
)


class CliCase(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.root = pathlib.Path(self._tmp.name).resolve()
        cwd = os.getcwd()
        os.chdir(self.root)
        self.addCleanup(os.chdir, cwd)

    def write(self, rel: str, content: str) -> pathlib.Path:
        p = self.root / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(content, encoding="utf-8")
        return p

    def run_cli(self, *argv, **kwargs):
        args = build_arg_parser().parse_args(list(argv))
        with mock.patch("sys.stdout", new_callable=io.StringIO) as out:
            code = run(args, **kwargs)
        return code, out.getvalue()


class TestArgParser(unittest.TestCase):

    def test_defaults(self):
        args = build_arg_parser().parse_args([])
        self.assertEqual(args.src, "")
        self.assertIsNone(args.json)
        self.assertFalse(args.replace_hardcoded)
        self.assertEqual(args.ignore, [])

    def test_flags(self):
        args = build_arg_parser().parse_args(
            ["--src", "web", "--json", "en.json", "--add-missing", "--detect-hardcoded", "--dry-run", "--ignore", "**/legacy/**"]
        )
        self.assertEqual(args.src, "web")
        self.assertEqual(args.json, "en.json")
        self.assertTrue(args.add_missing and args.detect_hardcoded and args.dry_run)
        self.assertEqual(args.ignore, ["**/legacy/**"])


class TestCatalogDiscovery(CliCase):

    def test_finds_json_in_i18n_dirs_any_case(self):
        a = self.write("src/assets/i18n/en.json", "{}")
        b = self.write("src/assets/i18n/tr.json", "{}")
        c = self.write("other/I18N/de.json", "{}")
        self.write("src/assets/i18n/readme.txt", "")
        self.write("node_modules/pkg/i18n/x.json", "{}")
        self.assertEqual(find_i18n_json_files(self.root), [c, a, b])

    def test_single_candidate_used(self):
        a = self.write("src/i18n/en.json", "{}")
        with mock.patch("sys.stdout", new_callable=io.StringIO):
            self.assertEqual(resolve_catalog_path(None, self.root), a)

    def test_explicit_path_wins(self):
        self.write("src/i18n/en.json", "{}")
        explicit = self.write("custom.json", "{}")
        self.assertEqual(resolve_catalog_path(str(explicit), self.root), explicit)

    def test_none_found(self):
        with mock.patch("sys.stdout", new_callable=io.StringIO):
            with self.assertRaises(CatalogSelectionError):
                resolve_catalog_path(None, self.root)

    def test_multiple_non_interactive(self):
        self.write("src/i18n/en.json", "{}")
        self.write("src/i18n/tr.json", "{}")
        with self.assertRaises(CatalogSelectionError):
            resolve_catalog_path(None, self.root, interactive=False)

    def test_prompt_retries_until_valid(self):
        files = [pathlib.Path("en.json"), pathlib.Path("tr.json")]
        answers = iter(["7", "x", "2"])
        with mock.patch("sys.stdout", new_callable=io.StringIO) as out:
            chosen = prompt_choice(files, input_fn=lambda _prompt: next(answers), interactive=True)
        self.assertEqual(chosen, files[1])
        self.assertEqual(out.getvalue().count("Please enter a number"), 2)

    def test_prompt_eof(self):
        def eof(_prompt):
            raise EOFError

        with mock.patch("sys.stdout", new_callable=io.StringIO):
            with self.assertRaises(CatalogSelectionError):
                prompt_choice([pathlib.Path("a.json"), pathlib.Path("b.json")], input_fn=eof, interactive=True)


class TestRun(CliCase):

    def setUp(self):
        super().setUp()
        self.write(
            "src/app/home.component.html",
            textwrap.dedent(
                """\
                <h1>{{ 'home.title' | translate }}</h1>
                <p>{{ 'home.missing' | translate }}</p>
                <span>Welcome back</span>
                """
            ),
        )
        self.catalog = self.write(
            "src/assets/i18n/en.json",
            json.dumps({"home": {"title": "Home", "old": "Old"}}, indent=2) + "\n",
        )

    def catalog_data(self):
        return json.loads(self.catalog.read_text(encoding="utf-8"))

    def test_summary_only(self):
        code, output = self.run_cli()
        self.assertEqual(code, 0)
        self.assertIn("Extracted 2 key(s) from source.", output)
        self.assertIn("- Present keys: 1", output)
        self.assertIn("- New keys to add: 1", output)
        self.assertIn("- Unused keys: 1", output)
        self.assertIn("- Duplicate keys: 0", output)
        self.assertNotIn("hardcoded", output)

    def test_add_missing_remove_unused(self):
        code, _ = self.run_cli("--add-missing", "--remove-unused")
        self.assertEqual(code, 0)
        self.assertEqual(self.catalog_data(), {"home": {"title": "Home", "missing": "TODO"}})

    def test_dry_run_keeps_catalog(self):
        before = self.catalog.read_text(encoding="utf-8")
        code, _ = self.run_cli("--add-missing", "--replace-hardcoded", "--dry-run")
        self.assertEqual(code, 0)
        self.assertEqual(self.catalog.read_text(encoding="utf-8"), before)

    def test_replace_hardcoded(self):
        code, output = self.run_cli("--replace-hardcoded")
        self.assertEqual(code, 0)
        self.assertIn("Welcome back -> text.welcome.back", output)
        html = (self.root / "src/app/home.component.html").read_text(encoding="utf-8")
        self.assertIn("<span>{{ 'text.welcome.back' | translate }}</span>", html)
        self.assertEqual(self.catalog_data()["text"], {"welcome": {"back": "Welcome back"}})

    def test_add_missing_with_replace_saves_catalog_once(self):
        with mock.patch("ngx_i18n_scan.catalog.Catalog.save", autospec=True, side_effect=Catalog.save) as save:
            code, _ = self.run_cli("--add-missing", "--replace-hardcoded")
        self.assertEqual(code, 0)
        self.assertEqual(save.call_count, 1)
        self.assertEqual(
            self.catalog_data(),
            {
                "home": {"title": "Home", "old": "Old", "missing": "TODO"},
                "text": {"welcome": {"back": "Welcome back"}},
            },
        )

    def test_add_missing_with_detect_only_saves_catalog_once(self):
        with mock.patch("ngx_i18n_scan.catalog.Catalog.save", autospec=True, side_effect=Catalog.save) as save:
            code, output = self.run_cli("--add-missing", "--detect-hardcoded")
        self.assertEqual(code, 0)
        self.assertEqual(save.call_count, 1)
        self.assertIn("Welcome back -> text.welcome.back", output)
        self.assertEqual(self.catalog_data(), {"home": {"title": "Home", "old": "Old", "missing": "TODO"}})

    def test_config_file_applies(self):
        self.write(".ngx-i18n-scan.json", '{"missing_value": "", "catalog_layout": "flat"}')
        code, _ = self.run_cli("--add-missing")
        self.assertEqual(code, 0)
        self.assertEqual(self.catalog_data()["home.missing"], "")

    def test_missing_source_exit_2(self):
        code, output = self.run_cli("--src", "does-not-exist")
        self.assertEqual(code, 2)
        self.assertIn("Source path does not exist", output)

    def test_bad_config_exit_2(self):
        code, _ = self.run_cli("--config", "missing-config.json")
        self.assertEqual(code, 2)

    def test_no_catalog_exit_2(self):
        self.catalog.unlink()
        code, output = self.run_cli()
        self.assertEqual(code, 2)
        self.assertIn("No translation JSON files found", output)

    def test_broken_catalog_exit_1(self):
        self.catalog.write_text("{ broken", encoding="utf-8")
        code, _ = self.run_cli("--add-missing")
        self.assertEqual(code, 1)
        self.assertEqual(self.catalog.read_text(encoding="utf-8"), "{ broken")

    def test_multiple_catalogs_prompt(self):
        tr = self.write("src/assets/i18n/tr.json", "{}")
        code, _ = self.run_cli("--add-missing", input_fn=lambda _prompt: "2", interactive=True)
        self.assertEqual(code, 0)
        self.assertEqual(json.loads(tr.read_text(encoding="utf-8")), {"home": {"missing": "TODO", "title": "TODO"}})


if __name__ == "__main__":
    unittest.main()
