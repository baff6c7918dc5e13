# -*- coding: utf-8 -*-
"""
Rewrite detected hardcoded text into translation lookups.

Templates go through the textual passes in markup.rewrite_markup(). Component
classes are rewritten from their tree-sitter syntax tree: every change is an
Edit (byte span + replacement) computed against the untouched tree, and the
edits are spliced in one go, back to front. The result is re-parsed and refused
if it no longer parses.

    alert({ title: 'Oops' })
    ->  alert({ title: this.translateService.instant('text.oops') })

plus, when anything was replaced, the TranslateService import and a
`private translateService: TranslateService` constructor parameter.
"""
from __future__ import annotations

import dataclasses
import logging
import pathlib
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from tree_sitter import Node

from ..config import DEFAULT_CONFIG, ScanConfig
from ..errors import RewriteError
from ..utils.fs import atomic_write, read_text, unified_diff
from .detector import COMPONENT_SUFFIXES, MARKUP_SUFFIXES
from .markup import rewrite_markup
from .syntax import (
    is_html_dialog_property,
    is_routable_literal,
    is_ui_context,
    iter_string_literals,
    literal_value,
    node_text,
    parse_source,
)

logger = logging.getLogger(__name__)

CLASS_TYPES = ("class_declaration", "abstract_class_declaration")
PARAM_TYPES = ("required_parameter", "optional_parameter")
FIELD_TYPES = ("public_field_definition", "index_signature", "class_static_block")
METHOD_TYPES = ("method_definition", "method_signature", "abstract_method_signature", "decorator")
DEFAULT_INDENT = "  "


@dataclasses.dataclass(frozen=True)
class Edit:
    start: int
    end: int
    text: str


@dataclasses.dataclass
class RewriteResult:
    path: pathlib.Path
    original: str
    updated: str
    replaced: int = 0

    @property
    def changed(self) -> bool:
        return self.updated != self.original

    @property
    def diff(self) -> str:
        return unified_diff(self.original, self.updated, self.path)


def apply_edits(source: bytes, edits: Iterable[Edit]) -> bytes:
    ordered = sorted(edits, key=lambda e: (e.start, e.end))
    for prev, cur in zip(ordered, ordered[1:]):
        if cur.start < prev.end or (cur.start == prev.start and cur.start == cur.end == prev.end):
            raise RewriteError(f"Overlapping edits at byte {cur.start}")
    out = source
    for e in reversed(ordered):
        out = out[: e.start] + e.text.encode("utf-8") + out[e.end :]
    return out


def _quote(value: str) -> str:
    return "'" + value.replace("\\", "\\\\").replace("'", "\\'") + "'"


def _line_indent(source: bytes, pos: int) -> str:
    line_start = source.rfind(b"\n", 0, pos) + 1
    end = line_start
    while end < len(source) and source[end : end + 1] in (b" ", b"\t"):
        end += 1
    return source[line_start:end].decode("utf-8")


def append_to_list(source: bytes, container: Node, item_types: Sequence[str], item: str, pad: str = "") -> Edit:
    """Edit appending `item` to a bracketed, comma-separated list node.

    Multi-line lists get the item on its own line at the last item's indent; a
    trailing comma stays trailing.
    """
    opening = container.children[0]
    items = [c for c in container.named_children if c.type in item_types]
    if not items:
        return Edit(opening.end_byte, opening.end_byte, f"{pad}{item}{pad}")

    last = items[-1]
    nxt = last.next_sibling
    trailing = nxt if nxt is not None and nxt.type == "," else None
    if last.start_point[0] != opening.start_point[0]:
        indent = _line_indent(source, last.start_byte)
        if trailing is not None:
            return Edit(trailing.end_byte, trailing.end_byte, f"\n{indent}{item},")
        return Edit(last.end_byte, last.end_byte, f",\n{indent}{item}")
    if trailing is not None:
        return Edit(trailing.end_byte, trailing.end_byte, f" {item}")
    return Edit(last.end_byte, last.end_byte, f", {item}")


# ── Component class structure ─────────────────────────────────────────────────

def iter_classes(root: Node) -> Iterator[Tuple[Node, Node]]:
    """(class node, statement holding it) for top-level and exported classes."""
    for stmt in root.named_children:
        if stmt.type in CLASS_TYPES:
            yield stmt, stmt
        elif stmt.type == "export_statement":
            decl = stmt.child_by_field_name("declaration")
            if decl is not None and decl.type in CLASS_TYPES:
                yield decl, stmt


def find_component_class(root: Node) -> Optional[Node]:
    """The @Component-decorated class, else the first class."""
    classes = list(iter_classes(root))
    for cls, holder in classes:
        decorators = [c for c in cls.children + holder.children if c.type == "decorator"]
        if any("@Component" in node_text(d) for d in decorators):
            return cls
    return classes[0][0] if classes else None


def find_constructor(cls: Node) -> Optional[Node]:
    body = cls.child_by_field_name("body")
    if body is None:
        return None
    for member in body.named_children:
        if member.type == "method_definition" and node_text(member.child_by_field_name("name")) == "constructor":
            return member
    return None


def parameter_name(param: Node) -> str:
    pattern = param.child_by_field_name("pattern")
    if pattern is None:
        pattern = next((c for c in param.named_children if c.type == "identifier"), None)
    return node_text(pattern)


def constructor_edits(source: bytes, cls: Node, config: ScanConfig = DEFAULT_CONFIG) -> List[Edit]:
    param = f"private {config.translate_param}: {config.translate_service}"
    ctor = find_constructor(cls)
    if ctor is not None:
        params = ctor.child_by_field_name("parameters")
        if params is None:
            raise RewriteError("constructor without parameter list")
        names = [parameter_name(p) for p in params.named_children if p.type in PARAM_TYPES]
        if config.translate_param in names:
            return []
        return [append_to_list(source, params, PARAM_TYPES, param)]

    body = cls.child_by_field_name("body")
    if body is None:
        raise RewriteError("class without body")
    members = body.named_children
    indent = _line_indent(source, members[0].start_byte) if members else _line_indent(source, cls.start_byte) + DEFAULT_INDENT
    new_ctor = f"constructor({param}) {{}}"

    # after the last field declared before the first method
    anchor = None
    for child in body.children[1:-1]:
        if child.type in METHOD_TYPES:
            break
        if child.type in FIELD_TYPES or (child.type == ";" and anchor is not None and child.start_byte >= anchor):
            anchor = child.end_byte
    if anchor is not None:
        return [Edit(anchor, anchor, f"\n\n{indent}{new_ctor}")]

    opening = body.children[0]
    closing_indent = "" if members else _line_indent(source, cls.start_byte)
    return [Edit(opening.end_byte, opening.end_byte, f"\n{indent}{new_ctor}\n{closing_indent}")]


def import_edits(source: bytes, root: Node, config: ScanConfig = DEFAULT_CONFIG) -> List[Edit]:
    """Import TranslateService unless it already is; reuse a named import from the module."""
    first_import = None
    target = None
    for stmt in root.named_children:
        if stmt.type != "import_statement":
            continue
        if first_import is None:
            first_import = stmt
        if config.translate_module not in node_text(stmt.child_by_field_name("source")):
            continue
        clause = next((c for c in stmt.named_children if c.type == "import_clause"), None)
        named = next((c for c in clause.named_children if c.type == "named_imports"), None) if clause else None
        if named is None:
            continue
        names = [node_text(s.child_by_field_name("name")) for s in named.named_children if s.type == "import_specifier"]
        if config.translate_service in names:
            return []
        if target is None:
            target = named

    if target is not None:
        return [append_to_list(source, target, ("import_specifier",), config.translate_service, pad=" ")]
    line = f"import {{ {config.translate_service} }} from {_quote(config.translate_module)};\n"
    pos = first_import.start_byte if first_import is not None else 0
    return [Edit(pos, pos, line)]


def literal_edits(root: Node, replacements: Dict[str, str], config: ScanConfig = DEFAULT_CONFIG) -> List[Edit]:
    edits = []
    for node in iter_string_literals(root):
        text = literal_value(node).strip()
        key = replacements.get(text)
        if not key or not is_routable_literal(node, text):
            continue
        if is_ui_context(node, config.ui_properties, config.dialog_callees) or is_html_dialog_property(
            node, config.dialog_callees
        ):
            edits.append(Edit(node.start_byte, node.end_byte, f"this.{config.translate_param}.instant({_quote(key)})"))
    return edits


def rewrite_component_source(source: str, replacements: Dict[str, str], config: ScanConfig = DEFAULT_CONFIG) -> Tuple[str, int]:
    """Returns (new source, number of literals replaced)."""
    src = source.encode("utf-8")
    tree = parse_source(src)
    root = tree.root_node
    if root.has_error:
        raise RewriteError("source does not parse cleanly")

    edits = literal_edits(root, replacements, config)
    if not edits:
        return source, 0
    replaced = len(edits)

    cls = find_component_class(root)
    if cls is None:
        raise RewriteError("no class declaration to inject the translation service into")
    edits += import_edits(src, root, config)
    edits += constructor_edits(src, cls, config)

    out = apply_edits(src, edits)
    if parse_source(out).root_node.has_error:
        raise RewriteError("rewritten source does not parse")
    return out.decode("utf-8"), replaced


# ── Files ─────────────────────────────────────────────────────────────────────

def rewrite_file(
    path: pathlib.Path,
    texts: Sequence[str],
    replacements: Dict[str, str],
    config: ScanConfig = DEFAULT_CONFIG,
    *,
    dry_run: bool = False,
) -> RewriteResult:
    """Rewrite one file in place (unless dry_run); writes only when content changed."""
    original = read_text(path)
    name = path.name
    if name.endswith(MARKUP_SUFFIXES):
        updated = rewrite_markup(original, texts, replacements)
        result = RewriteResult(path, original, updated)
    elif name.endswith(COMPONENT_SUFFIXES):
        updated, replaced = rewrite_component_source(original, replacements, config)
        result = RewriteResult(path, original, updated, replaced)
    else:
        raise RewriteError(f"Unsupported file type: {path}")

    if result.changed and not dry_run:
        atomic_write(path, result.updated)
        logger.info("Wrote updated content to %s", path)
    return result
