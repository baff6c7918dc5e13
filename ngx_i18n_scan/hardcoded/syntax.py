# -*- coding: utf-8 -*-
"""
Component-class syntax helpers on top of tree-sitter (TypeScript grammar).

Every classification rule is a small predicate over a node and its ancestor
chain so it can be tested against a synthetic snippet:

- is_part_of_translation      already routed through translate.get/instant or a `| translate`
- is_non_translatable_context enum / interface / type alias / import / regex / non-@Component decorator
- is_ui_context               value of a UI property inside an object passed to a dialog call
- is_html_dialog_property     direct value of `html:` inside an object passed to a dialog call
"""
from __future__ import annotations

import re
from typing import Iterable, Iterator, Optional, Sequence

import tree_sitter_typescript
from tree_sitter import Language, Node, Parser, Tree

from .markup import MIN_TEXT_LENGTH, is_translation_key

TS_LANGUAGE = Language(tree_sitter_typescript.language_typescript())

NON_TRANSLATABLE_TYPES = {
    "enum_declaration",
    "interface_declaration",
    "type_alias_declaration",
    "import_statement",
    "import_specifier",
}
TRANSLATE_METHODS = ("get", "instant")


def parse_source(source: bytes) -> Tree:
    return Parser(TS_LANGUAGE).parse(source)


def node_text(node: Optional[Node]) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8")


def iter_nodes(root: Node) -> Iterator[Node]:
    """Pre-order traversal without recursion."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def ancestors(node: Node, include_self: bool = False) -> Iterator[Node]:
    current = node if include_self else node.parent
    while current is not None:
        yield current
        current = current.parent


# ── Literals ──────────────────────────────────────────────────────────────────

def is_string_literal(node: Node) -> bool:
    """String literal, or template literal without ${...} substitutions."""
    if node.type == "string":
        return True
    if node.type == "template_string":
        return not any(c.type == "template_substitution" for c in node.named_children)
    return False


def iter_string_literals(root: Node) -> Iterator[Node]:
    return (n for n in iter_nodes(root) if is_string_literal(n))


_ESCAPE_RE = re.compile(r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|\r\n|[\s\S])")
_SIMPLE_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f", "v": "\v", "0": "\0"}


def _unescape(m: re.Match) -> str:
    seq = m.group(1)
    if seq in ("\n", "\r\n", "\r", "\u2028", "\u2029"):
        return ""  # line continuation
    if seq.startswith("u{"):
        return chr(int(seq[2:-1], 16))
    if seq[0] in "ux" and len(seq) > 1:
        return chr(int(seq[1:], 16))
    return _SIMPLE_ESCAPES.get(seq, seq)


def _join_surrogates(s: str) -> str:
    """Pair UTF-16 surrogates left by escapes; a lone surrogate becomes U+FFFD."""
    return s.encode("utf-16", "surrogatepass").decode("utf-16", "replace")


def literal_value(node: Node) -> str:
    """Cooked value of a string/template literal (quotes removed, escapes resolved)."""
    raw = node_text(node)
    return _join_surrogates(_ESCAPE_RE.sub(_unescape, raw[1:-1]))


# ── Structure helpers ─────────────────────────────────────────────────────────

def property_name(pair: Node) -> str:
    """Name of an object property; quoted keys are unquoted."""
    key = pair.child_by_field_name("key")
    if key is not None and key.type == "string":
        return literal_value(key)
    return node_text(key)


def is_property_key(node: Node) -> bool:
    parent = node.parent
    return parent is not None and parent.type == "pair" and parent.child_by_field_name("key") == node


def call_taking_object(obj: Optional[Node]) -> Optional[Node]:
    """The call expression `obj` is passed to as a direct argument, if any."""
    if obj is None or obj.type != "object":
        return None
    args = obj.parent
    if args is None or args.type != "arguments":
        return None
    call = args.parent
    if call is None or call.type != "call_expression":
        return None
    return call


def callee_text(call: Node) -> str:
    return node_text(call.child_by_field_name("function"))


# ── Predicates ────────────────────────────────────────────────────────────────

def is_part_of_translation(node: Node) -> bool:
    for current in ancestors(node, include_self=True):
        if current.type == "call_expression":
            fn = current.child_by_field_name("function")
            if fn is not None and fn.type == "member_expression":
                prop = fn.child_by_field_name("property")
                receiver = fn.child_by_field_name("object")
                if node_text(prop) in TRANSLATE_METHODS and "translate" in node_text(receiver):
                    return True
        elif current.type == "binary_expression":
            operator = current.child_by_field_name("operator")
            right = current.child_by_field_name("right")
            if operator is not None and operator.type == "|" and "translate" in node_text(right):
                return True
    return False


def is_non_translatable_context(node: Node) -> bool:
    for current in ancestors(node, include_self=True):
        if current.type in NON_TRANSLATABLE_TYPES:
            return True
        if current.type == "regex" and current != node:
            return True
        if current.type == "decorator" and "@Component" not in node_text(current):
            return True
    return False


def is_ui_context(node: Node, properties: Iterable[str], callees: Iterable[str]) -> bool:
    properties = set(properties)
    callees = tuple(callees)
    for current in ancestors(node):
        if current.type != "pair" or property_name(current) not in properties:
            continue
        call = call_taking_object(current.parent)
        if call is not None and any(c in callee_text(call) for c in callees):
            return True
    return False


def is_html_dialog_property(node: Node, callees: Iterable[str]) -> bool:
    pair = node.parent
    if pair is None or pair.type != "pair" or pair.child_by_field_name("value") != node:
        return False
    if property_name(pair) != "html":
        return False
    call = call_taking_object(pair.parent)
    return call is not None and callee_text(call) in tuple(callees)


def is_routable_literal(node: Node, text: str) -> bool:
    """Common gate: not a key, not already translated, not in a declaration-only context."""
    return (
        not is_property_key(node)
        and not is_translation_key(text)
        and not is_part_of_translation(node)
        and not is_non_translatable_context(node)
    )


def is_ui_text(node: Node, text: str, properties: Sequence[str], callees: Sequence[str]) -> bool:
    """A literal the component-class scan reports as hardcoded UI text."""
    return (
        len(text) >= MIN_TEXT_LENGTH
        and is_routable_literal(node, text)
        and is_ui_context(node, properties, callees)
    )
