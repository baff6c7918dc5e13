# -*- coding: utf-8 -*-
"""
Markup (Angular template) heuristics.

Detection is line oriented: every line is run through MARKUP_TEXT_RE with
finditer (non-overlapping, left to right) and each candidate is filtered by
is_candidate_text(). Rewriting applies four textual passes over the whole file:

1. {{ cond ? 'A' : 'B' }}      -> {{ (cond ? 'key.a' : 'key.b') | translate }}
2. [attr]="cond ? 'A' : 'B'"   -> [attr]="(cond ? 'key.a' : 'key.b') | translate"
3. placeholder="A"             -> placeholder="{{ 'key.a' | translate }}"
4. >A< / A between whitespace  -> {{ 'key.a' | translate }}  (not inside {{ }} or comments)

Known limitation: text that spans lines or sits in nested quotes can be
mis-bounded; this is a best-effort heuristic, not an HTML parser.
"""
from __future__ import annotations

import re
from typing import Dict, Iterable, Iterator, List, Pattern, Tuple

# ── Shared ─────────────────────────────────────────────────────────────────────
TRANSLATION_KEY_RE = re.compile(r"^[A-Z_]+$")
# decimal and exponent forms, Infinity, and 0x / 0o / 0b integer literals
NUMERIC_RE = re.compile(
    r"^(?:[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|[+-]?Infinity|0[xX][0-9a-fA-F]+|0[oO][0-7]+|0[bB][01]+)$"
)
TRANSLATE_MARKER = "| translate"
MIN_TEXT_LENGTH = 3


def is_translation_key(text: str) -> bool:
    """Already a translation key: `text.*` or an all-caps identifier."""
    return text.startswith("text.") or bool(TRANSLATION_KEY_RE.match(text))


def is_numeric(text: str) -> bool:
    stripped = text.strip()
    return not stripped or bool(NUMERIC_RE.match(stripped))


# ── Detection ─────────────────────────────────────────────────────────────────
MARKUP_TEXT_RE = re.compile(
    # 1. bare text between tag boundaries / line edges
    r"(?:(?:>|^|\s)([A-Za-z\s]+?)(?=<|\s*{{|\s*$))"
    # 2. placeholder="..."
    r"|(?:placeholder=\"([^\"]+?)(?=\"))"
    # 3. [attr]="cond ? 'A' : 'B'"
    r"|(?:\[\w+\]=\"[^\"]*?\?\s*['\"]([^'\"]+?)['\"]\s*:\s*['\"]([^'\"]+?)['\"][^\"]*?\")"
    # 4. ? 'A'
    r"|(?:\?\s*['\"]([^'\"]+?)(?=['\"]))"
    # 5. : 'B'
    r"|(?::\s*['\"]([^'\"]+?)(?=['\"]))"
)


def _match_texts(m: re.Match) -> List[str]:
    """Texts captured by one match, honouring the alternative priority."""
    g = m.groups()
    if g[0]:
        return [g[0].strip()]
    if g[1]:
        return [g[1].strip()]
    if g[2] and g[3]:
        return [g[2].strip(), g[3].strip()]
    if g[4]:
        return [g[4].strip()]
    if g[5]:
        return [g[5].strip()]
    return []


def is_comment_line(line: str) -> bool:
    stripped = line.strip()
    return stripped.startswith("<!--") and stripped.endswith("-->")


def is_candidate_text(text: str, line: str) -> bool:
    """Filter applied to every markup candidate found on `line`."""
    if len(text) < MIN_TEXT_LENGTH:
        return False
    if is_translation_key(text):
        return False
    if f"'{text}' {TRANSLATE_MARKER}" in line or f'"{text}" {TRANSLATE_MARKER}' in line:
        return False
    if text.endswith(":"):
        return False
    if TRANSLATE_MARKER in text:
        return False
    if text.startswith("{{") or text.startswith("*"):
        return False
    if is_numeric(text):
        return False
    return True


def iter_line_texts(line: str) -> Iterator[str]:
    """Candidate texts on one line, in match order (duplicates kept)."""
    for m in MARKUP_TEXT_RE.finditer(line):
        for text in _match_texts(m):
            if is_candidate_text(text, line):
                yield text


def scan_markup_lines(content: str, *, skip_comment_lines: bool = True) -> Iterator[Tuple[int, str]]:
    """Yield (0-based line index, text) for every hardcoded text in `content`."""
    for index, line in enumerate(content.split("\n")):
        if skip_comment_lines and is_comment_line(line):
            continue
        for text in iter_line_texts(line):
            yield index, text


# ── Rewriting ─────────────────────────────────────────────────────────────────
TERNARY_INTERPOLATION_RE = re.compile(
    r"\{\{\s*([^?{}]+?)\s*\?\s*['\"]([^'\"]+)['\"]\s*:\s*['\"]([^'\"]+)['\"]\s*\}\}"
)
TERNARY_ATTR_RE = re.compile(
    r"\[(\w+)\]=\"([^\"]*?)\s*\?\s*['\"]([^'\"]+)['\"]\s*:\s*['\"]([^'\"]+)['\"]\""
)
PLACEHOLDER_RE = re.compile(r"(?<![\w.:\[-])placeholder=\"([^\"]+)\"")
COMMENT_RE = re.compile(r"<!--.*?-->", re.S)
INTERPOLATION_RE = re.compile(r"\{\{.*?\}\}", re.S)


def _quote_key(key: str) -> str:
    return "'" + key.replace("\\", "\\\\").replace("'", "\\'") + "'"


def _key_or_text(text: str, replacements: Dict[str, str]) -> str:
    """Mapped key for a ternary branch, else the literal text itself."""
    key = replacements.get(text.strip())
    return _quote_key(key) if key else _quote_key(text)


def rewrite_ternary_interpolations(content: str, replacements: Dict[str, str]) -> str:
    def repl(m: re.Match) -> str:
        condition, true_text, false_text = m.group(1), m.group(2), m.group(3)
        return (
            f"{{{{ ({condition.strip()} ? {_key_or_text(true_text, replacements)} : "
            f"{_key_or_text(false_text, replacements)}) {TRANSLATE_MARKER} }}}}"
        )

    return TERNARY_INTERPOLATION_RE.sub(repl, content)


def rewrite_ternary_attributes(content: str, replacements: Dict[str, str]) -> str:
    def repl(m: re.Match) -> str:
        attr, condition, true_text, false_text = m.group(1), m.group(2), m.group(3), m.group(4)
        return (
            f"[{attr}]=\"({condition.strip()} ? {_key_or_text(true_text, replacements)} : "
            f"{_key_or_text(false_text, replacements)}) {TRANSLATE_MARKER}\""
        )

    return TERNARY_ATTR_RE.sub(repl, content)


def rewrite_placeholders(content: str, replacements: Dict[str, str]) -> str:
    def repl(m: re.Match) -> str:
        value = m.group(1)
        if "{{" in value or TRANSLATE_MARKER in value:
            return m.group(0)
        key = replacements.get(value.strip()) or value
        return f"placeholder=\"{{{{ {_quote_key(key)} {TRANSLATE_MARKER} }}}}\""

    return PLACEHOLDER_RE.sub(repl, content)


def _protected_spans(content: str) -> List[Tuple[int, int]]:
    """HTML comments and {{ ... }} interpolations; standalone text is never rewritten inside them."""
    return [m.span() for pattern in (COMMENT_RE, INTERPOLATION_RE) for m in pattern.finditer(content)]


def _in_spans(pos: int, spans: Iterable[Tuple[int, int]]) -> bool:
    return any(start <= pos < end for start, end in spans)


def _standalone_text_re(text: str) -> Pattern:
    return re.compile(r"(>|\s)" + re.escape(text) + r"(?=<|\s|$)")


def rewrite_standalone_texts(content: str, texts: Iterable[str], replacements: Dict[str, str]) -> str:
    """Replace bare occurrences of `texts`, longest first, outside comments and interpolations."""
    for text in sorted(set(texts), key=len, reverse=True):
        key = replacements.get(text)
        if not key:
            continue
        spans = _protected_spans(content)

        def repl(m: re.Match, key: str = key) -> str:
            if _in_spans(m.start(), spans):
                return m.group(0)
            return f"{m.group(1)}{{{{ {_quote_key(key)} {TRANSLATE_MARKER} }}}}"

        content = _standalone_text_re(text).sub(repl, content)
    return content


def rewrite_markup(content: str, texts: Iterable[str], replacements: Dict[str, str]) -> str:
    """Apply the four markup passes, in order, to a whole template."""
    out = rewrite_ternary_interpolations(content, replacements)
    out = rewrite_ternary_attributes(out, replacements)
    out = rewrite_placeholders(out, replacements)
    out = rewrite_standalone_texts(out, texts, replacements)
    return out
