# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Chronocheck Contributors
"""
Evidence Collector

Technology-agnostic tokenization of raw evidence (prose, code snippets,
declared versions, pasted error output) into a flat list of EvidenceToken.

Order matters: tokens come out in input order (fragment, then offset)
because later stages break ties by first occurrence.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from typing import Any

from chronocheck_core.constants import MAX_FRAGMENT_CHARS
from chronocheck_core.schema.evidence import EvidenceToken, TokenKind

logger = logging.getLogger(__name__)


_ERROR_LINE_RE = re.compile(
    r"^[ \t]*(?:"
    r"Traceback \(most recent call last\)"
    r"|[A-Za-z_][\w.]*(?:Error|Exception|Warning)\b"
    r"|npm ERR!"
    r"|(?i:error|warning|fatal|panic)\s*[:\[]"
    r")"
)

_TOKEN_RE = re.compile(
    r"`(?P<tick>[^`\n]+)`"
    r"|(?P<version>"
    r"(?<![\w.])[vV]?\d+(?:\.\d+)+(?:[-+]?(?:a|b|rc|alpha|beta|dev|post)\.?\d*)?(?!\w|\.\d)"
    r"|(?<![\w.])[vV]\d+(?!\w|\.\d)"
    r")"
    r"|(?P<flag>(?<![\w-])--?[A-Za-z][\w-]*)"
    r"|(?P<ident>[A-Za-z_$][\w$]*(?:(?:\.|::|->)[A-Za-z_$][\w$]*)*)"
)

_CODE_START_RE = re.compile(
    r"^\s*(?:import\s|from\s+\S+\s+import\s|def\s|async\s+def\s|class\s|function\s|"
    r"const\s|let\s|var\s|#include\b|package\s|use\s|@[A-Za-z_])"
)
_CODE_PUNCT = frozenset("(){}[];=<>")
_CAMEL_RE = re.compile(r"[a-z0-9][A-Z]")
_WORD_RE = re.compile(r"\w")


def _looks_like_code(text: str) -> bool:
    stripped = text.strip()
    if not any(c.isspace() for c in stripped):
        return True
    if _CODE_START_RE.match(stripped):
        return True
    return sum(1 for c in stripped if c in _CODE_PUNCT) >= 3


def _code_shaped(word: str, following: str) -> bool:
    if following == "(":
        return True
    if any(sep in word for sep in (".", "::", "->")):
        # "e.g", "i.e" are prose
        return any(len(part) > 1 for part in re.split(r"\.|::|->", word))
    return "_" in word or "$" in word or _CAMEL_RE.search(word) is not None


def _scan(
    text: str,
    start: int,
    end: int,
    *,
    code: bool,
    fragment: int,
    out: list[EvidenceToken],
) -> None:
    """Emit tokens for text[start:end]. Prose leftovers become free-text spans."""
    cursor = start

    def flush_free(until: int) -> None:
        if code or until <= cursor:
            return
        span = text[cursor:until]
        stripped = span.strip()
        if stripped and _WORD_RE.search(stripped):
            offset = cursor + (len(span) - len(span.lstrip()))
            out.append(EvidenceToken(text=stripped, kind=TokenKind.FREE_TEXT, offset=offset, fragment=fragment))

    for m in _TOKEN_RE.finditer(text, start, end):
        kind = m.lastgroup
        if kind == "tick":
            flush_free(m.start())
            _scan(text, m.start("tick"), m.end("tick"), code=True, fragment=fragment, out=out)
            cursor = m.end()
            continue
        if kind == "version":
            token_kind = TokenKind.VERSION_STRING
        elif kind == "flag":
            token_kind = TokenKind.IDENTIFIER
        else:
            if not code and not _code_shaped(m.group(), text[m.end():m.end() + 1]):
                continue
            token_kind = TokenKind.IDENTIFIER
        flush_free(m.start())
        out.append(EvidenceToken(text=m.group(), kind=token_kind, offset=m.start(), fragment=fragment))
        cursor = m.end()

    flush_free(end)


def _as_text(fragment: Any) -> str | None:
    if fragment is None:
        return None
    if isinstance(fragment, str):
        return fragment
    if isinstance(fragment, (bytes, bytearray)):
        return bytes(fragment).decode("utf-8", errors="replace")
    return None


def _collect_fragment(fragment: Any, index: int) -> list[EvidenceToken]:
    text = _as_text(fragment)
    if text is None:
        if fragment is None:
            return []
        # Unparseable input: keep it, but only as weak evidence.
        raw = str(fragment).strip()[:MAX_FRAGMENT_CHARS]
        return [EvidenceToken(text=raw, kind=TokenKind.FREE_TEXT, offset=0, fragment=index)] if raw else []

    text = text[:MAX_FRAGMENT_CHARS]
    if not text.strip():
        return []

    code = _looks_like_code(text)
    out: list[EvidenceToken] = []
    pos = 0
    for line in text.splitlines(keepends=True):
        line_end = pos + len(line)
        if _ERROR_LINE_RE.match(line):
            stripped = line.strip()
            offset = pos + (len(line) - len(line.lstrip()))
            out.append(EvidenceToken(text=stripped, kind=TokenKind.ERROR_TEXT, offset=offset, fragment=index))
        else:
            _scan(text, pos, line_end, code=code, fragment=index, out=out)
        pos = line_end

    if not out:
        out.append(EvidenceToken(
            text=text.strip(),
            kind=TokenKind.FREE_TEXT,
            offset=len(text) - len(text.lstrip()),
            fragment=index,
        ))

    out.sort(key=lambda t: t.offset)
    return out


def collect(raw_inputs: Iterable[Any] | str | None) -> tuple[EvidenceToken, ...]:
    """
    Normalize raw evidence fragments into EvidenceTokens.

    Never raises on malformed input: a fragment that yields nothing usable
    becomes a single free-text token, and non-text fragments are kept as
    their str(). Empty fragments produce no tokens.
    """
    if raw_inputs is None:
        return ()
    if isinstance(raw_inputs, (str, bytes, bytearray)) or not isinstance(raw_inputs, Iterable):
        raw_inputs = [raw_inputs]

    tokens: list[EvidenceToken] = []
    for index, fragment in enumerate(raw_inputs):
        tokens.extend(_collect_fragment(fragment, index))

    logger.debug("[Evidence] Collected %d token(s)", len(tokens))
    return tuple(tokens)
