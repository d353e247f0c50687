# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Chronocheck Contributors
"""Evidence Collector tokenization tests."""

from chronocheck_core.schema.evidence import TokenKind
from chronocheck_core.verification.evidence_collector import collect


def _texts(tokens, kind):
    return [t.text for t in tokens if t.kind == kind]


# ═══════════════════════════════════════════════════════════════════════════════
# Empty and malformed input
# ═══════════════════════════════════════════════════════════════════════════════

class TestEmptyInput:

    def test_none_yields_nothing(self):
        assert collect(None) == ()

    def test_empty_sequence_yields_nothing(self):
        assert collect([]) == ()

    def test_blank_fragments_yield_nothing(self):
        assert collect(["", "   ", "\n\t"]) == ()

    def test_none_fragment_is_skipped(self):
        tokens = collect([None, "v1.2"])
        assert len(tokens) == 1
        assert tokens[0].fragment == 1


class TestMalformedInput:
    """Collector never raises; unusable input degrades to free text."""

    def test_non_string_fragment_becomes_free_text(self):
        tokens = collect([42])
        assert len(tokens) == 1
        assert tokens[0].kind == TokenKind.FREE_TEXT
        assert tokens[0].text == "42"

    def test_bare_non_iterable_is_wrapped(self):
        tokens = collect(3.5)
        assert [t.kind for t in tokens] == [TokenKind.FREE_TEXT]

    def test_bytes_are_decoded(self):
        tokens = collect(b"v1.2")
        assert _texts(tokens, TokenKind.VERSION_STRING) == ["v1.2"]

    def test_punctuation_only_falls_back_to_free_text(self):
        tokens = collect("!!!")
        assert [(t.text, t.kind) for t in tokens] == [("!!!", TokenKind.FREE_TEXT)]


# ═══════════════════════════════════════════════════════════════════════════════
# Version strings
# ═══════════════════════════════════════════════════════════════════════════════

class TestVersionStrings:

    def test_v_prefixed_version(self):
        tokens = collect(["v2.3.0"])
        assert [(t.text, t.kind) for t in tokens] == [("v2.3.0", TokenKind.VERSION_STRING)]

    def test_v_prefixed_major_only(self):
        assert _texts(collect("v2"), TokenKind.VERSION_STRING) == ["v2"]

    def test_dotted_version_in_prose(self):
        tokens = collect("we upgraded to 1.5.3 last week")
        assert _texts(tokens, TokenKind.VERSION_STRING) == ["1.5.3"]

    def test_prerelease_suffix_kept(self):
        assert _texts(collect("2.0.0rc1"), TokenKind.VERSION_STRING) == ["2.0.0rc1"]

    def test_bare_integer_is_not_a_version(self):
        tokens = collect("2")
        assert _texts(tokens, TokenKind.VERSION_STRING) == []

    def test_prose_around_version_is_free_text(self):
        tokens = collect("pandas 2.1.0")
        assert [(t.text, t.kind) for t in tokens] == [
            ("pandas", TokenKind.FREE_TEXT),
            ("2.1.0", TokenKind.VERSION_STRING),
        ]


# ═══════════════════════════════════════════════════════════════════════════════
# Error text
# ═══════════════════════════════════════════════════════════════════════════════

class TestErrorText:

    def test_exception_line_is_one_token(self):
        line = "AttributeError: 'DataFrame' object has no attribute 'append'"
        tokens = collect(line)
        assert [(t.text, t.kind) for t in tokens] == [(line, TokenKind.ERROR_TEXT)]

    def test_lowercase_error_prefix(self):
        tokens = collect("error: could not resolve dependency")
        assert _texts(tokens, TokenKind.ERROR_TEXT) == ["error: could not resolve dependency"]

    def test_traceback_mixes_error_lines_and_code(self):
        trace = (
            "Traceback (most recent call last):\n"
            '  File "job.py", line 3, in <module>\n'
            "    df.append(row)\n"
            "AttributeError: 'DataFrame' object has no attribute 'append'\n"
        )
        tokens = collect(trace)
        assert len(_texts(tokens, TokenKind.ERROR_TEXT)) == 2
        assert "df.append" in _texts(tokens, TokenKind.IDENTIFIER)


# ═══════════════════════════════════════════════════════════════════════════════
# Identifiers
# ═══════════════════════════════════════════════════════════════════════════════

class TestIdentifiers:

    def test_prose_keeps_only_code_shaped_words(self):
        tokens = collect("I call df.append(row) and use snake_case and camelCase but not plain words")
        assert _texts(tokens, TokenKind.IDENTIFIER) == ["df.append", "snake_case", "camelCase"]

    def test_prose_abbreviations_are_not_identifiers(self):
        tokens = collect("some libraries, e.g. this one, are fine")
        assert _texts(tokens, TokenKind.IDENTIFIER) == []

    def test_code_fragment_keeps_every_identifier(self):
        tokens = collect("import pandas as pd")
        assert _texts(tokens, TokenKind.IDENTIFIER) == ["import", "pandas", "as", "pd"]

    def test_backticked_word_in_prose(self):
        tokens = collect("use `render` here")
        assert [(t.text, t.kind) for t in tokens] == [
            ("use", TokenKind.FREE_TEXT),
            ("render", TokenKind.IDENTIFIER),
            ("here", TokenKind.FREE_TEXT),
        ]

    def test_cli_flag_is_identifier(self):
        assert _texts(collect("--no-deps"), TokenKind.IDENTIFIER) == ["--no-deps"]


# ═══════════════════════════════════════════════════════════════════════════════
# Ordering
# ═══════════════════════════════════════════════════════════════════════════════

class TestOrdering:

    def test_fragment_then_offset_order(self):
        tokens = collect(["alpha_beta gamma_delta", "v1.0"])
        assert [(t.fragment, t.text) for t in tokens] == [
            (0, "alpha_beta"),
            (0, "gamma_delta"),
            (1, "v1.0"),
        ]
        assert tokens[0].offset < tokens[1].offset

    def test_collect_is_pure(self):
        raw = ["import react", "v18.2.0", "Warning: legacy API"]
        assert collect(raw) == collect(raw)
