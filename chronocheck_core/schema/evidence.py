# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Chronocheck Contributors
"""Evidence tokens produced by the collector."""

from __future__ import annotations

from enum import Enum

from pydantic import Field

from chronocheck_core.schema.serialization import SchemaModel


class TokenKind(str, Enum):
    IDENTIFIER = "identifier"
    VERSION_STRING = "version-string"
    ERROR_TEXT = "error-text"
    FREE_TEXT = "free-text"


class EvidenceToken(SchemaModel):
    """An atomic normalized observation."""

    text: str
    kind: TokenKind
    offset: int = Field(default=0, ge=0)
    """Character offset inside the source fragment."""

    fragment: int = Field(default=0, ge=0)
    """Index of the source fragment in the raw input sequence."""
