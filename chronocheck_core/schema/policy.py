# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Chronocheck Contributors
"""
Classification Policy.

Configuration-driven weights and thresholds for inference and the
decision table.
"""

from __future__ import annotations

from pydantic import Field

from chronocheck_core.constants import (
    DEFAULT_ACTIVE_MEDIUM_SCORE,
    DEFAULT_ERROR_TEXT_WEIGHT,
    DEFAULT_FREE_TEXT_WEIGHT,
    DEFAULT_SLOW_HIGH_SCORE,
)
from chronocheck_core.schema.evidence import TokenKind
from chronocheck_core.schema.serialization import SchemaModel


class ClassificationPolicy(SchemaModel):
    """Weights applied per token kind, and score thresholds for the decision table."""

    # Evidence weighting (identifier / version-string are the reference kinds)
    free_text_weight: float = Field(default=DEFAULT_FREE_TEXT_WEIGHT, gt=0.0, le=1.0)
    error_text_weight: float = Field(default=DEFAULT_ERROR_TEXT_WEIGHT, gt=0.0, le=1.0)

    # An explicit version string outranks every other kind of evidence.
    version_short_circuit: bool = True

    # Decision table thresholds
    slow_high_score: float = Field(default=DEFAULT_SLOW_HIGH_SCORE, ge=0.0, le=1.0)
    active_medium_score: float = Field(default=DEFAULT_ACTIVE_MEDIUM_SCORE, ge=0.0, le=1.0)

    def kind_factor(self, kind: TokenKind) -> float:
        if kind == TokenKind.FREE_TEXT:
            return self.free_text_weight
        if kind == TokenKind.ERROR_TEXT:
            return self.error_text_weight
        return 1.0


DEFAULT_POLICY = ClassificationPolicy()
