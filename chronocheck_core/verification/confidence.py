# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Chronocheck Contributors
"""
Confidence Classifier

DECISION_TABLE is the single mapping from (tier, era score, conflicts) to
(confidence level, response pattern). Rows are evaluated top-down and the
first matching row applies. Nothing else in the engine derives a level or
a pattern.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable

from chronocheck_core.schema.assessment import (
    ConfidenceLevel,
    Conflict,
    ConflictKind,
    EraInference,
    ResponsePattern,
)
from chronocheck_core.schema.policy import DEFAULT_POLICY, ClassificationPolicy
from chronocheck_core.schema.registry import TechnologyProfile, VolatilityTier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DecisionInput:
    known: bool
    tier: VolatilityTier | None
    score: float
    conflict_kinds: frozenset[ConflictKind]

    @property
    def has_conflicts(self) -> bool:
        return bool(self.conflict_kinds)


@dataclass(frozen=True)
class DecisionRow:
    name: str
    applies: Callable[[DecisionInput, ClassificationPolicy], bool]
    level: ConfidenceLevel
    pattern: ResponsePattern


_MARKER_KINDS = frozenset({
    ConflictKind.DEPRECATED_BUT_ASSERTED_CURRENT,
    ConflictKind.VERSION_MISMATCH_WITH_EVIDENCE,
})


def _tier(d: DecisionInput, *tiers: VolatilityTier) -> bool:
    return d.known and d.tier in tiers


DECISION_TABLE: tuple[DecisionRow, ...] = (
    DecisionRow(
        "removed",
        lambda d, p: ConflictKind.REMOVED_BUT_ASSERTED_PRESENT in d.conflict_kinds,
        ConfidenceLevel.LOW, ResponsePattern.HEDGE_AND_CORRECT,
    ),
    DecisionRow(
        "deprecated_or_mismatch",
        lambda d, p: bool(d.conflict_kinds & _MARKER_KINDS),
        ConfidenceLevel.LOW, ResponsePattern.QUALIFY_WITH_VERSION,
    ),
    DecisionRow(
        "glacial",
        lambda d, p: _tier(d, VolatilityTier.GLACIAL) and not d.has_conflicts,
        ConfidenceLevel.HIGH, ResponsePattern.STATE_DIRECTLY,
    ),
    DecisionRow(
        "slow_confident",
        lambda d, p: _tier(d, VolatilityTier.SLOW) and not d.has_conflicts and d.score >= p.slow_high_score,
        ConfidenceLevel.HIGH, ResponsePattern.STATE_WITH_VERSION_NOTE,
    ),
    DecisionRow(
        "slow_uncertain",
        lambda d, p: _tier(d, VolatilityTier.SLOW) and not d.has_conflicts and d.score < p.slow_high_score,
        ConfidenceLevel.MEDIUM, ResponsePattern.QUALIFY_WITH_VERSION,
    ),
    DecisionRow(
        "active_confident",
        lambda d, p: _tier(d, VolatilityTier.ACTIVE) and d.score >= p.active_medium_score,
        ConfidenceLevel.MEDIUM, ResponsePattern.QUALIFY_HEAVILY,
    ),
    DecisionRow(
        "active_uncertain",
        lambda d, p: _tier(d, VolatilityTier.ACTIVE) and d.score < p.active_medium_score,
        ConfidenceLevel.LOW, ResponsePattern.PROVIDE_STABLE_CORE_ONLY,
    ),
    DecisionRow(
        "rapid",
        lambda d, p: _tier(d, VolatilityTier.RAPID),
        ConfidenceLevel.LOW, ResponsePattern.GENERAL_PATTERN_ONLY,
    ),
    DecisionRow(
        "stable_shifted",
        lambda d, p: _tier(d, VolatilityTier.GLACIAL, VolatilityTier.SLOW)
        and d.conflict_kinds == frozenset({ConflictKind.RENAMED_OR_SHIFTED}),
        ConfidenceLevel.MEDIUM, ResponsePattern.QUALIFY_WITH_VERSION,
    ),
    DecisionRow(
        "unknown_technology",
        lambda d, p: not d.known,
        ConfidenceLevel.UNKNOWN, ResponsePattern.DEFER_TO_USER_ENVIRONMENT,
    ),
)


def select_row(
    profile: TechnologyProfile | None,
    inference: EraInference,
    conflicts: Iterable[Conflict],
    policy: ClassificationPolicy = DEFAULT_POLICY,
) -> DecisionRow:
    d = DecisionInput(
        known=profile is not None,
        tier=profile.volatility_tier if profile is not None else None,
        score=float(inference.score),
        conflict_kinds=frozenset(c.kind for c in conflicts),
    )
    for row in DECISION_TABLE:
        if row.applies(d, policy):
            logger.debug("[Classifier] row=%s tier=%s score=%.3f", row.name, d.tier, d.score)
            return row
    raise RuntimeError(f"No decision row for {d!r}")


def classify(
    profile: TechnologyProfile | None,
    inference: EraInference,
    conflicts: Iterable[Conflict],
    policy: ClassificationPolicy = DEFAULT_POLICY,
) -> tuple[ConfidenceLevel, ResponsePattern]:
    row = select_row(profile, inference, conflicts, policy)
    return row.level, row.pattern
