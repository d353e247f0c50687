# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Chronocheck Contributors
"""
Assessment Contract

Structured decisions returned to the caller: inferred era, conflicts,
confidence level and response pattern identifier. The engine never renders
text; a response-generation layer maps ResponsePattern to phrasing.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from pydantic import Field, model_validator

from chronocheck_core.schema.evidence import TokenKind
from chronocheck_core.schema.registry import VolatilityTier
from chronocheck_core.schema.serialization import SchemaModel

if TYPE_CHECKING:
    from typing import Self


class ConflictKind(str, Enum):
    REMOVED_BUT_ASSERTED_PRESENT = "removed-but-asserted-present"
    DEPRECATED_BUT_ASSERTED_CURRENT = "deprecated-but-asserted-current"
    RENAMED_OR_SHIFTED = "renamed-or-shifted"
    VERSION_MISMATCH_WITH_EVIDENCE = "version-mismatch-with-evidence"


class ConfidenceLevel(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    UNKNOWN = "unknown"


class ResponsePattern(str, Enum):
    STATE_DIRECTLY = "state-directly"
    STATE_WITH_VERSION_NOTE = "state-with-version-note"
    QUALIFY_WITH_VERSION = "qualify-with-version"
    QUALIFY_HEAVILY = "qualify-heavily"
    PROVIDE_STABLE_CORE_ONLY = "provide-stable-core-only"
    GENERAL_PATTERN_ONLY = "general-pattern-only"
    HEDGE_AND_CORRECT = "hedge-and-correct"
    DEFER_TO_USER_ENVIRONMENT = "defer-to-user-environment"


class InferenceStatus(str, Enum):
    MATCHED = "matched"
    NO_EVIDENCE = "no-evidence"
    UNKNOWN_TECHNOLOGY = "unknown-technology"


class Conflict(SchemaModel):
    """A typed mismatch between the asserted fact and the registry's era data."""

    kind: ConflictKind
    fact: str
    fact_era: str
    """Era in which the fact was introduced as known-true."""

    inferred_era: str
    marker_era: str | None = None
    """Deprecation or removal era, for the marker-based kinds."""

    replacement: str | None = None


class SignalMatch(SchemaModel):
    """One rule firing on one token."""

    rule_id: str
    era: str
    token: str
    kind: TokenKind
    weight: float = Field(ge=0.0)


class EraScore(SchemaModel):
    era: str
    score: float = Field(ge=0.0, le=1.0)
    weight: float = Field(ge=0.0)


class EraInference(SchemaModel):
    """
    Ranked era candidates for one technology.

    `era`/`score` hold the era the rest of the pipeline should assume. When no
    rule matched, that is the most recent known era with score 0.0 and
    `defaulted=True`.
    """

    status: InferenceStatus
    candidates: tuple[EraScore, ...] = ()
    signals: tuple[SignalMatch, ...] = ()
    era: str | None = None
    score: float = Field(default=0.0, ge=0.0, le=1.0)
    defaulted: bool = False
    short_circuited: bool = False
    """True when explicit version strings decided the ranking."""

    @model_validator(mode="after")
    def validate_ranking(self) -> Self:
        if self.status == InferenceStatus.MATCHED and not self.candidates:
            raise ValueError("Matched inference without candidates")
        if self.status != InferenceStatus.MATCHED and self.candidates:
            raise ValueError("Candidates present without a match")
        if self.status == InferenceStatus.UNKNOWN_TECHNOLOGY and self.era is not None:
            raise ValueError("Unknown technology cannot carry an era")
        return self

    @property
    def signal_ids(self) -> tuple[str, ...]:
        """Matched rule ids, unique, in first-match order."""
        out: list[str] = []
        for m in self.signals:
            if m.rule_id not in out:
                out.append(m.rule_id)
        return tuple(out)


class Assessment(SchemaModel):
    """Final immutable result of one assessment call."""

    technology: str
    claim: str = ""
    known: bool = False
    tier: VolatilityTier | None = None
    inference: EraInference
    conflicts: tuple[Conflict, ...] = ()
    confidence: ConfidenceLevel
    response_pattern: ResponsePattern
    signals_matched: tuple[str, ...] = ()
    acceptable_drift_days: int | None = None
    registry_version: int = 0
    token_count: int = Field(default=0, ge=0)

    @property
    def inferred_era(self) -> str | None:
        return self.inference.era

    @property
    def era_score(self) -> float:
        return self.inference.score

    @property
    def has_conflicts(self) -> bool:
        return bool(self.conflicts)
