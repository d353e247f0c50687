# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Chronocheck Contributors
"""
Chronocheck Core Schema Module

Registry records (profiles, eras, facts, signal rules), evidence tokens,
claims, the classification policy and the Assessment contract.
"""

from chronocheck_core.schema.registry import (
    VolatilityTier,
    MatchKind,
    SignalRule,
    FactRecord,
    Era,
    TechnologyProfile,
    normalize_name,
)

from chronocheck_core.schema.evidence import (
    TokenKind,
    EvidenceToken,
)

from chronocheck_core.schema.claims import Claim

from chronocheck_core.schema.policy import (
    ClassificationPolicy,
    DEFAULT_POLICY,
)

from chronocheck_core.schema.assessment import (
    ConflictKind,
    ConfidenceLevel,
    ResponsePattern,
    InferenceStatus,
    Conflict,
    SignalMatch,
    EraScore,
    EraInference,
    Assessment,
)


__all__ = [
    # Registry
    "VolatilityTier", "MatchKind", "SignalRule", "FactRecord", "Era",
    "TechnologyProfile", "normalize_name",
    # Evidence
    "TokenKind", "EvidenceToken",
    # Claims
    "Claim",
    # Policy
    "ClassificationPolicy", "DEFAULT_POLICY",
    # Assessment
    "ConflictKind", "ConfidenceLevel", "ResponsePattern", "InferenceStatus",
    "Conflict", "SignalMatch", "EraScore", "EraInference", "Assessment",
]
