# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Chronocheck Contributors
"""
Assessment Orchestrator

The single entry point of the decision core. One call:

    snapshot = store.current()          # bound once, for the whole call
    tokens   = collect(evidence)
    era      = infer(profile, tokens)
    found    = detect(profile, claim, era)
    level    = classify(profile, era, found)

A concurrent registry reload publishes a new snapshot but never changes the
one an in-flight call already holds.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from chronocheck_core import DECISION_TABLE_VERSION, INFERENCE_STRATEGY_VERSION
from chronocheck_core.errors import InvalidInput
from chronocheck_core.registry.store import RegistryStore
from chronocheck_core.schema.assessment import Assessment
from chronocheck_core.schema.claims import Claim
from chronocheck_core.schema.policy import DEFAULT_POLICY, ClassificationPolicy
from chronocheck_core.utils.trace import Trace
from chronocheck_core.verification.confidence import select_row
from chronocheck_core.verification.conflict_detector import detect
from chronocheck_core.verification.evidence_collector import collect
from chronocheck_core.verification.version_inference import infer

logger = logging.getLogger(__name__)


def _as_text(value: Any) -> str:
    if isinstance(value, str):
        return " ".join(value.split())
    return ""


class AssessmentOrchestrator:
    """Sequences collection, inference, conflict detection and classification."""

    def __init__(self, store: RegistryStore, policy: ClassificationPolicy | None = None):
        self._store = store
        self._policy = policy or DEFAULT_POLICY

    @property
    def policy(self) -> ClassificationPolicy:
        return self._policy

    def assess(
        self,
        technology: str,
        claim: str,
        evidence: Iterable[Any] | str | None = (),
    ) -> Assessment:
        """
        Assess one claim about one technology.

        Raises:
            InvalidInput: technology and claim are both empty or not text.
        """
        tech_text = _as_text(technology)
        claim_text = _as_text(claim)
        if not tech_text and not claim_text:
            error = InvalidInput(technology=technology, claim=claim)
            Trace.event("assessment.invalid_input", error.to_trace_dict())
            raise error

        snapshot = self._store.current()
        profile = snapshot.get(tech_text)

        tokens = collect(evidence)
        inference = infer(profile, tokens, self._policy)
        conflicts = detect(profile, Claim(technology=tech_text, fact=claim_text), inference.era)
        row = select_row(profile, inference, conflicts, self._policy)

        Trace.event("assessment.inference", {
            "technology": tech_text,
            "registry_version": snapshot.version,
            "known": profile is not None,
            "tokens": len(tokens),
            "status": inference.status.value,
            "era": inference.era,
            "score": inference.score,
            "signals": list(inference.signal_ids),
            "strategy": INFERENCE_STRATEGY_VERSION,
        })
        Trace.event("assessment.decision", {
            "row": row.name,
            "table": DECISION_TABLE_VERSION,
            "confidence": row.level.value,
            "pattern": row.pattern.value,
            "conflicts": [c.to_dict() for c in conflicts],
        })
        logger.debug(
            "[Assess] %s: era=%s score=%.3f conflicts=%d -> %s/%s",
            tech_text or "<none>", inference.era, inference.score, len(conflicts),
            row.level.value, row.pattern.value,
        )

        return Assessment(
            technology=profile.name if profile is not None else tech_text,
            claim=claim_text,
            known=profile is not None,
            tier=profile.volatility_tier if profile is not None else None,
            inference=inference,
            conflicts=conflicts,
            confidence=row.level,
            response_pattern=row.pattern,
            signals_matched=inference.signal_ids,
            acceptable_drift_days=profile.acceptable_drift_days if profile is not None else None,
            registry_version=snapshot.version,
            token_count=len(tokens),
        )
