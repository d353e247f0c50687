# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Chronocheck Contributors
"""Decision core: collection, inference, conflict detection, classification."""

from chronocheck_core.verification.evidence_collector import collect
from chronocheck_core.verification.version_inference import infer, match_signals, rule_matches
from chronocheck_core.verification.conflict_detector import detect, resolve_fact
from chronocheck_core.verification.confidence import DECISION_TABLE, classify, select_row
from chronocheck_core.verification.orchestrator import AssessmentOrchestrator

__all__ = [
    "collect",
    "infer",
    "match_signals",
    "rule_matches",
    "detect",
    "resolve_fact",
    "DECISION_TABLE",
    "classify",
    "select_row",
    "AssessmentOrchestrator",
]
