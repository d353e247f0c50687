# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Chronocheck Contributors
"""
Version Inference Engine

Matches evidence tokens against one technology's signal rules and ranks
the eras they point to.

Weighting:
- each match adds rule.weight * kind factor to its era's accumulator
  (free text counts half by default; see ClassificationPolicy)
- an explicit version string short-circuits: when any version-string token
  matches, only version-string matches are counted
- score = era accumulator / sum of all accumulators
- ties prefer the later era; newer APIs are the likelier target
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import Iterable

from chronocheck_core.schema.assessment import EraInference, EraScore, InferenceStatus, SignalMatch
from chronocheck_core.schema.evidence import EvidenceToken, TokenKind
from chronocheck_core.schema.policy import DEFAULT_POLICY, ClassificationPolicy
from chronocheck_core.schema.registry import MatchKind, SignalRule, TechnologyProfile

logger = logging.getLogger(__name__)

_SEPARATORS = r"(?:\.|::|->)"


@lru_cache(maxsize=2048)
def _compiled(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern)


@lru_cache(maxsize=2048)
def _segment_pattern(pattern: str) -> re.Pattern[str]:
    # "append" matches "df.append" and "df.append(" but not "appendix"
    return re.compile(rf"(?:^|{_SEPARATORS}){re.escape(pattern)}(?:$|{_SEPARATORS}|\()")


@lru_cache(maxsize=2048)
def _word_pattern(pattern: str) -> re.Pattern[str]:
    # "applymap" matches "DataFrame.applymap has been deprecated" but not "applymapper"
    return re.compile(rf"(?<!\w){re.escape(pattern)}(?!\w)", re.IGNORECASE)


def _version_parts(text: str) -> tuple[int, ...]:
    parts: list[int] = []
    for chunk in text.strip().lstrip("vV").split("."):
        m = re.match(r"\d+", chunk)
        if not m:
            break
        parts.append(int(m.group()))
        if m.end() != len(chunk):
            # "0rc1": keep the release number, drop the suffix
            break
    return tuple(parts)


def version_matches(version: str, prefix: str) -> bool:
    """True when `version` falls under the dotted `prefix` ("2" covers "v2.3.0")."""
    want = _version_parts(prefix)
    have = _version_parts(version)
    return bool(want) and have[: len(want)] == want


def rule_matches(rule: SignalRule, token: EvidenceToken) -> bool:
    text = token.text
    if rule.match == MatchKind.VERSION:
        return token.kind == TokenKind.VERSION_STRING and version_matches(text, rule.pattern)
    if rule.match == MatchKind.REGEX:
        return _compiled(rule.pattern).search(text) is not None

    pattern = rule.pattern.strip()
    if token.kind == TokenKind.VERSION_STRING:
        return text.lstrip("vV") == pattern.lstrip("vV")
    if token.kind == TokenKind.IDENTIFIER:
        return text == pattern or _segment_pattern(pattern).search(text) is not None
    return _word_pattern(pattern).search(text) is not None


def match_signals(
    profile: TechnologyProfile,
    tokens: Iterable[EvidenceToken],
    policy: ClassificationPolicy = DEFAULT_POLICY,
) -> list[SignalMatch]:
    """Every (rule, token) hit, in token order then rule order."""
    rules = list(profile.iter_rules())
    matches: list[SignalMatch] = []
    for token in tokens:
        factor = policy.kind_factor(token.kind)
        for rule in rules:
            if rule_matches(rule, token):
                matches.append(SignalMatch(
                    rule_id=rule.id,
                    era=rule.era,
                    token=token.text,
                    kind=token.kind,
                    weight=rule.weight * factor,
                ))
    return matches


def default_inference(profile: TechnologyProfile | None, signals: tuple[SignalMatch, ...] = ()) -> EraInference:
    """No usable evidence: assume the most recent known era with zero confidence."""
    if profile is None:
        return EraInference(status=InferenceStatus.UNKNOWN_TECHNOLOGY)
    latest = profile.latest_era
    return EraInference(
        status=InferenceStatus.NO_EVIDENCE,
        signals=signals,
        era=latest.label if latest else None,
        score=0.0,
        defaulted=latest is not None,
    )


def infer(
    profile: TechnologyProfile | None,
    tokens: Iterable[EvidenceToken],
    policy: ClassificationPolicy = DEFAULT_POLICY,
) -> EraInference:
    """
    Rank the eras of `profile` implied by `tokens`.

    `profile=None` means the technology is not in the registry; the result is
    UNKNOWN_TECHNOLOGY and callers treat it exactly like "no evidence".
    """
    if profile is None:
        return default_inference(None)

    matches = match_signals(profile, tokens, policy)
    counted = matches
    short_circuited = False
    if policy.version_short_circuit:
        explicit = [m for m in matches if m.kind == TokenKind.VERSION_STRING]
        if explicit:
            counted = explicit
            short_circuited = True

    accumulators: dict[str, float] = {}
    for m in counted:
        if m.weight > 0:
            accumulators[m.era] = accumulators.get(m.era, 0.0) + m.weight

    if not accumulators:
        return default_inference(profile, tuple(matches))

    total = sum(accumulators.values())
    order = {era.label: i for i, era in enumerate(profile.eras)}
    ranked = sorted(accumulators, key=lambda label: (-accumulators[label], -order.get(label, -1)))
    candidates = tuple(
        EraScore(era=label, score=min(1.0, accumulators[label] / total), weight=accumulators[label])
        for label in ranked
    )
    best = candidates[0]

    logger.debug(
        "[Inference] %s: %s (score=%.3f, candidates=%d, short_circuit=%s)",
        profile.name, best.era, best.score, len(candidates), short_circuited,
    )
    return EraInference(
        status=InferenceStatus.MATCHED,
        candidates=candidates,
        signals=tuple(matches),
        era=best.era,
        score=best.score,
        defaulted=False,
        short_circuited=short_circuited,
    )
