# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Chronocheck Contributors
"""
Conflict Detector

Compares the asserted fact against the registry's era data for the
inferred era. Classification is first-match-wins:

1. removed at or before the inferred era      -> removed-but-asserted-present
2. deprecated at or before the inferred era   -> deprecated-but-asserted-current
3. introduced one era after the inferred era  -> renamed-or-shifted
4. introduced further than one era away       -> version-mismatch-with-evidence

A fact that is present and current in the inferred era raises nothing.
A fact the registry does not track raises nothing either: absence of data
is not evidence of wrongness, and the classifier handles it as uncertainty.
"""

from __future__ import annotations

import logging
import re

from chronocheck_core.schema.assessment import Conflict, ConflictKind
from chronocheck_core.schema.claims import Claim
from chronocheck_core.schema.registry import FactRecord, TechnologyProfile

logger = logging.getLogger(__name__)


def normalize_fact(text: str) -> str:
    s = " ".join(str(text or "").split()).casefold()
    s = s.strip("`'\" ")
    if s.endswith("()"):
        s = s[:-2].rstrip()
    return s


def _mentions(text: str, key: str) -> bool:
    return re.search(rf"(?<![\w.]){re.escape(key)}(?!\w)", text) is not None


def resolve_fact(profile: TechnologyProfile, fact_text: str) -> tuple[int, FactRecord] | None:
    """
    Find the registry fact a claim asserts.

    Exact name/alias match wins; otherwise the longest known fact name that
    the claim text mentions. Returns (introducing era index, fact).
    """
    wanted = normalize_fact(fact_text)
    if not wanted:
        return None

    facts = list(profile.iter_facts())
    for era_index, fact in facts:
        if any(normalize_fact(k) == wanted for k in (fact.name, *fact.aliases)):
            return era_index, fact

    best: tuple[int, FactRecord] | None = None
    best_len = 0
    for era_index, fact in facts:
        for key in (fact.name, *fact.aliases):
            norm = normalize_fact(key)
            if norm and len(norm) > best_len and _mentions(wanted, norm):
                best, best_len = (era_index, fact), len(norm)
    return best


def detect(
    profile: TechnologyProfile | None,
    claim: Claim | str,
    inferred_era: str | None,
) -> tuple[Conflict, ...]:
    """Return the conflicts between `claim` and `profile` for `inferred_era`."""
    if profile is None or inferred_era is None:
        return ()
    current = profile.era_index(inferred_era)
    if current is None:
        return ()

    fact_text = claim.fact if isinstance(claim, Claim) else str(claim or "")
    found = resolve_fact(profile, fact_text)
    if found is None:
        logger.debug("[Conflicts] %s: fact %r not tracked", profile.name, fact_text[:80])
        return ()

    introduced, fact = found
    deprecated = profile.era_index(fact.deprecated_in)
    removed = profile.era_index(fact.removed_in)
    fact_era = profile.eras[introduced].label

    kind: ConflictKind | None = None
    marker: str | None = None
    if removed is not None and removed <= current:
        kind, marker = ConflictKind.REMOVED_BUT_ASSERTED_PRESENT, fact.removed_in
    elif deprecated is not None and deprecated <= current:
        kind, marker = ConflictKind.DEPRECATED_BUT_ASSERTED_CURRENT, fact.deprecated_in
    elif introduced > current:
        if introduced - current <= 1:
            kind = ConflictKind.RENAMED_OR_SHIFTED
        else:
            kind = ConflictKind.VERSION_MISMATCH_WITH_EVIDENCE

    if kind is None:
        return ()

    conflict = Conflict(
        kind=kind,
        fact=fact.name,
        fact_era=fact_era,
        inferred_era=inferred_era,
        marker_era=marker,
        replacement=fact.replacement,
    )
    logger.debug("[Conflicts] %s: %s for %r (inferred %s)", profile.name, kind.value, fact.name, inferred_era)
    return (conflict,)
