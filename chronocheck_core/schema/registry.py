# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Chronocheck Contributors
"""
Technology Registry Models

A TechnologyProfile describes one technology as an ordered list of eras.
Each era owns the signal rules that are characteristic of it and the
facts that were introduced as known-true in it. Deprecation and removal
are markers on the fact that point at later eras.

Hard invariants are enforced here, so any profile that validates is safe
to publish. Softer findings (ambiguous rules) are reported by the loader.
"""

from __future__ import annotations

import datetime
import re
from enum import Enum
from typing import TYPE_CHECKING, Any, Iterator

from pydantic import AliasChoices, Field, model_validator

from chronocheck_core.constants import get_drift_days
from chronocheck_core.schema.serialization import SchemaModel

if TYPE_CHECKING:
    from typing import Self


_VERSION_PREFIX_RE = re.compile(r"^[vV]?\d+(?:\.\d+)*$")


# ─────────────────────────────────────────────────────────────────────────────
# Enums
# ─────────────────────────────────────────────────────────────────────────────

class VolatilityTier(str, Enum):
    """
    How fast a technology's public surface changes.

    Ordinal: GLACIAL < SLOW < ACTIVE < RAPID.
    """
    GLACIAL = "glacial"
    """Standards and protocols (SQL, HTTP, POSIX). Drift measured in years."""

    SLOW = "slow"
    """Mature libraries with rare breaking releases."""

    ACTIVE = "active"
    """Frameworks with a major release every year or two."""

    RAPID = "rapid"
    """Young ecosystems where the API shifts month to month."""

    @property
    def rank(self) -> int:
        return _TIER_ORDER.index(self)


_TIER_ORDER = (
    VolatilityTier.GLACIAL,
    VolatilityTier.SLOW,
    VolatilityTier.ACTIVE,
    VolatilityTier.RAPID,
)


class MatchKind(str, Enum):
    """How a signal rule's pattern is tested against an evidence token."""
    LITERAL = "literal"
    REGEX = "regex"
    VERSION = "version"


# ─────────────────────────────────────────────────────────────────────────────
# Records
# ─────────────────────────────────────────────────────────────────────────────

class SignalRule(SchemaModel):
    """
    Pattern -> era inference.

    Presence of a match implies the target era. Absence tells nothing.
    `technology` and `era` are bound by the owning profile.
    """

    id: str = Field(min_length=1)
    pattern: str = Field(min_length=1)
    match: MatchKind = MatchKind.LITERAL
    weight: float = Field(default=1.0, gt=0.0, le=100.0)

    technology: str = ""
    era: str = ""

    @model_validator(mode="after")
    def validate_pattern(self) -> Self:
        if self.match == MatchKind.REGEX:
            try:
                re.compile(self.pattern)
            except re.error as e:
                raise ValueError(f"rule '{self.id}': invalid regex {self.pattern!r} ({e})")
        if self.match == MatchKind.VERSION and not _VERSION_PREFIX_RE.match(self.pattern.strip()):
            raise ValueError(f"rule '{self.id}': version pattern must look like 'N' or 'N.N', got {self.pattern!r}")
        return self


class FactRecord(SchemaModel):
    """A claim known to be true from the era that lists it."""

    name: str = Field(min_length=1)
    aliases: tuple[str, ...] = ()
    deprecated_in: str | None = None
    removed_in: str | None = None
    replacement: str | None = None
    """Registry-declared successor. Copied into conflicts, never inferred."""

    note: str | None = None


class Era(SchemaModel):
    """A bounded period with a consistent API shape."""

    label: str = Field(min_length=1)
    started: datetime.date | None = None
    ended: datetime.date | None = None
    signals: tuple[SignalRule, ...] = ()
    facts: tuple[FactRecord, ...] = ()

    @model_validator(mode="after")
    def validate_bounds(self) -> Self:
        if self.started and self.ended and self.started > self.ended:
            raise ValueError(f"era '{self.label}': started {self.started} is after ended {self.ended}")
        return self

    @property
    def signal_ids(self) -> tuple[str, ...]:
        return tuple(rule.id for rule in self.signals)


class TechnologyProfile(SchemaModel):
    """
    One technology: tier, eras (oldest first) and drift window.

    Profiles are created by registry maintenance and are read-only to the
    engine during an assessment.
    """

    name: str = Field(min_length=1)
    category: str = "library"
    aliases: tuple[str, ...] = ()
    volatility_tier: VolatilityTier = Field(validation_alias=AliasChoices("volatility_tier", "tier"))
    eras: tuple[Era, ...] = ()
    acceptable_drift_days: int = Field(default=0, ge=0)

    @model_validator(mode="before")
    @classmethod
    def _bind_rules(cls, data: Any) -> Any:
        """Bind every rule to its technology and era, and default the drift window."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        name = data.get("name")
        eras = []
        for era in data.get("eras") or ():
            if isinstance(era, Era):
                era = era.model_dump()
            if isinstance(era, dict):
                era = dict(era)
                label = era.get("label")
                if isinstance(label, (int, float)) and not isinstance(label, bool):
                    label = str(label)
                signals = []
                for rule in era.get("signals") or ():
                    if isinstance(rule, SignalRule):
                        rule = rule.model_dump()
                    if isinstance(rule, dict):
                        rule = {**rule, "technology": name, "era": label}
                    signals.append(rule)
                era["signals"] = signals
            eras.append(era)
        data["eras"] = eras
        if data.get("acceptable_drift_days") is None:
            tier = data.get("volatility_tier", data.get("tier"))
            tier_value = tier.value if isinstance(tier, VolatilityTier) else str(tier or "")
            data["acceptable_drift_days"] = get_drift_days(tier_value)
        return data

    @model_validator(mode="after")
    def validate_invariants(self) -> Self:
        problems = _profile_problems(self)
        if problems:
            raise ValueError("; ".join(problems))
        return self

    # ── read-only helpers ────────────────────────────────────────────────────

    @property
    def key(self) -> str:
        return normalize_name(self.name)

    @property
    def latest_era(self) -> Era | None:
        return self.eras[-1] if self.eras else None

    def era_index(self, label: str | None) -> int | None:
        if label is None:
            return None
        for i, era in enumerate(self.eras):
            if era.label == label:
                return i
        return None

    def iter_rules(self) -> Iterator[SignalRule]:
        for era in self.eras:
            yield from era.signals

    def iter_facts(self) -> Iterator[tuple[int, FactRecord]]:
        """Yield (introducing era index, fact) in era order."""
        for i, era in enumerate(self.eras):
            for fact in era.facts:
                yield i, fact


def normalize_name(value: str) -> str:
    return " ".join(str(value or "").split()).casefold()


def _profile_problems(profile: TechnologyProfile) -> list[str]:
    problems: list[str] = []
    name = profile.name

    if profile.volatility_tier != VolatilityTier.GLACIAL and not profile.eras:
        problems.append(f"{name}: tier '{profile.volatility_tier.value}' requires at least one era")

    labels = [era.label for era in profile.eras]
    seen_labels: set[str] = set()
    for label in labels:
        if label in seen_labels:
            problems.append(f"{name}: duplicate era label '{label}'")
        seen_labels.add(label)

    # undated eras carry no bounds; compare against the latest dates seen so far
    latest_start: Era | None = None
    latest_end: Era | None = None
    for era in profile.eras:
        if era.started and latest_start is not None and latest_start.started >= era.started:
            problems.append(
                f"{name}: eras not chronological ('{latest_start.label}' starts {latest_start.started}, "
                f"'{era.label}' starts {era.started})"
            )
        elif era.ended and latest_start is not None and latest_start.started > era.ended:
            problems.append(
                f"{name}: eras not chronological ('{latest_start.label}' starts {latest_start.started}, "
                f"'{era.label}' ends {era.ended})"
            )
        if era.started and latest_end is not None and latest_end.ended > era.started:
            problems.append(f"{name}: era '{latest_end.label}' overlaps '{era.label}'")

        if era.started and (latest_start is None or era.started > latest_start.started):
            latest_start = era
        if era.ended and (latest_end is None or era.ended > latest_end.ended):
            latest_end = era

    index = {label: i for i, label in enumerate(labels)}
    seen_facts: dict[str, str] = {}
    for i, fact in profile.iter_facts():
        era_label = labels[i]
        for key in (fact.name, *fact.aliases):
            norm = normalize_name(key)
            if norm in seen_facts:
                problems.append(
                    f"{name}: fact '{key}' listed in era '{era_label}' "
                    f"is already known-true in era '{seen_facts[norm]}'"
                )
            else:
                seen_facts[norm] = era_label

        dep = index.get(fact.deprecated_in) if fact.deprecated_in is not None else None
        rem = index.get(fact.removed_in) if fact.removed_in is not None else None
        if fact.deprecated_in is not None and dep is None:
            problems.append(f"{name}: fact '{fact.name}' deprecated in unknown era '{fact.deprecated_in}'")
        if fact.removed_in is not None and rem is None:
            problems.append(f"{name}: fact '{fact.name}' removed in unknown era '{fact.removed_in}'")
        if dep is not None and dep < i:
            problems.append(f"{name}: fact '{fact.name}' deprecated before it was introduced")
        if rem is not None and rem < i:
            problems.append(f"{name}: fact '{fact.name}' removed before it was introduced")
        if dep is not None and rem is not None and rem < dep:
            problems.append(f"{name}: fact '{fact.name}' removed before it was deprecated")

    rule_ids: set[str] = set()
    for rule in profile.iter_rules():
        if rule.id in rule_ids:
            problems.append(f"{name}: duplicate signal rule id '{rule.id}'")
        rule_ids.add(rule.id)

    return problems
