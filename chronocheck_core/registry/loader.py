# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Chronocheck Contributors
"""
Registry Loader

Turns a batch of structured profile records (dicts, usually read from YAML
files) into a validated RegistrySnapshot. The batch is all-or-nothing:
any hard violation raises RegistryLoadError listing every problem found.

Rule ambiguity is not a violation. It is returned as a warning list:
- ambiguous-signal: one technology, same literal pattern, different eras
- ambiguous-version-signal: one technology, overlapping version prefixes, different eras
- shared-pattern: the same literal pattern annotates several technologies
"""

from __future__ import annotations

import logging
from collections import defaultdict
from pathlib import Path
from typing import Any, Iterable

import yaml
from pydantic import ValidationError

from chronocheck_core.constants import PROFILE_SUFFIXES
from chronocheck_core.errors import RegistryLoadError, RegistryWarning
from chronocheck_core.registry.snapshot import RegistrySnapshot
from chronocheck_core.schema.registry import MatchKind, SignalRule, TechnologyProfile, normalize_name

logger = logging.getLogger(__name__)

BUNDLED_PROFILES_DIR = Path(__file__).resolve().parent / "profiles"


# ─────────────────────────────────────────────────────────────────────────────
# Reading
# ─────────────────────────────────────────────────────────────────────────────

def read_profile_file(path: Path) -> list[dict[str, Any]]:
    """
    Read one YAML file. Accepted shapes:
    a single profile mapping, a list of profiles, or {"technologies": [...]}.
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise RegistryLoadError("YAML parsing failed", errors=[f"{path.name}: {e}"], source=str(path)) from e
    except OSError as e:
        raise RegistryLoadError("profile file unreadable", errors=[f"{path.name}: {e}"], source=str(path)) from e

    if data is None:
        return []
    if isinstance(data, dict) and "technologies" in data:
        data = data["technologies"]
    if isinstance(data, dict):
        data = [data]
    if not isinstance(data, list):
        raise RegistryLoadError(
            "unexpected document shape",
            errors=[f"{path.name}: expected a mapping or a list, got {type(data).__name__}"],
            source=str(path),
        )
    return data


def load_profiles_from_dir(profiles_dir: Path | str) -> list[dict[str, Any]]:
    """Read every profile file in a directory, in file name order."""
    profiles_dir = Path(profiles_dir)
    if not profiles_dir.is_dir():
        raise RegistryLoadError("profiles directory not found", source=str(profiles_dir))

    records: list[dict[str, Any]] = []
    for f in sorted(profiles_dir.iterdir()):
        if f.is_file() and f.suffix.lower() in PROFILE_SUFFIXES:
            records.extend(read_profile_file(f))
    logger.debug("[Registry] Read %d profile record(s) from %s", len(records), profiles_dir)
    return records


def load_bundled_records() -> list[dict[str, Any]]:
    return load_profiles_from_dir(BUNDLED_PROFILES_DIR)


# ─────────────────────────────────────────────────────────────────────────────
# Validation
# ─────────────────────────────────────────────────────────────────────────────

def _record_label(record: Any, position: int) -> str:
    if isinstance(record, dict) and record.get("name"):
        return str(record["name"])
    if isinstance(record, TechnologyProfile):
        return record.name
    return f"record[{position}]"


def _format_validation_error(label: str, exc: ValidationError) -> list[str]:
    out: list[str] = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "__root__")
        msg = str(err.get("msg", "invalid"))
        # Profile-level invariants arrive as one "Value error, a; b; c" entry.
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        for part in msg.split("; "):
            out.append(f"{label}: {loc}: {part}" if loc else f"{label}: {part}")
    return out


def parse_profiles(records: Iterable[Any]) -> list[TechnologyProfile]:
    """Validate every record, collecting all problems before failing."""
    profiles: list[TechnologyProfile] = []
    errors: list[str] = []

    for position, record in enumerate(records):
        label = _record_label(record, position)
        if isinstance(record, TechnologyProfile):
            profiles.append(record)
            continue
        if not isinstance(record, dict):
            errors.append(f"{label}: expected a mapping, got {type(record).__name__}")
            continue
        try:
            profiles.append(TechnologyProfile.model_validate(record))
        except ValidationError as e:
            errors.extend(_format_validation_error(label, e))

    seen: dict[str, str] = {}
    for profile in profiles:
        keys = dict.fromkeys(normalize_name(k) for k in (profile.name, *profile.aliases))
        for norm in keys:
            if norm in seen:
                errors.append(f"{profile.name}: name or alias '{norm}' already used by '{seen[norm]}'")
            else:
                seen[norm] = profile.name

    if errors:
        raise RegistryLoadError("invalid profile batch", errors=errors)
    return profiles


def _version_parts(pattern: str) -> tuple[str, ...]:
    return tuple(pattern.strip().lstrip("vV").split("."))


def _is_prefix(a: tuple[str, ...], b: tuple[str, ...]) -> bool:
    return len(a) <= len(b) and b[: len(a)] == a


def find_rule_ambiguities(profiles: Iterable[TechnologyProfile]) -> list[RegistryWarning]:
    """Flag rules that would assert different eras from the same evidence."""
    warnings: list[RegistryWarning] = []
    shared: dict[str, list[SignalRule]] = defaultdict(list)

    for profile in profiles:
        literal: dict[str, list[SignalRule]] = defaultdict(list)
        versions: list[SignalRule] = []
        for rule in profile.iter_rules():
            if rule.match == MatchKind.LITERAL:
                literal[rule.pattern.strip()].append(rule)
            elif rule.match == MatchKind.VERSION:
                versions.append(rule)

        for pattern, rules in literal.items():
            shared[pattern].append(rules[0])
            eras = {r.era for r in rules}
            if len(eras) > 1:
                warnings.append(RegistryWarning(
                    code="ambiguous-signal",
                    technology=profile.name,
                    message=f"pattern {pattern!r} targets eras {sorted(eras)}",
                    rule_ids=tuple(r.id for r in rules),
                ))

        for i, a in enumerate(versions):
            for b in versions[i + 1:]:
                if a.era == b.era:
                    continue
                pa, pb = _version_parts(a.pattern), _version_parts(b.pattern)
                if _is_prefix(pa, pb) or _is_prefix(pb, pa):
                    warnings.append(RegistryWarning(
                        code="ambiguous-version-signal",
                        technology=profile.name,
                        message=(
                            f"version patterns {a.pattern!r} ({a.era}) and "
                            f"{b.pattern!r} ({b.era}) overlap"
                        ),
                        rule_ids=(a.id, b.id),
                    ))

    for pattern, rules in shared.items():
        techs = sorted({r.technology for r in rules})
        if len(techs) > 1:
            warnings.append(RegistryWarning(
                code="shared-pattern",
                technology=", ".join(techs),
                message=f"pattern {pattern!r} annotates {len(techs)} technologies",
                rule_ids=tuple(r.id for r in rules),
            ))

    return warnings


def build_snapshot(records: Iterable[Any], *, version: int = 0, source: str | None = None) -> RegistrySnapshot:
    """
    Validate a whole batch and build a snapshot from it.

    Raises RegistryLoadError on any hard violation; nothing is built in that case.
    """
    try:
        profiles = parse_profiles(records)
    except RegistryLoadError as e:
        if source and not e.source:
            raise RegistryLoadError("invalid profile batch", errors=e.errors, source=source) from e
        raise

    warnings = find_rule_ambiguities(profiles)
    for w in warnings:
        logger.warning("[Registry] %s (%s): %s", w.code, w.technology, w.message)

    snapshot = RegistrySnapshot.build(profiles, version=version, warnings=warnings)
    logger.debug(
        "[Registry] Built snapshot v%d: %d technologies, %d warning(s)",
        version, len(snapshot), len(warnings),
    )
    return snapshot
