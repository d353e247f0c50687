# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Chronocheck Contributors
"""Immutable registry snapshot bound by one assessment."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping

from chronocheck_core.errors import RegistryWarning
from chronocheck_core.schema.registry import TechnologyProfile, normalize_name


def _empty_mapping() -> Mapping[str, TechnologyProfile]:
    return MappingProxyType({})


@dataclass(frozen=True)
class RegistrySnapshot:
    """
    Read-only view of every published profile.

    Lookups are case- and whitespace-insensitive and honour profile aliases.
    A reload never mutates a snapshot; it publishes a new one.
    """

    version: int = 0
    profiles: Mapping[str, TechnologyProfile] = field(default_factory=_empty_mapping)
    aliases: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    warnings: tuple[RegistryWarning, ...] = ()

    @classmethod
    def build(
        cls,
        profiles: Iterable[TechnologyProfile],
        *,
        version: int = 0,
        warnings: Iterable[RegistryWarning] = (),
    ) -> "RegistrySnapshot":
        by_key: dict[str, TechnologyProfile] = {}
        aliases: dict[str, str] = {}
        for profile in profiles:
            by_key[profile.key] = profile
            for alias in profile.aliases:
                aliases[normalize_name(alias)] = profile.key
        return cls(
            version=version,
            profiles=MappingProxyType(by_key),
            aliases=MappingProxyType(aliases),
            warnings=tuple(warnings),
        )

    def get(self, name: str | None) -> TechnologyProfile | None:
        key = normalize_name(name or "")
        if not key:
            return None
        profile = self.profiles.get(key)
        if profile is not None:
            return profile
        target = self.aliases.get(key)
        return self.profiles.get(target) if target else None

    def names(self) -> tuple[str, ...]:
        return tuple(sorted(p.name for p in self.profiles.values()))

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None

    def __len__(self) -> int:
        return len(self.profiles)
