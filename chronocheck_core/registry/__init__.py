# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Chronocheck Contributors
"""Technology registry: snapshot, loader and atomic store."""

from chronocheck_core.registry.snapshot import RegistrySnapshot
from chronocheck_core.registry.loader import (
    BUNDLED_PROFILES_DIR,
    build_snapshot,
    find_rule_ambiguities,
    load_bundled_records,
    load_profiles_from_dir,
    parse_profiles,
    read_profile_file,
)
from chronocheck_core.registry.store import RegistryLoadReport, RegistryStore

__all__ = [
    "RegistrySnapshot",
    "BUNDLED_PROFILES_DIR",
    "build_snapshot",
    "find_rule_ambiguities",
    "load_bundled_records",
    "load_profiles_from_dir",
    "parse_profiles",
    "read_profile_file",
    "RegistryLoadReport",
    "RegistryStore",
]
