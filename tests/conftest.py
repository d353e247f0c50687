# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Chronocheck Contributors

import pytest

from chronocheck_core.registry.snapshot import RegistrySnapshot
from chronocheck_core.registry.store import RegistryStore
from chronocheck_core.schema.registry import TechnologyProfile


def example_fw_record() -> dict:
    """Active framework with two eras; `old-call` is deprecated in E2."""
    return {
        "name": "ExampleFW",
        "category": "framework",
        "tier": "active",
        "eras": [
            {
                "label": "E1",
                "started": "2019-01-01",
                "signals": [
                    {"id": "fw-e1-version", "pattern": "1", "match": "version"},
                    {"id": "fw-e1-legacy", "pattern": "legacy_api", "match": "literal"},
                ],
                "facts": [
                    {"name": "old-call", "deprecated_in": "E2", "replacement": "new-call"},
                    {"name": "gone-call", "deprecated_in": "E1", "removed_in": "E2"},
                    {"name": "stable-call"},
                ],
            },
            {
                "label": "E2",
                "started": "2022-01-01",
                "signals": [
                    {"id": "fw-e2-version", "pattern": "2", "match": "version"},
                    {"id": "fw-e2-modern", "pattern": "modern_api", "match": "literal"},
                ],
                "facts": [
                    {"name": "new-call"},
                ],
            },
        ],
    }


def stable_db_record() -> dict:
    return {
        "name": "StableDB",
        "category": "database",
        "tier": "glacial",
        "eras": [],
    }


def staged_lib_record(tier: str = "slow") -> dict:
    """Four eras, used for step-distance conflicts."""
    return {
        "name": "StagedLib",
        "tier": tier,
        "eras": [
            {
                "label": "S1",
                "signals": [{"id": "staged-s1", "pattern": "s1_marker"}],
                "facts": [{"name": "first-feature"}],
            },
            {
                "label": "S2",
                "signals": [{"id": "staged-s2", "pattern": "s2_marker"}],
                "facts": [{"name": "second-feature"}],
            },
            {
                "label": "S3",
                "signals": [{"id": "staged-s3", "pattern": "s3_marker"}],
                "facts": [{"name": "third-feature", "removed_in": "S4"}],
            },
            {
                "label": "S4",
                "signals": [{"id": "staged-s4", "pattern": "s4_marker"}],
                "facts": [{"name": "fourth-feature"}],
            },
        ],
    }


@pytest.fixture
def example_fw() -> TechnologyProfile:
    return TechnologyProfile.model_validate(example_fw_record())


@pytest.fixture
def stable_db() -> TechnologyProfile:
    return TechnologyProfile.model_validate(stable_db_record())


@pytest.fixture
def staged_lib() -> TechnologyProfile:
    return TechnologyProfile.model_validate(staged_lib_record())


@pytest.fixture
def store() -> RegistryStore:
    """Store with ExampleFW, StableDB and StagedLib published as v1."""
    s = RegistryStore()
    s.load([example_fw_record(), stable_db_record(), staged_lib_record()], source="fixtures")
    return s


@pytest.fixture
def empty_snapshot() -> RegistrySnapshot:
    return RegistrySnapshot()


@pytest.fixture
def staged_profile():
    """Factory: StagedLib validated at the given tier."""
    def _make(tier) -> TechnologyProfile:
        value = tier.value if hasattr(tier, "value") else str(tier)
        return TechnologyProfile.model_validate(staged_lib_record(value))
    return _make
