# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Chronocheck Contributors
"""Registry store tests: atomic publication and failed reloads."""

import pytest

from chronocheck_core.errors import RegistryLoadError
from chronocheck_core.registry.snapshot import RegistrySnapshot
from chronocheck_core.registry.store import RegistryStore

from conftest import example_fw_record, stable_db_record


class TestRegistryStore:

    def test_starts_empty(self):
        store = RegistryStore()
        assert store.current().version == 0
        assert len(store.current()) == 0

    def test_load_increments_version(self):
        store = RegistryStore()
        first = store.load([example_fw_record()])
        second = store.load([example_fw_record(), stable_db_record()], source="test")

        assert (first.version, second.version) == (1, 2)
        assert second.technologies == ("ExampleFW", "StableDB")
        assert second.source == "test"
        assert store.current().version == 2

    def test_failed_load_keeps_previous_snapshot(self):
        store = RegistryStore()
        store.load([example_fw_record()])
        before = store.current()

        bad = {**example_fw_record(), "eras": []}
        with pytest.raises(RegistryLoadError) as exc:
            store.load([stable_db_record(), bad])

        assert store.current() is before
        assert "StableDB" not in store.current()
        assert any("requires at least one era" in e for e in exc.value.errors)

    def test_next_load_after_failure_continues_numbering(self):
        store = RegistryStore()
        store.load([example_fw_record()])
        with pytest.raises(RegistryLoadError):
            store.load(["broken"])
        assert store.load([stable_db_record()]).version == 2

    def test_held_snapshot_is_not_mutated_by_reload(self):
        store = RegistryStore()
        store.load([example_fw_record()])
        held = store.current()
        store.load([stable_db_record()])

        assert "ExampleFW" in held
        assert "StableDB" not in held
        assert "StableDB" in store.current()

    def test_publish_replaces_snapshot(self):
        store = RegistryStore()
        snapshot = RegistrySnapshot(version=7)
        store.publish(snapshot)
        assert store.current() is snapshot

    def test_load_dir(self, tmp_path):
        (tmp_path / "db.yml").write_text("name: TinyDB\ntier: glacial\n")
        report = RegistryStore().load_dir(tmp_path)
        assert report.technologies == ("TinyDB",)
        assert report.to_dict()["source"] == str(tmp_path)

    def test_report_lists_warnings(self):
        record = example_fw_record()
        record["eras"][1]["signals"].append({"id": "fw-e2-legacy", "pattern": "legacy_api"})
        report = RegistryStore().load([record])
        assert [w["code"] for w in report.to_dict()["warnings"]] == ["ambiguous-signal"]


class TestSnapshotLookup:

    def test_alias_and_case_insensitive_lookup(self):
        store = RegistryStore()
        store.load([{**example_fw_record(), "aliases": ["Example Framework"]}])
        snapshot = store.current()

        assert snapshot.get("EXAMPLEFW").name == "ExampleFW"
        assert snapshot.get("example   framework").name == "ExampleFW"
        assert snapshot.get("") is None
        assert snapshot.get(None) is None
        assert 42 not in snapshot
