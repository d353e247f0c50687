# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Chronocheck Contributors
"""Engine facade tests: registry sources, reload and tracing."""

import json

import pytest

from chronocheck_core.config import ChronocheckConfig
from chronocheck_core.engine import ChronocheckEngine
from chronocheck_core.errors import RegistryLoadError
from chronocheck_core.registry.store import RegistryStore
from chronocheck_core.runtime_config import EngineRuntimeConfig
from chronocheck_core.schema.assessment import ConflictKind, ResponsePattern
from chronocheck_core.schema.registry import VolatilityTier

from conftest import example_fw_record


def _engine(**kwargs) -> ChronocheckEngine:
    return ChronocheckEngine(ChronocheckConfig(runtime=EngineRuntimeConfig(), **kwargs))


@pytest.fixture(autouse=True)
def _no_local_trace(monkeypatch):
    monkeypatch.delenv("CHRONOCHECK_ENV", raising=False)
    monkeypatch.delenv("ENV", raising=False)


# ═══════════════════════════════════════════════════════════════════════════════
# Bundled registry
# ═══════════════════════════════════════════════════════════════════════════════

class TestBundledRegistry:

    def test_removed_pandas_api_against_pandas_2(self):
        engine = _engine()
        evidence = ["import pandas as pd\nprint(pd.__version__)  # 2.1.4"]
        result = engine.assess("pandas", "DataFrame.append", evidence)

        assert result.inferred_era == "2.x"
        assert result.era_score == 1.0
        assert [c.kind for c in result.conflicts] == [ConflictKind.REMOVED_BUT_ASSERTED_PRESENT]
        assert result.conflicts[0].replacement == "pandas.concat"
        assert result.response_pattern == ResponsePattern.HEDGE_AND_CORRECT

    def test_error_text_points_at_pandas_2(self):
        engine = _engine()
        error = "AttributeError: 'DataFrame' object has no attribute 'append'"
        result = engine.assess("pd", "DataFrame.append still works", [error])

        assert result.technology == "pandas"
        assert result.signals_matched == ("pandas-2-append-removed",)
        assert result.response_pattern == ResponsePattern.HEDGE_AND_CORRECT

    def test_react_render_in_18_is_deprecated(self):
        engine = _engine()
        result = engine.assess("React", "ReactDOM.render", ["react@18.2.0"])
        assert result.inferred_era == "concurrent"
        assert [c.kind for c in result.conflicts] == [ConflictKind.DEPRECATED_BUT_ASSERTED_CURRENT]
        assert result.conflicts[0].replacement == "createRoot"

    def test_glacial_sql_states_directly(self):
        result = _engine().assess("SQL", "SELECT syntax", [])
        assert result.response_pattern == ResponsePattern.STATE_DIRECTLY


# ═══════════════════════════════════════════════════════════════════════════════
# Registry sources and reload
# ═══════════════════════════════════════════════════════════════════════════════

class TestRegistrySources:

    def test_profiles_dir_overrides_bundled_by_name(self, tmp_path):
        (tmp_path / "pandas.yml").write_text("name: Pandas\ntier: glacial\n")
        engine = _engine(profiles_dir=str(tmp_path))
        snapshot = engine.store.current()

        assert snapshot.get("pandas").volatility_tier == VolatilityTier.GLACIAL
        assert "React" in snapshot

    def test_bundled_profiles_can_be_disabled(self, tmp_path):
        (tmp_path / "tiny.yml").write_text("name: TinyDB\ntier: glacial\n")
        engine = _engine(profiles_dir=str(tmp_path), include_bundled_profiles=False)
        assert engine.store.current().names() == ("TinyDB",)

    def test_given_store_is_used_as_is(self):
        store = RegistryStore()
        store.load([example_fw_record()])
        engine = ChronocheckEngine(ChronocheckConfig(runtime=EngineRuntimeConfig()), store=store)
        assert engine.store.current().names() == ("ExampleFW",)
        assert engine.assess("ExampleFW", "old-call").registry_version == 1

    def test_failed_reload_keeps_serving(self):
        engine = _engine()
        with pytest.raises(RegistryLoadError):
            engine.reload([{"name": "Broken", "tier": "active"}])
        assert engine.store.current().version == 1
        assert engine.assess("SQL", "SELECT syntax").known is True

    def test_reload_from_configured_sources(self):
        engine = _engine()
        report = engine.reload()
        assert report.version == 2
        assert report.source == "bundled"
        assert "pandas" in report.technologies


# ═══════════════════════════════════════════════════════════════════════════════
# Tracing
# ═══════════════════════════════════════════════════════════════════════════════

class TestTracing:

    def test_local_run_writes_trace_events(self, monkeypatch, tmp_path):
        monkeypatch.setenv("CHRONOCHECK_ENV", "local")
        monkeypatch.chdir(tmp_path)

        _engine().assess("pandas", "DataFrame.append", ["pandas 2.1.0"])

        files = list((tmp_path / "data" / "trace").glob("*.jsonl"))
        assert len(files) == 1
        events = [json.loads(line)["event"] for line in files[0].read_text().splitlines()]
        assert events[0] == "trace.start"
        assert "assessment.inference" in events
        assert "assessment.decision" in events
        assert events[-1] == "trace.stop"

    def test_trace_is_off_outside_local_runs(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        _engine().assess("pandas", "DataFrame.append", ["pandas 2.1.0"])
        assert not (tmp_path / "data").exists()
