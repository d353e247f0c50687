# Chronocheck Engine - main entry point

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any, Iterable, Optional
from uuid import uuid4

from chronocheck_core.config import ChronocheckConfig
from chronocheck_core.registry.loader import load_bundled_records, load_profiles_from_dir
from chronocheck_core.registry.store import RegistryLoadReport, RegistryStore
from chronocheck_core.schema.assessment import Assessment
from chronocheck_core.schema.registry import normalize_name
from chronocheck_core.utils.trace import Trace
from chronocheck_core.verification.orchestrator import AssessmentOrchestrator

logger = logging.getLogger(__name__)


def _merge_records(*batches: Iterable[Any]) -> list[Any]:
    """Later batches override earlier ones by technology name."""
    merged: dict[str, Any] = {}
    anonymous: list[Any] = []
    for batch in batches:
        for record in batch:
            name = record.get("name") if isinstance(record, dict) else None
            if name:
                merged[normalize_name(str(name))] = record
            else:
                # Let the loader report it.
                anonymous.append(record)
    return list(merged.values()) + anonymous


class ChronocheckEngine:
    """The main entry point for the Chronocheck engine."""

    def __init__(self, config: Optional[ChronocheckConfig] = None, store: Optional[RegistryStore] = None):
        self.config = config or ChronocheckConfig()
        self.store = store or RegistryStore()
        self.orchestrator = AssessmentOrchestrator(self.store, policy=self.config.runtime.to_policy())
        log = logger.info if self.config.runtime.debug.engine_debug else logger.debug
        log("Effective config: %s", json.dumps(self.config.runtime.to_safe_log_dict(), ensure_ascii=False))
        if store is None:
            self.reload()

    def configured_records(self) -> list[Any]:
        batches: list[list[Any]] = []
        if self.config.effective_include_bundled:
            batches.append(load_bundled_records())
        profiles_dir = self.config.effective_profiles_dir
        if profiles_dir:
            batches.append(load_profiles_from_dir(profiles_dir))
        return _merge_records(*batches)

    def reload(self, records: Optional[Iterable[Any]] = None) -> RegistryLoadReport:
        """
        Validate and publish a new registry snapshot.

        With no records, re-reads the configured sources (bundled profiles and
        the profiles directory). RegistryLoadError leaves the current snapshot active.
        """
        source = None
        if records is None:
            records = self.configured_records()
            source = self.config.effective_profiles_dir or "bundled"
        return self.store.load(records, source=source)

    def assess(self, technology: str, claim: str, evidence: Iterable[Any] | str | None = ()) -> Assessment:
        trace_id = f"{datetime.now().strftime('%Y-%m-%d_%H-%M-%S')}_{str(uuid4())[:6]}"
        with Trace.session(trace_id, runtime=self.config.runtime):
            Trace.event("engine.assess.start", {
                "technology": technology if isinstance(technology, str) else repr(technology),
                "claim_len": len(claim) if isinstance(claim, str) else 0,
            })
            return self.orchestrator.assess(technology, claim, evidence)
