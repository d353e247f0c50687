# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Chronocheck Contributors
"""
Registry Store

Holds the current snapshot and publishes replacements atomically.
Readers take `current()` once and keep that reference for the whole call;
a concurrent reload never changes a snapshot someone already holds.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable

from chronocheck_core.errors import RegistryLoadError, RegistryWarning
from chronocheck_core.registry.loader import build_snapshot, load_profiles_from_dir
from chronocheck_core.registry.snapshot import RegistrySnapshot
from chronocheck_core.utils.trace import Trace

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegistryLoadReport:
    version: int
    technologies: tuple[str, ...]
    warnings: tuple[RegistryWarning, ...] = ()
    source: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "technologies": list(self.technologies),
            "warnings": [w.to_dict() for w in self.warnings],
            "source": self.source,
        }


class RegistryStore:
    """Atomic-swap holder for the current RegistrySnapshot."""

    def __init__(self, snapshot: RegistrySnapshot | None = None):
        self._lock = threading.Lock()
        self._snapshot = snapshot or RegistrySnapshot()

    def current(self) -> RegistrySnapshot:
        return self._snapshot

    def publish(self, snapshot: RegistrySnapshot) -> None:
        with self._lock:
            self._snapshot = snapshot

    def load(self, records: Iterable[Any], *, source: str | None = None) -> RegistryLoadReport:
        """
        Validate a batch and publish it as the next snapshot.

        On RegistryLoadError the previous snapshot stays active.
        """
        records = list(records)
        with self._lock:
            version = self._snapshot.version + 1
            try:
                snapshot = build_snapshot(records, version=version, source=source)
            except RegistryLoadError as e:
                logger.error(
                    "[Registry] Load rejected, keeping v%d: %s",
                    self._snapshot.version, e,
                )
                Trace.event("registry.load_rejected", e.to_trace_dict())
                raise
            self._snapshot = snapshot

        logger.info(
            "[Registry] Published v%d with %d technologies (%d warning(s))",
            snapshot.version, len(snapshot), len(snapshot.warnings),
        )
        return RegistryLoadReport(
            version=snapshot.version,
            technologies=snapshot.names(),
            warnings=snapshot.warnings,
            source=source,
        )

    def load_dir(self, profiles_dir: Path | str) -> RegistryLoadReport:
        records = load_profiles_from_dir(profiles_dir)
        return self.load(records, source=str(profiles_dir))
