from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Callable, Optional

from chronocheck_core.constants import (
    DEFAULT_ACTIVE_MEDIUM_SCORE,
    DEFAULT_ERROR_TEXT_WEIGHT,
    DEFAULT_FREE_TEXT_WEIGHT,
    DEFAULT_SLOW_HIGH_SCORE,
)
from chronocheck_core.schema.policy import ClassificationPolicy


_TRUE = frozenset({"1", "true", "yes", "y", "on"})
_FALSE = frozenset({"0", "false", "no", "n", "off"})


def _parse_bool(raw: Any, *, default: bool) -> bool:
    if isinstance(raw, bool):
        return raw
    s = str(raw if raw is not None else "").strip().lower()
    if s in _TRUE:
        return True
    if s in _FALSE:
        return False
    return default


def _parse_number(raw: Any, *, cast: Callable[[Any], Any], default: Any, min_v: Any, max_v: Any) -> Any:
    """Parse and clamp; unparseable values fall back to `default`."""
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        value = default
    else:
        try:
            value = cast(raw.strip() if isinstance(raw, str) else raw)
        except (TypeError, ValueError):
            value = default
    return max(min_v, min(max_v, value))


def _parse_int(raw: Any, *, default: int, min_v: int, max_v: int) -> int:
    return int(_parse_number(raw, cast=int, default=default, min_v=min_v, max_v=max_v))


def _parse_float(raw: Any, *, default: float, min_v: float, max_v: float) -> float:
    return float(_parse_number(raw, cast=float, default=default, min_v=min_v, max_v=max_v))


def _parse_path(raw: Any) -> Optional[str]:
    s = str(raw or "").strip()
    return s or None


@dataclass(frozen=True)
class EngineFeatureFlags:
    # Trace is a local-only debug feature; it is enabled by default and can be disabled via env.
    trace_enabled: bool = True
    # Ship the bundled YAML profiles in the initial snapshot.
    bundled_profiles: bool = True
    # Explicit version strings outrank every other kind of evidence.
    version_short_circuit: bool = True


@dataclass(frozen=True)
class EngineDebugFlags:
    engine_debug: bool = False
    trace_max_str_chars: int = 4000
    trace_dir: str = "data/trace"


@dataclass(frozen=True)
class RegistryConfig:
    # Extra profiles directory; profiles there override bundled ones by name.
    profiles_dir: Optional[str] = None


@dataclass(frozen=True)
class InferenceTunables:
    free_text_weight: float = DEFAULT_FREE_TEXT_WEIGHT
    error_text_weight: float = DEFAULT_ERROR_TEXT_WEIGHT
    slow_high_score: float = DEFAULT_SLOW_HIGH_SCORE
    active_medium_score: float = DEFAULT_ACTIVE_MEDIUM_SCORE


@dataclass(frozen=True)
class EngineRuntimeConfig:
    features: EngineFeatureFlags = EngineFeatureFlags()
    debug: EngineDebugFlags = EngineDebugFlags()
    registry: RegistryConfig = RegistryConfig()
    tunables: InferenceTunables = InferenceTunables()

    @staticmethod
    def load_from_env() -> "EngineRuntimeConfig":
        features = EngineFeatureFlags(
            trace_enabled=not _parse_bool(os.getenv("CHRONOCHECK_TRACE_DISABLE"), default=False),
            bundled_profiles=_parse_bool(os.getenv("CHRONOCHECK_BUNDLED_PROFILES"), default=True),
            version_short_circuit=_parse_bool(os.getenv("CHRONOCHECK_VERSION_SHORT_CIRCUIT"), default=True),
        )

        debug = EngineDebugFlags(
            engine_debug=_parse_bool(os.getenv("CHRONOCHECK_ENGINE_DEBUG"), default=False),
            trace_max_str_chars=_parse_int(os.getenv("TRACE_MAX_STR_CHARS"), default=4000, min_v=200, max_v=20000),
            trace_dir=_parse_path(os.getenv("CHRONOCHECK_TRACE_DIR")) or "data/trace",
        )

        registry = RegistryConfig(
            profiles_dir=_parse_path(os.getenv("CHRONOCHECK_PROFILES_DIR")),
        )

        # Weights must stay strictly positive: a zero weight would hide evidence entirely.
        tunables = InferenceTunables(
            free_text_weight=_parse_float(
                os.getenv("CHRONOCHECK_FREE_TEXT_WEIGHT"), default=DEFAULT_FREE_TEXT_WEIGHT, min_v=0.05, max_v=1.0
            ),
            error_text_weight=_parse_float(
                os.getenv("CHRONOCHECK_ERROR_TEXT_WEIGHT"), default=DEFAULT_ERROR_TEXT_WEIGHT, min_v=0.05, max_v=1.0
            ),
            slow_high_score=_parse_float(
                os.getenv("CHRONOCHECK_SLOW_HIGH_SCORE"), default=DEFAULT_SLOW_HIGH_SCORE, min_v=0.0, max_v=1.0
            ),
            active_medium_score=_parse_float(
                os.getenv("CHRONOCHECK_ACTIVE_MEDIUM_SCORE"), default=DEFAULT_ACTIVE_MEDIUM_SCORE, min_v=0.0, max_v=1.0
            ),
        )

        return EngineRuntimeConfig(
            features=features,
            debug=debug,
            registry=registry,
            tunables=tunables,
        )

    def to_policy(self) -> ClassificationPolicy:
        return ClassificationPolicy(
            free_text_weight=float(self.tunables.free_text_weight),
            error_text_weight=float(self.tunables.error_text_weight),
            version_short_circuit=bool(self.features.version_short_circuit),
            slow_high_score=float(self.tunables.slow_high_score),
            active_medium_score=float(self.tunables.active_medium_score),
        )

    def to_safe_log_dict(self) -> dict[str, Any]:
        return {
            "features": {
                "trace_enabled": bool(self.features.trace_enabled),
                "bundled_profiles": bool(self.features.bundled_profiles),
                "version_short_circuit": bool(self.features.version_short_circuit),
            },
            "debug": {
                "engine_debug": bool(self.debug.engine_debug),
                "trace_max_str_chars": int(self.debug.trace_max_str_chars),
            },
            "registry": {
                "profiles_dir_set": self.registry.profiles_dir is not None,
            },
            "tunables": {
                "free_text_weight": float(self.tunables.free_text_weight),
                "error_text_weight": float(self.tunables.error_text_weight),
                "slow_high_score": float(self.tunables.slow_high_score),
                "active_medium_score": float(self.tunables.active_medium_score),
            },
        }
