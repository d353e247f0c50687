from typing import Dict

# Acceptable drift window per volatility tier, in days.
# Glacial surfaces are measured in years, rapid ones in weeks.
DEFAULT_DRIFT_DAYS: Dict[str, int] = {
    "glacial": 1825,
    "slow": 365,
    "active": 90,
    "rapid": 14,
}

# Evidence weighting defaults for version inference.
DEFAULT_FREE_TEXT_WEIGHT: float = 0.5
DEFAULT_ERROR_TEXT_WEIGHT: float = 1.0

# Decision table thresholds.
DEFAULT_SLOW_HIGH_SCORE: float = 0.5
DEFAULT_ACTIVE_MEDIUM_SCORE: float = 0.7

# Bundled profile files.
PROFILE_SUFFIXES: tuple[str, ...] = (".yml", ".yaml")

# Upper bound on characters kept from a single evidence fragment.
MAX_FRAGMENT_CHARS: int = 20_000


def get_drift_days(tier: str) -> int:
    """Return the default drift window for a tier value, defaulting to the strictest one."""
    return DEFAULT_DRIFT_DAYS.get((tier or "").lower(), DEFAULT_DRIFT_DAYS["rapid"])
