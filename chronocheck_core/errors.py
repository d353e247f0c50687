# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Chronocheck Contributors
"""
Engine Errors

Only two conditions are fatal: a malformed assessment call and a malformed
registry batch. Everything else is reported as data on the Assessment.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


class ChronocheckError(Exception):
    """Base class for engine errors."""


@dataclass
class InvalidInput(ChronocheckError):
    """
    Raised when an assessment call carries neither a technology nor a claim.

    Attributes:
        technology: The technology value as received
        claim: The claim value as received
        reason: Short description of the violated input contract
    """

    technology: Any
    claim: Any
    reason: str = "technology and claim are both empty"

    def __post_init__(self) -> None:
        super().__init__(
            f"Invalid assessment input: {self.reason} "
            f"(technology={self.technology!r}, claim={self.claim!r})"
        )

    def to_trace_dict(self) -> dict[str, Any]:
        return {
            "error": "invalid_input",
            "reason": self.reason,
            "technology": str(self.technology)[:120],
            "claim": str(self.claim)[:120],
        }


class RegistryLoadError(ChronocheckError):
    """
    Raised when a profile batch fails validation.

    The whole batch is rejected; the previously published snapshot stays active.
    """

    def __init__(self, message: str, errors: list[str] | None = None, source: str | None = None):
        self.errors: list[str] = list(errors or [])
        self.source = source
        full_msg = f"Registry load failed: {message}"
        if source:
            full_msg += f" [{source}]"
        if self.errors:
            full_msg += f" ({len(self.errors)} problem(s); first: {self.errors[0]})"
        super().__init__(full_msg)

    def to_trace_dict(self) -> dict[str, Any]:
        return {
            "error": "registry_load_error",
            "source": self.source,
            "errors": self.errors[:20],
            "errors_count": len(self.errors),
        }


@dataclass(frozen=True)
class RegistryWarning:
    """Non-fatal finding reported alongside a successful load."""

    code: str
    technology: str
    message: str
    rule_ids: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "technology": self.technology,
            "message": self.message,
            "rule_ids": list(self.rule_ids),
        }
