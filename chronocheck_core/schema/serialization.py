# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Chronocheck Contributors
from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel

T = TypeVar("T", bound="SchemaModel")


class SchemaModel(BaseModel):
    """
    Base for every record the engine reads or returns (Pydantic v2).

    - Frozen: registry records and assessments are never mutated after creation.
    - Unknown keys are ignored, so profile files may carry annotations.
    - Numbers are accepted for string fields (YAML reads `label: 2.0` as a float).
    """

    model_config = {"extra": "ignore", "frozen": True, "coerce_numbers_to_str": True}

    def to_dict(self) -> dict[str, Any]:
        """JSON-safe dict: enums as their identifiers, dates as ISO strings, no None values."""
        return self.model_dump(mode="json", exclude_none=True)

    def to_json(self, *, indent: int | None = None) -> str:
        return self.model_dump_json(exclude_none=True, indent=indent)

    @classmethod
    def from_dict(cls: type[T], data: dict[str, Any]) -> T:
        if not isinstance(data, dict):
            raise TypeError(f"{cls.__name__} input must be a dict, got: {type(data)!r}")
        return cls.model_validate(data)
