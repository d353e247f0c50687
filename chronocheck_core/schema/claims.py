# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Chronocheck Contributors
"""The claim under assessment."""

from __future__ import annotations

from chronocheck_core.schema.serialization import SchemaModel


class Claim(SchemaModel):
    """
    A technology identifier plus an asserted fact.

    The fact is free-form text naming a property, e.g. "DataFrame.append",
    "parameter default", "--no-deps flag exists".
    """

    technology: str = ""
    fact: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.technology.strip() and not self.fact.strip()
