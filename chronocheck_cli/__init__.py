# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Chronocheck Contributors
"""
Chronocheck CLI Module

Commands:
- registry list: List technologies in the registry
- registry validate <dir>: Validate a directory of profile files
- assess <technology> <claim> [-e EVIDENCE ...]: Assess a claim, print JSON

Usage:
    python -m chronocheck_cli registry list
    python -m chronocheck_cli registry validate ./profiles
    python -m chronocheck_cli assess pandas "DataFrame.append" -e "pandas==2.1.0"
"""

from chronocheck_cli.commands import main

__all__ = ["main"]
