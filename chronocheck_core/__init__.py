# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Chronocheck Contributors
"""
Chronocheck Core Engine
=======================

Knowledge currency and conflict classification for technical claims.
"""

__version__ = "0.3.0"

# Bump when the decision table or inference weighting changes, so that
# stored assessments can be compared against the logic that produced them.
DECISION_TABLE_VERSION = "table_v2"
INFERENCE_STRATEGY_VERSION = "weighted_share_v1"
