"""Test helpers for the incid editing core.

Usage:
    from tests.helpers import scenario_lookup, make_incid
"""

from tests.helpers.lookup_builder import (
    BAP_RULES,
    IMPORTANCE_RULES,
    INCID_KEY,
    complete_bap,
    make_incid,
    persisted_secondary,
    scenario_lookup,
    valid_source,
)

__all__ = [
    "BAP_RULES",
    "IMPORTANCE_RULES",
    "INCID_KEY",
    "complete_bap",
    "make_incid",
    "persisted_secondary",
    "scenario_lookup",
    "valid_source",
]
