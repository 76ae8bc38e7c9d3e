"""Query domain - tag conditions and song lookup.

This domain handles:
- Parsing condition strings (energy>=7, mood<5, ...)
- Compiling condition lists into one join-per-condition query
- Running the query against the store
"""

from .conditions import (
    MAX_TAG_VALUE,
    MIN_TAG_VALUE,
    PARSE_ORDER,
    Condition,
    Operator,
    parse_condition,
    parse_conditions,
)

from .builder import JoinSpec, QueryPlan, build_query_plan

from .engine import export_songs, query_songs

__all__ = [
    # Conditions
    "MAX_TAG_VALUE",
    "MIN_TAG_VALUE",
    "PARSE_ORDER",
    "Condition",
    "Operator",
    "parse_condition",
    "parse_conditions",
    # Compilation
    "JoinSpec",
    "QueryPlan",
    "build_query_plan",
    # Execution
    "export_songs",
    "query_songs",
]
