"""
Song queries by tag conditions
"""

import sqlite3
from typing import Iterable, List, Sequence

from loguru import logger

from musiq.core.database import get_db_connection
from musiq.core.exceptions import QueryError
from musiq.domain.library.models import Song

from .builder import build_query_plan
from .conditions import Condition, parse_conditions


def query_songs(conditions: Sequence[Condition]) -> List[Song]:
    """Find songs matching every condition.

    An empty condition list returns [] without opening the database.

    Args:
        conditions: Conditions to AND together

    Returns:
        Matching songs, sorted by path, each listed once

    Raises:
        InvalidOperatorError: If a condition's operator is not allowed (nothing is executed)
        QueryError: If the database fails while running the query
    """
    if not conditions:
        return []

    plan = build_query_plan(conditions)
    logger.debug(f"Song query: {plan.sql} ({len(plan.params)} params)")

    with get_db_connection() as conn:
        try:
            rows = conn.execute(plan.sql, plan.params).fetchall()
        except sqlite3.Error as e:
            raise QueryError(f"Song query failed: {e}") from e

    return [Song(row["id"], row["path"]) for row in rows]


def export_songs(condition_strings: Iterable[str]) -> List[Song]:
    """Parse condition strings (e.g. ``energy>=7``) and run the query."""
    conditions = parse_conditions(condition_strings)
    songs = query_songs(conditions)
    logger.info(
        f"Export {' '.join(str(c) for c in conditions)}: {len(songs)} songs"
    )
    return songs
