"""Compile tag conditions into one parameterized song query.

Each condition gets its own song_tags/tags join pair (aliases st_<i>, t_<i>),
so two conditions on the same tag match independently. That is what makes
range queries like ``energy>=3 energy<=7`` work.
"""

from dataclasses import dataclass
from typing import Any, List, Sequence, Tuple

from .conditions import Condition, Operator


@dataclass(frozen=True)
class JoinSpec:
    """The join pair, WHERE fragment and parameters for one condition."""

    index: int
    tag_name: str
    operator: Operator
    value: int

    @classmethod
    def from_condition(cls, index: int, condition: Condition) -> "JoinSpec":
        return cls(
            index=index,
            tag_name=condition.tag_name,
            operator=Operator.coerce(condition.operator),
            value=condition.value,
        )

    @property
    def song_tag_alias(self) -> str:
        return f"st_{self.index}"

    @property
    def tag_alias(self) -> str:
        return f"t_{self.index}"

    @property
    def join_sql(self) -> str:
        st, t = self.song_tag_alias, self.tag_alias
        return (
            f"JOIN song_tags AS {st} ON songs.id = {st}.song_id "
            f"JOIN tags AS {t} ON {st}.tag_id = {t}.id"
        )

    @property
    def where_sql(self) -> str:
        # Only allow-listed operators are ever interpolated
        sql_op = Operator.coerce(self.operator).value
        return f"({self.tag_alias}.name = ? AND {self.song_tag_alias}.value {sql_op} ?)"

    @property
    def params(self) -> Tuple[str, int]:
        return (self.tag_name, self.value)


@dataclass(frozen=True)
class QueryPlan:
    """An ordered set of join specs folded into a single SELECT."""

    joins: Tuple[JoinSpec, ...]

    def __post_init__(self) -> None:
        if not self.joins:
            raise ValueError("Cannot build a song query without conditions")

    @property
    def sql(self) -> str:
        join_clause = " ".join(j.join_sql for j in self.joins)
        where_clause = " AND ".join(j.where_sql for j in self.joins)
        return (
            f"SELECT DISTINCT songs.id, songs.path FROM songs {join_clause} "
            f"WHERE {where_clause} "
            "ORDER BY songs.path"
        )

    @property
    def params(self) -> List[Any]:
        params: List[Any] = []
        for join in self.joins:
            params.extend(join.params)
        return params


def build_query_plan(conditions: Sequence[Condition]) -> QueryPlan:
    """Build the query plan for a conjunction of conditions.

    Args:
        conditions: Conditions in the order they should be joined

    Returns:
        QueryPlan whose sql/params can be passed straight to execute()

    Raises:
        ValueError: If conditions is empty
        InvalidOperatorError: If a condition carries an operator outside the allow-list
    """
    if not conditions:
        raise ValueError("Cannot build a song query without conditions")

    joins = tuple(
        JoinSpec.from_condition(i, condition) for i, condition in enumerate(conditions)
    )
    return QueryPlan(joins=joins)
