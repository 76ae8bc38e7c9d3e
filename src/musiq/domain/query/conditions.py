"""Tag condition parsing.

A condition string looks like ``energy>=7``: a tag name, one of the
comparison operators, and a value between 0 and 9. Whitespace around the
name and value is ignored.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List

from musiq.core.exceptions import (
    EmptyTagNameError,
    InvalidOperatorError,
    NoOperatorFoundError,
    NonNumericValueError,
    ValueOutOfRangeError,
)

MIN_TAG_VALUE = 0
MAX_TAG_VALUE = 9

# Two-character operators first so ">=" is never read as ">"
PARSE_ORDER = (">=", "<=", "!=", ">", "<", "=")

_UNSIGNED_INT = re.compile(r"\+?[0-9]+")


class Operator(Enum):
    """Comparison operators allowed in a condition."""

    EQ = "="
    GT = ">"
    LT = "<"
    GTE = ">="
    LTE = "<="
    NE = "!="

    def __str__(self) -> str:
        return self.value

    @classmethod
    def coerce(cls, value: "Operator | str") -> "Operator":
        """Return the Operator for value, or raise InvalidOperatorError."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidOperatorError(value) from None


@dataclass(frozen=True)
class Condition:
    """A parsed predicate on one tag's value."""

    tag_name: str
    value: int
    operator: Operator = Operator.EQ

    def __str__(self) -> str:
        return f"{self.tag_name}{self.operator}{self.value}"


def parse_condition(condition: str) -> Condition:
    """Parse a condition string like ``energy>=7``.

    The first operator from PARSE_ORDER that occurs anywhere in the string is
    used, so ``x>=5`` parses as ``(x, >=, 5)``.

    Args:
        condition: Raw condition text

    Returns:
        Parsed Condition

    Raises:
        EmptyTagNameError: Nothing before the operator
        NonNumericValueError: Value is not an unsigned integer
        ValueOutOfRangeError: Value is an integer above 9
        NoOperatorFoundError: None of the operators occur in the string
    """
    for op in PARSE_ORDER:
        pos = condition.find(op)
        if pos == -1:
            continue

        tag_name = condition[:pos].strip()
        value_str = condition[pos + len(op):].strip()

        if not tag_name:
            raise EmptyTagNameError(condition)

        if not _UNSIGNED_INT.fullmatch(value_str):
            raise NonNumericValueError(condition)

        value = int(value_str)
        if not MIN_TAG_VALUE <= value <= MAX_TAG_VALUE:
            raise ValueOutOfRangeError(condition)

        return Condition(tag_name=tag_name, value=value, operator=Operator(op))

    raise NoOperatorFoundError(condition)


def parse_conditions(conditions: Iterable[str]) -> List[Condition]:
    """Parse condition strings in order, stopping at the first bad one."""
    return [parse_condition(c) for c in conditions]
