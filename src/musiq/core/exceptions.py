"""Error taxonomy for the musiq store and query engine."""


class MusiqError(Exception):
    """Base exception for musiq operations."""

    pass


class StorageUnavailableError(MusiqError):
    """Raised when the database file cannot be opened or initialized."""

    pass


class NotFoundError(MusiqError):
    """Raised when an operation references a song or tag that does not exist."""

    pass


class SongNotFoundError(NotFoundError):
    """Raised when no song is stored under the given path."""

    def __init__(self, path: str, message: str = None):
        self.path = path
        super().__init__(message or f"Song not found: {path} (add it first)")


class TagNotFoundError(NotFoundError):
    """Raised when no tag exists with the given name."""

    def __init__(self, name: str, message: str = None):
        self.name = name
        super().__init__(message or f"Tag not found: {name} (add it first)")


class ConstraintViolationError(MusiqError):
    """Raised when a write would break a schema constraint (e.g. value outside 0-9)."""

    pass


class ConditionParseError(MusiqError):
    """Base exception for malformed tag condition strings."""

    def __init__(self, condition: str, message: str):
        self.condition = condition
        super().__init__(message)


class EmptyTagNameError(ConditionParseError):
    """Raised when nothing precedes the operator."""

    def __init__(self, condition: str):
        super().__init__(condition, f"Empty tag name in condition: {condition}")


class ValueOutOfRangeError(ConditionParseError):
    """Raised when the value is numeric but not between 0 and 9."""

    def __init__(self, condition: str):
        super().__init__(
            condition, f"Tag value must be between 0 and 9 in: {condition}"
        )


class NonNumericValueError(ConditionParseError):
    """Raised when the value is not an unsigned integer."""

    def __init__(self, condition: str):
        super().__init__(condition, f"Invalid numeric value in: {condition}")


class NoOperatorFoundError(ConditionParseError):
    """Raised when the condition contains none of the supported operators."""

    def __init__(self, condition: str):
        super().__init__(
            condition,
            f"No valid operator found in condition: {condition} "
            "(use =, >, <, >=, <=, !=)",
        )


class InvalidOperatorError(MusiqError):
    """Raised when an operator is not in the comparison allow-list."""

    def __init__(self, operator: object):
        self.operator = operator
        super().__init__(
            f"Invalid operator: {operator!r} (use =, >, <, >=, <=, !=)"
        )


class QueryError(MusiqError):
    """Raised when the storage layer fails while executing a song query."""

    pass
