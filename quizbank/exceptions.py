"""Exception hierarchy for quizbank.

The search engine in :mod:`quizbank.search` never raises for user input;
these exceptions cover configuration, storage and CLI-level validation.
"""

from pathlib import Path


class QuizbankError(Exception):
    """Base exception for all quizbank errors.

    All exceptions in this package inherit from this class,
    allowing callers to catch all quizbank errors with
    a single except clause.
    """

    pass


# Configuration Errors
class ConfigError(QuizbankError):
    """Configuration-related errors."""

    pass


class ConfigParseError(ConfigError):
    """Configuration file has invalid syntax."""

    def __init__(self, path: Path, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"Invalid config at {path}: {detail}")


class ConfigValidationError(ConfigError):
    """Configuration value is invalid."""

    def __init__(self, key: str, value: object, reason: str) -> None:
        self.key = key
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid config value for '{key}': {reason}")


# Database Errors
class DatabaseError(QuizbankError):
    """Database-related errors."""

    pass


class DatabaseConnectionError(DatabaseError):
    """Failed to open or initialise the question database."""

    def __init__(self, path: Path | str, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"Cannot open database {path}: {detail}")


class SearchExecutionError(DatabaseError):
    """The database rejected a lowered search expression."""

    def __init__(self, kind: str, detail: str) -> None:
        self.kind = kind
        self.detail = detail
        super().__init__(f"Search ({kind}) failed: {detail}")


# Validation Errors
class ValidationError(QuizbankError):
    """Invalid input value."""

    def __init__(self, field: str, value: object, reason: str) -> None:
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {field}: {reason}")
