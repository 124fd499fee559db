# Error taxonomy shared by the executor, formatter and shell.
from enum import Enum, auto


class ErrorCategory(Enum):
    CONNECTION = auto()
    QUERY = auto()
    FORMATTING = auto()
    USER_INPUT = auto()
    CONFIG = auto()
    INTERNAL = auto()


class CqlClientException(Exception):
    category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(self, message: str, *, category: ErrorCategory | None = None):
        super().__init__(message)
        if category:
            self.category = category


class CqlConnectionError(CqlClientException):
    """Cluster unreachable, bad credentials, TLS mismatch or a failed keyspace switch."""
    category = ErrorCategory.CONNECTION


class QueryError(CqlClientException):
    """A statement was rejected or failed while executing."""
    category = ErrorCategory.QUERY


class FormattingError(QueryError):
    category = ErrorCategory.FORMATTING


class UserInputError(CqlClientException):
    category = ErrorCategory.USER_INPUT


class ConfigError(CqlClientException):
    category = ErrorCategory.CONFIG


__all__ = [
    'ErrorCategory', 'CqlClientException', 'CqlConnectionError', 'QueryError',
    'FormattingError', 'UserInputError', 'ConfigError'
]
