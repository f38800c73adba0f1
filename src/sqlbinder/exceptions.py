"""
Parameter binding exception classes.

Every failure met while binding is a `BindError` carrying a `BindErrorKind`
and the slot index or parameter name it concerns. `Binder.bind` returns
these inside a `BindOutcome` instead of letting them escape.
"""
import sqlite3
from enum import Enum


class DatabaseError(Exception):
    """Base class for all sqlbinder errors.
    """


class QueryError(DatabaseError):
    """Error in query text, such as an invalid parameter marker.
    """


class StatementError(DatabaseError):
    """Error reported by a prepared statement's own setters.
    """


class ValidationError(DatabaseError):
    """Error in input validation.
    """


class BindErrorKind(Enum):
    """Terminal failure kinds of a bind call."""
    PARAMETER_INDEX_OUT_OF_RANGE = 'ParameterIndexOutOfRange'
    UNKNOWN_PARAMETER_NAME = 'UnknownParameterName'
    INVALID_ARRAY_LENGTH = 'InvalidArrayLength'
    UNSUPPORTED_VALUE_TYPE = 'UnsupportedValueType'
    UNSUPPORTED_NESTED_TYPE = 'UnsupportedNestedType'
    UNDERLYING_BIND_FAILURE = 'UnderlyingBindFailure'
    MISSING_PARAMETER_VALUE = 'MissingParameterValue'


class BindError(ValidationError):
    """Base class for recoverable binding failures.

    :param message: Human-readable description.
    :param slot: 1-based slot index implicated, if any.
    :param name: Parameter name or map key implicated, if any.
    """
    kind: BindErrorKind

    def __init__(self, message: str, slot: int | None = None,
                 name: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.slot = slot
        self.name = name

    def __repr__(self) -> str:
        return (f'{type(self).__name__}({self.message!r}, '
                f'slot={self.slot!r}, name={self.name!r})')


class ParameterIndexOutOfRange(BindError):
    """Slot index is below 1 or above the declared parameter count.
    """
    kind = BindErrorKind.PARAMETER_INDEX_OUT_OF_RANGE


class UnknownParameterName(BindError):
    """Map key does not resolve under any naming convention.
    """
    kind = BindErrorKind.UNKNOWN_PARAMETER_NAME


class InvalidArrayLength(BindError):
    """Array-like length is missing, negative, non-finite or non-integral.
    """
    kind = BindErrorKind.INVALID_ARRAY_LENGTH


class UnsupportedValueType(BindError):
    """Value kind cannot be bound to a slot.
    """
    kind = BindErrorKind.UNSUPPORTED_VALUE_TYPE


class UnsupportedNestedType(BindError):
    """Array or map found inside an array element or map value.
    """
    kind = BindErrorKind.UNSUPPORTED_NESTED_TYPE


class UnderlyingBindFailure(BindError):
    """The statement's setter rejected the value.
    """
    kind = BindErrorKind.UNDERLYING_BIND_FAILURE


class MissingParameterValue(BindError):
    """A declared slot was left unbound when every slot was required.
    """
    kind = BindErrorKind.MISSING_PARAMETER_VALUE


SetterError = (
    StatementError,
    sqlite3.Error,
    OverflowError,
    MemoryError,
    )
