"""
Prepared statement handles.

`PreparedStatement` is the interface the binder writes through: a
declared parameter count, name-to-slot lookup and one setter per scalar
type, all using 1-based slot indices. Setters signal failure by raising
(see `sqlbinder.exceptions.SetterError`).

`SqliteStatement` implements it for the standard `sqlite3` driver. It
holds the bound values itself and hands them over as a positional tuple
when executed.
"""
import logging
import sqlite3
from typing import Any, Protocol, runtime_checkable

from sqlbinder.exceptions import StatementError
from sqlbinder.sql import ParameterLayout, parse_parameters

logger = logging.getLogger(__name__)

__all__ = [
    'PreparedStatement',
    'SqliteStatement',
    'SQLITE_MAX_LENGTH',
]

SQLITE_MAX_LENGTH = 1_000_000_000
INT64_MIN = -2**63
INT64_MAX = 2**63 - 1


@runtime_checkable
class PreparedStatement(Protocol):
    """Parameter metadata and setters of a prepared statement."""

    @property
    def parameter_count(self) -> int: ...

    def parameter_index(self, name: str) -> int: ...

    def parameter_name(self, slot: int) -> str | None: ...

    def bind_int(self, slot: int, value: int) -> None: ...

    def bind_double(self, slot: int, value: float) -> None: ...

    def bind_text(self, slot: int, data: bytes) -> None: ...

    def bind_blob(self, slot: int, data: bytes) -> None: ...

    def bind_null(self, slot: int) -> None: ...


class SqliteStatement:
    """SQLite statement with its own parameter slots.

    Callers must not bind the same statement from several threads at once.
    """

    def __init__(self, sql: str, max_length: int = SQLITE_MAX_LENGTH) -> None:
        """Initialize statement.

        Args:
            sql: Statement text using ?, ?NNN, :name, @name or $name markers
            max_length: Largest text or blob accepted by the setters, in bytes
        """
        self.sql = sql
        self.layout: ParameterLayout = parse_parameters(sql)
        self.max_length = max_length
        self._values: list[Any] = [None] * self.layout.count

    def __repr__(self) -> str:
        return f'SqliteStatement({self.sql!r}, parameters={self.parameter_count})'

    @property
    def parameter_count(self) -> int:
        return self.layout.count

    @property
    def values(self) -> tuple:
        """Bound values in slot order; unbound slots are None."""
        return tuple(self._values)

    def parameter_index(self, name: str) -> int:
        return self.layout.index_of(name)

    def parameter_name(self, slot: int) -> str | None:
        return self.layout.name_of(slot)

    def _check_slot(self, slot: int) -> None:
        if not 1 <= slot <= self.layout.count:
            raise StatementError(f'column index out of range: {slot}')

    def _check_length(self, data: bytes) -> None:
        if len(data) > self.max_length:
            raise StatementError('string or blob too big')

    def bind_int(self, slot: int, value: int) -> None:
        self._check_slot(slot)
        if not INT64_MIN <= value <= INT64_MAX:
            raise OverflowError('Python int too large to convert to SQLite INTEGER')
        self._values[slot - 1] = int(value)

    def bind_double(self, slot: int, value: float) -> None:
        self._check_slot(slot)
        self._values[slot - 1] = float(value)

    def bind_text(self, slot: int, data: bytes) -> None:
        self._check_slot(slot)
        self._check_length(data)
        try:
            self._values[slot - 1] = data.decode('utf-8')
        except UnicodeDecodeError as exc:
            raise StatementError(f'text is not valid UTF-8: {exc}') from exc

    def bind_blob(self, slot: int, data: bytes) -> None:
        self._check_slot(slot)
        self._check_length(data)
        self._values[slot - 1] = bytes(data)

    def bind_null(self, slot: int) -> None:
        self._check_slot(slot)
        self._values[slot - 1] = None

    def clear_bindings(self) -> None:
        """Reset every slot to NULL."""
        self._values = [None] * self.layout.count

    def execute(self, connection: sqlite3.Connection) -> sqlite3.Cursor:
        """Execute the statement with the bound values.
        """
        logger.debug(f'SQL:\n{self.layout.sql}\nargs: {self.parameter_count} bound')
        return connection.execute(self.layout.sql, self.values)
