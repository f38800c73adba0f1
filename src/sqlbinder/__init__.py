"""
Bind Python values to the parameters of prepared SQL statements.

Values bind in one of three modes chosen by their shape:
- Sequences bind positionally: bind(stmt, ['a', 5, None])
- Mappings bind by name: bind(stmt, {'id': 7, 'name': 'x'})
- Anything else binds to the first slot: bind(stmt, 'solo')

Bind calls return a `BindOutcome` rather than raising; use
`outcome.raise_for_error()` to turn a failure into an exception.
"""
__version__ = '0.1.0'

import sqlite3
from typing import Any

from sqlbinder.binder import NAME_PREFIXES, Binder, BindOutcome
from sqlbinder.exceptions import BindError, BindErrorKind, DatabaseError
from sqlbinder.exceptions import InvalidArrayLength, MissingParameterValue
from sqlbinder.exceptions import ParameterIndexOutOfRange, QueryError
from sqlbinder.exceptions import StatementError, UnderlyingBindFailure
from sqlbinder.exceptions import UnknownParameterName, UnsupportedNestedType
from sqlbinder.exceptions import UnsupportedValueType, ValidationError
from sqlbinder.options import BinderOptions
from sqlbinder.statement import PreparedStatement, SqliteStatement
from sqlbinder.values import HostValue, ValueKind, classify


def prepare(sql: str) -> SqliteStatement:
    """Create a SQLite statement for the given SQL text.
    """
    return SqliteStatement(sql)


def bind(statement: PreparedStatement, value: Any,
         options: BinderOptions | None = None) -> BindOutcome:
    """Bind a single value (scalar, sequence or mapping) to a statement.
    """
    return Binder(statement, options).bind(value)


def bind_args(statement: PreparedStatement, *values: Any,
              options: BinderOptions | None = None) -> BindOutcome:
    """Bind several values to a statement, continuing anonymous slots across them.
    """
    return Binder(statement, options).bind_args(*values)


def execute(cn: sqlite3.Connection, sql: str, *values: Any,
            options: BinderOptions | None = None) -> sqlite3.Cursor:
    """Prepare, bind and execute a statement on a sqlite3 connection.

    Every declared parameter must receive a value unless `options` says
    otherwise. Raises the `BindError` of a failed bind.
    """
    statement = prepare(sql)
    options = options or BinderOptions(require_all_parameters=True)
    bind_args(statement, *values, options=options).raise_for_error()
    return statement.execute(cn)


__all__ = [
    'prepare',
    'bind',
    'bind_args',
    'execute',
    'Binder',
    'BindOutcome',
    'BinderOptions',
    'NAME_PREFIXES',
    'PreparedStatement',
    'SqliteStatement',
    'HostValue',
    'ValueKind',
    'classify',
    'DatabaseError',
    'ValidationError',
    'QueryError',
    'StatementError',
    'BindError',
    'BindErrorKind',
    'ParameterIndexOutOfRange',
    'UnknownParameterName',
    'InvalidArrayLength',
    'UnsupportedValueType',
    'UnsupportedNestedType',
    'UnderlyingBindFailure',
    'MissingParameterValue',
]
