"""
Bind host values to the parameter slots of a prepared statement.

Each top-level value commits to exactly one binding mode, chosen by its
kind:

- array-like: positional, element ``i`` goes to anonymous slot ``i + 1``
- plain map: named, each key resolved against the declared names, first
  verbatim and then with each prefix of `NAME_PREFIXES`
- anything else: a single scalar on anonymous slot 1

Only one level of structure is unwrapped; a container found inside an
array element or map value is rejected. The first failure ends the call
and slots already written stay written.

A map bound onto a statement that already received positional values in
an earlier call is the caller's responsibility: the binder neither resets
nor merges those slots.

Usage:
    binder = Binder(statement)
    outcome = binder.bind({'id': 7, 'name': 'x'})
    if not outcome:
        print(outcome.kind, outcome.message)
"""
import logging
import math
import numbers
from dataclasses import dataclass
from typing import Any

from sqlbinder.exceptions import BindError, BindErrorKind, InvalidArrayLength
from sqlbinder.exceptions import MissingParameterValue, ParameterIndexOutOfRange
from sqlbinder.exceptions import SetterError, UnderlyingBindFailure
from sqlbinder.exceptions import UnknownParameterName, UnsupportedNestedType
from sqlbinder.exceptions import UnsupportedValueType
from sqlbinder.options import BinderOptions
from sqlbinder.statement import PreparedStatement
from sqlbinder.utils import format_value_for_error
from sqlbinder.values import CONTAINER_KINDS, HostValue, ValueKind, classify

logger = logging.getLogger(__name__)

__all__ = [
    'Binder',
    'BindOutcome',
    'NAME_PREFIXES',
]

# Declared parameter names keep their marker, tried in this order
NAME_PREFIXES = (':', '@', '$')


@dataclass(frozen=True, slots=True)
class BindOutcome:
    """Result of one bind call.

    `slots` lists the slots written, in order, including those written
    before a failure.
    """
    slots: tuple[int, ...] = ()
    error: BindError | None = None

    def __bool__(self) -> bool:
        return self.error is None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> BindErrorKind | None:
        return None if self.error is None else self.error.kind

    @property
    def message(self) -> str | None:
        return None if self.error is None else self.error.message

    def raise_for_error(self) -> None:
        """Raise the captured error, if any."""
        if self.error is not None:
            raise self.error


class Binder:
    """Parameter binder for one prepared statement.

    Holds no state between calls other than the last error, kept for
    `get_error()`. Not safe for concurrent calls on the same statement.
    """

    def __init__(self, statement: PreparedStatement,
                 options: BinderOptions | None = None) -> None:
        self.statement = statement
        self.options = options or BinderOptions()
        self._error: BindError | None = None

    def bind(self, value: Any) -> BindOutcome:
        """Bind a single top-level value.
        """
        return self.bind_args(value)

    def bind_args(self, *values: Any) -> BindOutcome:
        """Bind several top-level values, sharing the anonymous slot cursor.

        Scalars take the next anonymous slot, arrays continue from the
        cursor and maps bind by name.
        """
        written: list[int] = []
        self._error = None
        try:
            cursor = 0
            for value in values:
                cursor = self._bind_top_level(classify(value), cursor, written)
            if self.options.require_all_parameters:
                self._check_complete(written)
        except BindError as err:
            self._error = err
            logger.debug(f'Bind failed after {len(written)} slot(s): {err.kind.value}: {err}')
            return BindOutcome(tuple(written), err)

        logger.debug(f'Bound {len(written)} of {self.statement.parameter_count} slot(s)')
        return BindOutcome(tuple(written))

    def get_error(self) -> str | None:
        """Message of the last failed call, None if the last call succeeded."""
        return None if self._error is None else self._error.message

    def _bind_top_level(self, host: HostValue, cursor: int, written: list[int]) -> int:
        if host.kind is ValueKind.ARRAY:
            logger.debug(f'Binding {host.type_name} positionally from slot {cursor + 1}')
            return self._bind_array(host, cursor, written)
        if host.kind is ValueKind.MAP:
            logger.debug(f'Binding {host.type_name} by name')
            self._bind_map(host, written)
            return cursor
        logger.debug(f'Binding {host.kind.name} scalar to slot {cursor + 1}')
        cursor += 1
        self._bind_scalar(host, cursor, written)
        return cursor

    def _bind_array(self, host: HostValue, cursor: int, written: list[int]) -> int:
        length = self._array_length(host)
        for index in range(length):
            element = host.element(index)
            cursor += 1
            self._bind_scalar(element, cursor, written)
        return cursor

    def _bind_map(self, host: HostValue, written: list[int]) -> None:
        for key, item in host.items():
            slot = self._resolve_name(key)
            self._bind_scalar(item, slot, written, name=key)

    def _array_length(self, host: HostValue) -> int:
        length = host.length
        if isinstance(length, bool) or not isinstance(length, numbers.Real):
            raise InvalidArrayLength(
                f'Array length must be a number, got {type(length).__name__}')
        if not math.isfinite(length) or length < 0 or length != int(length):
            raise InvalidArrayLength(
                f'Array length must be a finite non-negative integer, got {length!r}')
        return int(length)

    def _resolve_name(self, key: Any) -> int:
        """Slot of a map key, trying the key itself then each prefixed form."""
        if not isinstance(key, str) or not key:
            raise UnknownParameterName(
                f'Named parameters must be non-empty strings, got {key!r}', name=str(key))
        slot = self.statement.parameter_index(key)
        if slot:
            return slot
        for prefix in NAME_PREFIXES:
            slot = self.statement.parameter_index(prefix + key)
            if slot:
                return slot
        raise UnknownParameterName(f'Missing named parameter "{key}"', name=key)

    def _label(self, slot: int, name: str | None) -> str:
        if name is None:
            return f'parameter {slot}'
        return f'parameter "{name}" (slot {slot})'

    def _check_slot(self, slot: int, name: str | None) -> None:
        count = self.statement.parameter_count
        if not 1 <= slot <= count:
            raise ParameterIndexOutOfRange(
                f'Too many parameter values were provided: {self._label(slot, name)} '
                f'exceeds the {count} declared', slot=slot, name=name)

    def _bind_scalar(self, host: HostValue, slot: int, written: list[int],
                     name: str | None = None) -> None:
        self._check_slot(slot, name)
        kind = host.kind

        if kind is ValueKind.NUMBER:
            self._bind_number(host, slot, name)
        elif kind is ValueKind.TEXT:
            self._bind_text(host, slot, name)
        elif kind is ValueKind.BYTES:
            self._call(self.statement.bind_blob, slot, name, host.value)
        elif kind is ValueKind.NULL:
            self._call(self.statement.bind_null, slot, name)
        elif kind in CONTAINER_KINDS:
            raise UnsupportedNestedType(
                f'Cannot bind nested {host.type_name} to {self._label(slot, name)}: '
                'arrays and maps are only unwrapped at the top level',
                slot=slot, name=name)
        else:
            raise UnsupportedValueType(
                f'Cannot bind value of type {host.type_name} to {self._label(slot, name)}: '
                f'{self._render(host.value)}', slot=slot, name=name)

        written.append(slot)

    def _bind_number(self, host: HostValue, slot: int, name: str | None) -> None:
        value = host.value
        limit = self.options.max_exact_integer

        if isinstance(value, int):
            if -limit <= value <= limit:
                self._call(self.statement.bind_int, slot, name, value)
                return
            try:
                value = float(value)
            except OverflowError as exc:
                raise UnsupportedValueType(
                    f'Cannot bind integer to {self._label(slot, name)}: '
                    'too large for a double', slot=slot, name=name) from exc
        elif math.isfinite(value) and value.is_integer() and -limit <= value <= limit:
            self._call(self.statement.bind_int, slot, name, int(value))
            return

        self._call(self.statement.bind_double, slot, name, float(value))

    def _bind_text(self, host: HostValue, slot: int, name: str | None) -> None:
        try:
            data = host.value.encode('utf-8')
        except UnicodeEncodeError as exc:
            raise UnsupportedValueType(
                f'Cannot bind text to {self._label(slot, name)}: not encodable as UTF-8',
                slot=slot, name=name) from exc
        self._call(self.statement.bind_text, slot, name, data)

    def _call(self, setter, slot: int, name: str | None, *args: Any) -> None:
        try:
            setter(slot, *args)
        except SetterError as exc:
            raise UnderlyingBindFailure(
                f'Failed to bind {self._label(slot, name)}: {exc}',
                slot=slot, name=name) from exc

    def _check_complete(self, written: list[int]) -> None:
        bound = set(written)
        for slot in range(1, self.statement.parameter_count + 1):
            if slot not in bound:
                name = self.statement.parameter_name(slot)
                raise MissingParameterValue(
                    f'Too few parameter values were provided: {self._label(slot, name)} '
                    'was not bound', slot=slot, name=name)

    def _render(self, value: Any) -> str:
        return format_value_for_error(value, self.options.max_error_value_length)
