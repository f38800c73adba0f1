"""
Host value bridge.

Classifies Python values into the closed set of kinds the binder works
with. The binder only ever inspects `HostValue.kind`; all isinstance
checks against host types (NumPy, Pandas, PyArrow included) live here.

- Null: None, pandas.NA, pandas.NaT, NaT numpy datetimes
- Number: bool, int, float, numpy numeric scalars, Decimal
- Text: str
- ByteBuffer: bytes, bytearray, memoryview
- ArrayLike: sequences, ndarrays, arrow arrays, series, objects with `length`
- PlainMap: mappings
- Other: everything else
"""
import decimal
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any

import numpy as np
import pandas as pd
import pyarrow as pa

__all__ = [
    'ValueKind',
    'HostValue',
    'classify',
    'CONTAINER_KINDS',
]


class ValueKind(Enum):
    """Capability tag of a host value."""
    NUMBER = auto()
    TEXT = auto()
    BYTES = auto()
    NULL = auto()
    ARRAY = auto()
    MAP = auto()
    OTHER = auto()


CONTAINER_KINDS = frozenset({ValueKind.ARRAY, ValueKind.MAP})


@dataclass(frozen=True, slots=True)
class HostValue:
    """A classified host value.

    `value` is the normalized payload: `int`/`float` for numbers, `str` for
    text, `bytes` for buffers, the original container for arrays and maps.
    `length` is only set for array-likes and is whatever the host reported,
    unvalidated.
    """
    kind: ValueKind
    value: Any = None
    length: Any = None

    @property
    def type_name(self) -> str:
        return type(self.value).__name__

    def element(self, index: int) -> 'HostValue':
        """Classified element `index` of an array-like; missing elements are null."""
        try:
            item = self.value[index]
        except (IndexError, KeyError):
            return NULL
        return classify(item)

    def items(self) -> Iterator[tuple[Any, 'HostValue']]:
        """Classified (key, value) pairs of a map in iteration order."""
        for key, item in self.value.items():
            yield key, classify(item)


NULL = HostValue(ValueKind.NULL)


def _number(value: Any) -> HostValue:
    return HostValue(ValueKind.NUMBER, value)


def _classify_numpy(value: np.generic) -> HostValue:
    # timedelta64 subclasses signedinteger
    if isinstance(value, np.datetime64 | np.timedelta64):
        return NULL if np.isnat(value) else HostValue(ValueKind.OTHER, value)
    if isinstance(value, np.bool_):
        return _number(int(value))
    if isinstance(value, np.integer | np.floating):
        return _number(value.item())
    return HostValue(ValueKind.OTHER, value)


def _classify_decimal(value: decimal.Decimal) -> HostValue:
    if value.is_snan():
        return HostValue(ValueKind.OTHER, value)
    if value.is_finite() and value == value.to_integral_value():
        return _number(int(value))
    return _number(float(value))


def classify(value: Any) -> HostValue:
    """Classify a Python value into a `HostValue`."""
    if isinstance(value, HostValue):
        return value
    if value is None or value is pd.NA or value is pd.NaT:
        return NULL
    if isinstance(value, str):
        return HostValue(ValueKind.TEXT, str(value))
    if isinstance(value, bytes | bytearray | memoryview):
        return HostValue(ValueKind.BYTES, bytes(value))
    if isinstance(value, bool):
        return _number(int(value))
    if isinstance(value, int):
        return _number(int(value))
    if isinstance(value, float):
        return _number(float(value))
    if isinstance(value, np.ndarray):
        if value.ndim == 0:
            return classify(value.item())
        return HostValue(ValueKind.ARRAY, value, len(value))
    if isinstance(value, np.generic):
        return _classify_numpy(value)
    if isinstance(value, decimal.Decimal):
        return _classify_decimal(value)
    if isinstance(value, pa.Scalar):
        return classify(value.as_py())
    if isinstance(value, pa.Array | pa.ChunkedArray):
        return HostValue(ValueKind.ARRAY, value, len(value))
    if isinstance(value, pd.Series):
        items = value.tolist()
        return HostValue(ValueKind.ARRAY, items, len(items))
    if isinstance(value, Mapping):
        return HostValue(ValueKind.MAP, value)
    if isinstance(value, Sequence):
        return HostValue(ValueKind.ARRAY, value, len(value))
    if hasattr(value, 'length') and hasattr(value, '__getitem__'):
        return HostValue(ValueKind.ARRAY, value, getattr(value, 'length'))
    return HostValue(ValueKind.OTHER, value)
