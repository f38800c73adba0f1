"""Formatting helpers for binding error messages.
"""
from typing import Any


def format_value_for_error(value: Any, max_length: int = 200, max_bytes: int = 32) -> str:
    """Render a value for inclusion in an error message.

    Strings and reprs are capped at `max_length` characters, byte buffers
    show a hex prefix of at most `max_bytes` bytes plus their length.
    """
    if isinstance(value, bytes | bytearray | memoryview):
        data = bytes(value)
        if len(data) <= max_bytes:
            return f'<bytes len={len(data)} hex={data.hex()}>'
        return f'<bytes len={len(data)} hex={data[:max_bytes].hex()}...>'
    text = repr(value)
    if len(text) <= max_length:
        return text
    return text[:max_length] + '...'
