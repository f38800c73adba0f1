from dataclasses import dataclass

from libb import ConfigOptions

__all__ = [
    'BinderOptions',
    'MAX_SAFE_INTEGER',
    'INT64_MAX',
]

MAX_SAFE_INTEGER = 2**53 - 1
INT64_MAX = 2**63 - 1


@dataclass
class BinderOptions(ConfigOptions):
    """Options

    - max_exact_integer: Largest magnitude bound through the integer setter.
      Numbers beyond it bind as doubles (default: 2**53 - 1)
    - require_all_parameters: Fail when any declared slot is left unbound
      (default: False)
    - max_error_value_length: Truncation length for values quoted in error
      messages (default: 200)
    """
    max_exact_integer: int = MAX_SAFE_INTEGER
    require_all_parameters: bool = False
    max_error_value_length: int = 200

    def __post_init__(self):
        if isinstance(self.max_exact_integer, bool) or not isinstance(self.max_exact_integer, int):
            raise ValueError('max_exact_integer must be an integer')
        if not 0 <= self.max_exact_integer <= INT64_MAX:
            raise ValueError(f'max_exact_integer must be between 0 and {INT64_MAX}')
        if self.max_error_value_length < 1:
            raise ValueError('max_error_value_length must be positive')
