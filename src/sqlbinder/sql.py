"""
SQLite parameter marker parsing.

Builds the parameter layout of a statement through a single-pass
tokenization:

    SQL → Tokenize → Number markers → Rewrite markers as ?NNN
           (once)      (one pass)       (same pass)

Numbering follows SQLite:
- `?` takes the largest index used so far plus one
- `?NNN` takes index NNN
- `:name`, `@name`, `$name` take a new index on first use and reuse it after;
  a `::` suffix is part of the name and a `$` inside a bare identifier is not
  a marker

Markers inside string literals, quoted identifiers and comments are left
alone. The rewritten SQL uses only `?NNN` markers so it can be executed by
the `sqlite3` driver with a positional tuple.
"""
import logging
import re
from dataclasses import dataclass, field
from enum import Enum, auto

from sqlbinder.cache import cacheable
from sqlbinder.exceptions import QueryError

logger = logging.getLogger(__name__)

__all__ = [
    'TokenType',
    'Token',
    'ParameterLayout',
    'tokenize_sql',
    'parse_parameters',
    'SQLITE_MAX_VARIABLE_NUMBER',
]

SQLITE_MAX_VARIABLE_NUMBER = 32766


class TokenType(Enum):
    """Token types identified during SQL parsing."""
    SQL_TEXT = auto()
    STRING_LITERAL = auto()
    QUOTED_IDENTIFIER = auto()
    COMMENT = auto()
    NUMBERED_PH = auto()        # ? or ?NNN
    NAMED_PH = auto()           # :name, @name, $name


@dataclass(slots=True)
class Token:
    """Token from SQL parsing."""
    type: TokenType
    text: str
    start: int
    end: int


# Master tokenization pattern - captures all token types in one scan
_TOKENIZE = re.compile(r"""
    (?P<string>'(?:[^']|'')*')
    |(?P<identifier>"(?:[^"]|"")*"|`(?:[^`]|``)*`|\[[^\]]*\])
    |(?P<comment>--[^\n]*|/\*.*?(?:\*/|\Z))
    |(?P<numbered>\?\d*)
    |(?P<named>(?<![\w$])[$:@]\w+(?:::\w+)*)
""", re.VERBOSE | re.DOTALL)

_GROUP_TYPES = {
    'string': TokenType.STRING_LITERAL,
    'identifier': TokenType.QUOTED_IDENTIFIER,
    'comment': TokenType.COMMENT,
    'numbered': TokenType.NUMBERED_PH,
    'named': TokenType.NAMED_PH,
}


@dataclass(frozen=True, slots=True)
class ParameterLayout:
    """Parameter slots declared by a statement.

    `names[i]` is the declared name of slot `i + 1` (with its marker
    prefix), or None for a bare `?`. `sql` is the statement text with every
    marker rewritten as `?NNN`.
    """
    sql: str
    names: tuple[str | None, ...] = ()
    indexes: dict[str, int] = field(default_factory=dict, compare=False)

    @property
    def count(self) -> int:
        return len(self.names)

    def index_of(self, name: str) -> int:
        """Slot index of a declared name, or 0 when not declared."""
        return self.indexes.get(name, 0)

    def name_of(self, slot: int) -> str | None:
        if 1 <= slot <= len(self.names):
            return self.names[slot - 1]
        return None


def tokenize_sql(sql: str) -> list[Token]:
    """Parse SQL into tokens in a single pass.

    Parameters
        sql: SQL query string

    Returns
        List of tokens preserving all SQL text
    """
    tokens = []
    last_end = 0

    for match in _TOKENIZE.finditer(sql):
        start, end = match.span()

        if start > last_end:
            tokens.append(Token(
                type=TokenType.SQL_TEXT,
                text=sql[last_end:start],
                start=last_end,
                end=start
            ))

        tokens.append(Token(
            type=_GROUP_TYPES[match.lastgroup],
            text=match.group(0),
            start=start,
            end=end
        ))
        last_end = end

    if last_end < len(sql):
        tokens.append(Token(
            type=TokenType.SQL_TEXT,
            text=sql[last_end:],
            start=last_end,
            end=len(sql)
        ))

    return tokens


def _explicit_index(token: Token) -> int:
    """Index of a `?NNN` marker."""
    number = int(token.text[1:])
    if not 1 <= number <= SQLITE_MAX_VARIABLE_NUMBER:
        raise QueryError(
            f'Variable number must be between ?1 and ?{SQLITE_MAX_VARIABLE_NUMBER}: {token.text}')
    return number


@cacheable('parameter_layouts')
def parse_parameters(sql: str) -> ParameterLayout:
    """Number the parameter markers of a statement.

    Parameters
        sql: SQL query string

    Returns
        ParameterLayout with rewritten SQL, slot names and name lookup

    Raises
        QueryError: a `?NNN` marker is outside 1..32766
    """
    indexes: dict[str, int] = {}
    slot_names: dict[int, str] = {}
    parts = []
    highest = 0

    for token in tokenize_sql(sql):
        if token.type == TokenType.NUMBERED_PH:
            if token.text == '?':
                highest += 1
                index = highest
            else:
                index = _explicit_index(token)
                highest = max(highest, index)
                name = f'?{index}'
                indexes.setdefault(name, index)
                slot_names.setdefault(index, name)

        elif token.type == TokenType.NAMED_PH:
            index = indexes.get(token.text)
            if index is None:
                highest += 1
                index = highest
                indexes[token.text] = index
                slot_names.setdefault(index, token.text)

        else:
            parts.append(token.text)
            continue

        parts.append(f'?{index}')

    names = tuple(slot_names.get(slot) for slot in range(1, highest + 1))
    logger.debug(f'Parsed {highest} parameter slot(s), {len(indexes)} named')
    return ParameterLayout(sql=''.join(parts), names=names, indexes=indexes)
