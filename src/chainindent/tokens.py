"""Token types, data structures, and token classification helpers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    # Outside / around PHP code
    INLINE_HTML = auto()  # text before <?php or after ?>
    OPEN_TAG = auto()  # <?php or <?= plus one whitespace char
    CLOSE_TAG = auto()  # ?> plus one line break

    # Trivia
    WHITESPACE = auto()  # spaces, tabs and line breaks
    COMMENT = auto()  # // ..., # ..., /* ... */
    DOC_COMMENT = auto()  # /** ... */

    # Content
    VARIABLE = auto()  # $name
    IDENTIFIER = auto()  # bare names: functions, methods, constants
    STRING = auto()  # quoted strings, heredoc, nowdoc
    NUMBER = auto()

    # Member access
    OBJECT_OPERATOR = auto()  # ->
    NULLSAFE_OBJECT_OPERATOR = auto()  # ?->

    # Delimiters
    LPAREN = auto()  # (
    RPAREN = auto()  # )
    LBRACE = auto()  # {
    RBRACE = auto()  # }
    LBRACKET = auto()  # [
    RBRACKET = auto()  # ]
    SEMICOLON = auto()  # ;
    COMMA = auto()  # ,

    OPERATOR = auto()  # everything else: = . :: => + ...

    EOF = auto()


@dataclass(frozen=True, slots=True)
class Position:
    """Source position, 1-based line and column, 0-based offset."""

    line: int
    column: int
    offset: int


@dataclass(frozen=True, slots=True)
class Span:
    """Source range from start to end position."""

    start: Position
    end: Position


@dataclass(frozen=True, slots=True)
class Token:
    """A single token. Tokens synthesized or rewritten by the fixer carry no span."""

    type: TokenType
    value: str
    span: Span | None = None


TRIVIA = frozenset({TokenType.WHITESPACE, TokenType.COMMENT, TokenType.DOC_COMMENT})
COMMENTS = frozenset({TokenType.COMMENT, TokenType.DOC_COMMENT})
OBJECT_OPERATORS = frozenset({TokenType.OBJECT_OPERATOR, TokenType.NULLSAFE_OBJECT_OPERATOR})


def is_whitespace(token: Token) -> bool:
    return token.type == TokenType.WHITESPACE


def is_comment(token: Token) -> bool:
    return token.type in COMMENTS


def is_meaningful(token: Token) -> bool:
    """Return True for anything that is not whitespace or a comment."""
    return token.type not in TRIVIA


def is_name_start(ch: str) -> bool:
    """Return True if ch may start a PHP name (ASCII letters, _, bytes >= 0x80)."""
    return ch.isalpha() or ch == "_" or ord(ch) >= 0x80


def is_name_char(ch: str) -> bool:
    return is_name_start(ch) or ch.isdigit()
