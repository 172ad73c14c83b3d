"""Single-token predicates used by the chain indentation fixer."""

from __future__ import annotations

from enum import Enum, auto

from chainindent.config import FixerConfig
from chainindent.tokens import OBJECT_OPERATORS, Token, TokenType


class MarkerKind(Enum):
    OPEN = auto()  # starts a nested block: following links indent one level
    CLOSE = auto()  # ends a nested block: this link dedents one level
    PLAIN = auto()


def is_chain_link(token: Token) -> bool:
    """Return True for '->' and '?->'."""
    return token.type in OBJECT_OPERATORS


def is_bare_variable(token: Token) -> bool:
    return token.type == TokenType.VARIABLE


def classify_marker(token: Token, config: FixerConfig) -> MarkerKind:
    if token.type != TokenType.IDENTIFIER:
        return MarkerKind.PLAIN
    if token.value in config.open_markers:
        return MarkerKind.OPEN
    if token.value in config.close_markers:
        return MarkerKind.CLOSE
    return MarkerKind.PLAIN


def is_open_marker(token: Token, config: FixerConfig) -> bool:
    return classify_marker(token, config) is MarkerKind.OPEN


def is_close_marker(token: Token, config: FixerConfig) -> bool:
    return classify_marker(token, config) is MarkerKind.CLOSE
