"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from chainindent.buffer import TokenBuffer
from chainindent.config import FixerConfig
from chainindent.fixer import MethodChainingIndentationFixer
from chainindent.lexer import tokenize
from chainindent.tokens import Token, TokenType


@pytest.fixture
def lex():
    """Return a helper that tokenizes source and returns tokens (excluding EOF)."""

    def _lex(source: str) -> list[Token]:
        tokens = tokenize(source)
        # Strip trailing EOF for convenience
        return [t for t in tokens if t.type != TokenType.EOF]

    return _lex


@pytest.fixture
def buffer():
    """Return a helper that tokenizes source into a TokenBuffer."""

    def _buffer(source: str) -> TokenBuffer:
        return TokenBuffer(tokenize(source), source)

    return _buffer


@pytest.fixture
def fix():
    """Return a helper that runs the fixer over source and returns the new source."""

    def _fix(source: str, config: FixerConfig | None = None) -> str:
        tokens = TokenBuffer(tokenize(source), source)
        MethodChainingIndentationFixer(config).fix(tokens)
        return tokens.generate_code()

    return _fix


def assert_types(tokens: list[Token], expected: list[TokenType]) -> None:
    """Assert that the token types match the expected list."""
    actual = [t.type for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def assert_values(tokens: list[Token], expected: list[str]) -> None:
    """Assert that the token values match the expected list."""
    actual = [t.value for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def nth_index(tokens: TokenBuffer, value: str, n: int = 0) -> int:
    """Return the index of the n-th token (0-based) whose value is value."""
    seen = 0
    for i, tok in enumerate(tokens):
        if tok.value == value:
            if seen == n:
                return i
            seen += 1
    raise AssertionError(f"token {value!r} #{n} not found")
