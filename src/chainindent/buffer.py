"""Index-addressed, editable token sequence with structural lookups."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from chainindent.errors import StructureError
from chainindent.tokens import Token, TokenType, is_meaningful


class TokenBuffer:
    """A mutable token list.

    Structure is never stored; it is recovered on demand by skipping trivia
    and matching parentheses. Indices are stable across replacement and shift
    by one for every insertion at or before them.
    """

    def __init__(self, tokens: Iterable[Token], source: str = "") -> None:
        self._tokens = list(tokens)
        self._source = source

    def __len__(self) -> int:
        return len(self._tokens)

    def __iter__(self) -> Iterator[Token]:
        return iter(self._tokens)

    def __getitem__(self, index: int) -> Token:
        return self._tokens[self._check(index)]

    def __setitem__(self, index: int, token: Token) -> None:
        self._tokens[self._check(index)] = token

    def _check(self, index: int) -> int:
        # Negative indices would silently wrap around
        if not 0 <= index < len(self._tokens):
            raise IndexError(f"token index {index} out of range (0..{len(self._tokens) - 1})")
        return index

    def insert(self, index: int, token: Token) -> None:
        """Insert token before position index (index == len appends)."""
        if not 0 <= index <= len(self._tokens):
            raise IndexError(f"insert position {index} out of range (0..{len(self._tokens)})")
        self._tokens.insert(index, token)

    # ------------------------------------------------------------------
    # Neighbour lookups
    # ------------------------------------------------------------------

    def prev_meaningful(self, index: int) -> int | None:
        """Index of the closest token before index that is not trivia."""
        for i in range(self._check(index) - 1, -1, -1):
            if is_meaningful(self._tokens[i]):
                return i
        return None

    def next_meaningful(self, index: int) -> int | None:
        """Index of the closest token after index that is not trivia."""
        for i in range(self._check(index) + 1, len(self._tokens)):
            if is_meaningful(self._tokens[i]):
                return i
        return None

    def next_of_kind(self, index: int, types: Iterable[TokenType]) -> int | None:
        """Index of the first token after index whose type is in types."""
        wanted = frozenset(types)
        for i in range(self._check(index) + 1, len(self._tokens)):
            if self._tokens[i].type in wanted:
                return i
        return None

    def is_any_type_found(self, types: Iterable[TokenType]) -> bool:
        wanted = frozenset(types)
        return any(t.type in wanted for t in self._tokens)

    # ------------------------------------------------------------------
    # Parenthesis matching
    # ------------------------------------------------------------------

    def find_block_end(self, index: int) -> int:
        """Index of the ')' matching the '(' at index."""
        opener = self[index]
        if opener.type != TokenType.LPAREN:
            raise StructureError(f"expected '(' but found {opener.value!r}", opener.span, self._source)
        depth = 0
        for i in range(index, len(self._tokens)):
            tt = self._tokens[i].type
            if tt == TokenType.LPAREN:
                depth += 1
            elif tt == TokenType.RPAREN:
                depth -= 1
                if depth == 0:
                    return i
        raise StructureError("unclosed '('", opener.span, self._source)

    def find_block_start(self, index: int) -> int:
        """Index of the '(' matching the ')' at index."""
        closer = self[index]
        if closer.type != TokenType.RPAREN:
            raise StructureError(f"expected ')' but found {closer.value!r}", closer.span, self._source)
        depth = 0
        for i in range(index, -1, -1):
            tt = self._tokens[i].type
            if tt == TokenType.RPAREN:
                depth += 1
            elif tt == TokenType.LPAREN:
                depth -= 1
                if depth == 0:
                    return i
        raise StructureError("unmatched ')'", closer.span, self._source)

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def generate_code(self) -> str:
        """Concatenate token values back into source text."""
        return "".join(t.value for t in self._tokens)
