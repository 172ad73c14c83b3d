"""Test the token buffer: access, insertion, neighbour lookups and matching."""

import pytest

from chainindent.errors import StructureError
from chainindent.tokens import Token, TokenType

from .conftest import nth_index


class TestAccess:
    def test_len_and_getitem(self, buffer):
        tokens = buffer("<?php $a;")
        assert len(tokens) == 4  # open tag, $a, ;, EOF
        assert tokens[1].value == "$a"

    def test_negative_index_is_rejected(self, buffer):
        tokens = buffer("<?php $a;")
        with pytest.raises(IndexError):
            tokens[-1]

    def test_out_of_range(self, buffer):
        tokens = buffer("<?php $a;")
        with pytest.raises(IndexError):
            tokens[len(tokens)]

    def test_replace_keeps_indices(self, buffer):
        tokens = buffer("<?php $a ;")
        tokens[2] = Token(TokenType.WHITESPACE, "\n")
        assert tokens[3].value == ";"
        assert tokens.generate_code() == "<?php $a\n;"

    def test_insert_shifts_following_indices(self, buffer):
        tokens = buffer("<?php $a;")
        tokens.insert(2, Token(TokenType.WHITESPACE, " "))
        assert tokens[3].value == ";"
        assert tokens.generate_code() == "<?php $a ;"

    def test_insert_out_of_range(self, buffer):
        tokens = buffer("<?php $a;")
        with pytest.raises(IndexError):
            tokens.insert(-1, Token(TokenType.WHITESPACE, " "))


class TestNeighbours:
    def test_prev_meaningful_skips_trivia(self, buffer):
        tokens = buffer("<?php $a /* c */ // d\n ;")
        semi = nth_index(tokens, ";")
        assert tokens.prev_meaningful(semi) == 1

    def test_next_meaningful_skips_trivia(self, buffer):
        tokens = buffer("<?php $a /** doc */\n ->b")
        nxt = tokens.next_meaningful(1)
        assert tokens[nxt].value == "->"

    def test_prev_meaningful_at_start(self, buffer):
        tokens = buffer("<?php $a;")
        assert tokens.prev_meaningful(0) is None

    def test_next_meaningful_reaches_eof(self, buffer):
        tokens = buffer("<?php $a ")
        assert tokens[tokens.next_meaningful(1)].type == TokenType.EOF

    def test_next_of_kind(self, buffer):
        tokens = buffer("<?php $a->b->c();")
        idx = tokens.next_of_kind(2, [TokenType.LPAREN, TokenType.SEMICOLON])
        assert tokens[idx].value == "("

    def test_next_of_kind_not_found(self, buffer):
        tokens = buffer("<?php $a;")
        assert tokens.next_of_kind(1, [TokenType.LPAREN]) is None

    def test_is_any_type_found(self, buffer):
        tokens = buffer("<?php $a?->b;")
        assert tokens.is_any_type_found([TokenType.NULLSAFE_OBJECT_OPERATOR])
        assert not tokens.is_any_type_found([TokenType.OBJECT_OPERATOR])


class TestBlockMatching:
    def test_find_block_end_nested(self, buffer):
        tokens = buffer("<?php f(a(b), (c));")
        opener = nth_index(tokens, "(")
        assert tokens.find_block_end(opener) == nth_index(tokens, ")", 2)

    def test_find_block_start_nested(self, buffer):
        tokens = buffer("<?php f(a(b), (c));")
        closer = nth_index(tokens, ")", 2)
        assert tokens.find_block_start(closer) == nth_index(tokens, "(")

    def test_unclosed_paren(self, buffer):
        tokens = buffer("<?php f(a;")
        with pytest.raises(StructureError, match="unclosed"):
            tokens.find_block_end(nth_index(tokens, "("))

    def test_unmatched_close(self, buffer):
        tokens = buffer("<?php a);")
        with pytest.raises(StructureError, match="unmatched"):
            tokens.find_block_start(nth_index(tokens, ")"))

    def test_wrong_token_kind(self, buffer):
        tokens = buffer("<?php a;")
        with pytest.raises(StructureError, match="expected '\\('"):
            tokens.find_block_end(1)
