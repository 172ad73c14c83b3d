"""Test the single-token predicates."""

from chainindent.classify import (
    MarkerKind,
    classify_marker,
    is_bare_variable,
    is_chain_link,
    is_close_marker,
    is_open_marker,
)
from chainindent.config import FixerConfig
from chainindent.tokens import Token, TokenType

CONFIG = FixerConfig()


def _ident(name: str) -> Token:
    return Token(TokenType.IDENTIFIER, name)


class TestChainLink:
    def test_object_operators(self):
        assert is_chain_link(Token(TokenType.OBJECT_OPERATOR, "->"))
        assert is_chain_link(Token(TokenType.NULLSAFE_OBJECT_OPERATOR, "?->"))

    def test_other_operators(self):
        assert not is_chain_link(Token(TokenType.OPERATOR, "::"))
        assert not is_chain_link(Token(TokenType.OPERATOR, "=>"))


class TestMarkers:
    def test_default_open_markers(self):
        assert is_open_marker(_ident("andClause"), CONFIG)
        assert is_open_marker(_ident("orClause"), CONFIG)
        assert not is_open_marker(_ident("endClause"), CONFIG)

    def test_default_close_marker(self):
        assert is_close_marker(_ident("endClause"), CONFIG)
        assert not is_close_marker(_ident("andWhere"), CONFIG)

    def test_match_is_case_sensitive(self):
        assert classify_marker(_ident("ANDCLAUSE"), CONFIG) is MarkerKind.PLAIN

    def test_only_identifiers_are_markers(self):
        assert classify_marker(Token(TokenType.STRING, "andClause"), CONFIG) is MarkerKind.PLAIN
        assert classify_marker(Token(TokenType.VARIABLE, "$andClause"), CONFIG) is MarkerKind.PLAIN

    def test_custom_sets(self):
        config = FixerConfig(open_markers={"group"}, close_markers={"ungroup"})
        assert classify_marker(_ident("group"), config) is MarkerKind.OPEN
        assert classify_marker(_ident("ungroup"), config) is MarkerKind.CLOSE
        assert classify_marker(_ident("andClause"), config) is MarkerKind.PLAIN


class TestBareVariable:
    def test_variable(self):
        assert is_bare_variable(Token(TokenType.VARIABLE, "$query"))

    def test_identifier(self):
        assert not is_bare_variable(_ident("query"))
