"""Tests for the --debug token dump."""

from io import StringIO

from chainindent.debug import dump_tokens
from chainindent.lexer import tokenize
from chainindent.tokens import Token, TokenType


class TestDumpTokens:
    def test_one_line_per_token(self):
        out = StringIO()
        tokens = tokenize("<?php $a;")
        dump_tokens(tokens, file=out)
        lines = out.getvalue().splitlines()
        assert len(lines) == len(tokens)

    def test_line_format(self):
        out = StringIO()
        dump_tokens(tokenize("<?php $a;"), file=out)
        first = out.getvalue().splitlines()[0]
        assert first.split() == ["0", "1:1", "OPEN_TAG", "'<?php", "'"]

    def test_synthesized_token_has_no_location(self):
        out = StringIO()
        dump_tokens([Token(TokenType.WHITESPACE, "\n")], file=out)
        assert out.getvalue() == "    0         - WHITESPACE               '\\n'\n"
