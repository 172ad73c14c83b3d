"""Test error messages, position accuracy, and context snippets."""

import pytest

from chainindent.buffer import TokenBuffer
from chainindent.errors import LexError, StructureError
from chainindent.lexer import tokenize


class TestErrorPositions:
    def test_unterminated_string_position(self):
        with pytest.raises(LexError) as exc_info:
            tokenize("<?php $a = 'abc")
        err = exc_info.value
        assert err.position.line == 1
        assert err.position.column == 12

    def test_error_on_second_line(self):
        with pytest.raises(LexError) as exc_info:
            tokenize("<?php\n/* open")
        err = exc_info.value
        assert err.position.line == 2
        assert err.position.column == 1


class TestLexErrorFormatting:
    def test_format_contains_line(self):
        with pytest.raises(LexError) as exc_info:
            tokenize("<?php $x = 'more text")
        formatted = exc_info.value.format()
        assert "<?php $x = 'more text" in formatted

    def test_format_contains_carets(self):
        with pytest.raises(LexError) as exc_info:
            tokenize("<?php '")
        assert "^" in exc_info.value.format()

    def test_format_contains_error_prefix(self):
        with pytest.raises(LexError) as exc_info:
            tokenize("<?php '")
        assert exc_info.value.format().startswith("error:")

    def test_format_with_custom_filename(self):
        with pytest.raises(LexError) as exc_info:
            tokenize("<?php '", filename="test.php")
        formatted = exc_info.value.format("test.php")
        assert "test.php:1:7" in formatted


class TestStructureErrorFormatting:
    def test_unclosed_paren_points_at_opener(self):
        source = "<?php\nfoo(1;\n"
        tokens = TokenBuffer(tokenize(source), source)
        with pytest.raises(StructureError) as exc_info:
            tokens.find_block_end(2)
        err = exc_info.value
        assert err.span.start.line == 2
        assert err.span.start.column == 4
        formatted = err.format("q.php")
        assert "unclosed '('" in formatted
        assert "q.php:2:4" in formatted
        assert "foo(1;" in formatted

    def test_synthesized_token_has_no_context(self):
        err = StructureError("unmatched ')'", None)
        assert err.format("x.php") == "error: unmatched ')'\n  --> x.php"
