"""Line-start detection and indentation extraction."""

from __future__ import annotations

import re

from chainindent.buffer import TokenBuffer
from chainindent.tokens import TokenType

LINE_BREAK = r"(?:\r\n|\n|\r)"

_LINE_BREAK_RE = re.compile(LINE_BREAK)
_TRAILING_INDENT_RE = re.compile(LINE_BREAK + r"([ \t]*)\Z")


def has_line_break(text: str) -> bool:
    return _LINE_BREAK_RE.search(text) is not None


def _indent_content_at(tokens: TokenBuffer, index: int) -> str:
    token = tokens[index]
    if token.type not in (TokenType.WHITESPACE, TokenType.INLINE_HTML):
        return ""

    content = token.value
    # "<?php\n" owns the first line break of the file
    if token.type == TokenType.WHITESPACE and index > 0 and tokens[index - 1].type == TokenType.OPEN_TAG:
        content = tokens[index - 1].value + content

    if has_line_break(content):
        return content
    return ""


def indent_at(tokens: TokenBuffer, index: int) -> str | None:
    """Return the indentation that the token at index sets up for the next line.

    That is the horizontal whitespace after the last line break in the
    token's content, or None when the token does not end a line.
    """
    match = _TRAILING_INDENT_RE.search(_indent_content_at(tokens, index))
    if match is None:
        return None
    return match.group(1)
