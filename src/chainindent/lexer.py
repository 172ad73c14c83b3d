"""PHP lexer: converts source text into a flat token stream.

Only as much of PHP is recognised as the indentation fixer needs: tags,
trivia, names, variables, literals, member-access operators and delimiters.
Everything else becomes an OPERATOR token. Concatenating the values of all
tokens always reproduces the source exactly.
"""

from __future__ import annotations

from enum import Enum, auto

from chainindent.errors import LexError
from chainindent.tokens import Position, Span, Token, TokenType, is_name_char, is_name_start

_WS_CHARS = " \t\n\r\v\f"

_SINGLE = {
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    ";": TokenType.SEMICOLON,
    ",": TokenType.COMMA,
}

# Longest first so that maximal munch wins
_OPERATORS = sorted(
    [
        "<=>", "**=", "...", "<<=", ">>=", "===", "!==", "??=",
        "::", "=>", "++", "--", "+=", "-=", "*=", "/=", ".=", "%=",
        "&=", "|=", "^=", "==", "!=", "<>", "<=", ">=", "&&", "||",
        "??", "<<", ">>", "**", "#[",
    ],
    key=len,
    reverse=True,
)  # fmt: skip


class _State(Enum):
    HTML = auto()
    PHP = auto()


class Lexer:
    """Tokenize PHP source text into a stream of Token objects."""

    def __init__(self, source: str, filename: str = "input.php") -> None:
        self._source = source
        self._filename = filename
        self._pos = 0
        self._line = 1
        self._col = 1
        self._tokens: list[Token] = []
        self._state = _State.HTML

    def tokenize(self) -> list[Token]:
        """Tokenize the full source and return the token list."""
        while self._pos < len(self._source):
            if self._state == _State.HTML:
                self._lex_inline_html()
            else:
                self._lex_php()

        self._emit(TokenType.EOF, "")
        return self._tokens

    # ------------------------------------------------------------------
    # Position helpers
    # ------------------------------------------------------------------

    def _current_pos(self) -> Position:
        return Position(self._line, self._col, self._pos)

    def _peek(self, offset: int = 0) -> str:
        idx = self._pos + offset
        if idx < len(self._source):
            return self._source[idx]
        return ""

    def _startswith(self, text: str) -> bool:
        return self._source.startswith(text, self._pos)

    def _advance(self) -> str:
        ch = self._source[self._pos]
        self._pos += 1
        if ch == "\n":
            self._line += 1
            self._col = 1
        else:
            self._col += 1
        return ch

    def _advance_to(self, end: int) -> None:
        while self._pos < end:
            self._advance()

    def _emit(self, tt: TokenType, value: str, start: Position | None = None) -> Token:
        end = self._current_pos()
        if start is None:
            start = end
        tok = Token(tt, value, Span(start, end))
        self._tokens.append(tok)
        return tok

    def _emit_from(self, tt: TokenType, start: Position) -> Token:
        return self._emit(tt, self._source[start.offset : self._pos], start)

    def _error(self, message: str, pos: Position | None = None) -> LexError:
        if pos is None:
            pos = self._current_pos()
        return LexError(message, pos, self._source)

    # ------------------------------------------------------------------
    # Inline HTML and tags
    # ------------------------------------------------------------------

    def _lex_inline_html(self) -> None:
        start = self._current_pos()
        lowered = self._source.lower()
        php_at = lowered.find("<?php", self._pos)
        echo_at = self._source.find("<?=", self._pos)
        candidates = [i for i in (php_at, echo_at) if i != -1]

        if not candidates:
            self._advance_to(len(self._source))
            self._emit_from(TokenType.INLINE_HTML, start)
            return

        tag_at = min(candidates)
        if tag_at > self._pos:
            self._advance_to(tag_at)
            self._emit_from(TokenType.INLINE_HTML, start)
            start = self._current_pos()

        if tag_at == echo_at:
            self._advance_to(tag_at + 3)
        else:
            self._advance_to(tag_at + 5)
            # The open tag owns exactly one trailing whitespace character
            if self._startswith("\r\n"):
                self._advance_to(self._pos + 2)
            elif self._peek() in _WS_CHARS and self._peek() != "":
                self._advance()
        self._emit_from(TokenType.OPEN_TAG, start)
        self._state = _State.PHP

    def _lex_close_tag(self) -> None:
        start = self._current_pos()
        self._advance_to(self._pos + 2)
        if self._startswith("\r\n"):
            self._advance_to(self._pos + 2)
        elif self._peek() == "\n":
            self._advance()
        self._emit_from(TokenType.CLOSE_TAG, start)
        self._state = _State.HTML

    # ------------------------------------------------------------------
    # PHP mode
    # ------------------------------------------------------------------

    def _lex_php(self) -> None:
        ch = self._peek()

        if ch == "\0":
            raise self._error("NUL character in source")

        if ch in _WS_CHARS:
            self._lex_whitespace()
            return

        if self._startswith("?>"):
            self._lex_close_tag()
            return

        if self._startswith("?->"):
            start = self._current_pos()
            self._advance_to(self._pos + 3)
            self._emit_from(TokenType.NULLSAFE_OBJECT_OPERATOR, start)
            return

        if self._startswith("->"):
            start = self._current_pos()
            self._advance_to(self._pos + 2)
            self._emit_from(TokenType.OBJECT_OPERATOR, start)
            return

        if self._startswith("//") or (ch == "#" and self._peek(1) != "["):
            self._lex_line_comment()
            return

        if self._startswith("/*"):
            self._lex_block_comment()
            return

        if ch == "$" and is_name_start(self._peek(1) or " "):
            self._lex_variable()
            return

        if is_name_start(ch) or (ch == "\\" and is_name_start(self._peek(1) or " ")):
            self._lex_name()
            return

        if ch.isdigit() or (ch == "." and self._peek(1).isdigit()):
            self._lex_number()
            return

        if ch in "'\"`":
            self._lex_quoted(ch)
            return

        if self._startswith("<<<"):
            self._lex_heredoc()
            return

        if ch in _SINGLE:
            start = self._current_pos()
            self._advance()
            self._emit(_SINGLE[ch], ch, start)
            return

        self._lex_operator()

    def _lex_whitespace(self) -> None:
        start = self._current_pos()
        while self._pos < len(self._source) and self._peek() in _WS_CHARS:
            self._advance()
        self._emit_from(TokenType.WHITESPACE, start)

    def _lex_line_comment(self) -> None:
        start = self._current_pos()
        while self._pos < len(self._source):
            if self._peek() in "\r\n" or self._startswith("?>"):
                break
            self._advance()
        self._emit_from(TokenType.COMMENT, start)

    def _lex_block_comment(self) -> None:
        start = self._current_pos()
        end = self._source.find("*/", self._pos + 2)
        if end == -1:
            raise self._error("unterminated comment", start)
        is_doc = self._startswith("/**") and self._peek(3) in _WS_CHARS and self._peek(3) != ""
        self._advance_to(end + 2)
        self._emit_from(TokenType.DOC_COMMENT if is_doc else TokenType.COMMENT, start)

    def _lex_variable(self) -> None:
        start = self._current_pos()
        self._advance()  # consume $
        while self._pos < len(self._source) and is_name_char(self._peek()):
            self._advance()
        self._emit_from(TokenType.VARIABLE, start)

    def _lex_name(self) -> None:
        """Read a name, including namespace separators (Foo\\Bar\\baz)."""
        start = self._current_pos()
        while self._pos < len(self._source):
            ch = self._peek()
            if is_name_char(ch):
                self._advance()
            elif ch == "\\" and is_name_start(self._peek(1) or " "):
                self._advance()
            else:
                break
        self._emit_from(TokenType.IDENTIFIER, start)

    def _lex_number(self) -> None:
        start = self._current_pos()
        while self._pos < len(self._source):
            ch = self._peek()
            if is_name_char(ch) or (ch == "." and self._peek(1).isdigit()):
                self._advance()
            else:
                break
        self._emit_from(TokenType.NUMBER, start)

    def _lex_quoted(self, quote: str) -> None:
        start = self._current_pos()
        self._advance()  # opening quote
        while self._pos < len(self._source):
            ch = self._advance()
            if ch == "\\" and self._pos < len(self._source):
                self._advance()
            elif ch == quote:
                self._emit_from(TokenType.STRING, start)
                return
        raise self._error("unterminated string literal", start)

    def _lex_heredoc(self) -> None:
        """Read a heredoc or nowdoc, header through closing label, as one STRING."""
        start = self._current_pos()
        idx = self._pos + 3
        src = self._source
        while idx < len(src) and src[idx] in " \t":
            idx += 1

        quote = src[idx] if idx < len(src) and src[idx] in "'\"" else ""
        if quote:
            idx += 1
        label_start = idx
        while idx < len(src) and is_name_char(src[idx]):
            idx += 1
        label = src[label_start:idx]
        if not label or not is_name_start(label[0]):
            raise self._error("malformed heredoc header", start)
        if quote:
            if idx >= len(src) or src[idx] != quote:
                raise self._error("malformed heredoc header", start)
            idx += 1
        if src.startswith("\r\n", idx):
            idx += 2
        elif idx < len(src) and src[idx] in "\r\n":
            idx += 1
        else:
            raise self._error("expected line break after heredoc header", start)

        # Closing label may be indented and must not run into a longer name
        while idx <= len(src):
            line_end = len(src)
            for brk in ("\n", "\r"):
                found = src.find(brk, idx)
                if found != -1:
                    line_end = min(line_end, found)
            body = src[idx:line_end]
            stripped = body.lstrip(" \t")
            if stripped.startswith(label):
                after = stripped[len(label) : len(label) + 1]
                if not after or not is_name_char(after):
                    self._advance_to(idx + (len(body) - len(stripped)) + len(label))
                    self._emit_from(TokenType.STRING, start)
                    return
            if line_end == len(src):
                break
            idx = line_end + 1

        raise self._error(f"unterminated heredoc (expected closing '{label}')", start)

    def _lex_operator(self) -> None:
        start = self._current_pos()
        for op in _OPERATORS:
            if self._startswith(op):
                self._advance_to(self._pos + len(op))
                self._emit_from(TokenType.OPERATOR, start)
                return
        self._advance()
        self._emit_from(TokenType.OPERATOR, start)


def tokenize(source: str, filename: str = "input.php") -> list[Token]:
    """Convenience function: tokenize source text and return token list."""
    return Lexer(source, filename).tokenize()
