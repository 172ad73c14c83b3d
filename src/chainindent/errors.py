"""Error types with formatted source context."""

from __future__ import annotations

from chainindent.tokens import Position, Span


def _context_block(
    message: str,
    filename: str,
    source: str,
    line: int,
    col: int,
    underline_len: int,
) -> str:
    """Render a rustc-style error block pointing at line:col."""
    lines = source.splitlines(keepends=True)
    line_idx = line - 1

    if 0 <= line_idx < len(lines):
        source_line = lines[line_idx].rstrip("\n").rstrip("\r")
    else:
        source_line = ""

    pad = " " * (col - 1)
    carets = "^" * underline_len

    line_num = str(line)
    gutter_width = len(line_num) + 1

    blank_gutter = " " * gutter_width + "|"
    line_gutter = f"{line_num:>{gutter_width - 1}} |"

    return (
        f"error: {message}\n"
        f"{' ' * gutter_width}--> {filename}:{line}:{col}\n"
        f"{blank_gutter}\n"
        f"{line_gutter} {source_line}\n"
        f"{blank_gutter} {pad}{carets}"
    )


class LexError(Exception):
    """Raised on the first tokenizing error, with position and source context."""

    def __init__(self, message: str, position: Position, source: str) -> None:
        self.message = message
        self.position = position
        self.source = source
        super().__init__(self.format())

    def format(self, filename: str = "input.php") -> str:
        lines = self.source.splitlines()
        line_idx = self.position.line - 1
        line_len = len(lines[line_idx]) if 0 <= line_idx < len(lines) else 0

        # At least 1 char, but stay within line
        underline_len = max(1, min(2, line_len - self.position.column + 1))
        return _context_block(
            self.message,
            filename,
            self.source,
            self.position.line,
            self.position.column,
            underline_len,
        )


class StructureError(Exception):
    """Raised when the token stream is not well nested (e.g. an unmatched parenthesis).

    The span is that of the offending delimiter, or None when the token was
    synthesized and has no source location.
    """

    def __init__(self, message: str, span: Span | None, source: str = "") -> None:
        self.message = message
        self.span = span
        self.source = source
        super().__init__(self.format())

    def format(self, filename: str = "input.php") -> str:
        if self.span is None:
            return f"error: {self.message}\n  --> {filename}"

        col = self.span.start.column
        if self.span.end.line == self.span.start.line:
            underline_len = max(1, self.span.end.column - col)
        else:
            underline_len = 1
        return _context_block(
            self.message,
            filename,
            self.source,
            self.span.start.line,
            col,
            underline_len,
        )


class ConfigError(ValueError):
    """Raised for invalid fixer configuration values."""
