"""Fluent method chain indentation fixer for PHP sources."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from chainindent.config import FixerConfig

__version__ = "0.1.0"


def fix_source(
    source: str,
    config: FixerConfig | None = None,
    filename: str = "input.php",
) -> str:
    """Tokenize, re-indent method chains, and regenerate PHP source."""
    from chainindent.buffer import TokenBuffer
    from chainindent.fixer import MethodChainingIndentationFixer
    from chainindent.lexer import tokenize

    tokens = TokenBuffer(tokenize(source, filename), source)
    fixer = MethodChainingIndentationFixer(config)
    if fixer.is_candidate(tokens):
        fixer.fix(tokens)
    return tokens.generate_code()
