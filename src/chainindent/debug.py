"""--debug token dump to stderr."""

from __future__ import annotations

import sys
from collections.abc import Iterable
from typing import TextIO

from chainindent.tokens import Token


def dump_tokens(tokens: Iterable[Token], *, file: TextIO = sys.stderr) -> None:
    """Print one line per token: index, location, type and value."""
    for index, token in enumerate(tokens):
        if token.span is not None:
            where = f"{token.span.start.line}:{token.span.start.column}"
        else:
            where = "-"
        file.write(f"{index:>5} {where:>9} {token.type.name:<24} {token.value!r}\n")
