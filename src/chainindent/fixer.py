"""Method chaining indentation fixer: the single rewriting pass over a file."""

from __future__ import annotations

import re
from dataclasses import dataclass

from chainindent.buffer import TokenBuffer
from chainindent.classify import is_chain_link
from chainindent.config import FixerConfig
from chainindent.lines import LINE_BREAK, has_line_break, indent_at
from chainindent.resolver import (
    adjust_for_markers,
    call_open_paren,
    can_be_moved_to_next_line,
    expected_indent_at,
    should_split_chain,
)
from chainindent.tokens import OBJECT_OPERATORS, Span, Token, TokenType, is_whitespace

CODE_SAMPLE = """<?php
$query
    ->andWhere("alias.column = ?", $value)
    ->andClause()
        ->andWhere("alias.column2 = ?", $value2)
        ->orClause()
            ->andWhere("alias.column3 = ?", $value3)
            ->andWhereIn("alias.column4", $value4)
        ->endClause()
    ->endClause();
"""


@dataclass(frozen=True, slots=True)
class Adjustment:
    """One chain link whose line was changed.

    observed is None when the link did not start a line before the fix.
    """

    span: Span | None
    observed: str | None
    expected: str


class MethodChainingIndentationFixer:
    """Indent method chains, one extra level inside open/close marker calls."""

    name = "chainindent/method_chaining_indentation"
    priority = 0
    description = (
        "Method chaining of query conditions nested inside an open marker call "
        "(->andClause() or ->orClause() by default) is indented an additional "
        "level until the closing marker call (->endClause()) is reached."
    )
    code_sample = CODE_SAMPLE

    def __init__(self, config: FixerConfig | None = None) -> None:
        self.config = config if config is not None else FixerConfig()

    def is_candidate(self, tokens: TokenBuffer) -> bool:
        return tokens.is_any_type_found(OBJECT_OPERATORS)

    def fix(self, tokens: TokenBuffer) -> list[Adjustment]:
        """Re-indent every chain link in tokens, in place."""
        config = self.config
        adjustments: list[Adjustment] = []

        index = 1
        while index < len(tokens):
            if not is_chain_link(tokens[index]):
                index += 1
                continue

            link = tokens[index]
            open_paren = call_open_paren(tokens, index)
            if open_paren is None:
                index += 1
                continue

            moved = False
            if can_be_moved_to_next_line(tokens, index) or should_split_chain(tokens, index, config):
                newline = Token(TokenType.WHITESPACE, config.line_ending)
                if is_whitespace(tokens[index - 1]):
                    tokens[index - 1] = newline
                else:
                    tokens.insert(index, newline)
                    index += 1
                    open_paren += 1
                moved = True

            observed = indent_at(tokens, index - 1)
            if observed is None:
                index += 1
                continue

            expected = expected_indent_at(tokens, index, config)
            expected = adjust_for_markers(tokens, index, expected, config)

            if observed != expected:
                tokens[index - 1] = Token(TokenType.WHITESPACE, config.line_ending + expected)
                _shift_arguments(tokens, open_paren, observed, expected)

            if moved or observed != expected:
                adjustments.append(Adjustment(link.span, None if moved else observed, expected))

            index += 1

        return adjustments


def _shift_arguments(tokens: TokenBuffer, open_paren: int, observed: str, expected: str) -> None:
    """Re-base every line inside the call's parentheses from observed to expected."""
    close_paren = tokens.find_block_end(open_paren)
    pattern = re.compile("(" + LINE_BREAK + ")" + re.escape(observed) + r"([ \t]*)\Z")

    for i in range(open_paren + 1, close_paren):
        token = tokens[i]
        if not is_whitespace(token) or not has_line_break(token.value):
            continue

        content = pattern.sub(lambda m: m.group(1) + expected + m.group(2), token.value)
        if content != token.value:
            tokens[i] = Token(token.type, content)
