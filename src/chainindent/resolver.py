"""Indentation decisions for chain links.

Every function here takes the index of a chain link ('->' or '?->') in a
TokenBuffer and answers one question about it by walking the flat token
stream. Nesting is recovered by jumping between matching parentheses, never
by building a tree.
"""

from __future__ import annotations

from collections.abc import Iterator

from chainindent.buffer import TokenBuffer
from chainindent.classify import (
    MarkerKind,
    classify_marker,
    is_bare_variable,
    is_chain_link,
    is_close_marker,
    is_open_marker,
)
from chainindent.config import FixerConfig
from chainindent.lines import has_line_break, indent_at
from chainindent.tokens import TokenType, is_comment, is_whitespace

_CALL_BOUNDARIES = (
    TokenType.LPAREN,
    TokenType.SEMICOLON,
    TokenType.COMMA,
    TokenType.CLOSE_TAG,
    TokenType.EOF,
)


def call_open_paren(tokens: TokenBuffer, index: int) -> int | None:
    """Return the '(' of the call started by the link at index, if it is a call."""
    boundary = tokens.next_of_kind(index, _CALL_BOUNDARIES)
    if boundary is None or tokens[boundary].type != TokenType.LPAREN:
        return None
    return boundary


def can_be_moved_to_next_line(tokens: TokenBuffer, index: int) -> bool:
    """True when a comment sits between the start of the line and the link.

    ``$query\\n    /* note */->where()`` must become two lines so that the
    link gets an indentation of its own.
    """
    prev = tokens.prev_meaningful(index)
    stop = -1 if prev is None else prev
    has_comment_before = False

    for i in range(index - 1, stop, -1):
        token = tokens[i]
        if is_comment(token):
            has_comment_before = True
            continue
        if is_whitespace(token) and has_line_break(token.value):
            return has_comment_before

    return False


def _links_before(tokens: TokenBuffer, index: int) -> Iterator[int]:
    i = index
    while True:
        prev = tokens.prev_meaningful(i)
        if prev is not None and tokens[prev].type == TokenType.RPAREN:
            prev = tokens.prev_meaningful(tokens.find_block_start(prev))
        if prev is None or tokens[prev].type != TokenType.IDENTIFIER:
            return
        link = tokens.prev_meaningful(prev)
        if link is None or not is_chain_link(tokens[link]):
            return
        yield link
        i = link


def _links_after(tokens: TokenBuffer, index: int) -> Iterator[int]:
    i = index
    while True:
        name = tokens.next_meaningful(i)
        if name is None or tokens[name].type != TokenType.IDENTIFIER:
            return
        nxt = tokens.next_meaningful(name)
        if nxt is not None and tokens[nxt].type == TokenType.LPAREN:
            nxt = tokens.next_meaningful(tokens.find_block_end(nxt))
        if nxt is None or not is_chain_link(tokens[nxt]):
            return
        yield nxt
        i = nxt


def chain_has_marker(tokens: TokenBuffer, index: int, config: FixerConfig) -> bool:
    """True when any link of the chain containing index calls a marker name."""
    for link in (index, *_links_before(tokens, index), *_links_after(tokens, index)):
        name = tokens.next_meaningful(link)
        if name is not None and classify_marker(tokens[name], config) is not MarkerKind.PLAIN:
            return True
    return False


def should_split_chain(tokens: TokenBuffer, index: int, config: FixerConfig) -> bool:
    """True when a link follows a call on the same line in a marker chain."""
    if not config.split_marker_chains:
        return False

    prev = tokens.prev_meaningful(index)
    if prev is None or tokens[prev].type != TokenType.RPAREN:
        return False

    for i in range(prev + 1, index):
        if is_whitespace(tokens[i]) and has_line_break(tokens[i].value):
            return False

    return chain_has_marker(tokens, index, config)


def line_requires_extra_indent(tokens: TokenBuffer, start: int, end: int) -> bool:
    """Decide whether the line anchored at start pushes the next link one level in.

    start is the line-break token of the anchor line, end the last meaningful
    token before the link being indented.
    """
    first = tokens.next_meaningful(start)

    if first is not None and is_chain_link(tokens[first]):
        # The anchor line is itself a link: only nest when its call is still open
        name = tokens.next_meaningful(first)
        third = tokens.next_meaningful(name) if name is not None else None
        return (
            third is not None
            and tokens[third].type == TokenType.LPAREN
            and tokens.find_block_end(third) > end
        )

    return tokens[end].type != TokenType.RPAREN or tokens.find_block_start(end) >= start


def expected_indent_at(tokens: TokenBuffer, index: int, config: FixerConfig) -> str:
    """Indentation the link at index should have, before marker adjustments."""
    end = tokens.prev_meaningful(index)
    if end is None:
        return config.indent

    i = end
    while i >= 0:
        if tokens[i].type == TokenType.RPAREN:
            i = tokens.find_block_start(i)

        indent = indent_at(tokens, i)
        if indent is not None:
            if line_requires_extra_indent(tokens, i, end):
                return indent + config.indent
            return indent
        i -= 1

    return config.indent


def previous_call_name(tokens: TokenBuffer, index: int) -> int | None:
    """Index of the method name of the call that the link at index continues."""
    prev = tokens.prev_meaningful(index)
    if prev is None or tokens[prev].type != TokenType.RPAREN:
        return None

    name = tokens.prev_meaningful(tokens.find_block_start(prev))
    if name is None:
        return None

    link = tokens.prev_meaningful(name)
    if link is None or not is_chain_link(tokens[link]):
        return None
    return name


def adjust_for_markers(tokens: TokenBuffer, index: int, expected: str, config: FixerConfig) -> str:
    """Apply the open/close marker rule to the expected indent of the link at index.

    A link right after an open marker call goes one level deeper. A link that
    calls a close marker comes back out one level, unless the chain is rooted
    directly at a variable (``$query\\n    ->endClause()``), in which case the
    block was opened in some earlier statement.
    """
    name = previous_call_name(tokens, index)
    if name is not None and is_open_marker(tokens[name], config):
        return expected + config.indent

    current = tokens.next_meaningful(index)
    if current is not None and is_close_marker(tokens[current], config):
        root = tokens.prev_meaningful(index)
        if root is not None and is_bare_variable(tokens[root]):
            return expected
        return expected[: max(0, len(expected) - len(config.indent))]

    return expected
