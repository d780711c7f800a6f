"""Indentation engine. Computes line columns from paren depth and blocks."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from kixtart.blocks import (
    BlockMatch,
    enclosing_block_opener,
    keyword_at,
    matching_block_opener,
)
from kixtart.buffer import Buffer
from kixtart.errors import ConfigError
from kixtart.keywords import CLOSERS

logger = logging.getLogger(__name__)

DEFAULT_INDENT_OFFSET = 4


def check_indent_offset(value: object) -> int:
    """Return *value* if it is a usable indent offset, else raise ConfigError."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"indent offset must be an integer, got {value!r}")
    if value < 0:
        raise ConfigError(f"indent offset must not be negative, got {value}")
    return value


@dataclass(frozen=True, slots=True)
class _Plan:
    """How to indent a line: ``levels`` offsets past the indentation of ``base_line``.

    ``preserve`` lines start inside a comment or string and keep their
    indentation.
    """

    base_line: int | None
    levels: int
    preserve: bool = False


def _opener_for(buffer: Buffer, pos: int) -> tuple[BlockMatch | None, int]:
    """Return the opener a line starting at *pos* indents against, and the level delta."""
    leading = keyword_at(buffer, pos)
    if leading is not None and leading.start == pos and leading.keyword.closes:
        opener = matching_block_opener(buffer, pos)
        if opener is not None:
            return opener, 0
        # Stray closer: indent against whatever block is still open.
        opener = enclosing_block_opener(buffer, pos)
        if opener is None:
            return None, 0
        if leading.keyword in CLOSERS.get(opener.keyword, frozenset()):
            return opener, 0
        return opener, 1
    opener = enclosing_block_opener(buffer, pos)
    return opener, 0 if opener is None else 1


def _plan(buffer: Buffer, line: int) -> _Plan:
    pos = buffer.first_nonblank(line)
    ctx = buffer.context_at(pos)
    if not ctx.in_code:
        return _Plan(None, 0, preserve=True)

    depth = ctx.paren_depth
    if pos < buffer.line_end(line) and buffer.text[pos] == ")":
        depth -= 1

    opener, delta = _opener_for(buffer, pos)
    if opener is None:
        return _Plan(None, max(0, depth) + delta)

    base_line = buffer.line_of(opener.start)
    base_depth = buffer.context_at(buffer.line_start(base_line)).paren_depth
    return _Plan(base_line, max(0, depth) - base_depth + delta)


def indent_column_for(
    buffer: Buffer, line: int, indent_offset: int = DEFAULT_INDENT_OFFSET
) -> int:
    """Return the column *line* should be indented to.

    Lines that start inside a comment or string keep their current column.
    """
    check_indent_offset(indent_offset)
    plan = _plan(buffer, line)
    if plan.preserve:
        return buffer.indentation(line)
    base = 0 if plan.base_line is None else buffer.indentation(plan.base_line)
    return max(0, base + indent_offset * plan.levels)


def reindent(source: str, indent_offset: int = DEFAULT_INDENT_OFFSET) -> str:
    """Reindent every line of *source* and return the new text.

    Indentation is written as spaces, blank lines are emptied, and line
    terminators are kept as they are.
    """
    check_indent_offset(indent_offset)
    buffer = Buffer(source)
    columns: list[int] = []
    out: list[str] = []
    changed = 0
    for line in range(buffer.line_count):
        text = buffer.line_text(line)
        if line + 1 < buffer.line_count:
            terminator = source[buffer.line_end(line) : buffer.line_start(line + 1)]
        else:
            terminator = ""

        plan = _plan(buffer, line)
        if plan.preserve:
            columns.append(buffer.indentation(line))
            out.append(text + terminator)
            continue

        body = text.lstrip(" \t")
        base = 0 if plan.base_line is None else columns[plan.base_line]
        column = max(0, base + indent_offset * plan.levels) if body else 0
        columns.append(column)
        new_text = " " * column + body
        if new_text != text:
            changed += 1
        out.append(new_text + terminator)

    logger.debug("reindented %d of %d lines", changed, buffer.line_count)
    return "".join(out)
