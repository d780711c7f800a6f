"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from kixtart.buffer import Buffer
from kixtart.classify import classify, highlight
from kixtart.indent import indent_column_for
from kixtart.tokens import TokenClass

CURSOR = "|"


@pytest.fixture
def at():
    """Return a helper that turns "text with | cursor" into (Buffer, offset)."""

    def _at(source: str) -> tuple[Buffer, int]:
        offset = source.index(CURSOR)
        return Buffer(source.replace(CURSOR, "", 1)), offset

    return _at


@pytest.fixture
def parts_of():
    """Return a helper that classifies text into (substring, TokenClass) pairs."""

    def _parts(text: str, **kwargs: bool) -> list[tuple[str, TokenClass]]:
        result = classify(text, **kwargs)
        return [(text[p.start : p.end], p.token_class) for p in result.parts]

    return _parts


@pytest.fixture
def spans():
    """Return a helper that highlights source into (substring, TokenClass) pairs."""

    def _spans(source: str) -> list[tuple[str, TokenClass]]:
        return [(source[p.start : p.end], p.token_class) for p in highlight(Buffer(source))]

    return _spans


@pytest.fixture
def columns():
    """Return a helper that computes the indentation column of every line."""

    def _columns(source: str, offset: int = 4) -> list[int]:
        buffer = Buffer(source)
        return [indent_column_for(buffer, line, offset) for line in range(buffer.line_count)]

    return _columns


@pytest.fixture
def flat():
    """Return a helper that strips all leading whitespace from every line."""

    def _flat(source: str) -> str:
        return "\n".join(line.lstrip(" \t") for line in source.split("\n"))

    return _flat
