"""--debug token dump to stderr."""

from __future__ import annotations

import sys
from typing import TextIO

from kixtart.buffer import Buffer
from kixtart.classify import highlight
from kixtart.tokens import Part


def dump_tokens(buffer: Buffer, *, file: TextIO = sys.stderr) -> None:
    """Print every highlighted span of *buffer*, one per line, to *file*."""
    for part in highlight(buffer):
        _dump_part(buffer, part, file)


def _dump_part(buffer: Buffer, part: Part, f: TextIO) -> None:
    line = buffer.line_of(part.start)
    column = part.start - buffer.line_start(line) + 1
    text = buffer.text[part.start : part.end]
    flag = " !" if part.warning else ""
    f.write(f"{line + 1}:{column} {part.token_class.name} {part.role} {text!r}{flag}\n")
