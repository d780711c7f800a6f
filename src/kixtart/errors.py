"""Error and warning types with formatted source context."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from kixtart.buffer import Buffer


class ConfigError(Exception):
    """Raised for configuration values outside their domain."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class MacroWarning:
    """A malformed macro: unknown name, or characters the evaluator drops.

    ``line`` and ``column`` are 1-based; ``length`` is the number of flagged
    characters.
    """

    def __init__(self, message: str, line: int, column: int, length: int, source: str) -> None:
        self.message = message
        self.line = line
        self.column = column
        self.length = length
        self.source = source

    def __repr__(self) -> str:
        return f"MacroWarning({self.message!r}, line={self.line}, column={self.column})"

    def format(self, filename: str = "input.kix") -> str:
        lines = self.source.splitlines(keepends=True)
        line_idx = self.line - 1
        col = self.column

        if 0 <= line_idx < len(lines):
            source_line = lines[line_idx].rstrip("\n").rstrip("\r")
        else:
            source_line = ""

        underline_len = max(1, min(self.length, len(source_line) - col + 1))

        pad = " " * (col - 1)
        carets = "^" * underline_len

        line_num = str(self.line)
        gutter_width = len(line_num) + 1

        blank_gutter = " " * gutter_width + "|"
        line_gutter = f"{line_num:>{gutter_width - 1}} |"

        return (
            f"warning: {self.message}\n"
            f"{' ' * gutter_width}--> {filename}:{self.line}:{col}\n"
            f"{blank_gutter}\n"
            f"{line_gutter} {source_line}\n"
            f"{blank_gutter} {pad}{carets}"
        )


def collect_warnings(buffer: Buffer) -> list[MacroWarning]:
    """Return a warning for every malformed macro in *buffer*, in source order."""
    from kixtart.classify import highlight
    from kixtart.tokens import TokenClass

    text = buffer.text
    warnings: list[MacroWarning] = []
    for part in highlight(buffer):
        if not part.warning:
            continue
        flagged = text[part.start : part.end]
        if part.token_class is TokenClass.MACRO_TRAILING_WARNING:
            message = f"characters '{flagged}' after macro are ignored"
        else:
            message = f"unknown macro '{flagged}' evaluates to 0"
        line = buffer.line_of(part.start)
        column = part.start - buffer.line_start(line) + 1
        warnings.append(MacroWarning(message, line + 1, column, part.end - part.start, text))
    return warnings
