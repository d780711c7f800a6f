"""Immutable script snapshot with lexical context and line queries."""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from dataclasses import dataclass

from kixtart.lexer import Region, Scan, scan
from kixtart.tokens import is_blank

TAB_WIDTH = 8


@dataclass(frozen=True, slots=True)
class LexicalContext:
    """What surrounds a buffer offset.

    ``region_start`` is the offset of the opening delimiter of the comment or
    string containing the offset, or None outside of one.
    """

    in_comment: bool
    in_string: bool
    paren_depth: int
    region_start: int | None = None

    @property
    def in_code(self) -> bool:
        return not (self.in_comment or self.in_string)


class Buffer:
    """A KiXtart script, scanned on first use and queried many times.

    The buffer owns the scan cache; a new text needs a new Buffer.
    """

    def __init__(self, text: str) -> None:
        self.text = text
        self._scan: Scan | None = None
        self._region_starts: list[int] = []
        self._atom_starts: list[int] = []
        self._line_starts = [0]
        for i, ch in enumerate(text):
            if ch == "\n":
                self._line_starts.append(i + 1)

    @property
    def scan(self) -> Scan:
        return self._ensure_scan()

    def _ensure_scan(self) -> Scan:
        if self._scan is None:
            self._scan = scan(self.text)
            self._region_starts = [r.start for r in self._scan.regions]
            self._atom_starts = [a.start for a in self._scan.atoms]
        return self._scan

    # ------------------------------------------------------------------
    # Lexical context
    # ------------------------------------------------------------------

    def region_at(self, offset: int) -> Region | None:
        """Return the comment or string that contains *offset*, if any."""
        regions = self.scan.regions
        idx = bisect_right(self._region_starts, offset - 1) - 1
        if idx >= 0 and regions[idx].contains(offset):
            return regions[idx]
        return None

    def context_at(self, offset: int) -> LexicalContext:
        """Return the lexical context of *offset*.

        Offsets past the end of the buffer are outside any comment or string
        and see the paren depth at the end of the buffer.
        """
        offset = max(0, offset)
        depth = self.scan.depth
        if offset >= len(depth):
            return LexicalContext(False, False, depth[-1])
        region = self.region_at(offset)
        if region is None:
            return LexicalContext(False, False, depth[offset])
        return LexicalContext(
            in_comment=region.is_comment,
            in_string=not region.is_comment,
            paren_depth=depth[region.start],
            region_start=region.start,
        )

    def atom_before(self, offset: int) -> int:
        """Index of the last atom that starts before *offset*, or -1."""
        self._ensure_scan()
        return bisect_left(self._atom_starts, offset) - 1

    # ------------------------------------------------------------------
    # Lines
    # ------------------------------------------------------------------

    @property
    def line_count(self) -> int:
        return len(self._line_starts)

    def line_start(self, line: int) -> int:
        return self._line_starts[line]

    def line_end(self, line: int) -> int:
        """Offset of the end of *line*, before its line terminator."""
        if line + 1 < len(self._line_starts):
            end = self._line_starts[line + 1] - 1
        else:
            end = len(self.text)
        if end > self._line_starts[line] and self.text[end - 1] == "\r":
            end -= 1
        return end

    def line_of(self, offset: int) -> int:
        offset = min(max(0, offset), len(self.text))
        return bisect_right(self._line_starts, offset) - 1

    def line_text(self, line: int) -> str:
        return self.text[self.line_start(line) : self.line_end(line)]

    def first_nonblank(self, line: int) -> int:
        pos = self.line_start(line)
        end = self.line_end(line)
        while pos < end and is_blank(self.text[pos]):
            pos += 1
        return pos

    def indentation(self, line: int) -> int:
        """Column of the first non-blank character of *line*."""
        column = 0
        for ch in self.text[self.line_start(line) : self.first_nonblank(line)]:
            if ch == "\t":
                column = (column // TAB_WIDTH + 1) * TAB_WIDTH
            else:
                column += 1
        return column
