"""KiXtart lexer: one forward pass over comments, strings, parens and words."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto

from kixtart.tokens import QUOTES, Word, is_blank, is_word_char


class RegionKind(Enum):
    LINE_COMMENT = auto()  # ; to end of line
    BLOCK_COMMENT = auto()  # /* ... */
    STRING = auto()  # "..." or '...'


@dataclass(frozen=True, slots=True)
class Region:
    """A comment or string, from its opening delimiter up to ``end`` (exclusive).

    ``closed`` is False when the region runs into the end of the buffer.
    """

    kind: RegionKind
    start: int
    end: int
    closed: bool

    @property
    def is_comment(self) -> bool:
        return self.kind is not RegionKind.STRING

    def contains(self, offset: int) -> bool:
        if self.closed:
            return self.start < offset < self.end
        return self.start < offset <= self.end


class AtomKind(Enum):
    WORD = auto()
    OPEN = auto()  # (
    CLOSE = auto()  # )


@dataclass(frozen=True, slots=True)
class Atom:
    """A unit of backward structural scanning.

    For parens, ``partner`` is the index of the matching paren atom, or -1
    when the paren is unbalanced.
    """

    kind: AtomKind
    start: int
    end: int
    word: Word | None = None
    partner: int = -1


@dataclass(slots=True)
class Scan:
    """Everything the lexer learned about a source text."""

    regions: list[Region] = field(default_factory=list)
    words: list[Word] = field(default_factory=list)
    punctuation: list[tuple[int, int]] = field(default_factory=list)
    atoms: list[Atom] = field(default_factory=list)
    # depth[i] is the number of unmatched "(" strictly before offset i
    depth: list[int] = field(default_factory=list)


class Lexer:
    """Scan KiXtart source text once, front to back.

    The lexer never fails: unterminated strings and comments run to the end
    of the buffer, and a ")" without an open group leaves the depth at zero.
    """

    def __init__(self, source: str) -> None:
        self._source = source
        self._pos = 0
        self._depth = 0
        self._open: list[int] = []  # atom indices of unmatched "("
        self._scan = Scan()

    def scan(self) -> Scan:
        """Scan the full source and return the collected structure."""
        self._scan.depth = [0] * (len(self._source) + 1)
        while self._pos < len(self._source):
            self._lex_normal()
        self._scan.depth[len(self._source)] = self._depth
        return self._scan

    # ------------------------------------------------------------------
    # Position helpers
    # ------------------------------------------------------------------

    def _peek(self, offset: int = 0) -> str:
        idx = self._pos + offset
        if idx < len(self._source):
            return self._source[idx]
        return ""

    def _advance(self) -> str:
        ch = self._source[self._pos]
        self._scan.depth[self._pos] = self._depth
        self._pos += 1
        return ch

    def _advance_to(self, end: int) -> None:
        while self._pos < end:
            self._advance()

    # ------------------------------------------------------------------
    # Normal mode
    # ------------------------------------------------------------------

    def _lex_normal(self) -> None:
        ch = self._peek()

        if ch in QUOTES:
            self._lex_string(ch)
            return

        if ch == ";":
            self._lex_line_comment()
            return

        if ch == "/" and self._peek(1) == "*":
            self._lex_block_comment()
            return

        if ch == "(":
            self._open.append(len(self._scan.atoms))
            self._scan.atoms.append(Atom(AtomKind.OPEN, self._pos, self._pos + 1))
            self._advance()
            self._depth += 1
            return

        if ch == ")":
            self._lex_close_paren()
            return

        if is_blank(ch) or ch in "\r\n":
            self._advance()
            return

        if is_word_char(ch):
            self._lex_word()
            return

        self._lex_punctuation()

    def _lex_close_paren(self) -> None:
        index = len(self._scan.atoms)
        partner = -1
        if self._open:
            partner = self._open.pop()
            opener = self._scan.atoms[partner]
            self._scan.atoms[partner] = Atom(opener.kind, opener.start, opener.end, partner=index)
        self._scan.atoms.append(Atom(AtomKind.CLOSE, self._pos, self._pos + 1, partner=partner))
        self._advance()
        self._depth = max(0, self._depth - 1)

    def _lex_word(self) -> None:
        start = self._pos
        member = start > 0 and self._source[start - 1] == "."
        while self._pos < len(self._source) and is_word_char(self._peek()):
            self._advance()
        word = Word(start, self._pos, self._source[start : self._pos], self._depth, member)
        self._scan.words.append(word)
        self._scan.atoms.append(Atom(AtomKind.WORD, start, self._pos, word=word))

    def _lex_punctuation(self) -> None:
        start = self._pos
        while self._pos < len(self._source):
            ch = self._peek()
            if is_blank(ch) or ch in "\r\n();" or ch in QUOTES or is_word_char(ch):
                break
            if ch == "/" and self._peek(1) == "*":
                break
            self._advance()
        self._scan.punctuation.append((start, self._pos))

    # ------------------------------------------------------------------
    # Comments and strings
    # ------------------------------------------------------------------

    def _lex_string(self, quote: str) -> None:
        start = self._pos
        end = self._source.find(quote, start + 1)
        if end < 0:
            self._advance_to(len(self._source))
            self._add_region(RegionKind.STRING, start, closed=False)
            return
        self._advance_to(end + 1)
        self._add_region(RegionKind.STRING, start, closed=True)

    def _lex_line_comment(self) -> None:
        start = self._pos
        end = self._source.find("\n", start)
        if end < 0:
            self._advance_to(len(self._source))
            self._add_region(RegionKind.LINE_COMMENT, start, closed=False)
            return
        self._advance_to(end + 1)
        self._add_region(RegionKind.LINE_COMMENT, start, closed=True)

    def _lex_block_comment(self) -> None:
        start = self._pos
        # "/*/" does not close itself
        end = self._source.find("*/", start + 2)
        if end < 0:
            self._advance_to(len(self._source))
            self._add_region(RegionKind.BLOCK_COMMENT, start, closed=False)
            return
        self._advance_to(end + 2)
        self._add_region(RegionKind.BLOCK_COMMENT, start, closed=True)

    def _add_region(self, kind: RegionKind, start: int, *, closed: bool) -> None:
        self._scan.regions.append(Region(kind, start, self._pos, closed))


def scan(source: str) -> Scan:
    """Convenience function: scan source text and return its structure."""
    return Lexer(source).scan()
