"""Block-pairing resolver: finds the keyword that opened the block around a position.

The resolver walks backward over atoms (words and parenthesized groups) and
keeps a stack of close keywords that still wait for their opener::

    If $a           <- result for the marked position
        Do
            $i = $i + 1
        Until $i > 3    (pushes UNTIL, popped again by DO)
        |

Comments are skipped and strings never produce atoms, so keywords inside
them are invisible. A group the walk is inside of (or an unbalanced "(") is
stepped out of, and the walk goes on before it.
"""

from __future__ import annotations

from dataclasses import dataclass

from kixtart.buffer import Buffer
from kixtart.keywords import OWN_CLOSER, BlockKeyword, Role
from kixtart.lexer import Atom, AtomKind


@dataclass(frozen=True, slots=True)
class BlockMatch:
    """A block keyword found in the buffer."""

    keyword: BlockKeyword
    start: int
    end: int


def keyword_of(atom: Atom) -> BlockKeyword | None:
    """Return the block keyword spelled by *atom*, ignoring object members."""
    if atom.word is None or atom.word.member:
        return None
    return BlockKeyword.lookup(atom.word.text)


def _resolve(buffer: Buffer, pos: int, stack: list[BlockKeyword]) -> BlockMatch | None:
    seeded = bool(stack)
    atoms = buffer.scan.atoms
    i = buffer.atom_before(pos)
    while i >= 0:
        atom = atoms[i]
        i -= 1

        if atom.kind is AtomKind.CLOSE:
            if atom.partner >= 0:
                i = atom.partner - 1
            continue
        if atom.kind is AtomKind.OPEN:
            continue

        keyword = keyword_of(atom)
        if keyword is None:
            continue

        if keyword.role is Role.CLOSE:
            stack.append(keyword)
            continue
        if not stack:
            return BlockMatch(keyword, atom.start, atom.end)
        if keyword.role is Role.BOTH:
            stack.append(keyword)
            continue

        # Else and Case branches end with the block that holds them.
        while stack and stack[-1].role is Role.BOTH:
            stack.pop()
        if stack and stack[-1] is OWN_CLOSER[keyword]:
            stack.pop()
        if seeded and not stack:
            return BlockMatch(keyword, atom.start, atom.end)
    return None


def enclosing_block_opener(buffer: Buffer, offset: int) -> BlockMatch | None:
    """Return the innermost unclosed block keyword before *offset*.

    Inside a comment or string, the search starts at its opening delimiter.
    Returns None at top level.
    """
    ctx = buffer.context_at(offset)
    pos = ctx.region_start if ctx.region_start is not None else offset
    return _resolve(buffer, pos, [])


def keyword_at(buffer: Buffer, offset: int) -> BlockMatch | None:
    """Return the block keyword whose word covers *offset*, if any."""
    i = buffer.atom_before(offset + 1)
    if i < 0:
        return None
    atom = buffer.scan.atoms[i]
    if atom.end <= offset:
        return None
    keyword = keyword_of(atom)
    if keyword is None:
        return None
    return BlockMatch(keyword, atom.start, atom.end)


def matching_block_opener(buffer: Buffer, offset: int) -> BlockMatch | None:
    """Return the opener closed by the keyword at *offset*.

    Else and Case lines resolve to their If and Select. Returns None when
    *offset* is not on a closing keyword or nothing opened it.
    """
    found = keyword_at(buffer, offset)
    if found is None or not found.keyword.closes:
        return None
    return _resolve(buffer, found.start, [found.keyword])


# ----------------------------------------------------------------------
# Function navigation
# ----------------------------------------------------------------------


def _keyword_words(buffer: Buffer, keyword: BlockKeyword) -> list[Atom]:
    return [a for a in buffer.scan.atoms if keyword_of(a) is keyword]


def beginning_of_function(buffer: Buffer, offset: int, count: int = 1) -> tuple[bool, int]:
    """Move to the start of the *count*-th Function keyword before *offset*.

    A negative count searches forward. Returns ``(moved, position)``; when
    there are not enough functions, the position is the buffer limit in the
    search direction and ``moved`` is False.
    """
    if count == 0:
        return True, offset
    starts = [a.start for a in _keyword_words(buffer, BlockKeyword.FUNCTION)]
    if count > 0:
        before = [s for s in starts if s < offset]
        if len(before) >= count:
            return True, before[-count]
        return False, 0
    after = [s for s in starts if s > offset]
    if len(after) >= -count:
        return True, after[-count - 1]
    return False, len(buffer.text)


def end_of_function(buffer: Buffer, offset: int, count: int = 1) -> tuple[bool, int]:
    """Move past the *count*-th EndFunction keyword after *offset*.

    A negative count searches backward. Same return convention as
    ``beginning_of_function``.
    """
    if count == 0:
        return True, offset
    ends = [a.end for a in _keyword_words(buffer, BlockKeyword.ENDFUNCTION)]
    if count > 0:
        after = [e for e in ends if e > offset]
        if len(after) >= count:
            return True, after[count - 1]
        return False, len(buffer.text)
    before = [e for e in ends if e < offset]
    if len(before) >= -count:
        return True, before[count]
    return False, 0
