"""Outline index of user function declarations and labels."""

from __future__ import annotations

from dataclasses import dataclass, field

from kixtart.buffer import Buffer
from kixtart.classify import classify, declared_functions
from kixtart.tokens import LABEL_SIGIL, TokenClass


@dataclass(frozen=True, slots=True)
class IndexEntry:
    """A named position in the script."""

    name: str
    position: int


@dataclass(slots=True)
class Index:
    """Index entries grouped by kind, each group in source order."""

    functions: list[IndexEntry] = field(default_factory=list)
    labels: list[IndexEntry] = field(default_factory=list)


def build_index(buffer: Buffer) -> Index:
    """Collect function declarations and labels outside comments and strings.

    Labels are listed without their colon, at the position of the colon.
    """
    index = Index()
    for word in declared_functions(buffer):
        index.functions.append(IndexEntry(word.text, word.start))
    for word in buffer.scan.words:
        if not word.text.startswith(LABEL_SIGIL):
            continue
        head = classify(word.text).parts[0]
        if head.token_class is TokenClass.LABEL:
            index.labels.append(IndexEntry(word.text[1 : head.end], word.start))
    return index
