"""Token classes, classified spans, and character classification helpers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class TokenClass(Enum):
    COMMAND = auto()  # If, Select, ?, ...
    BUILTIN_FUNCTION = auto()  # InStr, Split, ...
    USER_FUNCTION_DECLARATION = auto()  # name after Function on the same line
    LABEL = auto()  # :name
    MACRO = auto()  # @name, recognized prefix
    MACRO_TRAILING_WARNING = auto()  # characters dropped after a macro prefix
    VARIABLE = auto()  # $name
    PUNCTUATION = auto()  # ( ) = + , ...
    UNCLASSIFIED = auto()


# Sigils
MACRO_SIGIL = "@"
VARIABLE_SIGIL = "$"
LABEL_SIGIL = ":"
SIGILS = frozenset(MACRO_SIGIL + VARIABLE_SIGIL + LABEL_SIGIL)

# A lone "?" is the print-newline command.
COMMAND_ALIAS = "?"

QUOTES = frozenset("\"'")


@dataclass(frozen=True, slots=True)
class Part:
    """A classified span.

    Offsets are relative to the classified text when returned by
    ``classify`` and absolute buffer offsets when returned by ``highlight``.
    """

    start: int
    end: int
    token_class: TokenClass
    role: str = "name"
    warning: bool = False

    def shift(self, delta: int) -> Part:
        return Part(self.start + delta, self.end + delta, self.token_class, self.role, self.warning)


@dataclass(frozen=True, slots=True)
class Classification:
    """Result of classifying one token: its class plus the sub-spans."""

    token_class: TokenClass
    parts: tuple[Part, ...]

    @property
    def warning(self) -> bool:
        return any(p.warning for p in self.parts)


@dataclass(frozen=True, slots=True)
class Word:
    """A run of word characters outside comments and strings."""

    start: int
    end: int
    text: str
    depth: int
    member: bool = False  # directly preceded by "." ($obj.Next)


def is_user_char(ch: str) -> bool:
    """Return True if ch may appear inside a variable, label or function name."""
    return ch.isalnum() or ch == "_"


def is_word_char(ch: str) -> bool:
    """Return True if ch belongs to a word as the lexer cuts them."""
    return is_user_char(ch) or ch in SIGILS or ch == COMMAND_ALIAS


def is_blank(ch: str) -> bool:
    return ch == " " or ch == "\t"
