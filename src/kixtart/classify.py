"""Token classifier: assigns a TokenClass to every span of a KiXtart token."""

from __future__ import annotations

from kixtart.buffer import Buffer
from kixtart.keywords import COMMANDS, FUNCTIONS, match_macro
from kixtart.tokens import (
    COMMAND_ALIAS,
    LABEL_SIGIL,
    MACRO_SIGIL,
    VARIABLE_SIGIL,
    Classification,
    Part,
    TokenClass,
    Word,
    is_blank,
    is_user_char,
    is_word_char,
)


def classify(text: str, *, after_function: bool = False, member: bool = False) -> Classification:
    """Classify *text*, splitting it into parts that cover it completely.

    ``after_function`` marks a token that follows the Function command on the
    same line; ``member`` marks a token written after a "." (an object
    member), which is never a command or function name.
    """
    parts: list[Part] = []
    pos = 0
    while pos < len(text):
        first = pos == 0
        pos = _classify_head(
            text, pos, parts, after_function=after_function and first, member=member and first
        )
    if not parts:
        return Classification(TokenClass.UNCLASSIFIED, ())
    return Classification(parts[0].token_class, tuple(parts))


def _user_run(text: str, pos: int) -> int:
    while pos < len(text) and is_user_char(text[pos]):
        pos += 1
    return pos


def _classify_head(text: str, pos: int, parts: list[Part], *, after_function: bool, member: bool) -> int:
    """Classify the token starting at *pos*, append its parts, return its end."""
    ch = text[pos]

    if ch == MACRO_SIGIL:
        return _classify_macro(text, pos, parts)

    if ch == VARIABLE_SIGIL:
        return _classify_variable(text, pos, parts)

    if ch == LABEL_SIGIL:
        end = _user_run(text, pos + 1)
        if end > pos + 1:
            parts.append(Part(pos, end, TokenClass.LABEL))
        else:
            parts.append(Part(pos, pos + 1, TokenClass.PUNCTUATION))
            end = pos + 1
        return end

    if ch == COMMAND_ALIAS:
        parts.append(Part(pos, pos + 1, TokenClass.COMMAND))
        return pos + 1

    if not is_word_char(ch):
        end = pos
        while end < len(text) and not is_word_char(text[end]):
            end += 1
        parts.append(Part(pos, end, TokenClass.PUNCTUATION))
        return end

    end = _user_run(text, pos)
    name = text[pos:end].lower()
    if member:
        token_class = TokenClass.UNCLASSIFIED
    elif name in COMMANDS:
        token_class = TokenClass.COMMAND
    elif after_function:
        token_class = TokenClass.USER_FUNCTION_DECLARATION
    elif name in FUNCTIONS:
        token_class = TokenClass.BUILTIN_FUNCTION
    else:
        token_class = TokenClass.UNCLASSIFIED
    parts.append(Part(pos, end, token_class))
    return end


def _classify_macro(text: str, pos: int, parts: list[Part]) -> int:
    end = _user_run(text, pos + 1)
    macro = match_macro(text[pos + 1 : end])
    if macro is None:
        # Evaluates to 0 at run time; flag the whole token.
        end = max(end, pos + 1)
        parts.append(Part(pos, end, TokenClass.UNCLASSIFIED, role="unknown", warning=True))
        return end
    prefix_end = pos + 1 + len(macro)
    parts.append(Part(pos, prefix_end, TokenClass.MACRO, role="prefix"))
    if end > prefix_end:
        parts.append(
            Part(prefix_end, end, TokenClass.MACRO_TRAILING_WARNING, role="trailing", warning=True)
        )
    return end


def _classify_variable(text: str, pos: int, parts: list[Part]) -> int:
    last = pos
    while last + 1 < len(text) and text[last + 1] == VARIABLE_SIGIL:
        last += 1
    # Every sigil but the last reads the value named by what follows.
    for i in range(pos, last):
        parts.append(Part(i, i + 1, TokenClass.VARIABLE, role="read"))
    end = _user_run(text, last + 1)
    parts.append(Part(last, end, TokenClass.VARIABLE, role="assign"))
    return end


# ----------------------------------------------------------------------
# Buffer-wide highlighting
# ----------------------------------------------------------------------


def _follows_function(buffer: Buffer, previous: Word | None, word: Word) -> bool:
    """True if *word* directly follows "Function" on the same line."""
    if previous is None or previous.member or previous.text.lower() != "function":
        return False
    gap = buffer.text[previous.end : word.start]
    return bool(gap) and all(is_blank(ch) for ch in gap)


def classify_word(buffer: Buffer, previous: Word | None, word: Word) -> Classification:
    """Classify a word of *buffer* given the word before it."""
    return classify(
        word.text,
        after_function=_follows_function(buffer, previous, word),
        member=word.member,
    )


def highlight(buffer: Buffer) -> list[Part]:
    """Return classified spans, with absolute offsets, for the whole buffer.

    Comments and strings produce no spans.
    """
    scan = buffer.scan
    spans: list[Part] = []
    previous: Word | None = None
    for word in scan.words:
        result = classify_word(buffer, previous, word)
        spans.extend(p.shift(word.start) for p in result.parts)
        previous = word
    for start, end in scan.punctuation:
        spans.append(Part(start, end, TokenClass.PUNCTUATION))
    for atom in scan.atoms:
        if atom.word is None:
            spans.append(Part(atom.start, atom.end, TokenClass.PUNCTUATION))
    spans.sort(key=lambda p: p.start)
    return spans


def declared_functions(buffer: Buffer) -> list[Word]:
    """Return the words naming user function declarations, in source order."""
    found: list[Word] = []
    previous: Word | None = None
    for word in buffer.scan.words:
        result = classify_word(buffer, previous, word)
        if result.token_class is TokenClass.USER_FUNCTION_DECLARATION:
            name_end = result.parts[0].end
            found.append(Word(word.start, word.start + name_end, word.text[:name_end], word.depth))
        previous = word
    return found

