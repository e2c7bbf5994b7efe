"""
Pre-tokenization: split text into chunks that BPE is applied to independently.

The scanner below is a hand-written state machine for the GPT-2 split pattern

    's|'t|'re|'ve|'m|'ll|'d| ?\\pL+| ?\\pN+| ?[^\\s\\pL\\pN]+|\\s+(?!\\S)|\\s+

i.e. chunks are contractions, letter runs, number runs, runs of other symbols
(each optionally preceded by one space) and whitespace runs. In a run of
whitespace the trailing space, if any, becomes part of the next chunk.

One difference from the regex: a whitespace run whose last character is not a
space (e.g. ``"\\n\\n"`` before a word) is kept whole, where the regex splits
off the last character.
"""

import unicodedata
from collections.abc import Iterator
from enum import Enum, auto
from typing import Final

# Latin-1 whitespace; beyond that the Z* categories cover White_Space
_LATIN1_SPACE: Final[frozenset[str]] = frozenset("\t\n\v\f\r \x85\xa0")
_SPACE_CATEGORIES: Final[frozenset[str]] = frozenset({"Zs", "Zl", "Zp"})

# apostrophe + one of these is a complete 2-char contraction
_SHORT_SUFFIXES: Final[frozenset[str]] = frozenset("stmd")


class SplitState(Enum):
    """Scanner states."""

    INITIAL = auto()
    AFTER_APOSTROPHE = auto()
    AFTER_APOSTROPHE_R = auto()
    AFTER_APOSTROPHE_V = auto()
    AFTER_APOSTROPHE_L = auto()
    AFTER_SPACE = auto()
    IN_WHITESPACE_AFTER_SPACE = auto()
    IN_WHITESPACE_AFTER_OTHER = auto()
    IN_LETTERS = auto()
    IN_NUMBERS = auto()
    IN_OTHER = auto()


# states holding an apostrophe plus the first letter of an unfinished contraction
_PARTIAL_CONTRACTION: Final[frozenset[SplitState]] = frozenset(
    {
        SplitState.AFTER_APOSTROPHE_R,
        SplitState.AFTER_APOSTROPHE_V,
        SplitState.AFTER_APOSTROPHE_L,
    }
)


def is_space(c: str, category: str | None = None) -> bool:
    """Return True for Unicode White_Space characters."""
    if c <= "\xff":
        return c in _LATIN1_SPACE
    return (category or unicodedata.category(c)) in _SPACE_CATEGORIES


def segment(text: str) -> Iterator[str]:
    """
    Yield the chunks of ``text`` in order.

    Chunks are never empty and concatenate back to ``text``.
    """
    state = SplitState.INITIAL
    start = 0
    out: list[str] = []

    def flush(end: int) -> None:
        nonlocal start
        if end > start:
            out.append(text[start:end])
            start = end

    S = SplitState
    for pos, c in enumerate(text):
        cat = unicodedata.category(c)
        is_s = is_space(c, cat)
        is_l = cat[0] == "L"
        is_n = cat[0] == "N"

        again = True
        while again:
            again = False
            match state:
                case S.INITIAL:
                    if c == "'":
                        state = S.AFTER_APOSTROPHE
                    elif c == " ":
                        state = S.AFTER_SPACE
                    elif is_s:
                        state = S.IN_WHITESPACE_AFTER_OTHER
                    elif is_l:
                        state = S.IN_LETTERS
                    elif is_n:
                        state = S.IN_NUMBERS
                    else:
                        state = S.IN_OTHER

                case S.AFTER_APOSTROPHE:
                    if c in _SHORT_SUFFIXES:
                        flush(pos + 1)
                        state = S.INITIAL
                    elif c == "r":
                        state = S.AFTER_APOSTROPHE_R
                    elif c == "v":
                        state = S.AFTER_APOSTROPHE_V
                    elif c == "l":
                        state = S.AFTER_APOSTROPHE_L
                    else:
                        state, again = S.IN_OTHER, True

                case S.AFTER_APOSTROPHE_R | S.AFTER_APOSTROPHE_V | S.AFTER_APOSTROPHE_L:
                    want = "l" if state is S.AFTER_APOSTROPHE_L else "e"
                    if c == want:
                        flush(pos + 1)
                        state = S.INITIAL
                    else:
                        # lone apostrophe, then the letter starts a letter run
                        flush(start + 1)
                        state, again = S.IN_LETTERS, True

                case S.AFTER_SPACE:
                    if c == " ":
                        state = S.IN_WHITESPACE_AFTER_SPACE
                    elif is_s:
                        state = S.IN_WHITESPACE_AFTER_OTHER
                    elif is_l:
                        state = S.IN_LETTERS
                    elif is_n:
                        state = S.IN_NUMBERS
                    else:
                        state = S.IN_OTHER

                case S.IN_WHITESPACE_AFTER_OTHER:
                    if c == " ":
                        state = S.IN_WHITESPACE_AFTER_SPACE
                    elif not is_s:
                        flush(pos)
                        state, again = S.INITIAL, True

                case S.IN_WHITESPACE_AFTER_SPACE:
                    if c == " ":
                        pass
                    elif is_s:
                        state = S.IN_WHITESPACE_AFTER_OTHER
                    else:
                        # the final space belongs to the next chunk
                        flush(pos - 1)
                        state, again = S.AFTER_SPACE, True

                case S.IN_LETTERS:
                    if not is_l:
                        flush(pos)
                        state, again = S.INITIAL, True

                case S.IN_NUMBERS:
                    if not is_n:
                        flush(pos)
                        state, again = S.INITIAL, True

                case S.IN_OTHER:
                    if is_s or is_l or is_n:
                        flush(pos)
                        state, again = S.INITIAL, True

        if out:
            yield from out
            out.clear()

    if state in _PARTIAL_CONTRACTION:
        flush(start + 1)
    flush(len(text))
    yield from out
