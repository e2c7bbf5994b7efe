"""
Regex rendition of the GPT-2 split pattern.

Not used on the encode path; :func:`tokbudget.pretokenize.segment` implements
the same lexical pattern by hand. Kept for cross-checking the scanner.

Source: https://github.com/openai/tiktoken/blob/main/tiktoken_ext/openai_public.py
"""

from enum import Enum
from functools import lru_cache

import regex as re


class TokenPattern(str, Enum):
    """Pre-defined split patterns."""

    GPT2 = (
        r"'(?:[sdmt]|ll|ve|re)|"
        r" ?\p{L}+|"
        r" ?\p{N}+|"
        r" ?[^\s\p{L}\p{N}]+|"
        r"\s+(?!\S)|"
        r"\s+"
    )


@lru_cache(maxsize=None)
def _compile_pattern(pattern: str) -> re.Pattern:
    return re.compile(pattern)


def split_with_pattern(text: str, pattern: str = TokenPattern.GPT2.value) -> list[str]:
    """Split ``text`` into chunks with a regex split pattern."""
    return [m.group(0) for m in _compile_pattern(pattern).finditer(text)]
