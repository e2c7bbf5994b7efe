"""Shared fixtures: a tiny synthetic vocabulary and the real GPT-2 tokenizer."""

import pytest

from tokbudget import MergeTable, Tokenizer, Vocabulary, byte_alphabet
from tokbudget.errors import ResourceError

# "Ġ" is the alphabet symbol of the space byte
TINY_MERGES = [
    ("Ġ", "w"),
    ("o", "r"),
    ("Ġw", "or"),
    ("l", "d"),
    ("Ġwor", "ld"),
    ("h", "e"),
    ("l", "l"),
    ("he", "ll"),
    ("hell", "o"),
]

# ids of the merged tokens, following the 256 byte tokens
HELLO = 264
SPACE_WORLD = 260
LL = 262


def tiny_vocab(merges: list[tuple[str, str]] = TINY_MERGES) -> Vocabulary:
    """Byte tokens (id = byte value) followed by one token per merge result."""
    alphabet = byte_alphabet()
    tokens = [alphabet.encode(b) for b in range(256)]
    tokens += [first + second for first, second in merges]
    return Vocabulary(tuple(tokens))


@pytest.fixture(scope="session")
def merge_table() -> MergeTable:
    return MergeTable.from_pairs(TINY_MERGES)


@pytest.fixture(scope="session")
def vocab() -> Vocabulary:
    return tiny_vocab()


@pytest.fixture(scope="session")
def tokenizer(vocab, merge_table) -> Tokenizer:
    """Return a tokenizer over the tiny vocabulary."""
    return Tokenizer(vocab, merge_table, name="tiny")


@pytest.fixture
def shared_tiny(monkeypatch, tokenizer) -> Tokenizer:
    """Install the tiny tokenizer as the shared gpt2 tokenizer for one test."""
    from tokbudget import factory

    monkeypatch.setattr(factory, "_tokenizers", {"gpt2": tokenizer})
    return tokenizer


@pytest.fixture(scope="session")
def gpt2() -> Tokenizer:
    """Return the real GPT-2 tokenizer, skipping when resources are unavailable."""
    from tokbudget import get_tokenizer

    try:
        return get_tokenizer("gpt-4")
    except (ResourceError, ImportError) as e:
        pytest.skip(f"GPT-2 resources unavailable: {e}")
