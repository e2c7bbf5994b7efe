"""
Core Byte Pair Encoding (BPE) merge operations.

Works on symbol sequences: lists of strings that start as one symbol per byte
(see :mod:`tokbudget._alphabet`) and are collapsed by ranked merge rules.
"""

from typing import NamedTuple

from .types import Ranks, Symbol


class Merge(NamedTuple):
    """One merge rule: ``first`` followed by ``second`` becomes ``result``."""

    first: Symbol
    second: Symbol
    result: Symbol


def find_best_merge(symbols: list[Symbol], ranks: Ranks) -> int | None:
    """
    Return the lowest rank among adjacent pairs in ``symbols``.

    Ties cannot happen since a rank identifies a single pair. Returns ``None``
    when no adjacent pair has a rank.
    """
    best: int | None = None
    for i in range(1, len(symbols)):
        rank = ranks.get((symbols[i - 1], symbols[i]))
        if rank is not None and (best is None or rank < best):
            best = rank
    return best


def merge_all(symbols: list[Symbol], merge: Merge) -> list[Symbol]:
    """
    Replace every occurrence of ``merge.first, merge.second`` with ``merge.result``.

    Occurrences are matched left to right without overlap, so ``a a a`` with
    the rule ``a + a`` becomes ``aa a``.
    """
    first, second = merge.first, merge.second
    n = len(symbols)
    merged: list[Symbol] = []

    i = 0
    while i < n:
        if i < n - 1 and symbols[i] == first and symbols[i + 1] == second:
            merged.append(merge.result)
            i += 2
        else:
            merged.append(symbols[i])
            i += 1

    return merged


def bpe(symbols: list[Symbol], merges: tuple[Merge, ...], ranks: Ranks) -> list[Symbol]:
    """
    Apply merges to ``symbols`` until none applies.

    Each round merges only the globally best-ranked pair, since merging one
    pair can change which pairs its neighbours form. Every round shortens the
    sequence, so there are at most ``len(symbols) - 1`` rounds.
    """
    while len(symbols) > 1:
        rank = find_best_merge(symbols, ranks)
        if rank is None:
            break
        symbols = merge_all(symbols, merges[rank])
    return symbols
