"""
Core types for tokenization and budgeting.
"""

from typing import TypeAlias

Token: TypeAlias = int
Symbol: TypeAlias = str
SymbolPair: TypeAlias = tuple[Symbol, Symbol]
Ranks: TypeAlias = dict[SymbolPair, int]
