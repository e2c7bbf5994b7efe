"""
Rendering of byte-alphabet symbols for log messages.
"""

import unicodedata

from ._alphabet import byte_alphabet
from .errors import AlphabetError
from .types import Symbol


def escape_controls(s: str) -> str:
    """Escape Unicode control characters (any ``C*`` category) as ``\\uXXXX``."""
    return "".join(
        f"\\u{ord(c):04x}" if unicodedata.category(c)[0] == "C" else c for c in s
    )


def render_symbol(symbol: Symbol) -> str:
    """
    Show a merged symbol as the text it stands for.

    ``"Ġworld"`` renders as ``" world"`` and ``"Ċ"`` as ``"\\u000a"``. Bytes that
    do not form valid UTF-8 show as U+FFFD. A symbol with characters outside
    the byte alphabet is returned unchanged.
    """
    try:
        raw = byte_alphabet().decode_symbols(symbol)
    except AlphabetError:
        return symbol
    return escape_controls(raw.decode("utf-8", errors="replace"))
