"""
Byte <-> symbol alphabet used by byte-level BPE.

Merge rules are stored as strings, so every raw byte needs a distinct,
unambiguous character. Bytes that already render as printable Latin-1
characters map to themselves; the rest are shifted to code points from 256 up.
"""

import logging
import threading
from typing import Final

from .errors import AlphabetError

log = logging.getLogger(__name__)

# byte ranges that keep their own code point: "!".."~", "¡".."¬", "®".."ÿ"
PRINTABLE_RANGES: Final[tuple[range, ...]] = (
    range(ord("!"), ord("~") + 1),
    range(ord("¡"), ord("¬") + 1),
    range(ord("®"), ord("ÿ") + 1),
)
SHIFT_START: Final[int] = 256


class ByteAlphabet:
    """Immutable bijection between the 256 byte values and 256 symbols."""

    __slots__ = ("_encoder", "_decoder")

    def __init__(self) -> None:
        encoder: list[str | None] = [None] * 256
        for printable in PRINTABLE_RANGES:
            for b in printable:
                encoder[b] = chr(b)

        # remaining bytes get sequential code points in ascending byte order
        nxt = SHIFT_START
        for b in range(256):
            if encoder[b] is None:
                encoder[b] = chr(nxt)
                nxt += 1

        self._encoder: tuple[str, ...] = tuple(encoder)  # type: ignore[arg-type]
        self._decoder: dict[str, int] = {s: b for b, s in enumerate(self._encoder)}

    def encode(self, b: int) -> str:
        """Return the symbol for byte value ``b``."""
        return self._encoder[b]

    def decode(self, symbol: str) -> int:
        """
        Return the byte value for ``symbol``.

        :raises AlphabetError: If the symbol is not part of the alphabet.
        """
        try:
            return self._decoder[symbol]
        except KeyError:
            raise AlphabetError("symbol not in byte alphabet", symbol=symbol) from None

    def encode_bytes(self, data: bytes) -> list[str]:
        """Map every byte of ``data`` to its symbol."""
        enc = self._encoder
        return [enc[b] for b in data]

    def decode_symbols(self, symbols: str) -> bytes:
        """Map every character of ``symbols`` back to its byte."""
        dec = self._decoder
        try:
            return bytes(dec[c] for c in symbols)
        except KeyError as e:
            raise AlphabetError("symbol not in byte alphabet", symbol=e.args[0]) from None

    def __len__(self) -> int:
        return len(self._encoder)


_alphabet: ByteAlphabet | None = None
_alphabet_lock = threading.Lock()


def byte_alphabet() -> ByteAlphabet:
    """Return the shared alphabet, building it on first use."""
    global _alphabet
    if _alphabet is None:
        with _alphabet_lock:
            # another thread may have built it while we waited
            if _alphabet is None:
                _alphabet = ByteAlphabet()
                log.debug("built byte alphabet")
    return _alphabet
