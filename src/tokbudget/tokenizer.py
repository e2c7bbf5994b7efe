"""
Byte-level BPE tokenizer over a fixed vocabulary and merge table.
"""

import logging
from collections.abc import Iterable, Iterator
from pathlib import Path

from ._alphabet import byte_alphabet
from ._bpe import bpe
from ._sanitise import render_symbol
from .errors import AlphabetError, VocabularyError
from .pretokenize import segment
from .resources import MergeTable, Vocabulary
from .types import Symbol, Token

log = logging.getLogger(__name__)


class Tokenizer:
    """
    Encode text into token ids and back.

    The vocabulary and merge table are injected, so any pair of resources
    (including small synthetic ones) can back a tokenizer. Instances hold no
    mutable state and are safe to share between threads.

    :param vocab: Token strings indexed by id.
    :param merges: Ranked merge rules.
    :param name: Encoding name, used in log messages.
    :param strict: Raise instead of skipping when a merged symbol has no id.
    """

    def __init__(
        self,
        vocab: Vocabulary,
        merges: MergeTable,
        *,
        name: str = "custom",
        strict: bool = False,
    ) -> None:
        self.vocab = vocab
        self.merges = merges
        self.name = name
        self.strict = strict
        self._alphabet = byte_alphabet()

    @classmethod
    def from_files(
        cls,
        tokens_path: str | Path,
        merges_path: str | Path,
        *,
        name: str = "custom",
        strict: bool = False,
    ) -> "Tokenizer":
        """Build a tokenizer from a token-list file and a merge-list file."""
        merges_path = Path(merges_path)
        vocab = Vocabulary.from_bytes(Path(tokens_path).read_bytes())
        merges = MergeTable.from_text(
            merges_path.read_text(encoding="utf-8"), source=str(merges_path)
        )
        return cls(vocab, merges, name=name, strict=strict)

    def bpe_symbols(self, chunk: str) -> list[Symbol]:
        """Return the merged symbols of a single pre-tokenized chunk."""
        symbols = self._alphabet.encode_bytes(chunk.encode("utf-8", errors="replace"))
        return bpe(symbols, self.merges.merges, self.merges.ranks)

    def encode_iter(self, text: str) -> Iterator[Token]:
        """
        Lazily yield the token ids of ``text``.

        A merged symbol with no vocabulary id means the vocabulary and merge
        table disagree. It is logged and skipped, or raised when ``strict``.

        :raises VocabularyError: If ``strict`` and a merged symbol has no id.
        """
        for chunk in segment(text):
            for symbol in self.bpe_symbols(chunk):
                tok = self.vocab.token_id(symbol)
                if tok is not None:
                    yield tok
                    continue
                if self.strict:
                    raise VocabularyError("no token id for merged symbol", symbol=symbol)
                log.warning(
                    f"no encoding found for token {render_symbol(symbol)!r} "
                    f"in {self.name} vocabulary"
                )

    def encode(self, text: str) -> list[Token]:
        """Encode text into a sequence of token ids."""
        return list(self.encode_iter(text))

    def token_count(self, text: str) -> int:
        """Return the number of tokens ``text`` encodes to."""
        return sum(1 for _ in self.encode_iter(text))

    def decode_bytes(self, tokens: Iterable[Token]) -> bytes:
        """
        Decode token ids into the raw byte stream.

        :raises VocabularyError: If any token id is not in the vocabulary.
        """
        parts: list[bytes] = []
        for tok in tokens:
            symbols = self.vocab.token(tok)
            try:
                parts.append(self._alphabet.decode_symbols(symbols))
            except AlphabetError as e:
                raise VocabularyError(
                    "vocabulary entry is not in the byte alphabet", invalid_tok=tok
                ) from e
        return b"".join(parts)

    def decode(self, tokens: Iterable[Token], errors: str = "replace") -> str:
        """
        Decode a sequence of token ids back into text.

        :param errors: How to handle invalid UTF-8, "strict" or "replace".
        :raises VocabularyError: If any token id is not in the vocabulary.
        """
        return self.decode_bytes(tokens).decode("utf-8", errors=errors)

    def vocab_size(self) -> int:
        """Return the number of ids in the vocabulary."""
        return len(self.vocab)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(name={self.name!r}, "
            f"vocab_size={len(self.vocab)}, merges={len(self.merges)})"
        )
