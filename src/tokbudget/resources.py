"""
Vocabulary and merge-table resources.

Two static files describe an encoding:

- ``<name>-tokens.bin``: UTF-8 token strings, each followed by a NUL byte;
  a token's position is its id. Missing ids are empty fields.
- ``<name>-merges.bpe``: one ``first second`` pair per line after a header
  line; a rule's position is its rank.

Files are looked up in the configured data directory, the package's ``data``
directory and the cache directory, in that order. If they are found nowhere
they are fetched from the public GPT-2 release and converted.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final, NamedTuple

from ._bpe import Merge
from ._decorators import log_elapsed
from .config import Settings
from .errors import ResourceError, VocabularyError
from .types import Ranks, Token

log = logging.getLogger(__name__)

TOKEN_DELIMITER: Final[bytes] = b"\x00"
TOKENS_SUFFIX: Final[str] = "-tokens.bin"
MERGES_SUFFIX: Final[str] = "-merges.bpe"
PACKAGE_DATA_DIR: Final[Path] = Path(__file__).parent / "data"


class EncodingSource(NamedTuple):
    """Public URLs of the vocabulary JSON and merge list of an encoding."""

    encoder_json: str
    vocab_bpe: str


ENCODING_SOURCES: Final[dict[str, EncodingSource]] = {
    "gpt2": EncodingSource(
        encoder_json="https://openaipublic.blob.core.windows.net/gpt-2/encodings/main/encoder.json",
        vocab_bpe="https://openaipublic.blob.core.windows.net/gpt-2/encodings/main/vocab.bpe",
    ),
}


@dataclass(frozen=True)
class Vocabulary:
    """Token strings indexed by id, plus the derived string -> id mapping."""

    tokens: tuple[str, ...]
    ids: dict[str, Token] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        # empty strings are gaps in the id space and never produced by encoding;
        # on duplicates the later id wins
        ids = {tok: i for i, tok in enumerate(self.tokens) if tok}
        object.__setattr__(self, "ids", ids)

    @classmethod
    def from_bytes(cls, raw: bytes) -> "Vocabulary":
        """Parse the NUL-delimited token list."""
        fields = raw.split(TOKEN_DELIMITER)
        # a trailing delimiter terminates the last token, it does not start a new one
        if fields and fields[-1] == b"":
            fields.pop()
        try:
            tokens = tuple(f.decode("utf-8") for f in fields)
        except UnicodeDecodeError as e:
            raise ResourceError(f"token list is not valid UTF-8: {e}") from e
        log.debug(f"parsed {len(tokens)} vocabulary entries")
        return cls(tokens)

    @classmethod
    def from_mapping(cls, mapping: dict[str, Token]) -> "Vocabulary":
        """Build from a token -> id mapping such as GPT-2's ``encoder.json``."""
        return cls.from_bytes(convert_encoder_json(mapping))

    def token_id(self, symbol: str) -> Token | None:
        """Return the id of ``symbol`` or ``None`` if it is not in the vocabulary."""
        return self.ids.get(symbol)

    def token(self, tok: Token) -> str:
        """
        Return the token string for id ``tok``.

        :raises VocabularyError: If ``tok`` is outside ``0..len(self) - 1``.
        """
        if not 0 <= tok < len(self.tokens):
            raise VocabularyError("token not found in vocabulary", invalid_tok=tok)
        return self.tokens[tok]

    def __len__(self) -> int:
        return len(self.tokens)


@dataclass(frozen=True)
class MergeTable:
    """Ordered merge rules and their ranks."""

    merges: tuple[Merge, ...]
    ranks: Ranks = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        ranks = {(m.first, m.second): rank for rank, m in enumerate(self.merges)}
        object.__setattr__(self, "ranks", ranks)

    @classmethod
    def from_pairs(cls, pairs: list[tuple[str, str]]) -> "MergeTable":
        """Build from ``(first, second)`` pairs in rank order."""
        return cls(tuple(Merge(a, b, a + b) for a, b in pairs))

    @classmethod
    def from_text(cls, raw: str, source: str | None = None) -> "MergeTable":
        """
        Parse a merge list.

        Empty lines are skipped and the first remaining line is a header.

        :param source: Where ``raw`` was read from, for error messages.

        :raises ResourceError: If a rule line has no space separator.
        """
        lines = [(n, line) for n, line in enumerate(raw.split("\n"), 1) if line]
        merges: list[Merge] = []
        for n, line in lines[1:]:
            first, sep, second = line.partition(" ")
            if not sep:
                raise ResourceError(
                    "invalid merge rule, expected 'first second'", path=source, line=n
                )
            merges.append(Merge(first, second, first + second))
        log.debug(f"parsed {len(merges)} merge rules")
        return cls(tuple(merges))

    def __len__(self) -> int:
        return len(self.merges)


def convert_encoder_json(mapping: dict[str, Token]) -> bytes:
    """
    Convert a token -> id mapping into the NUL-delimited token list.

    Ids not present in ``mapping`` become empty fields.
    """
    if not mapping:
        return b""
    tokens = [""] * (max(mapping.values()) + 1)
    for seq, tok in mapping.items():
        tokens[tok] = seq
    return b"".join(seq.encode("utf-8") + TOKEN_DELIMITER for seq in tokens)


def _candidate_dirs(settings: Settings) -> list[Path]:
    dirs = [PACKAGE_DATA_DIR, settings.cache_dir]
    if settings.data_dir is not None:
        dirs.insert(0, settings.data_dir)
    return dirs


def resource_paths(encoding: str, settings: Settings) -> tuple[Path, Path] | None:
    """Return the token-list and merge-list paths of ``encoding`` if both exist."""
    for d in _candidate_dirs(settings):
        tokens_path = d / f"{encoding}{TOKENS_SUFFIX}"
        merges_path = d / f"{encoding}{MERGES_SUFFIX}"
        if tokens_path.is_file() and merges_path.is_file():
            return tokens_path, merges_path
    return None


@log_elapsed("fetched")
def fetch_resources(encoding: str, settings: Settings) -> tuple[Path, Path]:
    """
    Download the public files of ``encoding`` into the cache directory.

    The vocabulary JSON is converted to the token-list format on the way.

    :raises ResourceError: If the encoding has no known source or the download fails.
    """
    # imported lazily: only needed when files are missing
    from tiktoken.load import read_file_cached

    if encoding not in ENCODING_SOURCES:
        raise ResourceError(f"no download source for encoding {encoding!r}")
    source = ENCODING_SOURCES[encoding]

    log.info(f"fetching {encoding} resources into {settings.cache_dir}")
    try:
        mapping = json.loads(read_file_cached(source.encoder_json))
        merges = read_file_cached(source.vocab_bpe)
    except (OSError, ValueError) as e:
        raise ResourceError(f"failed to fetch {encoding} resources: {e}") from e

    settings.cache_dir.mkdir(parents=True, exist_ok=True)
    tokens_path = settings.cache_dir / f"{encoding}{TOKENS_SUFFIX}"
    merges_path = settings.cache_dir / f"{encoding}{MERGES_SUFFIX}"
    tokens_path.write_bytes(convert_encoder_json(mapping))
    merges_path.write_bytes(merges)
    log.info(f"wrote {tokens_path} and {merges_path}")
    return tokens_path, merges_path


@log_elapsed("loaded")
def load_resources(
    encoding: str, settings: Settings | None = None
) -> tuple[Vocabulary, MergeTable]:
    """
    Locate, fetch if needed, and parse the resources of ``encoding``.

    :raises ResourceError: If the files are missing and fetching is disabled,
        or if their contents are malformed.
    """
    if settings is None:
        settings = Settings.from_env()

    paths = resource_paths(encoding, settings)
    if paths is None:
        if settings.offline:
            raise ResourceError(
                f"resources for {encoding!r} not found and fetching is disabled",
                path=str(settings.cache_dir),
            )
        paths = fetch_resources(encoding, settings)

    tokens_path, merges_path = paths
    log.info(f"loading {encoding} vocabulary from {tokens_path.parent}")
    vocab = Vocabulary.from_bytes(tokens_path.read_bytes())
    merges = MergeTable.from_text(
        merges_path.read_text(encoding="utf-8"), source=str(merges_path)
    )

    log.info(f"loaded {len(vocab)} tokens and {len(merges)} merge rules")
    return vocab, merges
