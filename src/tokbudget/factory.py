"""Model registry: which tokenizer a model uses and how large its context is."""

import logging
import threading
from typing import Final

import regex as re

from .config import Settings
from .errors import ModelError
from .resources import load_resources
from .tokenizer import Tokenizer

log = logging.getLogger(__name__)


# Models
# ===================================================================================

MODEL_GPT4_TURBO: Final[str] = "gpt-4-turbo"
MODEL_GPT4_TURBO_PREVIEW: Final[str] = "gpt-4-turbo-preview"
MODEL_GPT4: Final[str] = "gpt-4"
MODEL_GPT4_32K: Final[str] = "gpt-4-32k"
MODEL_GPT35_TURBO: Final[str] = "gpt-3.5-turbo"
MODEL_TEXT_DAVINCI_003: Final[str] = "text-davinci-003"
MODEL_EMBEDDING_3_LARGE: Final[str] = "text-embedding-3-large"
MODEL_EMBEDDING_3_SMALL: Final[str] = "text-embedding-3-small"
MODEL_EMBEDDING_ADA_002: Final[str] = "text-embedding-ada-002"

DEFAULT_MODEL: Final[str] = MODEL_GPT4_TURBO
DEFAULT_ENCODING: Final[str] = "gpt2"

# prompt + completion tokens each model accepts
_CONTEXT_SIZES: Final[dict[str, int]] = {
    "ada": 2048,
    "babbage": 2048,
    "curie": 2048,
    "davinci": 2048,
    "text-ada-001": 2048,
    "text-babbage-001": 2048,
    "text-curie-001": 2048,
    "code-davinci-002": 4000,
    "text-davinci-002": 4000,
    MODEL_TEXT_DAVINCI_003: 4097,
    MODEL_GPT35_TURBO: 4096,
    MODEL_GPT4: 8192,
    MODEL_GPT4_32K: 32768,
    MODEL_GPT4_TURBO: 128000,
    MODEL_GPT4_TURBO_PREVIEW: 128000,
    "gpt-4-1106-preview": 128000,
    "gpt-4-0125-preview": 128000,
    MODEL_EMBEDDING_ADA_002: 8192,
    MODEL_EMBEDDING_3_SMALL: 8192,
    MODEL_EMBEDDING_3_LARGE: 8192,
}

# dated snapshot names -> generic model, most specific first
_SNAPSHOTS: Final[tuple[tuple[re.Pattern, str], ...]] = (
    (re.compile(r"^gpt-4-turbo-\d{4}-\d{2}-\d{2}$"), MODEL_GPT4_TURBO),
    (re.compile(r"^gpt-3\.5-turbo-\d{4}$"), MODEL_GPT35_TURBO),
    (re.compile(r"^gpt-4-32k-\d{4}$"), MODEL_GPT4_32K),
    (re.compile(r"^gpt-4-\d{4}$"), MODEL_GPT4),
)

FINE_TUNE_MARKER: Final[str] = ":ft-"


def list_models() -> list[str]:
    """Return the names of all models with a known context size."""
    return list(_CONTEXT_SIZES.keys())


def resolve_model(model: str) -> str | None:
    """Map snapshot and fine-tuned names to their base model, or ``None`` if unknown."""
    if model in _CONTEXT_SIZES:
        return model
    base, marker, _ = model.partition(FINE_TUNE_MARKER)
    if marker:
        return resolve_model(base)
    for snapshot, generic in _SNAPSHOTS:
        if snapshot.match(model):
            return generic
    return None


def max_tokens(model: str) -> int:
    """
    Return the context size (prompt + completion tokens) of ``model``.

    :raises ModelError: If the model name is unknown.

    .. code-block:: python

        max_tokens("gpt-4")               # 8192
        max_tokens("gpt-3.5-turbo-0613")  # 4096
        max_tokens("davinci:ft-acme")     # 2048
    """
    resolved = resolve_model(model)
    if resolved is None:
        raise ModelError("unknown model name", invalid_name=model, available=list_models())
    return _CONTEXT_SIZES[resolved]


# ===================================================================================


# Tokenizers
# ===================================================================================

_tokenizers: dict[str, Tokenizer] = {}
_tokenizers_lock = threading.Lock()


def encoding_for_model(model: str) -> str:
    """
    Return the vocabulary name used by ``model``.

    Only one vocabulary is implemented; unknown models use it too.
    """
    if resolve_model(model) is None:
        log.debug(f"unknown model {model!r}, using {DEFAULT_ENCODING} vocabulary")
    return DEFAULT_ENCODING


def get_tokenizer(model: str = DEFAULT_MODEL, settings: Settings | None = None) -> Tokenizer:
    """
    Return the shared tokenizer for ``model``.

    Resources are loaded on first use, exactly once per vocabulary even when
    several threads ask at the same time.

    :raises ResourceError: If the vocabulary resources cannot be loaded.
    """
    encoding = encoding_for_model(model)
    tokenizer = _tokenizers.get(encoding)
    if tokenizer is not None:
        return tokenizer

    with _tokenizers_lock:
        # another thread may have loaded it while we waited
        tokenizer = _tokenizers.get(encoding)
        if tokenizer is None:
            vocab, merges = load_resources(encoding, settings)
            tokenizer = Tokenizer(vocab, merges, name=encoding)
            _tokenizers[encoding] = tokenizer
    return tokenizer


def register_tokenizer(tokenizer: Tokenizer, encoding: str = DEFAULT_ENCODING) -> None:
    """Install ``tokenizer`` as the shared tokenizer of ``encoding``."""
    with _tokenizers_lock:
        _tokenizers[encoding] = tokenizer


# ===================================================================================
