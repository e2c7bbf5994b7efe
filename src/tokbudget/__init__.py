"""tokbudget: GPT-2 byte-level BPE tokenization and token-budget accounting."""

from ._alphabet import ByteAlphabet, byte_alphabet
from .budget import (
    Msg,
    Role,
    TokenBudget,
    chat_token_count,
    drop_history_if_needed,
    fit_context,
    message_token_count,
    token_count,
)
from .config import BudgetConfig, Settings
from .factory import (
    DEFAULT_MODEL,
    get_tokenizer,
    list_models,
    max_tokens,
    register_tokenizer,
)
from .pretokenize import segment
from .resources import MergeTable, Vocabulary, convert_encoder_json, load_resources
from .tokenizer import Tokenizer
from .types import Token

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("tokbudget")
except PackageNotFoundError:
    __version__ = "dev"


def encode(text: str, model: str = DEFAULT_MODEL) -> list[Token]:
    """Encode ``text`` with the tokenizer of ``model``."""
    return get_tokenizer(model).encode(text)


def decode(tokens: list[Token], model: str = DEFAULT_MODEL) -> str:
    """Decode ``tokens`` with the tokenizer of ``model``."""
    return get_tokenizer(model).decode(tokens)


__all__ = [
    "ByteAlphabet",
    "BudgetConfig",
    "DEFAULT_MODEL",
    "MergeTable",
    "Msg",
    "Role",
    "Settings",
    "TokenBudget",
    "Tokenizer",
    "Vocabulary",
    "byte_alphabet",
    "chat_token_count",
    "convert_encoder_json",
    "decode",
    "drop_history_if_needed",
    "encode",
    "fit_context",
    "get_tokenizer",
    "list_models",
    "load_resources",
    "max_tokens",
    "message_token_count",
    "register_tokenizer",
    "segment",
    "token_count",
]
