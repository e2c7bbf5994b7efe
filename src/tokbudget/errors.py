"""Custom exception hierarchy for tokbudget errors."""

from .types import Token


class TokBudgetError(Exception):
    """Base exception for all tokbudget errors."""


class AlphabetError(TokBudgetError):
    """Raised when a symbol has no byte in the byte alphabet."""

    def __init__(self, message: str, *, symbol: str | None = None) -> None:
        if symbol is not None:
            message = f"{message} (symbol: {symbol!r})"
        super().__init__(message)
        self.symbol = symbol


class VocabularyError(TokBudgetError):
    """Raised when vocabulary lookups fail."""

    def __init__(
        self,
        message: str,
        *,
        invalid_tok: Token | None = None,
        symbol: str | None = None,
    ) -> None:
        """Initialize with optional token and symbol that get appended to the message."""
        extra = " "
        # decoding: token not in vocab
        if invalid_tok is not None:
            extra += f"(invalid token: {invalid_tok}) "
        # encoding: merged symbol not in vocab
        if symbol is not None:
            extra += f"(symbol: {symbol!r}) "
        super().__init__(message + extra)
        self.invalid_tok = invalid_tok
        self.symbol = symbol


class ResourceError(TokBudgetError):
    """Raised when locating or parsing vocabulary/merge resources fails."""

    def __init__(
        self,
        message: str,
        *,
        path: str | None = None,
        line: int | None = None,
    ) -> None:
        extra = " "
        if path:
            extra += f"(path: {path}) "
        if line is not None:
            extra += f"(line: {line}) "
        super().__init__(message + extra)
        self.path = path
        self.line = line


class ModelError(TokBudgetError):
    """Raised when a model name cannot be resolved."""

    def __init__(
        self,
        message: str,
        *,
        invalid_name: str | None = None,
        available: list[str] | None = None,
    ) -> None:
        extra = " "
        if invalid_name:
            extra += f"(available: {available}) (got {invalid_name}) "
        super().__init__(message + extra)
        self.invalid_name = invalid_name
        self.available = available


class MessageError(TokBudgetError):
    """Raised when a chat message is malformed."""
