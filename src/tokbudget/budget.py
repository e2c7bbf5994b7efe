"""
Token-budget accounting for chat messages.

Counts tokens in messages and whole chats, picks context messages that fit a
budget, and drops old history so a conversation stays under a budget. Every
function here is pure: inputs are never mutated.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from .config import BudgetConfig
from .errors import MessageError
from .factory import DEFAULT_MODEL, get_tokenizer

log = logging.getLogger(__name__)


class Role(str, Enum):
    """Author of a chat message."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"

    @classmethod
    def get(cls, name: str) -> "Role":
        """Get role by name (case-insensitive)."""
        try:
            return cls(name.lower())
        except ValueError:
            raise MessageError(
                f"Unknown role: {name!r}. Valid roles: {', '.join(r.value for r in cls)}"
            ) from None


@dataclass(frozen=True)
class Msg:
    """One chat message."""

    role: Role
    content: str

    def __post_init__(self) -> None:
        if not isinstance(self.role, Role):
            object.__setattr__(self, "role", Role.get(self.role))

    @classmethod
    def system(cls, content: str) -> "Msg":
        return cls(Role.SYSTEM, content)

    @classmethod
    def user(cls, content: str) -> "Msg":
        return cls(Role.USER, content)

    @classmethod
    def assistant(cls, content: str) -> "Msg":
        return cls(Role.ASSISTANT, content)

    @classmethod
    def from_dict(cls, data: dict[str, str]) -> "Msg":
        """Build from a ``{"role": ..., "content": ...}`` mapping."""
        try:
            return cls(data["role"], data["content"])
        except KeyError as e:
            raise MessageError(f"message is missing {e.args[0]!r}") from None

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role.value, "content": self.content}


class TokenCounter(Protocol):
    """Anything that can count the tokens of a string."""

    def token_count(self, text: str) -> int: ...


class TokenBudget:
    """
    Token accounting on top of a tokenizer.

    :param tokenizer: Object providing ``token_count(text)``.
    :param config: Overheads and fill threshold.
    """

    def __init__(self, tokenizer: TokenCounter, config: BudgetConfig | None = None) -> None:
        self.tokenizer = tokenizer
        self.config = config if config is not None else BudgetConfig()

    def token_count(self, text: str) -> int:
        """Return the number of tokens in ``text``."""
        return self.tokenizer.token_count(text)

    def message_token_count(self, msg: Msg) -> int:
        """
        Return the tokens ``msg`` costs.

        The chat wire format is not published, so role and formatting are
        approximated by a fixed per-message overhead.
        """
        return self.tokenizer.token_count(msg.content) + self.config.message_overhead

    def chat_token_count(self, messages: Sequence[Msg]) -> int:
        """Return the tokens a whole chat costs."""
        return self.config.chat_overhead + sum(
            self.message_token_count(msg) for msg in messages
        )

    def fit_context(self, candidates: Sequence[Msg], budget: int) -> tuple[list[Msg], int]:
        """
        Select the candidates that fit into ``budget`` tokens.

        Candidates are taken in order; ones that do not fit the remaining
        budget are skipped, not reordered. The scan stops once the remaining
        budget drops below ``config.min_fill``.

        :return: Selected messages and the tokens they use.
        """
        selected: list[Msg] = []
        used = 0
        remaining = budget
        for msg in candidates:
            n = self.message_token_count(msg)
            if n <= remaining:
                selected.append(msg)
                remaining -= n
                used += n
            if remaining < self.config.min_fill:
                # not worth filling a tiny hole
                break

        log.debug(f"fit {len(selected)}/{len(candidates)} messages into {used}/{budget} tokens")
        return selected, used

    def drop_history_if_needed(
        self, chat: Sequence[Msg], fixed_suffix_len: int, budget: int
    ) -> tuple[Sequence[Msg], int]:
        """
        Drop the oldest messages until ``chat`` fits into ``budget`` tokens.

        The last ``fixed_suffix_len`` messages are never dropped; the ones before
        them are dropped oldest first. If dropping everything droppable is not
        enough, the returned total exceeds ``budget``.

        :return: The chat (the input itself when nothing was dropped) and its tokens.
        """
        n_msgs = len(chat)
        fixed = min(max(fixed_suffix_len, 0), n_msgs)
        # token counting dominates the cost, so count each message once
        msg_tokens = [self.message_token_count(msg) for msg in chat]
        used = self.config.chat_overhead + sum(msg_tokens)

        max_drop = n_msgs - fixed
        n_drop = 0
        while used > budget and n_drop < max_drop:
            used -= msg_tokens[n_drop]
            n_drop += 1

        if n_drop == 0:
            return chat, used

        if used > budget:
            log.info(
                f"chat still uses {used} tokens (budget {budget}) after dropping "
                f"all {n_drop} droppable messages"
            )
        else:
            log.debug(f"dropped {n_drop} messages, chat now uses {used}/{budget} tokens")
        return list(chat[n_drop:]), used


def _budget(model: str) -> TokenBudget:
    return TokenBudget(get_tokenizer(model), BudgetConfig.from_env())


def token_count(text: str, model: str = DEFAULT_MODEL) -> int:
    """Count tokens in ``text`` with the tokenizer of ``model``."""
    return get_tokenizer(model).token_count(text)


def message_token_count(msg: Msg, model: str = DEFAULT_MODEL) -> int:
    """Count tokens of one chat message, including its overhead."""
    return _budget(model).message_token_count(msg)


def chat_token_count(messages: Sequence[Msg], model: str = DEFAULT_MODEL) -> int:
    """Count tokens of a whole chat, including all overheads."""
    return _budget(model).chat_token_count(messages)


def fit_context(
    candidates: Sequence[Msg], budget: int, model: str = DEFAULT_MODEL
) -> tuple[list[Msg], int]:
    """
    Return the candidates that fit into ``budget``, skipping those that don't.

    Meant for including knowledge base context into chat prompts.
    """
    return _budget(model).fit_context(candidates, budget)


def drop_history_if_needed(
    chat: Sequence[Msg], fixed_suffix_len: int, budget: int, model: str = DEFAULT_MODEL
) -> tuple[Sequence[Msg], int]:
    """Drop the oldest droppable messages of ``chat`` until it fits into ``budget``."""
    return _budget(model).drop_history_if_needed(chat, fixed_suffix_len, budget)
