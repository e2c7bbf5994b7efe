"""Runtime configuration: budget constants and resource locations."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

ENV_PREFIX: Final[str] = "TOKBUDGET_"

# approximations of the chat wire format cost, which is not published
DEFAULT_MESSAGE_OVERHEAD: Final[int] = 5
DEFAULT_CHAT_OVERHEAD: Final[int] = 2
# remaining budget below this is not worth filling
DEFAULT_MIN_FILL: Final[int] = 20


def _env_int(name: str, default: int) -> int:
    """Read an integer from ``TOKBUDGET_<name>``, falling back to ``default``."""
    var = ENV_PREFIX + name
    raw = os.environ.get(var, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{var} must be an integer, got {raw!r}") from None


def _env_path(name: str) -> Path | None:
    raw = os.environ.get(ENV_PREFIX + name, "").strip()
    return Path(raw).expanduser() if raw else None


@dataclass(frozen=True)
class BudgetConfig:
    """
    Token accounting constants.

    :param message_overhead: Tokens added per chat message for role and formatting.
    :param chat_overhead: Tokens added once per chat.
    :param min_fill: Remaining budget below which context fitting stops.
    """

    message_overhead: int = DEFAULT_MESSAGE_OVERHEAD
    chat_overhead: int = DEFAULT_CHAT_OVERHEAD
    min_fill: int = DEFAULT_MIN_FILL

    @classmethod
    def from_env(cls) -> "BudgetConfig":
        """Build a config, letting environment variables override the defaults."""
        return cls(
            message_overhead=_env_int("MESSAGE_OVERHEAD", DEFAULT_MESSAGE_OVERHEAD),
            chat_overhead=_env_int("CHAT_OVERHEAD", DEFAULT_CHAT_OVERHEAD),
            min_fill=_env_int("MIN_FILL", DEFAULT_MIN_FILL),
        )


@dataclass(frozen=True)
class Settings:
    """
    Where vocabulary resources are looked up.

    :param data_dir: Directory searched first for resource files.
    :param cache_dir: Directory fetched resources are written to.
    :param offline: Never download missing resources when ``True``.
    """

    data_dir: Path | None = None
    cache_dir: Path = Path("~/.cache/tokbudget").expanduser()
    offline: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        """Read ``TOKBUDGET_DATA_DIR``, ``TOKBUDGET_CACHE_DIR`` and ``TOKBUDGET_OFFLINE``."""
        cache_dir = _env_path("CACHE_DIR")
        return cls(
            data_dir=_env_path("DATA_DIR"),
            cache_dir=cache_dir if cache_dir is not None else cls.cache_dir,
            offline=os.environ.get(ENV_PREFIX + "OFFLINE", "").strip() == "1",
        )
