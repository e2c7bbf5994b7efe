"""Decorators shared by the resource loaders."""

import functools
import logging
import time
from typing import Callable

log = logging.getLogger(__name__)


def log_elapsed(label: str, level: int = logging.INFO) -> Callable[[Callable], Callable]:
    """
    Log how long each call to the decorated function takes.

    The first positional argument, usually an encoding name, is included in
    the message. Time is logged even when the call raises.

    :param label: What the call does, e.g. ``"loaded"``.
    :param level: Log level of the message.
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                return func(*args, **kwargs)
            finally:
                elapsed = time.perf_counter() - start
                subject = f" {args[0]}" if args else ""
                log.log(level, f"{label}{subject} in {elapsed:.2f} s")

        return wrapper

    return decorator
