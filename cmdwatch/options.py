"""Command-line scanning for cmdwatch.

Only ``-n`` is recognised. Options must come before the command: scanning
stops at the first token that does not look like ``-<letter>...`` and every
token from there on belongs to the watched command, so ``cmdwatch ls -l``
hands ``-l`` to ``ls``.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

DEFAULT_INTERVAL = 2
DEFAULT_TIME_FORMAT = "%a %b %e %H:%M:%S %Y"

# curses takes the input timeout in milliseconds as a C int
MAX_INTERVAL = (2**31 - 1) // 1000

_OPTION_RE = re.compile(r"^-([A-Za-z])(.*)$")
_DIGITS_RE = re.compile(r"[0-9]+")


class OptionError(ValueError):
    """Raised when argv cannot be turned into a RunConfig."""


@dataclass(frozen=True)
class RunConfig:
    """What to run and how often. Fixed for the life of the process."""

    interval_seconds: int
    command: tuple[str, ...]
    time_format: str = DEFAULT_TIME_FORMAT

    @property
    def command_line(self) -> str:
        return " ".join(self.command)


def _parse_interval(value: str) -> int:
    if _DIGITS_RE.fullmatch(value) is None:
        raise OptionError(f"invalid interval {value!r}: not a whole number of seconds")
    seconds = int(value)
    if seconds <= 0:
        raise OptionError(f"invalid interval {value!r}: must be at least 1 second")
    if seconds > MAX_INTERVAL:
        raise OptionError(f"invalid interval {value!r}: too large (max {MAX_INTERVAL})")
    return seconds


def _next_option(args: Sequence[str], i: int) -> tuple[str, str, int] | None:
    """Return ``(letter, value, tokens_consumed)`` for the option at *i*."""
    match = _OPTION_RE.match(args[i])
    if match is None:
        return None
    letter, value = match.group(1), match.group(2)
    if value:
        return letter, value, 1
    if i + 1 >= len(args):
        raise OptionError("missing option value")
    return letter, args[i + 1], 2


def parse_args(
    argv: Sequence[str],
    default_interval: int = DEFAULT_INTERVAL,
    time_format: str = DEFAULT_TIME_FORMAT,
) -> RunConfig:
    """Turn argv (without the program name) into a RunConfig.

    Raises:
        OptionError: unknown option, missing or invalid option value, or no
                     command left after the options.
    """
    interval = default_interval
    i = 0
    while i < len(argv):
        option = _next_option(argv, i)
        if option is None:
            break
        letter, value, consumed = option
        if letter != "n":
            raise OptionError(f"{letter}: unknown option")
        interval = _parse_interval(value)
        i += consumed

    command = tuple(argv[i:])
    if not command:
        raise OptionError("missing command")
    return RunConfig(interval_seconds=interval, command=command, time_format=time_format)
