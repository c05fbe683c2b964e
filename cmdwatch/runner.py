"""One-shot synchronous command execution."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass

logger = logging.getLogger(__name__)


class CommandError(RuntimeError):
    """The runner itself failed; the watched command's own exit status is not an error."""


class LaunchError(CommandError):
    """The executable could not be started (missing, not permitted, ...)."""


class OutputDecodeError(CommandError):
    """The command's standard output is not valid UTF-8."""


@dataclass(frozen=True)
class CommandResult:
    exit_status: int
    stdout_text: str
    stderr_text: str


def run_command(command: Sequence[str]) -> CommandResult:
    """Run *command* (no shell) to completion and capture its output.

    Blocks until the child exits; there is no timeout, so a command that
    never finishes blocks the caller forever.

    Raises:
        LaunchError: If the executable cannot be started.
        OutputDecodeError: If stdout is not valid UTF-8.
    """
    if not command:
        raise LaunchError("empty command")
    name = command[0]
    logger.debug("Executing: %s", " ".join(command))
    try:
        proc = subprocess.run(list(command), capture_output=True, check=False)
    except OSError as e:
        raise LaunchError(f"command {name} failed: {e.strerror or e}") from e

    try:
        stdout_text = proc.stdout.decode("utf-8")
    except UnicodeDecodeError as e:
        raise OutputDecodeError(f"output of {name} is not valid UTF-8: {e}") from e
    # stderr is informational only; never fail on it
    stderr_text = proc.stderr.decode("utf-8", errors="replace")

    logger.debug("%s exited with status %d", name, proc.returncode)
    return CommandResult(
        exit_status=proc.returncode,
        stdout_text=stdout_text,
        stderr_text=stderr_text,
    )
