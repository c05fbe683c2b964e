"""Run a command periodically and show its output full-screen.

Usage:
    cmdwatch [-n SECONDS] COMMAND [ARG ...]

The command runs once straight away, then again whenever the interval passes
without a key press or the terminal is resized. Any other key quits.
"""

from __future__ import annotations

import curses
import logging
import socket
import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime

from cmdwatch.config import load_config, resolve_path
from cmdwatch.logs import configure_logging
from cmdwatch.options import OptionError, RunConfig, parse_args
from cmdwatch.runner import CommandError, CommandResult, run_command
from cmdwatch.terminal import (
    CursesSession,
    KeyPressed,
    Resized,
    TerminalSession,
    TimerExpired,
    opened,
)

logger = logging.getLogger(__name__)

BODY_ROW = 3

Runner = Callable[[Sequence[str]], CommandResult]
Clock = Callable[[], datetime]


# ── Frame composition ──────────────────────────────────────────────────────


@dataclass(frozen=True)
class Frame:
    """One screenful: heading and banner on row 0, command output below."""

    heading: str
    banner: str
    banner_column: int
    body: str


def compose_frame(
    config: RunConfig,
    result: CommandResult,
    hostname: str,
    now: datetime,
    width: int,
) -> Frame:
    banner = f"{hostname}: {now.strftime(config.time_format)}"
    return Frame(
        heading=f"Every {config.interval_seconds}s: {config.command_line}",
        banner=banner,
        # Right edge of the banner meets the right edge of the screen
        banner_column=max(0, width - len(banner)),
        body=result.stdout_text,
    )


def draw_frame(session: TerminalSession, frame: Frame) -> None:
    session.clear()
    session.move_cursor(0, 0)
    session.write(frame.heading)
    session.move_cursor(0, frame.banner_column)
    session.write(frame.banner)
    session.move_cursor(BODY_ROW, 0)
    session.write(frame.body)
    session.refresh()


# ── Main loop ──────────────────────────────────────────────────────────────


def watch(
    config: RunConfig,
    session: TerminalSession,
    *,
    runner: Runner = run_command,
    clock: Clock = datetime.now,
    hostname: str | None = None,
) -> int:
    """Redraw until a key is pressed. Returns the exit status (always 0).

    The session is opened here and closed on the way out, also when the
    runner raises, so errors reach the caller with the terminal restored.
    """
    host = hostname if hostname is not None else socket.gethostname()

    def redraw() -> None:
        result = runner(config.command)
        width, _ = session.dimensions()
        draw_frame(session, compose_frame(config, result, host, clock(), width))

    with opened(session, config.interval_seconds):
        redraw()
        while True:
            event = session.poll_event()
            if isinstance(event, (TimerExpired, Resized)):
                logger.debug("Redraw on %s", event)
                redraw()
            elif isinstance(event, KeyPressed):
                logger.info("Quit on key %d", event.code)
                break
    return 0


# ── CLI entry point ────────────────────────────────────────────────────────


def main(
    argv: Sequence[str] | None = None,
    session_factory: Callable[[], TerminalSession] = CursesSession,
) -> int:
    args = sys.argv[1:] if argv is None else list(argv)

    settings = load_config(resolve_path())
    try:
        configure_logging(settings["log"])
    except OSError as e:
        print(f"cmdwatch: cannot open log file: {e}", file=sys.stderr)
        return 1

    try:
        config = parse_args(
            args,
            default_interval=settings["interval"],
            time_format=settings["time_format"],
        )
    except OptionError as e:
        print(f"cmdwatch: error: {e}", file=sys.stderr)
        print("usage: cmdwatch [-n SECONDS] COMMAND [ARG ...]", file=sys.stderr)
        return 1

    logger.info("Watching %r every %ds", config.command_line, config.interval_seconds)
    try:
        return watch(config, session_factory())
    except (CommandError, curses.error) as e:
        # The session is already closed by the time we get here
        logger.error("%s", e)
        print(f"cmdwatch: error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 0


if __name__ == "__main__":
    sys.exit(main())
