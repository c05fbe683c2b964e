"""Full-screen terminal session backed by curses.

A session is either closed or open. ``open`` puts the terminal into
full-screen cbreak mode with a hidden cursor and an input timeout; ``close``
puts it back. Every other operation needs an open session. Use ``opened`` to
make sure the terminal is restored whichever way the caller leaves.
"""

from __future__ import annotations

import curses
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Protocol, TypeVar

logger = logging.getLogger(__name__)


class SessionStateError(RuntimeError):
    """A session operation was called in the wrong state."""


# ── Events ─────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class TimerExpired:
    """The input timeout elapsed with no key pressed."""


@dataclass(frozen=True)
class Resized:
    width: int
    height: int


@dataclass(frozen=True)
class KeyPressed:
    code: int


TerminalEvent = TimerExpired | Resized | KeyPressed


# ── Session interface ──────────────────────────────────────────────────────


class TerminalSession(Protocol):
    @property
    def is_open(self) -> bool: ...

    def open(self, timeout: int) -> None: ...

    def dimensions(self) -> tuple[int, int]: ...

    def poll_event(self) -> TerminalEvent: ...

    def clear(self) -> None: ...

    def move_cursor(self, row: int, col: int) -> None: ...

    def write(self, text: str) -> None: ...

    def refresh(self) -> None: ...

    def close(self) -> None: ...


S = TypeVar("S", bound=TerminalSession)


@contextmanager
def opened(session: S, timeout: int) -> Iterator[S]:
    """Open *session* for the duration of a ``with`` block."""
    session.open(timeout)
    try:
        yield session
    finally:
        session.close()


# ── curses implementation ──────────────────────────────────────────────────


class CursesSession:
    """TerminalSession on top of the stdscr curses window."""

    def __init__(self) -> None:
        self._win: curses.window | None = None
        # Set when the last move_cursor landed off-screen
        self._off_screen = False

    @property
    def is_open(self) -> bool:
        return self._win is not None

    def _window(self) -> curses.window:
        if self._win is None:
            raise SessionStateError("terminal session is not open")
        return self._win

    def open(self, timeout: int) -> None:
        """Enter full-screen mode; ``poll_event`` waits at most *timeout* seconds."""
        if self._win is not None:
            raise SessionStateError("terminal session is already open")
        win = curses.initscr()
        try:
            curses.noecho()
            curses.cbreak()
            win.keypad(True)
            try:
                curses.curs_set(0)
            except curses.error:
                pass  # terminal cannot hide the cursor
            win.timeout(timeout * 1000)
        except BaseException:
            curses.endwin()
            raise
        self._win = win
        self._off_screen = False
        logger.debug("Terminal session opened (timeout %ds)", timeout)

    def dimensions(self) -> tuple[int, int]:
        """Return ``(width, height)`` in character cells."""
        height, width = self._window().getmaxyx()
        return width, height

    def poll_event(self) -> TerminalEvent:
        win = self._window()
        ch = win.getch()
        if ch == -1:
            return TimerExpired()
        if ch == curses.KEY_RESIZE:
            curses.update_lines_cols()
            win.clear()
            width, height = self.dimensions()
            return Resized(width, height)
        return KeyPressed(ch)

    def clear(self) -> None:
        self._window().erase()

    def move_cursor(self, row: int, col: int) -> None:
        win = self._window()
        try:
            win.move(row, col)
            self._off_screen = False
        except curses.error:
            self._off_screen = True

    def write(self, text: str) -> None:
        """Write at the cursor. Nothing reaches the screen until ``refresh``."""
        win = self._window()
        if self._off_screen:
            return
        try:
            # addstr rejects embedded NULs
            win.addstr(text.replace("\0", ""))
        except curses.error:
            pass  # ran past the bottom-right corner; the terminal clips

    def refresh(self) -> None:
        self._window().refresh()

    def close(self) -> None:
        win = self._window()
        self._win = None
        try:
            win.keypad(False)
            curses.nocbreak()
            curses.echo()
            try:
                curses.curs_set(1)
            except curses.error:
                pass
        finally:
            curses.endwin()
        logger.debug("Terminal session closed")
