"""Process-wide shutdown state and terminal restoration on Ctrl-C.

The signal handler only flips state, writes a fixed restore sequence and
unwinds. It never touches the rendering pipeline.
"""

from __future__ import annotations

import enum
import os
import signal

from imprev.render import write_output

RESET_ATTRIBUTES = b"\033[0m"
SHOW_CURSOR = b"\033[?25h"
HIDE_CURSOR = b"\033[?25l"
CLEAR_SCREEN = b"\033[2J\033[H"


class State(enum.Enum):
    RUNNING = "running"
    SHUTTING_DOWN = "shutting_down"


class LifecycleController:
    def __init__(self, fd: int, watch_resize: bool = False):
        self.fd = fd
        self.watch_resize = watch_resize
        self.state = State.RUNNING
        self.cursor_hidden = False
        self.resize_pending = False
        self._cleaned_up = False
        self._previous: dict[int, object] = {}
        # Built up front so the handler does not have to assemble anything
        self._restore = RESET_ATTRIBUTES
        self._restore_with_cursor = RESET_ATTRIBUTES + SHOW_CURSOR

    @property
    def running(self) -> bool:
        return self.state is State.RUNNING

    def install(self) -> None:
        self._previous[signal.SIGINT] = signal.signal(signal.SIGINT, self.handle_interrupt)
        sigwinch = getattr(signal, "SIGWINCH", None)
        if self.watch_resize and sigwinch is not None:
            self._previous[sigwinch] = signal.signal(sigwinch, self.handle_resize)

    def uninstall(self) -> None:
        for signum, handler in self._previous.items():
            signal.signal(signum, handler)
        self._previous.clear()

    def __enter__(self) -> LifecycleController:
        self.install()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()
        self.uninstall()

    def hide_cursor(self) -> None:
        write_output(HIDE_CURSOR, self.fd)
        self.cursor_hidden = True

    def clear_screen(self) -> None:
        write_output(CLEAR_SCREEN, self.fd)

    def handle_interrupt(self, signum, frame) -> None:
        self.shutdown()
        raise KeyboardInterrupt

    def handle_resize(self, signum, frame) -> None:
        self.resize_pending = True

    def consume_resize(self) -> bool:
        pending = self.resize_pending
        self.resize_pending = False
        return pending

    def shutdown(self) -> None:
        """Move to SHUTTING_DOWN and restore the terminal. Safe to call repeatedly."""
        self.state = State.SHUTTING_DOWN
        self.cleanup()

    def cleanup(self) -> None:
        if self._cleaned_up:
            return
        # Only marked done once the bytes are out; an interrupt landing before
        # the write re-enters here and writes them itself.
        try:
            os.write(self.fd, self._restore_with_cursor if self.cursor_hidden else self._restore)
        except OSError:
            # Terminal already gone (closed pipe, hung-up tty): nothing to restore
            pass
        self._cleaned_up = True
        self.cursor_hidden = False
