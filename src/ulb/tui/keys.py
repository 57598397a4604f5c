"""Non-blocking single-key reader for the progress UI."""

import os
import select
import sys
import time


class KeyReader:
    """Reads single keys from a TTY stdin without waiting for Enter.

    Puts the terminal in cbreak mode on construction; close() restores it.
    Raises RuntimeError if stdin is not a TTY.
    """

    def __init__(self) -> None:
        if not sys.stdin.isatty():
            raise RuntimeError("stdin is not attached to a TTY")
        self._win = os.name == "nt"
        self._closed = False
        if not self._win:
            import termios
            import tty

            self._termios = termios
            self._fd = sys.stdin.fileno()
            try:
                self._old_settings = termios.tcgetattr(self._fd)
                tty.setcbreak(self._fd)
            except termios.error as e:
                raise RuntimeError(f"cannot switch terminal to cbreak mode: {e}") from e

    @staticmethod
    def available() -> bool:
        try:
            return sys.stdin is not None and sys.stdin.isatty()
        except ValueError:
            return False

    def close(self) -> None:
        if self._win or self._closed:
            return
        self._termios.tcsetattr(self._fd, self._termios.TCSADRAIN, self._old_settings)
        self._closed = True

    def read_key(self, timeout: float = 0.1) -> str | None:
        """Return the next key, or None if none arrived within timeout."""
        if self._win:
            import msvcrt

            end = time.monotonic() + timeout
            while time.monotonic() < end:
                if msvcrt.kbhit():
                    ch = msvcrt.getwch()
                    if ch in ("\x00", "\xe0"):
                        # Extended key: swallow the scan code
                        msvcrt.getwch()
                        continue
                    return ch
                time.sleep(0.01)
            return None

        ready, _, _ = select.select([sys.stdin], [], [], timeout)
        if not ready:
            return None
        return sys.stdin.read(1) or None
