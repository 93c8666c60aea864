#!/usr/bin/env python3

import os
import sys
from typing import Optional

from breakwatch.logger import logger

IS_WINDOWS = os.name == 'nt'

if IS_WINDOWS:
    import msvcrt
    from time import sleep
else:
    import select
    import termios
    import tty

KEY_BINDINGS = {
    '+': 'increase',
    '=': 'increase',
    '-': 'decrease',
    '_': 'decrease',
    '?': 'help',
    'h': 'help',
    'q': 'quit',
    'Q': 'quit',
    '\x03': 'quit',
    '\x04': 'quit',
}

HELP_TEXT = "Commands: + increase, - decrease, q quit"


def command_for(key: str) -> Optional[str]:
    return KEY_BINDINGS.get(key)


class KeyReader:
    """Reads single keypresses from stdin without waiting for Enter.

    Used as a context manager: a terminal stdin is switched to cbreak mode
    on entry and its previous attributes restored on exit, even on errors.
    Non-terminal streams (pipes, redirected files) are read as-is.
    """

    def __init__(self, stream=None):
        self.stream = stream if stream is not None else sys.stdin
        self._saved_attrs = None

    def __enter__(self):
        if not IS_WINDOWS and self.stream.isatty():
            fd = self.stream.fileno()
            self._saved_attrs = termios.tcgetattr(fd)
            tty.setcbreak(fd)
            logger.debug("Terminal switched to cbreak mode")
        return self

    def __exit__(self, exc_type, exc, tb):
        if self._saved_attrs is not None:
            termios.tcsetattr(self.stream.fileno(), termios.TCSADRAIN,
                              self._saved_attrs)
            self._saved_attrs = None
            logger.debug("Terminal attributes restored")
        return False

    def read_key(self, timeout: float = 0.1) -> Optional[str]:
        """Return the next key, None if nothing arrived within timeout.

        Raises EOFError once the stream is closed.
        """
        if IS_WINDOWS:
            if not msvcrt.kbhit():
                sleep(timeout)
                return None
            return msvcrt.getwch()

        fd = self.stream.fileno()
        ready, _, _ = select.select([fd], [], [], timeout)
        if not ready:
            return None
        data = os.read(fd, 1)
        if not data:
            raise EOFError
        return data.decode('utf-8', errors='replace')
