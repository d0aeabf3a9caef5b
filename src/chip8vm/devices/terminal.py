"""
Terminal Frontend
=================

Runs the VM inside a terminal: keyboard input from stdin, the framebuffer
drawn with block characters, and the tone as the terminal bell.

The terminal is put into raw mode on an alternate screen. Raw mode is
required because in canonical mode input is buffered until a newline, so
key presses would only arrive after hitting Enter. The previous terminal
state is restored by close() (or when used as a context manager).

A byte stream has no key-up events. A key therefore counts as held until
KEY_EXPIRE seconds pass without the key buffer being refreshed, which is
close enough to how terminal auto-repeat delivers held keys.

Exit with Esc or Ctrl-C.
"""

import logging
import os
import select
import shutil
import sys
import time
from typing import Callable, List, Optional, TextIO

from ..errors import DeviceError
from ..vm.display import DISPLAY_HEIGHT, DISPLAY_WIDTH
from ..vm.keypad import KEYMAP
from ..vm.signals import Signal


logger = logging.getLogger(__name__)

# Seconds before held keys are released
KEY_EXPIRE = 0.1

# Bytes that request program exit: Ctrl-C and Esc
EXIT_BYTES = (0x03, 0x1B)

PIXEL = "█"

# ANSI escape sequences
CSI = "\x1b["
ALT_SCREEN_ON = f"{CSI}?1049h"
ALT_SCREEN_OFF = f"{CSI}?1049l"
CURSOR_HIDE = f"{CSI}?25l"
CURSOR_SHOW = f"{CSI}?25h"
CLEAR_SCREEN = f"{CSI}2J"
FG_WHITE = f"{CSI}37m"
FG_BLACK = f"{CSI}30m"
RESET_ATTRS = f"{CSI}0m"
BELL = "\x07"


def goto(column: int, row: int) -> str:
    """Cursor position escape (1-based column and row)."""
    return f"{CSI}{row};{column}H"


class TerminalDevice:
    """
    Input, display and audio device backed by the controlling terminal.

    Example:
        >>> with TerminalDevice() as term:
        ...     emu = Emulator(input_device=term, display=term, audio=term)
        ...     emu.load_program("pong.ch8")
        ...     emu.run()
    """

    def __init__(
        self,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
        raw: bool = True,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            stdin: Input stream (default sys.stdin)
            stdout: Output stream (default sys.stdout)
            raw: Switch the terminal to raw mode and the alternate screen.
                 Disable for tests or when stdin is not a terminal.
            clock: Monotonic time source used for key expiry

        Raises:
            DeviceError: If raw mode is requested and stdin is not a TTY
        """
        self._stdin = stdin or sys.stdin
        self._stdout = stdout or sys.stdout
        self._clock = clock
        self._saved_attrs: Optional[List] = None

        self._keybuf = 0
        self._key_expire = clock()
        self._term_size = shutil.get_terminal_size()
        self._framebuf = ""
        self._tone = False

        if raw:
            self._enter_raw_mode()

    # ========================================
    # Terminal setup / teardown
    # ========================================

    def _enter_raw_mode(self) -> None:
        import termios
        import tty

        if not self._stdin.isatty():
            raise DeviceError("Terminal frontend needs stdin to be a terminal")

        fd = self._stdin.fileno()
        self._saved_attrs = termios.tcgetattr(fd)
        tty.setraw(fd)
        self._write(ALT_SCREEN_ON + CURSOR_HIDE + CLEAR_SCREEN)
        logger.debug("Terminal switched to raw mode")

    def close(self) -> None:
        """Restore the terminal to its previous state."""
        if self._saved_attrs is None:
            return
        import termios

        self._write(RESET_ATTRS + CURSOR_SHOW + ALT_SCREEN_OFF)
        termios.tcsetattr(self._stdin.fileno(), termios.TCSADRAIN, self._saved_attrs)
        self._saved_attrs = None
        logger.debug("Terminal state restored")

    def __enter__(self) -> "TerminalDevice":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _write(self, text: str) -> None:
        self._stdout.write(text)
        self._stdout.flush()

    def _read_pending(self) -> bytes:
        """Drain whatever bytes stdin has ready, without blocking."""
        ready, _, _ = select.select([self._stdin], [], [], 0)
        if not ready:
            return b""
        return os.read(self._stdin.fileno(), 1024)

    # ========================================
    # InputDevice
    # ========================================

    def handle_inputs(self) -> Signal:
        prev_state = self._keybuf

        now = self._clock()
        if now - self._key_expire >= KEY_EXPIRE:
            self._keybuf = 0
            self._key_expire = now

        for byte in self._read_pending():
            if byte in EXIT_BYTES:
                return Signal.PROGRAM_EXIT
            key = KEYMAP.get(chr(byte).lower())
            if key is not None:
                self._keybuf |= 1 << key

        if self._keybuf != prev_state:
            return Signal.NEW_INPUTS
        return Signal.NONE

    def send_inputs(self) -> Optional[int]:
        return self._keybuf

    # ========================================
    # DisplayDevice
    # ========================================

    def receive_frame(self, frame: bytes) -> None:
        parts = []

        # Clear before drawing if the terminal was resized
        term_size = shutil.get_terminal_size()
        if term_size != self._term_size:
            self._term_size = term_size
            parts.append(CLEAR_SCREEN)

        x_offset = max(self._term_size.columns - DISPLAY_WIDTH, 0) // 2
        y_offset = max(self._term_size.lines - DISPLAY_HEIGHT, 0) // 2

        color = None
        for idx, pixel in enumerate(frame):
            if idx % DISPLAY_WIDTH == 0:
                parts.append(goto(x_offset + 1, y_offset + 1 + idx // DISPLAY_WIDTH))
            wanted = FG_WHITE if pixel else FG_BLACK
            if wanted != color:
                parts.append(wanted)
                color = wanted
            parts.append(PIXEL)

        self._framebuf = "".join(parts)

    def drive_display(self) -> None:
        self._write(self._framebuf)

    # ========================================
    # AudioDevice
    # ========================================

    def receive_signal(self, on: bool) -> None:
        self._tone = on

    def play_sound(self) -> None:
        if self._tone:
            self._write(BELL)


class BellAudio:
    """
    Audio device that rings the terminal bell when a tone starts.

    Useful with the windowed frontend when no audio library output is
    wanted.
    """

    def __init__(self, stream: Optional[TextIO] = None):
        self._stream = stream or sys.stdout
        self._tone = False

    def receive_signal(self, on: bool) -> None:
        self._tone = on

    def play_sound(self) -> None:
        if self._tone:
            self._stream.write(BELL)
            self._stream.flush()
