"""
Null peripherals: a CHIP-8 should run with nothing hooked up to it.

These are constructed by the host and passed in like any other backend,
e.g. for headless runs and tests.
"""

import logging
from typing import Optional

from ..vm.signals import Signal


logger = logging.getLogger(__name__)


class NullInput:
    """Input device with no keys and no way to quit."""

    def handle_inputs(self) -> Signal:
        return Signal.NONE

    def send_inputs(self) -> Optional[int]:
        return None


class NullDisplay:
    """Display device that discards frames."""

    def __init__(self):
        self.frames_received = 0

    def receive_frame(self, frame: bytes) -> None:
        self.frames_received += 1

    def drive_display(self) -> None:
        logger.debug("Nothing to display to")


class NullAudio:
    """Audio device that stays silent."""

    def __init__(self):
        self.tone = False

    def receive_signal(self, on: bool) -> None:
        self.tone = on

    def play_sound(self) -> None:
        logger.debug("Nothing to play audio through")
