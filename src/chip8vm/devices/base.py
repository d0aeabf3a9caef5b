"""
Peripheral Contracts
====================

The host loop talks to peripherals only through these three protocols.
A backend may implement one, two or all three (the terminal backend is
input, display and audio at once).

Each contract is two-phase, mirroring how real backends work: first the
data is handed over, then the device is asked to present it.

    display.receive_frame(frame)
    display.drive_display()
"""

from typing import Optional, Protocol

from ..vm.signals import Signal


class InputDevice(Protocol):
    """
    Source of key states and of the quit request.
    """

    def handle_inputs(self) -> Signal:
        """
        Poll the device.

        Returns:
            Signal.NONE when nothing changed, Signal.NEW_INPUTS when the
            key vector changed, Signal.PROGRAM_EXIT when the user quit
        """
        ...

    def send_inputs(self) -> Optional[int]:
        """Return the current 16-bit key vector, or None if unavailable."""
        ...


class DisplayDevice(Protocol):
    """
    Sink for 64x32 frames.
    """

    def receive_frame(self, frame: bytes) -> None:
        """Accept a 2048-pixel row-major frame (one byte per pixel, 0/1)."""
        ...

    def drive_display(self) -> None:
        """Present the last received frame."""
        ...


class AudioDevice(Protocol):
    """
    Sink for the tone on/off signal.
    """

    def receive_signal(self, on: bool) -> None:
        """Accept the tone state."""
        ...

    def play_sound(self) -> None:
        """Start or stop playback to match the last received state."""
        ...
