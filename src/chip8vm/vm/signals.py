"""
I/O signals exchanged between the VM, the host loop and peripherals.

Signals are flags so the host loop can fold the result of an instruction
and the timer update into one value:

    signal = vm.step()
    if vm.transmit_audio() != tone:
        signal |= Signal.SOUND_AUDIO
"""

from enum import IntFlag


class Signal(IntFlag):
    """Events that need the host loop's attention."""
    NONE = 0
    REFRESH_DISPLAY = 0x01  # Framebuffer changed (00E0, Dxyn)
    SOUND_AUDIO = 0x02      # Tone switched on or off
    NEW_INPUTS = 0x04       # Input device has a fresh key vector
    PROGRAM_EXIT = 0x08     # User asked to quit
