"""
Peripheral Backends
===================

- `base.py`: InputDevice, DisplayDevice and AudioDevice protocols
- `null.py`: no-op devices for headless runs
- `terminal.py`: raw-mode terminal frontend (input, display, bell)
- `window.py`: pyglet window and tone (needs the `gui` extra, import it
  directly: `from chip8vm.devices.window import WindowDevice`)
"""

from .base import InputDevice, DisplayDevice, AudioDevice
from .null import NullInput, NullDisplay, NullAudio
from .terminal import TerminalDevice, BellAudio

__all__ = [
    # Contracts
    "InputDevice",
    "DisplayDevice",
    "AudioDevice",

    # Null devices
    "NullInput",
    "NullDisplay",
    "NullAudio",

    # Terminal
    "TerminalDevice",
    "BellAudio",
]
