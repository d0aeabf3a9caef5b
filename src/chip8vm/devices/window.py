"""
Windowed Frontend (pyglet)
==========================

A native window showing the framebuffer scaled up, with keyboard input
read from the window and an optional synthesized tone.

Requires the `gui` extra:

    pip install chip8vm[gui]

The host loop drives the window itself (dispatch_events / flip) instead
of handing control to pyglet.app.run(), so the VM stays in charge of
timing.
"""

import logging
from typing import Optional

import pyglet
from pyglet.media import synthesis
from pyglet.window import key as pyglet_key

from ..vm.display import DISPLAY_HEIGHT, DISPLAY_WIDTH
from ..vm.keypad import KEYMAP, keys_to_vector
from ..vm.signals import Signal


logger = logging.getLogger(__name__)

DEFAULT_SCALE = 16

PX_OFF_COLOR = (0x1E, 0x1C, 0x2D, 0xFF)
PX_ON_COLOR = (0xE0, 0xDE, 0xF4, 0xFF)

# F4, quiet
TONE_FREQUENCY = 349.23
TONE_AMPLITUDE = 0.1


def _symbol_for(char: str) -> int:
    """pyglet key symbol for a KEYMAP character ('1' -> key._1, 'q' -> key.Q)."""
    name = f"_{char}" if char.isdigit() else char.upper()
    return getattr(pyglet_key, name)


class WindowDevice:
    """
    Input and display device backed by a pyglet window.
    """

    def __init__(self, title: str = "CHIP-8", scale: int = DEFAULT_SCALE):
        """
        Args:
            title: Window caption
            scale: Window pixels per CHIP-8 pixel
        """
        self._window = pyglet.window.Window(
            width=DISPLAY_WIDTH * scale,
            height=DISPLAY_HEIGHT * scale,
            caption=f"CHIP-8: {title}",
            resizable=True,
        )
        self._keys = pyglet_key.KeyStateHandler()
        self._window.push_handlers(self._keys)
        self._symbols = {_symbol_for(char): code for char, code in KEYMAP.items()}
        self._keybuf = 0
        self._image: Optional[pyglet.image.ImageData] = None
        logger.debug(f"Opened {self._window.width}x{self._window.height} window")

    def close(self) -> None:
        self._window.close()

    # ========================================
    # InputDevice
    # ========================================

    def handle_inputs(self) -> Signal:
        prev_state = self._keybuf
        self._window.dispatch_events()

        if self._window.has_exit:
            return Signal.PROGRAM_EXIT

        self._keybuf = keys_to_vector(
            code for symbol, code in self._symbols.items() if self._keys[symbol]
        )
        if self._keybuf != prev_state:
            return Signal.NEW_INPUTS
        return Signal.NONE

    def send_inputs(self) -> Optional[int]:
        return self._keybuf

    # ========================================
    # DisplayDevice
    # ========================================

    def receive_frame(self, frame: bytes) -> None:
        data = bytearray()
        for pixel in frame:
            data.extend(PX_ON_COLOR if pixel else PX_OFF_COLOR)
        # Negative pitch: rows are stored top-down, pyglet's origin is bottom-left
        self._image = pyglet.image.ImageData(
            DISPLAY_WIDTH, DISPLAY_HEIGHT, "RGBA", bytes(data),
            pitch=-DISPLAY_WIDTH * 4,
        )

    def drive_display(self) -> None:
        if self._image is None or self._window.has_exit:
            return
        self._window.switch_to()
        self._window.clear()
        texture = self._image.get_texture()
        pyglet.gl.glBindTexture(texture.target, texture.id)
        pyglet.gl.glTexParameteri(
            texture.target, pyglet.gl.GL_TEXTURE_MAG_FILTER, pyglet.gl.GL_NEAREST
        )
        texture.blit(0, 0, width=self._window.width, height=self._window.height)
        self._window.flip()


class ToneAudio:
    """
    Audio device playing a looped sine tone while the sound timer runs.
    """

    def __init__(self, frequency: float = TONE_FREQUENCY):
        wave = synthesis.Sine(
            duration=1.0,
            frequency=frequency,
            envelope=synthesis.FlatEnvelope(TONE_AMPLITUDE),
        )
        self._player = pyglet.media.Player()
        self._player.queue(pyglet.media.StaticSource(wave))
        self._player.loop = True
        self._tone = False

    def receive_signal(self, on: bool) -> None:
        self._tone = on

    def play_sound(self) -> None:
        if self._tone:
            self._player.play()
        else:
            self._player.pause()
