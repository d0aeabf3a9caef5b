"""
Framebuffer for the CHIP-8 Virtual Machine
==========================================

The output device is a 64x32 monochrome display:

    +--------------------+
    |(0, 0)       (63, 0)|
    |                    |
    |(0, 31)     (63, 31)|
    +--------------------+

Modelled in one dimension, row-major, as 2048 pixels where
index = y * 64 + x. Each pixel is stored as one byte (0 or 1) so a frame
can be handed to peripherals as an immutable `bytes` object.

Sprites are drawn by XOR. A pixel that was set and is hit by a set
sprite bit turns off, which is reported as a collision.
"""

from typing import List


DISPLAY_WIDTH = 64
DISPLAY_HEIGHT = 32
DISPLAY_SIZE = DISPLAY_WIDTH * DISPLAY_HEIGHT

PX_OFF = 0
PX_ON = 1


class Display:
    """
    64x32 XOR-drawn framebuffer.

    Example:
        >>> display = Display()
        >>> display.draw_sprite(0, 0, bytes([0xF0]))
        False
        >>> display.get_pixel(3, 0), display.get_pixel(4, 0)
        (1, 0)
    """

    def __init__(self):
        self._pixels = bytearray(DISPLAY_SIZE)

    def clear(self) -> None:
        """Turn every pixel off."""
        self._pixels = bytearray(DISPLAY_SIZE)

    def get_pixel(self, x: int, y: int) -> int:
        """Return the pixel at (x, y), wrapping both coordinates."""
        return self._pixels[(y % DISPLAY_HEIGHT) * DISPLAY_WIDTH + (x % DISPLAY_WIDTH)]

    def draw_sprite(self, x: int, y: int, sprite: bytes) -> bool:
        """
        XOR a sprite onto the display.

        Each byte of `sprite` is one row, most significant bit leftmost.
        Pixels that fall off an edge wrap around to the opposite edge.

        Args:
            x: Left column of the sprite
            y: Top row of the sprite
            sprite: Sprite rows

        Returns:
            True if any set pixel was cleared (collision)
        """
        collision = False
        for dy, row in enumerate(sprite):
            py = (y + dy) % DISPLAY_HEIGHT
            for dx in range(8):
                bit = (row >> (7 - dx)) & 1
                if not bit:
                    continue
                px = (x + dx) % DISPLAY_WIDTH
                idx = py * DISPLAY_WIDTH + px
                if self._pixels[idx]:
                    collision = True
                self._pixels[idx] ^= 1
        return collision

    def get_frame(self) -> bytes:
        """Return a copy of the 2048 pixels, row-major."""
        return bytes(self._pixels)

    def render_text(self, on: str = "#", off: str = " ") -> List[str]:
        """
        Render the framebuffer as text, one string per row.

        Args:
            on: Character used for lit pixels
            off: Character used for dark pixels
        """
        lines = []
        for row in range(DISPLAY_HEIGHT):
            start = row * DISPLAY_WIDTH
            lines.append("".join(
                on if px else off
                for px in self._pixels[start:start + DISPLAY_WIDTH]
            ))
        return lines

    def __repr__(self) -> str:
        lit = sum(self._pixels)
        return f"Display({DISPLAY_WIDTH}x{DISPLAY_HEIGHT}, lit={lit})"
