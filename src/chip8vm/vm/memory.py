"""
Memory Subsystem for the CHIP-8 Virtual Machine
===============================================

Memory Map:
    $000-$04F  Hexadecimal font sprites 0-F (5 bytes each)
    $050-$1FF  Reserved for the interpreter (unused, zero)
    $200-$FFF  Program and data (ROM image loaded here)

The original interpreters lived in the low 512 bytes. Modern
implementations run outside the 4KB space, so the reserved area only
holds the font.

All addresses are reduced modulo 4096 on access, matching the 12-bit
address bus of the machine.
"""

from typing import Iterable

from ..errors import RomSizeError


MEMORY_SIZE = 4096

# Starting address of the font sprites
FONT_START = 0x000
# Bytes per font sprite (each glyph is 8x5 pixels)
FONT_HEIGHT = 5

# Program area
ROM_START = 0x200
ROM_END = 0xFFF
ROM_CAPACITY = ROM_END - ROM_START + 1

FONT_SPRITES = bytes([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
])


class Memory:
    """
    4KB of byte-addressable RAM with the font preloaded.

    Example:
        >>> mem = Memory()
        >>> mem.load_rom(bytes([0x60, 0x05]))
        >>> hex(mem.read_word(0x200))
        '0x6005'
    """

    def __init__(self):
        self._data = bytearray(MEMORY_SIZE)
        self._load_font()

    def _load_font(self) -> None:
        self._data[FONT_START:FONT_START + len(FONT_SPRITES)] = FONT_SPRITES

    def reset(self) -> None:
        """Zero all memory and reload the font sprites."""
        self._data = bytearray(MEMORY_SIZE)
        self._load_font()

    def read(self, address: int) -> int:
        """Read one byte."""
        return self._data[address % MEMORY_SIZE]

    def write(self, address: int, value: int) -> None:
        """Write one byte (value masked to 8 bits)."""
        self._data[address % MEMORY_SIZE] = value & 0xFF

    def read_word(self, address: int) -> int:
        """Read a 16-bit word (big-endian)."""
        hi = self.read(address)
        lo = self.read(address + 1)
        return (hi << 8) | lo

    def read_bytes(self, address: int, count: int) -> bytes:
        """Read `count` consecutive bytes starting at `address`."""
        return bytes(self.read(address + i) for i in range(count))

    def write_bytes(self, address: int, data: Iterable[int]) -> None:
        """Write consecutive bytes starting at `address`."""
        for i, byte in enumerate(data):
            self.write(address + i, byte)

    def load_rom(self, data: bytes) -> None:
        """
        Copy a raw ROM image into program memory at 0x200.

        Args:
            data: ROM bytes (no header, no metadata)

        Raises:
            RomSizeError: If the image is larger than 0x200..0xFFF
        """
        if len(data) > ROM_CAPACITY:
            raise RomSizeError(len(data), ROM_CAPACITY)
        self._data[ROM_START:ROM_START + len(data)] = data

    def font_address(self, digit: int) -> int:
        """Address of the sprite for hex digit `digit`."""
        return FONT_START + digit * FONT_HEIGHT

    def __len__(self) -> int:
        return len(self._data)
