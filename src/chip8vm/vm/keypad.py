"""
Keypad for the CHIP-8 Virtual Machine
=====================================

The input device is a 16-key hexadecimal keypad:

    +---+---+---+---+
    | 1 | 2 | 3 | C |
    +---+---+---+---+
    | 4 | 5 | 6 | D |
    +---+---+---+---+
    | 7 | 8 | 9 | E |
    +---+---+---+---+
    | A | 0 | B | F |
    +---+---+---+---+

Key state is stored as a 16-bit vector: bit n is 1 while key n is down.

    Example: 0b1000_0001_0000_1011
          => keys 0, 1, 3, 8 and F are down, all others up

Hosts usually map the left-hand block of a QWERTY keyboard onto the
pad; KEYMAP below is shared by every peripheral backend.
"""

from typing import Dict, Iterable, Optional


NUM_KEYS = 16

KEY_UP = 0
KEY_DOWN = 1

# Host key (lowercase character) -> CHIP-8 keycode
#
#    Keyboard                   CHIP-8
#    | 1 | 2 | 3 | 4 |          | 1 | 2 | 3 | C |
#    | Q | W | E | R |    =>    | 4 | 5 | 6 | D |
#    | A | S | D | F |          | 7 | 8 | 9 | E |
#    | Z | X | C | V |          | A | 0 | B | F |
KEYMAP: Dict[str, int] = {
    "1": 0x1, "2": 0x2, "3": 0x3, "4": 0xC,
    "q": 0x4, "w": 0x5, "e": 0x6, "r": 0xD,
    "a": 0x7, "s": 0x8, "d": 0x9, "f": 0xE,
    "z": 0xA, "x": 0x0, "c": 0xB, "v": 0xF,
}


def keys_to_vector(keys: Iterable[int]) -> int:
    """
    Build a key-state vector from pressed keycodes.

    Example:
        >>> bin(keys_to_vector([0x0, 0x3]))
        '0b1001'
    """
    vector = 0
    for key in keys:
        vector |= 1 << (key & 0xF)
    return vector


class Keypad:
    """Current state of the 16 keys."""

    def __init__(self):
        self._state = 0

    @property
    def state(self) -> int:
        """The 16-bit key-state vector."""
        return self._state

    def set_state(self, state: int) -> None:
        """Replace the whole key-state vector."""
        self._state = state & 0xFFFF

    def is_down(self, key: int) -> bool:
        """Return True if `key` (0-F) is held down."""
        return bool((self._state >> (key & 0xF)) & 1)

    def first_down(self, start: int = 0) -> Optional[int]:
        """
        Find a held key, scanning upward from `start` and wrapping.

        Returns:
            The keycode, or None when no key is down
        """
        for offset in range(NUM_KEYS):
            key = (start + offset) % NUM_KEYS
            if self.is_down(key):
                return key
        return None

    def reset(self) -> None:
        """Release every key."""
        self._state = 0
