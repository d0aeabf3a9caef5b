"""
CHIP-8 Instruction Decoder
==========================

Every CHIP-8 instruction is one 16-bit word stored big-endian (high byte
at the lower address). The word is split into four nibbles, and the
operand groups are derived from them:

    <-- msb                                                     lsb -->
                     |---    x    ---|---    y    ---|
     +---------------+---------------+---------------+---------------+
     |      n0       |      n1       |      n2       |      n3       |
     |  bits 12-15   |   bits 8-11   |   bits 4-7    |   bits 0-3    |
     +---------------+---------------+---------------+---------------+
     |---    o    ---|---                   nnn                   ---|
                                     |---           nn            ---|
                                                     |---    n    ---|

Decoding never fails. Whether a word is a valid instruction is decided
by the executor when no pattern matches.
"""

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class Instruction:
    """
    A decoded CHIP-8 instruction word.

    Attributes:
        word: The raw 16-bit instruction value

    Example:
        >>> instr = Instruction(0xD125)
        >>> instr.o, instr.x, instr.y, instr.n
        (13, 1, 2, 5)
        >>> hex(instr.nnn)
        '0x125'
    """
    word: int

    def __post_init__(self) -> None:
        # Frozen dataclass: normalise through object.__setattr__
        object.__setattr__(self, "word", self.word & 0xFFFF)

    @classmethod
    def from_bytes(cls, hi: int, lo: int) -> "Instruction":
        """Build an instruction from its two memory bytes (big-endian)."""
        return cls(((hi & 0xFF) << 8) | (lo & 0xFF))

    @property
    def o(self) -> int:
        """Opcode class selector (bits 12-15)."""
        return (self.word >> 12) & 0xF

    @property
    def x(self) -> int:
        """First register index (bits 8-11)."""
        return (self.word >> 8) & 0xF

    @property
    def y(self) -> int:
        """Second register index (bits 4-7)."""
        return (self.word >> 4) & 0xF

    @property
    def n(self) -> int:
        """4-bit immediate (bits 0-3)."""
        return self.word & 0xF

    @property
    def nn(self) -> int:
        """8-bit immediate (bits 0-7)."""
        return self.word & 0xFF

    @property
    def nnn(self) -> int:
        """12-bit address (bits 0-11)."""
        return self.word & 0xFFF

    @property
    def nibbles(self) -> Tuple[int, int, int, int]:
        """The (o, x, y, n) tuple the executor dispatches on."""
        return (self.o, self.x, self.y, self.n)

    def __int__(self) -> int:
        return self.word

    def __str__(self) -> str:
        return f"0x{self.word:04X}"
