"""
chip8vm Error Hierarchy
=======================

This module defines the exception hierarchy for the whole package. All
exceptions inherit from Chip8Error, allowing callers to catch every
VM-related error with a single except clause if desired.

Exception Hierarchy
-------------------
Chip8Error (base)
├── LoadError (program loading)
│   └── RomSizeError - ROM does not fit in program memory
├── MalformedProgramError (guest program defects, fatal)
│   ├── StackUnderflowError - RET with an empty call stack
│   ├── InvalidProgramCounterError - PC outside program memory at fetch
│   └── UnrecognizedInstructionError - no instruction matches the word
└── DeviceError (peripheral backend cannot start)

Design Philosophy
-----------------
CHIP-8 has no guest-visible exception mechanism, so every error raised by
the VM is terminal for the running program. Malformed-program errors carry
the program counter (and the offending word where there is one) so the
message points at the faulting instruction:

    Unrecognized instruction 0x5AB1 at PC=0x0204
"""

from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class Chip8Error(Exception):
    """
    Base exception for all chip8vm errors.

        try:
            emu.load_program("game.ch8")
            emu.run()
        except Chip8Error as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Load Exceptions
# =============================================================================

class LoadError(Chip8Error):
    """Base exception for errors raised while loading a program."""
    pass


class RomSizeError(LoadError):
    """
    Raised when a ROM image is larger than the program area.

    Attributes:
        size: Length of the rejected ROM in bytes
        capacity: Number of bytes available from 0x200 to 0xFFF
    """

    def __init__(self, size: int, capacity: int):
        self.size = size
        self.capacity = capacity
        super().__init__(
            f"ROM is {size} bytes, program memory holds at most {capacity} bytes"
        )


# =============================================================================
# Malformed Program Exceptions
# =============================================================================

class MalformedProgramError(Chip8Error):
    """
    Base exception for guest program defects.

    Attributes:
        message: The error description
        pc: Program counter at the time of the fault
        opcode: The offending instruction word, when one was decoded
    """

    def __init__(self, message: str, pc: int, opcode: Optional[int] = None):
        self.message = message
        self.pc = pc
        self.opcode = opcode
        super().__init__(self._format())

    def _format(self) -> str:
        if self.opcode is None:
            return f"{self.message} at PC=0x{self.pc:04X}"
        return f"{self.message} 0x{self.opcode:04X} at PC=0x{self.pc:04X}"


class StackUnderflowError(MalformedProgramError):
    """Raised when RET (00EE) executes with an empty call stack."""

    def __init__(self, pc: int, opcode: Optional[int] = 0x00EE):
        super().__init__("Return with empty call stack:", pc, opcode)


class InvalidProgramCounterError(MalformedProgramError):
    """
    Raised when the program counter leaves program memory.

    A fetch needs two bytes, so PC must be within 0x200..0xFFE. Runaway
    jumps and corrupted return addresses end up here.
    """

    def __init__(self, pc: int):
        super().__init__("Program counter outside program memory", pc)


class UnrecognizedInstructionError(MalformedProgramError):
    """Raised when a word matches no known instruction pattern."""

    def __init__(self, pc: int, opcode: int):
        super().__init__("Unrecognized instruction", pc, opcode)


# =============================================================================
# Device Exceptions
# =============================================================================

class DeviceError(Chip8Error):
    """
    Raised by a peripheral backend that cannot be started.

    For example the terminal backend raises this when stdin is not a TTY.
    The VM itself never raises DeviceError.
    """
    pass
