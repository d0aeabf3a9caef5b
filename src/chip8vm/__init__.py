"""
chip8vm - CHIP-8 Virtual Machine and Tools
==========================================

This package provides an interpreter for CHIP-8, the small virtual machine
used to write games for 1970s hobby computers such as the COSMAC VIP, along
with the tools around it.

Main Components
---------------
- **vm**: The virtual machine and its real-time host loop
    Executes ROM images at a configurable instruction rate with 60 Hz timers

- **devices**: Peripheral backends
    Terminal (raw-mode TTY), windowed (pyglet) and null devices

- **disassembler**: CHIP-8 disassembler (chip8dis)
    Converts ROM images back to readable assembly

Quick Start
-----------
Run a ROM headless:
    >>> from chip8vm import Emulator
    >>> emu = Emulator()
    >>> emu.load_program("maze.ch8")
    >>> emu.run_cycles(1000)
    1000

Disassemble a ROM:
    >>> from chip8vm import Chip8Disassembler
    >>> print(Chip8Disassembler().disassemble_to_text(rom_bytes))

Or use the command-line tools:
    $ chip8 pong.ch8 --freq 500
    $ chip8 pong.ch8 --gui -a
    $ chip8dis pong.ch8 -o pong.txt

Reference Documentation
-----------------------
- Cowgod's CHIP-8 Technical Reference: http://devernay.free.fr/hacks/chip8/C8TECH10.HTM

Version History
---------------
1.0.0 - Initial release with VM, terminal and window frontends, disassembler
"""

__version__ = "1.0.0"
__author__ = "Hugo José Pinto & Contributors"

# =============================================================================
# Public API Exports
# =============================================================================

from chip8vm.errors import (
    Chip8Error,
    LoadError,
    RomSizeError,
    MalformedProgramError,
    StackUnderflowError,
    InvalidProgramCounterError,
    UnrecognizedInstructionError,
    DeviceError,
)

from chip8vm.vm import (
    Emulator,
    EmulatorConfig,
    Chip8,
    VMState,
    Instruction,
    Signal,
)

from chip8vm.devices import (
    InputDevice,
    DisplayDevice,
    AudioDevice,
    NullInput,
    NullDisplay,
    NullAudio,
    TerminalDevice,
    BellAudio,
)

from chip8vm.disassembler import Chip8Disassembler, DisassembledInstruction

__all__ = [
    # Version
    "__version__",

    # Errors
    "Chip8Error",
    "LoadError",
    "RomSizeError",
    "MalformedProgramError",
    "StackUnderflowError",
    "InvalidProgramCounterError",
    "UnrecognizedInstructionError",
    "DeviceError",

    # Virtual machine
    "Emulator",
    "EmulatorConfig",
    "Chip8",
    "VMState",
    "Instruction",
    "Signal",

    # Devices
    "InputDevice",
    "DisplayDevice",
    "AudioDevice",
    "NullInput",
    "NullDisplay",
    "NullAudio",
    "TerminalDevice",
    "BellAudio",

    # Disassembler
    "Chip8Disassembler",
    "DisassembledInstruction",
]
