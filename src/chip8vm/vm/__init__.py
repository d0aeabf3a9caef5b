"""
CHIP-8 Virtual Machine
======================

An interpreter for the CHIP-8 virtual machine of the late 1970s.

- **Memory**: 4 KB, hexadecimal font at 0x000, programs load at 0x200
- **Registers**: V0..VF (VF is the flag register), I, PC and a call stack
- **Display**: 64x32 monochrome framebuffer with XOR sprite drawing
- **Keypad**: 16 keys (0-F) delivered as a 16-bit state vector
- **Timers**: delay and sound timers counting down at 60 Hz

Quick Start
-----------

Headless run::

    >>> from chip8vm.vm import Emulator, EmulatorConfig
    >>> emu = Emulator(EmulatorConfig(seed=1))
    >>> emu.load_rom(bytes([0x60, 0x05, 0x70, 0x05, 0x12, 0x04]))
    >>> emu.run_cycles(3)
    3
    >>> emu.registers['v0']
    10

Driving the VM directly::

    >>> from chip8vm.vm import Chip8
    >>> vm = Chip8()
    >>> vm.load_rom(rom_bytes)
    >>> signal = vm.step()

Module Structure
----------------

- `emulator.py`: Emulator host loop and EmulatorConfig
- `cpu.py`: Chip8 fetch/decode/execute engine and VMState
- `instruction.py`: Instruction word decoding
- `memory.py`: 4 KB memory with the font and ROM loader
- `display.py`: 64x32 framebuffer
- `keypad.py`: Key state vector and keyboard map
- `timers.py`: Delay and sound timers
- `clock.py`: 60 Hz timer scheduling on a monotonic clock
- `signals.py`: Signal flags exchanged between the VM and the host loop

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

# Main entry point
from .emulator import Emulator, EmulatorConfig

# Core
from .cpu import Chip8, VMState
from .instruction import Instruction
from .signals import Signal

# Subsystems
from .memory import Memory, FONT_SPRITES, ROM_START, ROM_CAPACITY
from .display import Display, DISPLAY_WIDTH, DISPLAY_HEIGHT
from .keypad import Keypad, KEYMAP, keys_to_vector
from .timers import Timers
from .clock import TimerScheduler

__all__ = [
    # Main API
    "Emulator",
    "EmulatorConfig",

    # Core
    "Chip8",
    "VMState",
    "Instruction",
    "Signal",

    # Memory
    "Memory",
    "FONT_SPRITES",
    "ROM_START",
    "ROM_CAPACITY",

    # Display
    "Display",
    "DISPLAY_WIDTH",
    "DISPLAY_HEIGHT",

    # Keypad
    "Keypad",
    "KEYMAP",
    "keys_to_vector",

    # Timers
    "Timers",
    "TimerScheduler",
]
