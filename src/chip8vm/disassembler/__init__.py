"""
chip8vm Disassembler Module
===========================

Disassembly of CHIP-8 machine code, used by the `chip8dis` tool and by the
emulator's instruction trace.

Usage:
    from chip8vm.disassembler import Chip8Disassembler

    disasm = Chip8Disassembler()
    print(disasm.disassemble_to_text(rom_bytes, start_address=0x200))
"""

from .chip8 import Chip8Disassembler, DisassembledInstruction

__all__ = [
    "Chip8Disassembler",
    "DisassembledInstruction",
]
