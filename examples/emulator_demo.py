#!/usr/bin/env python3
"""
CHIP-8 Emulator Demo
====================

This script demonstrates how to use the chip8vm emulator to:
1. Assemble a small program by hand
2. Disassemble it
3. Run it headless
4. Inspect registers and the framebuffer

The program prints the decimal digits of 234 using the built-in font.

Usage:
    python examples/emulator_demo.py

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

from chip8vm import Chip8Disassembler, Emulator, EmulatorConfig


PROGRAM = [
    0x60EA,  # LD V0, 234
    0xA300,  # LD I, $300
    0xF033,  # LD B, V0       digits to $300..$302
    0xF265,  # LD V2, [I]     V0..V2 = 2, 3, 4
    0x6300,  # LD V3, 0       x
    0x6400,  # LD V4, 0       y
    0xF029,  # LD F, V0
    0xD345,  # DRW V3, V4, 5
    0x7305,  # ADD V3, 5
    0xF129,  # LD F, V1
    0xD345,  # DRW V3, V4, 5
    0x7305,  # ADD V3, 5
    0xF229,  # LD F, V2
    0xD345,  # DRW V3, V4, 5
    0x121C,  # JP $21C        halt
]


def main():
    rom = b"".join(word.to_bytes(2, "big") for word in PROGRAM)

    # ==========================================================================
    # 1. Disassemble
    # ==========================================================================
    print("Program:")
    print(Chip8Disassembler().disassemble_to_text(rom))

    # ==========================================================================
    # 2. Run headless
    # ==========================================================================
    # With no devices given, the null devices are used and nothing is
    # drawn or played. run_cycles() does not pace to the clock rate.
    emu = Emulator(EmulatorConfig(seed=0))
    emu.load_rom(rom)
    emu.run_cycles(len(PROGRAM) + 5)

    # ==========================================================================
    # 3. Inspect state
    # ==========================================================================
    regs = emu.registers
    print(f"\nAfter {emu.cycles} cycles: pc=${regs['pc']:03X} i=${regs['i']:03X}")
    print(f"  V0..V2 = {regs['v0']}, {regs['v1']}, {regs['v2']}")

    print("\nDisplay (top rows):")
    for line in emu.vm.display.render_text(on="#", off=".")[:6]:
        print(f"  {line[:20]}")


if __name__ == "__main__":
    main()
