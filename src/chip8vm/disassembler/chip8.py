"""
CHIP-8 Disassembler
===================

Turns CHIP-8 machine code back into readable assembly using the common
mnemonic set (CLS, RET, JP, CALL, SE, SNE, LD, ADD, ... DRW, SKP, SKNP).

Every instruction is two bytes, big-endian. Words that match no
instruction are shown as `.WORD` data, and a trailing odd byte as `.BYTE`,
since CHIP-8 programs freely mix sprites and code.

Operand syntax:
    Vx        register
    $nnn      12-bit address
    #$nn      8-bit immediate
    I, DT, ST, K, F, B, [I]   special operands

Usage:
    disasm = Chip8Disassembler()
    for instr in disasm.disassemble(rom_bytes, start_address=0x200):
        print(instr)

    $0200: 60 05  LD V0, #$05
"""

from dataclasses import dataclass
from typing import List, Optional

from ..vm.instruction import Instruction


# =============================================================================
# Data Structures
# =============================================================================

@dataclass
class DisassembledInstruction:
    """
    Represents a single disassembled CHIP-8 instruction.

    Attributes:
        address: Memory address of the instruction
        word: The instruction word (or the byte, for a trailing .BYTE)
        mnemonic: The instruction mnemonic (e.g. "LD", "DRW")
        operand_str: Formatted operands (may be empty)
        raw_bytes: The bytes the instruction was decoded from
        comment: Optional annotation (e.g. "unknown instruction")
    """
    address: int
    word: int
    mnemonic: str
    operand_str: str
    raw_bytes: bytes
    comment: str = ""

    @property
    def size(self) -> int:
        return len(self.raw_bytes)

    @property
    def text(self) -> str:
        """Mnemonic and operands without address or bytes."""
        if self.operand_str:
            return f"{self.mnemonic} {self.operand_str}"
        return self.mnemonic

    def __str__(self) -> str:
        """Format as assembly line: ADDRESS: BYTES  MNEMONIC OPERANDS"""
        hex_bytes = " ".join(f"{b:02X}" for b in self.raw_bytes).ljust(5)
        if self.comment:
            return f"${self.address:04X}: {hex_bytes}  {self.text:<16} ; {self.comment}"
        return f"${self.address:04X}: {hex_bytes}  {self.text}"


def _decode(instr: Instruction) -> Optional[tuple[str, str]]:
    """Return (mnemonic, operands) for a word, or None if unrecognized."""
    vx = f"V{instr.x:X}"
    vy = f"V{instr.y:X}"
    nnn = f"${instr.nnn:03X}"
    nn = f"#${instr.nn:02X}"

    match instr.nibbles:
        case (0x0, 0x0, 0xE, 0x0):
            return "CLS", ""
        case (0x0, 0x0, 0xE, 0xE):
            return "RET", ""
        case (0x0, _, _, _):
            return "SYS", nnn
        case (0x1, _, _, _):
            return "JP", nnn
        case (0x2, _, _, _):
            return "CALL", nnn
        case (0x3, _, _, _):
            return "SE", f"{vx}, {nn}"
        case (0x4, _, _, _):
            return "SNE", f"{vx}, {nn}"
        case (0x5, _, _, 0x0):
            return "SE", f"{vx}, {vy}"
        case (0x6, _, _, _):
            return "LD", f"{vx}, {nn}"
        case (0x7, _, _, _):
            return "ADD", f"{vx}, {nn}"
        case (0x8, _, _, 0x0):
            return "LD", f"{vx}, {vy}"
        case (0x8, _, _, 0x1):
            return "OR", f"{vx}, {vy}"
        case (0x8, _, _, 0x2):
            return "AND", f"{vx}, {vy}"
        case (0x8, _, _, 0x3):
            return "XOR", f"{vx}, {vy}"
        case (0x8, _, _, 0x4):
            return "ADD", f"{vx}, {vy}"
        case (0x8, _, _, 0x5):
            return "SUB", f"{vx}, {vy}"
        case (0x8, _, _, 0x6):
            return "SHR", vx
        case (0x8, _, _, 0x7):
            return "SUBN", f"{vx}, {vy}"
        case (0x8, _, _, 0xE):
            return "SHL", vx
        case (0x9, _, _, 0x0):
            return "SNE", f"{vx}, {vy}"
        case (0xA, _, _, _):
            return "LD", f"I, {nnn}"
        case (0xB, _, _, _):
            return "JP", f"V0, {nnn}"
        case (0xC, _, _, _):
            return "RND", f"{vx}, {nn}"
        case (0xD, _, _, n):
            return "DRW", f"{vx}, {vy}, {n}"
        case (0xE, _, 0x9, 0xE):
            return "SKP", vx
        case (0xE, _, 0xA, 0x1):
            return "SKNP", vx
        case (0xF, _, 0x0, 0x7):
            return "LD", f"{vx}, DT"
        case (0xF, _, 0x0, 0xA):
            return "LD", f"{vx}, K"
        case (0xF, _, 0x1, 0x5):
            return "LD", f"DT, {vx}"
        case (0xF, _, 0x1, 0x8):
            return "LD", f"ST, {vx}"
        case (0xF, _, 0x1, 0xE):
            return "ADD", f"I, {vx}"
        case (0xF, _, 0x2, 0x9):
            return "LD", f"F, {vx}"
        case (0xF, _, 0x3, 0x3):
            return "LD", f"B, {vx}"
        case (0xF, _, 0x5, 0x5):
            return "LD", f"[I], {vx}"
        case (0xF, _, 0x6, 0x5):
            return "LD", f"{vx}, [I]"
    return None


# =============================================================================
# Disassembler
# =============================================================================

class Chip8Disassembler:
    """
    Disassembler for CHIP-8 machine code.
    """

    def decode_word(self, word: int, address: int = 0) -> DisassembledInstruction:
        """
        Disassemble one instruction word.

        Args:
            word: 16-bit instruction
            address: Address the word was read from (for display)
        """
        instr = Instruction(word)
        raw = bytes([(instr.word >> 8) & 0xFF, instr.word & 0xFF])
        decoded = _decode(instr)
        if decoded is None:
            return DisassembledInstruction(
                address=address,
                word=instr.word,
                mnemonic=".WORD",
                operand_str=f"${instr.word:04X}",
                raw_bytes=raw,
                comment="unknown instruction",
            )
        mnemonic, operands = decoded
        return DisassembledInstruction(
            address=address,
            word=instr.word,
            mnemonic=mnemonic,
            operand_str=operands,
            raw_bytes=raw,
        )

    def disassemble_one(
        self,
        data: bytes,
        address: int = 0x200,
        offset: int = 0
    ) -> DisassembledInstruction:
        """
        Disassemble the instruction at `offset` in a byte buffer.

        Args:
            data: Byte buffer containing the instruction
            address: Memory address of the instruction
            offset: Offset into data where the instruction starts

        Raises:
            ValueError: If offset is beyond the end of data
        """
        if offset >= len(data):
            raise ValueError(f"Offset {offset} beyond data length {len(data)}")

        if offset + 1 >= len(data):
            byte = data[offset]
            return DisassembledInstruction(
                address=address,
                word=byte,
                mnemonic=".BYTE",
                operand_str=f"${byte:02X}",
                raw_bytes=bytes([byte]),
            )

        word = (data[offset] << 8) | data[offset + 1]
        return self.decode_word(word, address)

    def disassemble(
        self,
        data: bytes,
        start_address: int = 0x200,
        count: Optional[int] = None
    ) -> List[DisassembledInstruction]:
        """
        Disassemble a byte buffer.

        Args:
            data: Machine code (e.g. a ROM image)
            start_address: Address of data[0]; ROMs load at 0x200
            count: Maximum number of instructions (None for all)
        """
        result = []
        offset = 0
        while offset < len(data):
            if count is not None and len(result) >= count:
                break
            instr = self.disassemble_one(data, start_address + offset, offset)
            result.append(instr)
            offset += instr.size
        return result

    def disassemble_to_text(
        self,
        data: bytes,
        start_address: int = 0x200,
        count: Optional[int] = None
    ) -> str:
        """Disassemble and return one line per instruction."""
        lines = [str(instr) for instr in self.disassemble(data, start_address, count)]
        return "\n".join(lines)
