"""
CHIP-8 Virtual Machine
======================

The instruction-execution engine: registers, call stack, fetch, decode and
execute, plus the timer and I/O accessors the host loop uses.

Registers:
- V0..VF: 16 general-purpose 8-bit registers. VF doubles as the
  carry/borrow/collision flag and is overwritten by ADD, SUB, SUBN, SHR,
  SHL and DRW.
- I: 16-bit address register
- PC: 16-bit program counter, starts at 0x200

Compatibility choices
---------------------
Historic interpreters disagree on a few instructions. This VM follows the
later (CHIP-48 era) behaviour throughout:

- 8xy6 / 8xyE shift Vx in place; Vy is ignored.
- Fx55 / Fx65 leave I unchanged after the register dump/load.

Programs written for the original COSMAC VIP interpreter that depend on
the other behaviour will misbehave. This is intended, not a bug.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from ..errors import (
    InvalidProgramCounterError,
    StackUnderflowError,
    UnrecognizedInstructionError,
)
from .display import Display
from .instruction import Instruction
from .keypad import Keypad, NUM_KEYS
from .memory import Memory, ROM_START, ROM_END
from .signals import Signal
from .timers import Timers


logger = logging.getLogger(__name__)

NUM_REGISTERS = 16
# Nesting depth of the original RCA 1802 interpreter. Deeper stacks are
# allowed, but a warning is logged when a program goes past it.
STACK_DEPTH = 12
# Size of one instruction in bytes
PC_STEP = 2

VF = 0xF


@dataclass
class VMState:
    """
    Register state of the VM.

    Attributes:
        v: General-purpose registers V0..VF (0-255 each)
        i: Address register (16-bit)
        pc: Program counter (16-bit)
        stack: Return addresses, last entry is the top
        awaiting_key: True while Fx0A is blocked waiting for a key
    """
    v: List[int] = field(default_factory=lambda: [0] * NUM_REGISTERS)
    i: int = 0
    pc: int = ROM_START
    stack: List[int] = field(default_factory=list)
    awaiting_key: bool = False


class Chip8:
    """
    CHIP-8 virtual machine.

    The VM owns memory, registers, stack, display, keypad and timers. It
    never talks to peripherals directly: the host loop delivers key
    states with receive_input() and reads output with transmit_frame()
    and transmit_audio().

    Example:
        >>> vm = Chip8(seed=1)
        >>> vm.load_rom(bytes([0x60, 0x05, 0x70, 0x05]))
        >>> vm.exec_instruction(vm.fetch_instruction())
        <Signal.NONE: 0>
        >>> vm.exec_instruction(vm.fetch_instruction())
        <Signal.NONE: 0>
        >>> vm.v[0]
        10
    """

    def __init__(self, seed: Optional[int] = None):
        """
        Args:
            seed: Seed for the random source used by Cxnn. None seeds
                  from the operating system.
        """
        self.memory = Memory()
        self.display = Display()
        self.keypad = Keypad()
        self.timers = Timers()
        self.state = VMState()
        self._rng = random.Random(seed)

        # on_instruction(pc, instr): called before each instruction executes
        self.on_instruction: Optional[Callable[[int, Instruction], None]] = None

    # ========================================
    # Register Properties
    # ========================================

    @property
    def v(self) -> List[int]:
        """General-purpose registers V0..VF."""
        return self.state.v

    @property
    def i(self) -> int:
        """Address register I (16-bit)."""
        return self.state.i

    @i.setter
    def i(self, value: int) -> None:
        self.state.i = value & 0xFFFF

    @property
    def pc(self) -> int:
        """Program counter (16-bit)."""
        return self.state.pc

    @pc.setter
    def pc(self, value: int) -> None:
        self.state.pc = value & 0xFFFF

    @property
    def stack(self) -> List[int]:
        """Call stack of return addresses."""
        return self.state.stack

    @property
    def awaiting_key(self) -> bool:
        """True while an Fx0A instruction is waiting for a key press."""
        return self.state.awaiting_key

    # ========================================
    # Lifecycle
    # ========================================

    def reset(self) -> None:
        """
        Return to power-on state.

        Memory is zeroed with the font reloaded, so the ROM has to be
        loaded again afterwards.
        """
        self.memory.reset()
        self.display.clear()
        self.keypad.reset()
        self.timers.reset()
        self.state = VMState()

    def load_rom(self, data: bytes) -> None:
        """
        Load a raw ROM image at 0x200.

        Raises:
            RomSizeError: If the image does not fit in program memory
        """
        self.memory.load_rom(data)
        logger.debug(f"Loaded {len(data)} byte ROM at 0x{ROM_START:03X}")

    # ========================================
    # Fetch / Execute
    # ========================================

    def fetch_instruction(self) -> Instruction:
        """
        Read the instruction word at PC.

        Raises:
            InvalidProgramCounterError: If PC is outside 0x200..0xFFE
        """
        pc = self.pc
        if pc < ROM_START or pc >= ROM_END:
            raise InvalidProgramCounterError(pc)
        return Instruction(self.memory.read_word(pc))

    def exec_instruction(self, instr: Instruction) -> Signal:
        """
        Execute one decoded instruction.

        PC advances by two afterwards unless the instruction transferred
        control itself or is blocked waiting for a key.

        Args:
            instr: The instruction to execute

        Returns:
            Signal.REFRESH_DISPLAY if the framebuffer changed, else Signal.NONE

        Raises:
            StackUnderflowError: On RET with an empty stack
            UnrecognizedInstructionError: If no instruction matches
        """
        if self.on_instruction:
            self.on_instruction(self.pc, instr)

        advance, signal = self._execute_instruction(instr)
        if advance:
            self.pc = self.pc + PC_STEP
        return signal

    def step(self) -> Signal:
        """Fetch and execute the instruction at PC."""
        return self.exec_instruction(self.fetch_instruction())

    def _skip_if(self, condition: bool) -> None:
        """Skip the next instruction when `condition` holds."""
        if condition:
            self.pc = self.pc + PC_STEP

    def _execute_instruction(self, instr: Instruction) -> tuple[bool, Signal]:
        """
        Decode and dispatch on (o, x, y, n).

        Returns:
            (advance_pc, signal)
        """
        v = self.state.v
        x = instr.x
        y = instr.y

        match instr.nibbles:
            # ============================================
            # System / flow control
            # ============================================
            case (0x0, 0x0, 0xE, 0x0):  # CLS
                self.display.clear()
                return True, Signal.REFRESH_DISPLAY
            case (0x0, 0x0, 0xE, 0xE):  # RET
                if not self.state.stack:
                    raise StackUnderflowError(self.pc, instr.word)
                self.pc = self.state.stack.pop()
            case (0x0, _, _, _):  # SYS nnn
                logger.warning(
                    f"Ignoring unsupported system call {instr} at PC=0x{self.pc:04X}"
                )
            case (0x1, _, _, _):  # JP nnn
                self.pc = instr.nnn
                return False, Signal.NONE
            case (0x2, _, _, _):  # CALL nnn
                self.state.stack.append(self.pc)
                if len(self.state.stack) == STACK_DEPTH + 1:
                    logger.warning(
                        f"Call stack deeper than {STACK_DEPTH} entries at PC=0x{self.pc:04X}"
                    )
                self.pc = instr.nnn
                return False, Signal.NONE

            # ============================================
            # Conditional skips
            # ============================================
            case (0x3, _, _, _):  # SE Vx, nn
                self._skip_if(v[x] == instr.nn)
            case (0x4, _, _, _):  # SNE Vx, nn
                self._skip_if(v[x] != instr.nn)
            case (0x5, _, _, 0x0):  # SE Vx, Vy
                self._skip_if(v[x] == v[y])
            case (0x9, _, _, 0x0):  # SNE Vx, Vy
                self._skip_if(v[x] != v[y])

            # ============================================
            # Immediate loads
            # ============================================
            case (0x6, _, _, _):  # LD Vx, nn
                v[x] = instr.nn
            case (0x7, _, _, _):  # ADD Vx, nn (VF untouched)
                v[x] = (v[x] + instr.nn) & 0xFF

            # ============================================
            # Register ALU (8xyN)
            # ============================================
            case (0x8, _, _, 0x0):  # LD Vx, Vy
                v[x] = v[y]
            case (0x8, _, _, 0x1):  # OR
                v[x] |= v[y]
            case (0x8, _, _, 0x2):  # AND
                v[x] &= v[y]
            case (0x8, _, _, 0x3):  # XOR
                v[x] ^= v[y]
            case (0x8, _, _, 0x4):  # ADD Vx, Vy
                result = v[x] + v[y]
                v[x] = result & 0xFF
                v[VF] = 1 if result > 0xFF else 0
            case (0x8, _, _, 0x5):  # SUB Vx, Vy
                no_borrow = v[x] >= v[y]
                v[x] = (v[x] - v[y]) & 0xFF
                v[VF] = 1 if no_borrow else 0
            case (0x8, _, _, 0x6):  # SHR Vx
                lsb = v[x] & 0x01
                v[x] = v[x] >> 1
                v[VF] = lsb
            case (0x8, _, _, 0x7):  # SUBN Vx, Vy
                no_borrow = v[y] >= v[x]
                v[x] = (v[y] - v[x]) & 0xFF
                v[VF] = 1 if no_borrow else 0
            case (0x8, _, _, 0xE):  # SHL Vx
                msb = (v[x] >> 7) & 0x01
                v[x] = (v[x] << 1) & 0xFF
                v[VF] = msb

            # ============================================
            # Address register, jumps, random
            # ============================================
            case (0xA, _, _, _):  # LD I, nnn
                self.i = instr.nnn
            case (0xB, _, _, _):  # JP V0, nnn
                self.pc = instr.nnn + v[0]
                return False, Signal.NONE
            case (0xC, _, _, _):  # RND Vx, nn
                v[x] = self._rng.randrange(256) & instr.nn

            # ============================================
            # Drawing
            # ============================================
            case (0xD, _, _, n):  # DRW Vx, Vy, n
                sprite = self.memory.read_bytes(self.i, n)
                collided = self.display.draw_sprite(v[x], v[y], sprite)
                v[VF] = 1 if collided else 0
                return True, Signal.REFRESH_DISPLAY

            # ============================================
            # Keypad
            # ============================================
            case (0xE, _, 0x9, 0xE):  # SKP Vx
                self._skip_if(self.keypad.is_down(v[x]))
            case (0xE, _, 0xA, 0x1):  # SKNP Vx
                self._skip_if(not self.keypad.is_down(v[x]))

            # ============================================
            # Timers, I arithmetic, memory transfer (FxNN)
            # ============================================
            case (0xF, _, 0x0, 0x7):  # LD Vx, DT
                v[x] = self.timers.delay
            case (0xF, _, 0x0, 0xA):  # LD Vx, K
                # Scan from a random key so a low keycode never always
                # wins when several keys are held together
                key = self.keypad.first_down(self._rng.randrange(NUM_KEYS))
                if key is None:
                    self.state.awaiting_key = True
                    return False, Signal.NONE
                self.state.awaiting_key = False
                v[x] = key
            case (0xF, _, 0x1, 0x5):  # LD DT, Vx
                self.timers.delay = v[x]
            case (0xF, _, 0x1, 0x8):  # LD ST, Vx
                self.timers.sound = v[x]
            case (0xF, _, 0x1, 0xE):  # ADD I, Vx
                self.i = self.i + v[x]
            case (0xF, _, 0x2, 0x9):  # LD F, Vx
                self.i = self.memory.font_address(v[x])
            case (0xF, _, 0x3, 0x3):  # LD B, Vx
                value = v[x]
                self.memory.write(self.i, value // 100)
                self.memory.write(self.i + 1, (value // 10) % 10)
                self.memory.write(self.i + 2, value % 10)
            case (0xF, _, 0x5, 0x5):  # LD [I], Vx
                for offset in range(x + 1):
                    self.memory.write(self.i + offset, v[offset])
            case (0xF, _, 0x6, 0x5):  # LD Vx, [I]
                for offset in range(x + 1):
                    v[offset] = self.memory.read(self.i + offset)

            case _:
                raise UnrecognizedInstructionError(self.pc, instr.word)

        return True, Signal.NONE

    # ========================================
    # Timers and I/O
    # ========================================

    def tick_timers(self) -> bool:
        """
        Advance the delay and sound timers by one 60 Hz period.

        Returns:
            True if a tone should be sounding after the tick
        """
        return self.timers.tick()

    def receive_input(self, state: Optional[int]) -> None:
        """
        Replace the key-state vector.

        Args:
            state: New 16-bit key vector, or None to keep the current one
        """
        if state is not None:
            self.keypad.set_state(state)

    def transmit_frame(self) -> bytes:
        """Current framebuffer: 2048 pixels (0/1), row-major."""
        return self.display.get_frame()

    def transmit_audio(self) -> bool:
        """True while the sound timer is running."""
        return self.timers.tone

    def __repr__(self) -> str:
        return (
            f"Chip8(pc=0x{self.pc:04X}, i=0x{self.i:04X}, "
            f"sp={len(self.state.stack)})"
        )
