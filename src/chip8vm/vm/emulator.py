"""
CHIP-8 Emulator - Host Loop
===========================

This module provides the `Emulator` class, which connects a `Chip8` VM to
its input, display and audio devices and drives it in real time.

Each cycle of the host loop:
1. Polls the input device and hands new key state to the VM; a
   program-exit request ends the run.
2. Fetches and executes exactly one instruction. A tone it switches on is
   pushed to the audio device straight away.
3. Ticks the delay and sound timers for every 60 Hz boundary crossed since
   the last cycle (see `clock.TimerScheduler`).
4. Pushes the tone state to the audio device if the ticks switched it off,
   and the frame to the display if it changed.
5. Sleeps for the rest of the instruction period (never a negative time).

The run only ends on the input device's exit request. A tone still on when
the run ends (or on reset()) is switched off at the audio device. VM errors
(`MalformedProgramError` and friends) propagate out of run() unchanged.

Example usage:
    >>> from chip8vm.vm import Emulator, EmulatorConfig
    >>> from chip8vm.devices import TerminalDevice
    >>> with TerminalDevice() as term:
    ...     emu = Emulator(EmulatorConfig(clock_hz=500), term, term, term)
    ...     emu.load_program("pong.ch8")
    ...     emu.run()

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

import dataclasses
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Union

from ..devices.base import AudioDevice, DisplayDevice, InputDevice
from ..devices.null import NullAudio, NullDisplay, NullInput
from ..disassembler import Chip8Disassembler
from .clock import Clock, TimerScheduler
from .cpu import Chip8
from .instruction import Instruction
from .signals import Signal
from .timers import TIMER_FREQ


logger = logging.getLogger(__name__)

DEFAULT_CLOCK_HZ = 720.0
MIN_CLOCK_HZ = 1.0
MAX_CLOCK_HZ = 2000.0


def _check_clock_hz(clock_hz: float) -> None:
    if not MIN_CLOCK_HZ <= clock_hz <= MAX_CLOCK_HZ:
        raise ValueError(
            f"Clock rate must be between {MIN_CLOCK_HZ:g} and {MAX_CLOCK_HZ:g} Hz, "
            f"got {clock_hz:g}"
        )


@dataclass(frozen=True)
class EmulatorConfig:
    """
    Configuration for the host loop.

    Attributes:
        clock_hz: Instructions executed per second (1-2000). Default 720.
        timer_hz: Delay/sound timer rate. Only change this for testing.
        trace: Log every instruction (with disassembly) at DEBUG level.
        seed: Seed for the Cxnn random source. None seeds from the OS.

    Example:
        >>> config = EmulatorConfig(clock_hz=500, seed=42)
    """
    clock_hz: float = DEFAULT_CLOCK_HZ
    timer_hz: float = TIMER_FREQ
    trace: bool = False
    seed: Optional[int] = None

    def __post_init__(self):
        _check_clock_hz(self.clock_hz)
        if self.timer_hz <= 0:
            raise ValueError(f"Timer rate must be positive, got {self.timer_hz:g}")


class Emulator:
    """
    Real-time host for a CHIP-8 VM.

    Devices that are not given are replaced by the null devices, so a bare
    `Emulator()` runs headless. The clock and sleep functions can be
    swapped out to run the loop against a simulated clock.

    Attributes:
        config: The EmulatorConfig in effect
        vm: The Chip8 virtual machine
        input_device, display, audio: Connected peripherals
    """

    def __init__(
        self,
        config: Optional[EmulatorConfig] = None,
        input_device: Optional[InputDevice] = None,
        display: Optional[DisplayDevice] = None,
        audio: Optional[AudioDevice] = None,
        clock: Clock = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Args:
            config: Loop configuration (default EmulatorConfig())
            input_device: Source of key states and the exit request
            display: Receives frames after drawing instructions
            audio: Receives tone on/off changes
            clock: Monotonic time source in seconds
            sleep: Function used to wait out the rest of each cycle
        """
        self.config = config or EmulatorConfig()
        self.vm = Chip8(seed=self.config.seed)

        self.input_device = input_device if input_device is not None else NullInput()
        self.display = display if display is not None else NullDisplay()
        self.audio = audio if audio is not None else NullAudio()

        self._clock = clock
        self._sleep = sleep
        self._timers = TimerScheduler(self.config.timer_hz, clock)
        self._disassembler = Chip8Disassembler()

        self._tone = False
        self._cycles = 0
        self._is_running = False

        if self.config.trace:
            self.vm.on_instruction = self._trace_hook

    def _trace_hook(self, pc: int, instr: Instruction) -> None:
        line = self._disassembler.decode_word(instr.word, pc)
        logger.debug(f"{pc:04X}: {instr.word:04X} {line.text}")

    # =========================================================================
    # Program Loading
    # =========================================================================

    def load_program(self, path: Union[str, Path]) -> None:
        """
        Load a ROM file at 0x200.

        Raises:
            FileNotFoundError: If the file does not exist
            RomSizeError: If the ROM does not fit in program memory
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"ROM file not found: {path}")
        self.load_rom(path.read_bytes())
        logger.debug(f"Program loaded from {path}")

    def load_rom(self, data: bytes) -> None:
        """Load a raw ROM image at 0x200."""
        self.vm.load_rom(data)

    def reset(self) -> None:
        """Reset the VM and restart the timer clock. The ROM must be reloaded."""
        self._silence()
        self.vm.reset()
        self._timers.restart()
        self._cycles = 0

    # =========================================================================
    # Execution
    # =========================================================================

    def step(self) -> Signal:
        """
        Run one cycle of the host loop without sleeping.

        Returns:
            The signals raised during the cycle. If PROGRAM_EXIT is set, no
            instruction was executed.
        """
        signals = self.input_device.handle_inputs()
        if signals & Signal.PROGRAM_EXIT:
            return signals
        if signals & Signal.NEW_INPUTS:
            self.vm.receive_input(self.input_device.send_inputs())

        signals |= self.vm.step()
        self._cycles += 1

        # A tone started by Fx18 is pushed before catch-up ticks can end it
        signals |= self._push_tone()
        for _ in range(self._timers.poll()):
            self.vm.tick_timers()
        signals |= self._push_tone()

        if signals & Signal.REFRESH_DISPLAY:
            self.display.receive_frame(self.vm.transmit_frame())
            self.display.drive_display()

        return signals

    def _push_tone(self) -> Signal:
        """Send the tone to the audio device if it changed since the last push."""
        tone = self.vm.transmit_audio()
        if tone == self._tone:
            return Signal.NONE
        self._tone = tone
        self.audio.receive_signal(tone)
        self.audio.play_sound()
        return Signal.SOUND_AUDIO

    def _silence(self) -> None:
        if self._tone:
            self._tone = False
            self.audio.receive_signal(False)
            self.audio.play_sound()

    def run(self, max_cycles: Optional[int] = None) -> int:
        """
        Run the host loop in real time until the input device requests exit.

        Args:
            max_cycles: Stop after this many cycles (None runs until exit)

        Returns:
            Number of instructions executed

        Raises:
            MalformedProgramError: If the program does something invalid
        """
        period = 1.0 / self.config.clock_hz
        executed = 0
        self._timers.restart()
        self._is_running = True
        logger.debug(f"Host loop started at {self.config.clock_hz:g} Hz")
        try:
            while max_cycles is None or executed < max_cycles:
                started = self._clock()
                if self.step() & Signal.PROGRAM_EXIT:
                    logger.debug("Exit requested by input device")
                    break
                executed += 1
                spent = self._clock() - started
                self._sleep(max(0.0, period - spent))
        finally:
            self._silence()
            self._is_running = False
            logger.debug(f"Host loop stopped after {executed} cycles")
        return executed

    def run_cycles(self, count: int) -> int:
        """
        Run up to `count` cycles as fast as possible (no pacing).

        Timers still follow the clock, so with the real clock they barely
        move; pass a simulated clock to test timing.

        Returns:
            Number of instructions executed (less than `count` on exit)
        """
        executed = 0
        while executed < count:
            if self.step() & Signal.PROGRAM_EXIT:
                break
            executed += 1
        return executed

    def set_clock_speed(self, clock_hz: float) -> None:
        """
        Change the instruction rate. Takes effect on the next run().

        Raises:
            ValueError: If clock_hz is outside 1-2000 Hz
        """
        _check_clock_hz(clock_hz)
        self.config = dataclasses.replace(self.config, clock_hz=clock_hz)

    # =========================================================================
    # State Inspection
    # =========================================================================

    @property
    def registers(self) -> dict:
        """
        Snapshot of the VM registers.

        Returns:
            Dictionary with keys v0..vf, i, pc, sp, dt, st
        """
        regs = {f"v{n:x}": value for n, value in enumerate(self.vm.v)}
        regs.update({
            'i': self.vm.i,
            'pc': self.vm.pc,
            'sp': len(self.vm.stack),
            'dt': self.vm.timers.delay,
            'st': self.vm.timers.sound,
        })
        return regs

    @property
    def cycles(self) -> int:
        """Instructions executed since construction or the last reset()."""
        return self._cycles

    @property
    def is_running(self) -> bool:
        """True while inside run()."""
        return self._is_running

    @property
    def tone(self) -> bool:
        """Tone state last pushed to the audio device."""
        return self._tone

    def __repr__(self) -> str:
        return (
            f"Emulator(clock={self.config.clock_hz:g}Hz, "
            f"pc=${self.vm.pc:04X}, "
            f"cycles={self._cycles})"
        )
