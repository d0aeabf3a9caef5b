"""
chip8 - CHIP-8 Emulator Command-Line Interface
==============================================

This module implements the command-line interface for running CHIP-8 ROMs,
either inside the terminal (default) or in a native window.

Usage Examples
--------------
Run in the terminal:
    $ chip8 pong.ch8

Run in a window (with a synthesized tone):
    $ chip8 pong.ch8 --gui

Slower instruction clock:
    $ chip8 pong.ch8 --freq 500

Log every instruction (stderr, best redirected in terminal mode):
    $ chip8 pong.ch8 --trace 2> trace.log

Run headless for a fixed number of instructions:
    $ chip8 test.ch8 --headless --max-cycles 10000

Keyboard
--------
The 4x4 CHIP-8 keypad maps onto the left of a QWERTY keyboard:

    1 2 3 C        1 2 3 4
    4 5 6 D   <-   Q W E R
    7 8 9 E        A S D F
    A 0 B F        Z X C V

Esc or Ctrl-C quits (closing the window in GUI mode).

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

import logging
from pathlib import Path
from typing import Optional

import click

from chip8vm import __version__
from chip8vm.cli.errors import handle_cli_exception
from chip8vm.devices import BellAudio, TerminalDevice
from chip8vm.errors import DeviceError
from chip8vm.vm.emulator import DEFAULT_CLOCK_HZ, Emulator, EmulatorConfig


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(name)s: %(message)s",
    )


def _native_audio():
    try:
        from chip8vm.devices.window import ToneAudio
    except ImportError as e:
        raise DeviceError(
            "Native audio needs pyglet: pip install chip8vm[gui]"
        ) from e
    return ToneAudio()


def wants_native_audio(gui: bool, native_audio: bool, bell: bool) -> bool:
    """Native audio is on with -a, and by default in GUI mode unless --bell."""
    return (native_audio or gui) and not bell


def _run_tui(emulator: Emulator, native_audio: bool, max_cycles: Optional[int]) -> int:
    audio = _native_audio() if native_audio else None
    with TerminalDevice() as term:
        emulator.input_device = term
        emulator.display = term
        emulator.audio = audio if audio is not None else term
        return emulator.run(max_cycles)


def _run_gui(
    emulator: Emulator,
    title: str,
    native_audio: bool,
    max_cycles: Optional[int],
) -> int:
    try:
        from chip8vm.devices.window import WindowDevice
    except ImportError as e:
        raise DeviceError(
            "The windowed frontend needs pyglet: pip install chip8vm[gui]"
        ) from e

    window = WindowDevice(title=title)
    try:
        emulator.input_device = window
        emulator.display = window
        emulator.audio = _native_audio() if native_audio else BellAudio()
        return emulator.run(max_cycles)
    finally:
        window.close()


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "rom",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-g/-t", "--gui/--tui",
    default=False,
    help="Run in a native window or in the terminal. Default: terminal",
)
@click.option(
    "--headless",
    is_flag=True,
    help="Run without any input, display or audio device (use with --max-cycles)",
)
@click.option(
    "-a", "--native-audio",
    is_flag=True,
    help="Play a synthesized tone through the audio hardware instead of the "
         "terminal bell (needs pyglet). Enabled by default with --gui",
)
@click.option(
    "--bell",
    is_flag=True,
    help="Use the terminal bell even in GUI mode",
)
@click.option(
    "-f", "--freq",
    type=click.IntRange(1, 2000),
    default=int(DEFAULT_CLOCK_HZ),
    show_default=True,
    help="Instruction clock rate in Hz",
)
@click.option(
    "-n", "--max-cycles",
    type=click.IntRange(min=0),
    default=None,
    help="Stop after this many instructions (default: run until exit)",
)
@click.option(
    "--seed",
    type=int,
    default=None,
    help="Seed for the random number instruction (default: random)",
)
@click.option(
    "--trace",
    is_flag=True,
    help="Log every executed instruction (implies --verbose)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="chip8")
def main(
    rom: Path,
    gui: bool,
    headless: bool,
    native_audio: bool,
    bell: bool,
    freq: int,
    max_cycles: Optional[int],
    seed: Optional[int],
    trace: bool,
    verbose: bool,
) -> None:
    """
    Run a CHIP-8 ROM.

    ROM is the raw program image (.ch8), loaded at address 0x200.

    \b
    Examples:
        chip8 pong.ch8               # Run in the terminal at 720 Hz
        chip8 pong.ch8 --gui         # Window with synthesized tone
        chip8 pong.ch8 -f 500        # Slower clock

    Quit with Esc or Ctrl-C, or by closing the window.
    """
    verbose = verbose or trace
    native_audio = wants_native_audio(gui, native_audio, bell)
    setup_logging(verbose)

    try:
        config = EmulatorConfig(clock_hz=freq, trace=trace, seed=seed)
        emulator = Emulator(config)

        # ROM errors surface before any device is opened
        emulator.load_program(rom)

        if headless:
            executed = emulator.run(max_cycles)
        elif gui:
            executed = _run_gui(emulator, rom.name, native_audio, max_cycles)
        else:
            executed = _run_tui(emulator, native_audio, max_cycles)

        if verbose:
            click.echo(f"Executed {executed} instructions", err=True)
            click.echo(f"Final state: {emulator}", err=True)

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Emulator")


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
