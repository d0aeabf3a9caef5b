"""
chip8dis - CHIP-8 Disassembler Command-Line Interface
=====================================================

This module implements the command-line interface for the CHIP-8
disassembler.

Usage Examples
--------------
Disassemble a ROM:
    $ chip8dis pong.ch8

Limit number of instructions:
    $ chip8dis pong.ch8 --count 20

Output to file:
    $ chip8dis pong.ch8 -o pong.lst

Mnemonics only:
    $ chip8dis pong.ch8 --no-bytes
"""

from pathlib import Path
from typing import Optional

import click

from chip8vm import __version__
from chip8vm.cli.errors import ExitCode, handle_cli_exception
from chip8vm.disassembler import Chip8Disassembler
from chip8vm.vm.memory import ROM_START


def parse_address(text: str) -> int:
    """Parse an address given as hex (0x200, $200) or decimal (512)."""
    text = text.strip()
    if text.lower().startswith("0x"):
        value = int(text, 16)
    elif text.startswith("$"):
        value = int(text[1:], 16)
    else:
        value = int(text)
    if not 0 <= value <= 0xFFF:
        raise click.BadParameter(f"Address must be 0-4095 (0x000-0xFFF), got {text}")
    return value


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output file (default: stdout)",
)
@click.option(
    "-s", "--start",
    type=str,
    default=f"0x{ROM_START:03X}",
    show_default=True,
    help="Load address of the first byte (hex with 0x/$ prefix or decimal)",
)
@click.option(
    "-c", "--count",
    type=click.IntRange(min=1),
    default=None,
    help="Maximum number of instructions to disassemble (default: all)",
)
@click.option(
    "--no-bytes",
    is_flag=True,
    help="Omit raw bytes from output (show only mnemonic and operands)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="chip8dis")
def main(
    input_file: Path,
    output: Optional[Path],
    start: str,
    count: Optional[int],
    no_bytes: bool,
    verbose: bool,
) -> None:
    """
    Disassemble a CHIP-8 ROM.

    INPUT_FILE is the raw ROM image to disassemble.

    \b
    Examples:
        chip8dis pong.ch8 --count 20
        chip8dis pong.ch8 -o pong.lst --no-bytes
    """
    try:
        base_address = parse_address(start)
    except ValueError:
        click.echo(f"Error: Invalid address '{start}'", err=True)
        raise SystemExit(ExitCode.INVALID_ARGS)

    try:
        data = input_file.read_bytes()
        if not data:
            click.echo(f"Error: {input_file} is empty", err=True)
            raise SystemExit(ExitCode.INVALID_ARGS)

        if verbose:
            click.echo(f"Input file: {input_file} ({len(data)} bytes)", err=True)
            click.echo(f"Base address: ${base_address:04X}", err=True)

        output_lines = [
            f"; Disassembly of {input_file.name}",
            f"; Size: {len(data)} bytes",
            f"; Base address: ${base_address:04X}",
            "",
        ]

        disasm = Chip8Disassembler()
        instructions = disasm.disassemble(data, start_address=base_address, count=count)

        for instr in instructions:
            if no_bytes:
                line = f"${instr.address:04X}: {instr.text}"
                if instr.comment:
                    line += f"  ; {instr.comment}"
                output_lines.append(line)
            else:
                output_lines.append(str(instr))

        result = "\n".join(output_lines) + "\n"

        if output:
            output.write_text(result, encoding="utf-8")
            if verbose:
                click.echo(f"Output written to: {output}", err=True)
        else:
            click.echo(result, nl=False)

        if verbose:
            click.echo(f"Instructions disassembled: {len(instructions)}", err=True)

    except Exception as e:
        handle_cli_exception(e, verbose=verbose)


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
