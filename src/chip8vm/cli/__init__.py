"""
chip8vm Command-Line Interface
==============================

This package provides the command-line tools:

- **chip8**: Run a ROM in the terminal or in a window
- **chip8dis**: Disassemble a ROM

Each tool is implemented as a Click-based CLI application with
comprehensive help and error reporting.
"""

__all__ = ["chip8run", "chip8dis"]
