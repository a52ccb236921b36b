"""chip8vm -- an interpreter for the 8-bit CHIP-8 fantasy console."""

__version__ = "1.0.0"
