"""
Exception hierarchy for chip8vm.

``OutOfBounds`` and ``StackUnderflow`` are fatal: they mean the running
program is malformed (or the host handed us bad data) and the current run
should stop.  ``UnknownOpcode`` is soft -- the interpreter catches it,
logs it and carries on.
"""

from __future__ import annotations


class Chip8Error(Exception):
    """Base class for every error raised by the interpreter."""


class OutOfBounds(Chip8Error, IndexError):
    """A memory address, load range or register index is out of range."""

    def __init__(self, what: str, index: int, limit: int) -> None:
        super().__init__(f"{what} {index:#06x} out of range [0, {limit:#06x})")
        self.what = what
        self.index = index
        self.limit = limit


class StackUnderflow(Chip8Error):
    """Return from subroutine executed with an empty call stack."""

    def __init__(self, pc: int) -> None:
        super().__init__(f"return with empty call stack at {pc:#06x}")
        self.pc = pc


class UnknownOpcode(Chip8Error):
    """An instruction word that matches no known variant."""

    def __init__(self, word: int, address: int) -> None:
        super().__init__(f"unknown opcode {word:#06x} at {address:#06x}")
        self.word = word
        self.address = address


class RomLoadError(Chip8Error):
    """A ROM or font image could not be used (empty, oversized, ...)."""
