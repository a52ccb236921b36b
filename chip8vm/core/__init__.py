"""
The interpreter core: memory, registers, timers, framebuffer, decoder and
the cycle engine.  Nothing in here touches pygame or the filesystem.
"""

from chip8vm.core.cpu import Interpreter
from chip8vm.core.errors import (
    Chip8Error,
    OutOfBounds,
    RomLoadError,
    StackUnderflow,
    UnknownOpcode,
)
from chip8vm.core.machine import Machine
from chip8vm.core.quirks import Quirks

__all__ = [
    "Chip8Error",
    "Interpreter",
    "Machine",
    "OutOfBounds",
    "Quirks",
    "RomLoadError",
    "StackUnderflow",
    "UnknownOpcode",
]
