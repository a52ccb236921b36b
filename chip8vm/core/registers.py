"""
Register file and call stack.

Sixteen 8-bit general registers V0-VF, the 16-bit address register ``I``
and the 16-bit program counter.  VF doubles as the carry / borrow /
collision flag: instructions that define a flag overwrite it, the rest
leave it alone.
"""

from __future__ import annotations

from typing import List

from chip8vm.core.errors import OutOfBounds, StackUnderflow
from chip8vm.core.memory import PROGRAM_START

REGISTER_COUNT: int = 0x10
FLAG_REGISTER: int = 0xF


class Registers:
    """V0-VF plus ``i`` (address register) and ``pc``."""

    def __init__(self) -> None:
        self._v: List[int] = [0] * REGISTER_COUNT
        self.i: int = 0x000
        self.pc: int = PROGRAM_START

    def reset(self) -> None:
        for idx in range(REGISTER_COUNT):
            self._v[idx] = 0
        self.i = 0x000
        self.pc = PROGRAM_START

    @staticmethod
    def _check(index: int) -> None:
        if not 0 <= index < REGISTER_COUNT:
            raise OutOfBounds("register index", index, REGISTER_COUNT)

    def get(self, index: int) -> int:
        self._check(index)
        return self._v[index]

    def set(self, index: int, value: int) -> None:
        self._check(index)
        self._v[index] = value & 0xFF

    def set_flag(self, value: int) -> None:
        self.set(FLAG_REGISTER, value)

    @property
    def flag(self) -> int:
        return self._v[FLAG_REGISTER]

    def advance(self, count: int = 1) -> None:
        """Move ``pc`` forward by *count* instructions (2 bytes each)."""
        self.pc = (self.pc + 2 * count) & 0xFFFF

    def snapshot(self) -> tuple:
        """Immutable view of V0-VF."""
        return tuple(self._v)

    __getitem__ = get
    __setitem__ = set

    def __repr__(self) -> str:
        regs = " ".join(f"V{i:X}={v:02X}" for i, v in enumerate(self._v))
        return f"Registers(pc={self.pc:#05x}, i={self.i:#05x}, {regs})"


class CallStack:
    """LIFO of 16-bit return addresses with no depth limit."""

    def __init__(self) -> None:
        self._frames: List[int] = []

    def reset(self) -> None:
        self._frames.clear()

    def push(self, addr: int) -> None:
        self._frames.append(addr & 0xFFFF)

    def pop(self, pc: int = 0) -> int:
        """Pop the most recent return address.

        Args:
            pc: Address of the returning instruction, used only for the
                error message.

        Raises:
            StackUnderflow: If the stack is empty.
        """
        if not self._frames:
            raise StackUnderflow(pc)
        return self._frames.pop()

    @property
    def depth(self) -> int:
        return len(self._frames)

    def __len__(self) -> int:
        return len(self._frames)

    def __repr__(self) -> str:
        return f"CallStack(depth={len(self._frames)})"
