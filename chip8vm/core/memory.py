"""
Memory -- the flat 4 KB address space of the console.
Addresses do not wrap: an out-of-range access is a program bug and
raises :class:`~chip8vm.core.errors.OutOfBounds`.

Layout::

    0x000-0x04F   built-in font (16 glyphs x 5 bytes)
    0x050-0x1FF   unused (historically the interpreter itself)
    0x200-0xFFF   program
"""

from __future__ import annotations

from typing import Iterable

from chip8vm.core.errors import OutOfBounds

PROGRAM_START: int = 0x200


class Memory:
    """Byte-addressable RAM with bounds-checked access."""

    CAPACITY: int = 0x1000  # 4096 bytes

    def __init__(self) -> None:
        self._data: bytearray = bytearray(self.CAPACITY)

    def reset(self) -> None:
        """Clear the RAM contents to all zeros."""
        self._data[:] = bytes(self.CAPACITY)

    def _check(self, addr: int) -> None:
        if not 0 <= addr < self.CAPACITY:
            raise OutOfBounds("memory address", addr, self.CAPACITY)

    def read(self, addr: int) -> int:
        self._check(addr)
        return self._data[addr]

    def write(self, addr: int, value: int) -> None:
        self._check(addr)
        self._data[addr] = value & 0xFF

    def load(self, offset: int, data: Iterable[int]) -> None:
        """Copy *data* into memory starting at *offset*.

        The whole range is validated before anything is written, so a
        failed load leaves memory untouched.

        Raises:
            OutOfBounds: If ``offset + len(data)`` exceeds the capacity.
        """
        data = bytes(data)
        self._check(offset)
        end = offset + len(data)
        if end > self.CAPACITY:
            raise OutOfBounds("load end", end, self.CAPACITY + 1)
        self._data[offset:end] = data

    def read_block(self, addr: int, length: int) -> bytes:
        """Return *length* bytes starting at *addr* (bounds-checked)."""
        if length <= 0:
            return b""
        self._check(addr)
        self._check(addr + length - 1)
        return bytes(self._data[addr:addr + length])

    __getitem__ = read
    __setitem__ = write

    def __len__(self) -> int:
        return self.CAPACITY

    def dump(self, start: int = 0, end: int = CAPACITY) -> str:
        """Hex dump of ``[start, end)``, sixteen bytes per row.

        Each row is prefixed with the address of its first byte.
        """
        if start < 0 or end > self.CAPACITY or start > end:
            raise OutOfBounds("dump range", end, self.CAPACITY + 1)
        lines = []
        row_start = start - (start % 16)
        for base in range(row_start, end, 16):
            cells = []
            for addr in range(base, base + 16):
                if start <= addr < end:
                    cells.append(f"{self._data[addr]:02X}")
                else:
                    cells.append("  ")
            lines.append(f"{base:03X}: " + " ".join(cells).rstrip())
        return "\n".join(lines)

    def get_snapshot(self) -> bytes:
        """Return an immutable copy of the RAM contents."""
        return bytes(self._data)

    def __repr__(self) -> str:
        return f"Memory(size={self.CAPACITY})"
