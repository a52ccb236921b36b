"""
ROM loading service for chip8vm.

Responsibilities:
  - Read program images and optional font images from disk.
  - Reject images that cannot be loaded (empty, larger than the program
    area, wrong font size) before any interpreter is built.
  - Summarise a ROM for the ``--info`` CLI mode.
"""

from __future__ import annotations

import os
from typing import Dict

from chip8vm.core.decoder import decode, disassemble
from chip8vm.core.errors import RomLoadError
from chip8vm.core.font import FONT_SIZE
from chip8vm.core.memory import PROGRAM_START, Memory

# Largest program that fits between the load address and the top of RAM.
MAX_ROM_SIZE: int = Memory.CAPACITY - PROGRAM_START


class RomBytesService:
    """Static helpers for reading ROM and font files."""

    @staticmethod
    def _read_file(path: str) -> bytes:
        path = os.path.expanduser(path)
        if not os.path.isfile(path):
            raise FileNotFoundError(f"ROM file not found: {path}")
        with open(path, "rb") as fh:
            return fh.read()

    @staticmethod
    def validate(data: bytes, name: str = "ROM") -> bytes:
        """Check that *data* fits the program area.

        Raises:
            RomLoadError: If *data* is empty or too large.
        """
        if not data:
            raise RomLoadError(f"{name} is empty")
        if len(data) > MAX_ROM_SIZE:
            raise RomLoadError(
                f"{name} is {len(data)} bytes; at most {MAX_ROM_SIZE} bytes "
                f"fit above {PROGRAM_START:#05x}"
            )
        return data

    @staticmethod
    def read(path: str) -> bytes:
        """Read a program image.

        Raises:
            FileNotFoundError: If *path* does not exist.
            RomLoadError: If the image is empty or too large.
        """
        data = RomBytesService._read_file(path)
        return RomBytesService.validate(data, os.path.basename(path))

    @staticmethod
    def read_font(path: str) -> bytes:
        """Read an 80-byte font image (16 glyphs x 5 rows).

        Raises:
            FileNotFoundError: If *path* does not exist.
            RomLoadError: If the image is not exactly 80 bytes.
        """
        data = RomBytesService._read_file(path)
        if len(data) != FONT_SIZE:
            raise RomLoadError(
                f"font {os.path.basename(path)} is {len(data)} bytes; "
                f"expected {FONT_SIZE}"
            )
        return data

    @staticmethod
    def describe(path: str) -> Dict[str, str]:
        """Return human-readable metadata for a ROM file.

        Keys: ``title``, ``rom_size``, ``free_bytes``, ``load_address``,
        ``first_instruction``.
        """
        data = RomBytesService.read(path)
        if len(data) >= 2:
            first = disassemble(decode(data[0], data[1]))
        else:
            first = f"DB 0x{data[0]:02X}"
        return {
            "title": os.path.splitext(os.path.basename(path))[0],
            "rom_size": str(len(data)),
            "free_bytes": str(MAX_ROM_SIZE - len(data)),
            "load_address": f"0x{PROGRAM_START:03X}",
            "first_instruction": first,
        }
