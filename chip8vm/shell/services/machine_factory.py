"""
Machine creation factory for chip8vm.

Creates a ready-to-run :class:`~chip8vm.core.machine.Machine` from a ROM
file path and optional overrides for quirks, font, speed and seed.  All
file reading and validation happens here, so a bad ROM is reported
before an interpreter exists.

Typical usage::

    machine = MachineFactory.create("pong.ch8")
    machine = MachineFactory.create("blitz.ch8", quirks="cosmac", cpu_hz=500)
"""

from __future__ import annotations

import logging
import os
import random
from typing import Optional, Union

from chip8vm.core.cpu import Interpreter
from chip8vm.core.machine import Machine
from chip8vm.core.quirks import Quirks
from chip8vm.shell.services.rom_bytes_service import RomBytesService

logger = logging.getLogger(__name__)


class MachineFactory:
    """Create an emulated console from a ROM file."""

    @staticmethod
    def create(
        rom_path: str,
        quirks: Optional[Union[Quirks, str]] = None,
        font_path: Optional[str] = None,
        cpu_hz: int = Machine.DEFAULT_CPU_HZ,
        seed: Optional[int] = None,
    ) -> Machine:
        """Build and return a machine with the ROM loaded.

        Parameters
        ----------
        rom_path:
            Filesystem path to the program image.
        quirks:
            A :class:`Quirks` instance or the name of a preset
            (``"modern"``, ``"cosmac"``, ``"schip"``).  ``None`` picks
            ``modern``.
        font_path:
            Optional 80-byte font image replacing the built-in glyphs.
        cpu_hz:
            Instructions per second.
        seed:
            Seed for the ``CXNN`` random source; ``None`` for a fresh one.

        Raises
        ------
        FileNotFoundError
            If *rom_path* (or *font_path*) does not exist.
        RomLoadError
            If the ROM or font image cannot be used.
        ValueError
            If *quirks* names an unknown preset.
        """
        if isinstance(quirks, str):
            quirks = Quirks.preset(quirks)
        elif quirks is None:
            quirks = Quirks()
        logger.info("Quirks: %s", quirks.describe())

        logger.info("Loading ROM: %s", rom_path)
        rom_bytes = RomBytesService.read(rom_path)
        logger.info("ROM size: %d bytes", len(rom_bytes))

        font: Optional[bytes] = None
        if font_path is not None:
            font = RomBytesService.read_font(font_path)
            logger.info("Loaded font from %s", font_path)

        interpreter = Interpreter(
            quirks=quirks,
            font=font,
            rng=random.Random(seed),
        )
        interpreter.load_program(rom_bytes)

        title = os.path.splitext(os.path.basename(rom_path))[0]
        machine = Machine(interpreter, cpu_hz=cpu_hz, title=title)
        logger.info("Machine created: %r", machine)
        return machine

    @staticmethod
    def describe(rom_path: str) -> dict:
        """Metadata for ``--info`` mode; see :meth:`RomBytesService.describe`."""
        return RomBytesService.describe(rom_path)
