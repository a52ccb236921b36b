"""
chip8vm -- CHIP-8 interpreter

Main entry point.  Parses command-line arguments, creates the emulated
machine from a ROM file, and launches the pygame display window.

Usage examples::

    # Run a ROM with the default (modern) quirks
    chip8vm roms/pong.ch8

    # Original COSMAC VIP behaviour, slower CPU, bigger pixels
    chip8vm roms/blitz.ch8 --quirks cosmac --cpu-hz 500 --scale 15

    # List ROM metadata / disassembly without launching
    chip8vm roms/pong.ch8 --info
    chip8vm roms/pong.ch8 --disassemble

    # Log every executed instruction
    chip8vm roms/pong.ch8 --trace
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Optional

from chip8vm.core.decoder import disassemble_program
from chip8vm.core.errors import Chip8Error, RomLoadError
from chip8vm.core.machine import Machine
from chip8vm.core.memory import PROGRAM_START
from chip8vm.core.quirks import PRESETS, Quirks
from chip8vm.core.types import JumpOffset, ShiftSource
from chip8vm.shell.services.machine_factory import MachineFactory
from chip8vm.shell.services.rom_bytes_service import RomBytesService


# ---------------------------------------------------------------------------
# CLI definition
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    """Construct the argument parser."""
    parser = argparse.ArgumentParser(
        prog="chip8vm",
        description=(
            "chip8vm -- CHIP-8 interpreter.  "
            "Load a ROM file and play it in a pygame window."
        ),
    )

    parser.add_argument(
        "rom",
        help="Path to the ROM file (.ch8)",
    )

    # Quirks
    preset_names = sorted(PRESETS)
    parser.add_argument(
        "--quirks", "-q",
        choices=preset_names,
        default="modern",
        metavar="PRESET",
        help=(
            "Compatibility preset.  Valid values: " + ", ".join(preset_names)
            + ".  Default: modern."
        ),
    )
    parser.add_argument(
        "--shift-vy",
        dest="shift_source",
        action="store_const",
        const=ShiftSource.VY,
        default=None,
        help="8XY6/8XYE shift VY into VX (COSMAC behaviour).",
    )
    parser.add_argument(
        "--shift-vx",
        dest="shift_source",
        action="store_const",
        const=ShiftSource.VX,
        help="8XY6/8XYE shift VX in place.",
    )
    parser.add_argument(
        "--jump-vx",
        dest="jump_offset",
        action="store_const",
        const=JumpOffset.VX,
        default=None,
        help="BNNN jumps to NNN + VX (SUPER-CHIP behaviour).",
    )
    parser.add_argument(
        "--jump-v0",
        dest="jump_offset",
        action="store_const",
        const=JumpOffset.V0,
        help="BNNN jumps to NNN + V0.",
    )
    parser.add_argument(
        "--increment-index",
        dest="memory_increments_index",
        action="store_const",
        const=True,
        default=None,
        help="FX55/FX65 leave I pointing past the last register.",
    )
    parser.add_argument(
        "--no-increment-index",
        dest="memory_increments_index",
        action="store_const",
        const=False,
        help="FX55/FX65 leave I unchanged.",
    )

    # Machine
    parser.add_argument(
        "--font", "-f",
        default=None,
        metavar="PATH",
        help="Path to an 80-byte font image (optional).",
    )
    parser.add_argument(
        "--cpu-hz",
        type=int,
        default=Machine.DEFAULT_CPU_HZ,
        help=f"Instructions per second.  Default: {Machine.DEFAULT_CPU_HZ}.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the random number instruction (CXNN).",
    )

    # Display / audio
    parser.add_argument(
        "--scale", "-s",
        type=int,
        default=10,
        help="Display scale factor (1-32).  Default: 10.",
    )
    parser.add_argument(
        "--fg",
        default=None,
        metavar="RRGGBB",
        help="Colour of lit pixels.  Default: FFFFFF.",
    )
    parser.add_argument(
        "--bg",
        default=None,
        metavar="RRGGBB",
        help="Colour of unlit pixels.  Default: 000000.",
    )
    parser.add_argument(
        "--no-audio",
        action="store_true",
        default=False,
        help="Disable audio output.",
    )

    # Debugging / info
    parser.add_argument(
        "--info",
        action="store_true",
        default=False,
        help="Print ROM metadata and exit without launching the emulator.",
    )
    parser.add_argument(
        "--disassemble",
        action="store_true",
        default=False,
        help="Print a disassembly of the ROM and exit.",
    )
    parser.add_argument(
        "--dump",
        action="store_true",
        default=False,
        help="Print a hex dump of memory after loading the ROM and exit.",
    )
    parser.add_argument(
        "--trace",
        action="store_true",
        default=False,
        help="Log every executed instruction (DEBUG level).",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="count",
        default=0,
        help="Increase log verbosity (-v for INFO, -vv for DEBUG).",
    )

    return parser


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------

def _configure_logging(verbosity: int, trace: bool = False) -> None:
    """Set up the root logger based on requested verbosity."""
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity >= 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    if trace:
        logging.getLogger("chip8vm.core.cpu").setLevel(logging.DEBUG)


# ---------------------------------------------------------------------------
# Info modes
# ---------------------------------------------------------------------------

def _print_rom_info(rom_path: str) -> int:
    """Print human-readable metadata for a ROM."""
    try:
        info = MachineFactory.describe(rom_path)
    except (FileNotFoundError, RomLoadError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print("chip8vm ROM Information")
    print("=" * 40)
    for key, value in info.items():
        label = key.replace("_", " ").title()
        print(f"  {label:20s}: {value}")
    print("=" * 40)
    return 0


def _print_disassembly(rom_path: str) -> int:
    """Print one line per instruction word in the ROM."""
    try:
        data = RomBytesService.read(rom_path)
    except (FileNotFoundError, RomLoadError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    for address, word, text in disassemble_program(data, PROGRAM_START):
        print(f"{address:03X}:  {word:04X}  {text}")
    return 0


def _resolve_quirks(args: argparse.Namespace) -> Quirks:
    return Quirks.preset(args.quirks).with_overrides(
        shift_source=args.shift_source,
        jump_offset=args.jump_offset,
        memory_increments_index=args.memory_increments_index,
    )


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main(argv: Optional[list[str]] = None) -> int:
    """Application entry point.

    Parameters
    ----------
    argv:
        Command-line arguments.  ``None`` to use ``sys.argv``.

    Returns
    -------
    int
        Exit code (0 on success).
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.verbose, args.trace)
    logger = logging.getLogger("chip8vm.main")

    # Validate the ROM path early.
    rom_path: str = os.path.expanduser(args.rom)
    if not os.path.isfile(rom_path):
        print(f"Error: ROM file not found: {rom_path}", file=sys.stderr)
        return 1

    if args.info:
        return _print_rom_info(rom_path)
    if args.disassemble:
        return _print_disassembly(rom_path)

    # Create the emulated machine.
    try:
        machine = MachineFactory.create(
            rom_path=rom_path,
            quirks=_resolve_quirks(args),
            font_path=args.font,
            cpu_hz=args.cpu_hz,
            seed=args.seed,
        )
    except (FileNotFoundError, RomLoadError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.dump:
        print(machine.interpreter.dump_memory())
        return 0

    # Imported late so the info modes work without a display.
    from chip8vm.platform.window import Window
    from chip8vm.shell.frame_renderer import (
        DEFAULT_BACKGROUND,
        DEFAULT_FOREGROUND,
        parse_colour,
    )

    try:
        foreground = parse_colour(args.fg) if args.fg else DEFAULT_FOREGROUND
        background = parse_colour(args.bg) if args.bg else DEFAULT_BACKGROUND
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    logger.info("Starting emulation ...")
    try:
        window = Window(
            machine,
            scale=args.scale,
            enable_audio=not args.no_audio,
            foreground=foreground,
            background=background,
        )
        window.run()
    except Chip8Error as exc:
        logger.exception("Fatal error during emulation")
        print(f"Fatal error: {exc}", file=sys.stderr)
        return 1

    logger.info("Exited cleanly")
    return 0


if __name__ == "__main__":
    sys.exit(main())
