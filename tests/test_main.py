"""Tests for the command-line modes that do not open a window."""

from __future__ import annotations

import logging

from chip8vm.core.quirks import PRESETS
from chip8vm.core.types import JumpOffset, ShiftSource
from chip8vm.main import _build_parser, _configure_logging, _resolve_quirks, main


def test_info_mode(rom_file, capsys) -> None:
    assert main([str(rom_file), "--info"]) == 0
    out = capsys.readouterr().out
    assert "Rom Size" in out
    assert "First Instruction" in out
    assert "LD V0, 0x05" in out


def test_disassemble_mode(rom_file, capsys) -> None:
    assert main([str(rom_file), "--disassemble"]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines == [
        "200:  6005  LD V0, 0x05",
        "202:  7003  ADD V0, 0x03",
        "204:  F029  LD F, V0",
        "206:  1206  JP 0x206",
    ]


def test_dump_mode(rom_file, capsys) -> None:
    assert main([str(rom_file), "--dump"]) == 0
    out = capsys.readouterr().out
    assert "000: F0 90 90 90 F0" in out
    assert "200: 60 05 70 03 F0 29 12 06" in out


def test_missing_rom_is_an_error(tmp_path, capsys) -> None:
    assert main([str(tmp_path / "missing.ch8"), "--info"]) == 1
    assert "not found" in capsys.readouterr().err


def test_empty_rom_is_an_error(tmp_path, capsys) -> None:
    path = tmp_path / "empty.ch8"
    path.write_bytes(b"")
    assert main([str(path), "--dump"]) == 1
    assert "empty" in capsys.readouterr().err


def test_quirk_flags_override_preset() -> None:
    args = _build_parser().parse_args(["x.ch8", "--quirks", "cosmac", "--shift-vx"])
    quirks = _resolve_quirks(args)
    assert quirks.shift_source == ShiftSource.VX
    assert quirks.memory_increments_index

    args = _build_parser().parse_args(["x.ch8", "--jump-vx"])
    assert _resolve_quirks(args).jump_offset == JumpOffset.VX

    args = _build_parser().parse_args(["x.ch8"])
    assert _resolve_quirks(args) == PRESETS["modern"]


def test_trace_enables_debug_only_for_the_interpreter() -> None:
    cpu_logger = logging.getLogger("chip8vm.core.cpu")
    root = logging.getLogger()
    root_level = root.level
    try:
        _configure_logging(0, trace=True)
        assert cpu_logger.level == logging.DEBUG
        assert root.level == root_level
    finally:
        cpu_logger.setLevel(logging.NOTSET)
