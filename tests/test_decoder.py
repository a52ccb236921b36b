"""Tests for instruction decoding and disassembly."""

from __future__ import annotations

from hypothesis import given
from hypothesis import strategies as st

from chip8vm.core.decoder import (
    Instruction,
    decode,
    disassemble,
    disassemble_program,
    encode,
)
from chip8vm.core.types import JumpOffset, Op
from tests.support import program

byte = st.integers(min_value=0, max_value=0xFF)


@given(byte, byte)
def test_fields_reconstruct_word(high: int, low: int) -> None:
    word = (high << 8) | low
    ins = decode(high, low)

    assert encode(ins.opcode, ins.x, ins.y, ins.n) == word
    assert ins.word == word
    assert ins.opcode == high >> 4
    assert ins.nn == low
    assert ins.nnn == word & 0x0FFF


@given(byte, byte)
def test_every_word_decodes(high: int, low: int) -> None:
    assert isinstance(decode(high, low).op, Op)


def test_field_split() -> None:
    ins = Instruction.from_word(0xD12F)
    assert (ins.opcode, ins.x, ins.y, ins.n) == (0xD, 0x1, 0x2, 0xF)
    assert ins.nn == 0x2F
    assert ins.nnn == 0x12F


def test_classification_of_sub_selectors() -> None:
    assert Instruction.from_word(0x00E0).op == Op.CLS
    assert Instruction.from_word(0x00EE).op == Op.RET
    assert Instruction.from_word(0x8AB4).op == Op.ADD_REG
    assert Instruction.from_word(0x8ABE).op == Op.SHL
    assert Instruction.from_word(0xE19E).op == Op.SKP
    assert Instruction.from_word(0xE1A1).op == Op.SKNP
    assert Instruction.from_word(0xF50A).op == Op.LD_VX_K
    assert Instruction.from_word(0xF565).op == Op.LOAD_REGS


def test_unrecognised_sub_selectors_are_unknown() -> None:
    for word in (0x0000, 0x0123, 0x8AB8, 0x8ABF, 0xE100, 0xF1FF):
        assert Instruction.from_word(word).op == Op.UNKNOWN, hex(word)


def test_disassembly_mnemonics() -> None:
    assert disassemble(Instruction.from_word(0x6005)) == "LD V0, 0x05"
    assert disassemble(Instruction.from_word(0xD125)) == "DRW V1, V2, 5"
    assert disassemble(Instruction.from_word(0xA2F0)) == "LD I, 0x2F0"
    assert disassemble(Instruction.from_word(0xF355)) == "LD [I], V0..V3"
    assert disassemble(Instruction.from_word(0x0123)) == "??? 0x0123"


def test_jump_offset_disassembly_follows_quirk() -> None:
    ins = Instruction.from_word(0xB300)
    assert disassemble(ins) == "JP V0, 0x300"
    assert disassemble(ins, JumpOffset.VX) == "JP V3, 0x300"


def test_disassemble_program_lists_addresses() -> None:
    data = program(0x00E0, 0x1200) + b"\x42"
    listing = list(disassemble_program(data))

    assert listing == [
        (0x200, 0x00E0, "CLS"),
        (0x202, 0x1200, "JP 0x200"),
        (0x204, 0x42, "DB 0x42"),
    ]
