"""Tests for Memory, Registers and CallStack."""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from chip8vm.core.errors import OutOfBounds, StackUnderflow
from chip8vm.core.memory import Memory
from chip8vm.core.registers import FLAG_REGISTER, CallStack, Registers


def test_memory_starts_zeroed() -> None:
    mem = Memory()
    assert len(mem) == 4096
    assert mem.get_snapshot() == bytes(4096)


def test_memory_read_write_round_trip() -> None:
    mem = Memory()
    mem.write(0x345, 0x1AB)
    assert mem.read(0x345) == 0xAB
    assert mem[0x345] == 0xAB


@pytest.mark.parametrize("addr", [-1, 4096, 0xFFFF])
def test_memory_access_out_of_range(addr: int) -> None:
    mem = Memory()
    with pytest.raises(OutOfBounds):
        mem.read(addr)
    with pytest.raises(OutOfBounds):
        mem.write(addr, 0)


def test_load_copies_at_offset() -> None:
    mem = Memory()
    mem.load(0x200, b"\x01\x02\x03")
    assert mem.read_block(0x200, 3) == b"\x01\x02\x03"


def test_load_up_to_the_last_byte_is_allowed() -> None:
    mem = Memory()
    mem.load(0xFFE, b"\xAA\xBB")
    assert mem.read(0xFFF) == 0xBB


def test_oversized_load_fails_without_writing() -> None:
    mem = Memory()
    with pytest.raises(OutOfBounds):
        mem.load(0xFFE, b"\x01\x02\x03")
    assert mem.get_snapshot() == bytes(4096)


def test_read_block_past_the_end() -> None:
    mem = Memory()
    with pytest.raises(OutOfBounds):
        mem.read_block(0xFFF, 2)
    assert mem.read_block(0xFFF, 0) == b""


def test_dump_rows_are_addressed() -> None:
    mem = Memory()
    mem.load(0x200, b"\x60\x05\x70\x03")
    assert mem.dump(0x200, 0x204) == "200: 60 05 70 03"
    rows = mem.dump(0x000, 0x020).splitlines()
    assert len(rows) == 2
    assert rows[1].startswith("010: 00 00")


# ---------------------------------------------------------------------------
# Registers
# ---------------------------------------------------------------------------

@given(
    st.integers(min_value=0, max_value=15),
    st.integers(min_value=0, max_value=0xFF),
)
def test_register_writes_are_isolated_and_idempotent(index: int, value: int) -> None:
    regs = Registers()
    for i in range(16):
        regs.set(i, 0x10 + i)
    before = regs.snapshot()

    regs.set(index, value)
    once = regs.snapshot()
    regs.set(index, value)

    assert regs.snapshot() == once
    assert regs.get(index) == value
    for j in range(16):
        if j != index:
            assert regs.get(j) == before[j]


def test_register_values_wrap_to_a_byte() -> None:
    regs = Registers()
    regs.set(3, 0x1FF)
    assert regs.get(3) == 0xFF
    regs.set(3, -1)
    assert regs.get(3) == 0xFF


@pytest.mark.parametrize("index", [-1, 16, 0x10F])
def test_register_index_is_checked(index: int) -> None:
    regs = Registers()
    with pytest.raises(OutOfBounds):
        regs.get(index)
    with pytest.raises(OutOfBounds):
        regs.set(index, 1)


def test_set_flag_writes_vf() -> None:
    regs = Registers()
    regs.set_flag(1)
    assert regs.get(FLAG_REGISTER) == 1
    assert regs.flag == 1


def test_registers_power_on_state() -> None:
    regs = Registers()
    assert regs.pc == 0x200
    assert regs.i == 0
    assert regs.snapshot() == (0,) * 16


# ---------------------------------------------------------------------------
# CallStack
# ---------------------------------------------------------------------------

def test_stack_is_lifo() -> None:
    stack = CallStack()
    stack.push(0x202)
    stack.push(0x300)
    assert stack.depth == 2
    assert stack.pop() == 0x300
    assert stack.pop() == 0x202
    assert len(stack) == 0


def test_stack_has_no_depth_limit() -> None:
    stack = CallStack()
    for addr in range(100):
        stack.push(addr)
    assert stack.depth == 100


def test_pop_on_empty_stack_underflows() -> None:
    stack = CallStack()
    with pytest.raises(StackUnderflow) as info:
        stack.pop(0x204)
    assert info.value.pc == 0x204
