"""Tests for frame pacing in Machine."""

from __future__ import annotations

import pytest

from chip8vm.core.errors import StackUnderflow
from chip8vm.core.machine import Machine
from chip8vm.core.timers import TimerPair
from tests.support import make_interpreter


def test_steps_per_frame() -> None:
    machine = Machine(make_interpreter(0x1200), cpu_hz=600, frame_hz=60)
    assert machine.steps_per_frame == 10
    assert Machine(make_interpreter(0x1200), cpu_hz=10).steps_per_frame == 1


def test_cpu_hz_must_be_positive() -> None:
    with pytest.raises(ValueError):
        Machine(make_interpreter(0x1200), cpu_hz=0)


def test_frame_runs_a_batch_of_steps() -> None:
    machine = Machine(make_interpreter(0x1200), cpu_hz=600, frame_hz=60)
    assert machine.compute_next_frame() is False
    assert machine.interpreter.cycles == 10
    assert machine.frame_number == 1
    assert machine.last_trace == "0x200: 0x1200 => JP 0x200"


def test_frame_reports_display_changes() -> None:
    machine = Machine(make_interpreter(0x00E0, 0x1202), cpu_hz=600)
    assert machine.compute_next_frame() is True
    assert machine.compute_next_frame() is False


def test_frame_stops_early_while_waiting_for_key() -> None:
    machine = Machine(make_interpreter(0xF00A, 0x1202), cpu_hz=600)
    machine.compute_next_frame()
    assert machine.interpreter.cycles == 1
    assert machine.interpreter.waiting_for_key

    machine.input_state.raise_input(7, True)
    machine.compute_next_frame()
    assert machine.interpreter.registers.get(0) == 7
    assert not machine.interpreter.waiting_for_key


def test_keys_are_captured_at_frame_boundary() -> None:
    machine = Machine(make_interpreter(0x1200))
    machine.input_state.raise_input(4, True)
    assert not machine.input_state.is_held(4)
    machine.compute_next_frame()
    assert machine.input_state.is_held(4)


def test_sound_follows_timer() -> None:
    machine = Machine(make_interpreter(0x6003, 0xF018, 0x1204), cpu_hz=600)
    machine.compute_next_frame(0.0)
    assert machine.sound_active

    machine.compute_next_frame(TimerPair.TICK_INTERVAL * 3)
    assert not machine.sound_active


def test_fatal_error_halts_machine() -> None:
    machine = Machine(make_interpreter(0x00EE))
    with pytest.raises(StackUnderflow):
        machine.compute_next_frame()
    assert machine.machine_halt
    assert machine.compute_next_frame() is False


def test_reset_clears_halt() -> None:
    machine = Machine(make_interpreter(0x00EE))
    with pytest.raises(StackUnderflow):
        machine.compute_next_frame()
    machine.reset()
    assert not machine.machine_halt
    assert machine.interpreter.registers.pc == 0x200
    assert machine.frame_number == 0
