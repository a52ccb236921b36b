"""Tests for the pygame presentation layer that need no open window."""

from __future__ import annotations

import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import numpy as np  # noqa: E402
import pygame  # noqa: E402
import pytest  # noqa: E402

from chip8vm.core.machine import Machine  # noqa: E402
from chip8vm.platform.audio import AudioDevice, square_wave  # noqa: E402
from chip8vm.platform.input_handler import InputHandler  # noqa: E402
from chip8vm.shell.frame_renderer import FrameRenderer, parse_colour  # noqa: E402
from tests.support import make_interpreter  # noqa: E402


@pytest.fixture
def machine() -> Machine:
    return Machine(make_interpreter(0x1200))


# ---------------------------------------------------------------------------
# Colours and rendering
# ---------------------------------------------------------------------------

def test_parse_colour() -> None:
    assert parse_colour("#33FF66") == (0x33, 0xFF, 0x66)
    assert parse_colour("000000") == (0, 0, 0)
    with pytest.raises(ValueError):
        parse_colour("#FFF")


def test_renderer_maps_pixels_through_palette(machine: Machine) -> None:
    machine.frame_buffer.flip(2, 1)
    renderer = FrameRenderer(
        machine, foreground=(10, 20, 30), background=(1, 2, 3)
    )
    surface = renderer.render()

    assert surface.get_size() == (64, 32)
    assert tuple(surface.get_at((2, 1)))[:3] == (10, 20, 30)
    assert tuple(surface.get_at((0, 0)))[:3] == (1, 2, 3)


# ---------------------------------------------------------------------------
# Audio
# ---------------------------------------------------------------------------

def test_square_wave_shape() -> None:
    samples = square_wave(441, 44100, amplitude=1000)
    assert samples.dtype == np.int16
    assert len(samples) % 100 == 0
    assert set(np.unique(samples)) == {-1000, 1000}


def test_disabled_audio_is_a_no_op(machine: Machine) -> None:
    device = AudioDevice(machine, enabled=False)
    machine.interpreter.timers.set_sound(5)
    device.update()
    assert not device.playing


# ---------------------------------------------------------------------------
# Keyboard
# ---------------------------------------------------------------------------

def _key(kind: int, key: int) -> pygame.event.Event:
    return pygame.event.Event(kind, key=key)


def test_keys_map_onto_keypad(machine: Machine) -> None:
    handler = InputHandler(machine)
    handler.handle_event(_key(pygame.KEYDOWN, pygame.K_w))
    handler.handle_event(_key(pygame.KEYDOWN, pygame.K_v))
    machine.input_state.capture_input_state()
    assert machine.input_state.is_held(0x5)
    assert machine.input_state.is_held(0xF)

    handler.handle_event(_key(pygame.KEYUP, pygame.K_w))
    machine.input_state.capture_input_state()
    assert not machine.input_state.is_held(0x5)


def test_control_keys(machine: Machine) -> None:
    handler = InputHandler(machine)
    handler.handle_event(_key(pygame.KEYDOWN, pygame.K_F5))
    handler.handle_event(_key(pygame.KEYDOWN, pygame.K_p))
    assert handler.take_reset_request()
    assert not handler.take_reset_request()
    assert handler.take_pause_toggle()

    handler.handle_event(_key(pygame.KEYDOWN, pygame.K_ESCAPE))
    assert handler.quit_requested


def test_focus_loss_releases_keys(machine: Machine) -> None:
    handler = InputHandler(machine)
    handler.handle_event(_key(pygame.KEYDOWN, pygame.K_1))
    handler.handle_event(pygame.event.Event(pygame.WINDOWFOCUSLOST))
    machine.input_state.capture_input_state()
    assert machine.input_state.first_held() is None
