"""Tests for the XOR framebuffer."""

from __future__ import annotations

import pytest

from chip8vm.core.frame_buffer import FrameBuffer


def test_new_buffer_is_blank() -> None:
    fb = FrameBuffer()
    assert (fb.width, fb.height) == (64, 32)
    assert fb.lit_count() == 0


def test_flip_toggles_and_reports_state() -> None:
    fb = FrameBuffer()
    assert fb.flip(3, 4) is True
    assert fb.get(3, 4)
    assert fb.flip(3, 4) is False
    assert not fb.get(3, 4)


def test_flip_wraps_coordinates() -> None:
    fb = FrameBuffer()
    fb.flip(64 + 5, 32 + 2)
    assert fb.get(5, 2)


def test_drawing_twice_erases_and_collides() -> None:
    fb = FrameBuffer()
    assert fb.draw_sprite(10, 10, b"\xFF\x81") is False
    assert fb.lit_count() == 10
    assert fb.draw_sprite(10, 10, b"\xFF\x81") is True
    assert fb.lit_count() == 0


def test_partial_overlap_collides() -> None:
    fb = FrameBuffer()
    fb.draw_sprite(0, 0, b"\x80")
    assert fb.draw_sprite(0, 0, b"\xC0") is True
    assert not fb.get(0, 0)
    assert fb.get(1, 0)


def test_sprite_wraps_horizontally() -> None:
    fb = FrameBuffer()
    fb.draw_sprite(60, 0, bytes([0b10110011]))
    lit = [x for x in range(64) if fb.get(x, 0)]
    assert lit == [2, 3, 60, 62, 63]


def test_sprite_wraps_vertically() -> None:
    fb = FrameBuffer()
    fb.draw_sprite(0, 31, b"\x80\x80")
    assert fb.get(0, 31)
    assert fb.get(0, 0)


def test_origin_is_wrapped_before_drawing() -> None:
    fb = FrameBuffer()
    fb.draw_sprite(64 + 1, 32 + 1, b"\x80")
    assert fb.get(1, 1)


def test_clear_blanks_everything() -> None:
    fb = FrameBuffer()
    fb.draw_sprite(0, 0, b"\xFF" * 8)
    fb.clear()
    assert fb.lit_count() == 0


def test_render_into_copies_without_mutating() -> None:
    fb = FrameBuffer()
    fb.flip(1, 0)
    fb.flip(0, 1)
    out = [7] * fb.size

    fb.render_into(out)

    assert out[1] == 1
    assert out[64] == 1
    assert sum(out) == 2
    assert fb.lit_count() == 2


def test_render_into_rejects_short_buffer() -> None:
    with pytest.raises(ValueError):
        FrameBuffer().render_into(bytearray(10))


def test_rows_view() -> None:
    fb = FrameBuffer(width=4, height=2)
    fb.flip(2, 1)
    assert fb.rows() == (
        (False, False, False, False),
        (False, False, True, False),
    )
