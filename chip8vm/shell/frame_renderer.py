"""
Frame renderer for chip8vm.
Converts the machine's one-byte-per-pixel FrameBuffer into an RGB pygame
Surface.

The interpreter produces a row-major grid of 0/1 values.  This module maps
those through a two-entry colour look-up table with **numpy** and blits
the result into a pygame Surface at native resolution; the window scales
it to the display size.
"""

from __future__ import annotations

import logging
from typing import Tuple

import numpy as np
import pygame

logger = logging.getLogger(__name__)

RGB = Tuple[int, int, int]

DEFAULT_BACKGROUND: RGB = (0x00, 0x00, 0x00)
DEFAULT_FOREGROUND: RGB = (0xFF, 0xFF, 0xFF)


def parse_colour(text: str) -> RGB:
    """Parse ``"RRGGBB"`` or ``"#RRGGBB"`` into an RGB tuple.

    Raises:
        ValueError: If *text* is not six hex digits.
    """
    value = text.lstrip("#")
    if len(value) != 6:
        raise ValueError(f"colour must be six hex digits, got {text!r}")
    packed = int(value, 16)
    return ((packed >> 16) & 0xFF, (packed >> 8) & 0xFF, packed & 0xFF)


class FrameRenderer:
    """Render a machine's framebuffer into a reusable pygame Surface.

    Parameters
    ----------
    machine:
        The emulated machine.  Expected attribute: ``frame_buffer`` --
        :class:`~chip8vm.core.frame_buffer.FrameBuffer`.
    foreground, background:
        Colours for lit and unlit pixels.
    """

    def __init__(
        self,
        machine: object,
        foreground: RGB = DEFAULT_FOREGROUND,
        background: RGB = DEFAULT_BACKGROUND,
    ) -> None:
        self._machine = machine
        fb = machine.frame_buffer  # type: ignore[attr-defined]
        self._width: int = fb.width
        self._height: int = fb.height

        self._lut = np.zeros((2, 3), dtype=np.uint8)
        self.set_colours(foreground, background)

        self._surface: pygame.Surface = pygame.Surface((self._width, self._height))

        logger.info("FrameRenderer: %dx%d", self._width, self._height)

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def surface(self) -> pygame.Surface:
        """The internal pygame Surface (updated on each :meth:`render` call)."""
        return self._surface

    def set_colours(self, foreground: RGB, background: RGB) -> None:
        self._lut[0] = background
        self._lut[1] = foreground

    def render(self) -> pygame.Surface:
        """Render the current frame and return the surface.

        The same :class:`pygame.Surface` object is reused every frame.
        """
        fb = self._machine.frame_buffer  # type: ignore[attr-defined]

        # View the cell bytes without copying, shape (H, W).
        cells = np.frombuffer(fb.cells, dtype=np.uint8).reshape(
            (self._height, self._width)
        )
        rgb = self._lut[cells]

        # pygame surfarray expects (W, H, 3).
        pygame.surfarray.blit_array(self._surface, rgb.transpose(1, 0, 2))
        return self._surface
