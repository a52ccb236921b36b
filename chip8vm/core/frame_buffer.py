"""
FrameBuffer -- the 64x32 monochrome display.

Cells are stored one byte per pixel (0 = off, 1 = on) in row-major order::

    cells[y * width + x]

Sprite drawing XORs pixels onto the grid.  All coordinates wrap modulo
the display size, so a sprite running off one edge reappears on the
opposite edge.
"""

from __future__ import annotations

from typing import MutableSequence, Tuple


class FrameBuffer:
    """Boolean pixel grid with wrap-around XOR plotting.

    Parameters
    ----------
    width:
        Horizontal pixel count.  64 on the standard console.
    height:
        Vertical pixel count.  32 on the standard console.
    """

    WIDTH: int = 64
    HEIGHT: int = 32

    def __init__(self, width: int = WIDTH, height: int = HEIGHT) -> None:
        if width <= 0:
            raise ValueError(f"width must be positive, got {width}")
        if height <= 0:
            raise ValueError(f"height must be positive, got {height}")

        self.width: int = width
        self.height: int = height
        self.cells: bytearray = bytearray(width * height)

    @property
    def size(self) -> int:
        """Total number of pixels."""
        return self.width * self.height

    # ------------------------------------------------------------------
    # Pixel access
    # ------------------------------------------------------------------

    def clear(self) -> None:
        """Turn every pixel off."""
        self.cells[:] = bytes(self.size)

    def flip(self, x: int, y: int) -> bool:
        """Toggle the pixel at the wrapped position ``(x, y)``.

        Returns:
            The pixel's new state.  ``False`` means it was on and has
            just been turned off -- a collision.
        """
        offset = (y % self.height) * self.width + (x % self.width)
        state = self.cells[offset] ^ 1
        self.cells[offset] = state
        return bool(state)

    def get(self, x: int, y: int) -> bool:
        return bool(self.cells[(y % self.height) * self.width + (x % self.width)])

    def draw_sprite(self, x: int, y: int, rows: bytes) -> bool:
        """XOR an 8-pixel-wide sprite onto the grid.

        Each byte in *rows* is one sprite row, most significant bit on
        the left.  The origin is wrapped first, then every set bit is
        flipped at its (wrapped) position.

        Returns:
            ``True`` if any pixel went from on to off.
        """
        x %= self.width
        y %= self.height
        collision = False
        for row_off, bits in enumerate(rows):
            for col_off in range(8):
                if bits & (0x80 >> col_off):
                    if not self.flip(x + col_off, y + row_off):
                        collision = True
        return collision

    # ------------------------------------------------------------------
    # Presentation hand-off
    # ------------------------------------------------------------------

    def render_into(self, buffer: MutableSequence) -> None:
        """Copy the pixels, row-major, into a caller-owned *buffer*.

        *buffer* must hold at least :attr:`size` entries; each receives
        ``0`` or ``1``.  The framebuffer itself is not modified.
        """
        if len(buffer) < self.size:
            raise ValueError(
                f"buffer too small: need {self.size} entries, got {len(buffer)}"
            )
        buffer[: self.size] = self.cells

    def rows(self) -> Tuple[Tuple[bool, ...], ...]:
        """Read-only 2-D view of the display, indexed ``[y][x]``."""
        w = self.width
        return tuple(
            tuple(bool(c) for c in self.cells[y * w:(y + 1) * w])
            for y in range(self.height)
        )

    def lit_count(self) -> int:
        """Number of pixels currently on."""
        return sum(self.cells)

    def __repr__(self) -> str:
        return f"FrameBuffer(width={self.width}, height={self.height})"
