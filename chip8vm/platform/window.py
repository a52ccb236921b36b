"""
Main application window for chip8vm.
Uses pygame to create a display, drive the emulation main loop, and
coordinate audio, video, and input subsystems.

Typical usage::

    from chip8vm.platform.window import Window

    machine = MachineFactory.create("pong.ch8")
    window = Window(machine, scale=10)
    window.run()
"""

from __future__ import annotations

import logging
import time

import pygame

from chip8vm.platform.audio import AudioDevice
from chip8vm.platform.input_handler import InputHandler
from chip8vm.shell.frame_renderer import (
    DEFAULT_BACKGROUND,
    DEFAULT_FOREGROUND,
    RGB,
    FrameRenderer,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_WINDOW_TITLE: str = "chip8vm"

# Minimum / maximum allowed display scale factors.
_MIN_SCALE: int = 1
_MAX_SCALE: int = 32

# Longest gap fed to the machine in one frame; avoids a burst of timer
# ticks after the window was dragged or the process was suspended.
_MAX_FRAME_SECONDS: float = 0.25


class Window:
    """Pygame window that owns the emulation main loop.

    Parameters
    ----------
    machine:
        A :class:`~chip8vm.core.machine.Machine`.  Expected attributes:

        * ``frame_buffer`` -- :class:`~chip8vm.core.frame_buffer.FrameBuffer`
        * ``frame_hz`` -- ``int``
        * ``compute_next_frame(elapsed)`` -- advance one frame
        * ``input_state`` -- for keypad input
        * ``sound_active`` -- for the beeper
        * ``reset()``

    scale:
        Integer scale factor applied to the native 64x32 resolution.
    enable_audio:
        Set to ``False`` to mute sound output entirely.
    """

    def __init__(
        self,
        machine: object,
        scale: int = 10,
        *,
        enable_audio: bool = True,
        foreground: RGB = DEFAULT_FOREGROUND,
        background: RGB = DEFAULT_BACKGROUND,
    ) -> None:
        # ---- basic state -------------------------------------------------
        self._machine = machine
        self._scale: int = max(_MIN_SCALE, min(_MAX_SCALE, scale))
        self._running: bool = False
        self._paused: bool = False
        self._needs_redraw: bool = True

        fb = machine.frame_buffer  # type: ignore[attr-defined]
        self._native_width: int = fb.width
        self._native_height: int = fb.height
        self._frame_hz: int = getattr(machine, "frame_hz", 60)

        # ---- init pygame display -----------------------------------------
        if not pygame.get_init():
            pygame.init()

        self._display_width: int = self._native_width * self._scale
        self._display_height: int = self._native_height * self._scale

        self._screen: pygame.Surface = pygame.display.set_mode(
            (self._display_width, self._display_height),
            pygame.RESIZABLE,
        )
        pygame.display.set_caption(self._build_title(machine))

        self._clock: pygame.time.Clock = pygame.time.Clock()

        # ---- subsystems --------------------------------------------------
        self._frame_renderer: FrameRenderer = FrameRenderer(
            machine, foreground=foreground, background=background
        )
        self._audio: AudioDevice = AudioDevice(machine, enabled=enable_audio)
        self._input: InputHandler = InputHandler(machine)

        self._last_frame_time: float = 0.0

        logger.info(
            "Window: %dx%d native, %dx%d display (scale=%d, %d Hz)",
            self._native_width,
            self._native_height,
            self._display_width,
            self._display_height,
            self._scale,
            self._frame_hz,
        )

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def running(self) -> bool:
        return self._running

    @property
    def paused(self) -> bool:
        return self._paused

    @paused.setter
    def paused(self, value: bool) -> None:
        self._paused = value

    @property
    def scale(self) -> int:
        return self._scale

    # ------------------------------------------------------------------
    # Main loop
    # ------------------------------------------------------------------

    def run(self) -> None:
        """Enter the main emulation loop.

        This method blocks until the user closes the window or presses
        Escape.  It:

        1. Polls input events and forwards them to the machine.
        2. Calls ``machine.compute_next_frame(elapsed)``.
        3. Starts or stops the beeper.
        4. Redraws the display when the framebuffer changed.
        5. Throttles to the target frame rate.

        Fatal interpreter errors propagate to the caller after the
        subsystems are shut down.
        """
        self._running = True
        self._last_frame_time = time.perf_counter()

        logger.info("Entering main loop (target %d fps)", self._frame_hz)

        try:
            while self._running:
                self._tick()
        except KeyboardInterrupt:
            logger.info("Interrupted by user")
        finally:
            self._shutdown()

    # ------------------------------------------------------------------
    # Per-frame tick
    # ------------------------------------------------------------------

    def _tick(self) -> None:
        """Execute one iteration of the main loop."""
        # ---- input -------------------------------------------------------
        self._input.poll()
        if self._input.quit_requested:
            self._running = False
            return
        if self._input.take_reset_request():
            logger.info("Reset requested")
            self._machine.reset()  # type: ignore[attr-defined]
            self._needs_redraw = True
        if self._input.take_redraw_request():
            self._needs_redraw = True
        if self._input.take_pause_toggle():
            self._paused = not self._paused
            logger.info("Paused" if self._paused else "Resumed")

        now = time.perf_counter()
        elapsed = min(now - self._last_frame_time, _MAX_FRAME_SECONDS)
        self._last_frame_time = now

        # ---- emulation ---------------------------------------------------
        if not self._paused:
            if self._machine.compute_next_frame(elapsed):  # type: ignore[attr-defined]
                self._needs_redraw = True

        # ---- audio -------------------------------------------------------
        self._audio.update(muted=self._paused)

        # ---- video -------------------------------------------------------
        if self._needs_redraw:
            surface = self._frame_renderer.render()
            current_size = self._screen.get_size()
            scaled = pygame.transform.scale(surface, current_size)
            self._screen.blit(scaled, (0, 0))
            pygame.display.flip()
            self._needs_redraw = False

        # ---- timing ------------------------------------------------------
        self._clock.tick(self._frame_hz)

    # ------------------------------------------------------------------
    # Shutdown
    # ------------------------------------------------------------------

    def _shutdown(self) -> None:
        """Clean up all subsystems."""
        logger.info("Shutting down")
        self._audio.shutdown()
        pygame.quit()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _build_title(machine: object) -> str:
        """Build the window title string from machine metadata."""
        title = getattr(machine, "title", None)
        if title:
            return f"{_WINDOW_TITLE} - {title}"
        return _WINDOW_TITLE
