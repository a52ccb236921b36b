"""
Machine -- frame-paced wrapper around the :class:`Interpreter`.

The interpreter itself has no notion of time beyond the timer tick
threshold.  A host loop usually runs at the display rate (60 Hz) and
needs to run a batch of instructions per frame; :class:`Machine` groups
that bookkeeping:

* captures the staged key state at the frame boundary,
* feeds elapsed time to the timers,
* runs ``cpu_hz / frame_hz`` instructions (fewer if the machine blocks),
* reports whether the framebuffer changed so the host can skip redraws.

A fatal interpreter error halts the machine and is re-raised; subsequent
frames are no-ops until :meth:`reset`.
"""

from __future__ import annotations

import logging
from typing import Optional

from chip8vm.core.cpu import Interpreter
from chip8vm.core.errors import Chip8Error
from chip8vm.core.frame_buffer import FrameBuffer
from chip8vm.core.input_state import InputState

logger = logging.getLogger(__name__)


class Machine:
    """A runnable console: one interpreter plus its frame pacing.

    Parameters
    ----------
    interpreter:
        A fully-loaded interpreter (program already in memory).
    cpu_hz:
        Instructions executed per second of emulated time.
    frame_hz:
        Frame rate of the host loop.  Clamped to >= 1.
    """

    DEFAULT_CPU_HZ: int = 700
    DEFAULT_FRAME_HZ: int = 60

    def __init__(
        self,
        interpreter: Interpreter,
        cpu_hz: int = DEFAULT_CPU_HZ,
        frame_hz: int = DEFAULT_FRAME_HZ,
        title: Optional[str] = None,
    ) -> None:
        if cpu_hz <= 0:
            raise ValueError(f"cpu_hz must be positive, got {cpu_hz}")
        self.interpreter: Interpreter = interpreter
        self.cpu_hz: int = cpu_hz
        self.frame_hz: int = max(1, frame_hz)
        self.title: Optional[str] = title

        self.machine_halt: bool = False
        self.frame_number: int = 0
        self.last_trace: str = ""

    # ------------------------------------------------------------------
    # Convenience accessors used by the platform layer
    # ------------------------------------------------------------------

    @property
    def frame_buffer(self) -> FrameBuffer:
        return self.interpreter.frame_buffer

    @property
    def input_state(self) -> InputState:
        return self.interpreter.input_state

    @property
    def sound_active(self) -> bool:
        return not self.machine_halt and self.interpreter.sound_active

    @property
    def steps_per_frame(self) -> int:
        return max(1, self.cpu_hz // self.frame_hz)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Reset the interpreter and clear the halt flag."""
        self.interpreter.reset()
        self.machine_halt = False
        self.frame_number = 0
        self.last_trace = ""

    def compute_next_frame(self, elapsed: Optional[float] = None) -> bool:
        """Advance the emulation by one host frame.

        Parameters
        ----------
        elapsed:
            Real seconds since the previous frame.  ``None`` means one
            nominal frame (``1 / frame_hz``).

        Returns
        -------
        bool
            ``True`` if the framebuffer changed during this frame.

        Raises
        ------
        Chip8Error
            A fatal interpreter error.  The machine is halted first.
        """
        if self.machine_halt:
            return False
        if elapsed is None:
            elapsed = 1.0 / self.frame_hz

        interp = self.interpreter
        interp.input_state.capture_input_state()
        interp.tick_timers(elapsed)
        self.frame_number += 1

        dirty = False
        try:
            for _ in range(self.steps_per_frame):
                changed, self.last_trace = interp.step()
                dirty = dirty or changed
                if interp.waiting_for_key:
                    # Nothing more can happen until the next key capture.
                    break
        except Chip8Error:
            self.machine_halt = True
            logger.error(
                "Machine halted at frame %d (%r)", self.frame_number, interp
            )
            raise
        return dirty

    # ------------------------------------------------------------------
    # Dunder helpers
    # ------------------------------------------------------------------

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"cpu_hz={self.cpu_hz}, "
            f"frame_hz={self.frame_hz}, "
            f"frame={self.frame_number}, "
            f"halted={self.machine_halt})"
        )
