"""
TimerPair -- the delay and sound countdown timers.

Both are 8-bit counters that tick down at 60 Hz until they reach zero.
The host feeds real elapsed time through :meth:`TimerPair.tick`; whole
tick intervals are converted into decrements and the remainder is carried
over so the rate does not drift.
"""

from __future__ import annotations

TIMER_HZ: int = 60


class TimerPair:
    """Delay and sound timers driven by elapsed wall-clock time."""

    TICK_INTERVAL: float = 1.0 / TIMER_HZ

    # Absorbs float rounding when callers split one interval into parts.
    _EPSILON: float = 1e-9

    def __init__(self) -> None:
        self.delay: int = 0
        self.sound: int = 0
        self._accumulated: float = 0.0

    def reset(self) -> None:
        self.delay = 0
        self.sound = 0
        self._accumulated = 0.0

    def tick(self, elapsed: float) -> int:
        """Accumulate *elapsed* seconds and apply any whole ticks.

        Returns:
            The number of 60 Hz ticks applied.
        """
        if elapsed < 0:
            raise ValueError(f"elapsed time must be non-negative, got {elapsed}")
        self._accumulated += elapsed
        ticks = int((self._accumulated + self._EPSILON) // self.TICK_INTERVAL)
        self._accumulated = max(0.0, self._accumulated - ticks * self.TICK_INTERVAL)
        if ticks:
            self.delay = max(0, self.delay - ticks)
            self.sound = max(0, self.sound - ticks)
        return ticks

    def set_delay(self, value: int) -> None:
        self.delay = value & 0xFF

    def set_sound(self, value: int) -> None:
        self.sound = value & 0xFF

    def get_delay(self) -> int:
        return self.delay

    @property
    def sound_active(self) -> bool:
        """The beeper sounds while the sound timer is non-zero."""
        return self.sound > 0

    def __repr__(self) -> str:
        return f"TimerPair(delay={self.delay}, sound={self.sound})"
