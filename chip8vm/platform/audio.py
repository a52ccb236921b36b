"""
Audio output device for chip8vm.
Uses pygame.mixer to sound the console's single-tone beeper.

The console has no sample output: the only audio signal is "sound timer
is non-zero".  This module pre-generates one period-aligned buffer of a
square wave with numpy, loops it on a dedicated mixer channel while the
machine reports :attr:`sound_active`, and stops it otherwise.
"""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np
import pygame

logger = logging.getLogger(__name__)

_SAMPLE_RATE: int = 44100
_MIXER_BUFFER_SAMPLES: int = 512

DEFAULT_TONE_HZ: int = 440
DEFAULT_VOLUME: float = 0.25


def square_wave(frequency: int, sample_rate: int, amplitude: int = 8000) -> np.ndarray:
    """One whole number of square-wave periods as signed 16-bit samples.

    The buffer is long enough (about 0.1 s) to loop without audible
    seams.
    """
    period = max(2, sample_rate // max(1, frequency))
    periods = max(1, sample_rate // 10 // period)
    half = period // 2
    cycle = np.concatenate(
        (
            np.full(half, amplitude, dtype=np.int16),
            np.full(period - half, -amplitude, dtype=np.int16),
        )
    )
    return np.tile(cycle, periods)


class AudioDevice:
    """Start/stop a looping tone as the machine's sound timer dictates.

    Parameters
    ----------
    machine:
        The emulated machine.  Expected attribute: ``sound_active`` --
        ``bool``.
    enabled:
        Set to ``False`` to create the device in a silent / no-op mode.
    tone_hz:
        Beeper pitch.
    """

    def __init__(
        self,
        machine: object,
        *,
        enabled: bool = True,
        tone_hz: int = DEFAULT_TONE_HZ,
    ) -> None:
        self._machine = machine
        self._enabled: bool = enabled
        self._tone_hz: int = tone_hz
        self._channel: Optional[pygame.mixer.Channel] = None
        self._tone: Optional[pygame.mixer.Sound] = None
        self._playing: bool = False

        if not self._enabled:
            logger.info("AudioDevice: disabled (silent mode)")
            return

        self._init_mixer()

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def playing(self) -> bool:
        return self._playing

    def update(self, *, muted: bool = False) -> None:
        """Match the tone to the machine's sound timer.

        Call once per frame, after the machine has advanced.  *muted*
        forces the tone off (e.g. while paused).
        """
        if not self._enabled or self._channel is None:
            return

        active = not muted and bool(getattr(self._machine, "sound_active", False))
        if active and not self._playing:
            self._channel.play(self._tone, loops=-1)
            self._playing = True
        elif not active and self._playing:
            self._channel.stop()
            self._playing = False

    def shutdown(self) -> None:
        """Stop playback and release the mixer."""
        self._shutdown_mixer()

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _init_mixer(self) -> None:
        """Initialise the pygame mixer and build the tone."""
        # pygame.init() may already have opened the mixer with default
        # parameters; reopen it mono at our rate.
        try:
            pygame.mixer.quit()
        except pygame.error:
            pass

        try:
            pygame.mixer.init(
                frequency=_SAMPLE_RATE,
                size=-16,       # signed 16-bit
                channels=1,     # mono
                buffer=_MIXER_BUFFER_SAMPLES,
            )
        except pygame.error as exc:
            logger.warning("AudioDevice: mixer init failed (%s); audio off", exc)
            self._enabled = False
            return

        actual_freq, _size, _channels = pygame.mixer.get_init()
        samples = square_wave(self._tone_hz, actual_freq)
        self._tone = pygame.mixer.Sound(buffer=samples.tobytes())
        self._tone.set_volume(DEFAULT_VOLUME)

        pygame.mixer.set_num_channels(1)
        self._channel = pygame.mixer.Channel(0)

        logger.info(
            "AudioDevice: mixer ready at %d Hz, tone %d Hz",
            actual_freq,
            self._tone_hz,
        )

    def _shutdown_mixer(self) -> None:
        """Stop the mixer channel and release resources."""
        if self._channel is not None:
            try:
                self._channel.stop()
            except pygame.error:
                pass
            self._channel = None
        self._tone = None
        self._playing = False

        try:
            pygame.mixer.quit()
        except pygame.error:
            pass
