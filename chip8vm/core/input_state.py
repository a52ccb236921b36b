"""
InputState -- the 16-key hexadecimal keypad and the key-block latch.

Host code writes key events into a staging buffer via :meth:`raise_input`
(or replaces the whole state with :meth:`set_keys`).  At a frame boundary
:meth:`capture_input_state` snapshots the staging buffer into the
captured buffer, which is what the interpreter reads.

The key-block latch records which register ``FX0A`` is waiting to fill,
and which keys were already down when the wait began.
:data:`NO_BLOCK` means the machine is running normally.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

from chip8vm.core.errors import OutOfBounds

KEY_COUNT: int = 0x10
NO_BLOCK: int = 0x10


class InputState:
    """Key-held flags plus the "waiting for a key" register."""

    def __init__(self) -> None:
        self._next_keys: List[bool] = [False] * KEY_COUNT
        self._keys: List[bool] = [False] * KEY_COUNT
        # Keys already down when the block began; ignored until released.
        self._stale: List[bool] = [False] * KEY_COUNT
        self.blocked_register: int = NO_BLOCK

    def reset(self) -> None:
        self.clear_all_input()
        self._keys[:] = self._next_keys
        self.unblock()

    # ------------------------------------------------------------------
    # Host-side input
    # ------------------------------------------------------------------

    def raise_input(self, key: int, down: bool) -> None:
        """Mark *key* (0x0-0xF) as held or released in the staging buffer."""
        if not 0 <= key < KEY_COUNT:
            raise OutOfBounds("key", key, KEY_COUNT)
        self._next_keys[key] = down

    def set_keys(self, keys: Iterable[bool]) -> None:
        """Replace the whole key state (staged and captured) at once."""
        values = [bool(k) for k in keys]
        if len(values) != KEY_COUNT:
            raise ValueError(f"expected {KEY_COUNT} key states, got {len(values)}")
        self._next_keys[:] = values
        self._keys[:] = values

    def capture_input_state(self) -> None:
        """Copy the staging buffer to the captured buffer."""
        self._keys[:] = self._next_keys

    def clear_all_input(self) -> None:
        """Release every key in the staging buffer."""
        for i in range(KEY_COUNT):
            self._next_keys[i] = False

    # ------------------------------------------------------------------
    # Interpreter-side sampling
    # ------------------------------------------------------------------

    def is_held(self, key: int) -> bool:
        """Return ``True`` if *key* is held in the captured state.

        Only the low nibble of *key* is significant, matching the keypad
        wiring of ``EX9E`` / ``EXA1``.
        """
        return self._keys[key & 0x0F]

    def first_held(self) -> Optional[int]:
        """Lowest-numbered held key, or ``None`` when nothing is pressed."""
        for key in range(KEY_COUNT):
            if self._keys[key]:
                return key
        return None

    # ------------------------------------------------------------------
    # Key-block latch
    # ------------------------------------------------------------------

    @property
    def is_blocked(self) -> bool:
        return self.blocked_register != NO_BLOCK

    def block(self, register: int) -> None:
        """Pause the machine until a key is pressed for *register*.

        Keys held at this moment do not count until they have been
        released and pressed again.
        """
        if not 0 <= register < KEY_COUNT:
            raise OutOfBounds("register index", register, KEY_COUNT)
        self.blocked_register = register
        self._stale[:] = self._keys

    def unblock(self) -> None:
        self.blocked_register = NO_BLOCK
        self._stale[:] = [False] * KEY_COUNT

    def first_pressed(self) -> Optional[int]:
        """Lowest key pressed since :meth:`block`, or ``None``.

        A key that was down when the block began is forgotten as soon as
        it is seen released.
        """
        for key in range(KEY_COUNT):
            if not self._keys[key]:
                self._stale[key] = False
            elif not self._stale[key]:
                return key
        return None

    def __repr__(self) -> str:
        held = [f"{k:X}" for k in range(KEY_COUNT) if self._keys[k]]
        return f"InputState(held=[{','.join(held)}], blocked={self.blocked_register:#x})"
