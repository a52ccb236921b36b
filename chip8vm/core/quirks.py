"""
Quirks -- behavioural differences between historical interpreters.

The original COSMAC VIP interpreter, the HP-48 SUPER-CHIP port and
present-day interpreters disagree on a handful of instructions.  Programs
written for one often misbehave on another, so the choice is runtime
configuration rather than a constant.

=====================  =========  ========  ======
Quirk                  modern     cosmac    schip
=====================  =========  ========  ======
8XY6/8XYE source       VX         VY        VX
BNNN offset register   V0         V0        VX
FX55/FX65 advance I    no         yes       no
=====================  =========  ========  ======
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict

from chip8vm.core.types import JumpOffset, ShiftSource


@dataclass(frozen=True)
class Quirks:
    """Interpreter compatibility switches."""

    shift_source: ShiftSource = ShiftSource.VX
    jump_offset: JumpOffset = JumpOffset.V0
    memory_increments_index: bool = False

    @classmethod
    def preset(cls, name: str) -> Quirks:
        """Look up a named preset (``modern``, ``cosmac`` or ``schip``).

        Raises:
            ValueError: If *name* is not a known preset.
        """
        try:
            return PRESETS[name.lower()]
        except KeyError:
            raise ValueError(
                f"Unknown quirks preset {name!r}; valid presets: "
                + ", ".join(sorted(PRESETS))
            ) from None

    def with_overrides(self, **changes) -> Quirks:
        """Return a copy with the given fields replaced (``None`` = keep)."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    def describe(self) -> str:
        return (
            f"shift={self.shift_source.name} "
            f"jump={self.jump_offset.name} "
            f"increment_index={'yes' if self.memory_increments_index else 'no'}"
        )


PRESETS: Dict[str, Quirks] = {
    "modern": Quirks(),
    "cosmac": Quirks(
        shift_source=ShiftSource.VY,
        jump_offset=JumpOffset.V0,
        memory_increments_index=True,
    ),
    "schip": Quirks(
        shift_source=ShiftSource.VX,
        jump_offset=JumpOffset.VX,
        memory_increments_index=False,
    ),
}
