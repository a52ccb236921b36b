"""Helpers for building small test programs."""

from __future__ import annotations

import random
from typing import Optional

from chip8vm.core.cpu import Interpreter
from chip8vm.core.quirks import Quirks


def program(*words: int) -> bytes:
    """Assemble instruction words into a big-endian byte image."""
    return b"".join(w.to_bytes(2, "big") for w in words)


def make_interpreter(
    *words: int, quirks: Optional[Quirks] = None, seed: int = 0
) -> Interpreter:
    interp = Interpreter(quirks=quirks, rng=random.Random(seed))
    interp.load_program(program(*words))
    return interp


def run(interp: Interpreter, steps: int) -> None:
    for _ in range(steps):
        interp.step()
