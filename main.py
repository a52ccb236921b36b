#!/usr/bin/env python3
"""
chip8vm launcher for running straight from a source checkout.

    python main.py roms/pong.ch8 --quirks cosmac --scale 12

See ``chip8vm/main.py`` for the full option list.
"""

from __future__ import annotations

import os
import sys

# ---------------------------------------------------------------------------
# Ensure the project root is on sys.path so that ``chip8vm`` can be imported
# regardless of how the script is invoked.
# ---------------------------------------------------------------------------
_PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))
if _PROJECT_ROOT not in sys.path:
    sys.path.insert(0, _PROJECT_ROOT)

from chip8vm.main import main  # noqa: E402

if __name__ == "__main__":
    sys.exit(main())
