from __future__ import annotations

import pytest

from tests.support import program


@pytest.fixture
def rom_file(tmp_path):
    """A small program on disk: 6005 7003 F029 1206."""
    path = tmp_path / "sample.ch8"
    path.write_bytes(program(0x6005, 0x7003, 0xF029, 0x1206))
    return path
