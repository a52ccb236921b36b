"""
Instruction decoder and disassembler.

Every instruction is one big-endian 16-bit word, read as four nibbles::

    +--------+--------+--------+--------+
    | opcode |   x    |   y    |   n    |
    +--------+--------+--------+--------+
                      |       nn        |
             |          nnn             |

Decoding is pure: any 16-bit pattern produces an :class:`Instruction`.
Whether the interpreter understands it is answered by
:attr:`Instruction.op`, which is :attr:`Op.UNKNOWN` for unrecognised words.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, Tuple

from chip8vm.core.memory import PROGRAM_START
from chip8vm.core.types import JumpOffset, Op

# ---------------------------------------------------------------------------
# Sub-selector tables
# ---------------------------------------------------------------------------

_SYSTEM_OPS: Dict[int, Op] = {
    0xE0: Op.CLS,
    0xEE: Op.RET,
}

_ALU_OPS: Dict[int, Op] = {
    0x0: Op.LD_REG,
    0x1: Op.OR,
    0x2: Op.AND,
    0x3: Op.XOR,
    0x4: Op.ADD_REG,
    0x5: Op.SUB,
    0x6: Op.SHR,
    0x7: Op.SUBN,
    0xE: Op.SHL,
}

_KEY_OPS: Dict[int, Op] = {
    0x9E: Op.SKP,
    0xA1: Op.SKNP,
}

_MISC_OPS: Dict[int, Op] = {
    0x07: Op.LD_VX_DT,
    0x0A: Op.LD_VX_K,
    0x15: Op.LD_DT_VX,
    0x18: Op.LD_ST_VX,
    0x1E: Op.ADD_I_VX,
    0x29: Op.LD_F_VX,
    0x33: Op.LD_B_VX,
    0x55: Op.STORE_REGS,
    0x65: Op.LOAD_REGS,
}

# Opcode nibbles that map straight to a single variant.
_DIRECT_OPS: Dict[int, Op] = {
    0x1: Op.JP,
    0x2: Op.CALL,
    0x3: Op.SE_BYTE,
    0x4: Op.SNE_BYTE,
    0x5: Op.SE_REG,
    0x6: Op.LD_BYTE,
    0x7: Op.ADD_BYTE,
    0x9: Op.SNE_REG,
    0xA: Op.LD_I,
    0xB: Op.JP_OFFSET,
    0xC: Op.RND,
    0xD: Op.DRW,
}


def _classify(opcode: int, n: int, nn: int) -> Op:
    if opcode == 0x0:
        return _SYSTEM_OPS.get(nn, Op.UNKNOWN)
    if opcode == 0x8:
        return _ALU_OPS.get(n, Op.UNKNOWN)
    if opcode == 0xE:
        return _KEY_OPS.get(nn, Op.UNKNOWN)
    if opcode == 0xF:
        return _MISC_OPS.get(nn, Op.UNKNOWN)
    return _DIRECT_OPS[opcode]


@dataclass(frozen=True)
class Instruction:
    """One decoded instruction word."""

    opcode: int
    x: int
    y: int
    n: int
    nn: int
    nnn: int

    @classmethod
    def from_word(cls, word: int) -> Instruction:
        word &= 0xFFFF
        return cls(
            opcode=(word >> 12) & 0xF,
            x=(word >> 8) & 0xF,
            y=(word >> 4) & 0xF,
            n=word & 0xF,
            nn=word & 0xFF,
            nnn=word & 0xFFF,
        )

    @property
    def word(self) -> int:
        """The raw 16-bit instruction word."""
        return encode(self.opcode, self.x, self.y, self.n)

    @property
    def op(self) -> Op:
        return _classify(self.opcode, self.n, self.nn)

    def __str__(self) -> str:
        return disassemble(self)


def decode(high: int, low: int) -> Instruction:
    """Decode the two bytes of an instruction (high byte first)."""
    return Instruction.from_word(((high & 0xFF) << 8) | (low & 0xFF))


def encode(opcode: int, x: int, y: int, n: int) -> int:
    """Pack four nibbles back into an instruction word."""
    return ((opcode & 0xF) << 12) | ((x & 0xF) << 8) | ((y & 0xF) << 4) | (n & 0xF)


# ---------------------------------------------------------------------------
# Disassembly
# ---------------------------------------------------------------------------

def disassemble(ins: Instruction, jump_offset: JumpOffset = JumpOffset.V0) -> str:
    """Return the mnemonic form of *ins*, e.g. ``"ADD V3, 0x01"``.

    *jump_offset* selects which register ``BNNN`` is shown adding.
    """
    op = ins.op
    x, y = ins.x, ins.y

    if op == Op.CLS:
        return "CLS"
    if op == Op.RET:
        return "RET"
    if op == Op.JP:
        return f"JP 0x{ins.nnn:03X}"
    if op == Op.CALL:
        return f"CALL 0x{ins.nnn:03X}"
    if op == Op.SE_BYTE:
        return f"SE V{x:X}, 0x{ins.nn:02X}"
    if op == Op.SNE_BYTE:
        return f"SNE V{x:X}, 0x{ins.nn:02X}"
    if op == Op.SE_REG:
        return f"SE V{x:X}, V{y:X}"
    if op == Op.LD_BYTE:
        return f"LD V{x:X}, 0x{ins.nn:02X}"
    if op == Op.ADD_BYTE:
        return f"ADD V{x:X}, 0x{ins.nn:02X}"
    if op == Op.LD_REG:
        return f"LD V{x:X}, V{y:X}"
    if op == Op.OR:
        return f"OR V{x:X}, V{y:X}"
    if op == Op.AND:
        return f"AND V{x:X}, V{y:X}"
    if op == Op.XOR:
        return f"XOR V{x:X}, V{y:X}"
    if op == Op.ADD_REG:
        return f"ADD V{x:X}, V{y:X}"
    if op == Op.SUB:
        return f"SUB V{x:X}, V{y:X}"
    if op == Op.SHR:
        return f"SHR V{x:X}, V{y:X}"
    if op == Op.SUBN:
        return f"SUBN V{x:X}, V{y:X}"
    if op == Op.SHL:
        return f"SHL V{x:X}, V{y:X}"
    if op == Op.SNE_REG:
        return f"SNE V{x:X}, V{y:X}"
    if op == Op.LD_I:
        return f"LD I, 0x{ins.nnn:03X}"
    if op == Op.JP_OFFSET:
        reg = x if jump_offset == JumpOffset.VX else 0
        return f"JP V{reg:X}, 0x{ins.nnn:03X}"
    if op == Op.RND:
        return f"RND V{x:X}, 0x{ins.nn:02X}"
    if op == Op.DRW:
        return f"DRW V{x:X}, V{y:X}, {ins.n}"
    if op == Op.SKP:
        return f"SKP V{x:X}"
    if op == Op.SKNP:
        return f"SKNP V{x:X}"
    if op == Op.LD_VX_DT:
        return f"LD V{x:X}, DT"
    if op == Op.LD_VX_K:
        return f"LD V{x:X}, K"
    if op == Op.LD_DT_VX:
        return f"LD DT, V{x:X}"
    if op == Op.LD_ST_VX:
        return f"LD ST, V{x:X}"
    if op == Op.ADD_I_VX:
        return f"ADD I, V{x:X}"
    if op == Op.LD_F_VX:
        return f"LD F, V{x:X}"
    if op == Op.LD_B_VX:
        return f"LD B, V{x:X}"
    if op == Op.STORE_REGS:
        return f"LD [I], V0..V{x:X}"
    if op == Op.LOAD_REGS:
        return f"LD V0..V{x:X}, [I]"
    return f"??? 0x{ins.word:04X}"


def disassemble_program(
    data: bytes, origin: int = PROGRAM_START
) -> Iterator[Tuple[int, int, str]]:
    """Yield ``(address, word, mnemonic)`` for each word in *data*.

    A trailing odd byte is reported as a ``DB`` directive.
    """
    for offset in range(0, len(data) - 1, 2):
        ins = decode(data[offset], data[offset + 1])
        yield origin + offset, ins.word, disassemble(ins)
    if len(data) % 2:
        last = len(data) - 1
        yield origin + last, data[last], f"DB 0x{data[last]:02X}"
