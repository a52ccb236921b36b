"""
Core enumerations for chip8vm.

``Op`` names every instruction variant the interpreter understands, one
member per opcode family / sub-selector, plus ``UNKNOWN`` for words that
decode to nothing recognised.
"""

from enum import IntEnum


class Op(IntEnum):
    UNKNOWN = 0
    # 0x0 family
    CLS = 1
    RET = 2
    # control flow / immediate compares
    JP = 3
    CALL = 4
    SE_BYTE = 5
    SNE_BYTE = 6
    SE_REG = 7
    LD_BYTE = 8
    ADD_BYTE = 9
    # 0x8 ALU family
    LD_REG = 10
    OR = 11
    AND = 12
    XOR = 13
    ADD_REG = 14
    SUB = 15
    SHR = 16
    SUBN = 17
    SHL = 18
    SNE_REG = 19
    # index / random / draw
    LD_I = 20
    JP_OFFSET = 21
    RND = 22
    DRW = 23
    # 0xE keypad family
    SKP = 24
    SKNP = 25
    # 0xF family
    LD_VX_DT = 26
    LD_VX_K = 27
    LD_DT_VX = 28
    LD_ST_VX = 29
    ADD_I_VX = 30
    LD_F_VX = 31
    LD_B_VX = 32
    STORE_REGS = 33
    LOAD_REGS = 34

    @staticmethod
    def touches_display(op):
        return op in (Op.CLS, Op.DRW)


class ShiftSource(IntEnum):
    """Register that 8XY6 / 8XYE read before shifting into VX."""

    VX = 0
    VY = 1


class JumpOffset(IntEnum):
    """Register added to the address field by BNNN."""

    V0 = 0
    VX = 1
