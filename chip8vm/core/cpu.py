"""
CHIP-8 interpreter -- the fetch/decode/execute cycle engine.

One :meth:`Interpreter.step` call executes exactly one instruction:

1. If ``FX0A`` left the machine waiting for a key, scan the keypad from
   0x0 upwards.  The first held key is written to the waiting register
   and the block is released; either way the call ends there without
   fetching anything.  Calling ``step()`` repeatedly is therefore a busy
   wait.
2. Otherwise fetch the big-endian word at ``pc``, advance ``pc`` by two
   *before* executing (jumps and skips work on the post-increment value),
   and dispatch on the decoded :class:`~chip8vm.core.types.Op`.

Unknown instruction words are logged and skipped.  A return with an
empty call stack and any out-of-range memory access are fatal and
propagate to the caller as :class:`~chip8vm.core.errors.StackUnderflow`
and :class:`~chip8vm.core.errors.OutOfBounds`.

Timers are not advanced by ``step()``; the host calls
:meth:`Interpreter.tick_timers` with the real time that has elapsed.
"""

from __future__ import annotations

import logging
import random
from typing import Callable, Dict, Iterable, Optional, Tuple

from chip8vm.core.decoder import Instruction, decode, disassemble
from chip8vm.core.errors import RomLoadError, UnknownOpcode
from chip8vm.core.font import FONT, FONT_ADDRESS, GLYPH_HEIGHT
from chip8vm.core.frame_buffer import FrameBuffer
from chip8vm.core.input_state import InputState
from chip8vm.core.memory import PROGRAM_START, Memory
from chip8vm.core.quirks import Quirks
from chip8vm.core.registers import CallStack, Registers
from chip8vm.core.timers import TimerPair
from chip8vm.core.types import JumpOffset, Op, ShiftSource

logger = logging.getLogger(__name__)

Handler = Callable[[Instruction], None]


class Interpreter:
    """A complete CHIP-8 machine state plus the instruction set.

    Parameters
    ----------
    quirks:
        Compatibility switches.  Defaults to :class:`Quirks` ``()``
        (the ``modern`` preset).
    font:
        An 80-byte glyph table to use instead of the built-in one.
    rng:
        Source of randomness for ``CXNN``.  Pass a seeded
        :class:`random.Random` for reproducible runs.
    """

    def __init__(
        self,
        quirks: Optional[Quirks] = None,
        font: Optional[bytes] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.quirks: Quirks = quirks if quirks is not None else Quirks()
        self.font: bytes = bytes(font) if font is not None else FONT
        if len(self.font) != len(FONT):
            raise RomLoadError(
                f"font must be {len(FONT)} bytes, got {len(self.font)}"
            )
        self.rng: random.Random = rng if rng is not None else random.Random()

        self.memory: Memory = Memory()
        self.registers: Registers = Registers()
        self.stack: CallStack = CallStack()
        self.timers: TimerPair = TimerPair()
        self.frame_buffer: FrameBuffer = FrameBuffer()
        self.input_state: InputState = InputState()

        self.cycles: int = 0
        self._program: bytes = b""
        self._program_offset: int = PROGRAM_START

        self._opcode_table: Dict[Op, Handler] = self._build_opcode_table()
        self.memory.load(FONT_ADDRESS, self.font)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def load_program(self, data: bytes, offset: int = PROGRAM_START) -> None:
        """Copy a program image into memory and point ``pc`` at it.

        Raises:
            OutOfBounds: If the image does not fit.  Memory is left
                untouched in that case.
        """
        data = bytes(data)
        self.memory.load(offset, data)
        self._program = data
        self._program_offset = offset
        self.registers.pc = offset
        logger.info("Loaded %d byte program at %#05x", len(data), offset)

    def reset(self) -> None:
        """Return to power-on state and reload the font and last program."""
        self.memory.reset()
        self.registers.reset()
        self.stack.reset()
        self.timers.reset()
        self.frame_buffer.clear()
        self.input_state.reset()
        self.cycles = 0
        self.memory.load(FONT_ADDRESS, self.font)
        if self._program:
            self.memory.load(self._program_offset, self._program)
        self.registers.pc = self._program_offset

    # ------------------------------------------------------------------
    # Host-facing entry points
    # ------------------------------------------------------------------

    def tick_timers(self, elapsed: float) -> int:
        """Advance the delay and sound timers by *elapsed* seconds."""
        return self.timers.tick(elapsed)

    def set_keys(self, keys: Iterable[bool]) -> None:
        """Supply the current held state of all sixteen keys."""
        self.input_state.set_keys(keys)

    @property
    def sound_active(self) -> bool:
        return self.timers.sound_active

    @property
    def waiting_for_key(self) -> bool:
        return self.input_state.is_blocked

    def step(self) -> Tuple[bool, str]:
        """Execute one instruction.

        Returns:
            ``(display_dirty, trace)`` -- whether the framebuffer changed
            and a one-line description of what ran.
        """
        inputs = self.input_state
        regs = self.registers

        if inputs.is_blocked:
            target = inputs.blocked_register
            key = inputs.first_pressed()
            if key is None:
                return False, f"WAIT K => V{target:X}"
            regs.set(target, key)
            inputs.unblock()
            trace = f"KEY {key:X} => V{target:X}"
            logger.debug(trace)
            return False, trace

        address = regs.pc
        ins = decode(self.memory.read(address), self.memory.read(address + 1))
        regs.advance()
        self.cycles += 1

        op = ins.op
        trace = f"0x{address:03X}: 0x{ins.word:04X} => " + disassemble(
            ins, self.quirks.jump_offset
        )
        try:
            self._opcode_table[op](ins)
        except UnknownOpcode as exc:
            logger.warning("%s; skipped", exc)
            return False, trace

        logger.debug(trace)
        return Op.touches_display(op), trace

    def run(self, count: int) -> bool:
        """Execute *count* steps; return ``True`` if the display changed."""
        dirty = False
        for _ in range(count):
            changed, _trace = self.step()
            dirty = dirty or changed
        return dirty

    def dump_memory(self, start: int = 0, end: int = Memory.CAPACITY) -> str:
        return self.memory.dump(start, end)

    # ------------------------------------------------------------------
    # Dispatch table
    # ------------------------------------------------------------------

    def _build_opcode_table(self) -> Dict[Op, Handler]:
        """Map every :class:`Op` variant to its handler.

        Raises ``RuntimeError`` if a variant has no handler.
        """
        table: Dict[Op, Handler] = {
            Op.UNKNOWN: self._op_unknown,
            Op.CLS: self._op_cls,
            Op.RET: self._op_ret,
            Op.JP: self._op_jp,
            Op.CALL: self._op_call,
            Op.SE_BYTE: self._op_se_byte,
            Op.SNE_BYTE: self._op_sne_byte,
            Op.SE_REG: self._op_se_reg,
            Op.LD_BYTE: self._op_ld_byte,
            Op.ADD_BYTE: self._op_add_byte,
            Op.LD_REG: self._op_ld_reg,
            Op.OR: self._op_or,
            Op.AND: self._op_and,
            Op.XOR: self._op_xor,
            Op.ADD_REG: self._op_add_reg,
            Op.SUB: self._op_sub,
            Op.SHR: self._op_shr,
            Op.SUBN: self._op_subn,
            Op.SHL: self._op_shl,
            Op.SNE_REG: self._op_sne_reg,
            Op.LD_I: self._op_ld_i,
            Op.JP_OFFSET: self._op_jp_offset,
            Op.RND: self._op_rnd,
            Op.DRW: self._op_drw,
            Op.SKP: self._op_skp,
            Op.SKNP: self._op_sknp,
            Op.LD_VX_DT: self._op_ld_vx_dt,
            Op.LD_VX_K: self._op_ld_vx_k,
            Op.LD_DT_VX: self._op_ld_dt_vx,
            Op.LD_ST_VX: self._op_ld_st_vx,
            Op.ADD_I_VX: self._op_add_i_vx,
            Op.LD_F_VX: self._op_ld_f_vx,
            Op.LD_B_VX: self._op_ld_b_vx,
            Op.STORE_REGS: self._op_store_regs,
            Op.LOAD_REGS: self._op_load_regs,
        }
        missing = [op.name for op in Op if op not in table]
        if missing:
            raise RuntimeError(f"no handler for: {', '.join(missing)}")
        return table

    # ------------------------------------------------------------------
    # 0x0 family, flow control
    # ------------------------------------------------------------------

    def _op_unknown(self, ins: Instruction) -> None:
        raise UnknownOpcode(ins.word, (self.registers.pc - 2) & 0xFFFF)

    def _op_cls(self, ins: Instruction) -> None:
        self.frame_buffer.clear()

    def _op_ret(self, ins: Instruction) -> None:
        self.registers.pc = self.stack.pop((self.registers.pc - 2) & 0xFFFF)

    def _op_jp(self, ins: Instruction) -> None:
        self.registers.pc = ins.nnn

    def _op_call(self, ins: Instruction) -> None:
        self.stack.push(self.registers.pc)
        self.registers.pc = ins.nnn

    def _op_jp_offset(self, ins: Instruction) -> None:
        reg = ins.x if self.quirks.jump_offset == JumpOffset.VX else 0
        self.registers.pc = (ins.nnn + self.registers.get(reg)) & 0xFFFF

    # ------------------------------------------------------------------
    # Conditional skips
    # ------------------------------------------------------------------

    def _skip_if(self, cond: bool) -> None:
        if cond:
            self.registers.advance()

    def _op_se_byte(self, ins: Instruction) -> None:
        self._skip_if(self.registers.get(ins.x) == ins.nn)

    def _op_sne_byte(self, ins: Instruction) -> None:
        self._skip_if(self.registers.get(ins.x) != ins.nn)

    def _op_se_reg(self, ins: Instruction) -> None:
        regs = self.registers
        self._skip_if(regs.get(ins.x) == regs.get(ins.y))

    def _op_sne_reg(self, ins: Instruction) -> None:
        regs = self.registers
        self._skip_if(regs.get(ins.x) != regs.get(ins.y))

    def _op_skp(self, ins: Instruction) -> None:
        self._skip_if(self.input_state.is_held(self.registers.get(ins.x)))

    def _op_sknp(self, ins: Instruction) -> None:
        self._skip_if(not self.input_state.is_held(self.registers.get(ins.x)))

    # ------------------------------------------------------------------
    # Immediate loads / adds
    # ------------------------------------------------------------------

    def _op_ld_byte(self, ins: Instruction) -> None:
        self.registers.set(ins.x, ins.nn)

    def _op_add_byte(self, ins: Instruction) -> None:
        # Wraps; VF is not touched.
        self.registers.set(ins.x, self.registers.get(ins.x) + ins.nn)

    # ------------------------------------------------------------------
    # 0x8 ALU family
    # ------------------------------------------------------------------

    def _op_ld_reg(self, ins: Instruction) -> None:
        self.registers.set(ins.x, self.registers.get(ins.y))

    def _op_or(self, ins: Instruction) -> None:
        regs = self.registers
        regs.set(ins.x, regs.get(ins.x) | regs.get(ins.y))

    def _op_and(self, ins: Instruction) -> None:
        regs = self.registers
        regs.set(ins.x, regs.get(ins.x) & regs.get(ins.y))

    def _op_xor(self, ins: Instruction) -> None:
        regs = self.registers
        regs.set(ins.x, regs.get(ins.x) ^ regs.get(ins.y))

    # The flag is written after the result so that VF as a destination
    # still ends up holding the flag.

    def _op_add_reg(self, ins: Instruction) -> None:
        regs = self.registers
        total = regs.get(ins.x) + regs.get(ins.y)
        regs.set(ins.x, total)
        regs.set_flag(1 if total > 0xFF else 0)

    def _op_sub(self, ins: Instruction) -> None:
        regs = self.registers
        vx, vy = regs.get(ins.x), regs.get(ins.y)
        regs.set(ins.x, vx - vy)
        regs.set_flag(1 if vx >= vy else 0)

    def _op_subn(self, ins: Instruction) -> None:
        regs = self.registers
        vx, vy = regs.get(ins.x), regs.get(ins.y)
        regs.set(ins.x, vy - vx)
        regs.set_flag(1 if vy >= vx else 0)

    def _shift_operand(self, ins: Instruction) -> int:
        src = ins.y if self.quirks.shift_source == ShiftSource.VY else ins.x
        return self.registers.get(src)

    def _op_shr(self, ins: Instruction) -> None:
        value = self._shift_operand(ins)
        self.registers.set(ins.x, value >> 1)
        self.registers.set_flag(value & 0x01)

    def _op_shl(self, ins: Instruction) -> None:
        value = self._shift_operand(ins)
        self.registers.set(ins.x, value << 1)
        self.registers.set_flag((value >> 7) & 0x01)

    # ------------------------------------------------------------------
    # Index register, random, draw
    # ------------------------------------------------------------------

    def _op_ld_i(self, ins: Instruction) -> None:
        self.registers.i = ins.nnn

    def _op_rnd(self, ins: Instruction) -> None:
        self.registers.set(ins.x, self.rng.randrange(0x100) & ins.nn)

    def _op_drw(self, ins: Instruction) -> None:
        regs = self.registers
        sprite = self.memory.read_block(regs.i, ins.n)
        collision = self.frame_buffer.draw_sprite(
            regs.get(ins.x), regs.get(ins.y), sprite
        )
        regs.set_flag(1 if collision else 0)

    # ------------------------------------------------------------------
    # 0xF family
    # ------------------------------------------------------------------

    def _op_ld_vx_dt(self, ins: Instruction) -> None:
        self.registers.set(ins.x, self.timers.get_delay())

    def _op_ld_vx_k(self, ins: Instruction) -> None:
        self.input_state.block(ins.x)

    def _op_ld_dt_vx(self, ins: Instruction) -> None:
        self.timers.set_delay(self.registers.get(ins.x))

    def _op_ld_st_vx(self, ins: Instruction) -> None:
        self.timers.set_sound(self.registers.get(ins.x))

    def _op_add_i_vx(self, ins: Instruction) -> None:
        regs = self.registers
        regs.i = (regs.i + regs.get(ins.x)) & 0xFFFF

    def _op_ld_f_vx(self, ins: Instruction) -> None:
        self.registers.i = FONT_ADDRESS + self.registers.get(ins.x) * GLYPH_HEIGHT

    def _op_ld_b_vx(self, ins: Instruction) -> None:
        value = self.registers.get(ins.x)
        self.memory.load(
            self.registers.i, bytes((value // 100, (value // 10) % 10, value % 10))
        )

    def _op_store_regs(self, ins: Instruction) -> None:
        regs = self.registers
        # The range is validated before any byte is written.
        self.memory.load(regs.i, bytes(regs.get(idx) for idx in range(ins.x + 1)))
        if self.quirks.memory_increments_index:
            regs.i = (regs.i + ins.x + 1) & 0xFFFF

    def _op_load_regs(self, ins: Instruction) -> None:
        regs = self.registers
        for idx in range(ins.x + 1):
            regs.set(idx, self.memory.read(regs.i + idx))
        if self.quirks.memory_increments_index:
            regs.i = (regs.i + ins.x + 1) & 0xFFFF

    # ------------------------------------------------------------------
    # Dunder helpers
    # ------------------------------------------------------------------

    def __repr__(self) -> str:
        return (
            f"Interpreter(pc={self.registers.pc:#05x}, "
            f"i={self.registers.i:#05x}, "
            f"stack={self.stack.depth}, "
            f"cycles={self.cycles}, "
            f"quirks=({self.quirks.describe()}))"
        )
