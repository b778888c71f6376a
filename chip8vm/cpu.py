# CHIP8 interpreter core.
# CPU - Cowgod's CHIP8 Technical reference http://devernay.free.fr/hacks/chip8/C8TECH10.HTM#0.0
#----------------------------------------------------------------------------------------------
# The core owns every piece of machine state (memory, V0-VF, I, PC, stack, timers, vram,
# keypad snapshot) and executes exactly one instruction per step(). It never touches the
# timers on its own and never blocks: the host loop decrements timers at 60Hz, writes the
# keypad before each step and reads should_draw / vram to render.
import logging
import random

import numpy as np

from . import config
from .config import Quirks
from .decode import Op, decode
from .errors import MemoryOutOfBounds, RomTooLarge, StackOverflow, StackUnderflow

log = logging.getLogger(__name__)


class Chip8:

    def __init__(self, quirks=None, rng=None):
        self.quirks = quirks if quirks is not None else Quirks()
        self.rng = rng if rng is not None else random.Random()

        # dispatch table, one handler per decoded operation
        self.handlers = {
            Op.CLS: self.op_CLS,
            Op.RET: self.op_RET,
            Op.SYS: self.op_SYS,

            Op.JP: self.op_JP,
            Op.CALL: self.op_CALL,
            Op.SE_VX_KK: self.op_SE_Vx_kk,
            Op.SNE_VX_KK: self.op_SNE_Vx_kk,
            Op.SE_VX_VY: self.op_SE_Vx_Vy,
            Op.LD_VX_KK: self.op_LD_Vx_kk,
            Op.ADD_VX_KK: self.op_ADD_Vx_kk,

            Op.LD_VX_VY: self.op_LD_Vx_Vy,
            Op.OR: self.op_OR,
            Op.AND: self.op_AND,
            Op.XOR: self.op_XOR,
            Op.ADD: self.op_ADD,
            Op.SUB: self.op_SUB,
            Op.SHR: self.op_SHR,
            Op.SUBN: self.op_SUBN,
            Op.SHL: self.op_SHL,

            Op.SNE_VX_VY: self.op_SNE_Vx_Vy,
            Op.LD_I: self.op_LD_I,
            Op.JP_V0: self.op_JP_V0,
            Op.RND: self.op_RND,
            Op.DRW: self.op_DRW,

            Op.SKP: self.op_SKP,
            Op.SKNP: self.op_SKNP,

            Op.LD_VX_DT: self.op_LD_Vx_DT,
            Op.WAIT_KEY: self.op_WAITKEY,
            Op.LD_DT_VX: self.op_LD_DT_Vx,
            Op.LD_ST_VX: self.op_LD_ST_Vx,
            Op.ADD_I_VX: self.op_ADD_I_Vx,
            Op.FONT: self.op_FONT,
            Op.BCD: self.op_BCD,
            Op.STORE: self.op_STORE,
            Op.LOAD: self.op_LOAD,
        }

        self.reset()

    def reset(self):
        """Put the machine back into its power-on state. Loaded ROMs are wiped too."""
        self.memory = bytearray(config.MEMORY_SIZE)
        self.V = [0] * 16
        self.I = 0
        self.pc = config.PROGRAM_START

        self.stack = np.zeros(config.STACK_DEPTH, dtype=np.uint16)
        self.sp = 0

        self.delay_timer = 0
        self.sound_timer = 0

        self.vram = np.zeros((config.HEIGHT, config.WIDTH), dtype=np.uint8)
        self.keys = [False] * config.NUM_KEYS
        self.should_draw = True

        self.cycle_count = 0
        self._op_pc = self.pc

        # Load fontset into memory
        font_end = config.FONT_START + len(config.FONTSET)
        self.memory[config.FONT_START:font_end] = bytes(config.FONTSET)

    # ---- Load ROM ----
    def load_program(self, data):
        """Copy raw ROM bytes to 0x200. Raises RomTooLarge when they would run past 0xFFF."""
        capacity = config.MEMORY_SIZE - config.PROGRAM_START
        if len(data) > capacity:
            raise RomTooLarge(len(data), capacity)
        start = config.PROGRAM_START
        self.memory[start:start + len(data)] = data
        log.debug("Loaded %d bytes at %03X", len(data), start)

    def load_rom_file(self, path):
        """Read a ROM from disk into memory. Returns False (and logs why) if it can't be loaded."""
        log.info("Loading ROM: %s", path)
        try:
            with open(path, "rb") as f:
                data = f.read()
        except OSError as e:
            log.error("Could not open file %s: %s", path, e)
            return False
        try:
            self.load_program(data)
        except RomTooLarge as e:
            log.error("Could not load %s: %s", path, e)
            return False
        return True

    # ---- host interface ----
    def set_keys(self, keys):
        keys = [bool(k) for k in keys]
        if len(keys) != config.NUM_KEYS:
            raise ValueError(f"expected {config.NUM_KEYS} key states, got {len(keys)}")
        self.keys = keys

    def fetch(self):
        if self.pc + 1 >= config.MEMORY_SIZE:
            raise MemoryOutOfBounds(self.pc, pc=self.pc)
        return (self.memory[self.pc] << 8) | self.memory[self.pc + 1]

    def step(self):
        """Fetch, decode and execute one instruction. Returns the decoded Instruction."""
        pc = self.pc
        opcode = self.fetch()
        self.pc = (pc + 2) & 0xFFFF

        instr = decode(opcode, pc)
        self._op_pc = pc
        if log.isEnabledFor(logging.DEBUG):
            log.debug("%03X: %s", pc, instr)

        self.handlers[instr.op](instr)
        self.cycle_count += 1
        return instr

    # ---- helpers ----
    def _check_range(self, start, length, instr):
        if length and start + length > config.MEMORY_SIZE:
            raise MemoryOutOfBounds(start + length - 1, instr.opcode, self._op_pc)

    def _skip(self):
        self.pc = (self.pc + 2) & 0xFFFF

    def _set_with_flag(self, x, value, flag):
        # result first, flag last: with x == F the flag is what survives
        self.V[x] = value & 0xFF
        self.V[0xF] = flag

    def _shift_source(self, instr):
        return self.V[instr.y] if self.quirks.shift_uses_vy else self.V[instr.x]

    # ---- opcode handlers ----
    def op_CLS(self, instr):
        self.vram[:] = 0
        self.should_draw = True

    def op_RET(self, instr):
        if self.sp == 0:
            raise StackUnderflow(instr.opcode, self._op_pc)
        self.sp -= 1
        self.pc = int(self.stack[self.sp])

    def op_SYS(self, instr):
        # 0nnn jumps into host machine code on the original hardware; modern interpreters ignore it
        pass

    def op_JP(self, instr):
        self.pc = instr.nnn

    def op_CALL(self, instr):
        if self.sp >= config.STACK_DEPTH:
            raise StackOverflow(instr.opcode, self._op_pc)
        self.stack[self.sp] = self.pc
        self.sp += 1
        self.pc = instr.nnn

    def op_SE_Vx_kk(self, instr):
        if self.V[instr.x] == instr.kk:
            self._skip()

    def op_SNE_Vx_kk(self, instr):
        if self.V[instr.x] != instr.kk:
            self._skip()

    def op_SE_Vx_Vy(self, instr):
        if self.V[instr.x] == self.V[instr.y]:
            self._skip()

    def op_LD_Vx_kk(self, instr):
        self.V[instr.x] = instr.kk

    def op_ADD_Vx_kk(self, instr):
        self.V[instr.x] = (self.V[instr.x] + instr.kk) & 0xFF

    def op_LD_Vx_Vy(self, instr):
        self.V[instr.x] = self.V[instr.y]

    def op_OR(self, instr):
        self.V[instr.x] |= self.V[instr.y]

    def op_AND(self, instr):
        self.V[instr.x] &= self.V[instr.y]

    def op_XOR(self, instr):
        self.V[instr.x] ^= self.V[instr.y]

    def op_ADD(self, instr):
        total = self.V[instr.x] + self.V[instr.y]
        self._set_with_flag(instr.x, total, 1 if total > 0xFF else 0)

    def op_SUB(self, instr):
        vx, vy = self.V[instr.x], self.V[instr.y]
        self._set_with_flag(instr.x, vx - vy, 1 if vx >= vy else 0)

    def op_SHR(self, instr):
        src = self._shift_source(instr)
        self._set_with_flag(instr.x, src >> 1, src & 1)

    def op_SUBN(self, instr):
        vx, vy = self.V[instr.x], self.V[instr.y]
        self._set_with_flag(instr.x, vy - vx, 1 if vy >= vx else 0)

    def op_SHL(self, instr):
        src = self._shift_source(instr)
        self._set_with_flag(instr.x, src << 1, (src >> 7) & 1)

    def op_SNE_Vx_Vy(self, instr):
        if self.V[instr.x] != self.V[instr.y]:
            self._skip()

    def op_LD_I(self, instr):
        self.I = instr.nnn

    def op_JP_V0(self, instr):
        self.pc = instr.nnn + self.V[0]

    def op_RND(self, instr):
        self.V[instr.x] = self.rng.randint(0, 255) & instr.kk

    def op_DRW(self, instr):
        """Dxyn: XOR an n-row sprite from memory[I] onto the screen at (Vx, Vy).

        Coordinates wrap around both edges. VF ends up 1 if any lit pixel was
        switched off, 0 otherwise. The draw flag is raised even for n == 0.
        """
        self._check_range(self.I, instr.n, instr)
        px = self.V[instr.x]
        py = self.V[instr.y]
        self.V[0xF] = 0

        for row in range(instr.n):
            sprite = self.memory[self.I + row]
            vy = (py + row) % config.HEIGHT
            for bit in range(8):
                if sprite & (0x80 >> bit):
                    vx = (px + bit) % config.WIDTH
                    if self.vram[vy, vx]:
                        self.V[0xF] = 1
                    self.vram[vy, vx] ^= 1
        self.should_draw = True

    def op_SKP(self, instr):
        if self.keys[self.V[instr.x] & 0xF]:
            self._skip()

    def op_SKNP(self, instr):
        if not self.keys[self.V[instr.x] & 0xF]:
            self._skip()

    def op_LD_Vx_DT(self, instr):
        self.V[instr.x] = self.delay_timer

    def op_WAITKEY(self, instr):
        for i in range(config.NUM_KEYS):
            if self.keys[i]:
                self.V[instr.x] = i
                return
        # nothing pressed yet: rewind so the host runs this instruction again next step
        self.pc = self._op_pc

    def op_LD_DT_Vx(self, instr):
        self.delay_timer = self.V[instr.x]

    def op_LD_ST_Vx(self, instr):
        self.sound_timer = self.V[instr.x]

    def op_ADD_I_Vx(self, instr):
        self.I = (self.I + self.V[instr.x]) & 0xFFFF

    def op_FONT(self, instr):
        self.I = config.FONT_START + self.V[instr.x] * config.FONT_HEIGHT

    def op_BCD(self, instr):
        self._check_range(self.I, 3, instr)
        v = self.V[instr.x]
        self.memory[self.I] = v // 100
        self.memory[self.I + 1] = (v // 10) % 10
        self.memory[self.I + 2] = v % 10

    def op_STORE(self, instr):
        count = instr.x + 1
        self._check_range(self.I, count, instr)
        self.memory[self.I:self.I + count] = bytes(self.V[:count])
        if self.quirks.load_store_increments_i:
            self.I = (self.I + count) & 0xFFFF

    def op_LOAD(self, instr):
        count = instr.x + 1
        self._check_range(self.I, count, instr)
        self.V[:count] = list(self.memory[self.I:self.I + count])
        if self.quirks.load_store_increments_i:
            self.I = (self.I + count) & 0xFFFF
