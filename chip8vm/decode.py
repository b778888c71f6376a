"""Opcode decoding.

Every fetched word is turned into an ``Instruction`` once: the operation tag
plus all operand fields, so the executor never has to pick bits apart again.
"""
import enum
from typing import NamedTuple

from .errors import UnknownOpcode


class Op(enum.Enum):
    CLS = "CLS"
    RET = "RET"
    SYS = "SYS {nnn:03X}"
    JP = "JP {nnn:03X}"
    CALL = "CALL {nnn:03X}"
    SE_VX_KK = "SE V{x:X}, {kk:02X}"
    SNE_VX_KK = "SNE V{x:X}, {kk:02X}"
    SE_VX_VY = "SE V{x:X}, V{y:X}"
    LD_VX_KK = "LD V{x:X}, {kk:02X}"
    ADD_VX_KK = "ADD V{x:X}, {kk:02X}"
    LD_VX_VY = "LD V{x:X}, V{y:X}"
    OR = "OR V{x:X}, V{y:X}"
    AND = "AND V{x:X}, V{y:X}"
    XOR = "XOR V{x:X}, V{y:X}"
    ADD = "ADD V{x:X}, V{y:X}"
    SUB = "SUB V{x:X}, V{y:X}"
    SHR = "SHR V{x:X}, V{y:X}"
    SUBN = "SUBN V{x:X}, V{y:X}"
    SHL = "SHL V{x:X}, V{y:X}"
    SNE_VX_VY = "SNE V{x:X}, V{y:X}"
    LD_I = "LD I, {nnn:03X}"
    JP_V0 = "JP V0, {nnn:03X}"
    RND = "RND V{x:X}, {kk:02X}"
    DRW = "DRW V{x:X}, V{y:X}, {n:X}"
    SKP = "SKP V{x:X}"
    SKNP = "SKNP V{x:X}"
    LD_VX_DT = "LD V{x:X}, DT"
    WAIT_KEY = "LD V{x:X}, K"
    LD_DT_VX = "LD DT, V{x:X}"
    LD_ST_VX = "LD ST, V{x:X}"
    ADD_I_VX = "ADD I, V{x:X}"
    FONT = "LD F, V{x:X}"
    BCD = "LD B, V{x:X}"
    STORE = "LD [I], V{x:X}"
    LOAD = "LD V{x:X}, [I]"


# (mask, pattern, op) - first match wins, so the exact 00E0/00EE rows sit above SYS
DECODE_TABLE = [
    (0xFFFF, 0x00E0, Op.CLS),
    (0xFFFF, 0x00EE, Op.RET),
    (0xF000, 0x0000, Op.SYS),

    (0xF000, 0x1000, Op.JP),
    (0xF000, 0x2000, Op.CALL),
    (0xF000, 0x3000, Op.SE_VX_KK),
    (0xF000, 0x4000, Op.SNE_VX_KK),
    (0xF000, 0x5000, Op.SE_VX_VY),
    (0xF000, 0x6000, Op.LD_VX_KK),
    (0xF000, 0x7000, Op.ADD_VX_KK),

    (0xF00F, 0x8000, Op.LD_VX_VY),
    (0xF00F, 0x8001, Op.OR),
    (0xF00F, 0x8002, Op.AND),
    (0xF00F, 0x8003, Op.XOR),
    (0xF00F, 0x8004, Op.ADD),
    (0xF00F, 0x8005, Op.SUB),
    (0xF00F, 0x8006, Op.SHR),
    (0xF00F, 0x8007, Op.SUBN),
    (0xF00F, 0x800E, Op.SHL),

    (0xF000, 0x9000, Op.SNE_VX_VY),
    (0xF000, 0xA000, Op.LD_I),
    (0xF000, 0xB000, Op.JP_V0),
    (0xF000, 0xC000, Op.RND),
    (0xF000, 0xD000, Op.DRW),

    (0xF0FF, 0xE09E, Op.SKP),
    (0xF0FF, 0xE0A1, Op.SKNP),

    (0xF0FF, 0xF007, Op.LD_VX_DT),
    (0xF0FF, 0xF00A, Op.WAIT_KEY),
    (0xF0FF, 0xF015, Op.LD_DT_VX),
    (0xF0FF, 0xF018, Op.LD_ST_VX),
    (0xF0FF, 0xF01E, Op.ADD_I_VX),
    (0xF0FF, 0xF029, Op.FONT),
    (0xF0FF, 0xF033, Op.BCD),
    (0xF0FF, 0xF055, Op.STORE),
    (0xF0FF, 0xF065, Op.LOAD),
]


class Instruction(NamedTuple):
    op: Op
    opcode: int
    x: int
    y: int
    n: int
    kk: int
    nnn: int

    def mnemonic(self):
        return self.op.value.format(x=self.x, y=self.y, n=self.n, kk=self.kk, nnn=self.nnn)

    def __str__(self):
        return f"{self.opcode:04X} {self.mnemonic()}"


def decode(opcode, pc=0):
    """Decode a 16-bit word. ``pc`` is only used to label an ``UnknownOpcode``."""
    for mask, pattern, op in DECODE_TABLE:
        if (opcode & mask) == pattern:
            return Instruction(
                op=op,
                opcode=opcode,
                x=(opcode >> 8) & 0xF,
                y=(opcode >> 4) & 0xF,
                n=opcode & 0xF,
                kk=opcode & 0xFF,
                nnn=opcode & 0x0FFF,
            )
    raise UnknownOpcode(opcode, pc)
