"""CHIP-8 virtual machine: interpreter core, host loop and pyglet front end."""
from .config import Quirks
from .cpu import Chip8
from .decode import Instruction, Op, decode
from .errors import (
    Chip8Error,
    MemoryOutOfBounds,
    RomTooLarge,
    StackOverflow,
    StackUnderflow,
    UnknownOpcode,
)
from .host import HostLoop, tick_timers
from .keypad import Keypad

__all__ = [
    "Chip8",
    "Chip8Error",
    "HostLoop",
    "Instruction",
    "Keypad",
    "MemoryOutOfBounds",
    "Op",
    "Quirks",
    "RomTooLarge",
    "StackOverflow",
    "StackUnderflow",
    "UnknownOpcode",
    "decode",
    "tick_timers",
]
