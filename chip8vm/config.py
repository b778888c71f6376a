# CHIP8 machine layout and front end settings.
# Memory - 4096 bytes: 0x000-0x1FF reserved for the interpreter (fonts live at 0x050),
# ROMs are loaded from 0x200 up.
# Display - 64x32 pixels, either on or off.
from dataclasses import dataclass

#  configuration
SCALE = 10
WIDTH, HEIGHT = 64, 32
CPU_HZ = 600
TIMER_HZ = 60

MEMORY_SIZE = 4096
PROGRAM_START = 0x200
FONT_START = 0x050
FONT_HEIGHT = 5
STACK_DEPTH = 16
NUM_KEYS = 16

# how many 60Hz ticks a key keeps reporting "pressed" after its last press
KEY_HOLD_TICKS = 6

# set fonts (binary pixel patterns)
FONTSET = [
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80   # F
] #notice 80 bytes


@dataclass
class Quirks:
    """Behaviour switches where CHIP8 interpreters disagree.

    shift_uses_vy: 8xy6/8xyE shift V[y] into V[x] (True) or shift V[x] in place (False).
    load_store_increments_i: Fx55/Fx65 leave I pointing past the copied block.
    """
    shift_uses_vy: bool = True
    load_store_increments_i: bool = False
