# Keypad state as seen by the host.
# Each key holds a small countdown instead of a plain on/off bit: a press keeps the key
# reporting "pressed" for a few timer ticks after it is released, so a quick tap that lands
# between two CPU steps (or a terminal that only delivers press events) is not lost.
import numpy as np

from . import config


class Keypad:

    def __init__(self, hold_ticks=config.KEY_HOLD_TICKS):
        self.hold_ticks = hold_ticks
        self.held = np.zeros(config.NUM_KEYS, dtype=bool)
        self.countdown = np.zeros(config.NUM_KEYS, dtype=np.uint8)

    def press(self, key):
        self.held[key] = True
        self.countdown[key] = self.hold_ticks

    def release(self, key):
        # countdown keeps running so a short tap still reads as pressed for a while
        self.held[key] = False

    def decay(self):
        """Called once per 60Hz timer tick."""
        self.countdown[self.countdown > 0] -= 1

    def is_pressed(self, key):
        return bool(self.held[key] or self.countdown[key])

    def snapshot(self):
        return [bool(h or c) for h, c in zip(self.held, self.countdown)]

    def clear(self):
        self.held[:] = False
        self.countdown[:] = 0
