# Host side of the machine: timing, keypad hand-off, timers and fatal errors.
# CPU steps and 60Hz timer ticks run on two separate cadences, each gated by how much time
# passed since it last fired. Neither is derived from the other, so changing the CPU speed
# never changes how fast the timers count down.
import logging
import time

from . import config
from .errors import Chip8Error
from .keypad import Keypad

log = logging.getLogger(__name__)


class Cadence:
    """Counts how many ticks of a fixed rate are due at a given clock reading."""

    def __init__(self, hz, now, max_catch_up=None):
        self.period = 1.0 / hz
        self.last = now
        self.max_catch_up = max_catch_up

    def due(self, now):
        ticks = int((now - self.last) / self.period)
        if ticks <= 0:
            return 0
        if self.max_catch_up is not None and ticks > self.max_catch_up:
            # fell too far behind (window drag, breakpoint...) - drop the backlog
            self.last = now
            return self.max_catch_up
        self.last += ticks * self.period
        return ticks


def tick_timers(cpu):
    """One 60Hz tick. Returns True when the sound timer just reached zero."""
    if cpu.delay_timer > 0:
        cpu.delay_timer -= 1
    if cpu.sound_timer > 0:
        cpu.sound_timer -= 1
        return cpu.sound_timer == 0
    return False


def framebuffer_to_text(vram, on="#", off="."):
    return "\n".join("".join(on if px else off for px in row) for row in vram)


class HostLoop:

    def __init__(self, cpu, keypad=None, cpu_hz=config.CPU_HZ, timer_hz=config.TIMER_HZ,
                 clock=time.perf_counter):
        self.cpu = cpu
        self.keypad = keypad if keypad is not None else Keypad()
        self.clock = clock
        self.timer_hz = timer_hz

        now = clock()
        # cap catch-up at ~100ms worth of work per pump
        self.cpu_cadence = Cadence(cpu_hz, now, max_catch_up=max(1, cpu_hz // 10))
        self.timer_cadence = Cadence(timer_hz, now, max_catch_up=max(1, timer_hz // 10))

        self.stopped = False
        self.error = None
        self.steps = 0

        # callbacks set by the front end
        self.on_sound_start = None  # called with the tone length in seconds
        self.on_sound = None        # sound timer reached zero
        self.on_shutdown = None

    def stop(self):
        self.stopped = True

    def pump(self, max_steps=None):
        """Run every timer tick and CPU step that is due right now, at most max_steps of the latter.

        Returns steps executed. Due steps beyond max_steps are dropped, not carried over.
        """
        if self.stopped:
            return 0
        now = self.clock()

        for _ in range(self.timer_cadence.due(now)):
            self.keypad.decay()
            if tick_timers(self.cpu) and self.on_sound is not None:
                self.on_sound()

        due = self.cpu_cadence.due(now)
        if max_steps is not None:
            due = min(due, max_steps)

        executed = 0
        for _ in range(due):
            if self.stopped:
                break
            if not self.step():
                break
            executed += 1
        return executed

    def step(self):
        """Hand the keypad to the core and execute one instruction. False once the loop has died."""
        self.cpu.set_keys(self.keypad.snapshot())
        was_silent = self.cpu.sound_timer == 0
        try:
            self.cpu.step()
        except Chip8Error as e:
            self.fail(e)
            return False
        self.steps += 1
        if was_silent and self.cpu.sound_timer > 0 and self.on_sound_start is not None:
            # hand over the whole tone length so the front end can start the buzzer right away
            self.on_sound_start(self.cpu.sound_timer / self.timer_hz)
        return True

    def fail(self, error):
        # shut the display/input side down first, then report
        self.error = error
        self.stopped = True
        if self.on_shutdown is not None:
            self.on_shutdown()
        log.error("Emulation error: %s", error)

    def take_frame(self):
        """Return a copy of the framebuffer if it changed since the last call, else None."""
        if not self.cpu.should_draw:
            return None
        self.cpu.should_draw = False
        return self.cpu.vram.copy()

    def run(self, max_steps=None, idle=0.001):
        """Blocking loop for headless runs. Stops on stop(), on a fatal error or after max_steps."""
        start = self.steps
        while not self.stopped:
            if max_steps is None:
                self.pump()
            else:
                self.pump(max_steps - (self.steps - start))
                if self.steps - start >= max_steps:
                    break
            time.sleep(idle)
        return self.steps - start
