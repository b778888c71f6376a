# pyglet front end.
# We subclass pyglet (that handles graphics, sound output and keyboard handling) and override
# whatever def we need from there. The window never runs instructions itself: it pumps the
# HostLoop every clock tick, renders the framebuffer when the draw flag is up and beeps while
# the sound timer runs.
import logging

import numpy as np
import pyglet
from pyglet.media import synthesis
from pyglet.window import key

from . import config

log = logging.getLogger(__name__)

#map binding keys
KEYMAP = {
    key._1: 0x1, key._2: 0x2, key._3: 0x3, key._4: 0xC,
    key.Q: 0x4, key.W: 0x5, key.E: 0x6, key.R: 0xD,
    key.A: 0x7, key.S: 0x8, key.D: 0x9, key.F: 0xE,
    key.Z: 0xA, key.X: 0x0, key.C: 0xB, key.V: 0xF,
}


def _hud_label(text, y):
    return pyglet.text.Label(
        text,
        font_size=12,
        x=5,
        y=y,
        anchor_x='left',
        anchor_y='center',
        color=(255, 255, 255, 255)
    )


class Chip8Window(pyglet.window.Window):

    def __init__(self, host, scale=config.SCALE, caption="CHIP-8 Emulator", show_hud=True):
        self.scale = scale
        window_width, window_height = config.WIDTH * scale, config.HEIGHT * scale
        super().__init__(
            width=window_width,
            height=window_height,
            caption=caption,
            vsync=False
        )

        self.host = host
        self.host.on_sound_start = self._play_beep
        self.host.on_sound = self._stop_beep
        self.host.on_shutdown = self._shutdown
        self.beep_player = None
        self.show_hud = show_hud

        # small 64x32 RGBA buffer, upscaled with numpy.repeat before upload
        self._small_framebuf = np.zeros((config.HEIGHT, config.WIDTH, 4), dtype=np.uint8)
        self._small_framebuf[..., 3] = 255
        self.image = pyglet.image.ImageData(
            window_width,
            window_height,
            'RGBA',
            self._scaled().tobytes()
        )

        # Performance tracking counters
        self._fps_counter = 0
        self._cps_counter = 0
        self.fps_label = _hud_label("FPS: 0", window_height - 15)
        self.cps_label = _hud_label("Cycles/s: 0", window_height - 30)

        pyglet.clock.schedule(self.update)
        pyglet.clock.schedule_interval(self._update_bench, 1.0)

    # ---- loop ----
    def update(self, dt):
        self._cps_counter += self.host.pump()

    def _update_bench(self, dt):
        self.fps_label.text = f"FPS: {self._fps_counter / dt:.1f}"
        self.cps_label.text = f"Cycles/s: {self._cps_counter / dt:.0f}"
        self._fps_counter = 0
        self._cps_counter = 0

    def _unschedule(self):
        pyglet.clock.unschedule(self.update)
        pyglet.clock.unschedule(self._update_bench)

    def _shutdown(self):
        # fatal error inside the core: stop feeding it and take the window down
        self._unschedule()
        self.close()

    def on_close(self):
        self.host.stop()
        self._unschedule()
        super().on_close()

    # ---- draw ----
    def _scaled(self):
        if self.scale == 1:
            return self._small_framebuf
        return np.repeat(np.repeat(self._small_framebuf, self.scale, axis=0), self.scale, axis=1)

    def _upload(self, frame):
        # pyglet's origin is bottom-left, vram row 0 is the top line
        self._small_framebuf[..., :3] = (np.flipud(frame) * 255)[..., np.newaxis]
        self.image.set_data('RGBA', self.width * 4, self._scaled().tobytes())

    def on_draw(self):
        self.clear()
        frame = self.host.take_frame()
        if frame is not None:
            self._upload(frame)
        self.image.blit(0, 0)

        if self.show_hud:
            self.fps_label.draw()
            self.cps_label.draw()
        self._fps_counter += 1

    # ---- sound ----
    def _play_beep(self, duration, frequency=440):
        # tone lasts as long as the sound timer that was just written
        self._stop_beep()
        wave = synthesis.Sine(duration=duration, frequency=frequency, sample_rate=44100)
        player = pyglet.media.Player()
        player.queue(wave)
        player.play()
        self.beep_player = player

        def on_eos():
            if self.beep_player is player:
                self.beep_player = None
            player.delete()

        player.on_eos = on_eos

    def _stop_beep(self):
        if self.beep_player is not None:
            self.beep_player.pause()
            self.beep_player.delete()
            self.beep_player = None

    # ---- keyboard ----
    def on_key_press(self, symbol, modifiers):
        if symbol == key.ESCAPE:
            self.on_close()
        elif symbol == key.F1:
            # toggle per-instruction tracing
            pkg_log = logging.getLogger("chip8vm")
            tracing = pkg_log.getEffectiveLevel() <= logging.DEBUG
            pkg_log.setLevel(logging.INFO if tracing else logging.DEBUG)
            log.info("Instruction trace %s", "off" if tracing else "on")
        elif symbol in KEYMAP:
            self.host.keypad.press(KEYMAP[symbol])

    def on_key_release(self, symbol, modifiers):
        if symbol in KEYMAP:
            self.host.keypad.release(KEYMAP[symbol])
