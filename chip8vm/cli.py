import argparse
import logging

from . import config
from .config import Quirks
from .cpu import Chip8
from .host import HostLoop, framebuffer_to_text

log = logging.getLogger(__name__)


def build_parser():
    parser = argparse.ArgumentParser(prog="chip8vm", description="CHIP-8 interpreter")
    parser.add_argument("rom", help="path to a raw CHIP-8 ROM")
    parser.add_argument("--cpu-hz", type=int, default=config.CPU_HZ,
                        help="instructions per second (default: %(default)s)")
    parser.add_argument("--scale", type=int, default=config.SCALE,
                        help="window pixels per CHIP-8 pixel (default: %(default)s)")
    parser.add_argument("--shift-vx", action="store_true",
                        help="8xy6/8xyE shift Vx in place instead of reading Vy")
    parser.add_argument("--increment-i", action="store_true",
                        help="Fx55/Fx65 advance I past the copied registers")
    parser.add_argument("--headless", action="store_true",
                        help="run without a window and print the screen when done")
    parser.add_argument("--steps", type=int, default=1000,
                        help="instructions to run in headless mode (default: %(default)s)")
    parser.add_argument("--debug", action="store_true", help="enable per-instruction trace")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    quirks = Quirks(shift_uses_vy=not args.shift_vx, load_store_increments_i=args.increment_i)
    cpu = Chip8(quirks=quirks)
    if not cpu.load_rom_file(args.rom):
        return 1

    host = HostLoop(cpu, cpu_hz=args.cpu_hz)
    log.info("Starting interpreter at %d Hz", args.cpu_hz)
    if args.headless:
        host.run(max_steps=args.steps)
        print(framebuffer_to_text(cpu.vram))
    else:
        # pyglet only gets imported when a window is actually wanted
        import pyglet
        from .window import Chip8Window

        Chip8Window(host, scale=args.scale)
        pyglet.app.run()

    if host.error is not None:
        return 1
    log.info("Emulation stopped after %d instructions", host.steps)
    return 0
