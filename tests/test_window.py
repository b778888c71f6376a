import logging
from types import SimpleNamespace

import pytest

from chip8vm.keypad import Keypad

pyglet = pytest.importorskip("pyglet")
pyglet.options["shadow_window"] = False
try:
    from chip8vm import window
except Exception as exc:  # no X libraries / display on this machine
    pytest.skip(f"pyglet window module unavailable: {exc}", allow_module_level=True)

key = window.key


@pytest.fixture
def stub():
    # handlers are called unbound so no real window gets opened
    return SimpleNamespace(host=SimpleNamespace(keypad=Keypad(hold_ticks=0)), closed=False)


@pytest.fixture
def restore_log_level():
    pkg_log = logging.getLogger("chip8vm")
    level = pkg_log.level
    yield pkg_log
    pkg_log.setLevel(level)


def test_keymap_covers_the_whole_keypad():
    assert sorted(window.KEYMAP.values()) == list(range(16))
    assert window.KEYMAP[key._1] == 0x1
    assert window.KEYMAP[key._4] == 0xC
    assert window.KEYMAP[key.X] == 0x0
    assert window.KEYMAP[key.V] == 0xF


@pytest.mark.parametrize("symbol, chip_key", [(key.Q, 0x4), (key.S, 0x8), (key.Z, 0xA), (key.R, 0xD)])
def test_press_and_release_reach_the_keypad(stub, symbol, chip_key):
    window.Chip8Window.on_key_press(stub, symbol, 0)
    assert stub.host.keypad.is_pressed(chip_key)
    assert sum(stub.host.keypad.snapshot()) == 1

    window.Chip8Window.on_key_release(stub, symbol, 0)
    assert not stub.host.keypad.is_pressed(chip_key)


def test_unmapped_key_is_ignored(stub):
    window.Chip8Window.on_key_press(stub, key.P, 0)
    window.Chip8Window.on_key_release(stub, key.P, 0)
    assert stub.host.keypad.snapshot() == [False] * 16


def test_escape_closes(stub):
    def on_close():
        stub.closed = True

    stub.on_close = on_close
    window.Chip8Window.on_key_press(stub, key.ESCAPE, 0)
    assert stub.closed


def test_f1_toggles_instruction_trace(stub, restore_log_level):
    pkg_log = restore_log_level
    pkg_log.setLevel(logging.INFO)

    window.Chip8Window.on_key_press(stub, key.F1, 0)
    assert pkg_log.level == logging.DEBUG
    window.Chip8Window.on_key_press(stub, key.F1, 0)
    assert pkg_log.level == logging.INFO
