from chip8vm.keypad import Keypad


def test_press_and_hold():
    pad = Keypad(hold_ticks=3)
    pad.press(0xA)
    assert pad.is_pressed(0xA)
    for _ in range(10):
        pad.decay()
    # still physically held
    assert pad.is_pressed(0xA)


def test_tap_survives_for_hold_window():
    pad = Keypad(hold_ticks=3)
    pad.press(0x5)
    pad.release(0x5)
    assert pad.is_pressed(0x5)
    pad.decay()
    pad.decay()
    assert pad.is_pressed(0x5)
    pad.decay()
    assert not pad.is_pressed(0x5)
    pad.decay()
    assert not pad.is_pressed(0x5)


def test_snapshot_has_one_entry_per_key():
    pad = Keypad()
    pad.press(0x0)
    pad.press(0xF)
    snap = pad.snapshot()
    assert len(snap) == 16
    assert snap[0] is True and snap[0xF] is True
    assert not any(snap[1:0xF])


def test_clear():
    pad = Keypad()
    pad.press(3)
    pad.clear()
    assert pad.snapshot() == [False] * 16
