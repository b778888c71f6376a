import random

import pytest

from chip8vm.cpu import Chip8


@pytest.fixture
def chip():
    return Chip8(rng=random.Random(1234))


@pytest.fixture
def load(chip):
    """Load big-endian opcode words at 0x200."""
    def _load(*words):
        chip.load_program(b"".join(w.to_bytes(2, "big") for w in words))
    return _load
