"""
Shared fixtures for the chip8vm test suite.
"""

import pytest

from chip8vm.vm import Chip8


class FakeClock:
    """
    Simulated monotonic clock.

    Calling the instance returns the current time; sleep() advances it and
    records every requested duration.
    """

    def __init__(self, start: float = 0.0):
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def words_to_rom(*words: int) -> bytes:
    """Encode instruction words as a big-endian ROM image."""
    data = bytearray()
    for word in words:
        data += bytes([(word >> 8) & 0xFF, word & 0xFF])
    return bytes(data)


@pytest.fixture
def vm():
    """Fresh VM with a fixed random seed."""
    return Chip8(seed=1234)


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def rom():
    """The words_to_rom helper, for building test programs."""
    return words_to_rom
