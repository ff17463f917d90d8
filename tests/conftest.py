"""Pytest fixtures for LSM303D driver tests."""

from typing import Dict, List, Tuple

import pytest

from calibration_store import CalibrationStore
from coordinates import Coordinates
from lsm303d_sensor import LSM303D
from register_bus import WHO_AM_I, RegisterBus


class FakeRegisterBus(RegisterBus):
    """In-memory register map that records every bus operation."""

    def __init__(self, who_am_i: int = LSM303D.WHO_AM_I_VALUE):
        self.registers: Dict[int, int] = {WHO_AM_I: who_am_i}
        self.writes: List[Tuple[int, int]] = []
        self.reads: List[int] = []
        self.samples: List[Tuple[int, int, int]] = []
        self.closed = False

    def set_sample(self, x: int, y: int, z: int) -> None:
        """Load signed 16-bit raw values into the output registers."""
        for value, low in zip((x, y, z), (0x28, 0x2A, 0x2C)):
            word = value & 0xFFFF
            self.registers[low] = word & 0xFF
            self.registers[low + 1] = word >> 8

    def queue_samples(self, samples: List[Tuple[int, int, int]]) -> None:
        """Serve one queued sample per X-MSB read."""
        self.samples = list(samples)

    def read_register(self, addr: int) -> int:
        if addr == LSM303D.REG_OUT_X_H_A and self.samples:
            self.set_sample(*self.samples.pop(0))
        self.reads.append(addr)
        return self.registers.get(addr, 0)

    def write_register(self, addr: int, value: int) -> None:
        self.writes.append((addr, value))
        self.registers[addr] = value

    def close(self) -> None:
        self.closed = True


class FailingStore(CalibrationStore):
    def save(self, offset: Coordinates) -> None:
        raise PermissionError(f"cannot write {self.path}")


@pytest.fixture
def bus() -> FakeRegisterBus:
    return FakeRegisterBus()


@pytest.fixture
def store(tmp_path) -> CalibrationStore:
    return CalibrationStore(tmp_path / "data" / "accelerometer_calibration.dat")


@pytest.fixture
def sensor(bus, store) -> LSM303D:
    return LSM303D(bus, store)


@pytest.fixture
def no_sleep(monkeypatch) -> List[float]:
    """Replace time.sleep in the driver and collect the requested delays."""
    delays: List[float] = []
    monkeypatch.setattr("lsm303d_sensor.time.sleep", delays.append)
    return delays


@pytest.fixture
def failing_store(tmp_path) -> CalibrationStore:
    return FailingStore(tmp_path / "readonly" / "calibration.dat")
