#!/usr/bin/env python3
"""
LSM303D accelerometer driver.

This module:
- Configures the accelerometer over a register bus (I2C or SPI)
- Reads 16-bit acceleration data (X, Y, Z) as signed raw values
- Estimates the at-rest offset by averaging raw samples, and persists it
- Converts raw samples into offset-corrected, scaled readings

The magnetometer and temperature sensor are left unused.
"""

import logging
import time
from typing import Optional

from calibration_store import CalibrationStore
from coordinates import Coordinates, twos_comp_combine
from register_bus import RegisterBus

logger = logging.getLogger(__name__)


class LSM303D:
    """
    Accelerometer half of the LSM303D.

    Assumptions:
    - The bus is owned by this driver, no concurrent callers
    - The device is stationary and roughly level while calibrating
    """

    # Device self-id, read from WHO_AM_I
    WHO_AM_I_VALUE = 0b1001001

    # Control registers
    REG_CTRL_1 = 0x20  # accelerometer on/off and data rate
    REG_CTRL_2 = 0x21  # full scale, anti-aliasing filter
    REG_CTRL_5 = 0x24  # temperature sensor, magnetic resolution and data rate

    # Output registers, low byte first
    REG_OUT_X_L_A = 0x28
    REG_OUT_X_H_A = 0x29
    REG_OUT_Y_L_A = 0x2A
    REG_OUT_Y_H_A = 0x2B
    REG_OUT_Z_L_A = 0x2C
    REG_OUT_Z_H_A = 0x2D

    # Configuration written by enable(), in order
    ENABLE_SEQUENCE = (
        (REG_CTRL_1, 0b10010111),  # accelerometer on, X/Y/Z enabled, 800 Hz
        (REG_CTRL_2, 0x00),        # +/-2 g full scale
        (REG_CTRL_5, 0b01100100),  # high resolution, thermometer off, 6.25 Hz magnetic ODR
    )

    ACCELERATION_SCALE_FACTOR = 0.001
    CALIBRATION_ITERATIONS = 50
    CALIBRATION_INTERVAL = 0.020  # [s]

    def __init__(
        self,
        bus: RegisterBus,
        store: Optional[CalibrationStore] = None,
        calibration_iterations: int = CALIBRATION_ITERATIONS,
        calibration_interval: float = CALIBRATION_INTERVAL,
    ):
        """
        bus: transport to the device, see register_bus
        store: where calibration offsets are kept (default path if omitted)
        """
        if calibration_iterations < 1:
            raise ValueError("calibration_iterations must be at least 1.")
        if calibration_interval < 0:
            raise ValueError("calibration_interval must not be negative.")

        self.bus = bus
        self.store = store if store is not None else CalibrationStore()
        self.calibration_iterations = calibration_iterations
        self.calibration_interval = calibration_interval

        self._offsets = Coordinates.zero()
        self._calibrated = False

    @property
    def offsets(self) -> Coordinates:
        """Current calibration offset (zero until calibrated or restored)."""
        return self._offsets

    @property
    def calibrated(self) -> bool:
        return self._calibrated

    def _set_offsets(self, offsets: Coordinates) -> None:
        self._offsets = offsets
        self._calibrated = True

    # ---------- device setup ----------

    def enable(self) -> None:
        """
        Verify the device identity, then write the configuration registers.

        Raises DeviceNotFoundError before any write if the identity is wrong.
        """
        self.bus.identity_check(self.WHO_AM_I_VALUE, "No LSM303D detected on bus.")
        for reg, value in self.ENABLE_SEQUENCE:
            logger.debug("Write 0x%02X -> reg 0x%02X", value, reg)
            self.bus.write_register(reg, value)
        logger.info("LSM303D accelerometer enabled")

    # ---------- measurement ----------

    def _read_axis(self, msb_addr: int, lsb_addr: int) -> int:
        msb = self.bus.read_register(msb_addr)
        lsb = self.bus.read_register(lsb_addr)
        return twos_comp_combine(msb, lsb)

    def read_raw(self) -> Coordinates:
        """
        Read raw 16-bit acceleration data for X, Y, Z.

        Returns:
            Coordinates of signed raw values (as floats).
        """
        return Coordinates(
            float(self._read_axis(self.REG_OUT_X_H_A, self.REG_OUT_X_L_A)),
            float(self._read_axis(self.REG_OUT_Y_H_A, self.REG_OUT_Y_L_A)),
            float(self._read_axis(self.REG_OUT_Z_H_A, self.REG_OUT_Z_L_A)),
        )

    def read(self) -> Coordinates:
        """
        Read one offset-corrected, scaled acceleration sample.
        """
        return (self.read_raw() - self._offsets) * self.ACCELERATION_SCALE_FACTOR

    # ---------- calibration ----------

    def calibrate(self) -> Coordinates:
        """
        Average raw samples into a new offset and save it.

        Takes calibration_iterations samples, calibration_interval apart.
        The stored offset only changes once the record has been written.

        Returns:
            The new offset.
        """
        logger.info(
            "Calibrating accelerometer (%d samples, %.0f ms apart)...",
            self.calibration_iterations,
            self.calibration_interval * 1000.0,
        )
        total = Coordinates.zero()
        for _ in range(self.calibration_iterations):
            total += self.read_raw()
            time.sleep(self.calibration_interval)

        offsets = total / self.calibration_iterations
        self.store.save(offsets)
        self._set_offsets(offsets)

        logger.info("Calibrated accelerometer, offsets are %s", offsets)
        return offsets

    def load_calibration(self) -> Coordinates:
        """
        Restore the saved offset, or calibrate if none was saved.

        A malformed record raises CalibrationFormatError.

        Returns:
            The offset now in use.
        """
        offsets = self.store.load()
        if offsets is None:
            logger.warning("No saved calibration at %s, calibrating now", self.store.path)
            return self.calibrate()

        self._set_offsets(offsets)
        logger.info("Loaded accelerometer calibration %s from %s", offsets, self.store.path)
        return offsets

    def close(self) -> None:
        """
        Close the underlying bus.
        """
        self.bus.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
