"""
Register-addressed bus transports for the LSM303D.

This module:
- Wraps an I2C adapter (smbus2) or an SPI device (spidev)
- Exposes single-byte register reads and writes
- Checks the device identity register (WHO_AM_I)

Bus errors (OSError from smbus2/spidev) are not caught here.
"""

import logging
from typing import Optional

import smbus2
import spidev

logger = logging.getLogger(__name__)

# Identity register, common to ST MEMS devices
WHO_AM_I = 0x0F


class DeviceNotFoundError(RuntimeError):
    """The device on the bus is absent or reports an unexpected identity."""


class RegisterBus:
    """
    Base class for single-byte register transports.

    Subclasses implement read_register(), write_register() and close().
    """

    def read_register(self, addr: int) -> int:
        raise NotImplementedError

    def write_register(self, addr: int, value: int) -> None:
        raise NotImplementedError

    def close(self) -> None:
        raise NotImplementedError

    def identity_check(self, expected_id: int, message: Optional[str] = None) -> int:
        """
        Read WHO_AM_I and compare it with the expected identity code.

        Returns:
            The identity code read from the device.

        Raises:
            DeviceNotFoundError if the code does not match.
        """
        found = self.read_register(WHO_AM_I)
        logger.debug("WHO_AM_I=0x%02X (expected 0x%02X)", found, expected_id)
        if found != expected_id:
            detail = f"WHO_AM_I=0x{found:02X}, expected 0x{expected_id:02X}"
            raise DeviceNotFoundError(f"{message} ({detail})" if message else detail)
        return found

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class I2CRegisterBus(RegisterBus):
    """
    I2C transport using smbus2.

    Default: bus 1 (Raspberry Pi header), slave address 0x1D (SA0 high).
    """

    def __init__(self, bus: int = 1, address: int = 0x1D):
        self.address = address
        self.bus = smbus2.SMBus(bus)
        logger.debug("Opened I2C bus %d for address 0x%02X", bus, address)

    def read_register(self, addr: int) -> int:
        return self.bus.read_byte_data(self.address, addr)

    def write_register(self, addr: int, value: int) -> None:
        self.bus.write_byte_data(self.address, addr, value & 0xFF)

    def close(self) -> None:
        self.bus.close()


class SpiRegisterBus(RegisterBus):
    """
    SPI transport using spidev.

    The LSM303D uses SPI mode 3 and a command byte of:
    - bit7: 1 = read, 0 = write
    - bit6: address auto-increment (not used here)
    - bit5..0: register address
    """

    READ_FLAG = 0x80
    ADDR_MASK = 0x3F

    def __init__(self, bus: int = 0, device: int = 0, max_speed_hz: int = 1_000_000):
        self.spi = spidev.SpiDev()
        self.spi.open(bus, device)
        self.spi.max_speed_hz = max_speed_hz
        self.spi.mode = 0b11  # SPI mode 3 (CPOL=1, CPHA=1)
        logger.debug("Opened SPI %d.%d at %d Hz", bus, device, max_speed_hz)

    def read_register(self, addr: int) -> int:
        cmd = self.READ_FLAG | (addr & self.ADDR_MASK)
        resp = self.spi.xfer2([cmd, 0x00])
        return resp[1]

    def write_register(self, addr: int, value: int) -> None:
        cmd = addr & self.ADDR_MASK
        self.spi.xfer2([cmd, value & 0xFF])

    def close(self) -> None:
        self.spi.close()
