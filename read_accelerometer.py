#!/usr/bin/env python3
"""
Simple LSM303D reader using the lsm303d_sensor module.

- Opens the I2C (default) or SPI bus and enables the accelerometer
- Restores the saved calibration, or calibrates if there is none
- Prints raw and calibrated values in a loop
"""

import argparse
import logging
import sys
import time
from typing import List, Optional

from calibration_store import CalibrationFormatError, CalibrationStore
from sensor_config import SensorConfig, load_config
from lsm303d_sensor import LSM303D
from register_bus import DeviceNotFoundError, I2CRegisterBus, RegisterBus, SpiRegisterBus

logger = logging.getLogger("read_accelerometer")


def open_bus(cfg: SensorConfig) -> RegisterBus:
    if cfg.bus_type == "spi":
        return SpiRegisterBus(cfg.spi_bus, cfg.spi_device, cfg.spi_max_speed_hz)
    return I2CRegisterBus(cfg.i2c_bus, cfg.i2c_address)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Read calibrated LSM303D acceleration.")
    p.add_argument("--config", default="lsm303d_config.yaml",
                   help="YAML config file (ignored if missing)")
    p.add_argument("--bus", choices=("i2c", "spi"), dest="bus_type",
                   help="bus type (overrides config)")
    p.add_argument("--calibration", dest="calibration_path",
                   help="calibration record path (overrides config)")
    p.add_argument("--interval", type=float, dest="read_interval",
                   help="seconds between readings (overrides config)")
    p.add_argument("--count", type=int, default=0,
                   help="stop after N readings (0 = until Ctrl+C)")
    p.add_argument("--recalibrate", action="store_true",
                   help="ignore the saved calibration and calibrate again")
    p.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return p.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(levelname)s] %(name)s: %(message)s",
    )

    try:
        cfg = load_config(args.config).with_overrides(
            bus_type=args.bus_type,
            calibration_path=args.calibration_path,
            read_interval=args.read_interval,
        )
    except (ValueError, TypeError) as e:
        logger.error("Bad configuration: %s", e)
        return 2

    try:
        bus = open_bus(cfg)
    except OSError as e:
        logger.error("Cannot open %s bus: %s", cfg.bus_type, e)
        return 1

    sensor = LSM303D(bus, CalibrationStore(cfg.calibration_path))

    try:
        sensor.enable()
        if args.recalibrate:
            sensor.calibrate()
        else:
            sensor.load_calibration()

        print("Reading X/Y/Z (raw, calibrated) – Ctrl+C to stop\n")

        n = 0
        while args.count <= 0 or n < args.count:
            raw = sensor.read_raw()
            acc = sensor.read()
            print(
                f"RAW   x={raw.x:8.0f}  y={raw.y:8.0f}  z={raw.z:8.0f}  |  "
                f"ACC   x={acc.x:+1.4f}  y={acc.y:+1.4f}  z={acc.z:+1.4f}"
            )
            n += 1
            time.sleep(cfg.read_interval)

    except KeyboardInterrupt:
        print("\n[INFO] Stopped by user.")
    except (DeviceNotFoundError, CalibrationFormatError, OSError) as e:
        logger.error("%s", e)
        return 1
    finally:
        sensor.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
