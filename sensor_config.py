"""Runtime configuration for the LSM303D reader."""

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from calibration_store import DEFAULT_CALIBRATION_PATH

CONFIG_SECTION = "lsm303d"


@dataclass(frozen=True)
class SensorConfig:
    bus_type: str = "i2c"          # "i2c" or "spi"
    i2c_bus: int = 1
    i2c_address: int = 0x1D
    spi_bus: int = 0
    spi_device: int = 0
    spi_max_speed_hz: int = 1_000_000
    calibration_path: str = str(DEFAULT_CALIBRATION_PATH)
    read_interval: float = 0.1     # [s] between printed readings

    def __post_init__(self) -> None:
        if self.bus_type not in ("i2c", "spi"):
            raise ValueError(f"bus_type must be 'i2c' or 'spi', got {self.bus_type!r}")
        if self.read_interval < 0:
            raise ValueError("read_interval must not be negative")

    def with_overrides(self, **overrides: Any) -> "SensorConfig":
        """Return a copy with the non-None overrides applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def load_config(path: Union[str, Path, None]) -> SensorConfig:
    """
    Read a SensorConfig from YAML.

    Values may sit at top level or under an ``lsm303d`` section. A missing
    file gives the defaults; unknown keys raise ValueError.
    """
    if path is None:
        return SensorConfig()
    config_path = Path(path)
    if not config_path.exists():
        return SensorConfig()

    with config_path.open("r", encoding="utf-8") as fh:
        data: Dict[str, Any] = yaml.safe_load(fh) or {}

    if not isinstance(data, dict):
        raise ValueError(f"{config_path}: expected a mapping at top level")
    data = data.get(CONFIG_SECTION, data) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{config_path}: expected a mapping under {CONFIG_SECTION!r}")

    known = {f.name for f in fields(SensorConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"{config_path}: unknown config keys {unknown}")

    return SensorConfig(**data)
