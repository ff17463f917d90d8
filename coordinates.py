"""
Small 3-axis vector type and register byte helpers.

- Coordinates: immutable (x, y, z) with component-wise arithmetic
- twos_comp_combine: signed 16-bit value from a high/low register byte pair
"""

from typing import NamedTuple


class Coordinates(NamedTuple):
    """
    Three floating point components, one per axis.

    Supports component-wise + and -, and * or / by a scalar.
    """

    x: float
    y: float
    z: float

    @classmethod
    def zero(cls) -> "Coordinates":
        return cls(0.0, 0.0, 0.0)

    def __add__(self, other: "Coordinates") -> "Coordinates":
        return Coordinates(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Coordinates") -> "Coordinates":
        return Coordinates(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, factor: float) -> "Coordinates":
        return Coordinates(self.x * factor, self.y * factor, self.z * factor)

    __rmul__ = __mul__

    def __truediv__(self, divisor: float) -> "Coordinates":
        return Coordinates(self.x / divisor, self.y / divisor, self.z / divisor)

    def __str__(self) -> str:
        return f"({self.x}, {self.y}, {self.z})"


def twos_comp_combine(msb: int, lsb: int) -> int:
    """
    Combine a high and a low register byte into a signed 16-bit integer.

    msb, lsb: unsigned bytes in [0, 255]

    Returns:
        value in [-32768, 32767]
    """
    if not (0 <= msb <= 0xFF and 0 <= lsb <= 0xFF):
        raise ValueError(f"register bytes must be in [0, 255], got msb={msb}, lsb={lsb}")

    raw = 256 * msb + lsb
    if raw >= 32768:
        return raw - 65536
    return raw
