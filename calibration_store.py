"""
Persistence of accelerometer calibration offsets.

The record is a plain text file holding X, Y and Z offset as three decimal
floats separated by "\\n", with no trailing newline. A missing file means
"not calibrated yet"; a file that does not have exactly that shape is an error.
"""

import logging
import re
from pathlib import Path
from typing import Optional, Union

from coordinates import Coordinates

logger = logging.getLogger(__name__)

DEFAULT_CALIBRATION_PATH = Path("data/accelerometer_calibration.dat")

# Decimal or exponent notation, inf or nan; no whitespace, underscores or "\r"
_FLOAT_RE = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)",
    re.IGNORECASE,
)


class CalibrationFormatError(ValueError):
    """The calibration record exists but cannot be parsed."""


class CalibrationStore:
    """Load and save a Coordinates offset as a three-line text record."""

    def __init__(self, path: Union[str, Path] = DEFAULT_CALIBRATION_PATH):
        self.path = Path(path)

    def save(self, offset: Coordinates) -> None:
        """
        Write the offset, replacing any previous record.

        OSError (e.g. permission denied) is propagated to the caller.
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        text = "\n".join(repr(float(v)) for v in offset)
        with self.path.open("w", encoding="utf-8", newline="") as fh:
            fh.write(text)
        logger.debug("Saved calibration %s to %s", offset, self.path)

    def load(self) -> Optional[Coordinates]:
        """
        Read the offset back.

        Returns:
            Coordinates, or None if no record exists.

        Raises:
            CalibrationFormatError if the record is not three numeric lines.
        """
        try:
            # newline="" keeps "\r" so CRLF records are rejected
            with self.path.open("r", encoding="utf-8", newline="") as fh:
                text = fh.read()
        except FileNotFoundError:
            logger.debug("No calibration record at %s", self.path)
            return None

        lines = text.split("\n")
        if len(lines) != 3:
            raise CalibrationFormatError(
                f"{self.path}: expected three lines for X, Y and Z, got {len(lines)}"
            )

        values = []
        for axis, line in zip("XYZ", lines):
            if not _FLOAT_RE.fullmatch(line):
                raise CalibrationFormatError(f"{self.path}: bad {axis} offset {line!r}")
            values.append(float(line))

        return Coordinates(*values)
