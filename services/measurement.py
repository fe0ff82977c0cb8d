"""Simulated light-level readings derived from the time of day."""

from __future__ import annotations

import math
import struct
from datetime import datetime


def to_float32(value: float) -> float:
    """Round a Python float to the nearest 32-bit float."""
    return struct.unpack("f", struct.pack("f", value))[0]


def measure(instant: datetime) -> float:
    """Return a sine-shaped lux value in [-1, 1] for the instant's hour and minute.

    The curve bottoms out at midnight and peaks at noon. Only the wall-clock
    fields of ``instant`` are used, so zone conversion belongs to the caller.
    """
    hour = float(instant.hour)
    # The minute fraction is single precision; the rest is evaluated in double.
    minute_fraction = to_float32(instant.minute / 60)
    return to_float32(math.sin(1.5 * math.pi + (math.pi * hour + minute_fraction) / 12))
