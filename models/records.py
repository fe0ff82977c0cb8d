"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class Reading:
    """A simulated sensor value and the instant it was computed for."""

    timestamp: datetime
    value: float
