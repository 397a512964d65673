from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Direction(Enum):
    """Head tilt direction, in the player's own frame of reference."""
    LEFT = "left"
    RIGHT = "right"


@dataclass(slots=True, frozen=True)
class TiltSample:
    """Per-frame classification result. `angle_deg` is None when no face was found."""
    angle_deg: Optional[float]
    direction: Optional[Direction]


@dataclass(slots=True, frozen=True)
class GestureEvent:
    """A debounced left/right gesture. `timestamp_ms` comes from the debouncer clock."""
    direction: Direction
    timestamp_ms: float
