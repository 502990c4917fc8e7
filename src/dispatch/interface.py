from __future__ import annotations

from enum import Enum
from typing import Mapping, Protocol


class Direction(str, Enum):
    UP = "UP"
    DOWN = "DOWN"
    IDLE = "IDLE"


class DirectionPolicy(Protocol):
    """Strategy interface for choosing the direction of a new journey."""

    def initial_direction(self, destinations: Mapping[int, int], current_floor: int) -> Direction:
        """
        Return the direction the car commits to for the whole journey.

        ``destinations`` maps passenger id -> destination floor. Returning
        ``Direction.IDLE`` leaves every stop set empty so no journey runs.
        """
        ...
