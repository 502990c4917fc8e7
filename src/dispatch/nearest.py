from __future__ import annotations

from typing import Mapping

from .interface import Direction
from .utils import direction_towards


class NearestDestinationPolicy:
    """Heads toward whichever requested floor is closest to the car."""

    def initial_direction(self, destinations: Mapping[int, int], current_floor: int) -> Direction:
        candidates = [floor for floor in destinations.values() if floor != current_floor]
        if not candidates:
            return Direction.IDLE
        # Ties between an upper and a lower floor go up
        nearest = min(candidates, key=lambda floor: (abs(floor - current_floor), -floor))
        return direction_towards(current_floor, nearest)
