from __future__ import annotations

from .interface import Direction


def direction_towards(current_floor: int, floor: int) -> Direction:
    """Direction the car has to travel from ``current_floor`` to reach ``floor``."""

    if floor > current_floor:
        return Direction.UP
    if floor < current_floor:
        return Direction.DOWN
    return Direction.IDLE

