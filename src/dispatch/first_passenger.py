from __future__ import annotations

from typing import Mapping

from .interface import Direction
from .utils import direction_towards


class FirstPassengerPolicy:
    """Commits to the direction requested by a distinguished passenger.

    Only the passenger registered under ``leader_id`` (id 1 unless configured
    otherwise) decides the direction. If that passenger is absent or already
    at its destination the car stays idle, even when others are waiting.
    """

    def __init__(self, leader_id: int = 1) -> None:
        self.leader_id = leader_id

    def initial_direction(self, destinations: Mapping[int, int], current_floor: int) -> Direction:
        leader_floor = destinations.get(self.leader_id)
        if leader_floor is None:
            return Direction.IDLE
        return direction_towards(current_floor, leader_floor)
