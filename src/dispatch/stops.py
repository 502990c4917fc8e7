from __future__ import annotations

import logging
from bisect import bisect_left, insort
from typing import Iterable, Iterator, List, Mapping, Optional

from .interface import Direction, DirectionPolicy

logger = logging.getLogger(__name__)


class StopSet:
    """Distinct floors kept in sweep order.

    Floors are stored ascending; ``descending`` flips which end counts as the
    first stop so the same structure serves both directions.
    """

    def __init__(self, descending: bool = False, floors: Iterable[int] = ()) -> None:
        self.descending = descending
        self._floors: List[int] = []
        for floor in floors:
            self.add(floor)

    def add(self, floor: int) -> bool:
        index = bisect_left(self._floors, floor)
        if index < len(self._floors) and self._floors[index] == floor:
            return False
        insort(self._floors, floor)
        return True

    def first(self) -> int:
        if not self._floors:
            raise IndexError("first() on empty stop set")
        return self._floors[-1] if self.descending else self._floors[0]

    def pop_first(self) -> int:
        if not self._floors:
            raise IndexError("pop_first() on empty stop set")
        return self._floors.pop() if self.descending else self._floors.pop(0)

    def clear(self) -> None:
        self._floors.clear()

    def __iter__(self) -> Iterator[int]:
        return iter(reversed(self._floors) if self.descending else self._floors)

    def __len__(self) -> int:
        return len(self._floors)

    def __bool__(self) -> bool:
        return bool(self._floors)

    def __repr__(self) -> str:
        return f"StopSet({list(self)})"


class StopScheduler:
    """Builds and consumes the per-direction stop sets of a journey."""

    def __init__(self, policy: DirectionPolicy) -> None:
        self.policy = policy
        self.up_stops = StopSet()
        self.down_stops = StopSet(descending=True)
        self.direction: Direction = Direction.IDLE

    def organize_stops(self, destinations: Mapping[int, int], current_floor: int) -> Direction:
        """Pick the journey direction and fill only that direction's stop set.

        Every destination goes into the active set, including floors on the
        other side of the car. An idle decision leaves both sets empty.
        """

        self.clear()
        chosen = self.policy.initial_direction(destinations, current_floor)
        if chosen is Direction.UP:
            for floor in destinations.values():
                self.up_stops.add(floor)
        elif chosen is Direction.DOWN:
            for floor in destinations.values():
                self.down_stops.add(floor)

        if self.up_stops:
            self.direction = Direction.UP
        elif self.down_stops:
            self.direction = Direction.DOWN
        else:
            self.direction = Direction.IDLE
        logger.debug("Organized stops %s heading %s", self.pending(), self.direction.value)
        return self.direction

    @property
    def active(self) -> Optional[StopSet]:
        if self.direction is Direction.UP:
            return self.up_stops
        if self.direction is Direction.DOWN:
            return self.down_stops
        return None

    def has_stops(self) -> bool:
        return bool(self.up_stops or self.down_stops)

    def peek(self) -> Optional[int]:
        active = self.active
        if not active:
            return None
        return active.first()

    def next_stop(self) -> int:
        active = self.active
        if not active:
            raise IndexError("No stops remaining")
        return active.pop_first()

    def pending(self) -> List[int]:
        active = self.active
        return list(active) if active is not None else []

    def clear(self) -> None:
        self.up_stops.clear()
        self.down_stops.clear()
        self.direction = Direction.IDLE
