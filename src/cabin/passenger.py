from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, List

from .config import ElevatorConfig
from .errors import AlreadyArrived, DuplicatePassenger, InvalidFloor, InvalidPassenger, UnknownPassenger


@dataclass(frozen=True)
class Passenger:
    """Represents a rider on board, heading for one floor."""

    passenger_id: int
    destination: int
    weight: float


def validate_record(passenger_id: int, weight: float) -> None:
    if isinstance(passenger_id, bool) or not isinstance(passenger_id, int) or passenger_id <= 0:
        raise InvalidPassenger(f"Passenger id must be a positive integer, got {passenger_id!r}")
    if weight <= 0:
        raise InvalidPassenger(f"Passenger {passenger_id} weight must be positive, got {weight!r}")


class PassengerRegistry:
    """Passengers currently on board, keyed by id."""

    def __init__(self, config: ElevatorConfig) -> None:
        self.config = config
        self._passengers: Dict[int, Passenger] = {}

    def register(self, passenger_id: int, destination: int, weight: float, current_floor: int) -> Passenger:
        validate_record(passenger_id, weight)
        if passenger_id in self._passengers:
            raise DuplicatePassenger(f"Passenger {passenger_id} is already on board")
        if not self.config.in_range(destination):
            raise InvalidFloor(destination, self.config.min_floor, self.config.max_floor)
        if destination == current_floor:
            raise AlreadyArrived(passenger_id, destination)

        passenger = Passenger(
            passenger_id=passenger_id,
            destination=destination,
            weight=float(weight),
        )
        self._passengers[passenger_id] = passenger
        return passenger

    def passengers_at(self, floor: int) -> List[int]:
        """Ids of passengers leaving at ``floor``, in ascending order."""
        return sorted(pid for pid, p in self._passengers.items() if p.destination == floor)

    def remove(self, passenger_id: int) -> Passenger:
        try:
            return self._passengers.pop(passenger_id)
        except KeyError:
            raise UnknownPassenger(passenger_id) from None

    def is_empty(self) -> bool:
        return not self._passengers

    def all_destinations(self) -> Dict[int, int]:
        return {pid: p.destination for pid, p in self._passengers.items()}

    def total_weight(self) -> float:
        return sum(p.weight for p in self._passengers.values())

    def clear(self) -> List[int]:
        """Drop everyone and return the discarded ids."""
        discarded = sorted(self._passengers)
        self._passengers.clear()
        return discarded

    def __contains__(self, passenger_id: object) -> bool:
        return passenger_id in self._passengers

    def __iter__(self) -> Iterator[Passenger]:
        return (self._passengers[pid] for pid in sorted(self._passengers))

    def __len__(self) -> int:
        return len(self._passengers)


@dataclass(frozen=True)
class PassengerRequest:
    """Validated boarding record supplied by the caller."""

    passenger_id: int
    destination: int
    weight: float

    @classmethod
    def from_dict(cls, data: Dict) -> "PassengerRequest":
        return cls(
            passenger_id=data["id"],
            destination=data["destination"],
            weight=float(data["weight"]),
        )
