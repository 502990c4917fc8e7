from __future__ import annotations


class ElevatorError(Exception):
    """Base class for every error raised by the car."""


class ConfigError(ElevatorError, ValueError):
    pass


class InvalidPassenger(ElevatorError, ValueError):
    """Passenger record that can never be accepted (bad id or weight)."""


class DuplicatePassenger(InvalidPassenger):
    pass


class InvalidFloor(ElevatorError):
    def __init__(self, floor: int, min_floor: int, max_floor: int) -> None:
        super().__init__(f"Invalid floor: {floor} (valid range {min_floor}-{max_floor})")
        self.floor = floor
        self.min_floor = min_floor
        self.max_floor = max_floor


class AlreadyArrived(ElevatorError):
    def __init__(self, passenger_id: int, floor: int) -> None:
        super().__init__(f"Passenger {passenger_id} is already at floor {floor}")
        self.passenger_id = passenger_id
        self.floor = floor


class CapacityExceeded(ElevatorError):
    pass


class WeightExceeded(ElevatorError):
    pass


class UnknownPassenger(ElevatorError, KeyError):
    def __init__(self, passenger_id: int) -> None:
        super().__init__(passenger_id)
        self.passenger_id = passenger_id

    def __str__(self) -> str:
        return f"Unknown passenger {self.passenger_id}"


class CarBusy(ElevatorError):
    """Raised when a command arrives while a journey is still running."""
