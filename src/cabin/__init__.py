"""Single-car elevator primitives."""

from .capacity import CapacityGuard
from .config import ElevatorConfig, PacingConfig
from .elevator import BoardingResult, Elevator, MotionState
from .errors import (
    AlreadyArrived,
    CapacityExceeded,
    CarBusy,
    ConfigError,
    DuplicatePassenger,
    ElevatorError,
    InvalidFloor,
    InvalidPassenger,
    UnknownPassenger,
    WeightExceeded,
)
from .events import ElevatorEvent, EventHub, EventKind
from .pacing import NullPacer, Pacer, SleepPacer
from .passenger import Passenger, PassengerRegistry, PassengerRequest

__all__ = [
    "AlreadyArrived",
    "BoardingResult",
    "CapacityExceeded",
    "CapacityGuard",
    "CarBusy",
    "ConfigError",
    "DuplicatePassenger",
    "Elevator",
    "ElevatorConfig",
    "ElevatorError",
    "ElevatorEvent",
    "EventHub",
    "EventKind",
    "InvalidFloor",
    "InvalidPassenger",
    "MotionState",
    "NullPacer",
    "Pacer",
    "PacingConfig",
    "Passenger",
    "PassengerRegistry",
    "PassengerRequest",
    "SleepPacer",
    "UnknownPassenger",
    "WeightExceeded",
]
