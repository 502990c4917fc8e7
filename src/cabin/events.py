from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List

logger = logging.getLogger(__name__)


class EventKind(str, Enum):
    PASSENGER_REGISTERED = "passenger_registered"
    REGISTRATION_REJECTED = "registration_rejected"
    BOARDING_REJECTED = "boarding_rejected"
    BOARDING_SUMMARY = "boarding_summary"
    NO_DESTINATIONS = "no_destinations"
    JOURNEY_PLANNED = "journey_planned"
    JOURNEY_STRANDED = "journey_stranded"
    JOURNEY_STARTED = "journey_started"
    FLOOR_PASSED = "floor_passed"
    ARRIVED = "arrived"
    DOORS_OPENED = "doors_opened"
    PASSENGER_EXITED = "passenger_exited"
    LOAD_SUMMARY = "load_summary"
    DOORS_CLOSED = "doors_closed"
    JOURNEY_COMPLETED = "journey_completed"
    EMERGENCY_STOP = "emergency_stop"


_WARNING_KINDS = {
    EventKind.REGISTRATION_REJECTED,
    EventKind.BOARDING_REJECTED,
    EventKind.JOURNEY_STRANDED,
    EventKind.EMERGENCY_STOP,
}


@dataclass(frozen=True)
class ElevatorEvent:
    """A single status report emitted by the car."""

    sequence: int
    kind: EventKind
    message: str
    data: Dict[str, object] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "sequence": self.sequence,
            "kind": self.kind.value,
            "message": self.message,
            "data": dict(self.data),
        }


EventCallback = Callable[[ElevatorEvent], None]


class EventHub:
    """Fans events out to subscribers and keeps them in order."""

    def __init__(self) -> None:
        self.hooks: Dict[EventKind, List[EventCallback]] = {}
        self.listeners: List[EventCallback] = []
        self._sequence = 0

    def on_event(self, kind: EventKind, callback: EventCallback) -> None:
        self.hooks.setdefault(EventKind(kind), []).append(callback)

    def on_any(self, callback: EventCallback) -> None:
        self.listeners.append(callback)

    def remove_listener(self, callback: EventCallback) -> None:
        if callback in self.listeners:
            self.listeners.remove(callback)

    def emit(self, kind: EventKind, message: str, **data: object) -> ElevatorEvent:
        self._sequence += 1
        event = ElevatorEvent(sequence=self._sequence, kind=kind, message=message, data=data)
        level = logging.WARNING if kind in _WARNING_KINDS else logging.INFO
        logger.log(level, "[%s] %s", kind.value, message)
        for callback in list(self.listeners):
            callback(event)
        for callback in self.hooks.get(kind, []):
            callback(event)
        return event
