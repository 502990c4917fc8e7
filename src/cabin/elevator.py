from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List

from dispatch import Direction, StopScheduler, get_policy

from .capacity import CapacityGuard
from .config import ElevatorConfig, PacingConfig
from .errors import AlreadyArrived, CarBusy, DuplicatePassenger, InvalidFloor
from .events import EventCallback, EventHub, EventKind
from .pacing import Pacer, SleepPacer
from .passenger import PassengerRegistry, PassengerRequest, validate_record

logger = logging.getLogger(__name__)


class MotionState(str, Enum):
    MOVING = "MOVING"
    STOPPED = "STOPPED"
    DOORS_OPEN = "DOORS_OPEN"
    DOORS_CLOSED = "DOORS_CLOSED"


@dataclass
class BoardingResult:
    accepted: List[int] = field(default_factory=list)
    rejected: Dict[int, str] = field(default_factory=dict)

    @property
    def boarded(self) -> bool:
        return bool(self.accepted)


@dataclass
class Elevator:
    """A single car that delivers its passengers in one committed sweep.

    All runtime state lives here and is only changed through the public
    operations. Status reports go out through ``events``; pauses between
    floors and door cycles go through ``pacer`` so tests can skip them.
    """

    config: ElevatorConfig = field(default_factory=ElevatorConfig)
    pacing: PacingConfig = field(default_factory=PacingConfig)
    pacer: Pacer = field(default_factory=SleepPacer, repr=False)
    current_floor: int = field(init=False)
    direction: Direction = field(init=False, default=Direction.IDLE)
    motion_state: MotionState = field(init=False, default=MotionState.STOPPED)
    policy_name: str = field(init=False)
    registry: PassengerRegistry = field(init=False, repr=False)
    guard: CapacityGuard = field(init=False, repr=False)
    scheduler: StopScheduler = field(init=False, repr=False)
    events: EventHub = field(init=False, repr=False)
    _journey: int = field(init=False, default=0, repr=False)
    _running: bool = field(init=False, default=False, repr=False)

    def __post_init__(self) -> None:
        self.current_floor = self.config.start_floor
        self.policy_name = self.config.direction_policy.lower()
        self.registry = PassengerRegistry(self.config)
        self.guard = CapacityGuard(self.config)
        self.scheduler = StopScheduler(get_policy(self.policy_name))
        self.events = EventHub()

    # Queries

    @property
    def capacity(self) -> int:
        return self.guard.capacity

    @property
    def max_weight(self) -> float:
        return self.guard.max_weight

    @property
    def current_load(self) -> int:
        return self.guard.current_load

    @property
    def current_weight(self) -> float:
        return self.guard.current_weight

    @property
    def pending_stops(self) -> List[int]:
        return self.scheduler.pending()

    @property
    def in_journey(self) -> bool:
        return self._running

    def summary(self) -> str:
        return (
            f"Elevator[Floor: {self.current_floor}, Direction: {self.direction.value}, "
            f"State: {self.motion_state.value}, Load: {self.current_load}/{self.capacity}, "
            f"Weight: {self.current_weight:.1f}/{self.max_weight:.1f} lbs]"
        )

    def __str__(self) -> str:
        return self.summary()

    def snapshot(self) -> dict:
        return {
            "current_floor": self.current_floor,
            "direction": self.direction.value,
            "motion_state": self.motion_state.value,
            "current_load": self.current_load,
            "capacity": self.capacity,
            "current_weight": self.current_weight,
            "max_weight": self.max_weight,
            "pending_stops": self.pending_stops,
            "policy": self.policy_name,
            "passengers": [
                {"id": p.passenger_id, "destination": p.destination, "weight": p.weight}
                for p in self.registry
            ],
            "summary": self.summary(),
        }

    # Subscriptions

    def on_event(self, kind: EventKind, callback: EventCallback) -> None:
        self.events.on_event(kind, callback)

    def on_any(self, callback: EventCallback) -> None:
        self.events.on_any(callback)

    def set_policy(self, name: str, **options) -> None:
        self._ensure_idle()
        self.scheduler.policy = get_policy(name, **options)
        self.policy_name = name.lower()

    # Boarding

    def board_passengers(self, requests: Iterable[PassengerRequest]) -> BoardingResult:
        """Board a batch as a whole or not at all, then register destinations.

        Malformed records raise before anything changes. A batch over either
        limit is rejected in full. Records whose floor is out of range or equal
        to the current floor are skipped and reported; the rest board.
        """

        self._ensure_idle()
        batch = list(requests)
        seen = set()
        for request in batch:
            validate_record(request.passenger_id, request.weight)
            if request.passenger_id in seen or request.passenger_id in self.registry:
                raise DuplicatePassenger(f"Passenger {request.passenger_id} is already on board")
            seen.add(request.passenger_id)

        result = BoardingResult()
        if not batch:
            return result

        count = len(batch)
        total_weight = sum(request.weight for request in batch)
        reason = self.guard.rejection_reason(count, total_weight)
        if reason is not None:
            if reason == "capacity":
                message = f"Cannot add {count} passengers. Would exceed capacity of {self.capacity}"
            else:
                message = (
                    f"Cannot add passengers. Would exceed weight limit "
                    f"({self.current_weight:.1f} + {total_weight:.1f} > {self.max_weight:.1f} lbs)"
                )
            result.rejected = {request.passenger_id: reason for request in batch}
            self.events.emit(
                EventKind.BOARDING_REJECTED,
                message,
                reason=reason,
                count=count,
                total_weight=total_weight,
                current_load=self.current_load,
                current_weight=self.current_weight,
                capacity=self.capacity,
                max_weight=self.max_weight,
            )
            return result

        for request in batch:
            try:
                passenger = self.registry.register(
                    request.passenger_id, request.destination, request.weight, self.current_floor
                )
            except (InvalidFloor, AlreadyArrived) as exc:
                result.rejected[request.passenger_id] = str(exc)
                self.events.emit(
                    EventKind.REGISTRATION_REJECTED,
                    str(exc),
                    passenger_id=request.passenger_id,
                    destination=request.destination,
                    reason=type(exc).__name__,
                )
                continue
            self.guard.board(1, passenger.weight)
            result.accepted.append(passenger.passenger_id)
            self.events.emit(
                EventKind.PASSENGER_REGISTERED,
                f"Passenger {passenger.passenger_id} ({passenger.weight:.1f} lbs) "
                f"wants floor {passenger.destination}",
                passenger_id=passenger.passenger_id,
                destination=passenger.destination,
                weight=passenger.weight,
            )

        if result.accepted:
            self._emit_load(EventKind.BOARDING_SUMMARY, f"{len(result.accepted)} passengers entered.")
        return result

    def add_passenger(self, passenger_id: int, destination: int, weight: float) -> bool:
        result = self.board_passengers([PassengerRequest(passenger_id, destination, weight)])
        return result.boarded

    # Journey

    def start_journey(self) -> bool:
        """Run one journey to completion. Returns True if every stop was served."""

        self._ensure_idle()
        if self.registry.is_empty():
            self.events.emit(EventKind.NO_DESTINATIONS, "No destinations requested.")
            return False

        self._journey += 1
        journey = self._journey
        self._running = True
        logger.debug("Journey %d starting at floor %d with %d passengers", journey, self.current_floor, len(self.registry))
        try:
            return self._run_journey(journey)
        finally:
            self._running = False

    def _run_journey(self, journey: int) -> bool:
        destinations = self.registry.all_destinations()
        direction = self.scheduler.organize_stops(destinations, self.current_floor)
        self.events.emit(
            EventKind.JOURNEY_PLANNED,
            f"All destination floors: {[destinations[pid] for pid in sorted(destinations)]}; "
            f"initial direction: {direction.value}",
            destinations=dict(destinations),
            direction=direction.value,
        )
        if self._interrupted(journey):
            return False

        if direction is Direction.IDLE:
            self.direction = Direction.IDLE
            self.motion_state = MotionState.STOPPED
            self.events.emit(
                EventKind.JOURNEY_STRANDED,
                f"No direction chosen; {len(self.registry)} passengers remain on board",
                pending=sorted(destinations),
            )
            return False

        return self._process_stops(journey)

    def _process_stops(self, journey: int) -> bool:
        self.direction = self.scheduler.direction
        self.motion_state = MotionState.MOVING
        self.events.emit(
            EventKind.JOURNEY_STARTED,
            f"Going {self.direction.value}, stops: {self.pending_stops}",
            direction=self.direction.value,
            stops=self.pending_stops,
        )
        if self._interrupted(journey):
            return False

        while self.scheduler.has_stops():
            target = self.scheduler.next_stop()
            if not self._move_to(target, journey):
                return False
            if not self._stop_and_unload(target, journey):
                return False
            if self.scheduler.has_stops():
                self.motion_state = MotionState.MOVING

        self.direction = Direction.IDLE
        self.motion_state = MotionState.STOPPED
        self.events.emit(
            EventKind.JOURNEY_COMPLETED,
            "All passengers delivered!",
            floor=self.current_floor,
            remaining=len(self.registry),
        )
        return True

    def _move_to(self, target: int, journey: int) -> bool:
        step = 1 if target > self.current_floor else -1
        while self.current_floor != target:
            self.current_floor = self.config.clamp(self.current_floor + step)
            self.events.emit(
                EventKind.FLOOR_PASSED, f"Passing floor {self.current_floor}...", floor=self.current_floor
            )
            self.pacer.pause(self.pacing.floor_travel_s)
            if self._interrupted(journey):
                return False
        return True

    def _stop_and_unload(self, floor: int, journey: int) -> bool:
        self.motion_state = MotionState.STOPPED
        self.events.emit(EventKind.ARRIVED, f"ARRIVED at floor {floor}", floor=floor)
        if self._interrupted(journey):
            return False

        self.motion_state = MotionState.DOORS_OPEN
        self.events.emit(EventKind.DOORS_OPENED, "Doors opening...", floor=floor)
        if self._interrupted(journey):
            return False

        exiting = self.registry.passengers_at(floor)
        for passenger_id in exiting:
            passenger = self.registry.remove(passenger_id)
            self.guard.unboard(passenger.weight)
            self.events.emit(
                EventKind.PASSENGER_EXITED,
                f"Person {passenger_id} exits ({passenger.weight:.1f} lbs)",
                passenger_id=passenger_id,
                floor=floor,
                weight=passenger.weight,
            )
            if self._interrupted(journey):
                return False
        if exiting:
            self._emit_load(EventKind.LOAD_SUMMARY, f"{len(exiting)} passengers left at floor {floor}.")

        self.pacer.pause(self.pacing.door_dwell_s)
        if self._interrupted(journey):
            return False
        self.motion_state = MotionState.DOORS_CLOSED
        self.events.emit(EventKind.DOORS_CLOSED, "Doors closing...", floor=floor)
        return not self._interrupted(journey)

    # Reset

    def emergency_stop(self) -> None:
        """Drop every stop and passenger and halt where the car is."""

        self._journey += 1
        self.scheduler.clear()
        discarded = self.registry.clear()
        self.guard.reset()
        self.direction = Direction.IDLE
        self.motion_state = MotionState.STOPPED
        self.events.emit(
            EventKind.EMERGENCY_STOP,
            f"EMERGENCY STOP activated at floor {self.current_floor}",
            floor=self.current_floor,
            discarded=discarded,
        )

    def _interrupted(self, journey: int) -> bool:
        return self._journey != journey

    def _ensure_idle(self) -> None:
        if self._running:
            raise CarBusy("A journey is in progress")

    def _emit_load(self, kind: EventKind, headline: str) -> None:
        self.events.emit(
            kind,
            f"{headline} Current load: {self.current_load}/{self.capacity} people, "
            f"current weight: {self.current_weight:.1f}/{self.max_weight:.1f} lbs",
            current_load=self.current_load,
            capacity=self.capacity,
            current_weight=self.current_weight,
            max_weight=self.max_weight,
        )
