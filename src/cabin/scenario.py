from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .config import ElevatorConfig, PacingConfig
from .elevator import Elevator
from .events import ElevatorEvent, EventKind
from .pacing import NullPacer, Pacer
from .passenger import PassengerRequest


@dataclass
class ScenarioResult:
    name: str
    description: Optional[str]
    events: List[ElevatorEvent] = field(default_factory=list)
    journeys_completed: int = 0
    final_state: Dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "scenario": self.name,
            "description": self.description,
            "journeys_completed": self.journeys_completed,
            "final_state": self.final_state,
            "events": [event.to_dict() for event in self.events],
        }


def build_elevator(config: Dict, pacer: Optional[Pacer] = None) -> Elevator:
    elevator_cfg = dict(config.get("elevator", {}))
    if "policy" in config:
        elevator_cfg.setdefault("direction_policy", config["policy"])
    return Elevator(
        config=ElevatorConfig.from_dict(elevator_cfg),
        pacing=PacingConfig.from_dict(config.get("pacing", {})),
        pacer=pacer if pacer is not None else NullPacer(),
    )


def _journey_batches(config: Dict) -> List[List[PassengerRequest]]:
    journeys = config.get("journeys")
    if journeys is None:
        journeys = [{"passengers": config.get("passengers", [])}]
    return [
        [PassengerRequest.from_dict(record) for record in journey.get("passengers", [])]
        for journey in journeys
    ]


def run_scenario(elevator: Elevator, config: Dict) -> ScenarioResult:
    """Board each batch and run a journey for it, collecting every event.

    ``emergency_stop_after`` triggers an emergency stop once the car has
    arrived at that many stops across the whole scenario.
    """

    result = ScenarioResult(name=config.get("name", "scenario"), description=config.get("description"))
    collect = result.events.append
    elevator.on_any(collect)

    stop_after = config.get("emergency_stop_after")
    if stop_after is not None:
        arrivals = {"count": 0}

        def _count_arrival(event: ElevatorEvent) -> None:
            arrivals["count"] += 1
            if arrivals["count"] == stop_after:
                elevator.emergency_stop()

        elevator.on_event(EventKind.ARRIVED, _count_arrival)

    try:
        for batch in _journey_batches(config):
            elevator.board_passengers(batch)
            if elevator.start_journey():
                result.journeys_completed += 1
    finally:
        elevator.events.remove_listener(collect)

    result.final_state = elevator.snapshot()
    return result
