from __future__ import annotations

from typing import List

import pytest

from cabin import Elevator, ElevatorConfig, ElevatorEvent, NullPacer, PacingConfig


class RecordingElevator:
    """Elevator plus the events it emitted, for assertions."""

    def __init__(self, **config) -> None:
        self.pacer = NullPacer()
        self.car = Elevator(config=ElevatorConfig(**config), pacing=PacingConfig(), pacer=self.pacer)
        self.events: List[ElevatorEvent] = []
        self.car.on_any(self.events.append)

    def kinds(self) -> List[str]:
        return [event.kind.value for event in self.events]

    def of_kind(self, kind) -> List[ElevatorEvent]:
        return [event for event in self.events if event.kind == kind]


@pytest.fixture
def make_car():
    return RecordingElevator


@pytest.fixture
def recorder(make_car):
    return make_car(min_floor=1, max_floor=10, capacity=8, max_weight=2000.0)
