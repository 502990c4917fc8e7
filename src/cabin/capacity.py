from __future__ import annotations

from typing import Optional

from .config import ElevatorConfig
from .errors import CapacityExceeded, WeightExceeded


class CapacityGuard:
    """Tracks occupancy and weight against the car's ceilings."""

    def __init__(self, config: ElevatorConfig) -> None:
        self.capacity = config.capacity
        self.max_weight = config.max_weight
        self.current_load: int = 0
        self.current_weight: float = 0.0

    def can_board(self, count: int, total_weight: float) -> bool:
        return self.rejection_reason(count, total_weight) is None

    def rejection_reason(self, count: int, total_weight: float) -> Optional[str]:
        if self.current_load + count > self.capacity:
            return "capacity"
        if self.current_weight + total_weight > self.max_weight:
            return "weight"
        return None

    def board(self, count: int, total_weight: float) -> None:
        """Apply a boarding. Callers check ``can_board`` first."""
        reason = self.rejection_reason(count, total_weight)
        if reason == "capacity":
            raise CapacityExceeded(
                f"Cannot add {count} passengers. Would exceed capacity of {self.capacity}"
            )
        if reason == "weight":
            raise WeightExceeded(
                f"Cannot add {total_weight:.1f} lbs. Would exceed weight limit of {self.max_weight:.1f}"
            )
        self.current_load += count
        self.current_weight += total_weight

    def unboard(self, weight: float) -> None:
        self.current_load = max(0, self.current_load - 1)
        self.current_weight = max(0.0, self.current_weight - weight)
        if self.current_load == 0:
            self.current_weight = 0.0

    def reset(self) -> None:
        self.current_load = 0
        self.current_weight = 0.0
