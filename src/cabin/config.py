from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from dispatch import POLICY_REGISTRY

from .errors import ConfigError


@dataclass(frozen=True)
class ElevatorConfig:
    """Fixed physical limits of the car. Never mutated after construction."""

    min_floor: int = 1
    max_floor: int = 10
    capacity: int = 8
    max_weight: float = 2000.0
    home_floor: Optional[int] = None
    direction_policy: str = "first_passenger"

    def __post_init__(self) -> None:
        if self.min_floor >= self.max_floor:
            raise ConfigError("min_floor must be below max_floor")
        if self.capacity <= 0:
            raise ConfigError("capacity must be greater than 0")
        if self.max_weight <= 0:
            raise ConfigError("max_weight must be greater than 0")
        if self.home_floor is not None and not self.in_range(self.home_floor):
            raise ConfigError(f"home_floor {self.home_floor} outside {self.min_floor}-{self.max_floor}")
        if self.direction_policy.lower() not in POLICY_REGISTRY:
            raise ConfigError(f"Unknown direction policy '{self.direction_policy}'")

    @property
    def start_floor(self) -> int:
        """Floor the car starts on: ``home_floor`` or the ground floor clamped into range."""
        if self.home_floor is not None:
            return self.home_floor
        return self.clamp(1)

    def in_range(self, floor: int) -> bool:
        return self.min_floor <= floor <= self.max_floor

    def clamp(self, floor: int) -> int:
        return max(self.min_floor, min(self.max_floor, floor))

    @classmethod
    def from_dict(cls, data: Dict) -> "ElevatorConfig":
        if "num_floors" in data and "max_floor" not in data:
            min_floor = data.get("min_floor", 1)
            data = {**data, "max_floor": min_floor + data["num_floors"] - 1}
        return cls(
            min_floor=data.get("min_floor", 1),
            max_floor=data.get("max_floor", 10),
            capacity=data.get("capacity", 8),
            max_weight=float(data.get("max_weight", 2000.0)),
            home_floor=data.get("home_floor"),
            direction_policy=data.get("direction_policy", "first_passenger"),
        )


@dataclass(frozen=True)
class PacingConfig:
    """Pause lengths between floor moves and while the doors stay open."""

    floor_travel_s: float = 1.0
    door_dwell_s: float = 3.0

    def __post_init__(self) -> None:
        if self.floor_travel_s < 0 or self.door_dwell_s < 0:
            raise ConfigError("pacing delays cannot be negative")

    @classmethod
    def from_dict(cls, data: Dict) -> "PacingConfig":
        return cls(
            floor_travel_s=float(data.get("floor_travel_s", 1.0)),
            door_dwell_s=float(data.get("door_dwell_s", 3.0)),
        )
