from __future__ import annotations

from typing import Dict, Type

from .first_passenger import FirstPassengerPolicy
from .interface import Direction, DirectionPolicy
from .nearest import NearestDestinationPolicy
from .stops import StopScheduler, StopSet

__all__ = [
    "Direction",
    "DirectionPolicy",
    "FirstPassengerPolicy",
    "NearestDestinationPolicy",
    "StopScheduler",
    "StopSet",
    "get_policy",
]


POLICY_REGISTRY: Dict[str, Type[DirectionPolicy]] = {
    "first_passenger": FirstPassengerPolicy,
    "nearest": NearestDestinationPolicy,
}


def get_policy(name: str, **kwargs) -> DirectionPolicy:
    cls = POLICY_REGISTRY.get(name.lower())
    if cls is None:
        raise ValueError(f"Unknown direction policy '{name}'. Available: {', '.join(POLICY_REGISTRY)}")
    return cls(**kwargs)
