from __future__ import annotations

import time
from typing import Protocol


class Pacer(Protocol):
    """Pauses between observable steps of a journey."""

    def pause(self, seconds: float) -> None:
        ...


class SleepPacer:
    """Blocks the calling thread; ``scale`` shortens or stretches every pause."""

    def __init__(self, scale: float = 1.0) -> None:
        self.scale = max(0.0, scale)

    def pause(self, seconds: float) -> None:
        delay = seconds * self.scale
        if delay > 0:
            time.sleep(delay)


class NullPacer:
    """Records requested pauses without waiting."""

    def __init__(self) -> None:
        self.total_paused: float = 0.0
        self.pauses: int = 0

    def pause(self, seconds: float) -> None:
        self.total_paused += seconds
        self.pauses += 1
