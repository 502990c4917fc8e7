from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import os
import threading
from dataclasses import dataclass
from typing import Dict, List, Optional, Set

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from cabin import (
    CarBusy,
    Elevator,
    ElevatorConfig,
    ElevatorError,
    ElevatorEvent,
    EventKind,
    InvalidPassenger,
    Pacer,
    PacingConfig,
    PassengerRequest,
    SleepPacer,
)

logger = logging.getLogger(__name__)


class PassengerRecord(BaseModel):
    id: int
    destination: int
    weight: float


class BoardingRequest(BaseModel):
    passengers: List[PassengerRecord] = Field(default_factory=list)


class PolicySelection(BaseModel):
    name: str
    options: Dict[str, object] = {}


@dataclass(frozen=True)
class ServerSettings:
    elevator: ElevatorConfig
    pacing: PacingConfig

    @classmethod
    def from_env(cls) -> "ServerSettings":
        load_dotenv()
        elevator = ElevatorConfig(
            min_floor=int(os.getenv("LIFT_MIN_FLOOR", 1)),
            max_floor=int(os.getenv("LIFT_MAX_FLOOR", 10)),
            capacity=int(os.getenv("LIFT_CAPACITY", 8)),
            max_weight=float(os.getenv("LIFT_MAX_WEIGHT", 2000.0)),
            direction_policy=os.getenv("LIFT_POLICY", "first_passenger"),
        )
        pacing = PacingConfig(
            floor_travel_s=float(os.getenv("LIFT_FLOOR_TRAVEL_S", 1.0)),
            door_dwell_s=float(os.getenv("LIFT_DOOR_DWELL_S", 3.0)),
        )
        return cls(elevator=elevator, pacing=pacing)


class ElevatorManager:
    """Serializes commands to one car and streams its events to websocket clients.

    Journeys run in a worker thread while holding the lock. An emergency stop
    requested mid-journey is applied from that same thread at the next event.
    """

    def __init__(self, settings: ServerSettings, pacer: Optional[Pacer] = None) -> None:
        self.elevator = Elevator(
            config=settings.elevator,
            pacing=settings.pacing,
            pacer=pacer if pacer is not None else SleepPacer(),
        )
        self.elevator.on_any(self._forward)
        self.clients: Set[WebSocket] = set()
        self._task: Optional[asyncio.Task] = None
        self._lock = asyncio.Lock()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._queue: Optional[asyncio.Queue] = None
        self._emergency_requested = threading.Event()

    async def start(self) -> None:
        if self._task is None:
            self._loop = asyncio.get_running_loop()
            self._queue = asyncio.Queue()
            self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        if self._task:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None
        self._loop = None
        self._queue = None

    async def _run(self) -> None:
        while True:
            event = await self._queue.get()
            await self.broadcast({"type": "event", **event.to_dict()})

    def _forward(self, event: ElevatorEvent) -> None:
        if self._loop is not None and self._queue is not None:
            self._loop.call_soon_threadsafe(self._queue.put_nowait, event)
        if (
            self._emergency_requested.is_set()
            and self.elevator.in_journey
            and event.kind is not EventKind.EMERGENCY_STOP
        ):
            self._emergency_requested.clear()
            self.elevator.emergency_stop()

    async def broadcast(self, payload: dict) -> None:
        message = json.dumps(payload)
        disconnected: Set[WebSocket] = set()
        for client in set(self.clients):
            try:
                await client.send_text(message)
            except WebSocketDisconnect:
                disconnected.add(client)
        for client in disconnected:
            await self.unregister(client)

    async def register(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self.clients.add(websocket)
        logger.info("Websocket client connected (%d total)", len(self.clients))
        await websocket.send_text(json.dumps({"type": "state", **self.current_state()}))

    async def unregister(self, websocket: WebSocket) -> None:
        if websocket in self.clients:
            self.clients.remove(websocket)
            logger.info("Websocket client disconnected (%d total)", len(self.clients))
        with contextlib.suppress(Exception):
            await websocket.close()

    def current_state(self) -> dict:
        return {
            "elevator": self.elevator.snapshot(),
            "in_journey": self.elevator.in_journey,
        }

    async def board(self, requests: List[PassengerRequest]) -> dict:
        async with self._lock:
            result = self.elevator.board_passengers(requests)
            state = self.current_state()
            state["accepted"] = result.accepted
            state["rejected"] = {str(pid): reason for pid, reason in result.rejected.items()}
            return state

    async def run_journey(self) -> dict:
        async with self._lock:
            events: List[ElevatorEvent] = []
            collect = events.append
            self.elevator.on_any(collect)
            try:
                completed = await asyncio.to_thread(self.elevator.start_journey)
            finally:
                self.elevator.events.remove_listener(collect)
            state = self.current_state()
            state["completed"] = completed
            state["events"] = [event.to_dict() for event in sorted(events, key=lambda e: e.sequence)]
            return state

    async def emergency_stop(self) -> dict:
        requested = self.elevator.in_journey
        if requested:
            logger.warning("Emergency stop requested during a journey")
            self._emergency_requested.set()
        async with self._lock:
            # The journey thread already applied it unless it finished first
            if not requested or self._emergency_requested.is_set():
                self._emergency_requested.clear()
                self.elevator.emergency_stop()
            return self.current_state()

    async def set_policy(self, name: str, options: Dict[str, object]) -> dict:
        async with self._lock:
            self.elevator.set_policy(name, **options)
            return self.current_state()


manager = ElevatorManager(ServerSettings.from_env())
app = FastAPI(title="Single-car Elevator API")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def on_startup() -> None:
    await manager.start()


@app.on_event("shutdown")
async def on_shutdown() -> None:
    await manager.stop()


@app.get("/state")
async def get_state() -> dict:
    return manager.current_state()


@app.post("/passengers")
async def board_passengers(request: BoardingRequest) -> dict:
    records = [PassengerRequest(p.id, p.destination, p.weight) for p in request.passengers]
    try:
        return await manager.board(records)
    except InvalidPassenger as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except CarBusy as exc:
        raise HTTPException(status_code=409, detail=str(exc))


@app.post("/journey")
async def start_journey() -> dict:
    try:
        return await manager.run_journey()
    except CarBusy as exc:
        raise HTTPException(status_code=409, detail=str(exc))


@app.post("/emergency-stop")
async def emergency_stop() -> dict:
    return await manager.emergency_stop()


@app.post("/policy")
async def set_policy(selection: PolicySelection) -> dict:
    try:
        return await manager.set_policy(selection.name, selection.options)
    except (ValueError, TypeError) as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except ElevatorError as exc:
        raise HTTPException(status_code=409, detail=str(exc))


@app.websocket("/ws/events")
async def websocket_endpoint(websocket: WebSocket) -> None:
    await manager.register(websocket)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        await manager.unregister(websocket)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("server.app:app", host="0.0.0.0", port=8000, reload=False)
