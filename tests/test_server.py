import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest
from fastapi.testclient import TestClient

from cabin import ElevatorConfig, NullPacer, PacingConfig
from server import app as app_module


class GatePacer:
    """Holds the journey thread on its first pause until released."""

    def __init__(self) -> None:
        self.entered = threading.Event()
        self.release = threading.Event()

    def pause(self, seconds: float) -> None:
        self.entered.set()
        self.release.wait(timeout=5)


@pytest.fixture
def serve(monkeypatch):
    def _serve(pacer):
        settings = app_module.ServerSettings(
            elevator=ElevatorConfig(min_floor=1, max_floor=10, capacity=8, max_weight=2000.0),
            pacing=PacingConfig(floor_travel_s=0.0, door_dwell_s=0.0),
        )
        monkeypatch.setattr(app_module, "manager", app_module.ElevatorManager(settings, pacer=pacer))
        return TestClient(app_module.app)

    return _serve


@pytest.fixture
def client(serve):
    with serve(NullPacer()) as test_client:
        yield test_client


def test_state_reports_idle_car(client):
    response = client.get("/state")
    assert response.status_code == 200
    elevator = response.json()["elevator"]
    assert elevator["current_floor"] == 1
    assert elevator["direction"] == "IDLE"
    assert elevator["motion_state"] == "STOPPED"
    assert elevator["policy"] == "first_passenger"


def test_board_and_run_journey(client):
    response = client.post(
        "/passengers",
        json={"passengers": [{"id": 1, "destination": 7, "weight": 180}, {"id": 2, "destination": 3, "weight": 160}]},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["accepted"] == [1, 2]
    assert body["elevator"]["current_load"] == 2
    assert body["elevator"]["current_weight"] == 340.0

    response = client.post("/journey")
    assert response.status_code == 200
    body = response.json()
    assert body["completed"] is True
    arrived = [event["data"]["floor"] for event in body["events"] if event["kind"] == "arrived"]
    assert arrived == [3, 7]
    assert body["elevator"]["current_floor"] == 7
    assert body["elevator"]["current_load"] == 0
    assert body["events"][-1]["kind"] == "journey_completed"


def test_over_capacity_batch_rejected(client):
    passengers = [{"id": pid, "destination": 5, "weight": 100} for pid in range(1, 10)]
    body = client.post("/passengers", json={"passengers": passengers}).json()
    assert body["accepted"] == []
    assert set(body["rejected"].values()) == {"capacity"}
    assert body["elevator"]["current_load"] == 0


def test_malformed_batch_is_bad_request(client):
    response = client.post("/passengers", json={"passengers": [{"id": 1, "destination": 5, "weight": -4}]})
    assert response.status_code == 400


def test_emergency_stop_clears_car(client):
    client.post("/passengers", json={"passengers": [{"id": 1, "destination": 4, "weight": 150}]})
    body = client.post("/emergency-stop").json()
    assert body["elevator"]["passengers"] == []
    assert body["elevator"]["current_load"] == 0
    assert body["elevator"]["direction"] == "IDLE"


def test_emergency_stop_during_journey(serve):
    pacer = GatePacer()
    with serve(pacer) as client, ThreadPoolExecutor(max_workers=2) as pool:
        client.post(
            "/passengers",
            json={"passengers": [{"id": 1, "destination": 6, "weight": 150}, {"id": 2, "destination": 8, "weight": 120}]},
        )
        journey = pool.submit(client.post, "/journey")
        assert pacer.entered.wait(timeout=5)

        stop = pool.submit(client.post, "/emergency-stop")
        deadline = time.monotonic() + 5
        while not app_module.manager._emergency_requested.is_set() and time.monotonic() < deadline:
            time.sleep(0.01)
        pacer.release.set()

        body = journey.result(timeout=10).json()
        stopped = stop.result(timeout=10).json()

    assert body["completed"] is False
    assert body["elevator"]["passengers"] == []
    assert body["elevator"]["current_load"] == 0
    kinds = [event["kind"] for event in body["events"]]
    assert kinds.count("emergency_stop") == 1
    assert "journey_completed" not in kinds
    assert stopped["in_journey"] is False
    assert stopped["elevator"]["passengers"] == []
    assert stopped["elevator"]["direction"] == "IDLE"


def test_policy_selection(client):
    body = client.post("/policy", json={"name": "nearest"}).json()
    assert body["elevator"]["policy"] == "nearest"
    assert client.post("/policy", json={"name": "zoned"}).status_code == 400


def test_websocket_streams_events(client):
    with client.websocket_connect("/ws/events") as websocket:
        initial = websocket.receive_json()
        assert initial["type"] == "state"
        client.post("/passengers", json={"passengers": [{"id": 1, "destination": 5, "weight": 150}]})
        message = websocket.receive_json()
        assert message["type"] == "event"
        assert message["kind"] == "passenger_registered"
        assert message["data"]["passenger_id"] == 1
