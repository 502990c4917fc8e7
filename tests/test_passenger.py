import pytest

from cabin import (
    AlreadyArrived,
    DuplicatePassenger,
    ElevatorConfig,
    InvalidFloor,
    InvalidPassenger,
    PassengerRegistry,
    UnknownPassenger,
)


@pytest.fixture
def registry():
    return PassengerRegistry(ElevatorConfig(min_floor=1, max_floor=10))


def test_register_stores_passenger(registry):
    passenger = registry.register(4, 7, 180, current_floor=1)
    assert passenger.weight == 180.0
    assert 4 in registry
    assert len(registry) == 1
    assert registry.all_destinations() == {4: 7}


@pytest.mark.parametrize("floor", [0, 11, -3])
def test_out_of_range_floor_rejected(registry, floor):
    with pytest.raises(InvalidFloor) as info:
        registry.register(1, floor, 150, current_floor=1)
    assert info.value.floor == floor
    assert registry.is_empty()


def test_current_floor_is_already_arrived(registry):
    with pytest.raises(AlreadyArrived):
        registry.register(1, 3, 150, current_floor=3)
    assert registry.is_empty()


def test_bad_records_fail_fast(registry):
    with pytest.raises(InvalidPassenger):
        registry.register(0, 3, 150, current_floor=1)
    with pytest.raises(InvalidPassenger):
        registry.register(1, 3, 0, current_floor=1)
    registry.register(1, 3, 150, current_floor=1)
    with pytest.raises(DuplicatePassenger):
        registry.register(1, 4, 120, current_floor=1)


def test_passengers_at_sorted_by_id(registry):
    for pid in (9, 2, 5):
        registry.register(pid, 6, 100, current_floor=1)
    registry.register(3, 8, 100, current_floor=1)
    assert registry.passengers_at(6) == [2, 5, 9]
    assert registry.passengers_at(8) == [3]
    assert registry.passengers_at(2) == []


def test_remove_returns_passenger(registry):
    registry.register(1, 6, 142.5, current_floor=1)
    assert registry.remove(1).weight == 142.5
    assert registry.is_empty()
    with pytest.raises(UnknownPassenger):
        registry.remove(1)


def test_clear_reports_discarded(registry):
    registry.register(2, 6, 100, current_floor=1)
    registry.register(1, 4, 80, current_floor=1)
    assert registry.total_weight() == 180.0
    assert registry.clear() == [1, 2]
    assert registry.is_empty()
