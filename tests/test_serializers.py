"""Tests for session snapshots and their save-blob encoding."""

import pytest

from ecosim.exceptions import CorruptSaveError
from ecosim.population import HealthStatus, OrganismInstance
from ecosim.serializers import SCHEMA_VERSION, SessionState
from ecosim.state_machine import GamePhase


@pytest.fixture
def state():
    return SessionState(
        current_day=4,
        total_score=70,
        active=True,
        next_instance_id=5,
        organisms=(
            OrganismInstance(1, "grass", 0, HealthStatus.HEALTHY, 1),
            OrganismInstance(3, "rabbit", 12, HealthStatus.DEAD, 3),
        ),
        occupied_slots={0: 1, 12: 3},
        phase=GamePhase.RESULTS,
        draft=(),
    )


def test_blob_shape(state):
    blob = state.to_dict()
    assert blob["version"] == SCHEMA_VERSION
    assert blob["currentDay"] == 4
    assert blob["nextInstanceId"] == 5
    assert blob["occupiedSlots"] == {"0": 1, "12": 3}
    assert blob["organisms"][1] == {
        "instanceId": 3,
        "speciesId": "rabbit",
        "slot": 12,
        "health": "dead",
        "dayAdded": 3,
    }


def test_round_trip(state):
    assert SessionState.from_dict(state.to_dict()) == state


def test_round_trip_from_live_session(session, populate):
    populate(session.store, producers=3, primaries=2)
    session.run_simulation()
    captured = session.capture_state()
    assert SessionState.from_dict(captured.to_dict()) == captured


def test_day_result_round_trip(session, populate):
    populate(session.store, producers=3, primaries=4, secondaries=1)
    played = session.run_simulation()
    blob = session.capture_state().to_dict()

    assert blob["lastResult"]["deadIds"] == list(played.dead_ids)
    assert blob["lastResult"]["scoreDelta"] == 20
    assert blob["lastResult"]["levelCounts"] == {"producer": 3, "primary": 4, "secondary": 1}
    assert SessionState.from_dict(blob).last_result == played


def test_missing_optional_fields_default(state):
    blob = state.to_dict()
    del blob["phase"]
    del blob["draft"]
    del blob["version"]
    loaded = SessionState.from_dict(blob)
    assert loaded.phase is GamePhase.PLACEMENT
    assert loaded.draft == ()


@pytest.mark.parametrize(
    "mutate",
    [
        lambda b: b.pop("currentDay"),
        lambda b: b.update(totalScore="lots"),
        lambda b: b.update(active="yes"),
        lambda b: b.update(phase="lunch"),
        lambda b: b["organisms"][0].update(health="zombie"),
        lambda b: b["organisms"][0].pop("speciesId"),
        lambda b: b.update(occupiedSlots={"0": 1}),
        lambda b: b.update(occupiedSlots={"zero": 1, "12": 3}),
        lambda b: b.update(totalScore=-5),
        lambda b: b.update(organisms=None),
        lambda b: b.update(draft=[1, 2]),
        lambda b: b.update(draft="grass"),
        lambda b: b.update(lastResult={"day": 4}),
        lambda b: b.update(lastResult="played"),
        lambda b: b.update(
            lastResult={"day": 4, "healthyIds": [1], "deadIds": [3], "scoreDelta": 0,
                        "links": [[3]], "levelCounts": {}}
        ),
        lambda b: b.update(
            lastResult={"day": 4, "healthyIds": [1], "deadIds": [3], "scoreDelta": 0,
                        "levelCounts": {"decomposer": 1}}
        ),
    ],
)
def test_corrupt_blobs_rejected(state, mutate):
    blob = state.to_dict()
    mutate(blob)
    with pytest.raises(CorruptSaveError):
        SessionState.from_dict(blob)


def test_non_object_rejected():
    with pytest.raises(CorruptSaveError):
        SessionState.from_dict(["not", "a", "save"])
