"""Tests for the phase state machine."""

from enum import Enum, auto

import pytest

from ecosim.result import Err, Ok
from ecosim.state_machine import (
    GAME_PHASE_TRANSITIONS,
    GamePhase,
    StateMachine,
    create_game_phase_state_machine,
)


class Light(Enum):
    OFF = auto()
    ON = auto()


def test_day_cycle():
    machine = create_game_phase_state_machine()
    for phase in (GamePhase.PLACEMENT, GamePhase.SIMULATING, GamePhase.RESULTS, GamePhase.DRAFT):
        machine.transition(phase)
    assert machine.state is GamePhase.DRAFT


def test_results_can_end():
    machine = create_game_phase_state_machine()
    machine.force_state(GamePhase.RESULTS)
    machine.transition(GamePhase.ENDED)
    assert machine.get_valid_transitions() == []


def test_invalid_transition_raises():
    machine = create_game_phase_state_machine()
    with pytest.raises(ValueError, match="DRAFT -> RESULTS"):
        machine.transition(GamePhase.RESULTS)
    assert machine.state is GamePhase.DRAFT


def test_try_transition_returns_result():
    machine = create_game_phase_state_machine()
    assert machine.try_transition(GamePhase.PLACEMENT) == Ok(GamePhase.PLACEMENT)
    result = machine.try_transition(GamePhase.ENDED)
    assert isinstance(result, Err)
    assert result.is_err()
    with pytest.raises(ValueError):
        result.unwrap()


def test_history_tracking():
    machine = create_game_phase_state_machine(track_history=True)
    machine.transition(GamePhase.PLACEMENT, day=1, reason="draft ready")
    machine.force_state(GamePhase.ENDED, day=1, reason="restore")
    history = machine.history
    assert [(h.from_state, h.to_state) for h in history] == [
        (GamePhase.DRAFT, GamePhase.PLACEMENT),
        (GamePhase.PLACEMENT, GamePhase.ENDED),
    ]
    assert history[1].reason == "[FORCED] restore"


def test_history_is_bounded():
    machine = StateMachine(
        Light.OFF, {Light.OFF: [Light.ON], Light.ON: [Light.OFF]}, track_history=True, max_history=3
    )
    for _ in range(5):
        machine.transition(Light.ON)
        machine.transition(Light.OFF)
    assert len(machine.history) == 3


def test_initial_state_must_be_known():
    with pytest.raises(ValueError):
        StateMachine(Light.ON, {Light.OFF: []})


def test_every_phase_has_an_entry():
    assert set(GAME_PHASE_TRANSITIONS) == set(GamePhase)
