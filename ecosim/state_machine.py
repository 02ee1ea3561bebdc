"""State machine abstractions for explicit phase management.

This module provides tools for creating explicit state machines where:
- All valid states are enumerated
- Valid transitions are defined explicitly
- Invalid transitions are caught immediately (fail-fast)
- State history can be tracked for debugging

Usage:
------
    phases = create_game_phase_state_machine()
    phases.transition(GamePhase.PLACEMENT)  # OK
    phases.transition(GamePhase.ENDED)  # Raises! Can't go PLACEMENT -> ENDED
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Generic, List, TypeVar

from ecosim.result import Err, Ok, Result

# Type variable for state enum types
S = TypeVar("S", bound=Enum)


@dataclass
class StateTransition(Generic[S]):
    """Record of a state transition for debugging.

    Attributes:
        from_state: The state before transition
        to_state: The state after transition
        day: The game day when the transition occurred
        reason: Optional description of why transition happened
    """

    from_state: S
    to_state: S
    day: int
    reason: str = ""


class StateMachine(Generic[S]):
    """A generic state machine with explicit transition validation.

    Example:
        class LightState(Enum):
            OFF = auto()
            ON = auto()

        light = StateMachine(LightState.OFF, {LightState.OFF: [LightState.ON],
                                              LightState.ON: [LightState.OFF]})
        light.transition(LightState.ON)
    """

    def __init__(
        self,
        initial_state: S,
        valid_transitions: Dict[S, List[S]],
        track_history: bool = False,
        max_history: int = 100,
    ) -> None:
        """Initialize the state machine.

        Args:
            initial_state: The starting state
            valid_transitions: Map of state -> list of valid target states
            track_history: Whether to record transition history
            max_history: Maximum number of transitions to keep in history
        """
        self._state = initial_state
        self._transitions = valid_transitions
        self._track_history = track_history
        self._max_history = max_history
        self._history: List[StateTransition[S]] = []

        if initial_state not in valid_transitions:
            raise ValueError(
                f"Initial state {initial_state} not in valid_transitions. "
                f"Valid states: {list(valid_transitions.keys())}"
            )

    @property
    def state(self) -> S:
        """Get the current state."""
        return self._state

    @property
    def history(self) -> List[StateTransition[S]]:
        """Get transition history (empty if tracking disabled)."""
        return self._history.copy()

    def can_transition(self, target: S) -> bool:
        return target in self._transitions.get(self._state, [])

    def try_transition(self, target: S, day: int = 0, reason: str = "") -> Result[S, str]:
        """Attempt to transition to a new state.

        Returns:
            Ok(new_state) if successful, Err(message) if invalid
        """
        if not self.can_transition(target):
            valid_targets = self._transitions.get(self._state, [])
            return Err(
                f"Invalid transition: {self._state.name} -> {target.name}. "
                f"Valid targets from {self._state.name}: {[t.name for t in valid_targets]}"
            )

        old_state = self._state
        self._state = target

        if self._track_history:
            self._record_transition(old_state, target, day, reason)

        return Ok(target)

    def transition(self, target: S, day: int = 0, reason: str = "") -> S:
        """Transition to a new state, raising on invalid transition.

        Use this when an invalid transition is a programming error that
        should never happen. Use try_transition() when the transition
        might legitimately fail.

        Raises:
            ValueError: If the transition is invalid
        """
        result = self.try_transition(target, day, reason)
        if result.is_err():
            raise ValueError(result.error)
        return result.unwrap()

    def force_state(self, state: S, day: int = 0, reason: str = "forced") -> None:
        """Force a state change without validation.

        Only for loading saved state, resets and tests.
        """
        old_state = self._state
        self._state = state

        if self._track_history:
            self._record_transition(old_state, state, day, f"[FORCED] {reason}")

    def _record_transition(self, from_state: S, to_state: S, day: int, reason: str) -> None:
        self._history.append(
            StateTransition(from_state=from_state, to_state=to_state, day=day, reason=reason)
        )
        if len(self._history) > self._max_history:
            self._history = self._history[-self._max_history :]

    def get_valid_transitions(self) -> List[S]:
        return list(self._transitions.get(self._state, []))

    def __repr__(self) -> str:
        return f"StateMachine(state={self._state.name})"


# ============================================================================
# Game Phase State Machine
# ============================================================================


class GamePhase(Enum):
    """Phases of one game day, plus the terminal state."""

    DRAFT = "draft"  # Offer being generated
    PLACEMENT = "placement"  # Player places organisms from the offer
    SIMULATING = "simulating"  # Feeding allocation running
    RESULTS = "results"  # Outcome shown; deaths staged until committed
    ENDED = "ended"  # Final day passed


GAME_PHASE_TRANSITIONS: Dict[GamePhase, List[GamePhase]] = {
    GamePhase.DRAFT: [GamePhase.PLACEMENT],
    GamePhase.PLACEMENT: [GamePhase.SIMULATING],
    GamePhase.SIMULATING: [GamePhase.RESULTS],
    GamePhase.RESULTS: [GamePhase.DRAFT, GamePhase.ENDED],
    GamePhase.ENDED: [],  # Terminal; start_new_game forces DRAFT
}


def create_game_phase_state_machine(track_history: bool = False) -> StateMachine[GamePhase]:
    """Create a state machine for the day cycle.

    Args:
        track_history: Whether to track transition history (useful for debugging)
    """
    return StateMachine(
        initial_state=GamePhase.DRAFT,
        valid_transitions=GAME_PHASE_TRANSITIONS,
        track_history=track_history,
    )
