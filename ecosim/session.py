"""Game session controller: the day-by-day loop.

A GameSession owns one PopulationStore, one SimulationEngine and one
DraftGenerator, and drives them through the phase cycle

    DRAFT -> PLACEMENT -> SIMULATING -> RESULTS -> DRAFT ... -> ENDED

Rendering and input collaborators subscribe to ``session.event_bus`` and
call the command methods below. Every command checks the phase first and
raises InvalidPhaseError when issued at the wrong time.
"""

from __future__ import annotations

import dataclasses
import logging
import random
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ecosim.catalog import Catalog, TrophicLevel
from ecosim.config import GameConfig
from ecosim.draft import DraftGenerator, DraftOffer
from ecosim.engine import DayResult, FeedabilityPreview, SimulationEngine
from ecosim.events import DayChangedEvent, EventBus, GameOverEvent, SimulationCompleteEvent
from ecosim.exceptions import (
    CorruptSaveError,
    InvalidPhaseError,
    PlacementError,
    SpeciesNotOfferedError,
    UnknownSpeciesError,
)
from ecosim.population import PopulationStore
from ecosim.serializers import SessionState
from ecosim.state_machine import GamePhase, create_game_phase_state_machine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DaySummary:
    """One row of the results history."""

    day: int
    healthy: int
    dead: int
    score_delta: int

    def to_dict(self) -> Dict[str, int]:
        return dataclasses.asdict(self)


class GameSession:
    """Orchestrates draft, placement, simulation and scoring for one game.

    Example:
        session = GameSession(seed=7)
        session.start_new_game()
        session.place_organism(session.offer.species_ids[0], slot=0)
        result = session.run_simulation()
        session.proceed_to_next_day()
    """

    def __init__(
        self,
        catalog: Optional[Catalog] = None,
        config: Optional[GameConfig] = None,
        rng: Optional[random.Random] = None,
        seed: Optional[int] = None,
        event_bus: Optional[EventBus] = None,
    ) -> None:
        self.config = (config or GameConfig()).validate()
        self.catalog = catalog or Catalog.default()
        self.event_bus = event_bus or EventBus()
        self.rng = rng or random.Random(seed)

        self.store = PopulationStore(self.catalog, self.config, self.event_bus)
        self.engine = SimulationEngine(self.catalog, self.config)
        self.drafts = DraftGenerator(self.catalog, self.config, self.rng)
        self._phases = create_game_phase_state_machine(track_history=True)

        self.current_day = 1
        self.total_score = 0
        self.active = False
        self.won: Optional[bool] = None
        self.offer = DraftOffer()
        self.last_result: Optional[DayResult] = None
        self.day_history: List[DaySummary] = []
        self._game_over_emitted = False

    @property
    def phase(self) -> GamePhase:
        return self._phases.state

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def start_new_game(self) -> None:
        """Reset everything and open day 1 with a fresh draft."""
        self.store.clear()
        self.engine.discard_staged()
        self.current_day = 1
        self.total_score = 0
        self.active = True
        self.won = None
        self.last_result = None
        self.day_history = []
        self._game_over_emitted = False
        self._phases.force_state(GamePhase.DRAFT, day=1, reason="new game")

        logger.info(f"New game started ({self.config.total_days} days)")
        self.event_bus.emit(DayChangedEvent(day=self.current_day))
        self._open_draft()

    def place_organism(self, species_id: str, slot: int) -> int:
        """Place an offered species into a slot.

        Returns:
            The new organism's instance id

        Raises:
            InvalidPhaseError: Outside the placement phase
            UnknownSpeciesError: If the species is not in the catalog
            SpeciesNotOfferedError: If today's draft does not offer it
            SlotOccupiedError: If the slot is taken (offer left unchanged)
            SlotOutOfRangeError: If the slot is outside the grid
        """
        self._require_phase(GamePhase.PLACEMENT, "place an organism")
        self.catalog.lookup(species_id)
        if species_id not in self.offer:
            raise SpeciesNotOfferedError(species_id)
        try:
            instance_id = self.store.place(species_id, slot, day=self.current_day)
        except PlacementError as e:
            logger.warning(f"Placement rejected: {e}")
            raise
        self.offer.take(species_id)
        return instance_id

    def preview_feedability(self, species_id: str) -> FeedabilityPreview:
        """Would one more ``species_id`` be fed? Changes nothing."""
        return self.engine.preview_feedability(self.store, species_id)

    def run_simulation(self) -> DayResult:
        """Simulate the current day and add its score.

        Deaths are staged, not removed; call ``commit_deaths()`` once the
        death animations have played.

        Raises:
            InvalidPhaseError: Outside the placement phase
        """
        self._require_phase(GamePhase.PLACEMENT, "run the simulation")
        self._phases.transition(GamePhase.SIMULATING, day=self.current_day)

        result = self.engine.run_day(self.store, day=self.current_day)
        before = self.total_score
        self.total_score += result.score_delta
        assert self.total_score >= before, "Score must never decrease"

        self.last_result = result
        self.day_history.append(
            DaySummary(
                day=self.current_day,
                healthy=len(result.healthy_ids),
                dead=len(result.dead_ids),
                score_delta=result.score_delta,
            )
        )
        self._phases.transition(GamePhase.RESULTS, day=self.current_day)

        logger.info(
            f"Day {self.current_day} simulated: {len(result.healthy_ids)} healthy, "
            f"{len(result.dead_ids)} dead, +{result.score_delta} (total {self.total_score})"
        )
        self.event_bus.emit(SimulationCompleteEvent(result=result))
        return result

    def commit_deaths(self) -> List[int]:
        """Remove the organisms that died in the last simulation.

        Returns:
            Instance ids removed (empty on a repeat call)
        """
        self._require_phase(GamePhase.RESULTS, "commit deaths")
        return self.engine.commit_deaths(self.store)

    def advance_day(self) -> GamePhase:
        """Move to the next day, or end the game after the final day.

        Any deaths still staged are committed first, so the win check sees
        the post-death population.

        Returns:
            The phase after advancing (PLACEMENT or ENDED)
        """
        self._require_phase(GamePhase.RESULTS, "advance the day")
        if self.engine.staged_deaths:
            self.engine.commit_deaths(self.store)

        self.current_day += 1
        assert 1 <= self.current_day <= self.config.total_days + 1, "Day counter out of range"

        if self.current_day > self.config.total_days:
            self._end_game()
            return self.phase

        self._phases.transition(GamePhase.DRAFT, day=self.current_day)
        logger.info(f"Day {self.current_day} begins")
        self.event_bus.emit(DayChangedEvent(day=self.current_day))
        self._open_draft()
        return self.phase

    def proceed_to_next_day(self) -> GamePhase:
        """Commit the day's deaths and advance."""
        self.commit_deaths()
        return self.advance_day()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def evaluate_win(self) -> bool:
        """True when every trophic level still has a living organism."""
        counts = self.store.level_counts()
        return all(counts[level] > 0 for level in TrophicLevel)

    def to_dict(self) -> Dict[str, Any]:
        """Full view of the session for the UI."""
        return {
            "day": self.current_day,
            "total_days": self.config.total_days,
            "phase": self.phase.value,
            "active": self.active,
            "won": self.won,
            "score": self.total_score,
            "draft": self.offer.species_ids,
            "organisms": [
                {
                    "instance_id": o.instance_id,
                    "species_id": o.species_id,
                    "trophic_level": self.catalog.level_of(o.species_id).value,
                    "slot": o.slot,
                    "health": o.health.value,
                    "day_added": o.day_added,
                }
                for o in self.store.all_instances()
            ],
            "level_counts": {
                level.value: count for level, count in self.store.level_counts().items()
            },
            "empty_slots": len(self.store.empty_slots()),
            "last_result": self.last_result.to_dict() if self.last_result else None,
            "history": [row.to_dict() for row in self.day_history],
        }

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def capture_state(self) -> SessionState:
        """Snapshot the session for the save store."""
        return SessionState(
            current_day=self.current_day,
            total_score=self.total_score,
            active=self.active,
            next_instance_id=self.store.next_instance_id,
            organisms=tuple(dataclasses.replace(o) for o in self.store.all_instances()),
            occupied_slots=self.store.occupied_slots(),
            phase=self.phase,
            draft=tuple(self.offer.species_ids),
            last_result=self.last_result if self.phase is GamePhase.RESULTS else None,
        )

    def restore(self, state: SessionState) -> None:
        """Resume a previously captured session.

        No add/remove notifications are emitted; the UI should redraw from
        ``to_dict()``. A session saved on its results screen comes back with
        the day result it played, any uncommitted dead still staged and its
        score already counted.

        Raises:
            CorruptSaveError: If the state cannot describe a reachable game
        """
        if not 1 <= state.current_day <= self.config.total_days + 1:
            raise CorruptSaveError(f"Day {state.current_day} out of range")
        if state.active == (state.current_day > self.config.total_days):
            raise CorruptSaveError("Active flag disagrees with the day counter")
        unknown = [species_id for species_id in state.draft if species_id not in self.catalog]
        if unknown:
            raise CorruptSaveError(f"Draft offers unknown species: {unknown}")

        try:
            self.store.restore(
                (dataclasses.replace(o) for o in state.organisms), state.next_instance_id
            )
        except (PlacementError, UnknownSpeciesError, ValueError) as e:
            raise CorruptSaveError(f"Saved population is invalid: {e}") from e

        self.current_day = state.current_day
        self.total_score = state.total_score
        self.active = state.active
        self.last_result = None
        self.day_history = []
        self.engine.discard_staged()

        if not state.active:
            self.won = self.evaluate_win()
            self._game_over_emitted = True
            self.offer = DraftOffer()
            self._phases.force_state(GamePhase.ENDED, day=self.current_day, reason="restore")
        elif state.phase is GamePhase.RESULTS:
            self.won = None
            self._game_over_emitted = False
            self.offer = DraftOffer()
            self.last_result = state.last_result
            self.engine.stage_deaths([o.instance_id for o in self.store.all_instances() if o.is_dead])
            self._phases.force_state(GamePhase.RESULTS, day=self.current_day, reason="restore")
        else:
            self.won = None
            self._game_over_emitted = False
            self._phases.force_state(GamePhase.DRAFT, day=self.current_day, reason="restore")
            if state.draft:
                self.offer = DraftOffer(state.draft)
                self._phases.transition(GamePhase.PLACEMENT, day=self.current_day)
            else:
                self._open_draft()

        logger.info(
            f"Restored session at day {self.current_day} ({self.phase.value}), "
            f"{len(self.store)} organisms, score {self.total_score}"
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _open_draft(self) -> None:
        self.offer = self.drafts.new_offer()
        self._phases.transition(GamePhase.PLACEMENT, day=self.current_day)

    def _end_game(self) -> None:
        self._phases.transition(GamePhase.ENDED, day=self.current_day)
        self.active = False
        self.offer = DraftOffer()
        self.won = self.evaluate_win()
        logger.info(f"Game over: {'won' if self.won else 'lost'} with score {self.total_score}")
        if not self._game_over_emitted:
            self._game_over_emitted = True
            self.event_bus.emit(GameOverEvent(won=self.won, score=self.total_score))

    def _require_phase(self, phase: GamePhase, action: str) -> None:
        if self.phase is not phase:
            raise InvalidPhaseError(
                f"Cannot {action} during {self.phase.value} (requires {phase.value})"
            )
