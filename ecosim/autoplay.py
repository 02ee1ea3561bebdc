"""Headless play: drive a GameSession without a UI.

Used by ``main.py --headless`` for quick balance checks and by tests as a
full-game smoke run.
"""

import logging
from typing import Callable, List, Optional

from ecosim.catalog import TrophicLevel
from ecosim.engine import DayResult
from ecosim.session import GameSession
from ecosim.state_machine import GamePhase

logger = logging.getLogger(__name__)

_LEVEL_PRIORITY = {TrophicLevel.PRODUCER: 0, TrophicLevel.PRIMARY: 1, TrophicLevel.SECONDARY: 2}


def greedy_placements(session: GameSession) -> List[int]:
    """Place every offered species the preview says can be fed.

    Producers go first so the consumers placed after them see the new food.
    Each organism takes the lowest empty slot.

    Returns:
        Instance ids placed
    """
    placed: List[int] = []
    offered = sorted(
        session.offer.species_ids,
        key=lambda s: _LEVEL_PRIORITY[session.catalog.level_of(s)],
    )
    for species_id in offered:
        empty = session.store.empty_slots()
        if not empty:
            break
        if not session.preview_feedability(species_id).can_feed:
            continue
        placed.append(session.place_organism(species_id, empty[0]))
    return placed


def play_headless(
    session: GameSession,
    place: Callable[[GameSession], List[int]] = greedy_placements,
    on_day: Optional[Callable[[DayResult], None]] = None,
) -> bool:
    """Play a full game from day 1 to the end.

    Args:
        session: Session to drive; a new game is started on it
        place: Placement policy called once per day
        on_day: Optional callback receiving each day's result

    Returns:
        True if the game was won
    """
    session.start_new_game()
    while session.phase is not GamePhase.ENDED:
        placed = place(session)
        result = session.run_simulation()
        logger.info(
            f"Day {result.day:2d}: placed {len(placed)}, healthy {len(result.healthy_ids)}, "
            f"dead {len(result.dead_ids)}, score {session.total_score}"
        )
        if on_day is not None:
            on_day(result)
        session.proceed_to_next_day()
    assert session.won is not None
    return session.won
