"""Session registry for hosting several games in one server.

Each hosted game gets a GameHandle: the GameSession plus an event recorder
subscribed to its bus. Routes drain the recorder after every command so the
response carries the notifications that command produced, in order.
"""

import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ecosim.catalog import Catalog
from ecosim.config import GameConfig
from ecosim.events import event_to_dict
from ecosim.session import GameSession

logger = logging.getLogger(__name__)


class EventRecorder:
    """Catch-all subscriber that buffers notifications as dicts."""

    def __init__(self) -> None:
        self._events: List[Dict[str, Any]] = []

    def __call__(self, event: object) -> None:
        self._events.append(event_to_dict(event))

    def drain(self) -> List[Dict[str, Any]]:
        events, self._events = self._events, []
        return events


@dataclass
class GameHandle:
    """A hosted game and its notification buffer."""

    session_id: str
    session: GameSession
    recorder: EventRecorder = field(default_factory=EventRecorder)
    seed: Optional[int] = None
    created_at: float = field(default_factory=time.time)

    def __post_init__(self) -> None:
        self.session.event_bus.subscribe_all(self.recorder)

    def drain_events(self) -> List[Dict[str, Any]]:
        return self.recorder.drain()

    def get_status(self) -> Dict[str, Any]:
        session = self.session
        return {
            "session_id": self.session_id,
            "day": session.current_day,
            "phase": session.phase.value,
            "active": session.active,
            "score": session.total_score,
            "organisms": len(session.store),
            "created_at": self.created_at,
        }


class SessionRegistry:
    """Creates, looks up and removes hosted games."""

    def __init__(self, catalog: Optional[Catalog] = None, config: Optional[GameConfig] = None):
        self.catalog = catalog or Catalog.default()
        self.config = config or GameConfig()
        self._games: Dict[str, GameHandle] = {}

    @property
    def game_count(self) -> int:
        return len(self._games)

    def create_game(
        self, seed: Optional[int] = None, session_id: Optional[str] = None, start: bool = True
    ) -> GameHandle:
        """Create a new hosted game.

        Args:
            seed: Optional RNG seed for reproducible drafts
            session_id: Optional explicit id (used when loading a save)
            start: Whether to call ``start_new_game()`` immediately
        """
        session_id = session_id or uuid.uuid4().hex[:12]
        if session_id in self._games:
            raise ValueError(f"Game {session_id} already exists")
        session = GameSession(catalog=self.catalog, config=self.config, seed=seed)
        handle = GameHandle(session_id=session_id, session=session, seed=seed)
        self._games[session_id] = handle
        if start:
            session.start_new_game()
        logger.info(f"Created game {session_id} (seed={seed})")
        return handle

    def get_game(self, session_id: str) -> Optional[GameHandle]:
        return self._games.get(session_id)

    def remove_game(self, session_id: str) -> bool:
        handle = self._games.pop(session_id, None)
        if handle is None:
            return False
        handle.session.event_bus.unsubscribe_all(handle.recorder)
        logger.info(f"Removed game {session_id}")
        return True

    def list_games(self) -> List[Dict[str, Any]]:
        return [handle.get_status() for handle in self._games.values()]

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._games

    def __len__(self) -> int:
        return len(self._games)

    def __iter__(self):
        return iter(self._games.values())
