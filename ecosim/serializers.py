"""Session state snapshots and their save-blob encoding.

The blob shape is what the persistence collaborator stores:

    {
        "version": "1.0",
        "currentDay": 4,
        "totalScore": 120,
        "active": true,
        "nextInstanceId": 9,
        "phase": "placement",
        "draft": ["grass", "fox", ...],
        "organisms": [
            {"instanceId": 1, "speciesId": "grass", "slot": 0,
             "health": "healthy", "dayAdded": 1},
            ...
        ],
        "occupiedSlots": {"0": 1, ...},
        "lastResult": null
    }

Slot keys are strings because the blob goes through JSON. ``lastResult`` is
only set for saves taken on the results screen; it holds the day result as it
was played, since the dead may already have been removed from the store.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from ecosim.catalog import TrophicLevel
from ecosim.engine import DayResult, FoodLink
from ecosim.exceptions import CorruptSaveError
from ecosim.population import HealthStatus, OrganismInstance
from ecosim.state_machine import GamePhase

logger = logging.getLogger(__name__)

SCHEMA_VERSION = "1.0"


@dataclass(frozen=True)
class SessionState:
    """Everything needed to resume a game."""

    current_day: int
    total_score: int
    active: bool
    next_instance_id: int
    organisms: Tuple[OrganismInstance, ...] = ()
    occupied_slots: Dict[int, int] = field(default_factory=dict)
    phase: GamePhase = GamePhase.PLACEMENT
    draft: Tuple[str, ...] = ()
    last_result: Optional[DayResult] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": SCHEMA_VERSION,
            "currentDay": self.current_day,
            "totalScore": self.total_score,
            "active": self.active,
            "nextInstanceId": self.next_instance_id,
            "phase": self.phase.value,
            "draft": list(self.draft),
            "organisms": [
                {
                    "instanceId": o.instance_id,
                    "speciesId": o.species_id,
                    "slot": o.slot,
                    "health": o.health.value,
                    "dayAdded": o.day_added,
                }
                for o in self.organisms
            ],
            "occupiedSlots": {str(slot): iid for slot, iid in sorted(self.occupied_slots.items())},
            "lastResult": _result_to_blob(self.last_result) if self.last_result else None,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "SessionState":
        """Decode a save blob.

        Raises:
            CorruptSaveError: If fields are missing, mistyped or inconsistent
        """
        if not isinstance(data, dict):
            raise CorruptSaveError(f"Save blob must be an object, got {type(data).__name__}")

        version = data.get("version", SCHEMA_VERSION)
        if version != SCHEMA_VERSION:
            logger.info(f"Loading save with schema version {version} (current: {SCHEMA_VERSION})")

        try:
            organisms = tuple(
                OrganismInstance(
                    instance_id=_int(o["instanceId"], "instanceId"),
                    species_id=_str(o["speciesId"], "speciesId"),
                    slot=_int(o["slot"], "slot"),
                    health=HealthStatus(o.get("health", HealthStatus.HEALTHY.value)),
                    day_added=_int(o.get("dayAdded", 1), "dayAdded"),
                )
                for o in data["organisms"]
            )
            occupied = {
                int(slot): _int(iid, "occupiedSlots") for slot, iid in data["occupiedSlots"].items()
            }
            draft = data.get("draft", [])
            if not isinstance(draft, list):
                raise CorruptSaveError(f"draft must be a list, got {draft!r}")
            raw_result = data.get("lastResult")
            last_result = _result_from_blob(raw_result) if raw_result is not None else None
            state = cls(
                current_day=_int(data["currentDay"], "currentDay"),
                total_score=_int(data["totalScore"], "totalScore"),
                active=_bool(data["active"], "active"),
                next_instance_id=_int(data["nextInstanceId"], "nextInstanceId"),
                organisms=organisms,
                occupied_slots=occupied,
                phase=GamePhase(data.get("phase", GamePhase.PLACEMENT.value)),
                draft=tuple(_str(s, "draft") for s in draft),
                last_result=last_result,
            )
        except CorruptSaveError:
            raise
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise CorruptSaveError(f"Malformed save blob: {e!r}") from e

        expected_slots = {o.slot: o.instance_id for o in state.organisms}
        if expected_slots != state.occupied_slots:
            raise CorruptSaveError("occupiedSlots does not match organism placements")
        if state.total_score < 0:
            raise CorruptSaveError(f"Negative score {state.total_score}")
        return state


def _result_to_blob(result: DayResult) -> Dict[str, Any]:
    return {
        "day": result.day,
        "healthyIds": list(result.healthy_ids),
        "deadIds": list(result.dead_ids),
        "scoreDelta": result.score_delta,
        "links": [[link.eater_id, link.food_id] for link in result.links],
        "levelCounts": {level.value: n for level, n in result.level_counts.items()},
    }


def _result_from_blob(data: Dict[str, Any]) -> DayResult:
    return DayResult(
        day=_int(data["day"], "lastResult.day"),
        healthy_ids=tuple(_int(i, "lastResult.healthyIds") for i in data["healthyIds"]),
        dead_ids=tuple(_int(i, "lastResult.deadIds") for i in data["deadIds"]),
        score_delta=_int(data["scoreDelta"], "lastResult.scoreDelta"),
        links=tuple(
            FoodLink(eater_id=_int(eater, "lastResult.links"), food_id=_int(food, "lastResult.links"))
            for eater, food in data.get("links", [])
        ),
        level_counts={
            TrophicLevel(level): _int(n, "lastResult.levelCounts")
            for level, n in data.get("levelCounts", {}).items()
        },
    )


def _int(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise CorruptSaveError(f"{name} must be an integer, got {value!r}")
    return value


def _str(value: Any, name: str) -> str:
    if not isinstance(value, str):
        raise CorruptSaveError(f"{name} must be a string, got {value!r}")
    return value


def _bool(value: Any, name: str) -> bool:
    if not isinstance(value, bool):
        raise CorruptSaveError(f"{name} must be a boolean, got {value!r}")
    return value
