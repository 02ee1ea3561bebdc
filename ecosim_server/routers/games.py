"""Game endpoints: the command surface for the UI collaborator.

Every command endpoint returns the updated game view together with the
notifications (organism added/removed, day changed, simulation complete,
game over) it produced, in emission order.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from ecosim.exceptions import EcosimError
from ecosim_server.models import (
    CreateGameRequest,
    FeedabilityResponse,
    LoadGameRequest,
    PlaceOrganismRequest,
    SaveGameRequest,
)
from ecosim_server.routers.game_guards import error_response, get_game_or_error
from ecosim_server.session_persistence import SaveStore, validate_key
from ecosim_server.session_registry import GameHandle, SessionRegistry

logger = logging.getLogger(__name__)


def _command_response(handle: GameHandle, result: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    return {
        "session_id": handle.session_id,
        "game": handle.session.to_dict(),
        "events": handle.drain_events(),
        "result": result,
    }


def setup_games_router(registry: SessionRegistry, save_store: SaveStore) -> APIRouter:
    """Create and configure the games router.

    Args:
        registry: Hosted games
        save_store: Persistence collaborator for save/load

    Returns:
        Configured APIRouter
    """
    router = APIRouter(prefix="/api", tags=["games"])

    @router.get("/catalog")
    async def get_catalog():
        """List every species with its trophic level and display data."""
        return {"species": [species.to_dict() for species in registry.catalog]}

    @router.get("/games")
    async def list_games():
        return {"games": registry.list_games(), "count": registry.game_count}

    @router.post("/games", status_code=201)
    async def create_game(request: Optional[CreateGameRequest] = None):
        """Start a new hosted game on day 1 with a fresh draft."""
        seed = request.seed if request else None
        handle = registry.create_game(seed=seed)
        return _command_response(handle)

    @router.get("/games/{session_id}")
    async def get_game(session_id: str):
        handle, error = get_game_or_error(registry, session_id)
        if error is not None:
            return error
        return {"session_id": session_id, "game": handle.session.to_dict()}

    @router.delete("/games/{session_id}")
    async def delete_game(session_id: str):
        if not registry.remove_game(session_id):
            return JSONResponse({"error": f"Game not found: {session_id}"}, status_code=404)
        return {"message": f"Game {session_id} deleted"}

    @router.post("/games/{session_id}/place")
    async def place_organism(session_id: str, request: PlaceOrganismRequest):
        """Place an offered species into an empty slot."""
        handle, error = get_game_or_error(registry, session_id)
        if error is not None:
            return error
        try:
            instance_id = handle.session.place_organism(request.species_id, request.slot)
        except EcosimError as e:
            handle.drain_events()
            return error_response(e)
        return _command_response(handle, {"instance_id": instance_id})

    @router.get("/games/{session_id}/preview/{species_id}", response_model=FeedabilityResponse)
    async def preview_feedability(session_id: str, species_id: str):
        """Would one more organism of this species be fed today?"""
        handle, error = get_game_or_error(registry, session_id)
        if error is not None:
            return error
        try:
            preview = handle.session.preview_feedability(species_id)
        except EcosimError as e:
            return error_response(e)
        return FeedabilityResponse(**preview.to_dict())

    @router.post("/games/{session_id}/simulate")
    async def run_simulation(session_id: str):
        """Simulate the day. Deaths are staged until /commit or /next-day."""
        handle, error = get_game_or_error(registry, session_id)
        if error is not None:
            return error
        try:
            result = handle.session.run_simulation()
        except EcosimError as e:
            return error_response(e)
        return _command_response(handle, result.to_dict())

    @router.post("/games/{session_id}/commit")
    async def commit_deaths(session_id: str):
        """Remove organisms that died in the last simulation."""
        handle, error = get_game_or_error(registry, session_id)
        if error is not None:
            return error
        try:
            removed = handle.session.commit_deaths()
        except EcosimError as e:
            return error_response(e)
        return _command_response(handle, {"removed_ids": removed})

    @router.post("/games/{session_id}/next-day")
    async def proceed_to_next_day(session_id: str):
        """Commit deaths and advance; ends the game after the final day."""
        handle, error = get_game_or_error(registry, session_id)
        if error is not None:
            return error
        try:
            phase = handle.session.proceed_to_next_day()
        except EcosimError as e:
            return error_response(e)
        return _command_response(handle, {"phase": phase.value})

    @router.post("/games/{session_id}/save")
    async def save_game(session_id: str, request: Optional[SaveGameRequest] = None):
        """Save the game under a key (defaults to the session id)."""
        handle, error = get_game_or_error(registry, session_id)
        if error is not None:
            return error
        key = (request.key if request else None) or session_id
        try:
            validate_key(key)
            save_store.save(key, handle.session.capture_state())
        except ValueError as e:
            return JSONResponse({"error": str(e)}, status_code=400)
        except EcosimError as e:
            return error_response(e)
        return {"success": True, "key": key, "session_id": session_id}

    @router.get("/saves")
    async def list_saves():
        try:
            keys = save_store.list_keys()
        except EcosimError as e:
            return error_response(e)
        return {"saves": keys, "count": len(keys)}

    @router.post("/games/load", status_code=201)
    async def load_game(request: LoadGameRequest):
        """Load a save into a new hosted game.

        On an unavailable or corrupt save the caller should start a new game.
        """
        try:
            validate_key(request.key)
            state = save_store.load(request.key)
        except ValueError as e:
            return JSONResponse({"error": str(e)}, status_code=400)
        except EcosimError as e:
            return error_response(e)

        handle = registry.create_game(seed=request.seed, start=False)
        try:
            handle.session.restore(state)
        except EcosimError as e:
            registry.remove_game(handle.session_id)
            return error_response(e)
        handle.drain_events()
        logger.info(f"Loaded save {request.key} into game {handle.session_id}")
        return _command_response(handle)

    return router
