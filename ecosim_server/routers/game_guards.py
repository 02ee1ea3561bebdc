"""Helper guards shared by the game endpoints."""

from __future__ import annotations

from fastapi.responses import JSONResponse

from ecosim.exceptions import (
    CorruptSaveError,
    EcosimError,
    InvalidPhaseError,
    PersistenceUnavailableError,
    SlotOccupiedError,
    SlotOutOfRangeError,
    SpeciesNotOfferedError,
    UnknownSpeciesError,
)
from ecosim_server.session_registry import GameHandle, SessionRegistry

# Most specific first; the first isinstance match wins.
_STATUS_BY_ERROR: tuple[tuple[type[EcosimError], int], ...] = (
    (SlotOccupiedError, 409),
    (InvalidPhaseError, 409),
    (SlotOutOfRangeError, 400),
    (SpeciesNotOfferedError, 400),
    (UnknownSpeciesError, 404),
    (PersistenceUnavailableError, 503),
    (CorruptSaveError, 422),
)


def get_game_or_error(
    registry: SessionRegistry, session_id: str
) -> tuple[GameHandle | None, JSONResponse | None]:
    """Resolve a hosted game or return an error response.

    Returns:
        Tuple of (handle, error). One will be None.
    """
    handle = registry.get_game(session_id)
    if handle is not None:
        return handle, None
    return None, JSONResponse({"error": f"Game not found: {session_id}"}, status_code=404)


def error_response(error: EcosimError) -> JSONResponse:
    """Map a domain error to a JSON error response."""
    status_code = 500
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            status_code = code
            break
    return JSONResponse(
        {"error": str(error), "error_type": type(error).__name__}, status_code=status_code
    )
