"""Request and response models for the game API."""

from typing import Optional

from pydantic import BaseModel


class CreateGameRequest(BaseModel):
    """Request body for starting a hosted game."""

    seed: Optional[int] = None


class PlaceOrganismRequest(BaseModel):
    """Request body for placing an offered species."""

    species_id: str
    slot: int


class SaveGameRequest(BaseModel):
    """Request body for saving; defaults to the session id as the key."""

    key: Optional[str] = None


class LoadGameRequest(BaseModel):
    """Request body for loading a save into a new hosted game."""

    key: str
    seed: Optional[int] = None


class FeedabilityResponse(BaseModel):
    species_id: str
    can_feed: bool
    available: int
    needed: int

