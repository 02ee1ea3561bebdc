"""Game configuration object."""

from dataclasses import dataclass

from ecosim.config.game import (
    DRAFT_SIZE,
    FOOD_REQUIREMENT,
    MAX_DRAFT_PRODUCERS,
    MIN_DRAFT_PRODUCERS,
    POINTS_PER_HEALTHY,
    TOTAL_DAYS,
    TOTAL_SLOTS,
)


@dataclass(frozen=True)
class GameConfig:
    """Rule parameters shared by the store, draft, engine and session.

    Attributes:
        food_requirement: Food-source individuals needed per fed consumer.
        total_days: Number of days before the game ends.
        draft_size: Species offered per day.
        total_slots: Size of the placement grid.
        points_per_healthy: Score per healthy organism per day.
        min_draft_producers: Lower bound on producers in a draft.
        max_draft_producers: Upper bound on producers in a draft.
    """

    food_requirement: int = FOOD_REQUIREMENT
    total_days: int = TOTAL_DAYS
    draft_size: int = DRAFT_SIZE
    total_slots: int = TOTAL_SLOTS
    points_per_healthy: int = POINTS_PER_HEALTHY
    min_draft_producers: int = MIN_DRAFT_PRODUCERS
    max_draft_producers: int = MAX_DRAFT_PRODUCERS

    def validate(self) -> "GameConfig":
        """Check the parameters are usable, returning self for chaining.

        Raises:
            ValueError: If a parameter is out of range
        """
        for name in ("food_requirement", "total_days", "draft_size", "total_slots"):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
        if self.points_per_healthy < 0:
            raise ValueError("points_per_healthy must not be negative")
        if not 0 <= self.min_draft_producers <= self.max_draft_producers:
            raise ValueError(
                f"Invalid draft producer range "
                f"[{self.min_draft_producers}, {self.max_draft_producers}]"
            )
        return self
