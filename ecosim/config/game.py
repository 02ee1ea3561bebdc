"""Game rule constants."""

# Feeding: one consumer needs this many individuals of its food source
FOOD_REQUIREMENT = 3

# Session length and layout
TOTAL_DAYS = 12  # Game ends after this many day-advances
TOTAL_SLOTS = 50  # Size of the placement grid

# Draft
DRAFT_SIZE = 5  # Species offered each day
MIN_DRAFT_PRODUCERS = 2  # Producers are prerequisite food, always offer some
MAX_DRAFT_PRODUCERS = 3

# Scoring
POINTS_PER_HEALTHY = 10  # Awarded per healthy organism per simulated day
