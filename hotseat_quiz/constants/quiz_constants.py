"""Quiz-related constants shared across the engine and the host."""

DEFAULT_TIME_LIMIT_SECONDS: float = 10
DEFAULT_STARTING_LIVES: int = 3
DEFAULT_QUESTIONS_PER_GROUP: int = 2
DEFAULT_MAXIMUM_MISTAKES: int = 2
DEFAULT_BONUS_LOSS_FACTOR: float = 0.5
DEFAULT_RESOLUTION_DELAY_SECONDS: float = 0.5
DEFAULT_CATEGORIES_TO_VICTORY: int = 3
MAX_PLAYERS: int = 4
WEB_LOAD_TIMEOUT_SECONDS: float = 3
