"""Validated match configuration supplied by the presentation layer."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from hotseat_quiz.constants.quiz_constants import (
    DEFAULT_BONUS_LOSS_FACTOR,
    DEFAULT_MAXIMUM_MISTAKES,
    DEFAULT_QUESTIONS_PER_GROUP,
    DEFAULT_RESOLUTION_DELAY_SECONDS,
    DEFAULT_STARTING_LIVES,
)
from hotseat_quiz.core.errors import ConfigurationError


class MatchConfig(BaseModel):
    """Settings for one match.

    ``number_of_players`` of ``None`` makes every supplied player active.
    ``question_limit`` of 0 means no limit; larger values are clamped to the
    bank size when the match starts.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    number_of_players: int | None = Field(default=None, ge=1)
    questions_per_group: int = Field(default=DEFAULT_QUESTIONS_PER_GROUP, ge=1)
    question_limit: int = Field(default=0, ge=0)
    maximum_mistakes: int = Field(default=DEFAULT_MAXIMUM_MISTAKES, ge=1)
    bonus_loss_factor: float = Field(default=DEFAULT_BONUS_LOSS_FACTOR, ge=0.0, le=1.0)
    starting_lives: int = Field(default=DEFAULT_STARTING_LIVES, ge=1)
    play_in_turns: bool = True
    randomize_questions: bool = True
    sort_questions: bool = True
    randomize_answers: bool = True
    first_question: int = Field(default=1, ge=1)
    resolution_delay_seconds: float = Field(default=DEFAULT_RESOLUTION_DELAY_SECONDS, ge=0.0)
    seed: int | None = None

    @classmethod
    def build(cls, **settings: object) -> MatchConfig:
        """Create a config, reporting bad values as :class:`ConfigurationError`."""
        try:
            return cls(**settings)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid match configuration: {exc}") from exc
