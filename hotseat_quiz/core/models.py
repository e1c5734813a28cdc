"""Domain models for the quiz engine."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum


@dataclass(slots=True, frozen=True)
class Answer:
    """One selectable option of a question."""

    text: str
    is_correct: bool = False


@dataclass(slots=True, frozen=True)
class MediaRef:
    """Reference to an image or video shown behind a question."""

    kind: str  # "image" or "video"
    name: str


@dataclass(slots=True)
class Question:
    """Multiple-choice question with a bonus value and an answer window."""

    text: str
    answers: list[Answer]
    bonus: float = 0
    time_limit_seconds: float = 10
    followup_text: str | None = None
    media: MediaRef | None = None

    def correct_answer_indices(self) -> list[int]:
        return [index for index, answer in enumerate(self.answers) if answer.is_correct]

    def copy(self) -> Question:
        return Question(
            text=self.text,
            answers=list(self.answers),
            bonus=self.bonus,
            time_limit_seconds=self.time_limit_seconds,
            followup_text=self.followup_text,
            media=self.media,
        )


@dataclass(slots=True)
class Category:
    """Named group of questions offered by the category wheel."""

    name: str
    questions: list[Question]
    color: str = "#ffffff"
    icon: str | None = None
    already_used: bool = False


@dataclass(slots=True)
class Player:
    """Participant sharing the device in hot-seat play."""

    name: str
    color: str = "#ffffff"
    score: float = 0.0
    lives: int = 3
    mistakes_this_question: int = 0

    @property
    def display_score(self) -> int:
        """Score shown to players; partial points round up."""
        return math.ceil(self.score)

    @property
    def is_eliminated(self) -> bool:
        return self.lives <= 0


class MatchState(str, Enum):
    """States of the session state machine."""

    IDLE = "idle"
    AWAITING_ANSWER = "awaiting_answer"
    RESOLVING = "resolving"
    VICTORY = "victory"
    GAME_OVER = "game_over"

    @property
    def is_terminal(self) -> bool:
        return self in (MatchState.VICTORY, MatchState.GAME_OVER)

    def __str__(self) -> str:
        return self.value


@dataclass(slots=True)
class SessionState:
    """Mutable core of a running match, owned by the session controller."""

    current_question_index: int = -1
    current_group_bonus: float | None = None
    questions_answered_in_group: int = 0
    current_player_index: int = 0
    current_bonus_value: float = 0
    questions_asked_total: int = 0
    correct_answers_total: int = 0
    is_game_over: bool = False


@dataclass(slots=True, frozen=True)
class AnswerOutcome:
    """Result of routing one answer event through the scoreboard."""

    resolved: bool
    correct: bool
    awarded: float = 0.0
    life_lost: bool = False


@dataclass(slots=True, frozen=True)
class Resolution:
    """How the current question ended, kept while the match is resolving."""

    correct: bool
    player_name: str
    awarded: float
    timed_out: bool = False
    skipped: bool = False
    followup_text: str | None = None
    correct_answer_indices: tuple[int, ...] = ()


@dataclass(slots=True, frozen=True)
class PlayerStanding:
    """Immutable snapshot of a player for the match summary."""

    name: str
    color: str
    score: int
    lives: int
    is_winner: bool


@dataclass(slots=True, frozen=True)
class MatchSummary:
    """Read-only result handed to the presentation layer when a match ends."""

    match_id: str
    outcome: MatchState
    standings: list[PlayerStanding]
    winner_count: int
    correct_answers: int
    questions_asked: int
    question_limit: int
    result_text: str
