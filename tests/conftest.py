from __future__ import annotations

import pytest

from hotseat_quiz.core.config import MatchConfig
from hotseat_quiz.core.listeners import SessionListener
from hotseat_quiz.core.models import Answer, Player, Question


def _make_question(
    text: str = "Question",
    bonus: float = 10,
    time_limit: float = 10,
    correct: int = 0,
    answer_count: int = 4,
    followup: str | None = None,
) -> Question:
    answers = [
        Answer(text=f"{text} option {index}", is_correct=index == correct)
        for index in range(answer_count)
    ]
    return Question(
        text=text,
        answers=answers,
        bonus=bonus,
        time_limit_seconds=time_limit,
        followup_text=followup,
    )


class RecordingListener(SessionListener):
    """Collects every callback so tests can assert on the event stream."""

    def __init__(self) -> None:
        self.presented: list[tuple[str, str]] = []
        self.evaluated = []
        self.rejected: list[tuple[int, str]] = []
        self.resolutions = []
        self.summaries = []

    def on_question_presented(self, question, player) -> None:
        self.presented.append((question.text, player.name))

    def on_answer_evaluated(self, answer_index, outcome) -> None:
        self.evaluated.append((answer_index, outcome))

    def on_answer_rejected(self, answer_index, reason) -> None:
        self.rejected.append((answer_index, reason))

    def on_question_resolved(self, resolution) -> None:
        self.resolutions.append(resolution)

    def on_match_over(self, summary) -> None:
        self.summaries.append(summary)


@pytest.fixture()
def make_question():
    return _make_question


@pytest.fixture()
def make_players():
    def factory(*names: str) -> list[Player]:
        return [Player(name=name) for name in names]

    return factory


@pytest.fixture()
def listener() -> RecordingListener:
    return RecordingListener()


@pytest.fixture()
def fixed_config():
    """Deterministic settings: no shuffling and no pause between questions."""

    def factory(**overrides) -> MatchConfig:
        settings = {
            "randomize_questions": False,
            "randomize_answers": False,
            "resolution_delay_seconds": 0,
        }
        settings.update(overrides)
        return MatchConfig(**settings)

    return factory
