"""Service holding the ordered collection of questions for a match."""

from __future__ import annotations

import random
from collections.abc import Iterable, MutableSequence
from typing import TypeVar

from hotseat_quiz.core.errors import ConfigurationError
from hotseat_quiz.core.models import Question

_T = TypeVar("_T")


def fisher_yates_shuffle(items: MutableSequence[_T], rng: random.Random) -> None:
    """Shuffle in place, swapping each index with a uniform pick from the tail."""
    length = len(items)
    for index in range(length):
        swap_index = rng.randrange(index, length)
        items[index], items[swap_index] = items[swap_index], items[index]


class QuestionBank:
    """Immutable-after-load collection of questions, apart from ordering."""

    def __init__(self, questions: Iterable[Question] = ()) -> None:
        self._questions: list[Question] = [self._prepare_question(q) for q in questions]

    @classmethod
    def load(cls, questions: Iterable[Question]) -> QuestionBank:
        """Validate and store a defensive copy of the given questions."""
        return cls(questions)

    def get_questions(self) -> list[Question]:
        """Return a copy of the current ordering."""
        return list(self._questions)

    def get_question_count(self) -> int:
        return len(self._questions)

    def __len__(self) -> int:
        return len(self._questions)

    def is_empty(self) -> bool:
        return not self._questions

    def get_question_at_index(self, index: int) -> Question:
        if not 0 <= index < len(self._questions):
            raise IndexError(f"Question index {index} out of range")
        return self._questions[index]

    def shuffle(self, rng: random.Random | None = None) -> None:
        fisher_yates_shuffle(self._questions, rng or random.Random())

    def shuffle_answers(self, index: int, rng: random.Random | None = None) -> None:
        """Reorder one question's answers; correctness travels with each answer."""
        fisher_yates_shuffle(self.get_question_at_index(index).answers, rng or random.Random())

    def sort_by_bonus_ascending(self) -> None:
        # list.sort is stable, so equal bonuses keep their shuffled order.
        self._questions.sort(key=lambda question: question.bonus)

    @staticmethod
    def _prepare_question(question: Question) -> Question:
        if not question.answers:
            raise ConfigurationError(f"Question '{question.text}' has no answers.")
        if not any(answer.is_correct for answer in question.answers):
            raise ConfigurationError(f"Question '{question.text}' has no correct answer.")
        if question.bonus < 0:
            raise ConfigurationError(f"Question '{question.text}' has a negative bonus.")
        if question.time_limit_seconds < 0:
            raise ConfigurationError(f"Question '{question.text}' has a negative time limit.")
        return question.copy()
