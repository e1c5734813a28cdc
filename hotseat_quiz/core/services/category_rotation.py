"""Service handing out categories one match at a time."""

from __future__ import annotations

import random

from hotseat_quiz.constants.quiz_constants import DEFAULT_CATEGORIES_TO_VICTORY
from hotseat_quiz.core.models import Category, Question
from hotseat_quiz.core.services.question_bank import fisher_yates_shuffle


class CategoryRotation:
    """Tracks which categories were played and when the campaign is won."""

    def __init__(
        self,
        categories: list[Category],
        categories_to_victory: int = DEFAULT_CATEGORIES_TO_VICTORY,
        randomize: bool = True,
        rng: random.Random | None = None,
    ) -> None:
        if not categories:
            raise ValueError("At least one category is required.")
        self._categories = list(categories)
        if randomize:
            fisher_yates_shuffle(self._categories, rng or random.Random())
        self._categories_to_victory = max(1, min(categories_to_victory, len(self._categories)))
        self._current_index = 0
        self._played = 0

    def get_categories(self) -> list[Category]:
        return list(self._categories)

    def get_current_category(self) -> Category:
        return self._categories[self._current_index]

    def select(self, index: int) -> Category:
        if not 0 <= index < len(self._categories):
            raise IndexError(f"Category index {index} out of range")
        if self._categories[index].already_used:
            raise ValueError(f"Category '{self._categories[index].name}' was already played.")
        self._current_index = index
        return self._categories[index]

    def take_current(self) -> list[Question]:
        """Mark the current category as played and return its questions."""
        category = self.get_current_category()
        if category.already_used:
            raise ValueError(f"Category '{category.name}' was already played.")
        category.already_used = True
        self._played += 1
        remaining = [i for i, c in enumerate(self._categories) if not c.already_used]
        if remaining:
            self._current_index = remaining[0]
        return list(category.questions)

    def played_count(self) -> int:
        return self._played

    def is_campaign_complete(self) -> bool:
        return self._played >= self._categories_to_victory
