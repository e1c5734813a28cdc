"""Service choosing which question of the bank is served next."""

from __future__ import annotations

import logging

from hotseat_quiz.core.models import Question, SessionState
from hotseat_quiz.core.services.question_bank import QuestionBank

logger = logging.getLogger(__name__)


class GroupSequencer:
    """Walks a bonus-sorted bank group by group.

    Each bonus value forms a group. Once ``questions_per_group`` questions of
    the current group have been completed, the rest of that group is skipped
    and the walk continues at the first question with a strictly higher bonus.
    Progress is written into the shared :class:`SessionState`.
    """

    def __init__(
        self,
        bank: QuestionBank,
        state: SessionState,
        base_per_group: int,
        player_count: int = 1,
        grouping_enabled: bool = True,
        question_limit: int = 0,
        first_question: int = 1,
    ) -> None:
        if base_per_group < 1:
            raise ValueError("Questions per group must be at least 1.")
        self._bank = bank
        self._state = state
        self._base_per_group = base_per_group
        self._grouping_enabled = grouping_enabled
        self._questions_per_group = base_per_group
        self._question_limit = max(0, min(question_limit, len(bank)))
        self._start_index = max(0, first_question - 1)
        self.set_player_count(player_count)

    @property
    def questions_per_group(self) -> int:
        return self._questions_per_group

    @property
    def question_limit(self) -> int:
        return self._question_limit

    def set_player_count(self, player_count: int) -> None:
        if not self._grouping_enabled:
            self._questions_per_group = max(1, len(self._bank))
            return
        self._questions_per_group = self._base_per_group * max(1, player_count)

    def current_question(self) -> Question | None:
        index = self._state.current_question_index
        if 0 <= index < len(self._bank):
            return self._bank.get_question_at_index(index)
        return None

    def advance(self) -> Question | None:
        """Move to the next question to ask, or return ``None`` when the bank is done."""
        state = self._state
        if state.current_question_index < 0:
            next_index = self._start_index
        elif state.questions_answered_in_group >= self._questions_per_group:
            next_index = self._first_index_above(state.current_question_index)
            state.questions_answered_in_group = 0
        else:
            next_index = state.current_question_index + 1

        if next_index >= len(self._bank):
            state.current_question_index = len(self._bank)
            logger.info("Question bank exhausted")
            return None

        question = self._bank.get_question_at_index(next_index)
        if state.current_group_bonus is None or question.bonus != state.current_group_bonus:
            if state.current_group_bonus is not None:
                logger.info("Moving to bonus group %s", question.bonus)
            state.current_group_bonus = question.bonus
            state.questions_answered_in_group = 0
        state.current_question_index = next_index
        return question

    def record_completed(self) -> None:
        """Count an answered or timed-out question toward the group quota."""
        self._state.questions_answered_in_group += 1

    def limit_reached(self) -> bool:
        return 0 < self._question_limit <= self._state.questions_asked_total

    def _first_index_above(self, index: int) -> int:
        group_bonus = self._bank.get_question_at_index(index).bonus
        next_index = index + 1
        while next_index < len(self._bank):
            if self._bank.get_question_at_index(next_index).bonus > group_bonus:
                break
            next_index += 1
        return next_index
