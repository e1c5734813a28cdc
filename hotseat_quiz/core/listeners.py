"""Callback interfaces the engine reports to."""

from __future__ import annotations

import logging
from typing import Protocol

from hotseat_quiz.core.models import AnswerOutcome, MatchSummary, Player, Question, Resolution

logger = logging.getLogger(__name__)


class SessionListener:
    """Presentation callbacks. Subclass and override what you need."""

    def on_question_presented(self, question: Question, player: Player) -> None:
        pass

    def on_answer_evaluated(self, answer_index: int, outcome: AnswerOutcome) -> None:
        pass

    def on_answer_rejected(self, answer_index: int, reason: str) -> None:
        pass

    def on_question_resolved(self, resolution: Resolution) -> None:
        pass

    def on_match_over(self, summary: MatchSummary) -> None:
        pass


class ScoreSink(Protocol):
    """Receives final scores when a match ends (e.g. a high-score store)."""

    def record_score(self, match_id: str, player_name: str, score: float) -> None: ...


class InMemoryScoreSink:
    """Keeps final scores for the lifetime of the process."""

    def __init__(self) -> None:
        self._entries: list[tuple[str, str, float]] = []

    def record_score(self, match_id: str, player_name: str, score: float) -> None:
        self._entries.append((match_id, player_name, score))
        logger.info("Recorded score %.0f for %s (match %s)", score, player_name, match_id)

    def entries(self) -> list[tuple[str, str, float]]:
        return list(self._entries)

    def high_score(self) -> float:
        return max((score for _, _, score in self._entries), default=0.0)
