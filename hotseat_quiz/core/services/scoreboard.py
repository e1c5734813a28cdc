"""Service tracking scores, lives, mistakes and turn order."""

from __future__ import annotations

import logging

from hotseat_quiz.core.models import AnswerOutcome, Player

logger = logging.getLogger(__name__)


class Scoreboard:
    """Per-player score and lives bookkeeping for one match.

    Only the active players live here; benched players never take turns and
    never appear in the ranking.
    """

    def __init__(
        self,
        players: list[Player],
        maximum_mistakes: int = 2,
        bonus_loss_factor: float = 0.5,
    ) -> None:
        if not players:
            raise ValueError("Scoreboard needs at least one active player.")
        self._players = players
        self._maximum_mistakes = maximum_mistakes
        self._bonus_loss_factor = bonus_loss_factor
        self._current_player_index: int = 0
        self._available_bonus: float = 0.0

    @property
    def players(self) -> list[Player]:
        return list(self._players)

    @property
    def current_player_index(self) -> int:
        return self._current_player_index

    @property
    def current_player(self) -> Player:
        return self._players[self._current_player_index]

    @property
    def available_bonus(self) -> float:
        return self._available_bonus

    def reset_players(self, starting_lives: int) -> None:
        for player in self._players:
            player.score = 0.0
            player.lives = starting_lives
            player.mistakes_this_question = 0
        self._current_player_index = 0

    def begin_question(self, nominal_bonus: float) -> None:
        """Restore the full bonus and clear mistake counters for a new question."""
        self._available_bonus = float(nominal_bonus)
        for player in self._players:
            player.mistakes_this_question = 0

    def record_wrong(self, player: Player) -> AnswerOutcome:
        self._available_bonus *= self._bonus_loss_factor
        player.mistakes_this_question += 1
        if player.mistakes_this_question < self._maximum_mistakes:
            return AnswerOutcome(resolved=False, correct=False)

        self._available_bonus = 0.0
        self._lose_life(player)
        logger.info("%s used up %d mistakes", player.name, self._maximum_mistakes)
        return AnswerOutcome(resolved=True, correct=False, life_lost=True)

    def record_correct(self, player: Player) -> AnswerOutcome:
        awarded = self._available_bonus
        player.score += awarded
        return AnswerOutcome(resolved=True, correct=True, awarded=awarded)

    def record_timeout(self, player: Player) -> AnswerOutcome:
        self._available_bonus = 0.0
        self._lose_life(player)
        logger.info("%s ran out of time", player.name)
        return AnswerOutcome(resolved=True, correct=False, life_lost=True)

    def record_skip(self) -> AnswerOutcome:
        self._available_bonus = 0.0
        return AnswerOutcome(resolved=True, correct=False)

    def next_turn(self, play_in_turns: bool) -> None:
        """Hand the turn to the next active player who still has lives."""
        if not play_in_turns:
            return
        count = len(self._players)
        for step in range(1, count + 1):
            candidate = (self._current_player_index + step) % count
            if not self._players[candidate].is_eliminated:
                self._current_player_index = candidate
                return

    def all_eliminated(self) -> bool:
        return all(player.is_eliminated for player in self._players)

    def rank_players(self) -> list[Player]:
        """Players sorted by displayed score, highest first; ties keep seat order."""
        return sorted(self._players, key=lambda player: player.display_score, reverse=True)

    def winner_count(self) -> int:
        """Number of players sharing the top score as it is displayed."""
        ranked = self.rank_players()
        top_score = ranked[0].display_score
        return sum(1 for player in ranked if player.display_score == top_score)

    @staticmethod
    def _lose_life(player: Player) -> None:
        player.lives = max(0, player.lives - 1)
