"""State machine driving one hot-seat match from first question to outcome."""

from __future__ import annotations

import logging
import random
from collections.abc import Iterable
from dataclasses import replace
from uuid import uuid4

from hotseat_quiz.core.config import MatchConfig
from hotseat_quiz.core.errors import ConfigurationError, InvalidStateTransition, OutOfRangeAnswer
from hotseat_quiz.core.listeners import ScoreSink, SessionListener
from hotseat_quiz.core.models import (
    AnswerOutcome,
    MatchState,
    MatchSummary,
    Player,
    PlayerStanding,
    Question,
    Resolution,
    SessionState,
)
from hotseat_quiz.core.services.countdown_timer import CountdownTimer
from hotseat_quiz.core.services.group_sequencer import GroupSequencer
from hotseat_quiz.core.services.question_bank import QuestionBank
from hotseat_quiz.core.services.scoreboard import Scoreboard

logger = logging.getLogger(__name__)


class SessionController:
    """Facade over bank, sequencer, timer and scoreboard.

    The controller never blocks. The host advances it by calling :meth:`tick`
    with the elapsed time and by forwarding answer events. Timer expiry is
    detected inside :meth:`tick`, which calls :meth:`on_timer_expire` itself.
    """

    def __init__(
        self,
        listener: SessionListener | None = None,
        score_sink: ScoreSink | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self._listener = listener or SessionListener()
        self._score_sink = score_sink
        self._rng = rng or random.Random()
        self._timer = CountdownTimer(on_expire=self._handle_timer_expired)
        self._match_state = MatchState.IDLE
        self._session = SessionState()
        self._config = MatchConfig()
        self._bank = QuestionBank()
        self._scoreboard: Scoreboard | None = None
        self._sequencer: GroupSequencer | None = None
        self._active_players: list[Player] = []
        self._benched_players: list[Player] = []
        self._disabled_answers: set[int] = set()
        self._queued_answers: list[int] = []
        self._resolution: Resolution | None = None
        self._resolution_delay_left: float = 0.0
        self._awaiting_continue: bool = False
        self._match_id: str = ""

    # --- Match lifecycle ---

    def start_match(
        self,
        players: Iterable[Player],
        bank: QuestionBank | Iterable[Question],
        config: MatchConfig | None = None,
    ) -> None:
        """Reset all session state and present the first question."""
        config = config or MatchConfig()
        roster = list(players)
        active_count = len(roster) if config.number_of_players is None else min(
            config.number_of_players, len(roster)
        )
        if active_count < 1:
            raise ConfigurationError("A match needs at least one active player.")

        source = bank.get_questions() if isinstance(bank, QuestionBank) else bank
        match_bank = QuestionBank.load(source)

        rng = random.Random(config.seed) if config.seed is not None else self._rng
        if config.randomize_questions:
            match_bank.shuffle(rng)
        if config.sort_questions:
            match_bank.sort_by_bonus_ascending()

        self._timer.stop()
        self._config = config
        self._rng = rng
        self._bank = match_bank
        self._match_id = str(config.seed) if config.seed is not None else uuid4().hex
        self._active_players = roster[:active_count]
        self._benched_players = roster[active_count:]
        self._session = SessionState()
        self._scoreboard = Scoreboard(
            self._active_players,
            maximum_mistakes=config.maximum_mistakes,
            bonus_loss_factor=config.bonus_loss_factor,
        )
        self._scoreboard.reset_players(config.starting_lives)
        self._sequencer = GroupSequencer(
            match_bank,
            self._session,
            base_per_group=config.questions_per_group,
            player_count=active_count,
            grouping_enabled=config.sort_questions,
            question_limit=config.question_limit,
            first_question=config.first_question,
        )
        self._disabled_answers = set()
        self._queued_answers = []
        self._resolution = None
        self._awaiting_continue = False
        self._match_state = MatchState.IDLE
        logger.info(
            "Match %s started: %d player(s), %d question(s)",
            self._match_id,
            active_count,
            len(match_bank),
        )
        self._present_next_question()

    def submit_answer(self, answer_index: int) -> AnswerOutcome:
        """Evaluate an answer from the player whose turn it is."""
        self._require_state(MatchState.AWAITING_ANSWER, "submit_answer")
        question = self._require_question()
        if not 0 <= answer_index < len(question.answers) or answer_index in self._disabled_answers:
            raise OutOfRangeAnswer(answer_index, len(question.answers))

        self._timer.stop()
        scoreboard = self._require_scoreboard()
        player = scoreboard.current_player
        if question.answers[answer_index].is_correct:
            outcome = scoreboard.record_correct(player)
        else:
            outcome = scoreboard.record_wrong(player)
            self._disabled_answers.add(answer_index)
        self._listener.on_answer_evaluated(answer_index, outcome)

        if outcome.resolved:
            self._resolve(question, player, outcome)
        else:
            self._timer.resume()
        return outcome

    def queue_answer(self, answer_index: int) -> None:
        """Buffer an answer to be evaluated on the next tick, after the timer."""
        self._queued_answers.append(answer_index)

    def on_timer_expire(self) -> AnswerOutcome:
        """Treat the current question as timed out."""
        self._require_state(MatchState.AWAITING_ANSWER, "on_timer_expire")
        question = self._require_question()
        self._timer.stop()
        scoreboard = self._require_scoreboard()
        player = scoreboard.current_player
        outcome = scoreboard.record_timeout(player)
        self._resolve(question, player, outcome, timed_out=True)
        return outcome

    def skip_question(self) -> None:
        """Resolve the current question as unanswered without costing a life."""
        self._require_state(MatchState.AWAITING_ANSWER, "skip_question")
        question = self._require_question()
        self._timer.stop()
        scoreboard = self._require_scoreboard()
        outcome = scoreboard.record_skip()
        self._resolve(question, scoreboard.current_player, outcome, skipped=True)

    def continue_match(self) -> None:
        """Leave the result screen now instead of waiting for the delay."""
        self._require_state(MatchState.RESOLVING, "continue_match")
        self._leave_resolving()

    def tick(self, delta_seconds: float) -> None:
        """Advance time. Expiry is evaluated before queued answers."""
        if delta_seconds < 0:
            raise ValueError("Elapsed time must not be negative.")
        state_at_start = self._match_state

        expired = False
        if state_at_start is MatchState.AWAITING_ANSWER:
            expired = self._timer.tick(delta_seconds)

        self._drain_queued_answers(expired)

        if state_at_start is MatchState.RESOLVING and not self._awaiting_continue:
            self._resolution_delay_left -= delta_seconds
            if self._resolution_delay_left <= 0:
                self._leave_resolving()

    # --- Read-only views for the presentation layer ---

    @property
    def state(self) -> MatchState:
        return self._match_state

    @property
    def match_id(self) -> str:
        return self._match_id

    @property
    def config(self) -> MatchConfig:
        return self._config

    @property
    def session_state(self) -> SessionState:
        """Snapshot of the session counters."""
        return replace(self._session)

    @property
    def active_players(self) -> list[Player]:
        return list(self._active_players)

    @property
    def benched_players(self) -> list[Player]:
        return list(self._benched_players)

    @property
    def current_player(self) -> Player | None:
        if self._scoreboard is None:
            return None
        return self._scoreboard.current_player

    @property
    def current_question(self) -> Question | None:
        if self._sequencer is None or self._match_state.is_terminal:
            return None
        return self._sequencer.current_question()

    @property
    def disabled_answers(self) -> set[int]:
        return set(self._disabled_answers)

    @property
    def available_bonus(self) -> float:
        if self._scoreboard is None:
            return 0.0
        return self._scoreboard.available_bonus

    @property
    def resolution(self) -> Resolution | None:
        return self._resolution

    @property
    def awaiting_continue(self) -> bool:
        return self._match_state is MatchState.RESOLVING and self._awaiting_continue

    @property
    def question_limit(self) -> int:
        return self._sequencer.question_limit if self._sequencer else 0

    def time_remaining(self) -> float:
        return self._timer.remaining()

    def time_fraction_remaining(self) -> float:
        return self._timer.fraction_remaining()

    def summary(self) -> MatchSummary:
        if not self._match_state.is_terminal:
            raise InvalidStateTransition("summary", self._match_state)
        return self._build_summary()

    # --- Internals ---

    def _present_next_question(self) -> None:
        sequencer = self._require_sequencer()
        question = sequencer.advance()
        if question is None:
            self._finish(MatchState.VICTORY)
            return

        if self._config.randomize_answers:
            self._bank.shuffle_answers(self._session.current_question_index, self._rng)

        scoreboard = self._require_scoreboard()
        self._session.current_bonus_value = question.bonus
        self._session.questions_asked_total += 1
        self._session.current_player_index = scoreboard.current_player_index
        scoreboard.begin_question(question.bonus)
        self._disabled_answers = set()
        self._resolution = None
        self._awaiting_continue = False
        self._match_state = MatchState.AWAITING_ANSWER
        self._timer.start(question.time_limit_seconds)
        logger.debug(
            "Question %d (bonus %s) for %s",
            self._session.current_question_index,
            question.bonus,
            scoreboard.current_player.name,
        )
        self._listener.on_question_presented(question, scoreboard.current_player)

    def _resolve(
        self,
        question: Question,
        player: Player,
        outcome: AnswerOutcome,
        timed_out: bool = False,
        skipped: bool = False,
    ) -> None:
        self._timer.stop()
        # Skipped questions do not use up the group quota.
        if not skipped:
            self._require_sequencer().record_completed()
        if outcome.correct:
            self._session.correct_answers_total += 1

        self._resolution = Resolution(
            correct=outcome.correct,
            player_name=player.name,
            awarded=outcome.awarded,
            timed_out=timed_out,
            skipped=skipped,
            followup_text=question.followup_text or None,
            correct_answer_indices=tuple(question.correct_answer_indices()),
        )
        self._match_state = MatchState.RESOLVING
        self._awaiting_continue = bool(question.followup_text)
        self._resolution_delay_left = self._config.resolution_delay_seconds
        logger.info(
            "Question resolved for %s: %s",
            player.name,
            "correct" if outcome.correct else "timed out" if timed_out else "incorrect",
        )
        self._listener.on_question_resolved(self._resolution)

        if not self._awaiting_continue and self._resolution_delay_left <= 0:
            self._leave_resolving()

    def _leave_resolving(self) -> None:
        scoreboard = self._require_scoreboard()
        sequencer = self._require_sequencer()
        single_player = len(self._active_players) == 1

        if (single_player and scoreboard.current_player.is_eliminated) or scoreboard.all_eliminated():
            self._finish(MatchState.GAME_OVER)
            return
        if sequencer.limit_reached():
            self._finish(MatchState.VICTORY)
            return

        # An eliminated player hands over even when turns are disabled.
        scoreboard.next_turn(self._config.play_in_turns or scoreboard.current_player.is_eliminated)
        self._session.current_player_index = scoreboard.current_player_index
        self._present_next_question()

    def _finish(self, outcome: MatchState) -> None:
        self._timer.stop()
        self._match_state = outcome
        self._session.is_game_over = True
        self._awaiting_continue = False
        summary = self._build_summary()
        logger.info("Match %s ended: %s", self._match_id, summary.result_text)
        if self._score_sink is not None:
            for player in self._active_players:
                self._score_sink.record_score(self._match_id, player.name, player.score)
        self._listener.on_match_over(summary)

    def _drain_queued_answers(self, expired_this_tick: bool) -> None:
        queued, self._queued_answers = self._queued_answers, []
        for answer_index in queued:
            if expired_this_tick:
                self._listener.on_answer_rejected(answer_index, "the answer window had already closed")
                continue
            if self._match_state is not MatchState.AWAITING_ANSWER:
                self._listener.on_answer_rejected(
                    answer_index, f"not accepting answers while {self._match_state}"
                )
                continue
            try:
                self.submit_answer(answer_index)
            except OutOfRangeAnswer as exc:
                self._listener.on_answer_rejected(answer_index, str(exc))

    def _handle_timer_expired(self) -> None:
        if self._match_state is MatchState.AWAITING_ANSWER:
            self.on_timer_expire()

    def _build_summary(self) -> MatchSummary:
        scoreboard = self._require_scoreboard()
        ranked = scoreboard.rank_players()
        winner_count = scoreboard.winner_count()
        standings = [
            PlayerStanding(
                name=player.name,
                color=player.color,
                score=player.display_score,
                lives=player.lives,
                is_winner=index < winner_count,
            )
            for index, player in enumerate(ranked)
        ]
        return MatchSummary(
            match_id=self._match_id,
            outcome=self._match_state,
            standings=standings,
            winner_count=winner_count,
            correct_answers=self._session.correct_answers_total,
            questions_asked=self._session.questions_asked_total,
            question_limit=self.question_limit,
            result_text=self._result_text(ranked, winner_count),
        )

    def _result_text(self, ranked: list[Player], winner_count: int) -> str:
        leader = ranked[0]
        if len(ranked) == 1:
            if self._match_state is MatchState.GAME_OVER:
                return f"Game over! {leader.name} scored {leader.display_score} points."
            return f"{leader.name} finished with {leader.display_score} points!"
        if winner_count == 1:
            return f"{leader.name} wins with {leader.display_score} points!"
        names = [player.name for player in ranked[:winner_count]]
        joined = ", ".join(names[:-1]) + f" and {names[-1]}"
        return f"It's a draw between {joined}, each with {leader.display_score} points!"

    def _require_state(self, expected: MatchState, operation: str) -> None:
        if self._match_state is not expected:
            raise InvalidStateTransition(operation, self._match_state)

    def _require_question(self) -> Question:
        question = self._require_sequencer().current_question()
        if question is None:
            raise InvalidStateTransition("answer", self._match_state)
        return question

    def _require_scoreboard(self) -> Scoreboard:
        if self._scoreboard is None:
            raise InvalidStateTransition("scoring", self._match_state)
        return self._scoreboard

    def _require_sequencer(self) -> GroupSequencer:
        if self._sequencer is None:
            raise InvalidStateTransition("sequencing", self._match_state)
        return self._sequencer
