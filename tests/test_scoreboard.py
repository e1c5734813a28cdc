from __future__ import annotations

import pytest

from hotseat_quiz.core.models import Player
from hotseat_quiz.core.services.scoreboard import Scoreboard


def _board(*names: str, **kwargs) -> Scoreboard:
    board = Scoreboard([Player(name=name) for name in names], **kwargs)
    board.reset_players(starting_lives=3)
    return board


@pytest.mark.parametrize(
    ("wrong_answers", "expected_award"),
    [(0, 100.0), (1, 50.0)],
)
def test_bonus_halves_per_wrong_answer(wrong_answers, expected_award):
    board = _board("Ada", maximum_mistakes=3)
    player = board.current_player
    board.begin_question(100)
    for _ in range(wrong_answers):
        board.record_wrong(player)

    outcome = board.record_correct(player)

    assert outcome.awarded == pytest.approx(expected_award)
    assert player.score == pytest.approx(expected_award)


def test_two_wrong_answers_with_three_allowed_leave_a_quarter():
    board = _board("Ada", maximum_mistakes=3)
    player = board.current_player
    board.begin_question(100)
    board.record_wrong(player)
    board.record_wrong(player)

    assert board.available_bonus == pytest.approx(25.0)


def test_mistake_budget_resolves_and_costs_a_life():
    board = _board("Ada", maximum_mistakes=2)
    player = board.current_player
    board.begin_question(40)

    first = board.record_wrong(player)
    second = board.record_wrong(player)

    assert first.resolved is False
    assert second.resolved is True
    assert second.life_lost is True
    assert board.available_bonus == 0
    assert player.lives == 2


def test_timeout_costs_exactly_one_life_and_lives_never_go_negative():
    board = _board("Ada")
    player = board.current_player
    for _ in range(5):
        board.begin_question(10)
        board.record_timeout(player)

    assert player.lives == 0
    assert player.is_eliminated


def test_skip_costs_nothing():
    board = _board("Ada")
    player = board.current_player
    board.begin_question(10)
    outcome = board.record_skip()

    assert outcome.resolved and not outcome.correct
    assert player.lives == 3
    assert player.score == 0


def test_begin_question_clears_mistakes():
    board = _board("Ada", maximum_mistakes=3)
    player = board.current_player
    board.begin_question(10)
    board.record_wrong(player)
    board.begin_question(20)

    assert player.mistakes_this_question == 0
    assert board.available_bonus == 20


def test_next_turn_wraps_and_skips_eliminated_players():
    board = _board("Ada", "Ben", "Cy")
    board.players[1].lives = 0

    board.next_turn(play_in_turns=True)
    assert board.current_player.name == "Cy"
    board.next_turn(play_in_turns=True)
    assert board.current_player.name == "Ada"


def test_next_turn_without_turns_keeps_player():
    board = _board("Ada", "Ben")
    board.next_turn(play_in_turns=False)
    assert board.current_player.name == "Ada"


def test_ranking_reports_shared_top_score_as_draw():
    board = _board("Ada", "Ben", "Cy")
    for player, score in zip(board.players, [50, 50, 30]):
        player.score = score

    ranked = board.rank_players()

    assert [p.name for p in ranked] == ["Ada", "Ben", "Cy"]
    assert board.winner_count() == 2


def test_ranking_orders_by_score_descending():
    board = _board("Ada", "Ben", "Cy")
    for player, score in zip(board.players, [10, 30, 20]):
        player.score = score

    assert [p.name for p in board.rank_players()] == ["Ben", "Cy", "Ada"]
    assert board.winner_count() == 1


def test_empty_roster_is_rejected():
    with pytest.raises(ValueError):
        Scoreboard([])


def test_partial_points_round_up_for_display():
    player = Player(name="Ada", score=12.5)
    assert player.display_score == 13


def test_draw_is_decided_on_displayed_scores():
    board = _board("Ada", "Ben", "Cy")
    for player, score in zip(board.players, [12.5, 13, 12]):
        player.score = score

    assert [p.name for p in board.rank_players()] == ["Ada", "Ben", "Cy"]
    assert board.winner_count() == 2
