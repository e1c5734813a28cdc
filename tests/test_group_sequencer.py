from __future__ import annotations

from hotseat_quiz.core.models import SessionState
from hotseat_quiz.core.services.group_sequencer import GroupSequencer
from hotseat_quiz.core.services.question_bank import QuestionBank


def _bank(make_question, bonuses):
    return QuestionBank.load(
        [make_question(f"q{index}", bonus=bonus) for index, bonus in enumerate(bonuses)]
    )


def _walk(sequencer: GroupSequencer, state: SessionState) -> list[str]:
    served = []
    question = sequencer.advance()
    while question is not None:
        served.append(question.text)
        state.questions_asked_total += 1
        sequencer.record_completed()
        question = sequencer.advance()
    return served


def test_skips_rest_of_group_once_quota_is_met(make_question):
    state = SessionState()
    bank = _bank(make_question, [10, 10, 10, 20])
    sequencer = GroupSequencer(bank, state, base_per_group=2)

    assert _walk(sequencer, state) == ["q0", "q1", "q3"]


def test_quota_scales_with_player_count(make_question):
    state = SessionState()
    bank = _bank(make_question, [10, 10, 10, 10, 10, 20])
    sequencer = GroupSequencer(bank, state, base_per_group=2, player_count=2)

    assert sequencer.questions_per_group == 4
    assert _walk(sequencer, state) == ["q0", "q1", "q2", "q3", "q5"]


def test_group_bonus_never_decreases(make_question):
    state = SessionState()
    bank = _bank(make_question, [10, 10, 20, 20, 20, 30, 40, 40])
    sequencer = GroupSequencer(bank, state, base_per_group=1)

    bonuses = []
    question = sequencer.advance()
    while question is not None:
        bonuses.append(question.bonus)
        sequencer.record_completed()
        question = sequencer.advance()

    assert bonuses == [10, 20, 30, 40]
    assert bonuses == sorted(bonuses)


def test_grouping_disabled_serves_every_question(make_question):
    state = SessionState()
    bank = _bank(make_question, [30, 10, 10, 20])
    sequencer = GroupSequencer(bank, state, base_per_group=1, grouping_enabled=False)

    assert _walk(sequencer, state) == ["q0", "q1", "q2", "q3"]


def test_question_limit_is_clamped_to_bank_size(make_question):
    state = SessionState()
    bank = _bank(make_question, [10, 10, 10])
    sequencer = GroupSequencer(bank, state, base_per_group=5, question_limit=99)

    assert sequencer.question_limit == 3


def test_limit_reached_after_enough_questions(make_question):
    state = SessionState()
    bank = _bank(make_question, [10, 10, 10])
    sequencer = GroupSequencer(bank, state, base_per_group=5, question_limit=2)

    sequencer.advance()
    state.questions_asked_total = 1
    assert not sequencer.limit_reached()
    state.questions_asked_total = 2
    assert sequencer.limit_reached()


def test_zero_limit_never_reached(make_question):
    state = SessionState(questions_asked_total=50)
    sequencer = GroupSequencer(_bank(make_question, [10]), state, base_per_group=1)
    assert not sequencer.limit_reached()


def test_first_question_offsets_start(make_question):
    state = SessionState()
    bank = _bank(make_question, [10, 10, 10])
    sequencer = GroupSequencer(bank, state, base_per_group=5, first_question=2)

    assert sequencer.advance().text == "q1"


def test_exhausted_bank_leaves_no_current_question(make_question):
    state = SessionState()
    sequencer = GroupSequencer(_bank(make_question, [10]), state, base_per_group=1)
    sequencer.advance()
    sequencer.record_completed()

    assert sequencer.advance() is None
    assert sequencer.current_question() is None
