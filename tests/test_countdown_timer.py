from __future__ import annotations

import pytest

from hotseat_quiz.core.services.countdown_timer import CountdownTimer


class ExpiryCounter:
    def __init__(self) -> None:
        self.count = 0

    def __call__(self) -> None:
        self.count += 1


def test_counts_down_by_elapsed_time():
    timer = CountdownTimer()
    timer.start(10)
    timer.tick(2.5)
    assert timer.remaining() == pytest.approx(7.5)
    assert timer.fraction_remaining() == pytest.approx(0.75)


def test_expires_exactly_once_per_start():
    counter = ExpiryCounter()
    timer = CountdownTimer(on_expire=counter)
    timer.start(1)

    assert timer.tick(0.6) is False
    assert timer.tick(0.6) is True
    assert timer.tick(5) is False
    assert counter.count == 1
    assert timer.remaining() == 0

    timer.start(1)
    timer.tick(1)
    assert counter.count == 2


def test_stop_suppresses_expiry_and_freezes_time():
    counter = ExpiryCounter()
    timer = CountdownTimer(on_expire=counter)
    timer.start(3)
    timer.tick(1)
    timer.stop()
    timer.tick(10)

    assert counter.count == 0
    assert timer.remaining() == pytest.approx(2)


def test_resume_continues_from_remaining_time():
    counter = ExpiryCounter()
    timer = CountdownTimer(on_expire=counter)
    timer.start(3)
    timer.tick(1)
    timer.stop()
    timer.resume()
    timer.tick(2)

    assert counter.count == 1


def test_zero_duration_expires_on_first_tick():
    counter = ExpiryCounter()
    timer = CountdownTimer(on_expire=counter)
    timer.start(0)
    timer.tick(0)
    assert counter.count == 1


def test_rejects_negative_values():
    timer = CountdownTimer()
    with pytest.raises(ValueError):
        timer.start(-1)
    timer.start(1)
    with pytest.raises(ValueError):
        timer.tick(-0.1)


def test_resumed_timer_with_no_time_left_expires_on_next_tick():
    counter = ExpiryCounter()
    timer = CountdownTimer(on_expire=counter)
    timer.start(0)
    timer.stop()
    timer.resume()

    assert timer.is_running
    assert timer.tick(0) is True
    assert counter.count == 1


def test_resume_after_expiry_does_not_fire_again():
    counter = ExpiryCounter()
    timer = CountdownTimer(on_expire=counter)
    timer.start(1)
    timer.tick(1)
    timer.resume()
    timer.tick(1)

    assert not timer.is_running
    assert counter.count == 1
