from __future__ import annotations

import random

import pytest

from hotseat_quiz.core.models import Category
from hotseat_quiz.core.services.category_rotation import CategoryRotation


def _categories(make_question, *names: str) -> list[Category]:
    return [Category(name=name, questions=[make_question(f"{name} q")]) for name in names]


def test_take_current_marks_category_and_moves_on(make_question):
    rotation = CategoryRotation(_categories(make_question, "Maths", "Music", "Sport"), randomize=False)

    questions = rotation.take_current()

    assert [q.text for q in questions] == ["Maths q"]
    assert rotation.get_categories()[0].already_used
    assert rotation.get_current_category().name == "Music"
    assert rotation.played_count() == 1


def test_campaign_completes_after_enough_categories(make_question):
    rotation = CategoryRotation(
        _categories(make_question, "Maths", "Music", "Sport", "Art"),
        categories_to_victory=3,
        randomize=False,
    )
    for _ in range(2):
        rotation.take_current()
    assert not rotation.is_campaign_complete()

    rotation.take_current()
    assert rotation.is_campaign_complete()


def test_target_is_clamped_to_available_categories(make_question):
    rotation = CategoryRotation(_categories(make_question, "Maths"), categories_to_victory=3)
    rotation.take_current()
    assert rotation.is_campaign_complete()


def test_used_category_cannot_be_selected_again(make_question):
    rotation = CategoryRotation(_categories(make_question, "Maths", "Music"), randomize=False)
    rotation.take_current()

    with pytest.raises(ValueError):
        rotation.select(0)
    with pytest.raises(IndexError):
        rotation.select(5)
    assert rotation.select(1).name == "Music"


def test_randomized_order_is_a_permutation(make_question):
    names = ["Maths", "Music", "Sport", "Art", "Film"]
    rotation = CategoryRotation(_categories(make_question, *names), rng=random.Random(5))

    assert sorted(c.name for c in rotation.get_categories()) == sorted(names)


def test_needs_categories():
    with pytest.raises(ValueError):
        CategoryRotation([])
