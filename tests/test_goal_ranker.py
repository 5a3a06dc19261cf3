# tests/test_goal_ranker.py
import random

import pytest

from core.goal_ranker import pick_from_top, rank_by_goal
from core.models.meal import Meal

MEALS = [
    Meal(id=1, calories=600, protein=20, carbs=70, fiber=3),
    Meal(id=2, calories=300, protein=35, carbs=10),            # fiber missing → 0
    Meal(id=3, calories=450, protein=50, carbs=40, fiber=9),
    Meal(id=4, protein=10, carbs=5, fiber=6),                  # calories missing → 0
]


@pytest.mark.parametrize("goal, order", [
    ("Weight Loss", [4, 2, 3, 1]),
    ("Weight Gain", [1, 3, 2, 4]),
    ("Staying Fit", [3, 2, 1, 4]),
    ("Eating Healthy", [3, 4, 1, 2]),
    ("Keto Diet", [4, 2, 3, 1]),
    (None, [3, 2, 1, 4]),
    ("Something Else", [3, 2, 1, 4]),
])
def test_rank_by_goal(goal, order):
    assert [m.id for m in rank_by_goal(MEALS, goal)] == order


def test_rank_does_not_reorder_input():
    rank_by_goal(MEALS, "Weight Loss")
    assert [m.id for m in MEALS] == [1, 2, 3, 4]


def test_pick_only_from_top_three():
    rng = random.Random(0)
    picks = {pick_from_top(MEALS, "Staying Fit", rng).id for _ in range(200)}
    assert picks == {3, 2, 1}


def test_pick_handles_short_and_empty_lists():
    rng = random.Random(1)
    assert pick_from_top(MEALS[:1], "Weight Loss", rng).id == 1
    assert pick_from_top([], "Weight Loss", rng) is None
