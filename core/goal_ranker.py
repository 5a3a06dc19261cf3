"""
core/goal_ranker.py
────────────────────────────────────────────────────────────────────────
Order a slot's candidates by the user's fitness goal, then pick one at
random from the top few.  The bounded randomness keeps regenerated plans
varied while staying close to the goal-optimal meals.
"""

from __future__ import annotations

import random
from typing import Callable, Dict, List, Sequence, Tuple

from core.models.meal import Meal

TOP_CANDIDATES = 3


def _macro(name: str) -> Callable[[Meal], float]:
    return lambda m: getattr(m, name) or 0.0


# goal -> (sort key, descending)
GOAL_ORDER: Dict[str, Tuple[Callable[[Meal], float], bool]] = {
    "Weight Loss": (_macro("calories"), False),
    "Weight Gain": (_macro("calories"), True),
    "Staying Fit": (_macro("protein"), True),
    "Eating Healthy": (_macro("fiber"), True),
    "Keto Diet": (_macro("carbs"), False),
}
DEFAULT_ORDER = (_macro("protein"), True)


def rank_by_goal(meals: Sequence[Meal], goal: str | None) -> List[Meal]:
    key, descending = GOAL_ORDER.get(goal or "", DEFAULT_ORDER)
    # sorted() is stable, ties keep catalog/tier order
    return sorted(meals, key=key, reverse=descending)


def pick_from_top(
    meals: Sequence[Meal],
    goal: str | None,
    rng: random.Random,
    top_k: int = TOP_CANDIDATES,
) -> Meal | None:
    if not meals:
        return None
    ranked = rank_by_goal(meals, goal)
    top = ranked[: max(1, min(top_k, len(ranked)))]
    return rng.choice(top)
