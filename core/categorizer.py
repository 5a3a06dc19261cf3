"""
core/categorizer.py
────────────────────────────────────────────────────────────────────────
Bucket filtered meals by rating tier × meal category (5 × 4 buckets).
"""

from __future__ import annotations

import logging
import math
from typing import Dict, List, Sequence

from core.models.meal import Meal

_LOG = logging.getLogger(__name__)

TIERS = ("fiveStar", "fourStar", "threeStar", "twoStar", "oneStar")
CATEGORIES = ("breakfast", "lunch", "snacks", "dinner")

DEFAULT_RATING = 3
DEFAULT_CATEGORY = "lunch"

_TIER_BY_STARS = {5: "fiveStar", 4: "fourStar", 3: "threeStar", 2: "twoStar", 1: "oneStar"}

Categorized = Dict[str, Dict[str, List[Meal]]]


def rating_tier(rating: float | None) -> str:
    if rating is None or math.isnan(rating):
        stars = DEFAULT_RATING
    elif math.isinf(rating):
        stars = 5 if rating > 0 else 1
    else:
        stars = math.floor(rating)
    return _TIER_BY_STARS[min(max(stars, 1), 5)]


def empty_buckets() -> Categorized:
    return {tier: {cat: [] for cat in CATEGORIES} for tier in TIERS}


def categorize_meals(meals: Sequence[Meal]) -> Categorized:
    buckets = empty_buckets()
    dropped = 0
    for meal in meals:
        category = meal.category or DEFAULT_CATEGORY
        if category not in CATEGORIES:
            dropped += 1
            continue
        buckets[rating_tier(meal.rating)][category].append(meal)

    if dropped:
        _LOG.debug("categorize_meals: dropped %d meals with unknown category", dropped)
    return buckets
