"""
core/meal_filter.py
────────────────────────────────────────────────────────────────────────
Drop catalog meals that are unsafe or off-plan for a user.

1.   Allergy exclusion – substring match (either direction) between an
     ingredient and an allergy, plus a fixed synonym table
     ("eggs" also catches "omelette", "dairy" catches "cheese", …).
2.   Dietary-plan compatibility – the meal needs at least one of the tags
     mapped to the user's plan.

Meals without ingredient data pass the allergy check: nothing can be
proven unsafe about them.  Same for meals without dietary tags.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Sequence

from core.models.meal import Meal
from core.models.user import UserProfile

_LOG = logging.getLogger(__name__)

ALLERGEN_SYNONYMS: Dict[str, List[str]] = {
    "eggs": ["egg", "eggs", "egg white", "egg yolk", "scrambled", "fried egg",
             "boiled egg", "omelet", "omelette"],
    "dairy": ["milk", "cheese", "butter", "cream", "yogurt", "yoghurt", "dairy", "lactose"],
    "nuts": ["nuts", "almond", "walnut", "pecan", "cashew", "pistachio", "hazelnut", "macadamia"],
    "gluten": ["wheat", "gluten", "flour", "bread", "pasta", "barley", "rye"],
    "shellfish": ["shrimp", "crab", "lobster", "shellfish", "prawns", "scallops"],
    "soy": ["soy", "soya", "tofu", "soy sauce", "soybeans"],
}

PLAN_TAGS: Dict[str, List[str]] = {
    "Balanced": ["High Protein", "Gluten-Free"],
    "Low Carb": ["Low Carb"],
    "Protein Boost": ["High Protein"],
    "Vegetarian Kitchen": ["Vegetarian"],
    "Chef's Choice": ["High Protein", "Low Carb", "Keto"],
    "Keto": ["Keto"],
}


def has_allergy_conflict(meal: Meal, allergies: Iterable[str]) -> bool:
    if not meal.ingredients:
        return False

    allergies_low = [a.strip().lower() for a in allergies if a and a.strip()]
    if not allergies_low:
        return False

    for ingredient in meal.ingredients:
        ing = ingredient.strip().lower()
        if not ing:
            continue
        for allergy in allergies_low:
            if allergy in ing or ing in allergy:
                return True
            for variation in ALLERGEN_SYNONYMS.get(allergy, ()):
                if variation in ing:
                    return True
    return False


def is_plan_compatible(meal: Meal, dietary_plan: str | None) -> bool:
    if not dietary_plan or not meal.dietary_tags:
        return True
    wanted = PLAN_TAGS.get(dietary_plan, [])
    if not wanted:
        return True
    return any(tag in meal.dietary_tags for tag in wanted)


def filter_meals(meals: Sequence[Meal], profile: UserProfile) -> List[Meal]:
    out = [
        m for m in meals
        if not has_allergy_conflict(m, profile.allergies)
        and is_plan_compatible(m, profile.dietary_plan)
    ]
    _LOG.debug("filter_meals: %d → %d meals", len(meals), len(out))
    if not out:
        _LOG.warning("No meals left after filtering for user %s", profile.id)
    return out
