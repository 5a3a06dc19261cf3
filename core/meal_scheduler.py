"""
core/meal_scheduler.py
────────────────────────────────────────────────────────────────────────
Assign catalog meals to day / meal-slot pairs over a multi-week horizon.

Pipeline
--------
1.   `resolve_plan()`       – subscription tier → premium-meal policy
2.   `filter_meals()`       – allergy + dietary-plan exclusion
3.   `categorize_meals()`   – rating tier × category buckets
4.   `generate_week()`      – fill 7 days of slots, one week at a time
5.   `pick_from_top()`      – goal-ranked random pick for every slot

Within a week no meal id repeats and at most the week's premium budget
of 5-star meals is handed out.  A slot with no qualifying candidate is
left out of the day; running short is never an error.

Randomness comes from an injected `random.Random` so a fixed seed (plus
a fixed `now`) reproduces the exact same schedule.
"""

from __future__ import annotations

import logging
import random
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Mapping, Sequence, Set

from pydantic import ValidationError

from core.categorizer import CATEGORIES, Categorized, categorize_meals
from core.goal_ranker import TOP_CANDIDATES, pick_from_top
from core.meal_filter import filter_meals
from core.models.meal import Meal
from core.models.schedule import WEEKDAYS, Schedule, WeekSchedule
from core.models.user import UserProfile
from core.plans import SubscriptionPlan, resolve_plan

_LOG = logging.getLogger(__name__)

DEFAULT_HORIZON_WEEKS = 4

_PREMIUM_TIERS = ("fiveStar", "fourStar")
_STANDARD_TIERS = ("fourStar", "threeStar", "twoStar", "oneStar")


class InvalidInput(ValueError):
    """Schedule generation was called without a usable profile or catalog."""


# ──────────────────────────── slot helpers ─────────────────────────── #
def build_slot_list(meal_types: Sequence[str], meal_count: int, rng: random.Random) -> List[str]:
    """Shuffle the requested types, repeat until `meal_count` is reached, truncate."""
    shuffled = list(meal_types)
    rng.shuffle(shuffled)
    if not shuffled:
        return []
    slots: List[str] = []
    while len(slots) < meal_count:
        slots.extend(shuffled)
    return slots[:meal_count]


def slot_keys(slot_list: Iterable[str]) -> List[str]:
    """`lunch`, `lunch_2`, `lunch_3` … for repeated meal types in one day."""
    seen: Dict[str, int] = {}
    keys: List[str] = []
    for meal_type in slot_list:
        seen[meal_type] = seen.get(meal_type, 0) + 1
        n = seen[meal_type]
        keys.append(meal_type if n == 1 else f"{meal_type}_{n}")
    return keys


def _unused(categorized: Categorized, tiers: Sequence[str], meal_type: str,
            used_ids: Set[Any]) -> List[Meal]:
    return [
        m
        for tier in tiers
        for m in categorized.get(tier, {}).get(meal_type, [])
        if m.id not in used_ids
    ]


def select_meal_for_slot(
    categorized: Categorized,
    meal_type: str,
    wants_premium: bool,
    goal: str | None,
    used_ids: Set[Any],
    rng: random.Random,
    top_k: int = TOP_CANDIDATES,
) -> Meal | None:
    candidates: List[Meal] = []

    if wants_premium:
        # 5-star first, 4-star when no 5-star is left
        candidates = _unused(categorized, _PREMIUM_TIERS[:1], meal_type, used_ids)
        if not candidates:
            candidates = _unused(categorized, _PREMIUM_TIERS[1:], meal_type, used_ids)

    if not candidates:
        candidates = _unused(categorized, _STANDARD_TIERS, meal_type, used_ids)

    if not candidates:
        _LOG.debug("no candidates left for slot %s", meal_type)
        return None

    return pick_from_top(candidates, goal, rng, top_k)


# ──────────────────────────── one week ─────────────────────────────── #
def generate_week(
    week_number: int,
    categorized: Categorized,
    plan: SubscriptionPlan,
    profile: UserProfile,
    rng: random.Random,
    top_k: int = TOP_CANDIDATES,
) -> WeekSchedule:
    premium_budget = plan.premium_budget(week_number)
    used_ids: Set[Any] = set()
    days: Dict[str, Dict[str, Meal]] = {}
    by_category: Dict[str, List[Any]] = {cat: [] for cat in CATEGORIES}
    total = premium = 0

    for day in WEEKDAYS:
        day_slots: Dict[str, Meal] = {}
        days[day] = day_slots

        slot_list = build_slot_list(profile.meal_types, profile.meal_count, rng)
        for meal_type, key in zip(slot_list, slot_keys(slot_list)):
            if key in day_slots:
                continue
            meal = select_meal_for_slot(
                categorized, meal_type, premium_budget > 0, profile.goal, used_ids, rng, top_k
            )
            if meal is None:
                continue

            day_slots[key] = meal
            used_ids.add(meal.id)
            by_category.setdefault(meal_type, []).append(meal.id)
            total += 1
            if meal.is_premium:
                premium += 1
                premium_budget = max(premium_budget - 1, 0)

    expected = profile.meal_count * len(WEEKDAYS)
    if total < expected:
        _LOG.warning("week %d: filled %d of %d slots", week_number, total, expected)

    return WeekSchedule(
        week_number=week_number,
        days=days,
        total_meals=total,
        premium_meals=premium,
        meals_by_category=by_category,
    )


# ──────────────────────────── entry point ──────────────────────────── #
def _coerce_profile(profile: UserProfile | Mapping[str, Any] | None) -> UserProfile:
    if profile is None:
        raise InvalidInput("user profile is required")
    if isinstance(profile, UserProfile):
        return profile
    try:
        return UserProfile.model_validate(profile)
    except ValidationError as exc:
        raise InvalidInput(f"user profile is invalid: {exc}") from exc


def _coerce_catalog(catalog: Sequence[Meal | Mapping[str, Any]] | None) -> List[Meal]:
    if not catalog:
        raise InvalidInput("meal catalog is empty or missing")
    try:
        return [m if isinstance(m, Meal) else Meal.model_validate(m) for m in catalog]
    except ValidationError as exc:
        raise InvalidInput(f"meal catalog is invalid: {exc}") from exc


def generate_schedule(
    profile: UserProfile | Mapping[str, Any] | None,
    catalog: Sequence[Meal | Mapping[str, Any]] | None,
    horizon_weeks: int = DEFAULT_HORIZON_WEEKS,
    *,
    rng: random.Random | None = None,
    now: datetime | None = None,
    top_k: int = TOP_CANDIDATES,
) -> Schedule:
    try:
        user = _coerce_profile(profile)
        meals = _coerce_catalog(catalog)
        if horizon_weeks < 1:
            raise InvalidInput(f"horizon must be at least 1 week, got {horizon_weeks}")
    except InvalidInput as exc:
        _LOG.error("Meal schedule generation failed: %s", exc)
        raise

    rng = rng or random.Random()
    stamp = now or datetime.now(timezone.utc)
    plan = resolve_plan(user.subscription_tier)

    categorized = categorize_meals(filter_meals(meals, user))

    weeks: List[WeekSchedule] = []
    total = premium = 0
    for week_number in range(1, horizon_weeks + 1):
        week = generate_week(week_number, categorized, plan, user, rng, top_k)
        weeks.append(week)
        total += week.total_meals
        premium += week.premium_meals

    _LOG.debug(
        "schedule for user %s: %d weeks, %d meals (%d premium)",
        user.id, horizon_weeks, total, premium,
    )
    return Schedule(
        user_id=user.id,
        subscription_tier=user.subscription_tier,
        plan_label=plan.label,
        start_date=stamp,
        generated_at=stamp,
        horizon_weeks=horizon_weeks,
        meal_count=user.meal_count,
        weeks=weeks,
        total_meals_assigned=total,
        total_premium_meals_assigned=premium,
    )


class MealScheduler:
    """Stateless facade; holds only the random source, clock and top-k."""

    def __init__(
        self,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] | None = None,
        top_k: int = TOP_CANDIDATES,
    ) -> None:
        self._rng = rng
        self._clock = clock
        self._top_k = top_k

    def generate(
        self,
        profile: UserProfile | Mapping[str, Any] | None,
        catalog: Sequence[Meal | Mapping[str, Any]] | None,
        horizon_weeks: int = DEFAULT_HORIZON_WEEKS,
    ) -> Schedule:
        now = self._clock() if self._clock else None
        return generate_schedule(
            profile, catalog, horizon_weeks, rng=self._rng, now=now, top_k=self._top_k
        )
