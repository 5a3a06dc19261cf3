"""
End-to-end (no DB) – build small catalogues and check the schedule
invariants: per-week uniqueness, allergy safety, premium quota, slot
ceiling and seeded determinism.
"""
from __future__ import annotations

import random
from datetime import datetime, timezone

import pytest

from core.meal_filter import has_allergy_conflict
from core.meal_scheduler import (
    InvalidInput,
    MealScheduler,
    build_slot_list,
    generate_schedule,
    select_meal_for_slot,
    slot_keys,
)
from core.categorizer import categorize_meals
from core.models.meal import Meal
from core.models.schedule import WEEKDAYS
from core.models.user import UserProfile

NOW = datetime(2026, 1, 5, 8, 0, tzinfo=timezone.utc)
CATEGORIES = ("breakfast", "lunch", "snacks", "dinner")


def _catalogue(per_category: int = 12, premium_per_category: int = 2) -> list[Meal]:
    """Each category gets a couple of 5★ meals and a spread of 1–4★ ones."""
    meals = []
    for cat in CATEGORIES:
        for i in range(per_category):
            rating = 5 if i < premium_per_category else 1 + i % 4
            meals.append(Meal(
                id=f"{cat}-{i}",
                name=f"{cat.title()} #{i}",
                category=cat,
                rating=rating,
                calories=300 + 25 * i,
                protein=10 + i,
                carbs=60 - 2 * i,
                fat=12,
                fiber=i % 5,
                ingredients=["egg", "spinach"] if i % 3 == 0 else ["chicken", "rice"],
            ))
    return meals


CATALOGUE = _catalogue()


def _all_meals(week):
    return [m for slots in week.days.values() for m in slots.values()]


# ── slot helpers ─────────────────────────────────────────────────────
def test_slot_list_repeats_and_truncates():
    rng = random.Random(3)
    slots = build_slot_list(["lunch", "dinner"], 5, rng)
    assert len(slots) == 5
    assert slots[:2] == slots[2:4]
    assert slots[4] == slots[0]
    assert sorted(slots[:2]) == ["dinner", "lunch"]


def test_slot_list_truncates_below_type_count():
    slots = build_slot_list(["breakfast", "lunch", "snacks", "dinner"], 2, random.Random(0))
    assert len(slots) == 2
    assert len(set(slots)) == 2


def test_slot_keys_suffix_duplicates():
    assert slot_keys(["dinner", "lunch", "dinner", "lunch", "dinner"]) == [
        "dinner", "lunch", "dinner_2", "lunch_2", "dinner_3",
    ]


def test_select_meal_falls_back_to_standard_pool_without_premium():
    pool = categorize_meals([Meal(id=1, category="lunch", rating=3)])
    meal = select_meal_for_slot(pool, "lunch", True, None, set(), random.Random(0))
    assert meal.id == 1
    assert select_meal_for_slot(pool, "lunch", True, None, {1}, random.Random(0)) is None


def test_select_meal_prefers_four_star_when_no_five_star():
    pool = categorize_meals([
        Meal(id=1, category="dinner", rating=4, protein=1),
        Meal(id=2, category="dinner", rating=3, protein=99),
    ])
    meal = select_meal_for_slot(pool, "dinner", True, None, set(), random.Random(0))
    assert meal.id == 1


# ── preconditions ───────────────────────────────────────────────────
def test_missing_profile_is_invalid_input():
    with pytest.raises(InvalidInput, match="user profile"):
        generate_schedule(None, CATALOGUE)


@pytest.mark.parametrize("catalog", [[], None])
def test_empty_catalog_is_invalid_input(catalog):
    with pytest.raises(InvalidInput, match="meal catalog"):
        generate_schedule(UserProfile(id=1), catalog)


def test_bad_horizon_is_invalid_input():
    with pytest.raises(InvalidInput, match="horizon"):
        generate_schedule(UserProfile(id=1), CATALOGUE, 0)


def test_dict_inputs_are_accepted():
    profile = {"userId": "u-9", "subscription": "quarterly", "mealcount": 2,
               "mealtypes": ["lunch", "dinner"], "plan": None}
    catalog = [m.model_dump() for m in CATALOGUE]
    schedule = generate_schedule(profile, catalog, 1, rng=random.Random(2), now=NOW)
    assert schedule.user_id == "u-9"
    assert schedule.plan_label == "3-Month Plan"
    assert schedule.weeks[0].total_meals == 14


# ── invariants ──────────────────────────────────────────────────────
@pytest.mark.parametrize("seed", range(5))
def test_no_meal_repeats_within_a_week(seed):
    profile = UserProfile(id=1, meal_count=4, subscription_tier="monthly")
    schedule = generate_schedule(profile, CATALOGUE, 4, rng=random.Random(seed), now=NOW)
    for week in schedule.weeks:
        ids = [m.id for m in _all_meals(week)]
        assert len(ids) == len(set(ids))


def test_allergy_safety_holds_for_every_assigned_meal():
    profile = UserProfile(id=1, allergies=["eggs"], meal_count=3)
    schedule = generate_schedule(profile, CATALOGUE, 4, rng=random.Random(11), now=NOW)
    assert schedule.total_meals_assigned > 0
    for week in schedule.weeks:
        for meal in _all_meals(week):
            assert not has_allergy_conflict(meal, profile.allergies)
            assert "egg" not in meal.ingredients


@pytest.mark.parametrize("tier", ["monthly", "quarterly", None])
def test_premium_quota_one_per_week(tier):
    profile = UserProfile(id=1, subscription_tier=tier, meal_count=4)
    schedule = generate_schedule(profile, CATALOGUE, 6, rng=random.Random(5), now=NOW)
    for week in schedule.weeks:
        premium = [m for m in _all_meals(week) if m.is_premium]
        assert week.premium_meals == len(premium) == 1
    assert schedule.total_premium_meals_assigned == 6


def test_weekly_tier_premium_on_odd_weeks_only():
    profile = UserProfile(id=1, subscription_tier="weekly", meal_count=3)
    schedule = generate_schedule(profile, CATALOGUE, 4, rng=random.Random(8), now=NOW)
    assert [w.premium_meals for w in schedule.weeks] == [1, 0, 1, 0]


@pytest.mark.parametrize("meal_count", [1, 3, 6])
def test_days_never_exceed_meal_count(meal_count):
    profile = UserProfile(id=1, meal_count=meal_count, meal_types=["lunch", "dinner"])
    schedule = generate_schedule(profile, CATALOGUE, 2, rng=random.Random(4), now=NOW)
    for week in schedule.weeks:
        assert set(week.days) == set(WEEKDAYS)
        for slots in week.days.values():
            assert len(slots) <= meal_count


def test_same_seed_same_schedule():
    profile = UserProfile(id=1, meal_count=3, goal="Weight Loss", allergies=["dairy"])
    a = generate_schedule(profile, CATALOGUE, 4, rng=random.Random(42), now=NOW)
    b = generate_schedule(profile, CATALOGUE, 4, rng=random.Random(42), now=NOW)
    assert a.model_dump_json() == b.model_dump_json()


def test_counters_add_up():
    profile = UserProfile(id=1, meal_count=3)
    schedule = generate_schedule(profile, CATALOGUE, 3, rng=random.Random(1), now=NOW)
    assert schedule.total_meals_assigned == sum(w.total_meals for w in schedule.weeks)
    for week in schedule.weeks:
        assert week.total_meals == len(_all_meals(week))
        assert sum(len(v) for v in week.meals_by_category.values()) == week.total_meals
    assert schedule.expected_meals == 3 * 7 * 3


def test_facade_uses_injected_rng_and_clock():
    scheduler = MealScheduler(rng=random.Random(9), clock=lambda: NOW)
    schedule = scheduler.generate(UserProfile(id=7), CATALOGUE, 1)
    assert schedule.generated_at == NOW
    assert schedule.start_date == NOW
    assert len(schedule.weeks) == 1


# ── concrete scenarios ──────────────────────────────────────────────
def test_egg_allergy_removes_all_premium_lunches():
    egg_meals = [
        Meal(id=f"egg-{i}", category="lunch", rating=5, ingredients=["egg", "cheese"])
        for i in range(5)
    ]
    safe_meals = [
        Meal(id=f"safe-{i}", category="lunch", rating=3, ingredients=["chicken", "rice"])
        for i in range(5)
    ]
    profile = UserProfile(
        id=1, allergies=["eggs"], meal_types=["lunch"], meal_count=1,
        subscription_tier="monthly",
    )
    schedule = generate_schedule(profile, egg_meals + safe_meals, 4,
                                 rng=random.Random(0), now=NOW)
    safe_ids = {m.id for m in safe_meals}
    for week in schedule.weeks:
        assert week.premium_meals == 0
        # 5 safe meals, no repeats in a week → 5 of 7 days get lunch
        assert week.total_meals == 5
        for slots in week.days.values():
            assert set(slots) <= {"lunch"}
            assert all(m.id in safe_ids for m in slots.values())
    assert schedule.is_partial


def test_repeated_meal_types_get_suffixed_keys():
    profile = UserProfile(id=1, meal_types=["lunch", "dinner"], meal_count=4)
    # 14 lunches + 14 dinners a week need a deeper catalogue
    catalog = _catalogue(per_category=20)
    schedule = generate_schedule(profile, catalog, 1, rng=random.Random(6), now=NOW)
    for slots in schedule.weeks[0].days.values():
        assert set(slots) == {"lunch", "dinner", "lunch_2", "dinner_2"}


def test_short_supply_gives_partial_week_not_error():
    catalog = [Meal(id=i, category="dinner", rating=3) for i in range(3)]
    profile = UserProfile(id=1, meal_types=["dinner", "breakfast"], meal_count=2)
    schedule = generate_schedule(profile, catalog, 2, rng=random.Random(0), now=NOW)
    for week in schedule.weeks:
        assert week.total_meals == 3
        assert len(week.days) == 7
        assert all("breakfast" not in slots for slots in week.days.values())


def test_default_horizon_is_four_weeks():
    schedule = generate_schedule(UserProfile(id=1), CATALOGUE, rng=random.Random(0), now=NOW)
    assert len(schedule.weeks) == 4
    assert [w.week_number for w in schedule.weeks] == [1, 2, 3, 4]
    assert schedule.horizon_weeks == 4
