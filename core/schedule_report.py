"""
core/schedule_report.py
────────────────────────────────────────────────────────────────────────
Flatten a `Schedule` into pandas tables for callers that render or audit
it: one row per filled slot, a per-week fulfilment summary (expected vs
assigned) and an ingredient count for grocery lists.
"""

from __future__ import annotations

import pandas as pd

from core.models.schedule import WEEKDAYS, Schedule

_COLUMNS = [
    "week", "day", "slot", "category", "meal_id", "name", "rating", "premium",
    "calories", "protein", "carbs", "fat", "fiber",
]


def schedule_frame(schedule: Schedule) -> pd.DataFrame:
    rows = []
    for week in schedule.weeks:
        for day in WEEKDAYS:
            for slot, meal in week.days.get(day, {}).items():
                rows.append({
                    "week":     week.week_number,
                    "day":      day,
                    "slot":     slot,
                    "category": meal.category,
                    "meal_id":  meal.id,
                    "name":     meal.name,
                    "rating":   meal.rating,
                    "premium":  meal.is_premium,
                    "calories": meal.calories or 0.0,
                    "protein":  meal.protein or 0.0,
                    "carbs":    meal.carbs or 0.0,
                    "fat":      meal.fat or 0.0,
                    "fiber":    meal.fiber or 0.0,
                })
    return pd.DataFrame(rows, columns=_COLUMNS)


def fulfilment_summary(schedule: Schedule) -> pd.DataFrame:
    """Per-week expected vs assigned slots; `missing > 0` means under-filled."""
    expected = schedule.meal_count * len(WEEKDAYS)
    df = pd.DataFrame(
        [
            {
                "week": w.week_number,
                "expected": expected,
                "assigned": w.total_meals,
                "premium": w.premium_meals,
            }
            for w in schedule.weeks
        ],
        columns=["week", "expected", "assigned", "premium"],
    )
    return df.assign(missing=df["expected"] - df["assigned"])


def grocery_list(schedule: Schedule, week_number: int | None = None) -> pd.DataFrame:
    items = []
    for week in schedule.weeks:
        if week_number is not None and week.week_number != week_number:
            continue
        for slots in week.days.values():
            for meal in slots.values():
                items.extend(i.strip().lower() for i in meal.ingredients or [] if i.strip())

    if not items:
        return pd.DataFrame(columns=["ingredient", "count"])

    counts = pd.Series(items).value_counts()
    out = counts.rename_axis("ingredient").reset_index(name="count")
    return out.sort_values(["count", "ingredient"], ascending=[False, True]).reset_index(drop=True)
