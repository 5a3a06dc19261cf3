from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, computed_field

from core.models.meal import Meal

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


class WeekSchedule(BaseModel):
    week_number: int
    days: dict[str, dict[str, Meal]]          # day -> slot key -> meal
    total_meals: int = 0
    premium_meals: int = 0
    meals_by_category: dict[str, list[int | str]] = {}


class Schedule(BaseModel):
    user_id: int | str | None
    subscription_tier: str | None
    plan_label: str
    start_date: datetime
    generated_at: datetime
    horizon_weeks: int
    meal_count: int
    weeks: list[WeekSchedule]
    total_meals_assigned: int = 0
    total_premium_meals_assigned: int = 0

    @computed_field  # type: ignore[misc]
    @property
    def expected_meals(self) -> int:
        return self.meal_count * len(WEEKDAYS) * self.horizon_weeks

    @computed_field  # type: ignore[misc]
    @property
    def is_partial(self) -> bool:
        return self.total_meals_assigned < self.expected_meals

    def week(self, week_number: int) -> WeekSchedule | None:
        for w in self.weeks:
            if w.week_number == week_number:
                return w
        return None
