# api/v1/schemas/schedule.py
from __future__ import annotations

from pydantic import BaseModel, Field

from core.models.meal import Meal
from core.models.schedule import Schedule
from core.models.user import UserProfile


class ScheduleRequest(BaseModel):
    profile: UserProfile
    meals: list[Meal]                                # catalog snapshot
    weeks: int | None = Field(None, ge=1, examples=[4])
    seed: int | None = Field(None, description="fix the random picks (tests / replays)")


class ScheduleOut(BaseModel):
    id: int | None = None                            # None for previews
    schedule: Schedule


class GroceryItem(BaseModel):
    ingredient: str
    count: int


class GroceryListOut(BaseModel):
    user_id: str
    week_number: int
    items: list[GroceryItem]
