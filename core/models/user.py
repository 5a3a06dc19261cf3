from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from core.models.meal import normalise_category

DEFAULT_MEAL_TYPES = ["breakfast", "lunch", "snacks", "dinner"]


class UserProfile(BaseModel):
    id: int | str | None = Field(None, validation_alias=AliasChoices("id", "userId"))
    subscription_tier: str | None = Field(
        None,
        validation_alias=AliasChoices("subscription_tier", "subscription", "subscriptionTier"),
    )
    allergies: list[str] = []
    dietary_plan: str | None = Field(
        None, validation_alias=AliasChoices("dietary_plan", "plan", "dietaryPlan")
    )
    goal: str | None = None
    meal_count: int = Field(
        3, ge=1, validation_alias=AliasChoices("meal_count", "mealcount", "mealCount")
    )
    meal_types: list[str] = Field(
        default_factory=lambda: list(DEFAULT_MEAL_TYPES),
        min_length=1,
        validation_alias=AliasChoices("meal_types", "mealtypes", "mealTypes"),
    )
    # delivery days; display concern only, the scheduler fills all seven
    selected_days: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("selected_days", "selectedDays"),
    )

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    @field_validator("meal_types")
    @classmethod
    def _ordered_set(cls, v: list[str]) -> list[str]:
        out: list[str] = []
        for t in v:
            norm = normalise_category(t)
            if norm and norm not in out:
                out.append(norm)
        if not out:
            raise ValueError("at least one meal type is required")
        return out
