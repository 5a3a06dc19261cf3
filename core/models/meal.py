from __future__ import annotations

import math

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

# short/plural spellings seen in catalog exports
CATEGORY_ALIASES = {"snack": "snacks"}


def normalise_category(value: str | None) -> str | None:
    if value is None:
        return None
    v = value.strip().lower()
    return CATEGORY_ALIASES.get(v, v)


class Meal(BaseModel):
    id: int | str
    name: str | None = None
    category: str | None = None    # breakfast / lunch / snacks / dinner
    rating: float | None = None
    calories: float | None = None
    protein: float | None = None
    carbs: float | None = None
    fat: float | None = Field(None, validation_alias=AliasChoices("fat", "fats"))
    fiber: float | None = None
    ingredients: list[str] | None = None
    dietary_tags: list[str] | None = Field(
        None, validation_alias=AliasChoices("dietary_tags", "dietaryTags")
    )

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    @field_validator("category")
    @classmethod
    def _category(cls, v: str | None) -> str | None:
        return normalise_category(v)

    @field_validator("rating")
    @classmethod
    def _finite_rating(cls, v: float | None) -> float | None:
        # NaN reads as "no rating"; infinities pin to the ends of the 1-5 scale
        if v is None or math.isfinite(v):
            return v
        if math.isnan(v):
            return None
        return 5.0 if v > 0 else 1.0

    @property
    def is_premium(self) -> bool:
        return self.rating is not None and self.rating >= 5
