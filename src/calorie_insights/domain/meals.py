"""Domain models for logged meals."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class NewMeal:
    """Fields required to log a meal."""

    food_name: str
    calories: float
    protein: float = 0.0
    carbs: float = 0.0
    fats: float = 0.0
    healthiness_rating: int | None = None
    healthier_alternative: str | None = None
    weight: float | None = None
    image_url: str | None = None
    consumed: bool = True


@dataclass(frozen=True)
class NutritionRecord:
    """Persisted meal as supplied to aggregation.

    Macronutrient and rating fields may be missing on older rows; they are
    treated as zero (or as unrated) by every aggregate.
    """

    id: UUID
    user_id: UUID
    food_name: str
    calories: float
    created_at: datetime
    consumed: bool = True
    protein: float | None = None
    carbs: float | None = None
    fats: float | None = None
    healthiness_rating: int | None = None
    healthier_alternative: str | None = None
    weight: float | None = None
    image_url: str | None = None
