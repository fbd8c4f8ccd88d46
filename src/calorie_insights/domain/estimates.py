"""Canonical nutrition estimate models."""

from dataclasses import dataclass, field
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

UNKNOWN_FOOD = "Unknown Food"
DEFAULT_HEALTHINESS_RATING = 5
MIN_HEALTHINESS_RATING = 1
MAX_HEALTHINESS_RATING = 10
REQUIRED_FIELDS = ("foodName", "calories", "macronutrients", "healthinessRating")


class Macronutrients(BaseModel):
    """Protein, carbs and fats in grams."""

    model_config = ConfigDict(frozen=True)

    protein: float = Field(default=0.0, ge=0.0, allow_inf_nan=False)
    carbs: float = Field(default=0.0, ge=0.0, allow_inf_nan=False)
    fats: float = Field(default=0.0, ge=0.0, allow_inf_nan=False)


class NutritionEstimate(BaseModel):
    """Fully validated nutrition estimate for a single food."""

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    food_name: str = Field(min_length=1)
    calories: float = Field(ge=0.0, allow_inf_nan=False)
    macronutrients: Macronutrients
    healthiness_rating: int = Field(
        ge=MIN_HEALTHINESS_RATING, le=MAX_HEALTHINESS_RATING
    )
    healthier_alternative: str | None = None


@dataclass(frozen=True)
class Correction:
    """A field that was replaced with a safe value during validation."""

    field: str
    received: object
    replacement: object


@dataclass(frozen=True)
class NormalizedEstimate:
    """Model output accepted, possibly with corrections."""

    estimate: NutritionEstimate
    corrections: list[Correction] = field(default_factory=list)
    kind: Literal["accepted"] = "accepted"


@dataclass(frozen=True)
class RejectedEstimate:
    """Model output that could not be turned into an estimate."""

    reason: Literal["parse", "schema"]
    error: Exception
    kind: Literal["rejected"] = "rejected"


NormalizationResult = NormalizedEstimate | RejectedEstimate
