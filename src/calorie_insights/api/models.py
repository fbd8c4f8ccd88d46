"""Pydantic models for the HTTP API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from calorie_insights.domain.estimates import Macronutrients
from calorie_insights.domain.meals import NewMeal, NutritionRecord


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EstimateRequest(_CamelModel):
    """Request body for a nutrition estimate."""

    food_name: str
    weight: float | str | None = None
    image_base64: str | None = None


class MealEntry(_CamelModel):
    """Request body for logging a meal."""

    food_name: str
    calories: float
    macronutrients: Macronutrients | None = None
    healthiness_rating: int | None = Field(default=None, ge=1, le=10)
    healthier_alternative: str | None = None
    weight: float | None = None
    image_url: str | None = None
    consumed: bool = True

    def to_new_meal(self) -> NewMeal:
        """Convert to the domain model."""
        macros = self.macronutrients or Macronutrients()
        return NewMeal(
            food_name=self.food_name,
            calories=self.calories,
            protein=macros.protein,
            carbs=macros.carbs,
            fats=macros.fats,
            healthiness_rating=self.healthiness_rating,
            healthier_alternative=self.healthier_alternative,
            weight=self.weight,
            image_url=self.image_url,
            consumed=self.consumed,
        )


class MealResponse(_CamelModel):
    """A logged meal as returned to clients."""

    id: UUID
    food_name: str
    calories: float
    macronutrients: Macronutrients
    healthiness_rating: int | None
    healthier_alternative: str | None
    weight: float | None
    image_url: str | None
    consumed: bool
    created_at: datetime

    @classmethod
    def from_record(cls, record: NutritionRecord) -> "MealResponse":
        """Build a response from a stored record."""
        return cls(
            id=record.id,
            food_name=record.food_name,
            calories=record.calories,
            macronutrients=Macronutrients(
                protein=record.protein or 0.0,
                carbs=record.carbs or 0.0,
                fats=record.fats or 0.0,
            ),
            healthiness_rating=record.healthiness_rating,
            healthier_alternative=record.healthier_alternative,
            weight=record.weight,
            image_url=record.image_url,
            consumed=record.consumed,
            created_at=record.created_at,
        )
