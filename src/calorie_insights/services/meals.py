"""Meal logging service."""

from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from calorie_insights.domain.meals import NewMeal, NutritionRecord
from calorie_insights.errors import InvalidMealEntry


class MealRepository(Protocol):
    """Persistence interface for logged meals."""

    def create_meal(
        self, user_id: UUID, meal: NewMeal, created_at: datetime
    ) -> NutritionRecord:
        """Persist a meal and return the stored record."""

    def list_meals(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[NutritionRecord]:
        """Return meals created within [start, end]."""

    def list_recent_meals(self, user_id: UUID, limit: int) -> list[NutritionRecord]:
        """Return the newest meals first."""

    def delete_meal(self, user_id: UUID, meal_id: UUID) -> bool:
        """Delete a meal owned by the user; return False if none matched."""


@dataclass
class MealService:
    """Service for logging, listing and deleting meals."""

    repository: MealRepository

    def log_meal(self, user_id: UUID, meal: NewMeal) -> NutritionRecord:
        """Validate and persist a meal."""
        food_name = meal.food_name.strip()
        if not food_name:
            raise InvalidMealEntry("Food name is required")
        if meal.calories <= 0:
            raise InvalidMealEntry("Calories must be a positive number")
        if meal.weight is not None and meal.weight <= 0:
            raise InvalidMealEntry("Weight must be a positive number")
        cleaned = replace(
            meal,
            food_name=food_name,
            healthier_alternative=(meal.healthier_alternative or "").strip() or None,
        )
        return self.repository.create_meal(user_id, cleaned, datetime.now(tz=UTC))

    def history(self, user_id: UUID, limit: int = 50) -> list[NutritionRecord]:
        """Return recent meals for a user."""
        return self.repository.list_recent_meals(user_id, limit)

    def delete(self, user_id: UUID, meal_id: UUID) -> bool:
        """Delete a meal owned by the user."""
        return self.repository.delete_meal(user_id, meal_id)
