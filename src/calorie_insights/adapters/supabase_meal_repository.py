"""Supabase repository for logged meals."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from calorie_insights.domain.meals import NewMeal, NutritionRecord
from calorie_insights.services.meals import MealRepository

_COLUMNS = (
    "id, user_id, food_name, weight, calories, protein, carbs, fats, "
    "healthiness_rating, healthier_alternative, image_url, consumed, created_at"
)


@dataclass
class SupabaseMealRepository(MealRepository):
    """Supabase implementation for the meals table."""

    client: Client

    def create_meal(
        self, user_id: UUID, meal: NewMeal, created_at: datetime
    ) -> NutritionRecord:
        """Insert a meal row and return the stored record."""
        response = (
            self.client.table("meals")
            .insert(
                {
                    "user_id": str(user_id),
                    "food_name": meal.food_name,
                    "weight": meal.weight,
                    "calories": meal.calories,
                    "protein": meal.protein,
                    "carbs": meal.carbs,
                    "fats": meal.fats,
                    "healthiness_rating": meal.healthiness_rating,
                    "healthier_alternative": meal.healthier_alternative,
                    "image_url": meal.image_url,
                    "consumed": meal.consumed,
                    "created_at": created_at.isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create meal")
        return _parse_row(response.data[0])

    def list_meals(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[NutritionRecord]:
        """Return meals created within the inclusive range."""
        response = (
            self.client.table("meals")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .gte("created_at", start.isoformat())
            .lte("created_at", end.isoformat())
            .order("created_at", desc=False)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def list_recent_meals(self, user_id: UUID, limit: int) -> list[NutritionRecord]:
        """Return the newest meals for a user."""
        response = (
            self.client.table("meals")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def delete_meal(self, user_id: UUID, meal_id: UUID) -> bool:
        """Delete a meal if it belongs to the user."""
        response = (
            self.client.table("meals")
            .delete()
            .eq("id", str(meal_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        return bool(response.data)


def _parse_row(row: dict[str, object]) -> NutritionRecord:
    created_at_raw = row.get("created_at")
    created_at = (
        datetime.fromisoformat(created_at_raw)
        if isinstance(created_at_raw, str) and created_at_raw
        else datetime.min.replace(tzinfo=UTC)
    )
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=UTC)
    rating = row.get("healthiness_rating")
    return NutritionRecord(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        food_name=str(row.get("food_name") or ""),
        calories=float(row.get("calories") or 0.0),
        created_at=created_at,
        consumed=bool(row.get("consumed", True)),
        protein=_optional_float(row.get("protein")),
        carbs=_optional_float(row.get("carbs")),
        fats=_optional_float(row.get("fats")),
        healthiness_rating=int(rating) if rating is not None else None,
        healthier_alternative=row.get("healthier_alternative"),
        weight=_optional_float(row.get("weight")),
        image_url=row.get("image_url"),
    )


def _optional_float(value: object) -> float | None:
    return float(value) if value is not None else None
