"""Narrative analysis of a user's recent meal history."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from uuid import UUID

from calorie_insights.domain.analysis import HistoryAnalysis, HistoryStats
from calorie_insights.domain.estimates import DEFAULT_HEALTHINESS_RATING
from calorie_insights.domain.meals import NutritionRecord
from calorie_insights.services.estimation import ModelClient
from calorie_insights.services.meals import MealRepository
from calorie_insights.services.repair import parse_model_json

_logger = logging.getLogger(__name__)

EMPTY_HISTORY_ANALYSIS = HistoryAnalysis(
    summary="No meals logged in the last 30 days.",
    nutritional_balance="N/A",
    healthiness_trend="N/A",
    recommendations=["Start logging meals to receive personalized insights."],
)


@dataclass
class AnalysisService:
    """Service that asks the model to review the last month of meals."""

    repository: MealRepository
    client: ModelClient
    model: str
    lookback_days: int = 30

    async def analyze(
        self, user_id: UUID, now: datetime | None = None
    ) -> HistoryAnalysis:
        """Return a report on consumed meals within the lookback period."""
        end = now or datetime.now(tz=UTC)
        start = end - timedelta(days=self.lookback_days)
        records = [
            record
            for record in self.repository.list_meals(user_id, start, end)
            if record.consumed
        ]
        if not records:
            return EMPTY_HISTORY_ANALYSIS

        stats = history_stats(records)
        _logger.info(
            "Analyzing %s meals for user %s (avg %.1f kcal)",
            stats.meal_count,
            user_id,
            stats.average_calories,
        )
        text = await self.client.complete(
            model=self.model, prompt=build_analysis_prompt(stats), image_data_url=None
        )
        return sanitize_analysis(parse_model_json(text))


def history_stats(records: Iterable[NutritionRecord]) -> HistoryStats:
    """Aggregate consumed meals; unrated meals count as a neutral rating."""
    meals = [record for record in records if record.consumed]
    count = len(meals)
    total_calories = sum(meal.calories or 0.0 for meal in meals)
    rating_total = sum(
        meal.healthiness_rating or DEFAULT_HEALTHINESS_RATING for meal in meals
    )
    return HistoryStats(
        meal_count=count,
        total_calories=total_calories,
        average_calories=total_calories / count if count else 0.0,
        protein=sum(meal.protein or 0.0 for meal in meals),
        carbs=sum(meal.carbs or 0.0 for meal in meals),
        fats=sum(meal.fats or 0.0 for meal in meals),
        average_healthiness=rating_total / count if count else 0.0,
    )


def build_analysis_prompt(stats: HistoryStats) -> str:
    """Return the history analysis prompt."""
    return (
        "Review this meal history from the last 30 days:\n"
        f"- Total meals: {stats.meal_count}\n"
        f"- Average calories per meal: {stats.average_calories:.2f} kcal\n"
        f"- Total macronutrients: protein {stats.protein:.2f}g, "
        f"carbs {stats.carbs:.2f}g, fats {stats.fats:.2f}g\n"
        f"- Average healthiness rating: {stats.average_healthiness:.2f} "
        "(scale 1-10)\n"
        "Answer with a single JSON object with keys:\n"
        "- summary: string, a brief overview of the diet\n"
        "- nutritionalBalance: string, an assessment of the macronutrient split\n"
        "- healthinessTrend: string, an analysis of the healthiness ratings\n"
        "- recommendations: array of strings, specific improvements"
    )


def sanitize_analysis(parsed: object) -> HistoryAnalysis:
    """Fill in defaults for missing or malformed report fields."""
    data = parsed if isinstance(parsed, dict) else {}
    recommendations = data.get("recommendations")
    if isinstance(recommendations, list):
        cleaned = [str(item).strip() for item in recommendations if str(item).strip()]
    else:
        cleaned = []
    return HistoryAnalysis(
        summary=_text(data.get("summary"), "No summary provided."),
        nutritional_balance=_text(
            data.get("nutritionalBalance"), "No nutritional balance data provided."
        ),
        healthiness_trend=_text(
            data.get("healthinessTrend"), "No healthiness trend data provided."
        ),
        recommendations=cleaned or ["No specific recommendations available."],
    )


def _text(value: object, default: str) -> str:
    if value is None:
        return default
    return str(value).strip() or default
