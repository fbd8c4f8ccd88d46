"""Models for meal history analysis."""

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


@dataclass(frozen=True)
class HistoryStats:
    """Aggregates over a user's recent consumed meals."""

    meal_count: int
    total_calories: float
    average_calories: float
    protein: float
    carbs: float
    fats: float
    average_healthiness: float


class HistoryAnalysis(BaseModel):
    """Narrative report on a user's recent diet."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    summary: str
    nutritional_balance: str
    healthiness_trend: str
    recommendations: list[str]
