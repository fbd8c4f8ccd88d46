"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from calorie_insights.domain.stats import NutritionGoals

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    openai_api_key: str | None = None
    openai_model: str = "gpt-4o-mini"
    openai_timeout_seconds: float = 30.0
    estimate_retry_attempts: int = 2
    estimate_retry_delay_seconds: float = 1.0
    timezone: str = "UTC"
    goal_calories: float = 2000
    goal_protein: float = 50
    goal_carbs: float = 200
    goal_fats: float = 70
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    def nutrition_goals(self) -> NutritionGoals:
        """Return the default daily goals."""
        return NutritionGoals(
            calories=self.goal_calories,
            protein=self.goal_protein,
            carbs=self.goal_carbs,
            fats=self.goal_fats,
        )
