"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from calorie_insights.adapters.openai_model_client import OpenAIModelClient
from calorie_insights.adapters.supabase_meal_repository import SupabaseMealRepository
from calorie_insights.config import Settings
from calorie_insights.services.analysis import AnalysisService
from calorie_insights.services.dashboard import DashboardService
from calorie_insights.services.estimation import EstimationService
from calorie_insights.services.meals import MealService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    estimation_service: EstimationService
    meal_service: MealService
    dashboard_service: DashboardService
    analysis_service: AnalysisService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    meal_repository = SupabaseMealRepository(supabase_client)
    model_client = OpenAIModelClient.create(
        resolved_settings.openai_api_key,
        timeout=resolved_settings.openai_timeout_seconds,
    )
    estimation_service = EstimationService(
        client=model_client,
        model=resolved_settings.openai_model,
        retry_attempts=resolved_settings.estimate_retry_attempts,
        retry_delay_seconds=resolved_settings.estimate_retry_delay_seconds,
    )
    dashboard_service = DashboardService(
        repository=meal_repository,
        goals=resolved_settings.nutrition_goals(),
        timezone_name=resolved_settings.timezone,
    )
    analysis_service = AnalysisService(
        repository=meal_repository,
        client=model_client,
        model=resolved_settings.openai_model,
    )

    async def close_resources() -> None:
        await model_client.close()

    return AppContainer(
        settings=resolved_settings,
        estimation_service=estimation_service,
        meal_service=MealService(meal_repository),
        dashboard_service=dashboard_service,
        analysis_service=analysis_service,
        close_resources=close_resources,
    )
