"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest

from calorie_insights.config import Settings
from calorie_insights.containers import AppContainer
from calorie_insights.domain.meals import NewMeal, NutritionRecord
from calorie_insights.services.analysis import AnalysisService
from calorie_insights.services.dashboard import DashboardService
from calorie_insights.services.estimation import EstimationService, ModelClient
from calorie_insights.services.meals import MealRepository, MealService

APPLE_RESPONSE = (
    "Here is the estimate:\n"
    "```json\n"
    '{"foodName": "Apple", "calories": 95, '
    '"macronutrients": {"protein": 0.3, "carbs": 25.2, "fats": 0.2}, '
    '"healthinessRating": 8, "healthierAlternative": null}\n'
    "```"
)


def make_record(  # noqa: PLR0913
    created_at: datetime,
    calories: float = 100,
    *,
    user_id: UUID | None = None,
    consumed: bool = True,
    protein: float | None = 10,
    carbs: float | None = 20,
    fats: float | None = 5,
    healthiness_rating: int | None = 5,
    food_name: str = "Oatmeal",
) -> NutritionRecord:
    """Build a nutrition record with sensible defaults."""
    return NutritionRecord(
        id=uuid4(),
        user_id=user_id or uuid4(),
        food_name=food_name,
        calories=calories,
        created_at=created_at,
        consumed=consumed,
        protein=protein,
        carbs=carbs,
        fats=fats,
        healthiness_rating=healthiness_rating,
    )


@dataclass
class InMemoryMealRepository(MealRepository):
    """In-memory meal repository for tests."""

    records: list[NutritionRecord] = field(default_factory=list)
    list_calls: list[tuple[UUID, datetime, datetime]] = field(default_factory=list)

    def create_meal(
        self, user_id: UUID, meal: NewMeal, created_at: datetime
    ) -> NutritionRecord:
        record = NutritionRecord(
            id=uuid4(),
            user_id=user_id,
            food_name=meal.food_name,
            calories=meal.calories,
            created_at=created_at,
            consumed=meal.consumed,
            protein=meal.protein,
            carbs=meal.carbs,
            fats=meal.fats,
            healthiness_rating=meal.healthiness_rating,
            healthier_alternative=meal.healthier_alternative,
            weight=meal.weight,
            image_url=meal.image_url,
        )
        self.records.append(record)
        return record

    def list_meals(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[NutritionRecord]:
        self.list_calls.append((user_id, start, end))
        return [
            record
            for record in self.records
            if record.user_id == user_id and start <= record.created_at <= end
        ]

    def list_recent_meals(self, user_id: UUID, limit: int) -> list[NutritionRecord]:
        owned = [record for record in self.records if record.user_id == user_id]
        return sorted(owned, key=lambda record: record.created_at, reverse=True)[
            :limit
        ]

    def delete_meal(self, user_id: UUID, meal_id: UUID) -> bool:
        for record in self.records:
            if record.id == meal_id and record.user_id == user_id:
                self.records.remove(record)
                return True
        return False

    def add(self, user_id: UUID, *records: NutritionRecord) -> None:
        self.records.extend(replace(record, user_id=user_id) for record in records)


@dataclass
class FakeModelClient(ModelClient):
    """Fake model client returning queued answers or raising queued errors."""

    answers: list[str | Exception] = field(default_factory=lambda: [APPLE_RESPONSE])
    calls: list[dict[str, object]] = field(default_factory=list)

    async def complete(
        self, *, model: str, prompt: str, image_data_url: str | None
    ) -> str:
        self.calls.append(
            {"model": model, "prompt": prompt, "image_data_url": image_data_url}
        )
        answer = self.answers.pop(0) if len(self.answers) > 1 else self.answers[0]
        if isinstance(answer, Exception):
            raise answer
        return answer


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        openai_api_key="openai-key",
    )


@pytest.fixture
def meal_repository() -> InMemoryMealRepository:
    return InMemoryMealRepository()


@pytest.fixture
def model_client() -> FakeModelClient:
    return FakeModelClient()


@pytest.fixture
def container(
    settings: Settings,
    meal_repository: InMemoryMealRepository,
    model_client: FakeModelClient,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        estimation_service=EstimationService(
            client=model_client,
            model=settings.openai_model,
            retry_attempts=1,
            retry_delay_seconds=0,
        ),
        meal_service=MealService(meal_repository),
        dashboard_service=DashboardService(
            repository=meal_repository,
            goals=settings.nutrition_goals(),
            timezone_name="UTC",
        ),
        analysis_service=AnalysisService(
            repository=meal_repository,
            client=model_client,
            model=settings.openai_model,
        ),
        close_resources=close_resources,
    )


@pytest.fixture
def now() -> datetime:
    # A Wednesday; its week runs Sat 2024-06-01 .. Fri 2024-06-07.
    return datetime(2024, 6, 5, 12, 30, tzinfo=UTC)
