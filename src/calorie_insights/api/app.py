"""FastAPI application factory."""

import base64
import binascii
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict
from uuid import UUID

from fastapi import FastAPI, Header, HTTPException, Request, status
from fastapi.responses import JSONResponse

from calorie_insights.api.models import EstimateRequest, MealEntry, MealResponse
from calorie_insights.app_logging import configure_logging
from calorie_insights.containers import AppContainer
from calorie_insights.domain.estimates import NormalizedEstimate
from calorie_insights.domain.stats import DashboardSnapshot, WeeklySeries
from calorie_insights.errors import (
    DashboardBusy,
    EstimationFailed,
    InvalidEstimateRequest,
    InvalidMealEntry,
    ResponseParseError,
    UpstreamUnavailable,
)

_ERROR_STATUS: dict[type[Exception], int] = {
    InvalidEstimateRequest: status.HTTP_400_BAD_REQUEST,
    InvalidMealEntry: status.HTTP_400_BAD_REQUEST,
    DashboardBusy: status.HTTP_409_CONFLICT,
    EstimationFailed: 422,
    ResponseParseError: status.HTTP_502_BAD_GATEWAY,
    UpstreamUnavailable: status.HTTP_502_BAD_GATEWAY,
}


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    async def handle_domain_error(request: Request, exc: Exception) -> JSONResponse:
        status_code = _ERROR_STATUS[type(exc)]
        if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=status_code, content={"error": str(exc)})

    for error_type in _ERROR_STATUS:
        app.add_exception_handler(error_type, handle_domain_error)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/meals/estimate")
    async def estimate_meal(
        body: EstimateRequest, request: Request
    ) -> dict[str, object]:
        """Estimate nutrition for a food name, weight and optional photo."""
        state_container: AppContainer = request.app.state.container
        image_bytes = _decode_image(body.image_base64)
        result = await state_container.estimation_service.estimate(
            body.food_name, body.weight, image_bytes
        )
        return _estimate_payload(result)

    @app.post("/meals", status_code=status.HTTP_201_CREATED)
    def log_meal(
        entry: MealEntry, request: Request, x_user_id: UUID = Header()
    ) -> MealResponse:
        """Log a meal for the current user."""
        state_container: AppContainer = request.app.state.container
        record = state_container.meal_service.log_meal(x_user_id, entry.to_new_meal())
        logger.info("Logged meal %s for user %s", record.id, x_user_id)
        return MealResponse.from_record(record)

    @app.get("/meals")
    def list_meals(
        request: Request, x_user_id: UUID = Header(), limit: int = 50
    ) -> list[MealResponse]:
        """Return the user's meal history, newest first."""
        state_container: AppContainer = request.app.state.container
        records = state_container.meal_service.history(x_user_id, limit)
        return [MealResponse.from_record(record) for record in records]

    @app.delete("/meals/{meal_id}")
    def delete_meal(
        meal_id: UUID, request: Request, x_user_id: UUID = Header()
    ) -> dict[str, str]:
        """Delete one of the user's meals."""
        state_container: AppContainer = request.app.state.container
        if not state_container.meal_service.delete(x_user_id, meal_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return {"message": "Meal deleted successfully"}

    @app.get("/dashboard")
    def dashboard(request: Request, x_user_id: UUID = Header()) -> dict[str, object]:
        """Return every dashboard aggregate in one response."""
        state_container: AppContainer = request.app.state.container
        snapshot = state_container.dashboard_service.load(x_user_id)
        return _dashboard_payload(snapshot)

    @app.get("/dashboard/summary")
    def dashboard_summary(
        request: Request, x_user_id: UUID = Header()
    ) -> dict[str, float]:
        """Return today's consumed totals."""
        state_container: AppContainer = request.app.state.container
        return asdict(state_container.dashboard_service.get_summary(x_user_id))

    @app.get("/dashboard/goals")
    def dashboard_goals(request: Request) -> dict[str, float]:
        """Return the daily nutrition goals."""
        state_container: AppContainer = request.app.state.container
        return asdict(state_container.dashboard_service.goals)

    @app.get("/dashboard/trend")
    def dashboard_trend(
        request: Request, x_user_id: UUID = Header()
    ) -> dict[str, object]:
        """Return calories per day, Saturday to Friday."""
        state_container: AppContainer = request.app.state.container
        series = state_container.dashboard_service.get_calorie_trend(x_user_id)
        return _series_payload(series)

    @app.get("/dashboard/healthiness")
    def dashboard_healthiness(
        request: Request, x_user_id: UUID = Header()
    ) -> dict[str, object]:
        """Return the average healthiness rating per day."""
        state_container: AppContainer = request.app.state.container
        series = state_container.dashboard_service.get_healthiness_trend(x_user_id)
        return _series_payload(series)

    @app.get("/dashboard/macros")
    def dashboard_macros(
        request: Request, x_user_id: UUID = Header()
    ) -> dict[str, float]:
        """Return this week's macronutrient totals."""
        state_container: AppContainer = request.app.state.container
        return asdict(state_container.dashboard_service.get_macros(x_user_id))

    @app.get("/dashboard/suggestion")
    def dashboard_suggestion(
        request: Request, x_user_id: UUID = Header()
    ) -> dict[str, object]:
        """Return a meal suggestion for the remaining calorie budget."""
        state_container: AppContainer = request.app.state.container
        return asdict(state_container.dashboard_service.get_suggestion(x_user_id))

    @app.get("/analysis")
    async def analysis(
        request: Request, x_user_id: UUID = Header()
    ) -> dict[str, object]:
        """Return a model-written review of the last 30 days of meals."""
        state_container: AppContainer = request.app.state.container
        report = await state_container.analysis_service.analyze(x_user_id)
        return report.model_dump(by_alias=True)

    return app


def _decode_image(image_base64: str | None) -> bytes | None:
    if not image_base64:
        return None
    encoded = image_base64.split(",", 1)[1] if "," in image_base64 else image_base64
    try:
        return base64.b64decode(encoded, validate=True)
    except binascii.Error as exc:
        raise InvalidEstimateRequest("Image must be base64 encoded") from exc


def _estimate_payload(result: NormalizedEstimate) -> dict[str, object]:
    payload = result.estimate.model_dump(by_alias=True)
    payload["corrections"] = [correction.field for correction in result.corrections]
    return payload


def _series_payload(series: WeeklySeries) -> dict[str, object]:
    return {"labels": series.labels, "data": series.values}


def _dashboard_payload(snapshot: DashboardSnapshot) -> dict[str, object]:
    return {
        "summary": asdict(snapshot.summary),
        "goals": asdict(snapshot.goals),
        "trend": _series_payload(snapshot.calorie_trend),
        "healthiness": _series_payload(snapshot.healthiness_trend),
        "macros": asdict(snapshot.macros),
        "suggestion": asdict(snapshot.suggestion),
        "week": {
            "startOfWeek": snapshot.window.start_of_week.isoformat(),
            "endOfWeek": snapshot.window.end_of_week.isoformat(),
        },
    }
