"""Dashboard service combining the daily and weekly aggregates."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID
from zoneinfo import ZoneInfo

from calorie_insights.domain.meals import NutritionRecord
from calorie_insights.domain.stats import (
    DailySummary,
    DashboardSnapshot,
    MacroTotals,
    MealSuggestion,
    NutritionGoals,
    WeeklySeries,
    WeekWindow,
)
from calorie_insights.services.guard import GuardState, RequestGuard
from calorie_insights.services.meals import MealRepository
from calorie_insights.services.stats import (
    daily_summary,
    macro_totals,
    weekly_calorie_trend,
    weekly_healthiness_trend,
)
from calorie_insights.services.suggestions import DEFAULT_SUGGESTIONS, select_suggestion
from calorie_insights.services.weeks import day_bounds, week_window


@dataclass
class DashboardService:
    """Service for computing a user's dashboard in their timezone."""

    repository: MealRepository
    goals: NutritionGoals
    timezone_name: str = "UTC"
    suggestions: Sequence[MealSuggestion] = DEFAULT_SUGGESTIONS
    _guards: dict[UUID, RequestGuard] = field(default_factory=dict, repr=False)

    def load(self, user_id: UUID, now: datetime | None = None) -> DashboardSnapshot:
        """Compute every dashboard aggregate from a single fetch.

        Raises DashboardBusy if a load for the same user is still running.
        Guards are dropped once settled, so only users with a load in flight
        hold an entry.
        """
        guard = self._guards.setdefault(user_id, RequestGuard())
        try:
            with guard.hold():
                reference = self._reference(now)
                window = week_window(reference)
                records = self._fetch_window(user_id, window)
                summary = daily_summary(records, reference)
                return DashboardSnapshot(
                    summary=summary,
                    goals=self.goals,
                    calorie_trend=weekly_calorie_trend(records, window),
                    healthiness_trend=weekly_healthiness_trend(records, window),
                    macros=macro_totals(records),
                    suggestion=self._suggest(summary),
                    window=window,
                )
        finally:
            settled = guard.state is GuardState.SETTLED
            if settled and self._guards.get(user_id) is guard:
                del self._guards[user_id]

    def get_summary(self, user_id: UUID, now: datetime | None = None) -> DailySummary:
        """Return today's consumed totals."""
        reference = self._reference(now)
        start, end = day_bounds(reference)
        records = self.repository.list_meals(
            user_id, start.astimezone(UTC), end.astimezone(UTC)
        )
        return daily_summary(records, reference)

    def get_calorie_trend(
        self, user_id: UUID, now: datetime | None = None
    ) -> WeeklySeries:
        """Return calories per day of the current week."""
        window = week_window(self._reference(now))
        return weekly_calorie_trend(self._fetch_window(user_id, window), window)

    def get_healthiness_trend(
        self, user_id: UUID, now: datetime | None = None
    ) -> WeeklySeries:
        """Return the average healthiness rating per day of the current week."""
        window = week_window(self._reference(now))
        return weekly_healthiness_trend(self._fetch_window(user_id, window), window)

    def get_macros(self, user_id: UUID, now: datetime | None = None) -> MacroTotals:
        """Return macronutrient totals for the current week."""
        window = week_window(self._reference(now))
        return macro_totals(self._fetch_window(user_id, window))

    def get_suggestion(
        self, user_id: UUID, now: datetime | None = None
    ) -> MealSuggestion:
        """Suggest a meal that fits what is left of today's calorie goal."""
        return self._suggest(self.get_summary(user_id, now))

    def _suggest(self, summary: DailySummary) -> MealSuggestion:
        remaining = self.goals.calories - summary.calories
        return select_suggestion(self.suggestions, remaining)

    def _fetch_window(
        self, user_id: UUID, window: WeekWindow
    ) -> list[NutritionRecord]:
        return self.repository.list_meals(
            user_id,
            window.start_of_week.astimezone(UTC),
            window.end_of_week.astimezone(UTC),
        )

    def _reference(self, now: datetime | None) -> datetime:
        tz = ZoneInfo(self.timezone_name)
        if now is None:
            return datetime.now(tz=tz)
        return now.astimezone(tz)
