"""Domain models for daily and weekly aggregates."""

from dataclasses import dataclass, field
from datetime import datetime

WEEK_LABELS = ("Sat", "Sun", "Mon", "Tue", "Wed", "Thu", "Fri")


def align_to(moment: datetime, reference: datetime) -> datetime:
    """Express a moment in the reference's timezone.

    Naive values are read as wall-clock time, so a naive moment takes the
    reference's zone and an aware moment loses its zone against a naive
    reference.
    """
    if reference.tzinfo is None:
        return moment.replace(tzinfo=None)
    if moment.tzinfo is None:
        return moment.replace(tzinfo=reference.tzinfo)
    return moment.astimezone(reference.tzinfo)


@dataclass(frozen=True)
class WeekWindow:
    """Saturday 00:00 through Friday 23:59:59.999999, inclusive."""

    start_of_week: datetime
    end_of_week: datetime

    def contains(self, moment: datetime) -> bool:
        """Return True when the moment falls inside the window."""
        local = align_to(moment, self.start_of_week)
        return self.start_of_week <= local <= self.end_of_week


@dataclass(frozen=True)
class DailySummary:
    """Consumed totals for a single day."""

    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fats: float = 0.0


@dataclass(frozen=True)
class MacroTotals:
    """Macronutrient totals in grams."""

    protein: float = 0.0
    carbs: float = 0.0
    fats: float = 0.0


@dataclass(frozen=True)
class WeeklySeries:
    """Seven values aligned to the week window slots."""

    values: list[float]
    labels: list[str] = field(default_factory=lambda: list(WEEK_LABELS))


@dataclass(frozen=True)
class NutritionGoals:
    """Daily nutrition targets."""

    calories: float
    protein: float
    carbs: float
    fats: float


@dataclass(frozen=True)
class MealSuggestion:
    """Suggested meal with its calories."""

    name: str
    calories: float


@dataclass(frozen=True)
class DashboardSnapshot:
    """All dashboard aggregates computed from one batch of records."""

    summary: DailySummary
    goals: NutritionGoals
    calorie_trend: WeeklySeries
    healthiness_trend: WeeklySeries
    macros: MacroTotals
    suggestion: MealSuggestion
    window: WeekWindow
