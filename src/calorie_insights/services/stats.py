"""Aggregations over already-fetched nutrition records."""

from collections.abc import Iterable
from datetime import datetime

from calorie_insights.domain.meals import NutritionRecord
from calorie_insights.domain.stats import (
    DailySummary,
    MacroTotals,
    WeeklySeries,
    WeekWindow,
    align_to,
)
from calorie_insights.services.weeks import DAYS_IN_WEEK, day_bounds, slot_index


def daily_summary(records: Iterable[NutritionRecord], today: datetime) -> DailySummary:
    """Sum consumed records logged between today's midnight and tomorrow's."""
    start, end = day_bounds(today)
    calories = protein = carbs = fats = 0.0
    for record in records:
        if not record.consumed:
            continue
        if not start <= align_to(record.created_at, start) < end:
            continue
        calories += record.calories or 0.0
        protein += record.protein or 0.0
        carbs += record.carbs or 0.0
        fats += record.fats or 0.0
    return DailySummary(calories=calories, protein=protein, carbs=carbs, fats=fats)


def weekly_calorie_trend(
    records: Iterable[NutritionRecord], window: WeekWindow
) -> WeeklySeries:
    """Sum consumed calories per day of the week window."""
    totals = [0.0] * DAYS_IN_WEEK
    for record, slot in _bucketed(records, window):
        totals[slot] += record.calories or 0.0
    return WeeklySeries(values=totals)


def weekly_healthiness_trend(
    records: Iterable[NutritionRecord], window: WeekWindow
) -> WeeklySeries:
    """Average healthiness rating per day; days without rated meals are 0."""
    sums = [0.0] * DAYS_IN_WEEK
    counts = [0] * DAYS_IN_WEEK
    for record, slot in _bucketed(records, window):
        if record.healthiness_rating is None:
            continue
        sums[slot] += record.healthiness_rating
        counts[slot] += 1
    averages = [
        total / count if count else 0.0
        for total, count in zip(sums, counts, strict=True)
    ]
    return WeeklySeries(values=averages)


def macro_totals(records: Iterable[NutritionRecord]) -> MacroTotals:
    """Sum macronutrients across every consumed record."""
    protein = carbs = fats = 0.0
    for record in records:
        if not record.consumed:
            continue
        protein += record.protein or 0.0
        carbs += record.carbs or 0.0
        fats += record.fats or 0.0
    return MacroTotals(protein=protein, carbs=carbs, fats=fats)


def _bucketed(
    records: Iterable[NutritionRecord], window: WeekWindow
) -> Iterable[tuple[NutritionRecord, int]]:
    # Records outside the window are dropped, never clamped into a slot.
    for record in records:
        if not record.consumed or not window.contains(record.created_at):
            continue
        slot = slot_index(record.created_at, window)
        if slot is not None:
            yield record, slot
