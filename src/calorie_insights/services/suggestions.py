"""Meal suggestions sized to the remaining calorie budget."""

from collections.abc import Sequence

from calorie_insights.domain.stats import MealSuggestion

DEFAULT_SUGGESTIONS: tuple[MealSuggestion, ...] = (
    MealSuggestion(name="Grilled Chicken Salad", calories=300),
    MealSuggestion(name="Turkey and Hummus Wrap", calories=250),
    MealSuggestion(name="Greek Yogurt with Berries", calories=150),
    MealSuggestion(name="Apple with Almond Butter", calories=120),
    MealSuggestion(name="Vegetable Soup", calories=90),
)


def select_suggestion(
    candidates: Sequence[MealSuggestion], remaining_calories: float
) -> MealSuggestion:
    """Return the first candidate that fits the budget, else the first one."""
    if not candidates:
        raise ValueError("At least one suggestion candidate is required")
    for candidate in candidates:
        if candidate.calories <= remaining_calories:
            return candidate
    return candidates[0]
