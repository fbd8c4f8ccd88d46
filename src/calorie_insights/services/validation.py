"""Schema enforcement and sanitization of parsed model estimates."""

import logging
import math
import re

from calorie_insights.domain.estimates import (
    DEFAULT_HEALTHINESS_RATING,
    MAX_HEALTHINESS_RATING,
    MIN_HEALTHINESS_RATING,
    REQUIRED_FIELDS,
    UNKNOWN_FOOD,
    Correction,
    Macronutrients,
    NutritionEstimate,
)
from calorie_insights.errors import SchemaError

_FLOAT_PREFIX = re.compile(r"[ \t\n\r\f\v]*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_INT_PREFIX = re.compile(r"[ \t\n\r\f\v]*[+-]?\d+")
_MACRO_FIELDS = ("protein", "carbs", "fats")

_logger = logging.getLogger(__name__)


def validate(parsed: object) -> NutritionEstimate:
    """Return a canonical estimate or raise SchemaError."""
    estimate, _ = validate_with_corrections(parsed)
    return estimate


def validate_with_corrections(
    parsed: object,
) -> tuple[NutritionEstimate, list[Correction]]:
    """Validate parsed output and report every value that was replaced.

    Missing required keys are fatal. Garbled or out-of-range values are
    replaced with safe defaults and returned as corrections.
    """
    if not isinstance(parsed, dict):
        raise SchemaError(
            f"Expected a JSON object, got {type(parsed).__name__}",
            field=None,
            received=parsed,
        )
    for name in REQUIRED_FIELDS:
        if name not in parsed:
            raise SchemaError(
                f"Missing required field: {name}",
                field=name,
                received=sorted(str(key) for key in parsed),
            )

    corrections: list[Correction] = []
    food_name = _food_name(parsed["foodName"], corrections)
    calories = _non_negative("calories", parsed["calories"], corrections)
    macronutrients = _macronutrients(parsed["macronutrients"], corrections)
    rating = _healthiness_rating(parsed["healthinessRating"], corrections)
    alternative = _optional_text(parsed.get("healthierAlternative"))

    for correction in corrections:
        _logger.warning(
            "Corrected %s for %s: received=%r replacement=%r",
            correction.field,
            food_name,
            correction.received,
            correction.replacement,
        )

    estimate = NutritionEstimate(
        food_name=food_name,
        calories=calories,
        macronutrients=macronutrients,
        healthiness_rating=rating,
        healthier_alternative=alternative,
    )
    return estimate, corrections


def parse_float(value: object) -> float | None:
    """Lenient float coercion; None stands for "not a number"."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        match = _FLOAT_PREFIX.match(value)
        if match is None:
            return None
        try:
            number = float(match.group(0))
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number):
        return None
    return number


def parse_int(value: object) -> int | None:
    """Lenient integer coercion that truncates fractional input."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        match = _INT_PREFIX.match(value)
        if match is None:
            return None
        try:
            return int(match.group(0))
        except ValueError:
            return None
    return None


def _food_name(value: object, corrections: list[Correction]) -> str:
    text = _as_text(value)
    if not text:
        corrections.append(Correction("foodName", value, UNKNOWN_FOOD))
        return UNKNOWN_FOOD
    return text


def _non_negative(name: str, value: object, corrections: list[Correction]) -> float:
    number = parse_float(value)
    if number is None or number < 0:
        corrections.append(Correction(name, value, 0.0))
        return 0.0
    return number


def _macronutrients(value: object, corrections: list[Correction]) -> Macronutrients:
    if not isinstance(value, dict):
        replacement = dict.fromkeys(_MACRO_FIELDS, 0.0)
        corrections.append(Correction("macronutrients", value, replacement))
        return Macronutrients()
    amounts = {
        name: _non_negative(f"macronutrients.{name}", value.get(name), corrections)
        for name in _MACRO_FIELDS
    }
    return Macronutrients(**amounts)


def _healthiness_rating(value: object, corrections: list[Correction]) -> int:
    rating = parse_int(value)
    if rating is None or not MIN_HEALTHINESS_RATING <= rating <= MAX_HEALTHINESS_RATING:
        corrections.append(
            Correction("healthinessRating", value, DEFAULT_HEALTHINESS_RATING)
        )
        return DEFAULT_HEALTHINESS_RATING
    return rating


def _optional_text(value: object) -> str | None:
    return _as_text(value) or None


def _as_text(value: object) -> str:
    if value is None:
        return ""
    try:
        text = str(value)
    except ValueError:
        # int too large to render as decimal text
        return ""
    # Lone surrogates are legal in JSON strings but not in UTF-8.
    return text.encode("utf-8", "replace").decode("utf-8").strip()
