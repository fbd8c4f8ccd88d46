"""Nutrition estimation through an external model."""

import asyncio
import base64
import logging
from dataclasses import dataclass
from typing import Protocol

from calorie_insights.domain.estimates import (
    NormalizationResult,
    NormalizedEstimate,
    RejectedEstimate,
)
from calorie_insights.errors import (
    EstimationFailed,
    InvalidEstimateRequest,
    ResponseParseError,
    SchemaError,
    UpstreamUnavailable,
)
from calorie_insights.services.repair import parse_model_json
from calorie_insights.services.validation import (
    parse_float,
    validate_with_corrections,
)

_logger = logging.getLogger(__name__)


class ModelClient(Protocol):
    """Interface for the external generative model."""

    async def complete(
        self, *, model: str, prompt: str, image_data_url: str | None
    ) -> str:
        """Return the raw text produced by the model."""


def normalize(text: str) -> NormalizationResult:
    """Turn raw model text into an accepted or rejected estimate."""
    try:
        parsed = parse_model_json(text)
    except ResponseParseError as exc:
        _logger.warning("Unparseable model output: %s", exc)
        return RejectedEstimate(reason="parse", error=exc)
    try:
        estimate, corrections = validate_with_corrections(parsed)
    except SchemaError as exc:
        _logger.warning("Model output rejected (field=%s): %s", exc.field, exc)
        return RejectedEstimate(reason="schema", error=exc)
    return NormalizedEstimate(estimate=estimate, corrections=corrections)


@dataclass
class EstimationService:
    """Builds estimation prompts, calls the model and normalizes its answer."""

    client: ModelClient
    model: str
    retry_attempts: int = 2
    retry_delay_seconds: float = 1.0

    async def estimate(
        self,
        food_name: str,
        weight: object = None,
        image_bytes: bytes | None = None,
    ) -> NormalizedEstimate:
        """Estimate nutrition for a named food and optional photo."""
        name = (food_name or "").strip()
        if not name:
            raise InvalidEstimateRequest("Food name is required")
        grams = _parse_weight(weight)
        prompt = build_prompt(name, grams)
        image_data_url = _to_data_url(image_bytes) if image_bytes else None

        text = await self._complete_with_retry(prompt, image_data_url)
        result = normalize(text)
        if isinstance(result, RejectedEstimate):
            raise EstimationFailed(
                f"Failed to estimate calories: {result.error}", reason=result.reason
            ) from result.error
        return result

    async def _complete_with_retry(
        self, prompt: str, image_data_url: str | None
    ) -> str:
        """Call the model, retrying upstream failures with a fixed delay."""
        attempt = 0
        while True:
            try:
                return await self.client.complete(
                    model=self.model, prompt=prompt, image_data_url=image_data_url
                )
            except UpstreamUnavailable as exc:
                attempt += 1
                _logger.warning(
                    "Estimation call failed (attempt %s/%s): %s",
                    attempt,
                    self.retry_attempts + 1,
                    exc,
                )
                if attempt > self.retry_attempts:
                    raise
                await asyncio.sleep(self.retry_delay_seconds)


def build_prompt(food_name: str, weight: float | None) -> str:
    """Return the estimation prompt for a food and optional weight."""
    portion = f"{weight:g} grams" if weight is not None else "one standard serving"
    return (
        f'Estimate the nutrition of "{food_name}", portion: {portion}.\n'
        "If an image is attached, use it to confirm or refine the food.\n"
        "Answer with a single JSON object and nothing else, using keys:\n"
        "- foodName: string\n"
        "- calories: number (kcal)\n"
        "- macronutrients: {protein: number, carbs: number, fats: number} "
        "(grams)\n"
        "- healthinessRating: integer from 1 (junk food) to 10 (vegetables)\n"
        "- healthierAlternative: string or null\n"
        "Scale calories and macronutrients to the portion. Use plain numbers, "
        "never strings. When unsure, use healthinessRating 5.\n"
        'Example for "Apple", 150 grams: {"foodName": "Apple", "calories": 95, '
        '"macronutrients": {"protein": 0.3, "carbs": 25.2, "fats": 0.2}, '
        '"healthinessRating": 8, "healthierAlternative": null}'
    )


def _parse_weight(weight: object) -> float | None:
    if weight is None or weight == "":
        return None
    grams = parse_float(weight)
    if grams is None or grams <= 0:
        raise InvalidEstimateRequest("Weight must be a positive number")
    return grams


def _to_data_url(image_bytes: bytes) -> str:
    """Convert bytes to a base64 data URL for image input."""
    mime_type = _detect_mime_type(image_bytes)
    encoded = base64.b64encode(image_bytes).decode("utf-8")
    return f"data:{mime_type};base64,{encoded}"


def _detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"
