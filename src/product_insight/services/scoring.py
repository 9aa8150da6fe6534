"""Health score computation for food products."""

import math

from product_insight.domain.products import NormalizedProduct
from product_insight.domain.scoring import (
    HealthScoreResult,
    ScoreBand,
    ScoreBreakdownItem,
)
from product_insight.services.coercion import format_amount

BASE_SCORE = 70
MAX_ADDITIVE_PENALTY = 25
ADDITIVE_PENALTY = 3

_GRADE_DELTAS = {"a": 20, "b": 12, "c": 5, "d": -5, "e": -15}


def get_score_band(score: float) -> ScoreBand:
    """Classify a score into a display band."""
    if score >= 80:  # noqa: PLR2004
        return ScoreBand.EXCELLENT
    if score >= 60:  # noqa: PLR2004
        return ScoreBand.GOOD
    if score >= 40:  # noqa: PLR2004
        return ScoreBand.OKAY
    return ScoreBand.POOR


def compute_health_score(product: NormalizedProduct) -> HealthScoreResult:
    """Compute a 0-100 health score and the factors behind it.

    Factors are evaluated in a fixed order (grade, additives, sugar,
    saturated fat, salt, fiber) and only those that fire are listed.
    Only meaningful for food products.
    """
    breakdown: list[ScoreBreakdownItem] = []
    score = BASE_SCORE

    grade = (product.nutriscore_grade or "").lower()
    delta = _GRADE_DELTAS.get(grade)
    if delta is not None:
        score += delta
        breakdown.append(
            ScoreBreakdownItem("Nutri-Score", delta, f"Grade {grade.upper()}")
        )

    if product.additives_n > 0:
        penalty = min(product.additives_n * ADDITIVE_PENALTY, MAX_ADDITIVE_PENALTY)
        score -= penalty
        breakdown.append(
            ScoreBreakdownItem(
                "Additives", -penalty, f"{product.additives_n} additive(s)"
            )
        )

    nutriments = product.nutriments
    for item in (
        _tiered_penalty(
            "Sugar",
            nutriments.sugars_100g,
            (15, 12, "High sugar"),
            (8, 6, "Moderate sugar"),
        ),
        _tiered_penalty(
            "Saturated fat",
            nutriments.saturated_fat_100g,
            (5, 10, "High"),
            (2, 5, "Moderate"),
        ),
        _tiered_penalty(
            "Salt", nutriments.salt_100g, (1.5, 10, "High"), (0.75, 5, "Moderate")
        ),
        _fiber_bonus(nutriments.fiber_100g),
    ):
        if item is not None:
            score += item.delta
            breakdown.append(item)

    clamped = max(0, min(100, score))
    return HealthScoreResult(score=math.floor(clamped + 0.5), breakdown=breakdown)


def _tiered_penalty(
    label: str,
    value: float | None,
    high: tuple[float, int, str],
    moderate: tuple[float, int, str],
) -> ScoreBreakdownItem | None:
    """Penalize values strictly above a tier's threshold."""
    if value is None:
        return None
    for threshold, penalty, prefix in (high, moderate):
        if value > threshold:
            return ScoreBreakdownItem(
                label, -penalty, f"{prefix} ({format_amount(value)}g/100g)"
            )
    return None


def _fiber_bonus(value: float | None) -> ScoreBreakdownItem | None:
    """Reward fiber at or above each tier's threshold."""
    if value is None:
        return None
    if value >= 6:  # noqa: PLR2004
        return ScoreBreakdownItem(
            "Fiber", 6, f"High fiber ({format_amount(value)}g/100g)"
        )
    if value >= 3:  # noqa: PLR2004
        return ScoreBreakdownItem(
            "Fiber", 3, f"Moderate fiber ({format_amount(value)}g/100g)"
        )
    return None
