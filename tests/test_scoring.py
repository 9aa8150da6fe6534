"""Tests for the health score."""

from dataclasses import replace

import pytest

from product_insight.domain.scoring import ScoreBand, ScoreBreakdownItem
from product_insight.services.normalizer import normalize_product
from product_insight.services.scoring import compute_health_score, get_score_band


def score_of(raw: dict[str, object]) -> int:
    return compute_health_score(normalize_product(raw)).score


def test_empty_product_scores_baseline() -> None:
    result = compute_health_score(normalize_product({}))

    assert result.score == 70
    assert result.breakdown == []


@pytest.mark.parametrize(
    ("grade", "expected"),
    [("a", 90), ("b", 82), ("c", 75), ("d", 65), ("e", 55)],
)
def test_grade_deltas(grade: str, expected: int) -> None:
    assert score_of({"nutriscore_grade": grade}) == expected


def test_grade_from_nutrition_grades_field() -> None:
    result = compute_health_score(normalize_product({"nutrition_grades": "b"}))

    assert result.score == 82
    assert result.breakdown == [ScoreBreakdownItem("Nutri-Score", 12, "Grade B")]


def test_invalid_grade_is_ignored() -> None:
    result = compute_health_score(normalize_product({"nutriscore_grade": "x"}))

    assert result.score == 70
    assert result.breakdown == []


@pytest.mark.parametrize(
    ("count", "expected"),
    [(1, 67), (3, 61), (8, 46), (9, 45), (10, 45), (100, 45)],
)
def test_additive_penalty_is_capped(count: int, expected: int) -> None:
    assert score_of({"additives_n": count}) == expected


def test_additive_breakdown_reason() -> None:
    result = compute_health_score(normalize_product({"additives_n": 10}))

    assert result.breakdown == [ScoreBreakdownItem("Additives", -25, "10 additive(s)")]


@pytest.mark.parametrize(
    ("sugars", "expected"),
    [(0, 70), (8, 70), (8.01, 64), (10, 64), (15, 64), (15.01, 58), (20, 58)],
)
def test_sugar_thresholds_are_exclusive(sugars: float, expected: int) -> None:
    assert score_of({"nutriments": {"sugars_100g": sugars}}) == expected


@pytest.mark.parametrize(
    ("sat_fat", "expected"),
    [(2, 70), (2.5, 65), (5, 65), (6, 60)],
)
def test_saturated_fat_thresholds(sat_fat: float, expected: int) -> None:
    assert score_of({"nutriments": {"saturated-fat_100g": sat_fat}}) == expected


@pytest.mark.parametrize(
    ("salt", "expected"),
    [(0.75, 70), (0.8, 65), (1.5, 65), (2, 60)],
)
def test_salt_thresholds(salt: float, expected: int) -> None:
    assert score_of({"nutriments": {"salt_100g": salt}}) == expected


@pytest.mark.parametrize(
    ("fiber", "expected"),
    [(0, 70), (2.99, 70), (3, 73), (4, 73), (5.99, 73), (6, 76), (7, 76)],
)
def test_fiber_thresholds_are_inclusive(fiber: float, expected: int) -> None:
    assert score_of({"nutriments": {"fiber_100g": fiber}}) == expected


def test_zero_nutrients_do_not_penalize() -> None:
    result = compute_health_score(
        normalize_product(
            {
                "nutriments": {
                    "sugars_100g": 0,
                    "saturated-fat_100g": 0,
                    "salt_100g": 0,
                }
            }
        )
    )

    assert result.score == 70
    assert result.breakdown == []


def test_reason_strings_render_values() -> None:
    result = compute_health_score(
        normalize_product(
            {
                "nutriments": {
                    "sugars_100g": 20,
                    "saturated-fat_100g": 2.5,
                    "salt_100g": "1.6",
                    "fiber_100g": 3,
                }
            }
        )
    )

    assert [item.reason for item in result.breakdown] == [
        "High sugar (20g/100g)",
        "Moderate (2.5g/100g)",
        "High (1.6g/100g)",
        "Moderate fiber (3g/100g)",
    ]


def test_worst_case_is_clamped_to_zero() -> None:
    result = compute_health_score(
        normalize_product(
            {
                "nutriscore_grade": "e",
                "additives_n": 20,
                "nutriments": {
                    "sugars_100g": 25,
                    "saturated-fat_100g": 10,
                    "salt_100g": 3,
                },
            }
        )
    )

    assert 0 <= result.score <= 100
    assert result.score == 0
    assert sum(item.delta for item in result.breakdown) == -72


def test_best_case_stays_within_range() -> None:
    result = compute_health_score(
        normalize_product({"nutriscore_grade": "a", "nutriments": {"fiber_100g": 10}})
    )

    assert result.score == 96
    assert 0 <= result.score <= 100


def test_grade_a_with_fiber_breakdown() -> None:
    result = compute_health_score(
        normalize_product({"nutriscore_grade": "a", "nutriments": {"fiber_100g": 6}})
    )

    assert result.score == 96
    assert result.breakdown == [
        ScoreBreakdownItem("Nutri-Score", 20, "Grade A"),
        ScoreBreakdownItem("Fiber", 6, "High fiber (6g/100g)"),
    ]


def test_breakdown_follows_fixed_factor_order() -> None:
    result = compute_health_score(
        normalize_product(
            {
                "nutriments": {
                    "fiber_100g": 4,
                    "salt_100g": 1,
                    "saturated-fat_100g": 3,
                    "sugars_100g": 9,
                },
                "additives_n": 2,
                "nutriscore_grade": "c",
            }
        )
    )

    assert [item.label for item in result.breakdown] == [
        "Nutri-Score",
        "Additives",
        "Sugar",
        "Saturated fat",
        "Salt",
        "Fiber",
    ]
    assert result.score == 70 + 5 - 6 - 6 - 5 - 5 + 3


def test_scoring_is_deterministic() -> None:
    product = normalize_product({"nutriscore_grade": "d", "additives_n": 4})

    assert compute_health_score(product) == compute_health_score(product)


@pytest.mark.parametrize(
    ("score", "band"),
    [
        (100, ScoreBand.EXCELLENT),
        (80, ScoreBand.EXCELLENT),
        (79, ScoreBand.GOOD),
        (60, ScoreBand.GOOD),
        (59, ScoreBand.OKAY),
        (40, ScoreBand.OKAY),
        (39, ScoreBand.POOR),
        (0, ScoreBand.POOR),
    ],
)
def test_score_bands(score: int, band: ScoreBand) -> None:
    assert get_score_band(score) == band


def test_unknown_grade_on_prebuilt_product_adds_no_entry() -> None:
    product = replace(normalize_product({}), nutriscore_grade="F")

    result = compute_health_score(product)

    assert result.score == 70
    assert result.breakdown == []


def test_digit_separator_strings_do_not_count_as_nutrients() -> None:
    result = compute_health_score(
        normalize_product({"nutriments": {"sugars_100g": "1_6"}, "additives_n": "1_0"})
    )

    assert result.score == 70
    assert result.breakdown == []


def test_extreme_amounts_render_in_exponent_form() -> None:
    result = compute_health_score(
        normalize_product({"nutriments": {"sugars_100g": 1e21}})
    )

    assert result.breakdown == [
        ScoreBreakdownItem("Sugar", -12, "High sugar (1e+21g/100g)")
    ]
