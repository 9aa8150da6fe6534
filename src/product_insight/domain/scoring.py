"""Health score domain models."""

from dataclasses import dataclass
from enum import StrEnum


class ScoreBand(StrEnum):
    """Display band for a health score."""

    EXCELLENT = "Excellent"
    GOOD = "Good"
    OKAY = "Okay"
    POOR = "Poor"


@dataclass(frozen=True)
class ScoreBreakdownItem:
    """One scoring factor that contributed to the score."""

    label: str
    delta: int
    reason: str


@dataclass(frozen=True)
class HealthScoreResult:
    """Health score with its ordered breakdown."""

    score: int
    breakdown: list[ScoreBreakdownItem]
