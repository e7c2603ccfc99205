"""Quality levels: named bands on the 0-100 display scale."""

from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class QualityLevel:
    min_score: float  # inclusive lower bound on the 0-100 scale
    label: str
    description: str
    emoji: str


# Ordered by min_score; a band covers [min_score, next band's min_score)
QUALITY_LEVELS: List[QualityLevel] = [
    QualityLevel(0, "Fresh", "Clean, readable code that is a pleasure to maintain", "🌱"),
    QualityLevel(10, "Mostly fresh", "Small blemishes, nothing that gets in the way", "🌸"),
    QualityLevel(20, "Slightly stale", "Some rough edges worth tidying up", "😐"),
    QualityLevel(30, "Stale", "Noticeable smells that slow readers down", "😷"),
    QualityLevel(40, "Rotting", "Maintenance is getting painful", "💩"),
    QualityLevel(50, "Decaying", "Changes here are risky and expensive", "🤕"),
    QualityLevel(60, "Badly decayed", "Most changes will break something", "☣️"),
    QualityLevel(70, "Putrid", "Only the original author dares to touch it", "🧟"),
    QualityLevel(80, "Toxic", "Even the original author has given up", "☢️"),
    QualityLevel(90, "Fossilized", "Rewrite candidates all the way down", "🪦"),
    QualityLevel(100, "Legendary rot", "Every metric at its worst", "👑💩"),
]


def quality_level(score: float) -> QualityLevel:
    """Level for a badness score in [0, 1].

    Bands are defined on the 0-100 display scale, so the score is scaled
    before the lookup. Scores below the first band get the first band.
    """
    display = score * 100
    for level in reversed(QUALITY_LEVELS):
        if level.min_score <= display:
            return level
    return QUALITY_LEVELS[0]


def score_band(display_score: float) -> str:
    """'good', 'medium' or 'bad' for a score on the 0-100 scale."""
    if display_score < 30:
        return "good"
    if display_score < 70:
        return "medium"
    return "bad"
